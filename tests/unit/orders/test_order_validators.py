"""Unit tests for the order validation pipeline.

The validators are pure functions: items are built as plain namespaces and
products as unsaved model instances, so no query is issued.
"""

from __future__ import annotations

from datetime import date, timedelta
from decimal import Decimal
from types import SimpleNamespace
from uuid import uuid4

import pytest
from freezegun import freeze_time

from modules.core.exceptions import AvailabilityError, ValidationError
from modules.orders import validators
from modules.orders.exceptions import (
    InvalidOrderDate,
    InvalidOrderItems,
    InvalidOrderNumber,
    ItemSnapshotMismatch,
    MinimumOrderValueNotReached,
    OrderTotalMismatch,
    ProductNotInEnterprise,
)
from modules.products.exceptions import InsufficientStock, ProductNotFound
from modules.products.models import Product

pytestmark = pytest.mark.unit

ENTERPRISE_ID = uuid4()


def _product(name="Widget", price="10.00", stock=10, enterprise_id=ENTERPRISE_ID):
    return Product(
        id=uuid4(),
        enterprise_id=enterprise_id,
        name=name,
        price=Decimal(price),
        stock=stock,
    )


def _item(product=None, quantity=1, **overrides):
    product = product or _product()
    data = {
        "product_id": product.id,
        "product_name": product.name,
        "quantity": quantity,
        "unit_price": product.price,
        "subtotal": product.price * quantity,
    }
    data.update(overrides)
    return SimpleNamespace(**data)


# ---------------------------------------------------------------------------
# Shape
# ---------------------------------------------------------------------------


class TestValidateOrderNumber:
    @pytest.mark.parametrize("number", ["ORD-1", "abc123", "A", "X" * 50])
    def test_accepts_valid_numbers(self, number):
        validators.validate_order_number(number)

    @pytest.mark.parametrize("number", [None, "", "   "])
    def test_rejects_missing_number(self, number):
        with pytest.raises(InvalidOrderNumber, match="required"):
            validators.validate_order_number(number)

    def test_rejects_long_number(self):
        with pytest.raises(InvalidOrderNumber, match="50"):
            validators.validate_order_number("X" * 51)

    @pytest.mark.parametrize("number", ["ORD 1", "ORD_1", "ORD#1", "pedido/2", "ORD-1\n"])
    def test_rejects_forbidden_characters(self, number):
        with pytest.raises(InvalidOrderNumber, match="letters, digits and hyphens"):
            validators.validate_order_number(number)


class TestValidateOrderDate:
    def test_today_is_accepted(self):
        today = date(2024, 3, 10)
        validators.validate_order_date(today, today=today)

    def test_past_date_is_accepted(self):
        validators.validate_order_date(date(2020, 1, 1), today=date(2024, 3, 10))

    def test_future_date_is_rejected(self):
        today = date(2024, 3, 10)
        with pytest.raises(InvalidOrderDate, match="future"):
            validators.validate_order_date(today + timedelta(days=1), today=today)

    @freeze_time("2024-03-11 01:30:00")
    def test_today_follows_configured_time_zone(self, settings):
        # 01:30 UTC is still 10 March in America/Sao_Paulo
        settings.TIME_ZONE = "America/Sao_Paulo"

        validators.validate_order_date(date(2024, 3, 10))
        with pytest.raises(InvalidOrderDate):
            validators.validate_order_date(date(2024, 3, 11))


class TestValidateItems:
    def test_valid_items_pass(self):
        validators.validate_items([_item(quantity=5), _item(quantity=3)])

    def test_empty_list_rejected(self):
        with pytest.raises(InvalidOrderItems, match="at least one item"):
            validators.validate_items([])

    def test_duplicate_product_rejected(self):
        product = _product()
        with pytest.raises(InvalidOrderItems, match="same product"):
            validators.validate_items([_item(product, 1), _item(product, 2)])

    @pytest.mark.parametrize("quantity", [0, -1])
    def test_quantity_below_minimum_rejected(self, quantity):
        with pytest.raises(InvalidOrderItems, match="at least 1"):
            validators.validate_items([_item(quantity=quantity)])

    def test_quantity_above_item_cap_rejected(self):
        with pytest.raises(InvalidOrderItems, match="cannot exceed 100"):
            validators.validate_items([_item(quantity=101)])

    def test_aggregate_quantity_cap(self):
        items = [_item(quantity=30), _item(quantity=21)]
        with pytest.raises(InvalidOrderItems, match="Current total: 51"):
            validators.validate_items(items)

    def test_aggregate_quantity_at_cap_is_accepted(self):
        validators.validate_items([_item(quantity=30), _item(quantity=20)])

    def test_negative_unit_price_rejected(self):
        with pytest.raises(InvalidOrderItems, match="unit price"):
            validators.validate_items([_item(unit_price=Decimal("-1.00"))])

    def test_negative_subtotal_rejected(self):
        with pytest.raises(InvalidOrderItems, match="subtotal"):
            validators.validate_items([_item(subtotal=Decimal("-1.00"))])

    def test_missing_product_name_rejected(self):
        with pytest.raises(InvalidOrderItems, match="Item 2: product name"):
            validators.validate_items([_item(), _item(product_name="")])

    def test_long_product_name_rejected(self):
        with pytest.raises(InvalidOrderItems, match="255"):
            validators.validate_items([_item(product_name="x" * 256)])

    @pytest.mark.parametrize(
        "overrides",
        [
            {"unit_price": Decimal("10.009"), "subtotal": Decimal("10.01")},
            {"subtotal": Decimal("10.004")},
        ],
        ids=["unit_price", "subtotal"],
    )
    def test_sub_cent_amounts_rejected(self, overrides):
        with pytest.raises(InvalidOrderItems, match="2 decimal places"):
            validators.validate_items([_item(_product(price="10.00"), **overrides)])

    def test_trailing_zeros_are_not_extra_decimals(self):
        validators.validate_items(
            [_item(unit_price=Decimal("10.000"), subtotal=Decimal("10.0000"))]
        )


# ---------------------------------------------------------------------------
# Referential
# ---------------------------------------------------------------------------


class TestReferentialChecks:
    def test_missing_product_raises_not_found(self):
        known = _product()
        items = [_item(known), _item()]
        with pytest.raises(ProductNotFound):
            validators.ensure_products_found(items, {known.id: known})

    def test_all_products_found(self):
        product = _product()
        validators.ensure_products_found([_item(product)], {product.id: product})

    def test_foreign_product_rejected(self):
        foreign = _product(name="Chair", enterprise_id=uuid4())
        with pytest.raises(ProductNotInEnterprise, match="Chair"):
            validators.validate_enterprise_ownership([_product(), foreign], ENTERPRISE_ID)

    def test_own_products_accepted(self):
        validators.validate_enterprise_ownership([_product(), _product()], ENTERPRISE_ID)


# ---------------------------------------------------------------------------
# Consistency
# ---------------------------------------------------------------------------


class TestSnapshots:
    def test_matching_snapshot_passes(self):
        product = _product()
        validators.validate_item_snapshots([_item(product)], {product.id: product})

    def test_price_drift_rejected(self):
        product = _product(price="10.00")
        item = _item(product, unit_price=Decimal("9.00"), subtotal=Decimal("9.00"))
        with pytest.raises(ItemSnapshotMismatch, match="Current price: 10.00"):
            validators.validate_item_snapshots([item], {product.id: product})

    def test_price_within_a_cent_is_accepted(self):
        product = _product(price="10.00")
        item = _item(product, unit_price=Decimal("10.01"))
        validators.validate_item_snapshots([item], {product.id: product})

    def test_name_mismatch_rejected(self):
        product = _product(name="Widget")
        with pytest.raises(ItemSnapshotMismatch, match="Expected: Widget"):
            validators.validate_item_snapshots(
                [_item(product, product_name="Gadget")], {product.id: product}
            )


class TestTotals:
    def test_calculate_total_sums_subtotals(self):
        items = [
            _item(_product(price="10.00"), 5),
            _item(_product(price="2.50"), 3),
        ]
        assert validators.calculate_total(items) == Decimal("57.50")

    def test_calculate_total_of_nothing_is_zero(self):
        assert validators.calculate_total([]) == Decimal("0.00")

    def test_wrong_subtotal_rejected(self):
        item = _item(_product(price="10.00"), 5, subtotal=Decimal("45.00"))
        with pytest.raises(OrderTotalMismatch, match="Expected: 50.00"):
            validators.validate_order_total([item], None)

    def test_subtotal_within_tolerance_accepted(self):
        item = _item(_product(price="10.00"), 5, subtotal=Decimal("50.01"))
        validators.validate_order_total([item], None)

    def test_wrong_total_rejected(self):
        items = [_item(_product(price="10.00"), 5)]
        with pytest.raises(OrderTotalMismatch, match="order total"):
            validators.validate_order_total(items, Decimal("49.00"))

    def test_matching_total_accepted(self):
        items = [_item(_product(price="10.00"), 5)]
        validators.validate_order_total(items, Decimal("50.00"))

    def test_sub_cent_total_rejected(self):
        items = [_item(_product(price="10.00"), 5)]
        with pytest.raises(OrderTotalMismatch, match="2 decimal places"):
            validators.validate_order_total(items, Decimal("50.004"))


# ---------------------------------------------------------------------------
# Business + availability
# ---------------------------------------------------------------------------


class TestMinimumOrderValue:
    def test_below_minimum_mentions_minimum(self):
        with pytest.raises(MinimumOrderValueNotReached, match="5.00"):
            validators.validate_minimum_order_value(Decimal("3.00"))

    def test_minimum_is_inclusive(self):
        validators.validate_minimum_order_value(Decimal("5.00"))


class TestStockAvailability:
    def test_enough_stock_passes(self):
        product = _product(stock=5)
        validators.validate_stock_availability([_item(product, 5)], {product.id: product})

    def test_short_stock_raises_availability_error(self):
        product = _product(name="Widget", stock=2)
        with pytest.raises(InsufficientStock) as exc_info:
            validators.validate_stock_availability(
                [_item(product, 3)], {product.id: product}
            )
        assert exc_info.value.available == 2
        assert exc_info.value.requested == 3
        assert isinstance(exc_info.value, AvailabilityError)
        assert isinstance(exc_info.value, ValidationError)
