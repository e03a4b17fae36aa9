"""Unit tests for ProductService."""

from __future__ import annotations

from decimal import Decimal
from unittest import mock
from uuid import uuid4

import pytest
from django.db import IntegrityError

from modules.enterprises.exceptions import EnterpriseNotFound
from modules.products.constants import MAX_STOCK
from modules.products.dtos import CreateProductDTO, ProductOutputDTO, UpdateProductDTO
from modules.products.exceptions import (
    InvalidProductData,
    ProductAlreadyExists,
    ProductNotFound,
)
from modules.products.models import Product

pytestmark = pytest.mark.unit


def _create_dto(enterprise, **overrides):
    data = {
        "enterprise_id": enterprise.id,
        "name": "  Desk Lamp  ",
        "price": Decimal("59.90"),
        "description": "LED",
        "stock": 30,
    }
    data.update(overrides)
    return CreateProductDTO(**data)


class TestCreateProduct:
    def test_creates_product(self, product_service, enterprise):
        product = product_service.create_product(_create_dto(enterprise))

        assert product.name == "Desk Lamp"
        assert product.stock == 30
        assert product.enterprise_id == enterprise.id

    def test_unknown_enterprise(self, product_service):
        dto = CreateProductDTO(enterprise_id=uuid4(), name="X", price=Decimal("1.00"))
        with pytest.raises(EnterpriseNotFound):
            product_service.create_product(dto)

    @pytest.mark.parametrize(
        "price", [Decimal("0"), Decimal("-1.00"), Decimal("1000000.01"), Decimal("1.999")]
    )
    def test_invalid_price(self, product_service, enterprise, price):
        with pytest.raises(InvalidProductData):
            product_service.create_product(_create_dto(enterprise, price=price))

    def test_price_at_cap_accepted(self, product_service, enterprise):
        product = product_service.create_product(
            _create_dto(enterprise, price=Decimal("1000000.00"))
        )
        assert product.price == Decimal("1000000.00")

    @pytest.mark.parametrize("stock", [-1, MAX_STOCK + 1])
    def test_invalid_stock(self, product_service, enterprise, stock):
        with pytest.raises(InvalidProductData):
            product_service.create_product(_create_dto(enterprise, stock=stock))

    def test_duplicate_name_in_same_enterprise(self, product_service, enterprise, product_a):
        with pytest.raises(ProductAlreadyExists):
            product_service.create_product(_create_dto(enterprise, name=product_a.name))

    def test_unique_index_race_becomes_conflict(self, product_service, enterprise, product_a):
        # Another writer inserts the same name after the pre-check passed.
        with mock.patch.object(product_service, "_ensure_unique_name"):
            with pytest.raises(ProductAlreadyExists):
                product_service.create_product(_create_dto(enterprise, name=product_a.name))

        assert Product.objects.filter(enterprise=enterprise, name=product_a.name).count() == 1

    def test_other_integrity_errors_propagate(self, product_service, enterprise):
        with mock.patch.object(
            product_service._repo, "save", side_effect=IntegrityError("boom")
        ):
            with pytest.raises(IntegrityError):
                product_service.create_product(_create_dto(enterprise))

    def test_same_name_in_other_enterprise_allowed(
        self, product_service, other_enterprise, product_a
    ):
        product = product_service.create_product(
            _create_dto(other_enterprise, name=product_a.name)
        )
        assert product.enterprise_id == other_enterprise.id

    def test_blank_name_rejected_by_dto(self, enterprise):
        with pytest.raises(ValueError):
            _create_dto(enterprise, name="   ")


class TestUpdateProduct:
    def test_updates_price_and_description(self, product_service, product_a):
        updated = product_service.update_product(
            str(product_a.id),
            UpdateProductDTO(price=Decimal("12.50"), description="New"),
        )
        assert updated.price == Decimal("12.50")
        assert updated.description == "New"
        assert updated.stock == 100

    def test_rename_to_taken_name(self, product_service, product_a, product_b):
        with pytest.raises(ProductAlreadyExists):
            product_service.update_product(
                str(product_a.id), UpdateProductDTO(name=product_b.name)
            )

    def test_keep_own_name(self, product_service, product_a):
        updated = product_service.update_product(
            str(product_a.id), UpdateProductDTO(name=product_a.name)
        )
        assert updated.name == product_a.name

    def test_unknown_product(self, product_service):
        with pytest.raises(ProductNotFound):
            product_service.update_product(str(uuid4()), UpdateProductDTO(name="X"))


class TestProductQueries:
    def test_get_product(self, product_service, product_a):
        assert product_service.get_product(str(product_a.id)).id == product_a.id

    def test_get_product_with_malformed_id(self, product_service):
        with pytest.raises(ProductNotFound):
            product_service.get_product("not-a-uuid")

    def test_list_by_enterprise(self, product_service, enterprise, product_a, product_b, foreign_product):
        products = product_service.list_products_by_enterprise(enterprise.id)
        assert {p.id for p in products} == {product_a.id, product_b.id}

    def test_list_by_unknown_enterprise(self, product_service):
        with pytest.raises(EnterpriseNotFound):
            product_service.list_products_by_enterprise(uuid4())

    def test_list_products(self, product_service, product_a, foreign_product):
        assert len(product_service.list_products()) == 2

    def test_output_dto(self, product_a):
        dto = ProductOutputDTO.from_entity(product_a)
        assert dto.price == Decimal("10.00")
        assert dto.enterprise_id == product_a.enterprise_id
