from __future__ import annotations

from io import StringIO

import pytest
from django.core.management import call_command
from django.db.models import Sum

from modules.customers.models import Customer
from modules.enterprises.models import Enterprise
from modules.orders.models import Order, OrderItem
from modules.products.models import Product

pytestmark = pytest.mark.integration


def _run_seed(orders: int = 5) -> str:
    out = StringIO()
    call_command("seed_data", orders=orders, stdout=out)
    return out.getvalue()


class TestSeedDataCommand:
    def test_creates_records_and_orders(self):
        output = _run_seed()

        assert Enterprise.objects.count() == 3
        assert Customer.objects.count() == 6
        assert Product.objects.count() == 12
        assert Order.objects.count() == 5
        assert "Seed completed" in output
        assert "orders=5" in output

    def test_seeded_orders_respect_totals_and_ownership(self):
        _run_seed()

        for order in Order.objects.prefetch_related("items__product"):
            items = list(order.items.all())
            assert items
            assert order.total_amount == sum(item.subtotal for item in items)
            assert all(item.product.enterprise_id == order.enterprise_id for item in items)

    def test_second_run_is_idempotent(self):
        _run_seed()
        stock_after_first = Product.objects.aggregate(total=Sum("stock"))["total"]

        output = _run_seed()

        assert Order.objects.count() == 5
        assert Product.objects.aggregate(total=Sum("stock"))["total"] == stock_after_first
        assert "Skipped SEED-0001" in output
        assert "orders=0" in output

    def test_stock_never_negative(self):
        _run_seed(orders=10)

        assert not Product.objects.filter(stock__lt=0).exists()
        assert OrderItem.objects.exists()
