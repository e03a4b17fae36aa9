from __future__ import annotations

from datetime import date
from decimal import Decimal

import pytest
from django.utils import timezone

from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.enterprises.models import Enterprise
from modules.enterprises.repositories.django_repository import EnterpriseDjangoRepository
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository
from modules.products.reservations import StockReservationService
from modules.products.services import ProductService


@pytest.fixture(autouse=True)
def _use_db(db):
    """Automatically use the test database for all tests."""


# ---------------------------------------------------------------------------
# Records
# ---------------------------------------------------------------------------


@pytest.fixture()
def enterprise():
    return Enterprise.objects.create(
        legal_name="Comercial Aurora Ltda",
        trade_name="Aurora",
        cnpj="11222333000181",
        foundation_date=date(2010, 5, 4),
    )


@pytest.fixture()
def other_enterprise():
    return Enterprise.objects.create(
        legal_name="Moveis Serra Azul S.A.",
        trade_name="Serra Azul",
        cnpj="98765432000155",
        foundation_date=date(2015, 7, 1),
    )


@pytest.fixture()
def customer():
    return Customer.objects.create(
        name="Ana Souza",
        email="ana@example.com",
        cpf="59860184275",
    )


@pytest.fixture()
def other_customer():
    return Customer.objects.create(
        name="Bruno Lima",
        email="bruno@example.com",
        cpf="39053344705",
    )


@pytest.fixture()
def product_a(enterprise):
    return Product.objects.create(
        enterprise=enterprise,
        name="Widget A",
        price=Decimal("10.00"),
        stock=100,
    )


@pytest.fixture()
def product_b(enterprise):
    return Product.objects.create(
        enterprise=enterprise,
        name="Widget B",
        price=Decimal("25.50"),
        stock=50,
    )


@pytest.fixture()
def foreign_product(other_enterprise):
    return Product.objects.create(
        enterprise=other_enterprise,
        name="Foreign Chair",
        price=Decimal("80.00"),
        stock=10,
    )


# ---------------------------------------------------------------------------
# Services
# ---------------------------------------------------------------------------


@pytest.fixture()
def product_repository():
    return ProductDjangoRepository()


@pytest.fixture()
def reservation_service(product_repository):
    return StockReservationService(product_repository)


@pytest.fixture()
def order_service(product_repository):
    return OrderService(
        order_repository=OrderDjangoRepository(),
        customer_repository=CustomerDjangoRepository(),
        enterprise_repository=EnterpriseDjangoRepository(),
        product_repository=product_repository,
    )


@pytest.fixture()
def product_service(product_repository):
    return ProductService(
        repository=product_repository,
        enterprise_repository=EnterpriseDjangoRepository(),
    )


# ---------------------------------------------------------------------------
# DTO builders
# ---------------------------------------------------------------------------


def make_item(product: Product, quantity: int, **overrides) -> CreateOrderItemDTO:
    """Build an item DTO whose snapshots match *product*."""
    data = {
        "product_id": product.id,
        "product_name": product.name,
        "quantity": quantity,
        "unit_price": product.price,
        "subtotal": product.price * quantity,
    }
    data.update(overrides)
    return CreateOrderItemDTO(**data)


@pytest.fixture()
def item_for():
    return make_item


@pytest.fixture()
def order_dto(customer, enterprise):
    """Factory for a valid ``CreateOrderDTO`` against the default records."""

    def _build(items, **overrides) -> CreateOrderDTO:
        data = {
            "order_number": "ORD-0001",
            "order_date": timezone.localdate(),
            "customer_id": customer.id,
            "enterprise_id": enterprise.id,
            "items": items,
        }
        data.update(overrides)
        return CreateOrderDTO(**data)

    return _build
