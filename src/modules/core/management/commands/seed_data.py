from __future__ import annotations

import random
from datetime import date, timedelta
from decimal import Decimal

from django.core.management.base import BaseCommand
from django.utils import timezone

from modules.core.exceptions import DomainError
from modules.customers.models import Customer
from modules.customers.repositories.django_repository import CustomerDjangoRepository
from modules.enterprises.models import Enterprise
from modules.enterprises.repositories.django_repository import EnterpriseDjangoRepository
from modules.orders.constants import OrderStatus
from modules.orders.dtos import CreateOrderDTO, CreateOrderItemDTO
from modules.orders.repositories.django_repository import OrderDjangoRepository
from modules.orders.services import OrderService
from modules.products.models import Product
from modules.products.repositories.django_repository import ProductDjangoRepository


class Command(BaseCommand):
    help = "Seed database with realistic development data."

    def add_arguments(self, parser):
        parser.add_argument(
            "--orders",
            type=int,
            default=20,
            help="Number of orders to create through the order service.",
        )

    def handle(self, *args, **options):
        random.seed(42)
        self.stdout.write("Seeding development data...")

        enterprises = self._seed_enterprises()
        customers = self._seed_customers()
        products = self._seed_products(enterprises)
        orders_created = self._seed_orders(customers, products, options["orders"])

        self.stdout.write(
            self.style.SUCCESS(
                "Seed completed: "
                f"enterprises={len(enterprises)}, "
                f"customers={len(customers)}, "
                f"products={len(products)}, "
                f"orders={orders_created}"
            )
        )

    def _seed_enterprises(self) -> list[Enterprise]:
        self.stdout.write("Creating enterprises...")
        enterprises: list[Enterprise] = []
        seed_enterprises = [
            ("Comercial Aurora Ltda", "Aurora Eletrônicos", "11222333000181", date(2008, 3, 12)),
            ("Moveis Serra Azul S.A.", "Serra Azul Móveis", "98765432000155", date(2015, 7, 1)),
            ("Papelaria Central ME", "Papelaria Central", "45678912000103", date(2019, 11, 20)),
        ]
        for legal_name, trade_name, cnpj, founded in seed_enterprises:
            enterprise, _ = Enterprise.objects.get_or_create(
                cnpj=cnpj,
                defaults={
                    "legal_name": legal_name,
                    "trade_name": trade_name,
                    "foundation_date": founded,
                },
            )
            enterprises.append(enterprise)
        self.stdout.write(self.style.SUCCESS("Creating enterprises... Done!"))
        return enterprises

    def _seed_customers(self) -> list[Customer]:
        self.stdout.write("Creating customers...")
        customers: list[Customer] = []
        seed_customers = [
            ("Ana Souza", "39053344705", "ana@example.com"),
            ("Carla Mendes", "98765432100", "carla@example.com"),
            ("Daniel Costa", "12345678901", "daniel@example.com"),
            ("Fernanda Rocha", "74125896300", "fernanda@example.com"),
            ("Gabriel Santos", "36925814700", "gabriel@example.com"),
            ("Helena Ferreira", "25814736900", "helena@example.com"),
        ]
        for name, cpf, email in seed_customers:
            customer, _ = Customer.objects.get_or_create(
                cpf=cpf,
                defaults={"name": name, "email": email},
            )
            customers.append(customer)
        self.stdout.write(self.style.SUCCESS("Creating customers... Done!"))
        return customers

    def _seed_products(self, enterprises: list[Enterprise]) -> list[Product]:
        self.stdout.write("Creating products...")
        products: list[Product] = []
        electronics, furniture, office = enterprises
        catalog = [
            (electronics, "Monitor 27\"", Decimal("1299.90")),
            (electronics, "Teclado Mecânico", Decimal("399.90")),
            (electronics, "Mouse Gamer", Decimal("249.90")),
            (electronics, "Headset", Decimal("299.90")),
            (furniture, "Mesa Escritório", Decimal("899.00")),
            (furniture, "Cadeira Ergonômica", Decimal("1499.00")),
            (furniture, "Estante", Decimal("699.00")),
            (office, "Papel A4", Decimal("29.90")),
            (office, "Caneta Azul", Decimal("4.90")),
            (office, "Caderno", Decimal("19.90")),
            (office, "Grampeador", Decimal("39.90")),
            (office, "Calculadora", Decimal("89.90")),
        ]
        for enterprise, name, price in catalog:
            product, _ = Product.objects.get_or_create(
                enterprise=enterprise,
                name=name,
                defaults={"price": price, "stock": random.randint(150, 400)},
            )
            products.append(product)
        self.stdout.write(self.style.SUCCESS("Creating products... Done!"))
        return products

    def _seed_orders(
        self, customers: list[Customer], products: list[Product], count: int
    ) -> int:
        self.stdout.write("Creating orders...")
        if not customers or not products:
            self.stdout.write(self.style.WARNING("Skipping orders (no customers/products)."))
            return 0

        service = OrderService(
            order_repository=OrderDjangoRepository(),
            customer_repository=CustomerDjangoRepository(),
            enterprise_repository=EnterpriseDjangoRepository(),
            product_repository=ProductDjangoRepository(),
        )
        catalogs: dict = {}
        for product in products:
            catalogs.setdefault(product.enterprise_id, []).append(product)

        orders_created = 0
        today = timezone.localdate()
        for i in range(count):
            enterprise_id = random.choice(list(catalogs))
            catalog = catalogs[enterprise_id]
            items = []
            for product in random.sample(catalog, k=random.randint(1, min(3, len(catalog)))):
                quantity = random.randint(2, 5)
                items.append(
                    CreateOrderItemDTO(
                        product_id=product.id,
                        product_name=product.name,
                        quantity=quantity,
                        unit_price=product.price,
                        subtotal=product.price * quantity,
                    )
                )
            dto = CreateOrderDTO(
                order_number=f"SEED-{i + 1:04d}",
                order_date=today - timedelta(days=random.randint(0, 30)),
                customer_id=random.choice(customers).id,
                enterprise_id=enterprise_id,
                items=items,
                notes=f"Seed order {i + 1}",
            )
            try:
                order = service.create_order(dto)
            except DomainError as exc:
                self.stdout.write(self.style.WARNING(f"Skipped {dto.order_number}: {exc}"))
                continue

            final_status = random.choice(
                [OrderStatus.PENDING, OrderStatus.COMPLETED, OrderStatus.CANCELLED]
            )
            if final_status != OrderStatus.PENDING:
                service.update_status(order.id, final_status)
            orders_created += 1

        self.stdout.write(self.style.SUCCESS("Creating orders... Done!"))
        return orders_created
