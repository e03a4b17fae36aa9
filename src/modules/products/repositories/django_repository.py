"""Django ORM implementation of the Product repository.

Satisfies ``IProductRepository`` using Django's QuerySet API.
Error handling follows the Null Object pattern: methods return ``None``
or ``False`` instead of raising; the caller decides how to translate a
missing entity into a domain error.

Stock changes are issued as single ``UPDATE`` statements built from
``F()`` expressions, so the check and the write happen against the
authoritative row value inside the database.  No read-modify-write
happens in Python.
"""

from __future__ import annotations

from typing import Any, Dict, Iterable, List, Optional
from uuid import UUID

import structlog
from django.core.exceptions import ValidationError
from django.db import models, transaction
from django.db.models import F, Value
from django.db.models.functions import Least
from django.utils import timezone

from modules.products.constants import MAX_STOCK
from modules.products.models import Product
from modules.products.repositories.interfaces import IProductRepository

logger = structlog.get_logger(__name__)


class ProductDjangoRepository(IProductRepository):
    """Concrete Product repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Product]:
        """Retrieve a product by primary key.

        Returns ``None`` for non-existent or invalid IDs.
        """
        try:
            return Product.objects.select_related("enterprise").filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def get_many(self, ids: Iterable[UUID]) -> Dict[UUID, Product]:
        return Product.objects.in_bulk(list(ids))

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Product]:
        """List products with optional Django ORM look-ups.

        Examples of valid filters::

            {"enterprise_id": enterprise.id}
            {"name__icontains": "widget"}
        """
        queryset = Product.objects.select_related("enterprise")
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Product) -> Product:
        """Persist (create or update) a product."""
        entity.save()
        logger.info(
            "product.saved",
            product_id=str(entity.id),
            enterprise_id=str(entity.enterprise_id),
        )
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        """Delete a product by ID.

        Raises ``ProtectedError`` while order items still reference it.
        """
        product = self.get_by_id(id)
        if not product:
            return False
        product.delete()
        logger.info("product.deleted", product_id=str(id))
        return True

    def get_by_name(self, enterprise_id: UUID, name: str) -> Optional[Product]:
        return Product.objects.filter(
            enterprise_id=enterprise_id, name=name.strip()
        ).first()

    # ------------------------------------------------------------------
    # Inventory ledger
    # ------------------------------------------------------------------

    def decrease_stock(self, id: UUID, quantity: int) -> bool:
        updated = Product.objects.filter(id=id, stock__gte=quantity).update(
            stock=F("stock") - quantity,
            updated_at=timezone.now(),
        )
        return updated == 1

    def increase_stock(self, id: UUID, quantity: int) -> bool:
        updated = Product.objects.filter(id=id).update(
            stock=Least(
                F("stock") + quantity,
                Value(MAX_STOCK),
                output_field=models.PositiveIntegerField(),
            ),
            updated_at=timezone.now(),
        )
        return updated == 1
