"""Product model with per-enterprise naming and stock control.

Business rules implemented:
- Name must be unique within the owning enterprise.
- Price must be greater than zero and at most ``MAX_PRICE``.
- Stock is a non-negative integer capped at ``MAX_STOCK``.
- Stock is only changed through the reservation coordinator once the
  product exists (see ``modules.products.reservations``).
"""

from __future__ import annotations

from decimal import Decimal

import structlog
from django.core.validators import MaxValueValidator, MinValueValidator
from django.db import models

from modules.core.models import BaseModel
from modules.products.constants import MAX_PRICE, MAX_STOCK, NAME_MAX_LENGTH

logger = structlog.get_logger(__name__)


class Product(BaseModel):
    """Product owned by an enterprise.

    The database constraints are the source of truth for name uniqueness
    and the stock range; the service layer pre-checks them only to give
    friendlier errors.
    """

    enterprise = models.ForeignKey(
        "enterprises.Enterprise",
        on_delete=models.PROTECT,
        related_name="products",
    )
    name = models.CharField(max_length=NAME_MAX_LENGTH)
    description = models.TextField(blank=True, default="")
    price = models.DecimalField(
        max_digits=10,
        decimal_places=2,
        validators=[MinValueValidator(Decimal("0.01")), MaxValueValidator(MAX_PRICE)],
    )
    stock = models.PositiveIntegerField(
        default=0,
        validators=[MaxValueValidator(MAX_STOCK)],
    )

    class Meta:
        db_table = "products"
        ordering = ["name"]
        constraints = [
            models.UniqueConstraint(
                fields=["enterprise", "name"],
                name="products_enterprise_name_uniq",
            ),
            models.CheckConstraint(
                condition=models.Q(price__gt=0),
                name="products_price_positive",
            ),
            models.CheckConstraint(
                condition=models.Q(stock__gte=0) & models.Q(stock__lte=MAX_STOCK),
                name="products_stock_range",
            ),
        ]

    def save(self, *args, **kwargs) -> None:
        is_new = self._state.adding
        super().save(*args, **kwargs)
        if is_new:
            logger.info(
                "product_created",
                product_id=str(self.id),
                enterprise_id=str(self.enterprise_id),
                name=self.name,
            )

    def __str__(self) -> str:
        return f"{self.name} ({self.stock} in stock)"
