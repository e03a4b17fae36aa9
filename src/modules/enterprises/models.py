"""Enterprise model.

Enterprises own product catalogs and receive orders.  Record management
lives outside this system; here the model exists so orders and products
can reference it.
"""

from __future__ import annotations

from django.db import models

from modules.core.models import BaseModel


class Enterprise(BaseModel):
    """Enterprise referenced by products and orders.

    ``cnpj`` stores only digits and is unique system-wide.
    """

    legal_name = models.CharField(max_length=255)
    trade_name = models.CharField(max_length=255)
    cnpj = models.CharField(max_length=14, unique=True)
    foundation_date = models.DateField()
    address = models.TextField(blank=True, default="")

    class Meta:
        db_table = "enterprises"
        ordering = ["trade_name"]

    def __str__(self) -> str:
        suffix = self.cnpj[-4:] if self.cnpj else "????"
        return f"{self.trade_name} (CNPJ: ***{suffix})"
