"""Customer model.

Customers place orders.  Record management lives outside this system;
the model exists so orders can reference it.  The CPF is masked in
``__str__`` so it never leaks into logs.
"""

from __future__ import annotations

import re

from django.db import models

from modules.core.models import BaseModel


class Customer(BaseModel):
    """Customer referenced by orders.

    ``cpf`` stores only digits (sanitised on save) and is unique
    system-wide, like ``email``.
    """

    name = models.CharField(max_length=255)
    email = models.EmailField(max_length=255, unique=True)
    phone = models.CharField(max_length=20, blank=True, default="")
    cpf = models.CharField(max_length=11, unique=True)
    address = models.TextField(blank=True, default="")

    class Meta:
        db_table = "customers"
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["-created_at"], name="customers_created_idx"),
        ]

    @staticmethod
    def _sanitize_document(value: str) -> str:
        """Strip all non-digit characters from a document string."""
        return re.sub(r"\D", "", value)

    def save(self, *args, **kwargs) -> None:
        if self.cpf:
            self.cpf = self._sanitize_document(self.cpf)
        super().save(*args, **kwargs)

    def __str__(self) -> str:
        suffix = self.cpf[-4:] if self.cpf else "????"
        return f"{self.name} (CPF: ***{suffix})"
