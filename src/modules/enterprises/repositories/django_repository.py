"""Django ORM implementation of the Enterprise repository.

Error handling follows the Null Object pattern: methods return ``None``
instead of raising; the Service Layer decides how to translate a
missing entity into a domain error.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

import structlog
from django.core.exceptions import ValidationError
from django.db import transaction

from modules.enterprises.models import Enterprise
from modules.enterprises.repositories.interfaces import IEnterpriseRepository

logger = structlog.get_logger(__name__)


class EnterpriseDjangoRepository(IEnterpriseRepository):
    """Concrete Enterprise repository backed by Django ORM."""

    def get_by_id(self, id: str) -> Optional[Enterprise]:
        """Return the enterprise, or ``None`` for unknown or malformed IDs."""
        try:
            return Enterprise.objects.filter(id=id).first()
        except (ValueError, ValidationError):
            return None

    def list(self, filters: Optional[Dict[str, Any]] = None) -> List[Enterprise]:
        queryset = Enterprise.objects.all()
        if filters:
            queryset = queryset.filter(**filters)
        return list(queryset)

    @transaction.atomic
    def save(self, entity: Enterprise) -> Enterprise:
        entity.save()
        logger.info("enterprise.saved", enterprise_id=str(entity.id))
        return entity

    @transaction.atomic
    def delete(self, id: str) -> bool:
        enterprise = self.get_by_id(id)
        if not enterprise:
            return False
        enterprise.delete()
        logger.info("enterprise.deleted", enterprise_id=str(id))
        return True
