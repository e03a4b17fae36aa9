"""Enterprise repository interface."""

from __future__ import annotations

from typing import TYPE_CHECKING

from modules.core.repositories.interfaces import IRepository

if TYPE_CHECKING:
    from modules.enterprises.models import Enterprise  # noqa: F401


class IEnterpriseRepository(IRepository["Enterprise"]):
    """Repository contract for the Enterprise entity."""
