"""Enterprise domain exceptions."""

from __future__ import annotations

from modules.core.exceptions import NotFoundError


class EnterpriseNotFound(NotFoundError):
    """The referenced enterprise does not exist."""
