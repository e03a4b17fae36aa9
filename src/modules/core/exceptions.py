"""Domain error kinds shared by every module.

Module-specific exceptions subclass one of these so the caller can map
them to a response category without knowing every concrete class:

- ``ValidationError``: malformed or inconsistent input.
- ``AvailabilityError``: not enough stock at reservation time.  Can be
  caused by a concurrent reservation, so a caller-level retry is reasonable.
- ``NotFoundError``: a referenced record does not exist.
- ``ConflictError``: the request clashes with current state (duplicate
  key, mutation of a locked record).
"""

from __future__ import annotations


class DomainError(Exception):
    """Base class for all business-rule violations."""


class ValidationError(DomainError):
    """Input is malformed or inconsistent with the current records."""


class AvailabilityError(ValidationError):
    """Requested quantity exceeds the stock available right now."""


class NotFoundError(DomainError):
    """A referenced record does not exist."""


class ConflictError(DomainError):
    """The operation conflicts with the current state of a record."""
