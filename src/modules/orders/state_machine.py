"""Order status state machine.

PENDING -> COMPLETED | CANCELLED.  Both targets are terminal: a terminal
order accepts no status change, no field update and, when COMPLETED,
no deletion.  A CANCELLED order may still be deleted.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Optional

from modules.orders.constants import TERMINAL_STATES, VALID_TRANSITIONS, OrderStatus
from modules.orders.exceptions import (
    InvalidOrderStatus,
    InvalidStatusTransition,
    OrderDeletionNotAllowed,
    OrderLocked,
)

if TYPE_CHECKING:
    from modules.orders.models import Order


def parse_status(value: Optional[str]) -> OrderStatus:
    """Map a raw value or label (any case) onto an ``OrderStatus``.

    Raises:
        InvalidOrderStatus: the value names no known status.
    """
    normalized = (value or "").strip().upper()
    for status in OrderStatus:
        if normalized in (status.value, str(status.label).upper()):
            return status
    valid = ", ".join(OrderStatus.values)
    raise InvalidOrderStatus(f"Invalid order status: {value!r}. Valid values: {valid}.")


def is_terminal(status: str) -> bool:
    return status in TERMINAL_STATES


def assert_transition(current: str, target: str) -> None:
    """Raise ``InvalidStatusTransition`` unless *current* -> *target* is allowed.

    Re-applying the current status counts as a transition and is refused.
    """
    if target not in VALID_TRANSITIONS.get(current, set()):
        raise InvalidStatusTransition(current, target)


def assert_mutable(order: Order) -> None:
    if order.is_terminal:
        raise OrderLocked(
            f"Order {order.order_number} is {order.status} and can no longer be changed."
        )


def assert_deletable(order: Order) -> None:
    if order.status == OrderStatus.COMPLETED:
        raise OrderDeletionNotAllowed(
            f"Order {order.order_number} is COMPLETED and cannot be deleted."
        )
