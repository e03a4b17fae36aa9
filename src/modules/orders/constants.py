"""Order domain constants.

Defines status choices, the valid status transitions of the order
state machine, and the limits enforced by the validation pipeline.
"""

import re
from decimal import Decimal

from django.db import models


class OrderStatus(models.TextChoices):
    PENDING = "PENDING", "Pending"
    COMPLETED = "COMPLETED", "Completed"
    CANCELLED = "CANCELLED", "Cancelled"


VALID_TRANSITIONS: dict[str, set[str]] = {
    OrderStatus.PENDING: {OrderStatus.COMPLETED, OrderStatus.CANCELLED},
    OrderStatus.COMPLETED: set(),
    OrderStatus.CANCELLED: set(),
}

TERMINAL_STATES: set[str] = {OrderStatus.COMPLETED, OrderStatus.CANCELLED}

ORDER_NUMBER_MAX_LENGTH = 50
ORDER_NUMBER_PATTERN = re.compile(r"[A-Za-z0-9-]+")

PRODUCT_NAME_MAX_LENGTH = 255
MIN_ITEM_QUANTITY = 1
MAX_ITEM_QUANTITY = 100
MAX_ORDER_QUANTITY = 50

MIN_ORDER_VALUE = Decimal("5.00")
AMOUNT_TOLERANCE = Decimal("0.01")
CENTS = Decimal("0.01")
