"""Product catalog limits."""

from decimal import Decimal

MAX_PRICE = Decimal("1000000.00")
PRICE_DECIMAL_PLACES = 2
MAX_STOCK = 999_999
NAME_MAX_LENGTH = 255
