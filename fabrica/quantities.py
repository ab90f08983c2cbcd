"""
Quantity parsing.

Every quantity entering fabrica goes through as_quantity(), which converts
to Decimal without float noise and rejects values that would need rounding
to fit their database column. Precision is chosen so that
LINE_PLACES + ORDER_PLACES <= STOCK_PLACES: a line quantity times a
requested quantity is always exactly representable in the ledger.
"""

from decimal import Decimal, InvalidOperation

from fabrica.exceptions import InvalidArgument

# Quantity-on-hand
STOCK_DIGITS = 18
STOCK_PLACES = 6

# Quantity per one unit of finished good
LINE_DIGITS = 12
LINE_PLACES = 3

# Requested production quantity
ORDER_DIGITS = 12
ORDER_PLACES = 3


def fits(value: Decimal, digits: int = STOCK_DIGITS, places: int = STOCK_PLACES) -> bool:
    """True if value has at most digits - places integer digits."""
    return value.is_zero() or value.adjusted() < digits - places


def as_quantity(
    value,
    *,
    places: int = STOCK_PLACES,
    digits: int = STOCK_DIGITS,
    field: str = "quantity",
    positive: bool = True,
) -> Decimal:
    """
    Convert value to a Decimal quantity.

    Raises InvalidArgument if the value is missing, not a finite number,
    has more than `places` decimal places, has more integer digits than a
    `digits`-wide column holds, or (when positive=True) is <= 0.
    """
    if value is None or isinstance(value, bool):
        raise InvalidArgument("INVALID_QUANTITY", **{field: value})

    if isinstance(value, Decimal):
        quantity = value
    else:
        try:
            quantity = Decimal(str(value).strip())
        except (InvalidOperation, ValueError):
            raise InvalidArgument("INVALID_QUANTITY", **{field: value})

    if not quantity.is_finite():
        raise InvalidArgument("INVALID_QUANTITY", **{field: value})

    if positive and quantity <= 0:
        raise InvalidArgument("INVALID_QUANTITY", **{field: value})

    if not fits(quantity, digits, places):
        raise InvalidArgument(
            "QUANTITY_TOO_LARGE", max_integer_digits=digits - places, **{field: value}
        )

    if quantity.as_tuple().exponent < -places:
        # 0.10000 is fine, 0.1234567 is not
        if quantity != quantity.quantize(Decimal(1).scaleb(-places)):
            raise InvalidArgument("QUANTITY_TOO_PRECISE", places=places, **{field: value})
        quantity = quantity.quantize(Decimal(1).scaleb(-places))

    return quantity
