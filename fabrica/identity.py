"""
Product identity allocation.

Codes are human-friendly: "01", "02", ... "99", "100". When a caller does
not supply a code the allocator draws the next value from CodeSequence and
skips past codes that already exist (hand-assigned "05", say).
"""

import logging
import re

from fabrica.conf import get_code_min_digits
from fabrica.exceptions import InvalidArgument

logger = logging.getLogger(__name__)

SEQUENCE_PREFIX = "product"
MAX_CODE_LENGTH = 50

_NUMERIC = re.compile(r"^\d+$")
_VALID = re.compile(r"^[^\s/\\\x00-\x1f\x7f][^/\\\x00-\x1f\x7f]*$")


def format_code(value: int, min_digits: int | None = None) -> str:
    """Zero-pad value to at least min_digits digits (7 → "07", 123 → "123")."""
    if min_digits is None:
        min_digits = get_code_min_digits()
    return str(max(value, 0)).zfill(min_digits)


def normalize_code(code) -> str:
    """
    Validate a caller-supplied product code.

    Purely numeric codes are re-padded ("7" and "007" both become "07"),
    anything else is kept as given after stripping surrounding whitespace.
    """
    if not isinstance(code, str):
        raise InvalidArgument("INVALID_CODE", product=code)

    code = code.strip()
    if not code or len(code) > MAX_CODE_LENGTH or not _VALID.match(code):
        raise InvalidArgument("INVALID_CODE", product=code)

    if _NUMERIC.match(code):
        return format_code(int(code))
    return code


def next_product_code() -> str:
    """
    Allocate the next unused numeric product code.

    Must run inside the caller's transaction: the sequence row is locked
    until the product using the code is saved.
    """
    from fabrica.models import CodeSequence, Product

    def taken(candidate):
        if Product.objects.filter(pk=candidate).exists():
            logger.debug(f"Product code {candidate} taken, skipping")
            return True
        return False

    return CodeSequence.next_code(SEQUENCE_PREFIX, get_code_min_digits(), taken=taken)
