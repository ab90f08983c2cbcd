"""
Fabrica Exceptions.

All fabrica errors derive from FabError for consistent handling.
Each subclass is one category of failure the caller can branch on:

    InvalidArgument    malformed/missing/non-positive input, wrong category
    NotFound           identity does not resolve
    DuplicateIdentity  creation collision
    InsufficientStock  feasibility or execution-time shortfall
    Conflict           deletion blocked by a referential dependency
"""

from typing import Any


class FabError(Exception):
    """
    Base exception for all Fabrica errors.

    Usage:
        raise InvalidArgument("INVALID_QUANTITY", quantity="-1")

    Attributes:
        code: Error code (INVALID_QUANTITY, PRODUCT_NOT_FOUND, etc.)
        details: Additional context as keyword arguments
    """

    default_code = "ERROR"

    def __init__(self, code: str | None = None, **details: Any):
        self.code = code or self.default_code
        self.details = details
        message = f"{self.code}: {details}" if details else self.code
        super().__init__(message)

    def as_dict(self) -> dict:
        """Return error as dictionary for API responses."""
        return {"code": self.code, **{k: str(v) for k, v in self.details.items()}}

    def __str__(self) -> str:
        name = type(self).__name__
        if self.details:
            details_str = ", ".join(f"{k}={v}" for k, v in self.details.items())
            return f"{name}({self.code}: {details_str})"
        return f"{name}({self.code})"


class InvalidArgument(FabError):
    default_code = "INVALID_ARGUMENT"


class NotFound(FabError):
    default_code = "NOT_FOUND"


class DuplicateIdentity(FabError):
    default_code = "DUPLICATE_IDENTITY"


class Conflict(FabError):
    default_code = "CONFLICT"


class InsufficientStock(FabError):
    """
    Not enough stock of one product.

    Always carries the product, the amount needed and the amount available:

        raise InsufficientStock(product="01", needed=Decimal("100"), available=Decimal("50"))
    """

    default_code = "INSUFFICIENT_STOCK"

    def __init__(self, code: str | None = None, **details: Any):
        super().__init__(code, **details)
        self.product = details.get("product")
        self.needed = details.get("needed")
        self.available = details.get("available")

    def __str__(self) -> str:
        return (
            f"InsufficientStock({self.code}: product={self.product}, "
            f"needed={self.needed}, available={self.available})"
        )


# Common error codes
# INVALID_QUANTITY: quantity missing, non-numeric or non-positive
# QUANTITY_TOO_PRECISE: more decimal places than the field stores
# QUANTITY_TOO_LARGE: more integer digits than the field stores
# INVALID_CODE: product identity empty or malformed
# INVALID_KIND: unknown product category
# WRONG_CATEGORY: product has the wrong category for its role
# EMPTY_RECIPE: recipe defined without components
# SELF_REFERENCE: recipe lists its own finished good as a component
# DUPLICATE_COMPONENT: same raw material listed twice in one recipe
# INVALID_STATUS: unknown order status name
# INVALID_TRANSITION: order status transition not in the table
# PRODUCT_NOT_FOUND / RECIPE_NOT_FOUND / ORDER_NOT_FOUND
# MATERIAL_IN_USE: raw material referenced by a recipe line
# PRODUCT_HAS_ORDERS: product referenced by production orders
# INSUFFICIENT_STOCK: stock below the amount required
# PRODUCT_EXISTS: product code already taken
# ORDER_EXECUTED: executed orders cannot be deleted
# INVALID_COMPONENT: recipe line without a material code
# INVALID_NAME: product name empty or too long
