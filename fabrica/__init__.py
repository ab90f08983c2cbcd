"""
Django Fabrica - Inventory ledger and production-order engine.

Tracks raw-material and finished-good stock and converts one into the
other according to a fixed recipe (ficha técnica / bill of materials).

Usage:
    from fabrica import fab, FabError, InsufficientStock

    # Stock
    fab.create_product("01", "Açúcar", unit="kg")
    fab.receive("01", 100)

    # Recipe (full replace)
    fab.define_recipe("CHOC", [("01", "0.1")], name="Barra de Chocolate")

    # Feasibility (read-only)
    result = fab.check_feasibility("CHOC", 500)
    if not result.feasible:
        print(f"Falta: {result.shortage.product} - precisa {result.shortage.needed}")

    # Execution (all-or-nothing)
    try:
        fab.execute("CHOC", 500)
    except InsufficientStock as e:
        print(e.product, e.needed, e.available)
"""

from fabrica.exceptions import (
    Conflict,
    DuplicateIdentity,
    FabError,
    InsufficientStock,
    InvalidArgument,
    NotFound,
)


def __getattr__(name):
    """Lazy import to avoid AppRegistryNotReady errors."""
    if name in ("fab", "Fab"):
        from fabrica.service import Fab

        return Fab
    if name == "FeasibilityResult":
        from fabrica.results import FeasibilityResult

        return FeasibilityResult
    if name == "ProductionResult":
        from fabrica.results import ProductionResult

        return ProductionResult
    raise AttributeError(f"module {__name__!r} has no attribute {name!r}")


__all__ = [
    "fab",
    "Fab",
    "FabError",
    "InvalidArgument",
    "NotFound",
    "DuplicateIdentity",
    "InsufficientStock",
    "Conflict",
    "FeasibilityResult",
    "ProductionResult",
]
__version__ = "0.1.0"
