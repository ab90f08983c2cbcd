"""
Fabrica Models.

Core models for inventory and production:
- Product: stock-keeping unit with quantity-on-hand (raw material or finished good)
- Recipe: Ficha técnica / BOM - one per finished good
- RecipeLine: Componente da ficha (raw material + quantity per unit)
- ProductionOrder: Status-tagged production request
- CodeSequence: Atomic counter for code generation
"""

from fabrica.models.order import OrderStatus, ProductionOrder, TRANSITIONS
from fabrica.models.product import Product, ProductKind
from fabrica.models.recipe import Recipe, RecipeLine
from fabrica.models.sequence import CodeSequence

__all__ = [
    "Product",
    "ProductKind",
    "Recipe",
    "RecipeLine",
    "ProductionOrder",
    "OrderStatus",
    "TRANSITIONS",
    "CodeSequence",
]
