"""
Fabrica Services.

Business logic that doesn't belong in models:
- ledger: Product create/delete, stock credit/debit, queries
- recipes: Define/replace recipes (fichas técnicas), queries
- feasibility: Can a quantity be produced from current stock?
- production: Check + debit all lines + credit, one unit of work
"""

from fabrica.services.feasibility import Feasibility
from fabrica.services.ledger import Ledger
from fabrica.services.production import ProductionExecutor
from fabrica.services.recipes import RecipeBook

__all__ = [
    "Ledger",
    "RecipeBook",
    "Feasibility",
    "ProductionExecutor",
]
