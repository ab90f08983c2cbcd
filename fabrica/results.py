"""
Fabrica Result Types.

Structured results for feasibility checks and production runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from decimal import Decimal


@dataclass(frozen=True)
class MaterialRequirement:
    """Quanto de uma matéria-prima a ordem precisa, e quanto há."""

    product: str
    per_unit: Decimal
    needed: Decimal
    available: Decimal

    @property
    def sufficient(self) -> bool:
        return self.available >= self.needed

    @property
    def shortage(self) -> Decimal:
        return max(Decimal("0"), self.needed - self.available)

    def as_dict(self) -> dict:
        return {
            "product": self.product,
            "per_unit": str(self.per_unit),
            "needed": str(self.needed),
            "available": str(self.available),
            "sufficient": self.sufficient,
        }


@dataclass(frozen=True)
class FeasibilityResult:
    """
    Resultado da verificação de viabilidade.

    Se feasible=True: requirements lista todas as linhas da receita.
    Se feasible=False: shortage é a primeira linha sem estoque; a
    avaliação para nela, então requirements termina nela.
    """

    product: str
    quantity: Decimal
    feasible: bool
    requirements: list[MaterialRequirement] = field(default_factory=list)
    shortage: MaterialRequirement | None = None

    def as_dict(self) -> dict:
        return {
            "product": self.product,
            "quantity": str(self.quantity),
            "feasible": self.feasible,
            "requirements": [r.as_dict() for r in self.requirements],
            "shortage": self.shortage.as_dict() if self.shortage else None,
        }


@dataclass(frozen=True)
class ProductionResult:
    """Resultado de uma ordem executada: o que saiu e o que entrou."""

    product: str
    quantity: Decimal
    consumed: list[MaterialRequirement] = field(default_factory=list)

    def as_dict(self) -> dict:
        return {
            "product": self.product,
            "quantity": str(self.quantity),
            "consumed": [
                {"product": c.product, "quantity": str(c.needed)} for c in self.consumed
            ],
        }
