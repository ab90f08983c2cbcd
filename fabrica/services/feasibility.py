"""
Feasibility service -- can this quantity be produced right now?

Read-only. evaluate() is a pure function of the recipe lines, the
requested quantity and a {code: quantity-on-hand} snapshot; check() builds
that snapshot from a single query so every line is judged against the same
moment of the ledger.
"""

import logging
from collections.abc import Mapping, Sequence
from decimal import Decimal

from django.db import transaction

from fabrica.exceptions import InsufficientStock, InvalidArgument, NotFound
from fabrica.models import Product, RecipeLine
from fabrica.quantities import ORDER_DIGITS, ORDER_PLACES, as_quantity
from fabrica.results import FeasibilityResult, MaterialRequirement

logger = logging.getLogger(__name__)


class Feasibility:
    """
    Verificação de viabilidade de produção.

    Usage:
        result = Feasibility.check("CHOC", 500)
        if not result.feasible:
            print(result.shortage.product, result.shortage.needed, result.shortage.available)
    """

    @classmethod
    def evaluate(
        cls,
        product: str,
        lines: Sequence[RecipeLine],
        quantity: Decimal,
        stock: Mapping[str, Decimal],
    ) -> FeasibilityResult:
        """
        Judge each line in order: needed = per-unit × quantity.

        Stops at the first line whose material has less than needed on
        hand (a material missing from `stock` counts as zero).
        """
        requirements = []
        for line in lines:
            needed = line.quantity * quantity
            requirement = MaterialRequirement(
                product=line.material_id,
                per_unit=line.quantity,
                needed=needed,
                available=stock.get(line.material_id, Decimal("0")),
            )
            requirements.append(requirement)

            if not requirement.sufficient:
                return FeasibilityResult(
                    product=product,
                    quantity=quantity,
                    feasible=False,
                    requirements=requirements,
                    shortage=requirement,
                )

        return FeasibilityResult(
            product=product,
            quantity=quantity,
            feasible=True,
            requirements=requirements,
        )

    @classmethod
    def check(cls, finished_code: str, quantity, lock: bool = False) -> FeasibilityResult:
        """
        Evaluate the recipe of finished_code against current stock.

        With lock=True the raw-material rows stay locked until the caller's
        transaction ends (the executor uses this); call it inside
        transaction.atomic() in that case.

        Raises:
            InvalidArgument: quantity <= 0, or recipe without lines
            NotFound: no recipe for finished_code
        """
        from fabrica.services.ledger import Ledger
        from fabrica.services.recipes import RecipeBook

        quantity = as_quantity(quantity, places=ORDER_PLACES, digits=ORDER_DIGITS)

        recipe = RecipeBook.get_by_finished_product(finished_code)
        if recipe is None:
            raise NotFound("RECIPE_NOT_FOUND", product=finished_code)

        lines = recipe.get_lines()
        if not lines:
            raise InvalidArgument("EMPTY_RECIPE", recipe=recipe.code)

        codes = [line.material_id for line in lines]
        if lock:
            stock = {code: p.quantity for code, p in Ledger.lock(codes).items()}
        else:
            with transaction.atomic():
                stock = dict(
                    Product.objects.filter(pk__in=codes).values_list("code", "quantity")
                )

        result = cls.evaluate(recipe.finished_good_id, lines, quantity, stock)

        if not result.feasible:
            logger.warning(
                f"Production of {quantity} x {recipe.finished_good_id} not feasible: "
                f"{result.shortage.product} needs {result.shortage.needed}, "
                f"has {result.shortage.available}",
                extra={
                    "product": recipe.finished_good_id,
                    "quantity": str(quantity),
                    "shortage": result.shortage.as_dict(),
                },
            )
        return result

    @classmethod
    def ensure(cls, finished_code: str, quantity, lock: bool = False) -> FeasibilityResult:
        """Like check(), but raises InsufficientStock for the first shortage."""
        result = cls.check(finished_code, quantity, lock=lock)
        if not result.feasible:
            raise_shortage(result)
        return result


def raise_shortage(result: FeasibilityResult):
    shortage = result.shortage
    raise InsufficientStock(
        product=shortage.product,
        needed=shortage.needed,
        available=shortage.available,
    )
