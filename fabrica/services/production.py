"""
Production service -- check-then-commit as one unit of work.

execute() locks the finished good and every raw material of its recipe
(primary-key order), evaluates feasibility against the locked rows, then
debits each line and credits the finished good. Any failure inside the
block rolls back every movement already applied by the same call.
"""

import logging

from django.db import transaction

from fabrica.exceptions import FabError, InvalidArgument, NotFound
from fabrica.quantities import ORDER_DIGITS, ORDER_PLACES, as_quantity
from fabrica.results import ProductionResult
from fabrica.services.feasibility import Feasibility, raise_shortage
from fabrica.services.ledger import Ledger
from fabrica.services.recipes import RecipeBook
from fabrica.signals import production_executed

logger = logging.getLogger(__name__)


class ProductionExecutor:
    """
    Executa uma ordem de produção.

    Usage:
        result = ProductionExecutor.execute("CHOC", 500)
        result.consumed  # [MaterialRequirement(product="ACUCAR", needed=50, ...), ...]
    """

    @classmethod
    def execute(cls, finished_code: str, quantity) -> ProductionResult:
        """
        Convert raw materials into quantity units of finished_code.

        Raises:
            InvalidArgument: quantity <= 0, or recipe without lines
            NotFound: no recipe for finished_code
            InsufficientStock: first line short of stock (nothing changes)
        """
        quantity = as_quantity(quantity, places=ORDER_PLACES, digits=ORDER_DIGITS)

        recipe = RecipeBook.get_by_finished_product(finished_code)
        if recipe is None:
            raise NotFound("RECIPE_NOT_FOUND", product=finished_code)

        product_code = recipe.finished_good_id
        applied = 0

        try:
            with transaction.atomic():
                # Re-read the recipe inside the transaction
                recipe = RecipeBook.get(product_code)
                lines = recipe.get_lines()
                if not lines:
                    raise InvalidArgument("EMPTY_RECIPE", recipe=recipe.code)

                locked = Ledger.lock([product_code] + [line.material_id for line in lines])
                stock = {code: p.quantity for code, p in locked.items()}

                result = Feasibility.evaluate(product_code, lines, quantity, stock)
                if not result.feasible:
                    raise_shortage(result)

                for requirement in result.requirements:
                    Ledger.debit(requirement.product, requirement.needed)
                    applied += 1

                Ledger.credit(product_code, quantity)
        except FabError as e:
            if applied:
                logger.error(
                    f"Production of {quantity} x {product_code} rolled back "
                    f"after {applied} debits: {e}",
                    extra={"product": product_code, "quantity": str(quantity), "error": e.code},
                )
            else:
                logger.warning(
                    f"Production of {quantity} x {product_code} aborted: {e}",
                    extra={"product": product_code, "quantity": str(quantity), "error": e.code},
                )
            raise
        except Exception:
            logger.exception(
                f"Production of {quantity} x {product_code} failed, rolled back",
                extra={"product": product_code, "quantity": str(quantity)},
            )
            raise

        logger.info(
            f"Produced {quantity} x {product_code} consuming "
            + ", ".join(f"{r.needed} {r.product}" for r in result.requirements),
            extra={
                "product": product_code,
                "quantity": str(quantity),
                "consumed": [r.as_dict() for r in result.requirements],
            },
        )

        production_executed.send(
            sender=cls,
            product=product_code,
            quantity=quantity,
            consumed=result.requirements,
        )

        return ProductionResult(
            product=product_code,
            quantity=quantity,
            consumed=result.requirements,
        )
