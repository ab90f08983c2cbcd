"""
Recipe service -- define/replace, queries.

A recipe (ficha técnica) is replaced as a whole: define_or_replace() drops
every previous line and writes the new ones in the order given. Lines are
validated before anything is written, so a rejected definition leaves no
Product or Recipe behind.
"""

import logging
from collections.abc import Iterable, Mapping
from decimal import Decimal

from django.db import transaction

from fabrica.conf import get_recipe_code_prefix
from fabrica.exceptions import InvalidArgument, NotFound
from fabrica.identity import normalize_code
from fabrica.models import Product, ProductKind, Recipe, RecipeLine
from fabrica.quantities import LINE_DIGITS, LINE_PLACES, as_quantity

logger = logging.getLogger(__name__)


def recipe_code_for(product_code: str) -> str:
    """Recipe identity derived from its finished good: FT-<code>."""
    return f"{get_recipe_code_prefix()}{product_code}"


def _coerce_line(index: int, entry) -> tuple[str, Decimal]:
    """Accept {"material": code, "quantity": q} or (code, q)."""
    if isinstance(entry, Mapping):
        material = entry.get("material")
        quantity = entry.get("quantity")
    elif isinstance(entry, (tuple, list)) and len(entry) == 2:
        material, quantity = entry
    else:
        raise InvalidArgument("INVALID_COMPONENT", line=index + 1)

    if not isinstance(material, str) or not material.strip():
        raise InvalidArgument("INVALID_COMPONENT", line=index + 1, material=material)

    return material.strip(), as_quantity(
        quantity, places=LINE_PLACES, digits=LINE_DIGITS, field="quantity"
    )


class RecipeBook:
    """
    Recipe (ficha técnica) operations.

    Usage:
        RecipeBook.define_or_replace(
            "CHOC",
            [("ACUCAR", "0.1"), ("CACAU", "0.05")],
            name="Barra de Chocolate",
            unit="un",
        )
    """

    @classmethod
    def define_or_replace(
        cls,
        finished_code: str | None,
        lines: Iterable,
        name: str | None = None,
        description: str = "",
        unit: str = "un",
    ) -> Recipe:
        """
        Create or fully replace the recipe of a finished good.

        If the finished good does not exist it is created (FINISHED_GOOD)
        with the given metadata; an empty code gets an allocated one.

        Raises:
            InvalidArgument: no components, bad quantity, duplicate or
                self-referencing component, wrong category
            NotFound: a component does not exist
        """
        from fabrica.services.ledger import Ledger

        entries = list(lines or [])
        if not entries:
            raise InvalidArgument(
                "EMPTY_RECIPE", message="Recipe must have at least one component."
            )

        parsed = [_coerce_line(i, entry) for i, entry in enumerate(entries)]

        if isinstance(finished_code, str):
            finished_code = finished_code.strip()

        with transaction.atomic():
            finished = Ledger.find(finished_code) if finished_code else None

            if finished is not None and not finished.is_finished_good:
                raise InvalidArgument(
                    "WRONG_CATEGORY",
                    product=finished.code,
                    expected=ProductKind.FINISHED_GOOD.value,
                    actual=finished.kind,
                )

            if finished is not None:
                own_code = finished.code
            elif finished_code:
                own_code = normalize_code(finished_code)
            else:
                own_code = None

            components = cls._resolve_components(parsed, own_code)

            if finished is None:
                finished = Ledger.create(
                    own_code,
                    name or own_code or "",
                    description=description,
                    unit=unit,
                    kind=ProductKind.FINISHED_GOOD,
                )

            recipe, created = Recipe.objects.select_for_update().get_or_create(
                finished_good=finished,
                defaults={"code": recipe_code_for(finished.code)},
            )

            # Wholesale replace
            recipe.lines.all().delete()
            RecipeLine.objects.bulk_create(
                [
                    RecipeLine(
                        recipe=recipe,
                        material=material,
                        quantity=quantity,
                        position=position,
                    )
                    for position, (material, quantity) in enumerate(components)
                ]
            )
            recipe.save(update_fields=["updated_at"])

        logger.info(
            f"{'Defined' if created else 'Replaced'} recipe {recipe.code} "
            f"with {len(components)} components",
            extra={
                "recipe": recipe.code,
                "product": finished.code,
                "components": [m.code for m, _ in components],
            },
        )
        return recipe

    @classmethod
    def _resolve_components(
        cls, parsed: list[tuple[str, Decimal]], own_code: str | None
    ) -> list[tuple[Product, Decimal]]:
        """Each component must be an existing raw material, listed once."""
        from fabrica.services.ledger import Ledger

        seen: set[str] = set()
        components = []
        for index, (material_code, quantity) in enumerate(parsed):
            product = Ledger.find(material_code)
            resolved_code = product.code if product else material_code

            if own_code and resolved_code == own_code:
                raise InvalidArgument(
                    "SELF_REFERENCE", line=index + 1, product=resolved_code
                )
            if product is None:
                raise NotFound("PRODUCT_NOT_FOUND", line=index + 1, product=material_code)
            if product.code in seen:
                raise InvalidArgument(
                    "DUPLICATE_COMPONENT", line=index + 1, product=product.code
                )
            if not product.is_raw_material:
                raise InvalidArgument(
                    "WRONG_CATEGORY",
                    line=index + 1,
                    product=product.code,
                    expected=ProductKind.RAW_MATERIAL.value,
                    actual=product.kind,
                )
            seen.add(product.code)
            components.append((product, quantity))
        return components

    @classmethod
    def get_by_finished_product(cls, code: str) -> Recipe | None:
        """Recipe of a finished good, or None when none is defined yet."""
        from fabrica.services.ledger import Ledger

        product = Ledger.find(code) if code else None
        if product is None:
            return None
        return (
            Recipe.objects.filter(finished_good=product)
            .select_related("finished_good")
            .prefetch_related("lines__material")
            .first()
        )

    @classmethod
    def get(cls, code: str) -> Recipe:
        """Like get_by_finished_product(), but NotFound when absent."""
        recipe = cls.get_by_finished_product(code)
        if recipe is None:
            raise NotFound("RECIPE_NOT_FOUND", product=code)
        return recipe

    @classmethod
    def list_all(cls) -> list[Recipe]:
        return list(
            Recipe.objects.select_related("finished_good")
            .prefetch_related("lines__material")
            .order_by("code")
        )

    @classmethod
    def delete(cls, code: str) -> bool:
        """Delete the recipe of a finished good with its lines. False if none."""
        recipe = cls.get_by_finished_product(code)
        if recipe is None:
            return False
        with transaction.atomic():
            recipe.lines.all().delete()
            recipe.delete()
        logger.info(f"Deleted recipe {recipe.code}", extra={"product": code})
        return True
