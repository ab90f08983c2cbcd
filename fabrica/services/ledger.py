"""
Ledger service -- create, credit, debit, delete, queries.

The ledger is the only writer of Product.quantity. Every mutation runs in
transaction.atomic() and re-reads the row under SELECT FOR UPDATE before
writing, so the quantity it checks is the quantity it replaces.

All methods are @classmethod, like the other services, so they compose
into Fab without instantiation.
"""

import logging
from decimal import Decimal

from django.db import IntegrityError, transaction
from django.db.models import ProtectedError

from fabrica.exceptions import (
    Conflict,
    DuplicateIdentity,
    InsufficientStock,
    InvalidArgument,
    NotFound,
)
from fabrica.identity import next_product_code, normalize_code
from fabrica.models import Product, ProductKind, RecipeLine
from fabrica.quantities import STOCK_DIGITS, STOCK_PLACES, as_quantity, fits

logger = logging.getLogger(__name__)


class Ledger:
    """
    Product stock operations.

    Usage:
        Ledger.create("01", "Açúcar", unit="kg")
        Ledger.credit("01", Decimal("100"))
        Ledger.debit("01", Decimal("10"))
    """

    # ══════════════════════════════════════════════════════════════
    # LIFECYCLE
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create(
        cls,
        code: str | None,
        name: str,
        description: str = "",
        unit: str = "un",
        kind: str = ProductKind.RAW_MATERIAL,
    ) -> Product:
        """
        Create a product with quantity 0.

        An empty code gets the next numeric code from the allocator.

        Raises:
            InvalidArgument: malformed code, empty name or unknown kind
            DuplicateIdentity: code already exists
        """
        if kind not in ProductKind.values:
            raise InvalidArgument("INVALID_KIND", kind=kind, allowed=", ".join(ProductKind.values))
        if not name or not str(name).strip():
            raise InvalidArgument("INVALID_NAME", name=name)

        with transaction.atomic():
            if code is None or (isinstance(code, str) and not code.strip()):
                code = next_product_code()
            else:
                code = normalize_code(code)

            if Product.objects.filter(pk=code).exists():
                raise DuplicateIdentity("PRODUCT_EXISTS", product=code)

            try:
                # Savepoint: a concurrent insert of the same code must not
                # poison the caller's transaction
                with transaction.atomic():
                    product = Product(
                        code=code,
                        name=str(name).strip(),
                        description=description or "",
                        unit=unit or "un",
                        kind=kind,
                        quantity=Decimal("0"),
                    )
                    product.save(force_insert=True)
            except IntegrityError:
                raise DuplicateIdentity("PRODUCT_EXISTS", product=code)

        logger.info(
            f"Created product {code} ({kind})",
            extra={"product": code, "kind": kind},
        )
        return product

    @classmethod
    def delete(cls, code: str) -> None:
        """
        Delete a product.

        Raw material referenced by any recipe line → Conflict.
        Finished good with a recipe → recipe and its lines go first.
        """
        from fabrica.services.recipes import RecipeBook

        with transaction.atomic():
            product = cls._get_for_update(code)

            if product.is_raw_material:
                recipes = sorted(
                    RecipeLine.objects.filter(material=product)
                    .values_list("recipe__code", flat=True)
                    .distinct()
                )
                if recipes:
                    raise Conflict(
                        "MATERIAL_IN_USE", product=product.code, recipes=", ".join(recipes)
                    )

            if product.is_finished_good:
                RecipeBook.delete(product.code)

            try:
                product.delete()
            except ProtectedError as e:
                # A recipe line may have appeared since the check above
                if any(isinstance(obj, RecipeLine) for obj in e.protected_objects):
                    raise Conflict("MATERIAL_IN_USE", product=product.code)
                raise Conflict("PRODUCT_HAS_ORDERS", product=product.code)

        logger.info(f"Deleted product {code}", extra={"product": code})

    # ══════════════════════════════════════════════════════════════
    # MOVEMENTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def credit(cls, code: str, amount) -> Product:
        """
        Dar entrada: add amount to quantity-on-hand.

        Raises:
            InvalidArgument: amount <= 0, or the new total overflows the column
            NotFound: unknown product
        """
        amount = as_quantity(amount, places=STOCK_PLACES, field="amount")

        with transaction.atomic():
            product = cls._get_for_update(code)
            total = product.quantity + amount
            if not fits(total, STOCK_DIGITS, STOCK_PLACES):
                raise InvalidArgument(
                    "QUANTITY_TOO_LARGE",
                    product=product.code,
                    amount=amount,
                    available=product.quantity,
                )
            product.quantity = total
            product.save(update_fields=["quantity", "updated_at"])

        logger.info(
            f"Credited {amount} to {product.code}, now {product.quantity}",
            extra={"product": product.code, "amount": str(amount), "quantity": str(product.quantity)},
        )
        return product

    @classmethod
    def debit(cls, code: str, amount) -> Product:
        """
        Dar baixa: remove amount from quantity-on-hand.

        Raises:
            InvalidArgument: amount <= 0
            NotFound: unknown product
            InsufficientStock: quantity-on-hand < amount (nothing changes)
        """
        amount = as_quantity(amount, places=STOCK_PLACES, field="amount")

        with transaction.atomic():
            product = cls._get_for_update(code)

            if product.quantity < amount:
                raise InsufficientStock(
                    product=product.code,
                    needed=amount,
                    available=product.quantity,
                )

            product.quantity = product.quantity - amount
            try:
                with transaction.atomic():
                    product.save(update_fields=["quantity", "updated_at"])
            except IntegrityError:
                # quantity >= 0 constraint: someone else got there first
                current = Product.objects.get(pk=product.pk).quantity
                raise InsufficientStock(
                    product=product.code, needed=amount, available=current
                )

        logger.info(
            f"Debited {amount} from {product.code}, now {product.quantity}",
            extra={"product": product.code, "amount": str(amount), "quantity": str(product.quantity)},
        )
        return product

    # ══════════════════════════════════════════════════════════════
    # QUERIES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def find(cls, code: str) -> Product | None:
        """Product by code, or None."""
        if not isinstance(code, str) or not code.strip():
            return None
        try:
            code = normalize_code(code)
        except InvalidArgument:
            return None
        return Product.objects.filter(pk=code).first()

    @classmethod
    def get(cls, code: str) -> Product:
        """Product by code, or NotFound."""
        product = cls.find(code)
        if product is None:
            raise NotFound("PRODUCT_NOT_FOUND", product=code)
        return product

    @classmethod
    def list_all(cls, kind: str | None = None) -> list[Product]:
        """All products ordered by code, optionally of one kind."""
        qs = Product.objects.all()
        if kind:
            if kind not in ProductKind.values:
                raise InvalidArgument("INVALID_KIND", kind=kind)
            qs = qs.filter(kind=kind)
        return list(qs.order_by("code"))

    @classmethod
    def lock(cls, codes) -> dict[str, Product]:
        """
        Lock the given products for the rest of the current transaction.

        Locks are taken in primary-key order so that two transactions
        touching overlapping products never wait on each other in a cycle.
        Must be called inside transaction.atomic(). Missing codes are
        simply absent from the result.
        """
        ordered = sorted(set(codes))
        return {
            p.code: p
            for p in Product.objects.select_for_update().filter(pk__in=ordered).order_by("pk")
        }

    # ══════════════════════════════════════════════════════════════
    # INTERNALS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def _get_for_update(cls, code: str) -> Product:
        if not isinstance(code, str) or not code.strip():
            raise InvalidArgument("INVALID_CODE", product=code)
        try:
            normalized = normalize_code(code)
        except InvalidArgument:
            raise NotFound("PRODUCT_NOT_FOUND", product=code)
        product = Product.objects.select_for_update().filter(pk=normalized).first()
        if product is None:
            raise NotFound("PRODUCT_NOT_FOUND", product=code)
        return product
