"""
Fabrica Service - Thin wrapper over services and models.

Lógica de negócio está nos services (Ledger, RecipeBook, Feasibility,
ProductionExecutor) e no modelo ProductionOrder. Esta classe apenas
facilita o uso.

Usage:
    from fabrica import fab, FabError

    # Stock
    sugar = fab.create_product(None, "Açúcar", unit="kg")  # code "01"
    fab.receive(sugar.code, 100)

    # Recipe + production
    fab.define_recipe("CHOC", [(sugar.code, "0.1")], name="Barra de Chocolate")
    fab.check_feasibility("CHOC", 500)
    fab.execute("CHOC", 500)

    # Order record
    order = fab.order("CHOC", 500, created_by="user:joao")
    fab.set_order_status(order.code, "APPROVED")
    fab.set_order_status(order.code, "EXECUTED")  # runs production
"""

import logging
from decimal import Decimal

from django.db import transaction

from fabrica.exceptions import Conflict, InvalidArgument, NotFound
from fabrica.identity import normalize_code
from fabrica.models import OrderStatus, Product, ProductionOrder, ProductKind, Recipe
from fabrica.quantities import ORDER_DIGITS, ORDER_PLACES, as_quantity
from fabrica.results import FeasibilityResult, ProductionResult
from fabrica.services import Feasibility, Ledger, ProductionExecutor, RecipeBook

logger = logging.getLogger(__name__)


class Fab:
    """
    Main API for Fabrica (thin wrapper).

    All methods are classmethods; `from fabrica import fab` gives the class.
    """

    # ══════════════════════════════════════════════════════════════
    # PRODUCTS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def create_product(
        cls,
        code: str | None,
        name: str,
        description: str = "",
        unit: str = "un",
        kind: str = ProductKind.RAW_MATERIAL,
    ) -> Product:
        """Cadastra produto com estoque zero (código vazio → próximo livre)."""
        return Ledger.create(code, name, description=description, unit=unit, kind=kind)

    @classmethod
    def receive(cls, code: str, quantity: Decimal | int | float | str) -> Product:
        """Dar entrada no estoque."""
        return Ledger.credit(code, quantity)

    @classmethod
    def issue(cls, code: str, quantity: Decimal | int | float | str) -> Product:
        """Dar baixa no estoque."""
        return Ledger.debit(code, quantity)

    @classmethod
    def delete_product(cls, code: str) -> None:
        Ledger.delete(code)

    @classmethod
    def get_product(cls, code: str) -> Product:
        return Ledger.get(code)

    @classmethod
    def list_products(cls, kind: str | None = None) -> list[Product]:
        return Ledger.list_all(kind)

    # ══════════════════════════════════════════════════════════════
    # RECIPES
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def define_recipe(
        cls,
        code: str | None,
        lines,
        name: str | None = None,
        description: str = "",
        unit: str = "un",
    ) -> Recipe:
        """
        Define (ou substitui) a ficha técnica de um produto acabado.

        Args:
            code: Produto acabado (criado se não existir)
            lines: [(material, quantidade por unidade), ...] ou
                   [{"material": ..., "quantity": ...}, ...]
            name, description, unit: usados só se o produto for criado

        Example:
            fab.define_recipe("CHOC", [("01", "0.1"), ("02", "0.05")])
        """
        return RecipeBook.define_or_replace(
            code, lines, name=name, description=description, unit=unit
        )

    @classmethod
    def get_recipe(cls, code: str) -> Recipe:
        return RecipeBook.get(code)

    @classmethod
    def find_recipe(cls, code: str) -> Recipe | None:
        return RecipeBook.get_by_finished_product(code)

    @classmethod
    def list_recipes(cls) -> list[Recipe]:
        return RecipeBook.list_all()

    # ══════════════════════════════════════════════════════════════
    # PRODUCTION
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def check_feasibility(cls, code: str, quantity) -> FeasibilityResult:
        """Verifica se há estoque para produzir (não altera nada)."""
        return Feasibility.check(code, quantity)

    @classmethod
    def execute(cls, code: str, quantity) -> ProductionResult:
        """Produz: baixa das matérias-primas + entrada do acabado, tudo ou nada."""
        return ProductionExecutor.execute(code, quantity)

    # ══════════════════════════════════════════════════════════════
    # ORDERS
    # ══════════════════════════════════════════════════════════════

    @classmethod
    def order(
        cls,
        code: str,
        quantity,
        notes: str = "",
        created_by: str = "",
    ) -> ProductionOrder:
        """
        Registra ordem de produção (PENDING).

        Raises:
            InvalidArgument: quantity <= 0, or product is not a finished good
            NotFound: unknown product
        """
        quantity = as_quantity(quantity, places=ORDER_PLACES, digits=ORDER_DIGITS)
        product = Ledger.get(code)

        if not product.is_finished_good:
            raise InvalidArgument(
                "WRONG_CATEGORY",
                product=product.code,
                expected=ProductKind.FINISHED_GOOD.value,
                actual=product.kind,
            )

        order = ProductionOrder.objects.create(
            product=product,
            quantity=quantity,
            notes=notes or "",
            created_by=created_by or "",
        )

        logger.info(
            f"Created ProductionOrder {order.code}: {quantity} x {product.code}",
            extra={"order": order.code, "product": product.code, "quantity": str(quantity)},
        )
        return order

    @classmethod
    def get_order(cls, order_code: str) -> ProductionOrder:
        order = (
            ProductionOrder.objects.select_related("product")
            .filter(code=order_code)
            .first()
        )
        if order is None:
            raise NotFound("ORDER_NOT_FOUND", order=order_code)
        return order

    @classmethod
    def set_order_status(cls, order_code: str, status, user=None) -> ProductionOrder:
        """
        Muda o status da ordem ("APPROVED", "EXECUTED", ...).

        EXECUTED roda a produção; se faltar estoque a ordem continua APPROVED
        e InsufficientStock é propagado.
        """
        target = OrderStatus.parse(status)
        return cls.get_order(order_code).transition(target, user=user)

    @classmethod
    def list_orders(cls, status=None, product: str | None = None) -> list[ProductionOrder]:
        qs = ProductionOrder.objects.select_related("product")
        if status:
            qs = qs.filter(status=OrderStatus.parse(status))
        if product:
            try:
                product = normalize_code(product)
            except InvalidArgument:
                return []
            qs = qs.filter(product_id=product)
        return list(qs.order_by("-created_at", "-id"))

    @classmethod
    def delete_order(cls, order_code: str) -> None:
        """Remove o registro. Ordens executadas ficam (o estoque já mudou)."""
        with transaction.atomic():
            order = cls.get_order(order_code)
            if order.status == OrderStatus.EXECUTED:
                raise Conflict("ORDER_EXECUTED", order=order.code)
            order.delete()

        logger.info(f"Deleted ProductionOrder {order_code}", extra={"order": order_code})


fab = Fab
