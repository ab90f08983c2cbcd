"""
Product model.

Product = stock-keeping unit with its quantity-on-hand.

Quantity is written ONLY through fabrica.services.ledger.Ledger, which
locks the row and enforces quantity >= 0. The database CheckConstraint is
the last line of defense.
"""

from decimal import Decimal

from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from fabrica.quantities import STOCK_DIGITS, STOCK_PLACES


class ProductKind(models.TextChoices):
    """Role of a product in production."""

    RAW_MATERIAL = "raw_material", _("Matéria-Prima")
    FINISHED_GOOD = "finished_good", _("Produto Acabado")


class Product(models.Model):
    """
    Item de estoque (matéria-prima ou produto acabado).

    A identidade (code) é atribuída por humanos ou pelo alocador
    (fabrica.identity) e nunca muda depois de criada.
    """

    code = models.CharField(
        primary_key=True,
        max_length=50,
        verbose_name=_("Código"),
        help_text=_("Identificador único (ex: 01, ACUCAR)"),
    )
    name = models.CharField(
        max_length=200,
        verbose_name=_("Nome"),
    )
    description = models.TextField(
        blank=True,
        verbose_name=_("Descrição"),
    )
    unit = models.CharField(
        max_length=10,
        default="un",
        verbose_name=_("Unidade"),
        help_text=_("kg, L, un, g..."),
    )
    kind = models.CharField(
        max_length=20,
        choices=ProductKind.choices,
        default=ProductKind.RAW_MATERIAL,
        db_index=True,
        verbose_name=_("Tipo"),
    )
    quantity = models.DecimalField(
        max_digits=STOCK_DIGITS,
        decimal_places=STOCK_PLACES,
        default=Decimal("0"),
        verbose_name=_("Quantidade em Estoque"),
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("criado em"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("atualizado em"))

    # History (every ledger movement is a save)
    history = HistoricalRecords()

    class Meta:
        db_table = "fabrica_product"
        verbose_name = _("Produto")
        verbose_name_plural = _("Produtos")
        ordering = ["code"]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gte=0),
                name="fabrica_product_quantity_non_negative",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.code} - {self.name}"

    @property
    def is_raw_material(self) -> bool:
        return self.kind == ProductKind.RAW_MATERIAL

    @property
    def is_finished_good(self) -> bool:
        return self.kind == ProductKind.FINISHED_GOOD
