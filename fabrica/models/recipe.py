"""
Recipe and RecipeLine models.

Recipe = ficha técnica / BOM - defines how much of each raw material
one unit of a finished good consumes.

The recipe is an aggregate: it owns its lines, lines point at raw
materials by reference, and get_lines() loads them as one ordered
snapshot.
"""

from django.db import models
from django.utils.translation import gettext_lazy as _
from simple_history.models import HistoricalRecords

from fabrica.quantities import LINE_DIGITS, LINE_PLACES


class Recipe(models.Model):
    """
    Ficha técnica de um produto acabado.

    Uma por produto acabado (OneToOne). O código deriva do produto:
    FT-<código do produto>. Os componentes são substituídos por inteiro,
    nunca editados parcialmente (ver RecipeBook.define_or_replace).
    """

    code = models.CharField(
        unique=True,
        max_length=60,
        verbose_name=_("Código"),
        help_text=_("Derivado do produto acabado (ex: FT-CHOC)"),
    )
    finished_good = models.OneToOneField(
        "fabrica.Product",
        on_delete=models.CASCADE,
        related_name="recipe",
        verbose_name=_("Produto Acabado"),
    )
    notes = models.TextField(
        blank=True,
        verbose_name=_("Observações"),
    )

    # Timestamps
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("criado em"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("atualizado em"))

    # History
    history = HistoricalRecords()

    class Meta:
        db_table = "fabrica_recipe"
        verbose_name = _("Ficha Técnica")
        verbose_name_plural = _("Fichas Técnicas")
        ordering = ["code"]

    def __str__(self) -> str:
        return self.code

    def get_lines(self) -> list["RecipeLine"]:
        """Lines in recipe order, with their materials loaded."""
        return list(self.lines.select_related("material").order_by("position", "id"))

    @property
    def material_codes(self) -> list[str]:
        return [line.material_id for line in self.get_lines()]


class RecipeLine(models.Model):
    """
    Componente de uma ficha técnica.

    quantity = quantidade da matéria-prima para UMA unidade do produto acabado.
    """

    recipe = models.ForeignKey(
        Recipe,
        on_delete=models.CASCADE,
        related_name="lines",
        verbose_name=_("Ficha Técnica"),
    )
    material = models.ForeignKey(
        "fabrica.Product",
        on_delete=models.PROTECT,
        related_name="recipe_lines",
        verbose_name=_("Matéria-Prima"),
    )
    quantity = models.DecimalField(
        max_digits=LINE_DIGITS,
        decimal_places=LINE_PLACES,
        verbose_name=_("Quantidade por Unidade"),
    )
    position = models.PositiveSmallIntegerField(
        default=0,
        verbose_name=_("Ordem"),
    )

    class Meta:
        db_table = "fabrica_recipe_line"
        verbose_name = _("Componente")
        verbose_name_plural = _("Componentes")
        ordering = ["recipe", "position", "id"]
        unique_together = [["recipe", "material"]]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="fabrica_recipe_line_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.material_id} ({self.quantity})"
