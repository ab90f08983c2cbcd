"""
Tests for the recipe book (fabrica.services.recipes).

Verifies recipe validation, wholesale replace and that rejected
definitions leave nothing behind.
"""

from decimal import Decimal

import pytest

from fabrica.exceptions import InvalidArgument, NotFound
from fabrica.models import Product, ProductKind, Recipe, RecipeLine
from fabrica.services import Ledger, RecipeBook


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def materials(db):
    for code, name, unit in [
        ("SUGAR", "Açúcar", "kg"),
        ("COCOA", "Cacau", "kg"),
        ("MILK", "Leite", "L"),
    ]:
        Ledger.create(code, name, unit=unit)
    return ["SUGAR", "COCOA", "MILK"]


@pytest.fixture
def chocolate_recipe(materials):
    return RecipeBook.define_or_replace(
        "CHOC",
        [("SUGAR", "0.1"), ("COCOA", "0.05"), ("MILK", "0.02")],
        name="Barra de Chocolate",
        description="Ao leite",
        unit="un",
    )


# ═══════════════════════════════════════════════════════════════════
# Define
# ═══════════════════════════════════════════════════════════════════


class TestDefine:
    """Tests for RecipeBook.define_or_replace()."""

    def test_creates_finished_good_and_recipe(self, chocolate_recipe):
        product = Product.objects.get(pk="CHOC")

        assert product.kind == ProductKind.FINISHED_GOOD
        assert product.name == "Barra de Chocolate"
        assert product.description == "Ao leite"
        assert product.quantity == Decimal("0")
        assert chocolate_recipe.code == "FT-CHOC"
        assert chocolate_recipe.finished_good_id == "CHOC"

    def test_lines_in_supplied_order(self, chocolate_recipe):
        lines = chocolate_recipe.get_lines()

        assert [line.material_id for line in lines] == ["SUGAR", "COCOA", "MILK"]
        assert [line.quantity for line in lines] == [
            Decimal("0.1"),
            Decimal("0.05"),
            Decimal("0.02"),
        ]
        assert chocolate_recipe.material_codes == ["SUGAR", "COCOA", "MILK"]

    def test_accepts_mapping_lines(self, materials):
        recipe = RecipeBook.define_or_replace(
            "CHOC",
            [{"material": "SUGAR", "quantity": Decimal("1")}],
            name="Choc",
        )

        assert recipe.get_lines()[0].material_id == "SUGAR"

    def test_uses_existing_finished_good(self, materials):
        Ledger.create("CHOC", "Já existe", kind=ProductKind.FINISHED_GOOD)

        RecipeBook.define_or_replace("CHOC", [("SUGAR", 1)], name="Ignored")

        assert Product.objects.get(pk="CHOC").name == "Já existe"
        assert Product.objects.filter(kind=ProductKind.FINISHED_GOOD).count() == 1

    def test_allocates_code_when_empty(self, materials):
        recipe = RecipeBook.define_or_replace(None, [("SUGAR", 1)], name="Sem código")

        assert recipe.finished_good_id == "01"
        assert recipe.code == "FT-01"

    def test_numeric_finished_code_normalized(self, materials):
        recipe = RecipeBook.define_or_replace("3", [("SUGAR", 1)], name="Três")

        assert recipe.finished_good_id == "03"
        assert RecipeBook.get_by_finished_product("3").pk == recipe.pk


# ═══════════════════════════════════════════════════════════════════
# Replace
# ═══════════════════════════════════════════════════════════════════


class TestReplace:
    """Redefining a recipe discards every previous line."""

    def test_replace_is_wholesale(self, chocolate_recipe):
        recipe = RecipeBook.define_or_replace("CHOC", [("MILK", "0.5"), ("SUGAR", "0.2")])

        assert recipe.pk == chocolate_recipe.pk
        assert [(line.material_id, line.quantity) for line in recipe.get_lines()] == [
            ("MILK", Decimal("0.5")),
            ("SUGAR", Decimal("0.2")),
        ]
        assert RecipeLine.objects.filter(recipe=recipe).count() == 2
        assert Recipe.objects.count() == 1

    def test_replace_keeps_product_metadata(self, chocolate_recipe):
        RecipeBook.define_or_replace("CHOC", [("MILK", 1)], name="Novo nome")

        assert Product.objects.get(pk="CHOC").name == "Barra de Chocolate"

    def test_failed_replace_keeps_old_lines(self, chocolate_recipe):
        with pytest.raises(NotFound):
            RecipeBook.define_or_replace("CHOC", [("SUGAR", 1), ("GHOST", 1)])

        assert chocolate_recipe.material_codes == ["SUGAR", "COCOA", "MILK"]

    def test_history_tracks_recipe(self, chocolate_recipe):
        before = chocolate_recipe.history.count()

        RecipeBook.define_or_replace("CHOC", [("MILK", 1)])

        assert chocolate_recipe.history.count() == before + 1


# ═══════════════════════════════════════════════════════════════════
# Validation
# ═══════════════════════════════════════════════════════════════════


class TestValidation:
    """Rejected definitions write nothing."""

    def assert_nothing_created(self):
        assert not Product.objects.filter(pk="NEW").exists()
        assert not Recipe.objects.filter(finished_good_id="NEW").exists()
        assert not RecipeLine.objects.filter(recipe__finished_good_id="NEW").exists()

    @pytest.mark.parametrize("lines", [[], None, ()])
    def test_empty_components(self, materials, lines):
        with pytest.raises(InvalidArgument) as exc:
            RecipeBook.define_or_replace("NEW", lines, name="Novo")

        assert exc.value.code == "EMPTY_RECIPE"
        assert "at least one component" in exc.value.details["message"]
        self.assert_nothing_created()

    @pytest.mark.parametrize("quantity", [0, "-1", None, "abc"])
    def test_non_positive_quantity(self, materials, quantity):
        with pytest.raises(InvalidArgument) as exc:
            RecipeBook.define_or_replace("NEW", [("SUGAR", quantity)], name="Novo")

        assert exc.value.code == "INVALID_QUANTITY"
        self.assert_nothing_created()

    def test_too_precise_quantity(self, materials):
        with pytest.raises(InvalidArgument) as exc:
            RecipeBook.define_or_replace("NEW", [("SUGAR", "0.0001")], name="Novo")

        assert exc.value.code == "QUANTITY_TOO_PRECISE"
        self.assert_nothing_created()

    @pytest.mark.parametrize("entry", [("", 1), ("  ", 1), (None, 1), ("SUGAR",), "SUGAR"])
    def test_malformed_component(self, materials, entry):
        with pytest.raises(InvalidArgument) as exc:
            RecipeBook.define_or_replace("NEW", [entry], name="Novo")

        assert exc.value.code == "INVALID_COMPONENT"
        self.assert_nothing_created()

    def test_duplicate_component(self, materials):
        with pytest.raises(InvalidArgument) as exc:
            RecipeBook.define_or_replace(
                "NEW", [("SUGAR", 1), ("COCOA", 1), ("SUGAR", 2)], name="Novo"
            )

        assert exc.value.code == "DUPLICATE_COMPONENT"
        assert exc.value.details["line"] == 3
        self.assert_nothing_created()

    def test_self_reference_new_product(self, materials):
        with pytest.raises(InvalidArgument) as exc:
            RecipeBook.define_or_replace("NEW", [("SUGAR", 1), ("NEW", 1)], name="Novo")

        assert exc.value.code == "SELF_REFERENCE"
        self.assert_nothing_created()

    def test_self_reference_existing_product(self, chocolate_recipe):
        with pytest.raises(InvalidArgument) as exc:
            RecipeBook.define_or_replace("CHOC", [("CHOC", 1)])

        assert exc.value.code == "SELF_REFERENCE"

    def test_unknown_component(self, materials):
        with pytest.raises(NotFound) as exc:
            RecipeBook.define_or_replace("NEW", [("GHOST", 1)], name="Novo")

        assert exc.value.code == "PRODUCT_NOT_FOUND"
        self.assert_nothing_created()

    def test_finished_good_as_component(self, chocolate_recipe):
        with pytest.raises(InvalidArgument) as exc:
            RecipeBook.define_or_replace("NEW", [("CHOC", 1)], name="Novo")

        assert exc.value.code == "WRONG_CATEGORY"
        self.assert_nothing_created()
        assert Recipe.objects.count() == 1
        assert chocolate_recipe.material_codes == ["SUGAR", "COCOA", "MILK"]

    def test_raw_material_cannot_own_recipe(self, materials):
        with pytest.raises(InvalidArgument) as exc:
            RecipeBook.define_or_replace("SUGAR", [("COCOA", 1)])

        assert exc.value.code == "WRONG_CATEGORY"
        assert Recipe.objects.count() == 0


# ═══════════════════════════════════════════════════════════════════
# Queries
# ═══════════════════════════════════════════════════════════════════


class TestQueries:
    """Tests for get_by_finished_product(), get(), list_all(), delete()."""

    def test_absent_recipe_is_none(self, materials):
        assert RecipeBook.get_by_finished_product("SUGAR") is None
        assert RecipeBook.get_by_finished_product("GHOST") is None

    def test_get_raises_when_absent(self, materials):
        with pytest.raises(NotFound) as exc:
            RecipeBook.get("GHOST")

        assert exc.value.code == "RECIPE_NOT_FOUND"

    def test_list_all(self, chocolate_recipe):
        RecipeBook.define_or_replace("BROWNIE", [("COCOA", "0.2")], name="Brownie")

        assert [r.code for r in RecipeBook.list_all()] == ["FT-BROWNIE", "FT-CHOC"]

    def test_delete(self, chocolate_recipe):
        assert RecipeBook.delete("CHOC") is True
        assert RecipeBook.delete("CHOC") is False

        assert Recipe.objects.count() == 0
        assert RecipeLine.objects.count() == 0
        # The finished good itself stays
        assert Product.objects.filter(pk="CHOC").exists()
