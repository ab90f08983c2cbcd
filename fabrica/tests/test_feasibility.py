"""
Tests for the feasibility checker (fabrica.services.feasibility).

Verifies per-line arithmetic, first-shortage reporting and that checking
never touches the ledger.
"""

from decimal import Decimal
from types import SimpleNamespace

import pytest
from django.db import transaction

from fabrica.exceptions import InsufficientStock, InvalidArgument, NotFound
from fabrica.models import Product
from fabrica.services import Feasibility, Ledger, RecipeBook


# ═══════════════════════════════════════════════════════════════════
# Fixtures
# ═══════════════════════════════════════════════════════════════════


@pytest.fixture
def stocked(db):
    for code, name, qty in [
        ("SUGAR", "Açúcar", "100"),
        ("COCOA", "Cacau", "50"),
        ("MILK", "Leite", "200"),
    ]:
        Ledger.create(code, name)
        Ledger.credit(code, qty)

    RecipeBook.define_or_replace(
        "CHOC",
        [("SUGAR", "0.1"), ("COCOA", "0.05"), ("MILK", "0.02")],
        name="Barra de Chocolate",
    )


def snapshot():
    return dict(Product.objects.values_list("code", "quantity"))


def line(material, quantity):
    return SimpleNamespace(material_id=material, quantity=Decimal(quantity))


# ═══════════════════════════════════════════════════════════════════
# evaluate (pure)
# ═══════════════════════════════════════════════════════════════════


class TestEvaluate:
    """Tests for Feasibility.evaluate()."""

    def test_all_lines_covered(self):
        result = Feasibility.evaluate(
            "P",
            [line("A", "2"), line("B", "0.5")],
            Decimal("10"),
            {"A": Decimal("20"), "B": Decimal("6")},
        )

        assert result.feasible
        assert result.shortage is None
        assert [(r.product, r.needed) for r in result.requirements] == [
            ("A", Decimal("20")),
            ("B", Decimal("5")),
        ]

    def test_stops_at_first_shortage(self):
        result = Feasibility.evaluate(
            "P",
            [line("A", "1"), line("B", "3"), line("C", "100")],
            Decimal("10"),
            {"A": Decimal("10"), "B": Decimal("29"), "C": Decimal("0")},
        )

        assert not result.feasible
        assert result.shortage.product == "B"
        assert result.shortage.needed == Decimal("30")
        assert result.shortage.available == Decimal("29")
        assert result.shortage.shortage == Decimal("1")
        # C is never evaluated
        assert [r.product for r in result.requirements] == ["A", "B"]

    def test_missing_material_counts_as_zero(self):
        result = Feasibility.evaluate("P", [line("A", "1")], Decimal("1"), {})

        assert not result.feasible
        assert result.shortage.available == Decimal("0")

    def test_as_dict(self):
        result = Feasibility.evaluate(
            "P", [line("A", "1")], Decimal("2"), {"A": Decimal("1")}
        )

        data = result.as_dict()
        assert data["feasible"] is False
        assert data["shortage"] == {
            "product": "A",
            "per_unit": "1",
            "needed": "2",
            "available": "1",
            "sufficient": False,
        }


# ═══════════════════════════════════════════════════════════════════
# check / ensure
# ═══════════════════════════════════════════════════════════════════


class TestCheck:
    """Tests for Feasibility.check() and ensure()."""

    def test_feasible(self, stocked):
        result = Feasibility.check("CHOC", 500)

        assert result.feasible
        assert result.product == "CHOC"
        assert [(r.product, r.needed) for r in result.requirements] == [
            ("SUGAR", Decimal("50")),
            ("COCOA", Decimal("25")),
            ("MILK", Decimal("10")),
        ]

    def test_infeasible_names_first_short_material(self, stocked):
        result = Feasibility.check("CHOC", 1001)

        assert not result.feasible
        assert result.shortage.product == "SUGAR"
        assert result.shortage.needed == Decimal("100.1")
        assert result.shortage.available == Decimal("100")

    def test_exact_stock_is_feasible(self, stocked):
        assert Feasibility.check("CHOC", 1000).feasible

    def test_check_never_mutates(self, stocked):
        before = snapshot()

        Feasibility.check("CHOC", 500)
        Feasibility.check("CHOC", 10**6)
        with pytest.raises(InsufficientStock):
            Feasibility.ensure("CHOC", 10**6)

        assert snapshot() == before

    def test_lock_inside_transaction(self, stocked):
        with transaction.atomic():
            result = Feasibility.check("CHOC", 500, lock=True)

        assert result.feasible

    def test_ensure_raises(self, stocked):
        with pytest.raises(InsufficientStock) as exc:
            Feasibility.ensure("CHOC", 2000)

        assert exc.value.product == "SUGAR"
        assert exc.value.needed == Decimal("200")
        assert exc.value.available == Decimal("100")

    def test_ensure_returns_result(self, stocked):
        assert Feasibility.ensure("CHOC", 1).feasible

    def test_no_recipe(self, stocked):
        with pytest.raises(NotFound) as exc:
            Feasibility.check("SUGAR", 1)

        assert exc.value.code == "RECIPE_NOT_FOUND"

    @pytest.mark.parametrize("quantity", [0, -5, None, "0.0001"])
    def test_invalid_quantity(self, stocked, quantity):
        with pytest.raises(InvalidArgument):
            Feasibility.check("CHOC", quantity)
