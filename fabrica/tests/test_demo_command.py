"""
Tests for the load_fabrica_demo management command.
"""

from decimal import Decimal
from io import StringIO

import pytest
from django.core.management import call_command

from fabrica.models import OrderStatus, Product, ProductionOrder, Recipe
from fabrica.services import Feasibility


def run(*args):
    out = StringIO()
    call_command("load_fabrica_demo", *args, stdout=out)
    return out.getvalue()


class TestLoadDemo:
    def test_loads_chocolate_factory(self, db):
        output = run()

        assert "sucesso" in output
        assert dict(Product.objects.values_list("code", "quantity")) == {
            "ACUCAR": Decimal("100"),
            "CACAU": Decimal("50"),
            "LEITE": Decimal("200"),
            "CHOC": Decimal("0"),
        }
        recipe = Recipe.objects.get(finished_good_id="CHOC")
        assert recipe.material_codes == ["ACUCAR", "CACAU", "LEITE"]
        assert ProductionOrder.objects.filter(status=OrderStatus.PENDING).count() == 1

    def test_demo_order_is_feasible(self, db):
        run()

        assert Feasibility.check("CHOC", 500).feasible

    def test_idempotent(self, db):
        run()
        run()

        assert Product.objects.count() == 4
        assert Product.objects.get(pk="ACUCAR").quantity == Decimal("100")
        assert ProductionOrder.objects.count() == 1

    def test_clear_resets(self, db):
        run()
        order = ProductionOrder.objects.get()
        order.approve()
        order.execute()
        assert Product.objects.get(pk="ACUCAR").quantity == Decimal("50")

        output = run("--clear")

        assert "Dados limpos" in output
        assert Product.objects.get(pk="ACUCAR").quantity == Decimal("100")
        assert Product.objects.get(pk="CHOC").quantity == Decimal("0")
        assert ProductionOrder.objects.filter(status=OrderStatus.PENDING).count() == 1
        assert ProductionOrder.objects.count() == 1
