"""
Load demo data for Fabrica.

Creates a small chocolate factory:
- Raw materials Açúcar (100 kg), Cacau (50 kg), Leite (200 L)
- Finished good Barra de Chocolate with its ficha técnica
  (0.1 kg açúcar + 0.05 kg cacau + 0.02 L leite por unidade)
- One PENDING production order

Everything goes through the ledger and recipe book, so the data obeys the
same rules as the API. Running it twice does not duplicate anything.

Usage:
    python manage.py load_fabrica_demo
    python manage.py load_fabrica_demo --clear
"""

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db import transaction

RAW_MATERIALS = [
    # code, name, unit, initial stock
    ("ACUCAR", "Açúcar", "kg", Decimal("100")),
    ("CACAU", "Cacau", "kg", Decimal("50")),
    ("LEITE", "Leite", "L", Decimal("200")),
]

FINISHED_GOOD = ("CHOC", "Barra de Chocolate", "un")

RECIPE = [
    ("ACUCAR", Decimal("0.1")),
    ("CACAU", Decimal("0.05")),
    ("LEITE", Decimal("0.02")),
]


class Command(BaseCommand):
    help = "Carrega dados de demonstração para o Fabrica"

    def add_arguments(self, parser):
        parser.add_argument(
            "--clear",
            action="store_true",
            help="Limpa dados existentes antes de carregar",
        )

    def handle(self, *args, **options):
        self.stdout.write("=" * 60)
        self.stdout.write("🍫 Carregando dados de demonstração do Fabrica...")
        self.stdout.write("=" * 60)

        with transaction.atomic():
            if options["clear"]:
                self._clear()

            self._create_raw_materials()
            self._create_recipe()
            self._create_order()

        self.stdout.write("\n" + "=" * 60)
        self.stdout.write(
            self.style.SUCCESS("✅ Dados de demonstração carregados com sucesso!")
        )
        self.stdout.write("=" * 60)
        self._print_summary()

    def _clear(self):
        from fabrica.models import Product, ProductionOrder, Recipe, RecipeLine

        self.stdout.write("\n🗑️  Limpando dados existentes...")
        ProductionOrder.objects.all().delete()
        RecipeLine.objects.all().delete()
        Recipe.objects.all().delete()
        Product.objects.all().delete()
        self.stdout.write(self.style.SUCCESS("   ✓ Dados limpos"))

    def _create_raw_materials(self):
        from fabrica.models import ProductKind
        from fabrica.services import Ledger

        self.stdout.write("\n📦 Criando matérias-primas...")

        for code, name, unit, stock in RAW_MATERIALS:
            if Ledger.find(code) is not None:
                self.stdout.write(f"   • {name} já existe")
                continue
            Ledger.create(code, name, unit=unit, kind=ProductKind.RAW_MATERIAL)
            Ledger.credit(code, stock)
            self.stdout.write(f"   ✓ {name}: {stock} {unit}")

    def _create_recipe(self):
        from fabrica.services import RecipeBook

        self.stdout.write("\n🍰 Criando ficha técnica...")

        code, name, unit = FINISHED_GOOD
        recipe = RecipeBook.define_or_replace(code, RECIPE, name=name, unit=unit)
        self.stdout.write(f"   ✓ {recipe.code}: {len(RECIPE)} componentes")

    def _create_order(self):
        from fabrica.models import OrderStatus, ProductionOrder
        from fabrica.service import Fab

        self.stdout.write("\n📋 Criando ordem de produção...")

        code = FINISHED_GOOD[0]
        if ProductionOrder.objects.filter(
            product_id=code, status=OrderStatus.PENDING
        ).exists():
            self.stdout.write("   • Ordem pendente já existe")
            return

        order = Fab.order(code, 500, notes="Demo", created_by="system:demo")
        self.stdout.write(f"   ✓ {order.code}: {order.quantity} x {code}")

    def _print_summary(self):
        from fabrica.models import Product, ProductionOrder, Recipe

        self.stdout.write("\n📊 Resumo:")
        self.stdout.write(f"   • {Product.objects.count()} produtos")
        self.stdout.write(f"   • {Recipe.objects.count()} fichas técnicas")
        self.stdout.write(f"   • {ProductionOrder.objects.count()} ordens de produção")
