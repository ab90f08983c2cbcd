"""
Initial migration for Fabrica.

- Product (+ history), Recipe (+ history), RecipeLine
- CodeSequence (product identities, order codes)
- ProductionOrder
"""

import uuid
from decimal import Decimal

import django.db.models.deletion
import simple_history.models
from django.conf import settings
from django.db import migrations, models

HISTORY_TYPE_CHOICES = [("+", "Created"), ("~", "Changed"), ("-", "Deleted")]

PRODUCT_KIND_CHOICES = [
    ("raw_material", "Matéria-Prima"),
    ("finished_good", "Produto Acabado"),
]


class Migration(migrations.Migration):

    initial = True

    dependencies = [
        migrations.swappable_dependency(settings.AUTH_USER_MODEL),
    ]

    operations = [
        # ══════════════════════════════════════════════════════════════
        # PRODUCT
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Product",
            fields=[
                (
                    "code",
                    models.CharField(
                        help_text="Identificador único (ex: 01, ACUCAR)",
                        max_length=50,
                        primary_key=True,
                        serialize=False,
                        verbose_name="Código",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="Nome")),
                ("description", models.TextField(blank=True, verbose_name="Descrição")),
                (
                    "unit",
                    models.CharField(
                        default="un",
                        help_text="kg, L, un, g...",
                        max_length=10,
                        verbose_name="Unidade",
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        choices=PRODUCT_KIND_CHOICES,
                        db_index=True,
                        default="raw_material",
                        max_length=20,
                        verbose_name="Tipo",
                    ),
                ),
                (
                    "quantity",
                    models.DecimalField(
                        decimal_places=6,
                        default=Decimal("0"),
                        max_digits=18,
                        verbose_name="Quantidade em Estoque",
                    ),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
            ],
            options={
                "verbose_name": "Produto",
                "verbose_name_plural": "Produtos",
                "db_table": "fabrica_product",
                "ordering": ["code"],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gte=0),
                        name="fabrica_product_quantity_non_negative",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="HistoricalProduct",
            fields=[
                (
                    "code",
                    models.CharField(
                        db_index=True,
                        help_text="Identificador único (ex: 01, ACUCAR)",
                        max_length=50,
                        verbose_name="Código",
                    ),
                ),
                ("name", models.CharField(max_length=200, verbose_name="Nome")),
                ("description", models.TextField(blank=True, verbose_name="Descrição")),
                (
                    "unit",
                    models.CharField(
                        default="un",
                        help_text="kg, L, un, g...",
                        max_length=10,
                        verbose_name="Unidade",
                    ),
                ),
                (
                    "kind",
                    models.CharField(
                        choices=PRODUCT_KIND_CHOICES,
                        db_index=True,
                        default="raw_material",
                        max_length=20,
                        verbose_name="Tipo",
                    ),
                ),
                (
                    "quantity",
                    models.DecimalField(
                        decimal_places=6,
                        default=Decimal("0"),
                        max_digits=18,
                        verbose_name="Quantidade em Estoque",
                    ),
                ),
                (
                    "created_at",
                    models.DateTimeField(blank=True, editable=False, verbose_name="criado em"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(blank=True, editable=False, verbose_name="atualizado em"),
                ),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(choices=HISTORY_TYPE_CHOICES, max_length=1),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "historical Produto",
                "verbose_name_plural": "historical Produtos",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        # ══════════════════════════════════════════════════════════════
        # RECIPE
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="Recipe",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        help_text="Derivado do produto acabado (ex: FT-CHOC)",
                        max_length=60,
                        unique=True,
                        verbose_name="Código",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Observações")),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="atualizado em")),
                (
                    "finished_good",
                    models.OneToOneField(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="recipe",
                        to="fabrica.product",
                        verbose_name="Produto Acabado",
                    ),
                ),
            ],
            options={
                "verbose_name": "Ficha Técnica",
                "verbose_name_plural": "Fichas Técnicas",
                "db_table": "fabrica_recipe",
                "ordering": ["code"],
            },
        ),
        migrations.CreateModel(
            name="HistoricalRecipe",
            fields=[
                (
                    "id",
                    models.BigIntegerField(
                        auto_created=True, blank=True, db_index=True, verbose_name="ID"
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        db_index=True,
                        help_text="Derivado do produto acabado (ex: FT-CHOC)",
                        max_length=60,
                        verbose_name="Código",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Observações")),
                (
                    "created_at",
                    models.DateTimeField(blank=True, editable=False, verbose_name="criado em"),
                ),
                (
                    "updated_at",
                    models.DateTimeField(blank=True, editable=False, verbose_name="atualizado em"),
                ),
                ("history_id", models.AutoField(primary_key=True, serialize=False)),
                ("history_date", models.DateTimeField(db_index=True)),
                ("history_change_reason", models.CharField(max_length=100, null=True)),
                (
                    "history_type",
                    models.CharField(choices=HISTORY_TYPE_CHOICES, max_length=1),
                ),
                (
                    "finished_good",
                    models.ForeignKey(
                        blank=True,
                        db_constraint=False,
                        null=True,
                        on_delete=django.db.models.deletion.DO_NOTHING,
                        related_name="+",
                        to="fabrica.product",
                        verbose_name="Produto Acabado",
                    ),
                ),
                (
                    "history_user",
                    models.ForeignKey(
                        null=True,
                        on_delete=django.db.models.deletion.SET_NULL,
                        related_name="+",
                        to=settings.AUTH_USER_MODEL,
                    ),
                ),
            ],
            options={
                "verbose_name": "historical Ficha Técnica",
                "verbose_name_plural": "historical Fichas Técnicas",
                "ordering": ("-history_date", "-history_id"),
                "get_latest_by": ("history_date", "history_id"),
            },
            bases=(simple_history.models.HistoricalChanges, models.Model),
        ),
        migrations.CreateModel(
            name="RecipeLine",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "quantity",
                    models.DecimalField(
                        decimal_places=3,
                        max_digits=12,
                        verbose_name="Quantidade por Unidade",
                    ),
                ),
                (
                    "position",
                    models.PositiveSmallIntegerField(default=0, verbose_name="Ordem"),
                ),
                (
                    "material",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="recipe_lines",
                        to="fabrica.product",
                        verbose_name="Matéria-Prima",
                    ),
                ),
                (
                    "recipe",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="fabrica.recipe",
                        verbose_name="Ficha Técnica",
                    ),
                ),
            ],
            options={
                "verbose_name": "Componente",
                "verbose_name_plural": "Componentes",
                "db_table": "fabrica_recipe_line",
                "ordering": ["recipe", "position", "id"],
                "unique_together": {("recipe", "material")},
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="fabrica_recipe_line_quantity_positive",
                    ),
                ],
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # CODE SEQUENCE
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="CodeSequence",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "prefix",
                    models.CharField(max_length=50, unique=True, verbose_name="Prefixo"),
                ),
                (
                    "last_value",
                    models.PositiveIntegerField(default=0, verbose_name="Último valor"),
                ),
            ],
            options={
                "verbose_name": "Sequência de Código",
                "verbose_name_plural": "Sequências de Código",
                "db_table": "fabrica_code_sequence",
            },
        ),
        # ══════════════════════════════════════════════════════════════
        # PRODUCTION ORDER
        # ══════════════════════════════════════════════════════════════
        migrations.CreateModel(
            name="ProductionOrder",
            fields=[
                (
                    "id",
                    models.BigAutoField(
                        auto_created=True, primary_key=True, serialize=False, verbose_name="ID"
                    ),
                ),
                (
                    "uuid",
                    models.UUIDField(
                        default=uuid.uuid4, editable=False, unique=True, verbose_name="UUID"
                    ),
                ),
                (
                    "code",
                    models.CharField(
                        blank=True,
                        help_text="Identificador único (auto-gerado se vazio)",
                        max_length=50,
                        unique=True,
                        verbose_name="Código",
                    ),
                ),
                (
                    "quantity",
                    models.DecimalField(
                        decimal_places=3,
                        help_text="Quantidade a produzir",
                        max_digits=12,
                        verbose_name="Quantidade",
                    ),
                ),
                (
                    "status",
                    models.CharField(
                        choices=[
                            ("pending", "Pendente"),
                            ("approved", "Aprovada"),
                            ("executed", "Executada"),
                            ("rejected", "Rejeitada"),
                            ("cancelled", "Cancelada"),
                        ],
                        db_index=True,
                        default="pending",
                        max_length=20,
                        verbose_name="Status",
                    ),
                ),
                ("notes", models.TextField(blank=True, verbose_name="Observações")),
                (
                    "created_by",
                    models.CharField(
                        blank=True,
                        help_text="Ex: 'user:joao', 'api', 'system'",
                        max_length=255,
                        verbose_name="Criado por",
                    ),
                ),
                (
                    "status_changed_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Status alterado em"),
                ),
                (
                    "executed_at",
                    models.DateTimeField(blank=True, null=True, verbose_name="Executada em"),
                ),
                ("created_at", models.DateTimeField(auto_now_add=True, verbose_name="Criado em")),
                ("updated_at", models.DateTimeField(auto_now=True, verbose_name="Atualizado em")),
                (
                    "product",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="production_orders",
                        to="fabrica.product",
                        verbose_name="Produto Acabado",
                    ),
                ),
            ],
            options={
                "verbose_name": "Ordem de Produção",
                "verbose_name_plural": "Ordens de Produção",
                "db_table": "fabrica_production_order",
                "ordering": ["-created_at"],
                "indexes": [
                    models.Index(
                        fields=["product", "status"],
                        name="fabrica_order_prod_status_idx",
                    ),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(quantity__gt=0),
                        name="fabrica_order_quantity_positive",
                    ),
                ],
            },
        ),
    ]
