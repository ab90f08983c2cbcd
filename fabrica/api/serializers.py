"""
Fabrica API Serializers.

Model serializers are read-only representations; writes go through the
services (Ledger, RecipeBook, ProductionExecutor) via the input serializers
below, so every mutation keeps its invariants.
"""

from rest_framework import serializers

from fabrica.models import OrderStatus, Product, ProductionOrder, ProductKind, Recipe, RecipeLine
from fabrica.quantities import LINE_DIGITS, LINE_PLACES, ORDER_DIGITS, ORDER_PLACES, STOCK_DIGITS, STOCK_PLACES


class ProductSerializer(serializers.ModelSerializer):
    """Serializer for Product model."""

    has_recipe = serializers.SerializerMethodField()

    class Meta:
        model = Product
        fields = [
            "code",
            "name",
            "description",
            "unit",
            "kind",
            "quantity",
            "has_recipe",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_has_recipe(self, obj) -> bool:
        return hasattr(obj, "recipe")


class RecipeLineSerializer(serializers.ModelSerializer):
    """Serializer for RecipeLine model."""

    material_name = serializers.CharField(source="material.name", read_only=True)
    unit = serializers.CharField(source="material.unit", read_only=True)

    class Meta:
        model = RecipeLine
        fields = ["material", "material_name", "unit", "quantity", "position"]
        read_only_fields = fields


class RecipeSerializer(serializers.ModelSerializer):
    """Serializer for Recipe model."""

    product = serializers.CharField(source="finished_good_id", read_only=True)
    product_name = serializers.CharField(source="finished_good.name", read_only=True)
    lines = serializers.SerializerMethodField()

    class Meta:
        model = Recipe
        fields = [
            "code",
            "product",
            "product_name",
            "notes",
            "lines",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields

    def get_lines(self, obj) -> list:
        return RecipeLineSerializer(obj.get_lines(), many=True).data


class ProductionOrderSerializer(serializers.ModelSerializer):
    """Serializer for ProductionOrder model."""

    product_name = serializers.CharField(source="product.name", read_only=True)
    status_name = serializers.CharField(read_only=True)
    allowed_transitions = serializers.ListField(read_only=True)

    class Meta:
        model = ProductionOrder
        fields = [
            "uuid",
            "code",
            "product",
            "product_name",
            "quantity",
            "status",
            "status_name",
            "allowed_transitions",
            "notes",
            "created_by",
            "status_changed_at",
            "executed_at",
            "created_at",
            "updated_at",
        ]
        read_only_fields = fields


# ══════════════════════════════════════════════════════════════
# INPUT
# ══════════════════════════════════════════════════════════════


class ProductCreateSerializer(serializers.Serializer):
    """Input for POST /products/. Empty code → next free code."""

    code = serializers.CharField(required=False, allow_blank=True, allow_null=True, max_length=50)
    name = serializers.CharField(max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    unit = serializers.CharField(required=False, max_length=10, default="un")
    kind = serializers.ChoiceField(choices=ProductKind.choices, default=ProductKind.RAW_MATERIAL)


class StockMovementSerializer(serializers.Serializer):
    """Input for receive/issue actions."""

    quantity = serializers.DecimalField(
        max_digits=STOCK_DIGITS,
        decimal_places=STOCK_PLACES,
        help_text="Quantity to add or remove (> 0)",
    )


class RecipeLineInputSerializer(serializers.Serializer):
    material = serializers.CharField(max_length=50)
    quantity = serializers.DecimalField(
        max_digits=LINE_DIGITS,
        decimal_places=LINE_PLACES,
        help_text="Quantity per one unit of finished good (> 0)",
    )


class RecipeDefineSerializer(serializers.Serializer):
    """
    Input for PUT /recipes/{code}/.

    {
        "name": "Barra de Chocolate",   // only used if the product is created
        "unit": "un",
        "lines": [{"material": "01", "quantity": "0.1"}, ...]
    }
    """

    name = serializers.CharField(required=False, allow_blank=True, max_length=200)
    description = serializers.CharField(required=False, allow_blank=True, default="")
    unit = serializers.CharField(required=False, max_length=10, default="un")
    # Emptiness is a domain rule (EMPTY_RECIPE), checked by the recipe book
    lines = RecipeLineInputSerializer(many=True, allow_empty=True)


class ProductionRequestSerializer(serializers.Serializer):
    """Input for feasibility/execute and order creation."""

    product = serializers.CharField(max_length=50)
    quantity = serializers.DecimalField(
        max_digits=ORDER_DIGITS,
        decimal_places=ORDER_PLACES,
        help_text="Quantity of finished good to produce (> 0)",
    )


class OrderCreateSerializer(ProductionRequestSerializer):
    notes = serializers.CharField(required=False, allow_blank=True, default="")


class OrderStatusSerializer(serializers.Serializer):
    """Input for PATCH /orders/{code}/status/."""

    status = serializers.CharField(
        help_text=f"One of: {', '.join(OrderStatus.names)}",
    )
