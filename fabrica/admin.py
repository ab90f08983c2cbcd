"""
Fabrica Admin: basic Django admin for Product, Recipe, ProductionOrder.

Stock quantities are read-only here: they change only through the ledger
(receive/issue, production), never by editing the row.
"""

from django import forms
from django.contrib import admin

from fabrica.exceptions import InvalidArgument
from fabrica.identity import normalize_code
from fabrica.models import Product, ProductionOrder, Recipe, RecipeLine


# ── Product ──


class ProductAdminForm(forms.ModelForm):
    class Meta:
        model = Product
        fields = "__all__"

    def clean_code(self):
        try:
            return normalize_code(self.cleaned_data.get("code"))
        except InvalidArgument as e:
            raise forms.ValidationError(str(e))


@admin.register(Product)
class ProductAdmin(admin.ModelAdmin):
    """Admin for raw materials and finished goods."""

    form = ProductAdminForm
    list_display = ("code", "name", "kind", "quantity", "unit", "updated_at")
    list_filter = ("kind",)
    search_fields = ("code", "name")
    readonly_fields = ("quantity", "created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        # Code is the identity and kind is what recipes were validated against
        if obj is not None:
            return ("code", "kind") + self.readonly_fields
        return self.readonly_fields


# ── Recipe ──


class RecipeLineInline(admin.TabularInline):
    """Recipe components, read-only: recipes are replaced whole through RecipeBook."""

    model = RecipeLine
    extra = 0
    fields = ("position", "material", "quantity")
    readonly_fields = fields
    ordering = ("position",)

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


@admin.register(Recipe)
class RecipeAdmin(admin.ModelAdmin):
    """Admin for fichas técnicas."""

    list_display = ("code", "finished_good", "line_count", "updated_at")
    search_fields = ("code", "finished_good__code", "finished_good__name")
    raw_id_fields = ("finished_good",)
    inlines = [RecipeLineInline]
    readonly_fields = ("created_at", "updated_at")

    def get_readonly_fields(self, request, obj=None):
        if obj is not None:
            return ("code", "finished_good") + self.readonly_fields
        return self.readonly_fields

    def has_add_permission(self, request):
        # A recipe without lines is not a recipe
        return False

    @admin.display(description="Componentes")
    def line_count(self, obj) -> int:
        return obj.lines.count()


# ── ProductionOrder ──


@admin.register(ProductionOrder)
class ProductionOrderAdmin(admin.ModelAdmin):
    """Admin for production orders. Status moves through the API/facade."""

    list_display = ("code", "product", "quantity", "status", "created_by", "created_at")
    list_filter = ("status",)
    search_fields = ("code", "product__code", "product__name")
    raw_id_fields = ("product",)
    readonly_fields = (
        "uuid",
        "code",
        "status",
        "status_changed_at",
        "executed_at",
        "created_at",
        "updated_at",
    )
