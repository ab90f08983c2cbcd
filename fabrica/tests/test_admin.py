"""
Tests for Fabrica admin registrations.
"""

import pytest
from django.contrib import admin
from django.contrib.auth import get_user_model

from fabrica import fab
from fabrica.admin import ProductAdmin, RecipeLineInline
from fabrica.models import Product, ProductionOrder, Recipe

pytestmark = pytest.mark.urls("fabrica.tests.test_api_urls")


@pytest.fixture
def staff_client(client, db):
    user = get_user_model().objects.create_superuser(
        username="admin", password="admin123", email="admin@fabrica.local"
    )
    client.force_login(user)
    return client


class TestAdmin:
    def test_models_registered(self):
        for model in (Product, Recipe, ProductionOrder):
            assert admin.site.is_registered(model)

    def test_quantity_read_only(self, rf):
        model_admin = ProductAdmin(Product, admin.site)

        assert "quantity" in model_admin.get_readonly_fields(rf.get("/"))
        assert "code" not in model_admin.get_readonly_fields(rf.get("/"))
        assert "code" in model_admin.get_readonly_fields(rf.get("/"), obj=Product(code="X"))

    def test_kind_read_only_after_creation(self, rf):
        model_admin = ProductAdmin(Product, admin.site)

        assert "kind" not in model_admin.get_readonly_fields(rf.get("/"))
        assert "kind" in model_admin.get_readonly_fields(rf.get("/"), obj=Product(code="X"))

    def test_add_form_normalizes_code(self, rf, db):
        form_class = ProductAdmin(Product, admin.site).get_form(rf.get("/"))
        form = form_class(
            data={"code": "7", "name": "Sete", "description": "", "unit": "kg", "kind": "raw_material"}
        )

        assert form.is_valid(), form.errors
        assert form.cleaned_data["code"] == "07"

    @pytest.mark.parametrize("code", ["a/b", "a\\b"])
    def test_add_form_rejects_malformed_code(self, rf, db, code):
        form_class = ProductAdmin(Product, admin.site).get_form(rf.get("/"))
        form = form_class(
            data={"code": code, "name": "Ruim", "description": "", "unit": "kg", "kind": "raw_material"}
        )

        assert not form.is_valid()
        assert "code" in form.errors

    def test_recipe_lines_read_only(self, rf):
        inline = RecipeLineInline(Recipe, admin.site)
        request = rf.get("/")

        assert inline.extra == 0
        assert not inline.has_add_permission(request, None)
        assert not inline.has_change_permission(request)
        assert not inline.has_delete_permission(request)

    def test_recipe_add_disabled(self, staff_client):
        response = staff_client.get("/admin/fabrica/recipe/add/")

        assert response.status_code == 403

    def test_changelists_render(self, staff_client):
        fab.create_product("SUGAR", "Açúcar", unit="kg")
        fab.define_recipe("CHOC", [("SUGAR", "0.1")], name="Chocolate")
        fab.order("CHOC", 10)

        for path in (
            "/admin/fabrica/product/",
            "/admin/fabrica/recipe/",
            "/admin/fabrica/productionorder/",
            "/admin/fabrica/product/SUGAR/change/",
            f"/admin/fabrica/recipe/{Recipe.objects.get().pk}/change/",
        ):
            response = staff_client.get(path)
            assert response.status_code == 200, path
