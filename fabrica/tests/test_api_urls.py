"""
URL configuration for Fabrica API tests.

Used as ROOT_URLCONF in test settings via @pytest.mark.urls.
"""

from django.contrib import admin
from django.urls import include, path

urlpatterns = [
    path("admin/", admin.site.urls),
    path("api/fabrica/", include("fabrica.api.urls")),
]
