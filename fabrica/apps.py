"""
Django Fabrica app configuration.
"""

from django.apps import AppConfig
from django.utils.translation import gettext_lazy as _


class FabricaConfig(AppConfig):
    """Fabrica application configuration."""

    default_auto_field = "django.db.models.BigAutoField"
    name = "fabrica"
    verbose_name = _("Fábrica")
