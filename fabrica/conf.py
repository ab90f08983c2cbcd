"""
Fabrica Settings.

Supports two formats (dict takes priority):

    # Option 1: Dict
    FABRICA = {
        "CODE_MIN_DIGITS": 3,
        "EXECUTE_ON_ORDER": False,
    }

    # Option 2: Flat
    FABRICA_CODE_MIN_DIGITS = 3
    FABRICA_EXECUTE_ON_ORDER = False

All settings have sensible defaults; zero configuration required.
"""

from django.conf import settings


# ── Defaults ──

DEFAULTS = {
    # Auto-assigned product codes are zero-padded to at least this many digits
    "CODE_MIN_DIGITS": 2,
    # Recipe code = prefix + finished product code
    "RECIPE_CODE_PREFIX": "FT-",
    # Production order code = "{prefix}-{year}-{seq:05d}"
    "ORDER_CODE_PREFIX": "OP",
    # Moving an order to EXECUTED runs the production executor
    "EXECUTE_ON_ORDER": True,
}


# ── Accessors ──

_sentinel = object()


def get_setting(name, default=_sentinel):
    """
    Get a fabrica setting.

    Looks up in order:
    1. FABRICA dict (e.g. FABRICA = {"CODE_MIN_DIGITS": 3})
    2. Flat setting (e.g. FABRICA_CODE_MIN_DIGITS = 3)
    3. DEFAULTS
    """
    fabrica_dict = getattr(settings, "FABRICA", {})
    if name in fabrica_dict:
        return fabrica_dict[name]

    flat_value = getattr(settings, f"FABRICA_{name}", _sentinel)
    if flat_value is not _sentinel:
        return flat_value

    if default is not _sentinel:
        return default

    return DEFAULTS.get(name)


def get_code_min_digits() -> int:
    return int(get_setting("CODE_MIN_DIGITS"))


def get_recipe_code_prefix() -> str:
    return get_setting("RECIPE_CODE_PREFIX")


def get_order_code_prefix() -> str:
    return get_setting("ORDER_CODE_PREFIX")


def execute_on_order() -> bool:
    """Whether the EXECUTED transition runs the production executor."""
    return bool(get_setting("EXECUTE_ON_ORDER"))
