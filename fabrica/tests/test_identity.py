"""
Tests for identity allocation (fabrica.identity, fabrica.models.sequence).

Verifies atomic counters, zero-padded codes and skipping of taken codes.
"""

import pytest
from django.test import override_settings

from fabrica.exceptions import InvalidArgument
from fabrica.identity import format_code, next_product_code, normalize_code
from fabrica.models import CodeSequence, Product


# ═══════════════════════════════════════════════════════════════════
# CodeSequence
# ═══════════════════════════════════════════════════════════════════


class TestCodeSequence:
    """Tests for CodeSequence model."""

    def test_next_value_starts_at_1(self, db):
        assert CodeSequence.next_value("TEST-PREFIX") == 1

    def test_next_value_increments(self, db):
        values = [CodeSequence.next_value("INC-PREFIX") for _ in range(3)]

        assert values == [1, 2, 3]

    def test_different_prefixes_independent(self, db):
        CodeSequence.next_value("PREFIX-A")
        CodeSequence.next_value("PREFIX-A")

        assert CodeSequence.next_value("PREFIX-B") == 1
        assert CodeSequence.next_value("PREFIX-A") == 3

    def test_next_code_pads_and_skips_taken(self, db):
        taken = {"002", "003"}

        assert CodeSequence.next_code("PAD", min_digits=3, taken=taken.__contains__) == "001"
        assert CodeSequence.next_code("PAD", min_digits=3, taken=taken.__contains__) == "004"
        assert CodeSequence.objects.get(prefix="PAD").last_value == 4
        assert CodeSequence.next_code("PAD") == "5"

    def test_str(self, db):
        CodeSequence.next_value("OP-2026")

        assert str(CodeSequence.objects.get(prefix="OP-2026")) == "OP-2026 → 1"


# ═══════════════════════════════════════════════════════════════════
# Formatting / normalization
# ═══════════════════════════════════════════════════════════════════


class TestFormatCode:
    """Tests for format_code() and normalize_code()."""

    @pytest.mark.parametrize(
        "value,expected",
        [(1, "01"), (9, "09"), (10, "10"), (99, "99"), (100, "100"), (1234, "1234")],
    )
    def test_at_least_two_digits(self, value, expected):
        assert format_code(value) == expected

    @override_settings(FABRICA={"CODE_MIN_DIGITS": 4})
    def test_min_digits_configurable(self):
        assert format_code(7) == "0007"
        assert normalize_code("7") == "0007"

    @pytest.mark.parametrize(
        "code,expected",
        [
            ("7", "07"),
            ("007", "07"),
            ("  12 ", "12"),
            ("SUGAR", "SUGAR"),
            ("Chocolate Bar", "Chocolate Bar"),
            ("a-b_c.d", "a-b_c.d"),
        ],
    )
    def test_normalize(self, code, expected):
        assert normalize_code(code) == expected

    @pytest.mark.parametrize(
        "code", ["", "   ", "a/b", "a\\b", "x\x00y", "\x00AB", "\x7fAB", "X" * 51, 7, None]
    )
    def test_normalize_rejects(self, code):
        with pytest.raises(InvalidArgument) as exc:
            normalize_code(code)

        assert exc.value.code == "INVALID_CODE"


# ═══════════════════════════════════════════════════════════════════
# Allocation
# ═══════════════════════════════════════════════════════════════════


class TestNextProductCode:
    """Tests for next_product_code()."""

    def test_sequential(self, db):
        assert next_product_code() == "01"
        assert next_product_code() == "02"

    def test_skips_existing_codes(self, db):
        for code in ("01", "02", "04"):
            Product.objects.create(code=code, name=code)

        assert next_product_code() == "03"
        assert next_product_code() == "05"

    def test_grows_past_two_digits(self, db):
        CodeSequence.objects.create(prefix="product", last_value=99)

        assert next_product_code() == "100"
