"""
Code sequence for atomic code generation.

Backs both product identity allocation (fabrica.identity) and
ProductionOrder codes. One counter row per prefix, advanced under
SELECT FOR UPDATE, so two allocators never hand out the same value.
"""

from django.db import models, transaction
from django.utils.translation import gettext_lazy as _


class CodeSequence(models.Model):
    """
    Atomic counter for generating sequential codes.

    One row per prefix, e.g. "OP-2026" → last_value = 42, or "product" for
    the numeric product identities.

    Usage:
        CodeSequence.next_value("OP-2026")   # 1, 2, 3...
        CodeSequence.next_code("product", min_digits=2, taken=exists)  # "01", "03"...
    """

    prefix = models.CharField(
        max_length=50,
        unique=True,
        verbose_name=_("Prefixo"),
    )
    last_value = models.PositiveIntegerField(
        default=0,
        verbose_name=_("Último valor"),
    )

    class Meta:
        db_table = "fabrica_code_sequence"
        verbose_name = _("Sequência de Código")
        verbose_name_plural = _("Sequências de Código")

    def __str__(self) -> str:
        return f"{self.prefix} → {self.last_value}"

    @classmethod
    def _locked(cls, prefix: str) -> "CodeSequence":
        seq, _created = cls.objects.select_for_update().get_or_create(
            prefix=prefix, defaults={"last_value": 0}
        )
        return seq

    @classmethod
    def next_value(cls, prefix: str) -> int:
        """Atomically increment and return the next value for a prefix."""
        with transaction.atomic():
            seq = cls._locked(prefix)
            seq.last_value += 1
            seq.save(update_fields=["last_value"])
            return seq.last_value

    @classmethod
    def next_code(cls, prefix: str, min_digits: int = 1, taken=None) -> str:
        """
        Next value as a zero-padded string.

        Values whose code satisfies taken(code) are consumed and skipped
        (hand-assigned "05" is never handed out again). The counter row
        stays locked until the caller's transaction ends, so the returned
        code is free for as long as the caller needs to insert it.
        """
        with transaction.atomic():
            seq = cls._locked(prefix)
            while True:
                seq.last_value += 1
                code = str(seq.last_value).zfill(min_digits)
                if taken is None or not taken(code):
                    break
            seq.save(update_fields=["last_value"])
            return code
