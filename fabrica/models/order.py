"""
ProductionOrder model.

ProductionOrder = persisted request to produce a quantity of a finished
good, tagged with a status.

The status is a closed state machine (TRANSITIONS). The order holds no
inventory logic: entering EXECUTED calls the ProductionExecutor, which
does the stock work.
"""

import logging
import uuid

from django.db import models, transaction
from django.utils import timezone
from django.utils.translation import gettext_lazy as _

from fabrica.conf import execute_on_order, get_order_code_prefix
from fabrica.exceptions import InvalidArgument
from fabrica.quantities import ORDER_DIGITS, ORDER_PLACES

logger = logging.getLogger(__name__)


class OrderStatus(models.TextChoices):
    """ProductionOrder lifecycle status."""

    PENDING = "pending", _("Pendente")
    APPROVED = "approved", _("Aprovada")
    EXECUTED = "executed", _("Executada")
    REJECTED = "rejected", _("Rejeitada")
    CANCELLED = "cancelled", _("Cancelada")

    @classmethod
    def parse(cls, name) -> "OrderStatus":
        """
        Resolve a status name ("APPROVED", "approved") to an OrderStatus.

        Raises InvalidArgument for anything else.
        """
        if isinstance(name, cls):
            return name
        if isinstance(name, str):
            key = name.strip()
            if key.upper() in cls.names:
                return cls[key.upper()]
            if key.lower() in cls.values:
                return cls(key.lower())
        raise InvalidArgument(
            "INVALID_STATUS", status=name, allowed=", ".join(cls.names)
        )


# Every allowed move. Anything not listed is rejected.
TRANSITIONS: dict[str, frozenset[str]] = {
    OrderStatus.PENDING.value: frozenset(
        {
            OrderStatus.APPROVED.value,
            OrderStatus.REJECTED.value,
            OrderStatus.CANCELLED.value,
        }
    ),
    OrderStatus.APPROVED.value: frozenset(
        {OrderStatus.EXECUTED.value, OrderStatus.CANCELLED.value}
    ),
    OrderStatus.EXECUTED.value: frozenset(),
    OrderStatus.REJECTED.value: frozenset(),
    OrderStatus.CANCELLED.value: frozenset(),
}


class ProductionOrder(models.Model):
    """
    Ordem de produção.

    Status: PENDING → APPROVED → EXECUTED
            PENDING → REJECTED | CANCELLED
            APPROVED → CANCELLED
    """

    # UUID for external references
    uuid = models.UUIDField(
        default=uuid.uuid4,
        editable=False,
        unique=True,
        verbose_name=_("UUID"),
    )

    # Identification
    code = models.CharField(
        unique=True,
        max_length=50,
        blank=True,
        verbose_name=_("Código"),
        help_text=_("Identificador único (auto-gerado se vazio)"),
    )

    product = models.ForeignKey(
        "fabrica.Product",
        on_delete=models.PROTECT,
        related_name="production_orders",
        verbose_name=_("Produto Acabado"),
    )
    quantity = models.DecimalField(
        max_digits=ORDER_DIGITS,
        decimal_places=ORDER_PLACES,
        verbose_name=_("Quantidade"),
        help_text=_("Quantidade a produzir"),
    )

    status = models.CharField(
        max_length=20,
        choices=OrderStatus.choices,
        default=OrderStatus.PENDING,
        db_index=True,
        verbose_name=_("Status"),
    )

    notes = models.TextField(
        blank=True,
        verbose_name=_("Observações"),
    )
    created_by = models.CharField(
        max_length=255,
        blank=True,
        verbose_name=_("Criado por"),
        help_text=_("Ex: 'user:joao', 'api', 'system'"),
    )

    # Timestamps
    status_changed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Status alterado em"),
    )
    executed_at = models.DateTimeField(
        null=True,
        blank=True,
        verbose_name=_("Executada em"),
    )
    created_at = models.DateTimeField(auto_now_add=True, verbose_name=_("Criado em"))
    updated_at = models.DateTimeField(auto_now=True, verbose_name=_("Atualizado em"))

    class Meta:
        db_table = "fabrica_production_order"
        verbose_name = _("Ordem de Produção")
        verbose_name_plural = _("Ordens de Produção")
        ordering = ["-created_at"]
        indexes = [
            models.Index(fields=["product", "status"], name="fabrica_order_prod_status_idx"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=models.Q(quantity__gt=0),
                name="fabrica_order_quantity_positive",
            ),
        ]

    def __str__(self) -> str:
        return f"{self.code} - {self.product_id} x {self.quantity}"

    def save(self, *args, **kwargs):
        """Override save to auto-generate code."""
        if not self.code:
            self.code = self._generate_code()
        super().save(*args, **kwargs)

    def _generate_code(self) -> str:
        """Generate unique order code in format OP-YYYY-NNNNN."""
        from fabrica.models.sequence import CodeSequence

        year = timezone.now().year
        prefix = f"{get_order_code_prefix()}-{year}"
        return f"{prefix}-{CodeSequence.next_code(prefix, min_digits=5)}"

    # ══════════════════════════════════════════════════════════════
    # STATE MACHINE
    # ══════════════════════════════════════════════════════════════

    def can_transition(self, target) -> bool:
        return OrderStatus.parse(target).value in TRANSITIONS[OrderStatus(self.status).value]

    def transition(self, target, user=None) -> "ProductionOrder":
        """
        Move the order to `target` (status name or OrderStatus).

        Entering EXECUTED runs the production executor in the same
        transaction (unless EXECUTE_ON_ORDER is off). If production fails
        the order keeps its previous status and the error propagates.
        """
        target = OrderStatus.parse(target)

        with transaction.atomic():
            # Re-read under lock: two requests racing on one order see each other
            locked = type(self).objects.select_for_update().get(pk=self.pk)
            previous = OrderStatus(locked.status)

            if target.value not in TRANSITIONS[previous.value]:
                raise InvalidArgument(
                    "INVALID_TRANSITION",
                    order=self.code,
                    current=previous.name,
                    target=target.name,
                )

            now = timezone.now()
            if target == OrderStatus.EXECUTED:
                if execute_on_order():
                    from fabrica.services.production import ProductionExecutor

                    ProductionExecutor.execute(self.product_id, self.quantity)
                self.executed_at = now

            self.status = target
            self.status_changed_at = now
            self.save(
                update_fields=["status", "status_changed_at", "executed_at", "updated_at"]
            )

        logger.info(
            f"ProductionOrder {self.code}: {previous.name} → {target.name}",
            extra={
                "order": self.code,
                "previous": previous.name,
                "current": target.name,
                "user": getattr(user, "username", None),
            },
        )

        from fabrica.signals import order_status_changed

        order_status_changed.send(
            sender=self.__class__,
            order=self,
            previous=previous,
            current=target,
            user=user,
        )
        return self

    def approve(self, user=None) -> "ProductionOrder":
        return self.transition(OrderStatus.APPROVED, user)

    def reject(self, user=None) -> "ProductionOrder":
        return self.transition(OrderStatus.REJECTED, user)

    def cancel(self, user=None) -> "ProductionOrder":
        return self.transition(OrderStatus.CANCELLED, user)

    def execute(self, user=None) -> "ProductionOrder":
        """Approved → executed, consuming stock per the recipe."""
        return self.transition(OrderStatus.EXECUTED, user)

    # ══════════════════════════════════════════════════════════════
    # PROPERTIES
    # ══════════════════════════════════════════════════════════════

    @property
    def is_terminal(self) -> bool:
        return not TRANSITIONS[OrderStatus(self.status).value]

    @property
    def allowed_transitions(self) -> list[str]:
        return sorted(
            OrderStatus(s).name for s in TRANSITIONS[OrderStatus(self.status).value]
        )

    @property
    def status_name(self) -> str:
        return OrderStatus(self.status).name
