"""
Fabrica Signals.

Integration points for external systems (notifications, accounting,
dashboards). Both are sent once the triggering atomic block has exited
without error.

Signals:
    production_executed: stock converted from raw materials to finished good
    order_status_changed: a ProductionOrder moved to a new status
"""

from django.dispatch import Signal

# Production executed - stock already moved
# Sent by ProductionExecutor.execute()
# Args: product (code), quantity, consumed (list of MaterialRequirement)
production_executed = Signal()

# Order status changed
# Sent by ProductionOrder.transition()
# Args: order, previous (OrderStatus), current (OrderStatus), user
order_status_changed = Signal()

__all__ = ["production_executed", "order_status_changed"]
