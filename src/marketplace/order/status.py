"""Order status state machine and sub-order aggregation.

Progress states:
    PENDING → RECEIVED → IN_PROGRESS → READY → DELIVERED

Kitchens work out of order in practice, so direct updates may move freely
between any two progress states, backwards included. CANCELLED is terminal:
nothing moves an order or sub-order out of it.

The customer-facing status of a multi-chef order is derived from its chef
sub-orders by ``aggregate_status``.
"""

from datetime import UTC, datetime
from enum import Enum

from protean.exceptions import ValidationError


class OrderStatus(Enum):
    PENDING = "pending"
    RECEIVED = "received"
    IN_PROGRESS = "in_progress"
    READY = "ready"
    DELIVERED = "delivered"
    CANCELLED = "cancelled"


class PaymentStatus(Enum):
    PENDING = "pending"
    PAID = "paid"
    FAILED = "failed"


_PROGRESS_STATES = {
    OrderStatus.PENDING,
    OrderStatus.RECEIVED,
    OrderStatus.IN_PROGRESS,
    OrderStatus.READY,
    OrderStatus.DELIVERED,
}

# State machine transition map
_VALID_TRANSITIONS = {
    OrderStatus.PENDING: _PROGRESS_STATES | {OrderStatus.CANCELLED},
    OrderStatus.RECEIVED: _PROGRESS_STATES | {OrderStatus.CANCELLED},
    OrderStatus.IN_PROGRESS: _PROGRESS_STATES | {OrderStatus.CANCELLED},
    OrderStatus.READY: _PROGRESS_STATES | {OrderStatus.CANCELLED},
    OrderStatus.DELIVERED: _PROGRESS_STATES | {OrderStatus.CANCELLED},
    OrderStatus.CANCELLED: set(),  # Terminal
}

# Statuses that end the lifecycle: the order can be hidden or purged,
# but no longer cancelled.
FINISHED_STATES = {OrderStatus.DELIVERED, OrderStatus.CANCELLED}


def parse_status(value) -> OrderStatus:
    """Coerce a raw status value, rejecting anything outside the enum."""
    try:
        return OrderStatus(value.value if isinstance(value, OrderStatus) else value)
    except ValueError:
        raise ValidationError({"status": [f"Unknown status '{value}'"]}) from None


def assert_can_transition(current, target):
    current, target = OrderStatus(current), OrderStatus(target)
    if target not in _VALID_TRANSITIONS.get(current, set()):
        raise ValidationError({"status": [f"Cannot transition from {current.value} to {target.value}"]})


def aggregate_status(sub_statuses, current) -> OrderStatus:
    """Derive the overall order status from its chef sub-order statuses.

    Rules apply in order, first match wins:
      1. a cancelled order stays cancelled
      2. every sub-order delivered → delivered
      3. every sub-order ready or delivered → ready
      4. any sub-order in progress, ready or delivered → in progress
      5. no sub-order still pending → received
      6. otherwise → pending
    """
    current = OrderStatus(current)
    if current == OrderStatus.CANCELLED:
        return current

    statuses = [OrderStatus(s) for s in sub_statuses]
    if not statuses:
        return current

    if all(s == OrderStatus.DELIVERED for s in statuses):
        return OrderStatus.DELIVERED
    if all(s in (OrderStatus.READY, OrderStatus.DELIVERED) for s in statuses):
        return OrderStatus.READY
    if any(s in (OrderStatus.IN_PROGRESS, OrderStatus.READY, OrderStatus.DELIVERED) for s in statuses):
        return OrderStatus.IN_PROGRESS
    if OrderStatus.PENDING not in statuses:
        return OrderStatus.RECEIVED
    return OrderStatus.PENDING


def history_entry(status, at=None) -> dict:
    return {
        "status": OrderStatus(status).value,
        "timestamp": (at or datetime.now(UTC)).isoformat(),
    }
