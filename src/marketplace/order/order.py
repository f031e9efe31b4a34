"""Order aggregate (CQRS): one checkout across any number of chefs.

An order keeps the flat list of items the customer bought and, alongside it,
one ChefSubOrder per chef that groups that chef's items and tracks their own
kitchen status. The customer-facing status is derived from the sub-orders
(see ``marketplace.order.status``), except when an administrator sets it
directly or the order is cancelled, in which case the value cascades down.

Removal is two separate things: cancelling stops a pending order, while
hiding only takes it out of one party's listings. Hidden orders stay visible
to everybody else and keep their status.
"""

import json
from datetime import UTC, datetime

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import (
    Boolean,
    DateTime,
    Float,
    HasMany,
    Identifier,
    Integer,
    String,
    Text,
    ValueObject,
)

from marketplace.domain import marketplace
from marketplace.errors import AlreadyReviewed, NotDelivered, NotInOrder, OrderAlreadyProcessing, OrderStillActive
from marketplace.order.events import (
    ChefOrderStatusChanged,
    OrderCancelled,
    OrderHidden,
    OrderPlaced,
    OrderStatusChanged,
    ProductReviewRecorded,
    ProductReviewReleased,
)
from marketplace.order.status import (
    FINISHED_STATES,
    OrderStatus,
    PaymentStatus,
    aggregate_status,
    assert_can_transition,
    history_entry,
    parse_status,
)

# Reasons a product cannot be reviewed, in the order they are checked
NOT_DELIVERED = "not_delivered"
NOT_IN_ORDER = "not_in_order"
ALREADY_REVIEWED = "already_reviewed"

_REVIEW_ERRORS = {
    NOT_DELIVERED: (NotDelivered, "Only delivered orders can be reviewed"),
    NOT_IN_ORDER: (NotInOrder, "Product is not part of this order"),
    ALREADY_REVIEWED: (AlreadyReviewed, "Product has already been reviewed for this order"),
}


# ---------------------------------------------------------------------------
# Value Objects
# ---------------------------------------------------------------------------
@marketplace.value_object(part_of="Order")
class OrderPricing:
    """Totals locked at checkout. Each amount is rounded to cents on its own."""

    subtotal = Float(default=0.0)
    service_fee = Float(default=0.0)
    total = Float(default=0.0)


@marketplace.value_object(part_of="Order")
class DeliveryDetails:
    address = String(required=True, max_length=500)
    date = String(max_length=10)  # ISO date string
    time = String(max_length=20)
    notes = String(max_length=1000)


# ---------------------------------------------------------------------------
# Entities
# ---------------------------------------------------------------------------
@marketplace.entity(part_of="Order")
class OrderItem:
    """A priced line, with the product name and condiments copied from the
    catalogue at checkout so later catalogue edits do not rewrite history."""

    product_id = Identifier(required=True)
    chef_id = Identifier(required=True)
    product_name = String(required=True, max_length=255)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    condiments = Text()  # JSON: list of {condiment_id, name, price}
    subtotal = Float(required=True, min_value=0.0)


@marketplace.entity(part_of="Order")
class ChefSubOrder:
    """The slice of an order one chef is responsible for."""

    chef_id = Identifier(required=True)
    item_ids = Text(required=True)  # JSON: list of OrderItem ids
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    status_history = Text()  # JSON: list of {status, timestamp}


@marketplace.entity(part_of="Order")
class ReviewedItem:
    product_id = Identifier(required=True)
    review_id = Identifier(required=True)
    reviewed_at = DateTime(required=True)


def item_condiments(item) -> list[dict]:
    return json.loads(item.condiments) if item.condiments else []


def _history(raw) -> list[dict]:
    return json.loads(raw) if raw else []


def _appended(raw, status, at) -> str:
    return json.dumps(_history(raw) + [history_entry(status, at)])


# ---------------------------------------------------------------------------
# Aggregate Root
# ---------------------------------------------------------------------------
@marketplace.aggregate
class Order:
    customer_id = Identifier(required=True)
    items = HasMany(OrderItem)
    chef_sub_orders = HasMany(ChefSubOrder)
    reviewed_items = HasMany(ReviewedItem)
    pricing = ValueObject(OrderPricing)
    delivery = ValueObject(DeliveryDetails)
    payment_method = String(max_length=50)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    status_history = Text()  # JSON: list of {status, timestamp}
    deleted = Boolean(default=False)
    deleted_at = DateTime()
    hidden_by = Text()  # JSON: list of party ids that hid the order
    created_at = DateTime()
    updated_at = DateTime()

    @invariant.post
    def a_product_is_reviewed_at_most_once(self):
        product_ids = [str(r.product_id) for r in self.reviewed_items]
        if len(product_ids) != len(set(product_ids)):
            raise ValidationError({"reviewed_items": ["A product can only be reviewed once per order"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(cls, customer_id, lines, totals, delivery, payment_method=None):
        """Create an order from priced checkout lines.

        Args:
            customer_id: The customer placing the order.
            lines: Dicts with product_id, chef_id, product_name, quantity,
                unit_price, condiments (list of dicts) and subtotal.
            totals: ``Totals`` from the pricing calculator.
            delivery: Dict with address, date, time, notes.
            payment_method: Free-form payment method label.
        """
        if not lines:
            raise ValidationError({"items": ["An order needs at least one item"]})

        now = datetime.now(UTC)

        items = [
            OrderItem(
                product_id=line["product_id"],
                chef_id=line["chef_id"],
                product_name=line["product_name"],
                quantity=line["quantity"],
                unit_price=line["unit_price"],
                condiments=json.dumps(line.get("condiments") or []),
                subtotal=line["subtotal"],
            )
            for line in lines
        ]

        # One sub-order per chef, in order of first appearance
        grouped = {}
        for item in items:
            grouped.setdefault(str(item.chef_id), []).append(str(item.id))

        pending_history = json.dumps([history_entry(OrderStatus.PENDING, now)])
        sub_orders = [
            ChefSubOrder(
                chef_id=chef_id,
                item_ids=json.dumps(item_ids),
                status=OrderStatus.PENDING.value,
                status_history=pending_history,
            )
            for chef_id, item_ids in grouped.items()
        ]
        _assert_partition(items, sub_orders)

        order = cls(
            customer_id=customer_id,
            items=items,
            chef_sub_orders=sub_orders,
            pricing=OrderPricing(
                subtotal=totals.subtotal,
                service_fee=totals.service_fee,
                total=totals.total,
            ),
            delivery=DeliveryDetails(**delivery),
            payment_method=payment_method,
            # Payment capture happens outside the marketplace
            payment_status=PaymentStatus.PAID.value,
            status=OrderStatus.PENDING.value,
            status_history=pending_history,
            hidden_by=json.dumps([]),
            created_at=now,
            updated_at=now,
        )
        order.raise_(
            OrderPlaced(
                order_id=str(order.id),
                customer_id=str(customer_id),
                chef_ids=json.dumps(list(grouped)),
                item_count=len(items),
                total_amount=totals.total,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Lookups
    # -------------------------------------------------------------------
    def sub_order_for(self, chef_id):
        return next((s for s in self.chef_sub_orders if str(s.chef_id) == str(chef_id)), None)

    def chef_ids(self) -> list[str]:
        return [str(s.chef_id) for s in self.chef_sub_orders]

    def items_for(self, sub_order) -> list:
        item_ids = set(json.loads(sub_order.item_ids))
        return [item for item in self.items if str(item.id) in item_ids]

    def contains_product(self, product_id) -> bool:
        return any(str(item.product_id) == str(product_id) for item in self.items)

    def history(self) -> list[dict]:
        return _history(self.status_history)

    def hidden_from(self) -> list[str]:
        return json.loads(self.hidden_by) if self.hidden_by else []

    def is_hidden_for(self, party_id) -> bool:
        return str(party_id) in self.hidden_from()

    # -------------------------------------------------------------------
    # Status
    # -------------------------------------------------------------------
    def _set_overall_status(self, new_status, at, forced=False):
        previous = OrderStatus(self.status)
        if new_status == previous:
            return

        self.status = new_status.value
        self.status_history = _appended(self.status_history, new_status, at)
        self.raise_(
            OrderStatusChanged(
                order_id=str(self.id),
                previous_status=previous.value,
                new_status=new_status.value,
                forced=forced,
                changed_at=at,
            )
        )

    def _set_sub_order_status(self, sub_order, new_status, at):
        previous = OrderStatus(sub_order.status)
        if new_status == previous:
            return

        sub_order.status = new_status.value
        sub_order.status_history = _appended(sub_order.status_history, new_status, at)
        self.raise_(
            ChefOrderStatusChanged(
                order_id=str(self.id),
                chef_id=str(sub_order.chef_id),
                previous_status=previous.value,
                new_status=new_status.value,
                changed_at=at,
            )
        )

    def update_chef_status(self, chef_id, status):
        """A chef moves their own sub-order; the overall status follows."""
        target = parse_status(status)
        sub_order = self.sub_order_for(chef_id)
        if sub_order is None:
            raise ValidationError({"chef_id": [f"Chef {chef_id} has no items in this order"]})
        if target == OrderStatus.CANCELLED:
            raise ValidationError({"status": ["Chefs cannot cancel an order"]})
        assert_can_transition(sub_order.status, target)

        now = datetime.now(UTC)
        with atomic_change(self):
            self._set_sub_order_status(sub_order, target, now)
            overall = aggregate_status([s.status for s in self.chef_sub_orders], self.status)
            self._set_overall_status(overall, now)
            self.updated_at = now

    def force_status(self, status):
        """Administrator override: set the overall status and cascade it."""
        target = parse_status(status)
        assert_can_transition(self.status, target)

        now = datetime.now(UTC)
        with atomic_change(self):
            for sub_order in self.chef_sub_orders:
                self._set_sub_order_status(sub_order, target, now)
            self._set_overall_status(target, now, forced=True)
            self.updated_at = now

    # -------------------------------------------------------------------
    # Removal
    # -------------------------------------------------------------------
    def cancel(self, cancelled_by):
        if OrderStatus(self.status) != OrderStatus.PENDING:
            raise OrderAlreadyProcessing(
                "Order is already being processed and can no longer be cancelled",
                order_id=str(self.id),
                status=self.status,
            )

        now = datetime.now(UTC)
        with atomic_change(self):
            for sub_order in self.chef_sub_orders:
                self._set_sub_order_status(sub_order, OrderStatus.CANCELLED, now)
            self._set_overall_status(OrderStatus.CANCELLED, now)
            self.updated_at = now

        self.raise_(OrderCancelled(order_id=str(self.id), cancelled_by=str(cancelled_by), cancelled_at=now))

    def hide(self, party_id):
        """Take the order out of ``party_id``'s listings. Repeating it is a no-op."""
        if self.is_hidden_for(party_id):
            return

        now = datetime.now(UTC)
        self.hidden_by = json.dumps(self.hidden_from() + [str(party_id)])
        if not self.deleted:
            self.deleted = True
            self.deleted_at = now
        self.updated_at = now

        self.raise_(OrderHidden(order_id=str(self.id), hidden_by=str(party_id), hidden_at=now))

    def assert_purgeable(self):
        if OrderStatus(self.status) not in FINISHED_STATES:
            raise OrderStillActive(
                "Only delivered or cancelled orders can be permanently deleted",
                order_id=str(self.id),
                status=self.status,
            )

    # -------------------------------------------------------------------
    # Reviews
    # -------------------------------------------------------------------
    def review_eligibility(self, product_id):
        """``(True, None)`` if the product can be reviewed, else ``(False, reason)``."""
        if OrderStatus(self.status) != OrderStatus.DELIVERED:
            return False, NOT_DELIVERED
        if not self.contains_product(product_id):
            return False, NOT_IN_ORDER
        if any(str(r.product_id) == str(product_id) for r in self.reviewed_items):
            return False, ALREADY_REVIEWED
        return True, None

    def assert_reviewable(self, product_id):
        allowed, reason = self.review_eligibility(product_id)
        if not allowed:
            error_class, message = _REVIEW_ERRORS[reason]
            raise error_class(message, order_id=str(self.id), product_id=str(product_id))

    def record_review(self, product_id, review_id):
        self.assert_reviewable(product_id)

        now = datetime.now(UTC)
        self.add_reviewed_items(ReviewedItem(product_id=product_id, review_id=review_id, reviewed_at=now))
        self.updated_at = now

        self.raise_(
            ProductReviewRecorded(
                order_id=str(self.id),
                product_id=str(product_id),
                review_id=str(review_id),
                reviewed_at=now,
            )
        )

    def release_review(self, review_id):
        """Forget a deleted review so its product can be reviewed again."""
        entry = next((r for r in self.reviewed_items if str(r.review_id) == str(review_id)), None)
        if entry is None:
            raise ValidationError({"review_id": [f"Review {review_id} is not recorded on this order"]})

        self.remove_reviewed_items(entry)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            ProductReviewReleased(
                order_id=str(self.id),
                product_id=str(entry.product_id),
                review_id=str(review_id),
            )
        )


def _assert_partition(items, sub_orders):
    """Every item belongs to exactly one chef sub-order."""
    assigned = [item_id for sub in sub_orders for item_id in json.loads(sub.item_ids)]
    if sorted(assigned) != sorted(str(item.id) for item in items):
        raise ValidationError({"chef_sub_orders": ["Every item must belong to exactly one chef sub-order"]})
