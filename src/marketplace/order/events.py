"""Domain events for the Order aggregate.

Events are versioned, immutable facts. Within the marketplace they drive
side effects that must not block the request that caused them, such as
opening chat channels once an order is placed.
"""

from protean.fields import Boolean, DateTime, Float, Identifier, Integer, String, Text

from marketplace.domain import marketplace


@marketplace.event(part_of="Order")
class OrderPlaced:
    """A checkout produced a new order, split into one sub-order per chef."""

    __version__ = 1

    order_id = Identifier(required=True)
    customer_id = Identifier(required=True)
    chef_ids = Text(required=True)  # JSON: list of chef ids
    item_count = Integer(required=True)
    total_amount = Float(required=True)
    placed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class ChefOrderStatusChanged:
    """A chef moved their own sub-order to a new status."""

    __version__ = 1

    order_id = Identifier(required=True)
    chef_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderStatusChanged:
    """The customer-facing status changed.

    ``forced`` is set when an administrator set the status directly instead
    of it being derived from the chef sub-orders.
    """

    __version__ = 1

    order_id = Identifier(required=True)
    previous_status = String(required=True)
    new_status = String(required=True)
    forced = Boolean(default=False)
    changed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderCancelled:
    """A pending order was cancelled along with every chef sub-order."""

    __version__ = 1

    order_id = Identifier(required=True)
    cancelled_by = Identifier(required=True)
    cancelled_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class OrderHidden:
    """One party removed the order from their own listings."""

    __version__ = 1

    order_id = Identifier(required=True)
    hidden_by = Identifier(required=True)
    hidden_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class ProductReviewRecorded:
    __version__ = 1

    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    review_id = Identifier(required=True)
    reviewed_at = DateTime(required=True)


@marketplace.event(part_of="Order")
class ProductReviewReleased:
    """A review was deleted, so the product can be reviewed again."""

    __version__ = 1

    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    review_id = Identifier(required=True)
