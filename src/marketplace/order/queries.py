"""Order listings and detail views for customers, chefs and administrators."""

import json

from protean.utils.globals import current_domain

from marketplace.order.access import Caller, ensure_can_view, is_owner
from marketplace.order.order import Order, item_condiments


def _newest_first(orders):
    return sorted(orders, key=lambda o: o.created_at, reverse=True)


def _item_view(item) -> dict:
    return {
        "id": str(item.id),
        "product_id": str(item.product_id),
        "chef_id": str(item.chef_id),
        "product_name": item.product_name,
        "quantity": item.quantity,
        "unit_price": item.unit_price,
        "condiments": item_condiments(item),
        "subtotal": item.subtotal,
    }


def order_view(order) -> dict:
    """Plain-dict representation of an order, as returned by the API."""
    return {
        "id": str(order.id),
        "customer_id": str(order.customer_id),
        "status": order.status,
        "status_history": order.history(),
        "items": [_item_view(item) for item in order.items],
        "chef_sub_orders": [
            {
                "chef_id": str(sub.chef_id),
                "item_ids": json.loads(sub.item_ids),
                "status": sub.status,
                "status_history": json.loads(sub.status_history) if sub.status_history else [],
            }
            for sub in order.chef_sub_orders
        ],
        "pricing": {
            "subtotal": order.pricing.subtotal,
            "service_fee": order.pricing.service_fee,
            "total": order.pricing.total,
        },
        "delivery": {
            "address": order.delivery.address,
            "date": order.delivery.date,
            "time": order.delivery.time,
            "notes": order.delivery.notes,
        },
        "payment_method": order.payment_method,
        "payment_status": order.payment_status,
        "deleted": order.deleted,
        "deleted_at": order.deleted_at.isoformat() if order.deleted_at else None,
        "reviewed_items": [
            {
                "product_id": str(r.product_id),
                "review_id": str(r.review_id),
                "reviewed_at": r.reviewed_at.isoformat(),
            }
            for r in order.reviewed_items
        ],
        "created_at": order.created_at.isoformat() if order.created_at else None,
        "updated_at": order.updated_at.isoformat() if order.updated_at else None,
    }


def customer_orders(customer_id) -> list:
    """The customer's orders, newest first, minus the ones they hid."""
    repo = current_domain.repository_for(Order)
    orders = repo._dao.query.filter(customer_id=str(customer_id)).all().items
    return _newest_first(o for o in orders if not o.is_hidden_for(customer_id))


def chef_orders(chef_id, status=None) -> list:
    """Orders containing the chef's items, optionally by their sub-order status.

    Orders the chef hid are left out; orders hidden only by the customer are
    still listed.
    """
    repo = current_domain.repository_for(Order)
    matching = []
    # Sub-orders are embedded, so the chef filter runs here
    for order in repo._dao.query.all().items:
        sub_order = order.sub_order_for(chef_id)
        if sub_order is None or order.is_hidden_for(chef_id):
            continue
        if status is not None and sub_order.status != status:
            continue
        matching.append(order)
    return _newest_first(matching)


def order_detail(order_id, caller: Caller) -> dict:
    """Order view for an authorized caller.

    For the customer who placed it, each item also says whether it can be
    reviewed right now.
    """
    order = current_domain.repository_for(Order).get(order_id)
    ensure_can_view(order, caller)

    view = order_view(order)
    owner = is_owner(order, caller)
    for item_view in view["items"]:
        item_view["can_review"] = owner and order.review_eligibility(item_view["product_id"])[0]
    return view
