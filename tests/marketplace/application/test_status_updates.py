"""Application tests for chef and administrator status updates."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.errors import Forbidden
from marketplace.order.order import Order
from marketplace.order.status_updates import UpdateOrderStatus


def _update(order_id, status, caller_id, role):
    return current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=status, caller_id=caller_id, caller_role=role),
        asynchronous=False,
    )


def _load(order_id):
    return current_domain.repository_for(Order).get(order_id)


class TestChefUpdates:
    def test_chef_updates_own_sub_order(self, placed_order_id):
        result = _update(placed_order_id, "in_progress", "chef-a", "seller")

        order = _load(placed_order_id)
        assert order.sub_order_for("chef-a").status == "in_progress"
        assert order.sub_order_for("chef-b").status == "pending"
        assert order.status == "in_progress"
        assert result == "in_progress"

    def test_both_chefs_deliver(self, placed_order_id):
        _update(placed_order_id, "delivered", "chef-a", "seller")
        _update(placed_order_id, "delivered", "chef-b", "seller")

        order = _load(placed_order_id)
        assert order.status == "delivered"
        assert [e["status"] for e in order.history()].count("delivered") == 1

    def test_chef_without_items_forbidden(self, placed_order_id):
        before = _load(placed_order_id)

        with pytest.raises(Forbidden):
            _update(placed_order_id, "ready", "chef-z", "seller")

        after = _load(placed_order_id)
        assert after.status == before.status
        assert after._version == before._version
        assert [s.status for s in after.chef_sub_orders] == ["pending", "pending"]

    def test_customer_forbidden(self, placed_order_id):
        with pytest.raises(Forbidden):
            _update(placed_order_id, "delivered", "cust-001", "customer")

    def test_unknown_status_rejected(self, placed_order_id):
        with pytest.raises(ValidationError):
            _update(placed_order_id, "shipped", "chef-a", "seller")


class TestAdminUpdates:
    def test_admin_cascades(self, placed_order_id):
        _update(placed_order_id, "ready", "admin-1", "admin")

        order = _load(placed_order_id)
        assert order.status == "ready"
        assert all(sub.status == "ready" for sub in order.chef_sub_orders)

    def test_cancelled_order_stays_cancelled(self, placed_order_id):
        _update(placed_order_id, "cancelled", "admin-1", "admin")

        with pytest.raises(ValidationError):
            _update(placed_order_id, "pending", "admin-1", "admin")
        assert _load(placed_order_id).status == "cancelled"
