"""Application tests for cancelling, hiding and purging orders."""

import pytest
from protean import current_domain
from protean.exceptions import ObjectNotFoundError

from marketplace.errors import Forbidden, OrderAlreadyProcessing, OrderStillActive
from marketplace.order.cancellation import CancelOrder, HideOrder, PurgeOrder
from marketplace.order.order import Order
from marketplace.order.status_updates import UpdateOrderStatus


def _load(order_id):
    return current_domain.repository_for(Order).get(order_id)


def _force(order_id, status):
    current_domain.process(
        UpdateOrderStatus(order_id=order_id, status=status, caller_id="admin-1", caller_role="admin"),
        asynchronous=False,
    )


def _cancel(order_id, caller_id="cust-001", role="customer"):
    return current_domain.process(
        CancelOrder(order_id=order_id, caller_id=caller_id, caller_role=role),
        asynchronous=False,
    )


def _hide(order_id, caller_id="cust-001", role="customer"):
    return current_domain.process(
        HideOrder(order_id=order_id, caller_id=caller_id, caller_role=role),
        asynchronous=False,
    )


def _purge(order_id, caller_id="admin-1", role="admin"):
    return current_domain.process(
        PurgeOrder(order_id=order_id, caller_id=caller_id, caller_role=role),
        asynchronous=False,
    )


class TestCancelOrder:
    def test_owner_cancels_pending_order(self, placed_order_id):
        assert _cancel(placed_order_id) == "cancel"

        order = _load(placed_order_id)
        assert order.status == "cancelled"
        assert all(sub.status == "cancelled" for sub in order.chef_sub_orders)
        assert order.deleted is False

    def test_chef_in_order_may_cancel(self, placed_order_id):
        assert _cancel(placed_order_id, "chef-b", "seller") == "cancel"

    def test_processing_order_cannot_be_cancelled(self, placed_order_id):
        _force(placed_order_id, "received")

        with pytest.raises(OrderAlreadyProcessing):
            _cancel(placed_order_id)

        assert _load(placed_order_id).status == "received"

    def test_cancel_on_delivered_order_hides(self, placed_order_id):
        _force(placed_order_id, "delivered")

        assert _cancel(placed_order_id) == "hide"

        order = _load(placed_order_id)
        assert order.status == "delivered"
        assert order.deleted is True

    def test_stranger_forbidden(self, placed_order_id):
        with pytest.raises(Forbidden):
            _cancel(placed_order_id, "cust-999")
        assert _load(placed_order_id).status == "pending"


class TestHideOrder:
    def test_hide_pending_order_keeps_it_active(self, placed_order_id):
        assert _hide(placed_order_id) == "hide"

        order = _load(placed_order_id)
        assert order.status == "pending"
        assert order.deleted is True
        assert order.is_hidden_for("cust-001")

    def test_hide_twice(self, placed_order_id):
        _hide(placed_order_id)
        _hide(placed_order_id)

        assert _load(placed_order_id).hidden_from() == ["cust-001"]

    def test_admin_may_hide(self, placed_order_id):
        assert _hide(placed_order_id, "admin-1", "admin") == "hide"


class TestPurgeOrder:
    def test_admin_purges_finished_order(self, placed_order_id):
        _force(placed_order_id, "delivered")

        _purge(placed_order_id)

        with pytest.raises(ObjectNotFoundError):
            _load(placed_order_id)

    def test_active_order_not_purged(self, placed_order_id):
        with pytest.raises(OrderStillActive):
            _purge(placed_order_id)
        assert _load(placed_order_id) is not None

    def test_owner_cannot_purge(self, placed_order_id):
        _force(placed_order_id, "cancelled")
        with pytest.raises(Forbidden):
            _purge(placed_order_id, "cust-001", "customer")

    def test_missing_order(self, catalogue):
        with pytest.raises(ObjectNotFoundError):
            _purge("order-missing")
