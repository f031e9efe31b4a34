"""Application tests for version-checked order writes and conflict retry."""

import pytest
from protean import current_domain
from protean.exceptions import ExpectedVersionError

import marketplace.order.concurrency as concurrency
from marketplace.errors import ConflictError
from marketplace.order.concurrency import MAX_CONFLICT_RETRIES, process_with_retry
from marketplace.order.order import Order
from marketplace.order.status_updates import UpdateOrderStatus


class _FlakyDomain:
    """Stands in for the domain, failing the first ``conflicts`` dispatches."""

    def __init__(self, conflicts, result="ok"):
        self.conflicts = conflicts
        self.result = result
        self.calls = 0

    def process(self, command, asynchronous=True):
        self.calls += 1
        if self.calls <= self.conflicts:
            raise ExpectedVersionError("Wrong expected version")
        return self.result


class TestStaleWrites:
    def test_stale_copy_cannot_be_saved(self, placed_order_id):
        repo = current_domain.repository_for(Order)
        first = repo.get(placed_order_id)
        second = repo.get(placed_order_id)

        first.update_chef_status("chef-a", "received")
        repo.add(first)

        second.update_chef_status("chef-b", "ready")
        with pytest.raises(ExpectedVersionError):
            repo.add(second)

        order = repo.get(placed_order_id)
        assert order.sub_order_for("chef-a").status == "received"
        assert order.sub_order_for("chef-b").status == "pending"

    def test_reloading_reapplies_on_fresh_state(self, placed_order_id):
        command = UpdateOrderStatus(order_id=placed_order_id, status="ready", caller_id="chef-b", caller_role="seller")
        current_domain.process(
            UpdateOrderStatus(order_id=placed_order_id, status="received", caller_id="chef-a", caller_role="seller"),
            asynchronous=False,
        )

        process_with_retry(command)

        order = current_domain.repository_for(Order).get(placed_order_id)
        assert order.sub_order_for("chef-a").status == "received"
        assert order.sub_order_for("chef-b").status == "ready"


class TestProcessWithRetry:
    def test_succeeds_after_transient_conflicts(self, monkeypatch):
        domain = _FlakyDomain(conflicts=MAX_CONFLICT_RETRIES - 1, result="in_progress")
        monkeypatch.setattr(concurrency, "current_domain", domain)

        assert process_with_retry(object()) == "in_progress"
        assert domain.calls == MAX_CONFLICT_RETRIES

    def test_gives_up_with_conflict_error(self, monkeypatch):
        domain = _FlakyDomain(conflicts=10)
        monkeypatch.setattr(concurrency, "current_domain", domain)

        with pytest.raises(ConflictError) as exc:
            process_with_retry(object())

        assert domain.calls == MAX_CONFLICT_RETRIES
        assert exc.value.to_dict()["error"] == "conflict"
        assert exc.value.status_code == 409

    def test_other_errors_are_not_retried(self, monkeypatch):
        class _Failing:
            calls = 0

            def process(self, command, asynchronous=True):
                self.calls += 1
                raise ValueError("boom")

        domain = _Failing()
        monkeypatch.setattr(concurrency, "current_domain", domain)

        with pytest.raises(ValueError):
            process_with_retry(object())
        assert domain.calls == 1
