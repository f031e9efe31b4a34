"""Tests for status transitions and the pure sub-order aggregation."""

from itertools import permutations

import pytest
from protean.exceptions import ValidationError

from marketplace.order.status import OrderStatus, aggregate_status, assert_can_transition, parse_status

P, R, IP, RD, D, C = (
    OrderStatus.PENDING,
    OrderStatus.RECEIVED,
    OrderStatus.IN_PROGRESS,
    OrderStatus.READY,
    OrderStatus.DELIVERED,
    OrderStatus.CANCELLED,
)


class TestAggregateStatus:
    def test_all_delivered(self):
        assert aggregate_status([D, D], R) == D

    def test_all_ready_or_delivered(self):
        assert aggregate_status([RD, D], IP) == RD

    def test_any_started(self):
        assert aggregate_status([P, IP], P) == IP
        assert aggregate_status([P, D], P) == IP

    def test_none_pending(self):
        assert aggregate_status([R, R], P) == R

    def test_some_still_pending(self):
        assert aggregate_status([P, R], P) == P

    def test_cancelled_order_stays_cancelled(self):
        assert aggregate_status([D, D], C) == C

    def test_no_sub_orders_keeps_current(self):
        assert aggregate_status([], R) == R

    def test_accepts_raw_values(self):
        assert aggregate_status(["ready", "ready"], "in_progress") == RD

    @pytest.mark.parametrize(
        "statuses",
        [
            [P, R, IP],
            [RD, D, D],
            [P, P, R],
            [R, RD, P, D],
        ],
    )
    def test_independent_of_sub_order_order(self, statuses):
        results = {aggregate_status(list(p), P) for p in permutations(statuses)}
        assert len(results) == 1


class TestTransitions:
    @pytest.mark.parametrize("target", [P, R, IP, RD, D, C])
    def test_progress_states_are_permissive(self, target):
        assert_can_transition(RD, target)

    def test_backwards_allowed(self):
        assert_can_transition(D, P)

    @pytest.mark.parametrize("target", [P, R, IP, RD, D, C])
    def test_cancelled_is_terminal(self, target):
        with pytest.raises(ValidationError):
            assert_can_transition(C, target)

    def test_parse_unknown_status(self):
        with pytest.raises(ValidationError) as exc:
            parse_status("shipped")
        assert "status" in exc.value.messages

    def test_parse_enum_and_value(self):
        assert parse_status("ready") == RD
        assert parse_status(RD) == RD
