"""What a cancel or delete request actually does to an order.

A request to remove an order either cancels it (the kitchen should stop) or
hides it from the requester's listings (the order is finished, or the caller
explicitly asked to delete it). Both entry points share this one rule.
"""

from enum import Enum

from marketplace.order.status import FINISHED_STATES, OrderStatus


class RequestedAction(Enum):
    CANCEL = "cancel"
    DELETE = "delete"


class RemovalEffect(Enum):
    CANCEL = "cancel"
    HIDE = "hide"


def removal_effect(status, action) -> RemovalEffect:
    if RequestedAction(action) == RequestedAction.DELETE:
        return RemovalEffect.HIDE
    if OrderStatus(status) in FINISHED_STATES:
        return RemovalEffect.HIDE
    return RemovalEffect.CANCEL
