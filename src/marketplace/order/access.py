"""Who may do what to an order.

Caller identity is established upstream (the auth gateway) and arrives as a
user id plus a role. The checks below only decide, they never mutate.
"""

from dataclasses import dataclass
from enum import Enum

from protean.exceptions import ValidationError

from marketplace.errors import Forbidden


class Role(Enum):
    CUSTOMER = "customer"
    SELLER = "seller"
    ADMIN = "admin"


@dataclass(frozen=True)
class Caller:
    user_id: str
    role: Role = Role.CUSTOMER

    def is_admin(self) -> bool:
        return self.role == Role.ADMIN


def is_owner(order, caller: Caller) -> bool:
    return str(order.customer_id) == str(caller.user_id)


def sells_in(order, caller: Caller) -> bool:
    return order.sub_order_for(caller.user_id) is not None


def ensure_can_view(order, caller: Caller):
    if caller.is_admin() or is_owner(order, caller) or sells_in(order, caller):
        return
    raise Forbidden("Not authorized to view this order", order_id=str(order.id))


def ensure_can_update_status(order, caller: Caller):
    if caller.is_admin() or sells_in(order, caller):
        return
    raise Forbidden("Not authorized to update this order", order_id=str(order.id))


def ensure_can_withdraw(order, caller: Caller):
    """Cancel or hide: the owner, a chef in the order, or an admin."""
    if caller.is_admin() or is_owner(order, caller) or sells_in(order, caller):
        return
    raise Forbidden("Not authorized to remove this order", order_id=str(order.id))


def ensure_can_purge(caller: Caller):
    if not caller.is_admin():
        raise Forbidden("Only administrators can permanently delete orders")


def ensure_owner(order, caller: Caller):
    if not is_owner(order, caller):
        raise Forbidden("Only the customer who placed the order can do this", order_id=str(order.id))


def caller_from(user_id, role) -> Caller:
    try:
        return Caller(user_id=str(user_id), role=Role(role or Role.CUSTOMER.value))
    except ValueError:
        raise ValidationError({"caller_role": [f"Unknown role '{role}'"]}) from None
