"""Order status updates: command and handler.

Chefs move their own sub-order and the overall status is re-derived;
administrators set the overall status, which cascades to every sub-order.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.access import Role, caller_from, ensure_can_update_status
from marketplace.order.order import Order
from marketplace.order.status import OrderStatus

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.CUSTOMER.value)


@marketplace.command_handler(part_of=Order)
class UpdateOrderStatusHandler:
    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        caller = caller_from(command.caller_id, command.caller_role)
        ensure_can_update_status(order, caller)

        if caller.is_admin():
            order.force_status(command.status)
        else:
            order.update_chef_status(caller.user_id, command.status)
        repo.add(order)

        logger.info(
            "Order status updated",
            order_id=str(order.id),
            updated_by=caller.user_id,
            role=caller.role.value,
            requested=command.status,
            status=order.status,
        )
        return order.status
