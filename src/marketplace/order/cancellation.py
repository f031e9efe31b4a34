"""Order cancellation, hiding and purging: commands and handler.

``CancelOrder`` and ``HideOrder`` go through the same removal rule: a cancel
request against a finished order only hides it, and a pending order is
cancelled for everyone. ``PurgeOrder`` removes a finished order for good.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.access import Role, caller_from, ensure_can_purge, ensure_can_withdraw
from marketplace.order.order import Order
from marketplace.order.removal import RemovalEffect, RequestedAction, removal_effect

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.CUSTOMER.value)


@marketplace.command(part_of="Order")
class HideOrder:
    order_id = Identifier(required=True)
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.CUSTOMER.value)


@marketplace.command(part_of="Order")
class PurgeOrder:
    order_id = Identifier(required=True)
    caller_id = Identifier(required=True)
    caller_role = String(choices=Role, default=Role.CUSTOMER.value)


@marketplace.command_handler(part_of=Order)
class OrderRemovalHandler:
    def _withdraw(self, command, action):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        caller = caller_from(command.caller_id, command.caller_role)
        ensure_can_withdraw(order, caller)

        effect = removal_effect(order.status, action)
        if effect == RemovalEffect.CANCEL:
            order.cancel(cancelled_by=caller.user_id)
        else:
            order.hide(caller.user_id)
        repo.add(order)

        logger.info(
            "Order removal handled",
            order_id=str(order.id),
            requested=action.value,
            effect=effect.value,
            caller_id=caller.user_id,
        )
        return effect.value

    @handle(CancelOrder)
    def cancel_order(self, command):
        return self._withdraw(command, RequestedAction.CANCEL)

    @handle(HideOrder)
    def hide_order(self, command):
        return self._withdraw(command, RequestedAction.DELETE)

    @handle(PurgeOrder)
    def purge_order(self, command):
        ensure_can_purge(caller_from(command.caller_id, command.caller_role))

        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.assert_purgeable()
        repo._dao.delete(order)

        logger.info("Order purged", order_id=str(command.order_id), purged_by=str(command.caller_id))
