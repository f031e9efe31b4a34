"""Open one chat channel per chef once an order is placed.

Chat is a convenience: a failing chat service never affects the order, the
failure is only logged.
"""

import json

import structlog
from protean import handle

from marketplace.domain import marketplace
from marketplace.messaging import get_messaging
from marketplace.order.events import OrderPlaced
from marketplace.order.order import Order

logger = structlog.get_logger(__name__)


@marketplace.event_handler(part_of=Order)
class OrderChatChannelsHandler:
    @handle(OrderPlaced)
    def open_chat_channels(self, event: OrderPlaced):
        messaging = get_messaging()
        for chef_id in json.loads(event.chef_ids):
            try:
                channel_id = messaging.create_channel(
                    order_id=str(event.order_id),
                    customer_id=str(event.customer_id),
                    chef_id=chef_id,
                )
            except Exception as exc:
                logger.warning(
                    "Failed to open chat channel",
                    order_id=str(event.order_id),
                    chef_id=chef_id,
                    error=str(exc),
                )
                continue

            logger.info(
                "Chat channel opened",
                order_id=str(event.order_id),
                chef_id=chef_id,
                channel_id=channel_id,
            )
