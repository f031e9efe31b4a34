"""Fake chat service: records channels, optionally fails for tests."""

from uuid import uuid4

from marketplace.messaging.port import MessagingPort


class ChatServiceUnavailable(Exception):
    pass


class FakeMessaging(MessagingPort):
    def __init__(self) -> None:
        self.should_succeed: bool = True
        self.failure_reason: str = "Chat service unavailable"
        self.channels: list[dict] = []

    def configure(self, should_succeed: bool, failure_reason: str = "Chat service unavailable") -> None:
        self.should_succeed = should_succeed
        self.failure_reason = failure_reason

    def create_channel(self, order_id: str, customer_id: str, chef_id: str) -> str:
        if not self.should_succeed:
            raise ChatServiceUnavailable(self.failure_reason)

        channel_id = f"chat-{uuid4().hex[:12]}"
        self.channels.append(
            {
                "channel_id": channel_id,
                "order_id": order_id,
                "customer_id": customer_id,
                "chef_id": chef_id,
            }
        )
        return channel_id
