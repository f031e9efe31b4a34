"""Messaging adapter factory."""

from marketplace.messaging.fake_adapter import FakeMessaging
from marketplace.messaging.port import MessagingPort

_current_messaging: MessagingPort | None = None


def get_messaging() -> MessagingPort:
    """Return the current chat service adapter. Defaults to FakeMessaging."""
    global _current_messaging
    if _current_messaging is None:
        _current_messaging = FakeMessaging()
    return _current_messaging


def set_messaging(messaging: MessagingPort) -> None:
    global _current_messaging
    _current_messaging = messaging


def reset_messaging() -> None:
    global _current_messaging
    _current_messaging = None
