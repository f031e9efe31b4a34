"""Messaging port: chat channels between a customer and a chef."""

from abc import ABC, abstractmethod


class MessagingPort(ABC):
    @abstractmethod
    def create_channel(self, order_id: str, customer_id: str, chef_id: str) -> str:
        """Open a chat channel for one (order, customer, chef) triple.

        Returns:
            The channel id assigned by the chat service.
        """
        ...
