"""Reviews port: review storage lives in a separate service."""

from abc import ABC, abstractmethod


class ReviewsPort(ABC):
    @abstractmethod
    def create_review(
        self,
        order_id: str,
        product_id: str,
        customer_id: str,
        rating: int,
        comment: str | None,
    ) -> str:
        """Store a review and return its id."""
        ...
