"""Fake reviews service for development and testing."""

from uuid import uuid4

from marketplace.reviews.port import ReviewsPort


class FakeReviews(ReviewsPort):
    def __init__(self) -> None:
        self.reviews: dict[str, dict] = {}

    def create_review(
        self,
        order_id: str,
        product_id: str,
        customer_id: str,
        rating: int,
        comment: str | None,
    ) -> str:
        review_id = f"rev-{uuid4().hex[:12]}"
        self.reviews[review_id] = {
            "order_id": order_id,
            "product_id": product_id,
            "customer_id": customer_id,
            "rating": rating,
            "comment": comment,
        }
        return review_id
