"""Reviews adapter factory."""

from marketplace.reviews.fake_adapter import FakeReviews
from marketplace.reviews.port import ReviewsPort

_current_reviews: ReviewsPort | None = None


def get_reviews() -> ReviewsPort:
    """Return the current reviews adapter. Defaults to FakeReviews."""
    global _current_reviews
    if _current_reviews is None:
        _current_reviews = FakeReviews()
    return _current_reviews


def set_reviews(reviews: ReviewsPort) -> None:
    global _current_reviews
    _current_reviews = reviews


def reset_reviews() -> None:
    global _current_reviews
    _current_reviews = None
