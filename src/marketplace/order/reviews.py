"""Product reviews on delivered orders.

Only the customer who placed an order can review its products, only once the
order is delivered, and only once per product. The review itself is stored by
the reviews service; the order remembers which products were reviewed.
"""

import structlog
from protean import handle
from protean.fields import Identifier
from protean.utils.globals import current_domain

from marketplace.domain import marketplace
from marketplace.order.access import Caller, ensure_owner
from marketplace.order.concurrency import process_with_retry
from marketplace.order.order import Order
from marketplace.reviews import get_reviews

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class RecordReview:
    order_id = Identifier(required=True)
    product_id = Identifier(required=True)
    review_id = Identifier(required=True)


@marketplace.command(part_of="Order")
class ReleaseReview:
    order_id = Identifier(required=True)
    review_id = Identifier(required=True)


@marketplace.command_handler(part_of=Order)
class OrderReviewsHandler:
    @handle(RecordReview)
    def record_review(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.record_review(command.product_id, command.review_id)
        repo.add(order)

    @handle(ReleaseReview)
    def release_review(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.release_review(command.review_id)
        repo.add(order)


def can_review(order_id, product_id, caller: Caller):
    """``(True, None)`` or ``(False, reason)`` for the calling customer."""
    order = current_domain.repository_for(Order).get(order_id)
    ensure_owner(order, caller)
    return order.review_eligibility(product_id)


def submit_review(order_id, product_id, caller: Caller, rating, comment=None) -> str:
    """Create a review through the reviews service and record it on the order.

    Returns:
        The id of the created review.
    """
    order = current_domain.repository_for(Order).get(order_id)
    ensure_owner(order, caller)
    order.assert_reviewable(product_id)

    review_id = get_reviews().create_review(
        order_id=str(order_id),
        product_id=str(product_id),
        customer_id=caller.user_id,
        rating=rating,
        comment=comment,
    )

    try:
        process_with_retry(RecordReview(order_id=order_id, product_id=product_id, review_id=review_id))
    except Exception:
        # The review exists but the order does not know about it. Nothing is
        # rolled back; the review id is logged so it can be reconciled.
        logger.error(
            "Review created but not recorded on order",
            order_id=str(order_id),
            product_id=str(product_id),
            review_id=review_id,
        )
        raise

    logger.info("Review recorded", order_id=str(order_id), product_id=str(product_id), review_id=review_id)
    return review_id


def release_review(order_id, review_id, caller: Caller):
    """Forget a review that was deleted from the reviews service."""
    order = current_domain.repository_for(Order).get(order_id)
    if not caller.is_admin():
        ensure_owner(order, caller)
    process_with_retry(ReleaseReview(order_id=order_id, review_id=review_id))
