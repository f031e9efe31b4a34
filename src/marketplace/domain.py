"""Marketplace bounded context: multi-vendor orders for home chefs.

Handles the shopping cart, checkout into per-chef sub-orders, status
aggregation across chefs, cancellation/hiding of orders and review
eligibility. CQRS aggregates with versioned writes; catalogue, chat and
reviews are external collaborators reached through ports.
"""

from protean.domain import Domain

from marketplace.utils.logging import configure_logging, get_logger

configure_logging()

logger = get_logger(__name__)

marketplace = Domain(name="marketplace")
