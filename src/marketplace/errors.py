"""Order lifecycle failures surfaced to API callers.

Malformed requests and missing orders use Protean's own ``ValidationError``
and ``ObjectNotFoundError``; everything below is a business-rule outcome with
a stable ``code`` and the HTTP status the API layer maps it to.
"""


class MarketplaceError(Exception):
    code = "marketplace_error"
    status_code = 400

    def __init__(self, message, **context):
        super().__init__(message)
        self.message = message
        self.context = context

    def to_dict(self):
        return {"error": self.code, "message": self.message, **self.context}


class NotFound(MarketplaceError):
    code = "not_found"
    status_code = 404


class Forbidden(MarketplaceError):
    code = "forbidden"
    status_code = 403


class EmptyCart(MarketplaceError):
    code = "empty_cart"


class ProductUnavailable(MarketplaceError):
    code = "product_unavailable"
    status_code = 409


class UnknownCondiment(MarketplaceError):
    code = "unknown_condiment"


class OrderAlreadyProcessing(MarketplaceError):
    code = "order_already_processing"
    status_code = 409


class OrderStillActive(MarketplaceError):
    code = "order_still_active"
    status_code = 409


class ConflictError(MarketplaceError):
    code = "conflict"
    status_code = 409


class ReviewNotAllowed(MarketplaceError):
    status_code = 409


class NotDelivered(ReviewNotAllowed):
    code = "not_delivered"


class NotInOrder(ReviewNotAllowed):
    code = "not_in_order"


class AlreadyReviewed(ReviewNotAllowed):
    code = "already_reviewed"
