"""Pydantic request/response schemas for the marketplace API.

These are external contracts, kept separate from the internal Protean
commands they are translated into.
"""

from pydantic import BaseModel, Field


# ---------------------------------------------------------------------------
# Shared
# ---------------------------------------------------------------------------
class StatusResponse(BaseModel):
    status: str = "ok"


# ---------------------------------------------------------------------------
# Order Request Schemas
# ---------------------------------------------------------------------------
class PlaceOrderRequest(BaseModel):
    delivery_address: str = Field(min_length=1, max_length=500)
    delivery_date: str | None = None
    delivery_time: str | None = None
    delivery_notes: str | None = None
    payment_method: str | None = None

    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "delivery_address": "12 Baker Street, London",
                    "delivery_date": "2026-05-01",
                    "delivery_time": "18:30",
                    "delivery_notes": "Ring twice",
                    "payment_method": "card",
                }
            ]
        }
    }


class UpdateOrderStatusRequest(BaseModel):
    status: str


class SubmitReviewRequest(BaseModel):
    product_id: str
    rating: int = Field(ge=1, le=5)
    comment: str | None = None


# ---------------------------------------------------------------------------
# Order Response Schemas
# ---------------------------------------------------------------------------
class OrderIdResponse(BaseModel):
    order_id: str


class OrderStatusResponse(BaseModel):
    order_id: str
    status: str


class RemovalResponse(BaseModel):
    order_id: str
    effect: str


class ReviewIdResponse(BaseModel):
    review_id: str


class CanReviewResponse(BaseModel):
    can_review: bool
    reason: str | None = None


# ---------------------------------------------------------------------------
# Cart Schemas
# ---------------------------------------------------------------------------
class AddToCartRequest(BaseModel):
    product_id: str
    quantity: int = Field(default=1, ge=1)
    condiment_ids: list[str] | None = None


class UpdateCartItemRequest(BaseModel):
    quantity: int | None = Field(default=None, ge=1)
    condiment_ids: list[str] | None = None


class CartIdResponse(BaseModel):
    cart_id: str


# ---------------------------------------------------------------------------
# Pricing Schemas
# ---------------------------------------------------------------------------
class QuoteRequest(BaseModel):
    """Quantities are deliberately loose: anything that is not a whole
    number of at least 1 is priced as 1."""

    product_id: str
    quantity: int | float | str | None = 1
    condiment_ids: list[str] = Field(default_factory=list)


class QuoteLinesRequest(BaseModel):
    items: list[QuoteRequest] = Field(default_factory=list)
