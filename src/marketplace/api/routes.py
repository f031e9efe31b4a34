"""FastAPI routes for the marketplace: orders, carts and price quotes.

The calling user is identified by the ``X-User-Id`` and ``X-User-Role``
headers, set by the authentication gateway in front of this service.
"""

import json

from fastapi import APIRouter, Depends, Header
from protean.utils.globals import current_domain

from marketplace.api.schemas import (
    AddToCartRequest,
    CanReviewResponse,
    CartIdResponse,
    OrderIdResponse,
    OrderStatusResponse,
    PlaceOrderRequest,
    QuoteLinesRequest,
    QuoteRequest,
    RemovalResponse,
    ReviewIdResponse,
    StatusResponse,
    SubmitReviewRequest,
    UpdateCartItemRequest,
    UpdateOrderStatusRequest,
)
from marketplace.cart.cart import find_cart
from marketplace.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from marketplace.order.access import Caller, caller_from
from marketplace.order.cancellation import CancelOrder, HideOrder, PurgeOrder
from marketplace.order.checkout import checkout
from marketplace.order.concurrency import process_with_retry
from marketplace.order.queries import chef_orders, customer_orders, order_detail, order_view
from marketplace.order.reviews import can_review, release_review, submit_review
from marketplace.order.status_updates import UpdateOrderStatus
from marketplace.pricing.quotes import cart_summary, quote_lines, quote_product


def current_caller(
    x_user_id: str = Header(),
    x_user_role: str = Header(default="customer"),
) -> Caller:
    return caller_from(x_user_id, x_user_role)


# ---------------------------------------------------------------------------
# Order Router
# ---------------------------------------------------------------------------
order_router = APIRouter(prefix="/orders", tags=["orders"])


@order_router.post("", status_code=201, response_model=OrderIdResponse)
async def place_order(body: PlaceOrderRequest, caller: Caller = Depends(current_caller)) -> OrderIdResponse:
    order_id = checkout(
        customer_id=caller.user_id,
        delivery={
            "address": body.delivery_address,
            "date": body.delivery_date,
            "time": body.delivery_time,
            "notes": body.delivery_notes,
        },
        payment_method=body.payment_method,
    )
    return OrderIdResponse(order_id=order_id)


@order_router.get("/mine")
async def list_my_orders(caller: Caller = Depends(current_caller)):
    return {"orders": [order_view(order) for order in customer_orders(caller.user_id)]}


@order_router.get("/chef")
async def list_chef_orders(status: str | None = None, caller: Caller = Depends(current_caller)):
    return {"orders": [order_view(order) for order in chef_orders(caller.user_id, status=status)]}


@order_router.get("/{order_id}")
async def get_order(order_id: str, caller: Caller = Depends(current_caller)):
    return order_detail(order_id, caller)


@order_router.patch("/{order_id}/status", response_model=OrderStatusResponse)
async def update_order_status(
    order_id: str,
    body: UpdateOrderStatusRequest,
    caller: Caller = Depends(current_caller),
) -> OrderStatusResponse:
    command = UpdateOrderStatus(
        order_id=order_id,
        status=body.status,
        caller_id=caller.user_id,
        caller_role=caller.role.value,
    )
    status = process_with_retry(command)
    return OrderStatusResponse(order_id=order_id, status=status)


@order_router.post("/{order_id}/cancel", response_model=RemovalResponse)
async def cancel_order(order_id: str, caller: Caller = Depends(current_caller)) -> RemovalResponse:
    command = CancelOrder(order_id=order_id, caller_id=caller.user_id, caller_role=caller.role.value)
    effect = process_with_retry(command)
    return RemovalResponse(order_id=order_id, effect=effect)


@order_router.post("/{order_id}/hide", response_model=RemovalResponse)
async def hide_order(order_id: str, caller: Caller = Depends(current_caller)) -> RemovalResponse:
    command = HideOrder(order_id=order_id, caller_id=caller.user_id, caller_role=caller.role.value)
    effect = process_with_retry(command)
    return RemovalResponse(order_id=order_id, effect=effect)


@order_router.delete("/{order_id}", response_model=StatusResponse)
async def purge_order(order_id: str, caller: Caller = Depends(current_caller)) -> StatusResponse:
    command = PurgeOrder(order_id=order_id, caller_id=caller.user_id, caller_role=caller.role.value)
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@order_router.get("/{order_id}/can-review/{product_id}", response_model=CanReviewResponse)
async def check_can_review(
    order_id: str,
    product_id: str,
    caller: Caller = Depends(current_caller),
) -> CanReviewResponse:
    allowed, reason = can_review(order_id, product_id, caller)
    return CanReviewResponse(can_review=allowed, reason=reason)


@order_router.post("/{order_id}/reviews", status_code=201, response_model=ReviewIdResponse)
async def create_review(
    order_id: str,
    body: SubmitReviewRequest,
    caller: Caller = Depends(current_caller),
) -> ReviewIdResponse:
    review_id = submit_review(order_id, body.product_id, caller, rating=body.rating, comment=body.comment)
    return ReviewIdResponse(review_id=review_id)


@order_router.delete("/{order_id}/reviews/{review_id}", response_model=StatusResponse)
async def delete_review(order_id: str, review_id: str, caller: Caller = Depends(current_caller)) -> StatusResponse:
    release_review(order_id, review_id, caller)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Cart Router
# ---------------------------------------------------------------------------
cart_router = APIRouter(prefix="/cart", tags=["cart"])


@cart_router.get("")
async def get_cart(caller: Caller = Depends(current_caller)):
    cart = find_cart(caller.user_id)
    return {"cart_id": str(cart.id) if cart else None, **cart_summary(cart)}


@cart_router.post("/items", status_code=201, response_model=CartIdResponse)
async def add_cart_item(body: AddToCartRequest, caller: Caller = Depends(current_caller)) -> CartIdResponse:
    command = AddToCart(
        customer_id=caller.user_id,
        product_id=body.product_id,
        quantity=body.quantity,
        condiment_ids=json.dumps(body.condiment_ids) if body.condiment_ids is not None else None,
    )
    cart_id = current_domain.process(command, asynchronous=False)
    return CartIdResponse(cart_id=cart_id)


@cart_router.put("/items/{product_id}", response_model=StatusResponse)
async def update_cart_item(
    product_id: str,
    body: UpdateCartItemRequest,
    caller: Caller = Depends(current_caller),
) -> StatusResponse:
    command = UpdateCartItem(
        customer_id=caller.user_id,
        product_id=product_id,
        quantity=body.quantity,
        condiment_ids=json.dumps(body.condiment_ids) if body.condiment_ids is not None else None,
    )
    current_domain.process(command, asynchronous=False)
    return StatusResponse()


@cart_router.delete("/items/{product_id}", response_model=StatusResponse)
async def remove_cart_item(product_id: str, caller: Caller = Depends(current_caller)) -> StatusResponse:
    current_domain.process(RemoveFromCart(customer_id=caller.user_id, product_id=product_id), asynchronous=False)
    return StatusResponse()


@cart_router.delete("", response_model=StatusResponse)
async def clear_cart(caller: Caller = Depends(current_caller)) -> StatusResponse:
    current_domain.process(ClearCart(customer_id=caller.user_id), asynchronous=False)
    return StatusResponse()


# ---------------------------------------------------------------------------
# Pricing Router
# ---------------------------------------------------------------------------
pricing_router = APIRouter(prefix="/pricing", tags=["pricing"])


@pricing_router.post("/quote")
async def quote(body: QuoteRequest):
    return quote_product(body.product_id, body.quantity, body.condiment_ids)


@pricing_router.post("/cart")
async def quote_cart(body: QuoteLinesRequest):
    return quote_lines(line.model_dump() for line in body.items)
