"""Cart item management: commands and handler.

Carts are addressed by customer: the first ``AddToCart`` creates the cart.
"""

import json

import structlog
from protean import handle
from protean.fields import Identifier, Integer, Text
from protean.utils.globals import current_domain

from marketplace.cart.cart import ShoppingCart, find_cart
from marketplace.catalogue import get_catalogue
from marketplace.domain import marketplace
from marketplace.errors import NotFound, ProductUnavailable
from marketplace.pricing.calculator import validate_condiments

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="ShoppingCart")
class AddToCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    condiment_ids = Text()  # JSON: list of condiment ids


@marketplace.command(part_of="ShoppingCart")
class UpdateCartItem:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(min_value=1)
    condiment_ids = Text()  # JSON: list of condiment ids


@marketplace.command(part_of="ShoppingCart")
class RemoveFromCart:
    customer_id = Identifier(required=True)
    product_id = Identifier(required=True)


@marketplace.command(part_of="ShoppingCart")
class ClearCart:
    customer_id = Identifier(required=True)


def _condiment_ids(raw):
    if raw is None:
        return None
    return json.loads(raw) if isinstance(raw, str) else list(raw)


def _require_orderable(product_id, condiment_ids):
    product = get_catalogue().get_product(product_id)
    if product is None:
        raise NotFound(f"Product {product_id} not found", product_id=str(product_id))
    if not product.is_available:
        raise ProductUnavailable(
            f"Product {product.name} is not available",
            product_id=str(product_id),
        )
    validate_condiments(condiment_ids, product.condiments)
    return product


def _existing_cart(customer_id):
    cart = find_cart(customer_id)
    if cart is None:
        raise NotFound("Cart not found", customer_id=str(customer_id))
    return cart


@marketplace.command_handler(part_of=ShoppingCart)
class ManageCartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        condiment_ids = _condiment_ids(command.condiment_ids)
        _require_orderable(command.product_id, condiment_ids)

        repo = current_domain.repository_for(ShoppingCart)
        cart = find_cart(command.customer_id) or ShoppingCart.create(command.customer_id)
        cart.add_item(
            product_id=command.product_id,
            quantity=command.quantity,
            condiment_ids=condiment_ids,
        )
        repo.add(cart)
        return str(cart.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        condiment_ids = _condiment_ids(command.condiment_ids)
        if condiment_ids is not None:
            _require_orderable(command.product_id, condiment_ids)

        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(command.customer_id)
        cart.update_item(
            product_id=command.product_id,
            quantity=command.quantity,
            condiment_ids=condiment_ids,
        )
        repo.add(cart)

    @handle(RemoveFromCart)
    def remove_from_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = _existing_cart(command.customer_id)
        cart.remove_item(command.product_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        cart = find_cart(command.customer_id)
        if cart is None:
            return

        cart.clear()
        current_domain.repository_for(ShoppingCart).add(cart)
        logger.info("Cart cleared", customer_id=str(command.customer_id))
