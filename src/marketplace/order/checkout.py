"""Checkout: turn the customer's cart into an order.

Every cart line is re-read from the catalogue at checkout time: products that
were removed or marked unavailable since they were added are dropped (and
logged) instead of failing the checkout, unless nothing is left to order.
Prices, names and condiments are taken from the catalogue, never from the
cart.
"""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from marketplace.cart.cart import find_cart, selected_condiment_ids
from marketplace.cart.items import ClearCart
from marketplace.catalogue import get_catalogue
from marketplace.domain import marketplace
from marketplace.errors import EmptyCart, ProductUnavailable
from marketplace.order.order import Order
from marketplace.pricing.calculator import order_totals, price_line

logger = structlog.get_logger(__name__)


@marketplace.command(part_of="Order")
class PlaceOrder:
    customer_id = Identifier(required=True)
    delivery_address = String(required=True, max_length=500)
    delivery_date = String(max_length=10)
    delivery_time = String(max_length=20)
    delivery_notes = String(max_length=1000)
    payment_method = String(max_length=50)


def assemble_lines(cart) -> list[dict]:
    """Price the cart's lines against the live catalogue.

    Raises:
        UnknownCondiment: a selected condiment is no longer offered.
    """
    catalogue = get_catalogue()
    lines = []
    for cart_item in cart.items:
        product = catalogue.get_product(cart_item.product_id)
        if product is None:
            logger.warning(
                "Skipping cart line for missing product",
                cart_id=str(cart.id),
                product_id=str(cart_item.product_id),
            )
            continue
        if not product.is_available:
            logger.warning(
                "Skipping cart line for unavailable product",
                cart_id=str(cart.id),
                product_id=str(cart_item.product_id),
            )
            continue

        quote = price_line(
            product.price,
            cart_item.quantity,
            selected_condiment_ids(cart_item),
            product.condiments,
        )
        lines.append(
            {
                "product_id": str(product.product_id),
                "chef_id": str(product.chef_id),
                "product_name": product.name,
                "quantity": quote.quantity,
                "unit_price": quote.item_price,
                "condiments": [c.to_dict() for c in quote.condiments],
                "subtotal": quote.line_total,
            }
        )
    return lines


@marketplace.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        cart = find_cart(command.customer_id)
        if cart is None or not cart.items:
            raise EmptyCart("Cart is empty", customer_id=str(command.customer_id))

        lines = assemble_lines(cart)
        if not lines:
            raise ProductUnavailable(
                "None of the products in the cart are available",
                customer_id=str(command.customer_id),
            )

        totals = order_totals(line["subtotal"] for line in lines)
        order = Order.place(
            customer_id=command.customer_id,
            lines=lines,
            totals=totals,
            delivery={
                "address": command.delivery_address,
                "date": command.delivery_date,
                "time": command.delivery_time,
                "notes": command.delivery_notes,
            },
            payment_method=command.payment_method,
        )
        current_domain.repository_for(Order).add(order)

        logger.info(
            "Order placed",
            order_id=str(order.id),
            customer_id=str(command.customer_id),
            chef_count=len(order.chef_sub_orders),
            total=totals.total,
        )
        return str(order.id)


def checkout(customer_id, delivery, payment_method=None) -> str:
    """Place an order from the customer's cart, then empty the cart.

    ``delivery`` carries address, date, time and notes.
    """
    order_id = current_domain.process(
        PlaceOrder(
            customer_id=customer_id,
            delivery_address=delivery.get("address"),
            delivery_date=delivery.get("date"),
            delivery_time=delivery.get("time"),
            delivery_notes=delivery.get("notes"),
            payment_method=payment_method,
        ),
        asynchronous=False,
    )
    current_domain.process(ClearCart(customer_id=customer_id), asynchronous=False)
    return order_id
