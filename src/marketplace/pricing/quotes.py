"""Price quotes against the live catalogue.

``quote_product`` backs the single-product quote endpoint and is strict about
missing products. ``quote_lines`` prices a whole cart the way the live cart
view does: products that disappeared and condiments that are no longer
offered are skipped rather than failing the whole quote.
"""

import structlog

from marketplace.cart.cart import selected_condiment_ids
from marketplace.catalogue import get_catalogue
from marketplace.errors import NotFound
from marketplace.pricing.calculator import order_totals, price_line

logger = structlog.get_logger(__name__)


def _line_dict(product, quote) -> dict:
    return {
        "product_id": str(product.product_id),
        "chef_id": str(product.chef_id),
        "product_name": product.name,
        "is_available": product.is_available,
        "base_price": quote.base_price,
        "condiments_price": quote.condiments_price,
        "item_price": quote.item_price,
        "quantity": quote.quantity,
        "line_total": quote.line_total,
        "condiments": [c.to_dict() for c in quote.condiments],
    }


def quote_product(product_id, quantity=1, condiment_ids=None) -> dict:
    """Quote a single product with the given condiments.

    Raises:
        NotFound: the product is not in the catalogue.
        UnknownCondiment: a condiment is not offered on the product.
    """
    product = get_catalogue().get_product(product_id)
    if product is None:
        raise NotFound(f"Product {product_id} not found", product_id=str(product_id))

    quote = price_line(product.price, quantity, condiment_ids, product.condiments)
    return _line_dict(product, quote)


def quote_lines(lines) -> dict:
    """Quote several ``{product_id, quantity, condiment_ids}`` lines with totals."""
    catalogue = get_catalogue()
    quoted = []
    for line in lines:
        product = catalogue.get_product(line["product_id"])
        if product is None:
            logger.info("Skipping missing product in quote", product_id=str(line["product_id"]))
            continue

        # Condiments removed from the product since they were selected
        # are dropped rather than rejected.
        offered = {str(c.condiment_id) for c in product.condiments}
        selected = [cid for cid in line.get("condiment_ids") or [] if str(cid) in offered]
        quote = price_line(product.price, line.get("quantity", 1), selected, product.condiments)
        quoted.append(_line_dict(product, quote))

    totals = order_totals(item["line_total"] for item in quoted)
    return {
        "items": quoted,
        "subtotal": totals.subtotal,
        "service_fee": totals.service_fee,
        "total": totals.total,
    }


def cart_summary(cart) -> dict:
    """Price a live ShoppingCart with current catalogue prices."""
    if cart is None:
        return quote_lines([])

    return quote_lines(
        {
            "product_id": str(item.product_id),
            "quantity": item.quantity,
            "condiment_ids": selected_condiment_ids(item),
        }
        for item in cart.items
    )
