"""Shopping Cart aggregate (CQRS): the customer's live cart.

One cart per customer, at most one line per product. Lines carry the
selected condiment ids; prices are not stored on the cart and are always
recomputed from the catalogue (live cart view, checkout).
"""

import json
from datetime import UTC, datetime

from protean.exceptions import ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer, Text
from protean.utils.globals import current_domain

from marketplace.cart.events import CartCleared, CartItemAdded, CartItemRemoved, CartItemUpdated
from marketplace.domain import marketplace


@marketplace.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    condiment_ids = Text()  # JSON: list of condiment ids
    added_at = DateTime()


def selected_condiment_ids(item) -> list[str]:
    """Decode a cart line's condiment selection."""
    return json.loads(item.condiment_ids) if item.condiment_ids else []


@marketplace.aggregate
class ShoppingCart:
    customer_id = Identifier(required=True)
    items = HasMany(CartItem)
    created_at = DateTime()
    updated_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(cls, customer_id):
        now = datetime.now(UTC)
        return cls(customer_id=customer_id, created_at=now, updated_at=now)

    def _find(self, product_id):
        return next((i for i in self.items if str(i.product_id) == str(product_id)), None)

    # -------------------------------------------------------------------
    # Item management
    # -------------------------------------------------------------------
    def add_item(self, product_id, quantity, condiment_ids=None):
        """Add a product, or increase its quantity if it is already in the cart.

        A non-None ``condiment_ids`` replaces the line's condiment selection.
        """
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        now = datetime.now(UTC)
        existing = self._find(product_id)

        if existing:
            existing.quantity += quantity
            if condiment_ids is not None:
                existing.condiment_ids = json.dumps(list(condiment_ids))
            line = existing
        else:
            line = CartItem(
                product_id=product_id,
                quantity=quantity,
                condiment_ids=json.dumps(list(condiment_ids or [])),
                added_at=now,
            )
            self.add_items(line)

        self.updated_at = now

        self.raise_(
            CartItemAdded(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                product_id=str(product_id),
                quantity=quantity,
                condiment_ids=line.condiment_ids,
            )
        )

    def update_item(self, product_id, quantity=None, condiment_ids=None):
        """Change the quantity and/or condiment selection of an existing line."""
        item = self._find(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})
        if quantity is not None and quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        previous_quantity = item.quantity
        if quantity is not None:
            item.quantity = quantity
        if condiment_ids is not None:
            item.condiment_ids = json.dumps(list(condiment_ids))
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartItemUpdated(
                cart_id=str(self.id),
                product_id=str(product_id),
                previous_quantity=previous_quantity,
                new_quantity=item.quantity,
                condiment_ids=item.condiment_ids,
            )
        )

    def remove_item(self, product_id):
        item = self._find(product_id)
        if item is None:
            raise ValidationError({"product_id": ["Product is not in the cart"]})

        self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(CartItemRemoved(cart_id=str(self.id), product_id=str(product_id)))

    def clear(self):
        """Remove every line from the cart."""
        lines = list(self.items)
        for item in lines:
            self.remove_items(item)
        self.updated_at = datetime.now(UTC)

        self.raise_(
            CartCleared(
                cart_id=str(self.id),
                customer_id=str(self.customer_id),
                items_removed=len(lines),
            )
        )


def find_cart(customer_id):
    """The customer's cart, or None when they never added anything."""
    repo = current_domain.repository_for(ShoppingCart)
    carts = repo._dao.query.filter(customer_id=str(customer_id)).all().items
    return carts[0] if carts else None
