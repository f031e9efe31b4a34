"""Application tests for cart item commands."""

import pytest
from protean import current_domain
from protean.exceptions import ValidationError

from marketplace.cart.cart import ShoppingCart, find_cart, selected_condiment_ids
from marketplace.cart.items import AddToCart, ClearCart, RemoveFromCart, UpdateCartItem
from marketplace.errors import NotFound, ProductUnavailable, UnknownCondiment


def _add(product_id, quantity=1, condiment_ids=None, customer_id="cust-001"):
    return current_domain.process(
        AddToCart(customer_id=customer_id, product_id=product_id, quantity=quantity, condiment_ids=condiment_ids),
        asynchronous=False,
    )


class TestAddToCartCommand:
    def test_first_add_creates_cart(self, catalogue):
        cart_id = _add("prod-lasagne", 2)

        cart = current_domain.repository_for(ShoppingCart).get(cart_id)
        assert str(cart.customer_id) == "cust-001"
        assert cart.items[0].quantity == 2

    def test_one_cart_per_customer(self, catalogue):
        first = _add("prod-lasagne")
        second = _add("prod-tiramisu")

        assert first == second
        assert len(find_cart("cust-001").items) == 2

    def test_repeat_add_merges(self, catalogue):
        _add("prod-soup", 1, '["cond-bread"]')
        _add("prod-soup", 2)

        cart = find_cart("cust-001")
        assert len(cart.items) == 1
        assert cart.items[0].quantity == 3
        assert selected_condiment_ids(cart.items[0]) == ["cond-bread"]

    def test_unknown_product(self, catalogue):
        with pytest.raises(NotFound):
            _add("prod-missing")
        assert find_cart("cust-001") is None

    def test_unavailable_product(self, catalogue):
        catalogue.mark_unavailable("prod-lasagne")
        with pytest.raises(ProductUnavailable):
            _add("prod-lasagne")

    def test_unknown_condiment(self, catalogue):
        with pytest.raises(UnknownCondiment):
            _add("prod-soup", 1, '["cond-caviar"]')

    def test_quantity_must_be_positive(self, catalogue):
        with pytest.raises(ValidationError):
            _add("prod-lasagne", 0)


class TestUpdateAndRemoveCommands:
    def test_update_quantity(self, catalogue):
        _add("prod-lasagne")
        current_domain.process(
            UpdateCartItem(customer_id="cust-001", product_id="prod-lasagne", quantity=5),
            asynchronous=False,
        )
        assert find_cart("cust-001").items[0].quantity == 5

    def test_update_condiments_validated(self, catalogue):
        _add("prod-soup")
        with pytest.raises(UnknownCondiment):
            current_domain.process(
                UpdateCartItem(customer_id="cust-001", product_id="prod-soup", condiment_ids='["cond-caviar"]'),
                asynchronous=False,
            )

    def test_update_without_cart(self, catalogue):
        with pytest.raises(NotFound):
            current_domain.process(
                UpdateCartItem(customer_id="cust-001", product_id="prod-lasagne", quantity=2),
                asynchronous=False,
            )

    def test_remove(self, catalogue):
        _add("prod-lasagne")
        _add("prod-tiramisu")
        current_domain.process(RemoveFromCart(customer_id="cust-001", product_id="prod-lasagne"), asynchronous=False)

        assert [item.product_id for item in find_cart("cust-001").items] == ["prod-tiramisu"]

    def test_clear(self, catalogue):
        _add("prod-lasagne")
        current_domain.process(ClearCart(customer_id="cust-001"), asynchronous=False)
        assert len(find_cart("cust-001").items) == 0

    def test_clear_without_cart_is_noop(self, catalogue):
        current_domain.process(ClearCart(customer_id="cust-001"), asynchronous=False)
        assert find_cart("cust-001") is None
