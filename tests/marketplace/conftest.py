import pytest
from protean.integrations.pytest import DomainFixture

from marketplace.catalogue import get_catalogue
from marketplace.catalogue.port import CatalogueCondiment, CatalogueProduct

CHEF_A = "chef-a"
CHEF_B = "chef-b"
CUSTOMER = "cust-001"


@pytest.fixture(scope="session")
def marketplace_bed():
    from marketplace.domain import marketplace

    bed = DomainFixture(marketplace)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(marketplace_bed):
    with marketplace_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture()
def catalogue():
    """Two chefs: A sells a 10.00 lasagne, B sells a 5.00 soup with a 2.00 bread condiment."""
    store = get_catalogue()
    store.add(CatalogueProduct(product_id="prod-lasagne", chef_id=CHEF_A, name="Lasagne", price=10.0))
    store.add(
        CatalogueProduct(
            product_id="prod-soup",
            chef_id=CHEF_B,
            name="Lentil soup",
            price=5.0,
            condiments=(
                CatalogueCondiment(condiment_id="cond-bread", name="Sourdough", price=2.0),
                CatalogueCondiment(condiment_id="cond-chili", name="Chili oil", price=0.5),
            ),
        )
    )
    store.add(CatalogueProduct(product_id="prod-tiramisu", chef_id=CHEF_A, name="Tiramisu", price=4.5))
    return store


def two_chef_lines():
    """Priced lines for one lasagne x2 from chef A and one soup with bread from chef B."""
    return [
        {
            "product_id": "prod-lasagne",
            "chef_id": CHEF_A,
            "product_name": "Lasagne",
            "quantity": 2,
            "unit_price": 10.0,
            "condiments": [],
            "subtotal": 20.0,
        },
        {
            "product_id": "prod-soup",
            "chef_id": CHEF_B,
            "product_name": "Lentil soup",
            "quantity": 1,
            "unit_price": 7.0,
            "condiments": [{"condiment_id": "cond-bread", "name": "Sourdough", "price": 2.0}],
            "subtotal": 7.0,
        },
    ]


@pytest.fixture()
def new_order():
    """An unsaved two-chef order, built straight from priced lines."""
    from marketplace.order.order import Order
    from marketplace.pricing.calculator import order_totals

    lines = two_chef_lines()
    return Order.place(
        customer_id=CUSTOMER,
        lines=lines,
        totals=order_totals(line["subtotal"] for line in lines),
        delivery={"address": "12 Baker Street", "date": "2026-05-01", "time": "18:30", "notes": None},
        payment_method="card",
    )


@pytest.fixture()
def cart_with_two_chefs(catalogue):
    """The customer's cart holding the lasagne x2 and the soup with bread."""
    from protean import current_domain

    from marketplace.cart.items import AddToCart

    current_domain.process(
        AddToCart(customer_id=CUSTOMER, product_id="prod-lasagne", quantity=2),
        asynchronous=False,
    )
    current_domain.process(
        AddToCart(customer_id=CUSTOMER, product_id="prod-soup", quantity=1, condiment_ids='["cond-bread"]'),
        asynchronous=False,
    )
    return catalogue


@pytest.fixture()
def placed_order_id(cart_with_two_chefs):
    """A persisted two-chef order placed through checkout."""
    from marketplace.order.checkout import checkout

    return checkout(CUSTOMER, {"address": "12 Baker Street", "date": "2026-05-01", "time": "18:30"}, "card")
