"""Pricing calculator: line items and cart/order totals.

Shared by checkout, the live cart and the price-quote endpoint. All currency
amounts are rounded half-up to cents at each step (line total, subtotal,
service fee, total); unrounded intermediates are never handed out.

Numeric input is permissive: an invalid, negative or non-finite price counts
as 0, and a quantity that is not a whole number >= 1 counts as 1.
"""

from dataclasses import dataclass, field
from decimal import ROUND_HALF_UP, Decimal, InvalidOperation

from marketplace.errors import UnknownCondiment

CENT = Decimal("0.01")
SERVICE_FEE_RATE = Decimal("0.10")


@dataclass(frozen=True)
class SelectedCondiment:
    """Condiment snapshot copied from the catalogue at pricing time."""

    condiment_id: str
    name: str
    price: float

    def to_dict(self) -> dict:
        return {"condiment_id": self.condiment_id, "name": self.name, "price": self.price}


@dataclass(frozen=True)
class LineQuote:
    base_price: float
    condiments_price: float
    item_price: float
    quantity: int
    line_total: float
    condiments: tuple[SelectedCondiment, ...] = field(default_factory=tuple)


@dataclass(frozen=True)
class Totals:
    subtotal: float
    service_fee: float
    total: float


def _amount(value) -> Decimal:
    try:
        amount = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return Decimal(0)
    if not amount.is_finite() or amount < 0:
        return Decimal(0)
    return amount


def _quantity(value) -> int:
    if isinstance(value, bool):
        return 1
    try:
        quantity = Decimal(str(value))
    except (InvalidOperation, TypeError, ValueError):
        return 1
    if not quantity.is_finite() or quantity < 1 or quantity != quantity.to_integral_value():
        return 1
    return int(quantity)


def _cents(amount: Decimal) -> Decimal:
    return amount.quantize(CENT, rounding=ROUND_HALF_UP)


def round2(value) -> float:
    """Round half-up to 2 decimal places (invalid input rounds to 0.0)."""
    return float(_cents(_amount(value)))


def validate_condiments(selected_ids, catalogue_condiments) -> tuple[SelectedCondiment, ...]:
    """Resolve selected condiment ids against a product's catalogue condiments.

    Raises:
        UnknownCondiment: if any id is not offered on the product.
    """
    offered = {str(c.condiment_id): c for c in catalogue_condiments or ()}
    validated = []
    for condiment_id in selected_ids or ():
        condiment = offered.get(str(condiment_id))
        if condiment is None:
            raise UnknownCondiment(
                f"Condiment {condiment_id} does not exist for this product",
                condiment_id=str(condiment_id),
            )
        validated.append(
            SelectedCondiment(
                condiment_id=str(condiment.condiment_id),
                name=condiment.name,
                price=float(_amount(condiment.price)),
            )
        )
    return tuple(validated)


def price_line(base_price, quantity, selected_ids, catalogue_condiments) -> LineQuote:
    """Price one line: base price plus condiments, times quantity."""
    condiments = validate_condiments(selected_ids, catalogue_condiments)
    base = _amount(base_price)
    condiments_price = sum((_amount(c.price) for c in condiments), Decimal(0))
    item_price = base + condiments_price
    qty = _quantity(quantity)

    return LineQuote(
        base_price=float(base),
        condiments_price=float(condiments_price),
        item_price=float(item_price),
        quantity=qty,
        line_total=float(_cents(item_price * qty)),
        condiments=condiments,
    )


def order_totals(line_totals) -> Totals:
    """Subtotal, 10% service fee and total, each rounded independently."""
    subtotal = _cents(sum((_amount(value) for value in line_totals), Decimal(0)))
    service_fee = _cents(subtotal * SERVICE_FEE_RATE)
    total = _cents(subtotal + service_fee)
    return Totals(subtotal=float(subtotal), service_fee=float(service_fee), total=float(total))
