"""Catalogue port: read-only view of the product catalogue.

Product CRUD lives outside this context. Checkout, the live cart and the
price-quote endpoint only need to look a product up by id.
"""

from abc import ABC, abstractmethod
from dataclasses import dataclass, field


@dataclass(frozen=True)
class CatalogueCondiment:
    """An optional priced add-on offered on a catalogue product."""

    condiment_id: str
    name: str
    price: float
    is_default: bool = False


@dataclass(frozen=True)
class CatalogueProduct:
    product_id: str
    chef_id: str
    name: str
    price: float
    is_available: bool = True
    condiments: tuple[CatalogueCondiment, ...] = field(default_factory=tuple)


class CataloguePort(ABC):
    """Abstract catalogue lookup."""

    @abstractmethod
    def get_product(self, product_id: str) -> CatalogueProduct | None:
        """Return the product, or None when it does not exist."""
        ...
