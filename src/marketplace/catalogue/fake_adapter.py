"""In-memory catalogue for development and testing."""

from dataclasses import replace

from marketplace.catalogue.port import CatalogueProduct, CataloguePort


class InMemoryCatalogue(CataloguePort):
    def __init__(self) -> None:
        self.products: dict[str, CatalogueProduct] = {}

    def add(self, product: CatalogueProduct) -> CatalogueProduct:
        self.products[str(product.product_id)] = product
        return product

    def mark_unavailable(self, product_id: str) -> None:
        product = self.products[str(product_id)]
        self.products[str(product_id)] = replace(product, is_available=False)

    def remove(self, product_id: str) -> None:
        self.products.pop(str(product_id), None)

    def get_product(self, product_id: str) -> CatalogueProduct | None:
        return self.products.get(str(product_id))
