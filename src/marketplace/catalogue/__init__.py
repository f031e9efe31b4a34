"""Catalogue adapter factory.

Provides get_catalogue() / set_catalogue() to swap implementations. The
in-memory catalogue is the default for development and tests.
"""

from marketplace.catalogue.fake_adapter import InMemoryCatalogue
from marketplace.catalogue.port import CataloguePort

_current_catalogue: CataloguePort | None = None


def get_catalogue() -> CataloguePort:
    """Return the current catalogue. Defaults to InMemoryCatalogue."""
    global _current_catalogue
    if _current_catalogue is None:
        _current_catalogue = InMemoryCatalogue()
    return _current_catalogue


def set_catalogue(catalogue: CataloguePort) -> None:
    global _current_catalogue
    _current_catalogue = catalogue


def reset_catalogue() -> None:
    global _current_catalogue
    _current_catalogue = None
