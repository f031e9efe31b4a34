import os
from pathlib import Path

import pytest


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before any domain is imported.

    The marketplace domain itself is initialized and activated by the
    ``DomainFixture`` in ``tests/marketplace/conftest.py``.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = Path(item.fspath)

        if "/domain/" in str(test_path):
            item.add_marker(pytest.mark.domain)
        elif "/application/" in str(test_path):
            item.add_marker(pytest.mark.application)
        elif "/integration/" in str(test_path):
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(autouse=True)
def reset_adapters():
    """Every test starts with fresh fake collaborators."""
    from marketplace.catalogue import reset_catalogue
    from marketplace.messaging import reset_messaging
    from marketplace.reviews import reset_reviews

    reset_catalogue()
    reset_messaging()
    reset_reviews()
    yield
    reset_catalogue()
    reset_messaging()
    reset_reviews()
