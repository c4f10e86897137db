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
    """Pytest hook to run before collecting tests.

    Selects the runtime environment so settings and log levels resolve to
    their test overlay.
    """
    os.environ["STOREFRONT_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        # Get the test file path relative to the tests directory
        test_path = Path(item.fspath)

        # Mark tests based on their directory
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
def database(tmp_path):
    """Give every test its own SQLite file with a fresh schema."""
    from shared.database import configure, dispose, drop_db, setup_db

    engine = configure(f"sqlite:///{tmp_path / 'storefront.db'}", echo=False)
    setup_db(engine)

    yield engine

    drop_db(engine)
    dispose()


@pytest.fixture()
def make_product():
    """Factory: persist a product and return it."""
    from inventory.stock.catalogue import add_product

    def _make(name="Test Product", price="20.00", stock=5, category="Testing"):
        return add_product(name=name, price=price, stock=stock, category=category)

    return _make
