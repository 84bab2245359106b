import os
from pathlib import Path

import pytest
from protean.integrations.pytest import DomainFixture


def pytest_addoption(parser):
    parser.addoption(
        "--env",
        action="store",
        default="test",
        help="Config environment to run tests on",
    )


def pytest_sessionstart(session):
    """Select the config overlay before any domain is initialised."""
    os.environ["PROTEAN_ENV"] = session.config.option.env


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/bdd/" in test_path:
            item.add_marker(pytest.mark.bdd)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        # Clear all databases
        for _, provider in current_domain.providers.items():
            provider._data_reset()

        # Drain event stores
        current_domain.event_store.store._data_reset()


@pytest.fixture(autouse=True)
def _reset_adapters():
    from storefront.catalogue import reset_catalogue
    from storefront.delivery import reset_delivery_pricing

    reset_catalogue()
    reset_delivery_pricing()
    yield
    reset_catalogue()
    reset_delivery_pricing()


@pytest.fixture()
def catalogue():
    from storefront.catalogue import get_catalogue

    catalogue = get_catalogue()
    catalogue.add_product("prod-1", "Robe Kabyle", 2000.0, slug="robe-kabyle", images=["robe.jpg"])
    catalogue.add_product("prod-2", "Foulard Soie", 1500.0, slug="foulard-soie")
    catalogue.add_product(
        "prod-3",
        "Caftan Brodé",
        4500.0,
        slug="caftan-brode",
        variant_groups={"Size": ["S", "M", "!L"], "Color": ["Red", "Blue"]},
    )
    return catalogue
