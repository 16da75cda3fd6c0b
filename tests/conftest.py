import itertools
import json
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

    The environment must be in place before the storefront domain is imported:
    PROTEAN_ENV selects the domain.toml overlay and BCRYPT_ROUNDS keeps
    password hashing fast.
    """
    os.environ["PROTEAN_ENV"] = session.config.option.env
    os.environ.setdefault("BCRYPT_ROUNDS", "4")


def pytest_collection_modifyitems(config, items):
    """Automatically mark tests based on their directory location."""
    for item in items:
        test_path = str(Path(item.fspath))

        if "/domain/" in test_path:
            item.add_marker(pytest.mark.domain)
        elif "/application/" in test_path:
            item.add_marker(pytest.mark.application)
        elif "/integration/" in test_path:
            item.add_marker(pytest.mark.integration)
            # Integration tests are often slower
            if not any(m.name == "fast" for m in item.iter_markers()):
                item.add_marker(pytest.mark.slow)


@pytest.fixture(scope="session")
def storefront_bed():
    from protean.integrations.pytest import DomainFixture

    from storefront.domain import storefront

    bed = DomainFixture(storefront)
    bed.setup()
    yield bed
    bed.teardown()


@pytest.fixture(autouse=True)
def _ctx(storefront_bed):
    """Push the domain context for every test and wipe all data afterwards."""
    with storefront_bed.domain_context():
        yield

        from protean import current_domain

        for _, provider in current_domain.providers.items():
            provider._data_reset()

        current_domain.event_store.store._data_reset()


# ---------------------------------------------------------------------------
# Users
# ---------------------------------------------------------------------------
PASSWORD = "Secret#123"


@pytest.fixture()
def register():
    """Factory: register a user through the command pipeline and return it."""
    from protean import current_domain

    from storefront.identity.passwords import prepare_password
    from storefront.identity.registration import RegisterUser
    from storefront.identity.user import Role, User

    def _register(email, role=Role.CUSTOMER, first_name="Jane", last_name="Doe", password=PASSWORD):
        command = RegisterUser(
            email=email,
            password_hash=prepare_password(password),
            first_name=first_name,
            last_name=last_name,
            role=role.value,
        )
        user_id = current_domain.process(command, asynchronous=False)
        return current_domain.repository_for(User).get(user_id)

    return _register


@pytest.fixture()
def customer(register):
    return register("customer@example.com")


@pytest.fixture()
def other_customer(register):
    return register("other@example.com", first_name="Olga", last_name="Other")


@pytest.fixture()
def seller(register):
    from storefront.identity.user import Role

    return register("seller@example.com", role=Role.SELLER, first_name="Sam", last_name="Seller")


@pytest.fixture()
def admin(register):
    from storefront.identity.user import Role

    return register("admin@example.com", role=Role.ADMIN, first_name="Ada", last_name="Admin")


@pytest.fixture()
def auth_headers():
    """Factory: bearer-token headers for a user."""
    from storefront.identity.tokens import issue_token

    def _headers(user):
        return {"Authorization": f"Bearer {issue_token(user).token}"}

    return _headers


# ---------------------------------------------------------------------------
# Catalogue
# ---------------------------------------------------------------------------
@pytest.fixture()
def category():
    from protean import current_domain

    from storefront.catalogue.category.category import Category
    from storefront.catalogue.category.management import CreateCategory

    category_id = current_domain.process(CreateCategory(name="Electronics"), asynchronous=False)
    return current_domain.repository_for(Category).get(category_id)


@pytest.fixture()
def make_product(category):
    """Factory: create a product in ``category`` with a fresh SKU."""
    from protean import current_domain

    from storefront.catalogue.product.management import CreateProduct
    from storefront.catalogue.product.product import Product

    skus = itertools.count(1)

    def _make(
        name="Widget",
        price=100.0,
        stock_quantity=20,
        sale_price=None,
        description=None,
        tag_ids=None,
        category_id=None,
    ):
        command = CreateProduct(
            name=name,
            sku=f"SKU-{next(skus):04d}",
            price=price,
            sale_price=sale_price,
            stock_quantity=stock_quantity,
            description=description,
            category_id=category_id or str(category.id),
            tag_ids=json.dumps(tag_ids or []),
        )
        product_id = current_domain.process(command, asynchronous=False)
        return current_domain.repository_for(Product).get(product_id)

    return _make


@pytest.fixture()
def fill_cart():
    """Factory: put ``(product, quantity)`` pairs into a user's cart."""
    from protean import current_domain

    from storefront.cart.items import AddToCart

    def _fill(user, *lines):
        for product, quantity in lines:
            command = AddToCart(user_id=str(user.id), product_id=str(product.id), quantity=quantity)
            current_domain.process(command, asynchronous=False)

    return _fill


# ---------------------------------------------------------------------------
# HTTP
# ---------------------------------------------------------------------------
@pytest.fixture()
def client():
    from fastapi.testclient import TestClient

    from storefront.web.application import create_app

    return TestClient(create_app())
