"""Shared BDD fixtures and step definitions for the Ordering domain."""

import pytest
from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, then, when

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product.inventory import UpdateStock
from storefront.catalogue.product.product import Product
from storefront.ordering.checkout import PlaceOrder
from storefront.ordering.order import Order


# ---------------------------------------------------------------------------
# Fixtures
# ---------------------------------------------------------------------------
@pytest.fixture()
def error():
    """Container for captured validation errors."""
    return {"exc": None}


@pytest.fixture()
def products():
    """Products created by the scenario, keyed by name."""
    return {}


def _product(products, name) -> Product:
    return current_domain.repository_for(Product).get(products[name].id)


def _order(order_id) -> Order:
    return current_domain.repository_for(Order).get(order_id)


def _first_message(exc) -> str:
    return next(iter(exc.messages.values()))[0]


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given("a registered customer", target_fixture="shopper")
def registered_customer(register):
    return register("shopper@example.com")


@given(parsers.cfparse('a product "{name}" priced at {price:f} with {stock:d} in stock'))
def product_in_stock(make_product, products, name, price, stock):
    products[name] = make_product(name=name, price=price, stock_quantity=stock)


@given(parsers.cfparse('the cart holds {quantity:d} of "{name}"'))
def cart_holds(fill_cart, shopper, products, quantity, name):
    fill_cart(shopper, (products[name], quantity))


@given(parsers.cfparse('"{name}" stock drops to {quantity:d}'))
def stock_drops(products, name, quantity):
    current_domain.process(UpdateStock(product_id=str(products[name].id), quantity=quantity), asynchronous=False)


@given(
    parsers.cfparse('the customer has placed an order for {quantity:d} of "{name}"'),
    target_fixture="order_id",
)
def placed_order(fill_cart, shopper, products, quantity, name):
    fill_cart(shopper, (products[name], quantity))
    return current_domain.process(PlaceOrder(user_id=str(shopper.id)), asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when("the customer checks out", target_fixture="order_id")
def checks_out(shopper, error):
    try:
        return current_domain.process(PlaceOrder(user_id=str(shopper.id)), asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc
        return None


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse('the order is "{status}"'))
def order_status_is(order_id, status):
    assert _order(order_id).status == status


@then(parsers.cfparse('the payment is "{status}"'))
def payment_status_is(order_id, status):
    assert _order(order_id).payment_status == status


@then(parsers.cfparse('"{name}" has {quantity:d} in stock'))
def stock_is(products, name, quantity):
    assert _product(products, name).stock_quantity == quantity


@then(parsers.cfparse('the checkout fails with "{message}"'))
@then(parsers.cfparse('the change fails with "{message}"'))
def fails_with(error, message):
    assert error["exc"] is not None
    assert _first_message(error["exc"]) == message


@then("the cart is empty")
def cart_is_empty(shopper):
    assert current_domain.repository_for(ShoppingCart).for_user(shopper.id).is_empty
