"""BDD tests for turning a cart into an order."""

from datetime import timedelta

from protean.exceptions import ValidationError
from protean.utils.globals import current_domain
from pytest_bdd import given, parsers, scenarios, then, when

from storefront.ordering.checkout import PlaceOrder
from storefront.ordering.order import Order
from storefront.promotion.management import CreatePromotion
from storefront.promotion.promotion import Promotion, PromotionType
from storefront.shared.clock import utcnow

scenarios("features/checkout.feature")


def _pricing(order_id):
    return current_domain.repository_for(Order).get(order_id).pricing


# ---------------------------------------------------------------------------
# Given steps
# ---------------------------------------------------------------------------
@given(parsers.cfparse('a running percentage promotion "{code}" worth {value:d}'))
def running_promotion(code, value):
    now = utcnow()
    command = CreatePromotion(
        code=code,
        name=f"{value}% off",
        type=PromotionType.PERCENTAGE.value,
        value=value,
        start_date=now - timedelta(days=1),
        end_date=now + timedelta(days=30),
    )
    current_domain.process(command, asynchronous=False)


# ---------------------------------------------------------------------------
# When steps
# ---------------------------------------------------------------------------
@when(parsers.cfparse('the customer checks out with code "{code}"'), target_fixture="order_id")
def checks_out_with_code(shopper, error, code):
    try:
        return current_domain.process(PlaceOrder(user_id=str(shopper.id), promotion_code=code), asynchronous=False)
    except ValidationError as exc:
        error["exc"] = exc
        return None


# ---------------------------------------------------------------------------
# Then steps
# ---------------------------------------------------------------------------
@then(parsers.cfparse("the order subtotal is {amount:f}"))
def subtotal_is(order_id, amount):
    assert _pricing(order_id).subtotal == amount


@then(parsers.cfparse("the order tax is {amount:f}"))
def tax_is(order_id, amount):
    assert _pricing(order_id).tax_amount == amount


@then(parsers.cfparse("the order shipping is {amount:f}"))
def shipping_is(order_id, amount):
    assert _pricing(order_id).shipping_cost == amount


@then(parsers.cfparse("the order discount is {amount:f}"))
def discount_is(order_id, amount):
    assert _pricing(order_id).discount_amount == amount


@then(parsers.cfparse("the order total is {amount:f}"))
def total_is(order_id, amount):
    assert _pricing(order_id).total_amount == amount


@then(parsers.cfparse('the promotion "{code}" has been used {count:d} time'))
def promotion_used(code, count):
    assert current_domain.repository_for(Promotion).find_by_code(code).usage_count == count
