import pytest
from protean.utils.globals import current_domain

from storefront.ordering.checkout import PlaceOrder
from storefront.ordering.lifecycle import ProcessPayment
from storefront.ordering.order import Order


@pytest.fixture()
def place_order(fill_cart):
    """Factory: check out ``(product, quantity)`` lines for a user, optionally paying."""

    def _place(user, *lines, pay=True):
        fill_cart(user, *lines)
        order_id = current_domain.process(PlaceOrder(user_id=str(user.id)), asynchronous=False)
        if pay:
            order = current_domain.repository_for(Order).get(order_id)
            command = ProcessPayment(
                order_id=order_id,
                user_id=str(user.id),
                payment_intent_id=order.payment_intent_id,
            )
            current_domain.process(command, asynchronous=False)
        return current_domain.repository_for(Order).get(order_id)

    return _place
