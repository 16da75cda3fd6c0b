"""Notifications produced by domain events."""

from protean.utils.globals import current_domain

from storefront.catalogue.product.inventory import UpdateStock
from storefront.identity.user import Role
from storefront.notifications.notification import Notification
from storefront.ordering.checkout import PlaceOrder
from storefront.ordering.lifecycle import UpdateOrderStatus
from storefront.ordering.order import Order


def _inbox(user):
    return current_domain.repository_for(Notification).inbox(user.id)


def test_welcome_on_registration(customer):
    [welcome] = _inbox(customer)

    assert welcome.title == "Welcome!"
    assert welcome.type == "System"
    assert welcome.is_read is False


def test_order_placed_and_status_changes(customer, make_product, fill_cart):
    fill_cart(customer, (make_product(), 1))
    order_id = current_domain.process(PlaceOrder(user_id=str(customer.id)), asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)

    current_domain.process(UpdateOrderStatus(order_id=order_id, status="Processing"), asynchronous=False)

    messages = {n.title: n.message for n in _inbox(customer) if n.type == "Order"}
    assert messages["Order Confirmed"] == (
        f"Your order #{order.order_number} has been confirmed and is being processed."
    )
    assert messages["Order Update"] == f"Your order #{order.order_number} status has been updated to: Processing"


def test_low_stock_alerts_every_admin(admin, register, customer, make_product):
    second_admin = register("admin2@example.com", role=Role.ADMIN)
    product = make_product(name="Toaster", stock_quantity=50)

    current_domain.process(UpdateStock(product_id=str(product.id), quantity=3), asynchronous=False)

    for user in (admin, second_admin):
        alerts = [n for n in _inbox(user) if n.title == "Low Stock Alert"]
        assert [a.message for a in alerts] == ["Product 'Toaster' is running low on stock. Current quantity: 3"]
    assert not [n for n in _inbox(customer) if n.title == "Low Stock Alert"]


def test_healthy_stock_raises_no_alert(admin, make_product):
    product = make_product(stock_quantity=5)

    current_domain.process(UpdateStock(product_id=str(product.id), quantity=40), asynchronous=False)

    assert not [n for n in _inbox(admin) if n.title == "Low Stock Alert"]
