"""Event handlers that turn domain events into user notifications.

Each handler listens to one aggregate's stream: new accounts get a welcome
message, order owners hear about placement and every status change, and
administrators are warned when a product's stock runs low.
"""

from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.catalogue.product.events import StockRunningLow
from storefront.domain import storefront
from storefront.identity.events import UserRegistered
from storefront.identity.user import Role, User
from storefront.notifications.helpers import notify
from storefront.notifications.notification import Notification, NotificationType
from storefront.ordering.events import OrderPlaced, OrderStatusChanged


@storefront.event_handler(part_of=Notification, stream_category="storefront::user")
class UserEventsHandler:
    @handle(UserRegistered)
    def on_user_registered(self, event: UserRegistered) -> None:
        notify(
            event.user_id,
            "Welcome!",
            "Welcome to our e-commerce platform. Thank you for joining us!",
            NotificationType.SYSTEM,
        )


@storefront.event_handler(part_of=Notification, stream_category="storefront::order")
class OrderEventsHandler:
    @handle(OrderPlaced)
    def on_order_placed(self, event: OrderPlaced) -> None:
        notify(
            event.user_id,
            "Order Confirmed",
            f"Your order #{event.order_number} has been confirmed and is being processed.",
            NotificationType.ORDER,
        )

    @handle(OrderStatusChanged)
    def on_order_status_changed(self, event: OrderStatusChanged) -> None:
        notify(
            event.user_id,
            "Order Update",
            f"Your order #{event.order_number} status has been updated to: {event.new_status}",
            NotificationType.ORDER,
        )


@storefront.event_handler(part_of=Notification, stream_category="storefront::product")
class InventoryEventsHandler:
    @handle(StockRunningLow)
    def on_stock_running_low(self, event: StockRunningLow) -> None:
        for admin in current_domain.repository_for(User).with_role(Role.ADMIN):
            notify(
                admin.id,
                "Low Stock Alert",
                f"Product '{event.name}' is running low on stock. Current quantity: {event.stock_quantity}",
                NotificationType.SYSTEM,
            )
