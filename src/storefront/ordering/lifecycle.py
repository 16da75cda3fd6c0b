"""Order lifecycle: cancellation, status updates, payment, refunds and shipment."""

import structlog
from protean import handle
from protean.fields import Identifier, String
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.ordering.order import Order, OrderStatus

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class CancelOrder:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)


@storefront.command(part_of="Order")
class UpdateOrderStatus:
    order_id = Identifier(required=True)
    status = String(required=True, choices=OrderStatus)


@storefront.command(part_of="Order")
class ProcessPayment:
    order_id = Identifier(required=True)
    user_id = Identifier(required=True)
    payment_intent_id = String(required=True, max_length=64)


@storefront.command(part_of="Order")
class RefundOrder:
    order_id = Identifier(required=True)


@storefront.command(part_of="Order")
class ShipOrder:
    order_id = Identifier(required=True)


def _release_stock(order: Order) -> None:
    products = current_domain.repository_for(Product)
    for item in order.items:
        product = products.get(item.product_id)
        product.release_stock(item.quantity)
        products.add(product)


@storefront.command_handler(part_of=Order)
class OrderLifecycleHandler:
    @handle(CancelOrder)
    def cancel_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.owned_by(command.order_id, command.user_id)
        order.cancel_by(command.user_id)
        _release_stock(order)
        repo.add(order)
        logger.info("order_cancelled", order_id=str(order.id), user_id=str(command.user_id))

    @handle(UpdateOrderStatus)
    def update_order_status(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        held_stock = order.holds_stock

        target = OrderStatus(command.status)
        order.change_status(target)
        if held_stock and target is OrderStatus.CANCELLED:
            _release_stock(order)

        repo.add(order)
        logger.info("order_status_changed", order_id=str(order.id), status=order.status)

    @handle(ProcessPayment)
    def process_payment(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.owned_by(command.order_id, command.user_id)
        order.complete_payment(command.payment_intent_id)
        repo.add(order)
        logger.info("payment_completed", order_id=str(order.id), amount=order.total_amount)

    @handle(RefundOrder)
    def refund_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        held_stock = order.holds_stock

        order.refund()
        if held_stock:
            _release_stock(order)

        repo.add(order)
        logger.info("order_refunded", order_id=str(order.id), amount=order.total_amount)

    @handle(ShipOrder)
    def ship_order(self, command):
        repo = current_domain.repository_for(Order)
        order = repo.get(command.order_id)
        order.ship()
        repo.add(order)
        logger.info("order_shipped", order_id=str(order.id), tracking_number=order.tracking_number)
        return order.tracking_number
