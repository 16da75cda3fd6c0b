"""Checkout: converts the user's cart into a pending order.

Every line's stock is checked before any of it is reserved, so a failed
checkout leaves the catalogue untouched. Two concurrent checkouts can still
both pass the check; there is no row locking around the reservation.
"""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.cart.pricing import priced_lines
from storefront.catalogue.product.product import Product
from storefront.config import get_settings
from storefront.domain import storefront
from storefront.ordering.order import Order
from storefront.ordering.pricing import price_order, shipping_cost_for
from storefront.promotion.management import redeem

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Order")
class PlaceOrder:
    user_id = Identifier(required=True)
    shipping_address = Text()
    billing_address = Text()
    payment_method = String(max_length=50)
    promotion_code = String(max_length=50)


@storefront.command_handler(part_of=Order)
class PlaceOrderHandler:
    @handle(PlaceOrder)
    def place_order(self, command):
        settings = get_settings()
        cart_repo = current_domain.repository_for(ShoppingCart)
        product_repo = current_domain.repository_for(Product)
        order_repo = current_domain.repository_for(Order)

        cart = cart_repo.for_user(command.user_id)
        lines = priced_lines(cart)
        if not lines:
            raise ValidationError({"cart": ["Cart is empty"]})

        for line in lines:
            if not line.product.is_active:
                raise ValidationError({"cart": [f"Product {line.product.name} is no longer available"]})
            if line.product.stock_quantity < line.quantity:
                raise ValidationError({"cart": [f"Insufficient stock for product {line.product.name}"]})

        for line in lines:
            line.product.reserve_stock(line.quantity)
            product_repo.add(line.product)

        subtotal = round(sum(line.total for line in lines), 2)
        shipping_cost = shipping_cost_for(subtotal, settings)
        promotion, discount = redeem(command.promotion_code, subtotal, shipping_cost)

        order = Order.place(
            order_number=order_repo.next_order_number(),
            user_id=command.user_id,
            lines=[
                {
                    "product_id": str(line.product.id),
                    "product_name": line.product.name,
                    "quantity": line.quantity,
                    "unit_price": line.unit_price,
                }
                for line in lines
            ],
            pricing=price_order(subtotal, shipping_cost, discount, settings),
            promotion_code=promotion.code if promotion else None,
            shipping_address=command.shipping_address,
            billing_address=command.billing_address,
            payment_method=command.payment_method,
        )
        order_repo.add(order)

        cart.clear()
        cart_repo.add(cart)

        logger.info(
            "order_placed",
            order_id=str(order.id),
            order_number=order.order_number,
            user_id=str(command.user_id),
            total_amount=order.total_amount,
            promotion_code=order.promotion_code,
        )
        return str(order.id)
