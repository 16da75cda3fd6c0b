"""Checkout arithmetic: tax, shipping, promotion discount and total."""

from storefront.config import Settings
from storefront.ordering.order import OrderPricing


def shipping_cost_for(subtotal: float, settings: Settings) -> float:
    return 0.0 if subtotal > settings.free_shipping_threshold else settings.flat_shipping_cost


def price_order(subtotal: float, shipping_cost: float, discount: float, settings: Settings) -> OrderPricing:
    subtotal = round(subtotal, 2)
    tax_amount = round(subtotal * settings.tax_rate, 2)
    total_amount = round(subtotal + tax_amount + shipping_cost - discount, 2)
    return OrderPricing(
        subtotal=subtotal,
        tax_amount=tax_amount,
        shipping_cost=shipping_cost,
        discount_amount=round(discount, 2),
        total_amount=total_amount,
    )
