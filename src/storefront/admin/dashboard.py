"""Headline figures for the administrator dashboard."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.catalogue.product.inventory import low_stock_products
from storefront.identity.user import User
from storefront.ordering.order import Order, OrderStatus, PaymentStatus


@dataclass(frozen=True)
class DashboardStats:
    total_users: int
    total_orders: int
    total_revenue: float
    pending_orders: int
    low_stock_products: int


def dashboard_stats() -> DashboardStats:
    orders = current_domain.repository_for(Order).everything()
    return DashboardStats(
        total_users=current_domain.repository_for(User).count(),
        total_orders=len(orders),
        total_revenue=round(
            sum(order.total_amount for order in orders if order.payment_status == PaymentStatus.COMPLETED.value),
            2,
        ),
        pending_orders=sum(1 for order in orders if order.status == OrderStatus.PENDING.value),
        low_stock_products=len(low_stock_products()),
    )
