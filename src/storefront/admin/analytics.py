"""Sales analytics over paid orders: revenue per day and best-selling products."""

from collections import defaultdict
from dataclasses import dataclass
from datetime import date, datetime

from protean.utils.globals import current_domain

from storefront.ordering.order import Order, PaymentStatus
from storefront.shared.clock import as_utc

TOP_PRODUCTS = 10


@dataclass(frozen=True)
class DailySales:
    date: date
    total_sales: float
    order_count: int


@dataclass(frozen=True)
class ProductSales:
    product_id: str
    product_name: str
    total_quantity: int
    total_revenue: float


@dataclass(frozen=True)
class SalesReport:
    start_date: datetime | None
    end_date: datetime | None
    sales_by_day: list[DailySales]
    top_products: list[ProductSales]


def _paid_orders(start_date: datetime | None, end_date: datetime | None) -> list[Order]:
    orders = []
    for order in current_domain.repository_for(Order).everything():
        if order.payment_status != PaymentStatus.COMPLETED.value:
            continue
        created_at = as_utc(order.created_at)
        if start_date and created_at < as_utc(start_date):
            continue
        if end_date and created_at > as_utc(end_date):
            continue
        orders.append(order)
    return orders


def sales_report(start_date: datetime | None = None, end_date: datetime | None = None) -> SalesReport:
    orders = _paid_orders(start_date, end_date)

    by_day = defaultdict(lambda: [0.0, 0])
    by_product = {}
    for order in orders:
        day = by_day[as_utc(order.created_at).date()]
        day[0] += order.total_amount
        day[1] += 1

        for item in order.items:
            key = str(item.product_id)
            name, quantity, revenue = by_product.get(key, (item.product_name, 0, 0.0))
            by_product[key] = (name, quantity + item.quantity, revenue + item.total_price)

    sales_by_day = [
        DailySales(date=day, total_sales=round(total, 2), order_count=count)
        for day, (total, count) in sorted(by_day.items())
    ]
    top_products = sorted(
        (
            ProductSales(
                product_id=product_id,
                product_name=name,
                total_quantity=quantity,
                total_revenue=round(revenue, 2),
            )
            for product_id, (name, quantity, revenue) in by_product.items()
        ),
        key=lambda sales: sales.total_revenue,
        reverse=True,
    )[:TOP_PRODUCTS]

    return SalesReport(
        start_date=start_date,
        end_date=end_date,
        sales_by_day=sales_by_day,
        top_products=top_products,
    )
