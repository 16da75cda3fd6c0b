"""FastAPI endpoints for the administrator back office."""

from dataclasses import asdict
from datetime import date, datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pydantic import BaseModel, Field, model_validator

from storefront.admin.analytics import sales_report
from storefront.admin.dashboard import dashboard_stats
from storefront.catalogue.api import ProductResponse, product_responses
from storefront.catalogue.product.inventory import UpdateStock, low_stock_products
from storefront.catalogue.product.product import Product
from storefront.identity.account import SetUserStatus
from storefront.identity.user import User
from storefront.ordering.order import Order
from storefront.shared.clock import as_utc
from storefront.web.envelope import ApiResponse, ok
from storefront.web.security import admin_only

router = APIRouter(prefix="/api/admin", tags=["admin"])


# --- Schemas ---


class PageParams(BaseModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(20, ge=1, le=100)


class SalesWindow(BaseModel):
    start_date: datetime | None = None
    end_date: datetime | None = None

    @model_validator(mode="after")
    def window_must_be_ordered(self):
        if self.start_date and self.end_date and as_utc(self.start_date) > as_utc(self.end_date):
            raise ValueError("start_date cannot be after end_date")
        return self


class DashboardResponse(BaseModel):
    total_users: int
    total_orders: int
    total_revenue: float
    pending_orders: int
    low_stock_products: int


class AdminUserResponse(BaseModel):
    id: str
    first_name: str
    last_name: str
    email: str
    phone: str | None = None
    role: str
    created_at: datetime | None = None
    is_active: bool


class UserPage(BaseModel):
    users: list[AdminUserResponse]
    total_users: int
    page: int
    page_size: int


class UserStatusRequest(BaseModel):
    is_active: bool


class AdminOrderResponse(BaseModel):
    id: str
    order_number: str
    status: str
    payment_status: str
    total_amount: float
    created_at: datetime | None = None
    user_name: str | None = None
    user_email: str | None = None
    item_count: int


class OrderPage(BaseModel):
    orders: list[AdminOrderResponse]
    total_orders: int
    page: int
    page_size: int


class DailySalesResponse(BaseModel):
    date: date
    total_sales: float
    order_count: int


class ProductSalesResponse(BaseModel):
    product_id: str
    product_name: str
    total_quantity: int
    total_revenue: float


class SalesReportResponse(BaseModel):
    start_date: datetime | None = None
    end_date: datetime | None = None
    sales_by_day: list[DailySalesResponse]
    top_products: list[ProductSalesResponse]


class StockRequest(BaseModel):
    quantity: int = Field(..., ge=0)


def _admin_user(user: User) -> AdminUserResponse:
    return AdminUserResponse(
        id=str(user.id),
        first_name=user.first_name,
        last_name=user.last_name,
        email=user.email,
        phone=user.phone,
        role=user.role,
        created_at=user.created_at,
        is_active=user.is_active,
    )


# --- Endpoints ---


@router.get("/dashboard", response_model=ApiResponse[DashboardResponse])
async def dashboard(user: User = Depends(admin_only)):
    return ok(DashboardResponse(**asdict(dashboard_stats())))


@router.get("/users", response_model=ApiResponse[UserPage])
async def list_users(params: Annotated[PageParams, Query()], user: User = Depends(admin_only)):
    users, total = current_domain.repository_for(User).newest_page(params.page, params.page_size)
    return ok(
        UserPage(
            users=[_admin_user(member) for member in users],
            total_users=total,
            page=params.page,
            page_size=params.page_size,
        )
    )


@router.put("/users/{user_id}/status", response_model=ApiResponse[AdminUserResponse])
async def update_user_status(user_id: str, body: UserStatusRequest, user: User = Depends(admin_only)):
    current_domain.process(SetUserStatus(user_id=user_id, is_active=body.is_active), asynchronous=False)
    return ok(_admin_user(current_domain.repository_for(User).get(user_id)), "User status updated successfully")


@router.get("/orders", response_model=ApiResponse[OrderPage])
async def list_orders(params: Annotated[PageParams, Query()], user: User = Depends(admin_only)):
    orders, total = current_domain.repository_for(Order).newest_page(params.page, params.page_size)

    users = current_domain.repository_for(User)
    rows = []
    for order in orders:
        try:
            owner = users.get(order.user_id)
        except ObjectNotFoundError:
            owner = None
        rows.append(
            AdminOrderResponse(
                id=str(order.id),
                order_number=order.order_number,
                status=order.status,
                payment_status=order.payment_status,
                total_amount=order.total_amount,
                created_at=order.created_at,
                user_name=owner.full_name if owner else None,
                user_email=owner.email if owner else None,
                item_count=order.item_count,
            )
        )

    return ok(OrderPage(orders=rows, total_orders=total, page=params.page, page_size=params.page_size))


@router.get("/analytics/sales", response_model=ApiResponse[SalesReportResponse])
async def sales_analytics(window: Annotated[SalesWindow, Query()], user: User = Depends(admin_only)):
    report = sales_report(window.start_date, window.end_date)
    return ok(SalesReportResponse(**asdict(report)))


@router.get("/inventory/low-stock", response_model=ApiResponse[list[ProductResponse]])
async def low_stock(user: User = Depends(admin_only)):
    return ok(product_responses(low_stock_products()))


@router.put("/products/{product_id}/stock", response_model=ApiResponse[ProductResponse])
async def update_stock(product_id: str, body: StockRequest, user: User = Depends(admin_only)):
    current_domain.process(UpdateStock(product_id=product_id, quantity=body.quantity), asynchronous=False)
    product = current_domain.repository_for(Product).get(product_id)
    return ok(product_responses([product])[0], "Stock updated successfully")
