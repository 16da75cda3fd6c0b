"""FastAPI endpoints for checkout, order history and order administration."""

from datetime import datetime

from fastapi import APIRouter, Depends
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pydantic import BaseModel, Field

from storefront.identity.user import Role, User
from storefront.ordering.checkout import PlaceOrder
from storefront.ordering.lifecycle import CancelOrder, ProcessPayment, RefundOrder, ShipOrder, UpdateOrderStatus
from storefront.ordering.order import Order, OrderStatus
from storefront.web.envelope import ApiResponse, ok
from storefront.web.security import admin_only, admin_or_seller, get_current_user

router = APIRouter(prefix="/api/orders", tags=["orders"])


# --- Schemas ---


class CheckoutRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "shipping_address": "12 Harbour Road, Kochi 682001",
                    "billing_address": "12 Harbour Road, Kochi 682001",
                    "payment_method": "card",
                    "promotion_code": "WELCOME10",
                }
            ]
        }
    }

    shipping_address: str = Field("", max_length=500)
    billing_address: str = Field("", max_length=500)
    payment_method: str = Field("", max_length=50)
    promotion_code: str | None = Field(None, max_length=50)


class UpdateStatusRequest(BaseModel):
    status: OrderStatus


class PaymentRequest(BaseModel):
    payment_intent_id: str = Field(..., max_length=64)


class OrderItemResponse(BaseModel):
    product_id: str
    product_name: str
    quantity: int
    unit_price: float
    total_price: float


class OrderResponse(BaseModel):
    id: str
    order_number: str
    user_id: str
    status: str
    payment_status: str
    subtotal: float
    tax_amount: float
    shipping_cost: float
    discount_amount: float
    total_amount: float
    promotion_code: str | None = None
    shipping_address: str = ""
    billing_address: str = ""
    payment_method: str = ""
    tracking_number: str | None = None
    courier: str | None = None
    created_at: datetime | None = None
    shipped_at: datetime | None = None
    delivered_at: datetime | None = None
    items: list[OrderItemResponse] = []


class CheckoutResponse(BaseModel):
    order: OrderResponse
    payment_intent_id: str


class TrackingResponse(BaseModel):
    tracking_number: str
    status: str
    courier: str | None = None
    message: str


def order_response(order: Order) -> OrderResponse:
    pricing = order.pricing
    return OrderResponse(
        id=str(order.id),
        order_number=order.order_number,
        user_id=str(order.user_id),
        status=order.status,
        payment_status=order.payment_status,
        subtotal=pricing.subtotal,
        tax_amount=pricing.tax_amount,
        shipping_cost=pricing.shipping_cost,
        discount_amount=pricing.discount_amount,
        total_amount=pricing.total_amount,
        promotion_code=order.promotion_code,
        shipping_address=order.shipping_address or "",
        billing_address=order.billing_address or "",
        payment_method=order.payment_method or "",
        tracking_number=order.tracking_number,
        courier=order.courier,
        created_at=order.created_at,
        shipped_at=order.shipped_at,
        delivered_at=order.delivered_at,
        items=[
            OrderItemResponse(
                product_id=str(item.product_id),
                product_name=item.product_name,
                quantity=item.quantity,
                unit_price=item.unit_price,
                total_price=item.total_price,
            )
            for item in order.items
        ],
    )


def _load(order_id: str) -> OrderResponse:
    return order_response(current_domain.repository_for(Order).get(order_id))


# --- Endpoints ---


@router.post("/checkout", status_code=201, response_model=ApiResponse[CheckoutResponse])
async def checkout(body: CheckoutRequest, user: User = Depends(get_current_user)):
    command = PlaceOrder(
        user_id=str(user.id),
        shipping_address=body.shipping_address,
        billing_address=body.billing_address,
        payment_method=body.payment_method,
        promotion_code=body.promotion_code,
    )
    order_id = current_domain.process(command, asynchronous=False)
    order = current_domain.repository_for(Order).get(order_id)
    return ok(
        CheckoutResponse(order=order_response(order), payment_intent_id=order.payment_intent_id),
        "Order created successfully",
    )


@router.get("", response_model=ApiResponse[list[OrderResponse]])
async def list_orders(user: User = Depends(get_current_user)):
    orders = current_domain.repository_for(Order).for_user(user.id)
    return ok([order_response(order) for order in orders])


@router.get("/tracking/{tracking_number}", response_model=ApiResponse[TrackingResponse])
async def track_shipment(tracking_number: str, user: User = Depends(get_current_user)):
    order = current_domain.repository_for(Order).find_by_tracking_number(tracking_number)
    if order is None or not (order.is_owned_by(user.id) or user.has_role(Role.ADMIN, Role.SELLER)):
        raise ObjectNotFoundError(f"Shipment {tracking_number} not found")
    return ok(
        TrackingResponse(
            tracking_number=tracking_number,
            status=order.status,
            courier=order.courier,
            message=f"Package with tracking number {tracking_number} is in transit.",
        )
    )


@router.get("/admin/{order_id}", response_model=ApiResponse[OrderResponse])
async def get_any_order(order_id: str, user: User = Depends(admin_only)):
    return ok(_load(order_id))


@router.get("/{order_id}", response_model=ApiResponse[OrderResponse])
async def get_order(order_id: str, user: User = Depends(get_current_user)):
    return ok(order_response(current_domain.repository_for(Order).owned_by(order_id, user.id)))


@router.post("/{order_id}/cancel", response_model=ApiResponse[OrderResponse])
async def cancel_order(order_id: str, user: User = Depends(get_current_user)):
    current_domain.process(CancelOrder(order_id=order_id, user_id=str(user.id)), asynchronous=False)
    return ok(_load(order_id), "Order cancelled successfully")


@router.post("/{order_id}/payment", response_model=ApiResponse[OrderResponse])
async def process_payment(order_id: str, body: PaymentRequest, user: User = Depends(get_current_user)):
    command = ProcessPayment(order_id=order_id, user_id=str(user.id), payment_intent_id=body.payment_intent_id)
    current_domain.process(command, asynchronous=False)
    return ok(_load(order_id), "Payment processed successfully")


@router.put("/{order_id}/status", response_model=ApiResponse[OrderResponse])
async def update_order_status(order_id: str, body: UpdateStatusRequest, user: User = Depends(admin_or_seller)):
    current_domain.process(UpdateOrderStatus(order_id=order_id, status=body.status.value), asynchronous=False)
    return ok(_load(order_id), "Order status updated successfully")


@router.post("/{order_id}/refund", response_model=ApiResponse[OrderResponse])
async def refund_order(order_id: str, user: User = Depends(admin_only)):
    current_domain.process(RefundOrder(order_id=order_id), asynchronous=False)
    return ok(_load(order_id), "Order refunded successfully")


@router.post("/{order_id}/shipment", response_model=ApiResponse[OrderResponse])
async def ship_order(order_id: str, user: User = Depends(admin_or_seller)):
    current_domain.process(ShipOrder(order_id=order_id), asynchronous=False)
    return ok(_load(order_id), "Shipment created successfully")
