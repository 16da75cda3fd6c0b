"""Order aggregate: a checked-out cart moving through fulfilment.

State machine:
    PENDING → CONFIRMED → PROCESSING → SHIPPED → DELIVERED
    PENDING/CONFIRMED/PROCESSING → CANCELLED → REFUNDED
    SHIPPED/DELIVERED → RETURNED → REFUNDED
    DELIVERED → REFUNDED

Payment status runs alongside: Pending until the payment intent is
confirmed, Completed afterwards, Refunded once money is returned.
"""

from enum import Enum
from uuid import uuid4

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Float, HasMany, Identifier, Integer, String, Text, ValueObject

from storefront.domain import storefront
from storefront.ordering.events import OrderPlaced, OrderStatusChanged
from storefront.shared.clock import utcnow
from storefront.shared.queries import fetch_all, fetch_page


class OrderStatus(Enum):
    PENDING = "Pending"
    CONFIRMED = "Confirmed"
    PROCESSING = "Processing"
    SHIPPED = "Shipped"
    DELIVERED = "Delivered"
    CANCELLED = "Cancelled"
    RETURNED = "Returned"
    REFUNDED = "Refunded"


class PaymentStatus(Enum):
    PENDING = "Pending"
    COMPLETED = "Completed"
    FAILED = "Failed"
    CANCELLED = "Cancelled"
    REFUNDED = "Refunded"


_VALID_TRANSITIONS = {
    OrderStatus.PENDING: {OrderStatus.CONFIRMED, OrderStatus.PROCESSING, OrderStatus.CANCELLED},
    OrderStatus.CONFIRMED: {OrderStatus.PROCESSING, OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.PROCESSING: {OrderStatus.SHIPPED, OrderStatus.CANCELLED},
    OrderStatus.SHIPPED: {OrderStatus.DELIVERED, OrderStatus.RETURNED},
    OrderStatus.DELIVERED: {OrderStatus.RETURNED, OrderStatus.REFUNDED},
    OrderStatus.RETURNED: {OrderStatus.REFUNDED},
    OrderStatus.CANCELLED: {OrderStatus.REFUNDED},
    OrderStatus.REFUNDED: set(),  # Terminal
}

# Stock reserved at checkout is still on hold in these states
_STOCK_HOLDING_STATES = {OrderStatus.PENDING, OrderStatus.CONFIRMED, OrderStatus.PROCESSING}

COURIER = "Express Delivery"


def new_payment_intent_id() -> str:
    return f"pi_{uuid4().hex}"


@storefront.value_object(part_of="Order")
class OrderPricing:
    """Amounts locked at checkout. Later catalogue price changes never touch them."""

    subtotal = Float(default=0.0)
    tax_amount = Float(default=0.0)
    shipping_cost = Float(default=0.0)
    discount_amount = Float(default=0.0)
    total_amount = Float(default=0.0)


@storefront.entity(part_of="Order")
class OrderItem:
    product_id = Identifier(required=True)
    product_name = String(required=True, max_length=200)
    quantity = Integer(required=True, min_value=1)
    unit_price = Float(required=True, min_value=0.0)
    total_price = Float(required=True, min_value=0.0)


@storefront.aggregate
class Order:
    order_number = String(required=True, max_length=30, unique=True)
    user_id = Identifier(required=True)
    status = String(choices=OrderStatus, default=OrderStatus.PENDING.value)
    payment_status = String(choices=PaymentStatus, default=PaymentStatus.PENDING.value)
    payment_intent_id = String(max_length=64)
    pricing = ValueObject(OrderPricing)
    promotion_code = String(max_length=50)
    shipping_address = Text()
    billing_address = Text()
    payment_method = String(max_length=50)
    items = HasMany(OrderItem)
    tracking_number = String(max_length=50)
    courier = String(max_length=100)
    created_at = DateTime(default=utcnow)
    updated_at = DateTime(default=utcnow)
    shipped_at = DateTime()
    delivered_at = DateTime()

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def place(
        cls,
        order_number,
        user_id,
        lines,
        pricing,
        promotion_code=None,
        shipping_address=None,
        billing_address=None,
        payment_method=None,
    ):
        """Create a pending order.

        Args:
            lines: dicts with product_id, product_name, quantity and unit_price.
            pricing: the OrderPricing computed for these lines.
            shipping_address, billing_address, payment_method: stored as given;
                no address or payment validation happens here.
        """
        now = utcnow()
        order = cls(
            order_number=order_number,
            user_id=user_id,
            pricing=pricing,
            promotion_code=promotion_code,
            shipping_address=shipping_address,
            billing_address=billing_address,
            payment_method=payment_method,
            payment_intent_id=new_payment_intent_id(),
            created_at=now,
            updated_at=now,
        )
        for line in lines:
            order.add_items(
                OrderItem(
                    product_id=line["product_id"],
                    product_name=line["product_name"],
                    quantity=line["quantity"],
                    unit_price=line["unit_price"],
                    total_price=round(line["unit_price"] * line["quantity"], 2),
                )
            )

        order.raise_(
            OrderPlaced(
                order_id=order.id,
                order_number=order_number,
                user_id=user_id,
                item_count=order.item_count,
                total_amount=pricing.total_amount,
                placed_at=now,
            )
        )
        return order

    # -------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------
    @property
    def item_count(self) -> int:
        return sum(item.quantity for item in self.items)

    @property
    def total_amount(self) -> float:
        return self.pricing.total_amount if self.pricing else 0.0

    @property
    def sequence(self) -> int:
        """The running number embedded in ``order_number``."""
        return int(self.order_number.rsplit("-", 1)[-1])

    @property
    def holds_stock(self) -> bool:
        return OrderStatus(self.status) in _STOCK_HOLDING_STATES

    def is_owned_by(self, user_id) -> bool:
        return str(self.user_id) == str(user_id)

    # -------------------------------------------------------------------
    # Status transitions
    # -------------------------------------------------------------------
    def _assert_can_transition(self, target_status):
        current = OrderStatus(self.status)
        if target_status not in _VALID_TRANSITIONS[current]:
            raise ValidationError(
                {"status": [f"Cannot change order status from {current.value} to {target_status.value}"]}
            )

    def _move_to(self, target_status):
        previous = self.status
        now = utcnow()

        self.status = target_status.value
        self.updated_at = now
        if target_status is OrderStatus.SHIPPED:
            self.shipped_at = now
        elif target_status is OrderStatus.DELIVERED:
            self.delivered_at = now

        self.raise_(
            OrderStatusChanged(
                order_id=self.id,
                order_number=self.order_number,
                user_id=self.user_id,
                previous_status=previous,
                new_status=target_status.value,
                changed_at=now,
            )
        )

    def change_status(self, target_status: OrderStatus):
        self._assert_can_transition(target_status)
        if target_status is OrderStatus.REFUNDED:
            self.refund()
        else:
            self._move_to(target_status)

    def cancel_by(self, user_id):
        """Customer-initiated cancellation, allowed only while the order is pending."""
        if not self.is_owned_by(user_id) or OrderStatus(self.status) is not OrderStatus.PENDING:
            raise ValidationError({"order": ["Unable to cancel order"]})
        self._move_to(OrderStatus.CANCELLED)

    # -------------------------------------------------------------------
    # Payment
    # -------------------------------------------------------------------
    def complete_payment(self, payment_intent_id):
        if payment_intent_id != self.payment_intent_id:
            raise ValidationError({"payment_intent_id": ["Payment intent does not match this order"]})
        if PaymentStatus(self.payment_status) is not PaymentStatus.PENDING:
            raise ValidationError({"payment_status": ["Order has already been paid"]})
        self._assert_can_transition(OrderStatus.CONFIRMED)

        self.payment_status = PaymentStatus.COMPLETED.value
        self._move_to(OrderStatus.CONFIRMED)

    def refund(self):
        # Refunds may close an order from any paid state
        if PaymentStatus(self.payment_status) is not PaymentStatus.COMPLETED:
            raise ValidationError({"payment_status": ["Only paid orders can be refunded"]})

        self.payment_status = PaymentStatus.REFUNDED.value
        self._move_to(OrderStatus.REFUNDED)

    # -------------------------------------------------------------------
    # Shipping
    # -------------------------------------------------------------------
    def ship(self):
        self._assert_can_transition(OrderStatus.SHIPPED)
        self.tracking_number = f"TRK{utcnow():%Y%m%d}{self.sequence:06d}"
        self.courier = COURIER
        self._move_to(OrderStatus.SHIPPED)


@storefront.repository(part_of=Order)
class OrderRepository:
    def everything(self) -> list:
        return fetch_all(self._dao.query.order_by("-created_at"))

    def newest_page(self, page: int, page_size: int) -> tuple[list, int]:
        return fetch_page(self._dao.query.order_by("-created_at"), page, page_size)

    def for_user(self, user_id) -> list:
        return fetch_all(self._dao.query.filter(user_id=str(user_id)).order_by("-created_at"))

    def owned_by(self, order_id, user_id) -> Order:
        """Fetch an order, hiding orders that belong to someone else."""
        order = self.get(order_id)
        if not order.is_owned_by(user_id):
            raise ObjectNotFoundError(f"Order {order_id} not found")
        return order

    def find_by_tracking_number(self, tracking_number: str):
        return self._dao.query.filter(tracking_number=tracking_number).all().first

    def next_order_number(self) -> str:
        sequence = self._dao.query.all().total + 1
        return f"ORD-{utcnow():%Y%m%d}-{sequence:06d}"
