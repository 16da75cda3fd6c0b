"""Promotion aggregate: discount codes redeemable at checkout."""

from enum import Enum

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, Integer, String, Text

from storefront.domain import storefront
from storefront.shared.clock import as_utc, utcnow
from storefront.shared.queries import fetch_all


class PromotionType(Enum):
    PERCENTAGE = "Percentage"
    FIXED_AMOUNT = "FixedAmount"
    FREE_SHIPPING = "FreeShipping"


@storefront.aggregate
class Promotion:
    """A discount code with a validity window and an optional usage cap.

    Codes are stored upper-case and matched case-insensitively. A code that
    does not apply to an order yields no discount rather than an error.
    """

    code = String(required=True, max_length=50, unique=True)
    name = String(required=True, max_length=100)
    description = Text()
    type = String(required=True, choices=PromotionType)
    value = Float(required=True, min_value=0.0)
    minimum_order_amount = Float(default=0.0, min_value=0.0)
    usage_limit = Integer(min_value=1)  # None means unlimited
    usage_count = Integer(default=0, min_value=0)
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)
    is_active = Boolean(default=True)
    created_at = DateTime(default=utcnow)

    @invariant.post
    def value_must_be_positive(self):
        if self.value is not None and self.value <= 0:
            raise ValidationError({"value": ["Promotion value must be greater than zero"]})

    @invariant.post
    def percentage_cannot_exceed_hundred(self):
        if self.type == PromotionType.PERCENTAGE.value and self.value is not None and self.value > 100:
            raise ValidationError({"value": ["A percentage discount cannot exceed 100"]})

    @invariant.post
    def window_must_end_after_start(self):
        if self.start_date and self.end_date and as_utc(self.end_date) <= as_utc(self.start_date):
            raise ValidationError({"end_date": ["End date must be after start date"]})

    @classmethod
    def create(
        cls,
        code,
        name,
        type,
        value,
        start_date,
        end_date,
        description=None,
        minimum_order_amount=0.0,
        usage_limit=None,
    ):
        return cls(
            code=code.strip().upper(),
            name=name,
            description=description,
            type=type,
            value=value,
            minimum_order_amount=minimum_order_amount or 0.0,
            usage_limit=usage_limit,
            start_date=start_date,
            end_date=end_date,
            created_at=utcnow(),
        )

    def is_running(self, at=None) -> bool:
        at = at or utcnow()
        return bool(self.is_active) and as_utc(self.start_date) <= at <= as_utc(self.end_date)

    def is_exhausted(self) -> bool:
        return self.usage_limit is not None and self.usage_count >= self.usage_limit

    def applies_to(self, order_amount: float, at=None) -> bool:
        return (
            self.is_running(at)
            and order_amount >= (self.minimum_order_amount or 0.0)
            and not self.is_exhausted()
        )

    def discount_for(self, order_amount: float, shipping_cost: float) -> float:
        """Discount this promotion is worth on an order, capped at the order amount."""
        promotion_type = PromotionType(self.type)
        if promotion_type is PromotionType.PERCENTAGE:
            discount = order_amount * self.value / 100
        elif promotion_type is PromotionType.FIXED_AMOUNT:
            discount = self.value
        else:
            discount = shipping_cost
        return round(min(discount, order_amount), 2)

    def record_use(self):
        if self.is_exhausted():
            raise ValidationError({"code": ["Promotion usage limit has been reached"]})
        self.usage_count += 1


@storefront.repository(part_of=Promotion)
class PromotionRepository:
    def find_by_code(self, code: str):
        return self._dao.query.filter(code=code.strip().upper()).all().first

    def running(self, at=None) -> list:
        at = at or utcnow()
        promotions = fetch_all(self._dao.query.filter(is_active=True))
        return sorted(
            (promotion for promotion in promotions if promotion.is_running(at)),
            key=lambda promotion: as_utc(promotion.end_date),
        )
