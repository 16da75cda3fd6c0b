"""Promotion management and redemption."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import DateTime, Float, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.domain import storefront
from storefront.promotion.promotion import Promotion, PromotionType

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Promotion")
class CreatePromotion:
    code = String(required=True, max_length=50)
    name = String(required=True, max_length=100)
    description = Text()
    type = String(required=True, choices=PromotionType)
    value = Float(required=True)
    minimum_order_amount = Float(default=0.0)
    usage_limit = Integer()
    start_date = DateTime(required=True)
    end_date = DateTime(required=True)


@storefront.command_handler(part_of=Promotion)
class ManagePromotionHandler:
    @handle(CreatePromotion)
    def create_promotion(self, command):
        repo = current_domain.repository_for(Promotion)
        if repo.find_by_code(command.code) is not None:
            raise ValidationError({"code": [f"Promotion code '{command.code}' already exists"]})

        promotion = Promotion.create(
            code=command.code,
            name=command.name,
            description=command.description,
            type=command.type,
            value=command.value,
            minimum_order_amount=command.minimum_order_amount,
            usage_limit=command.usage_limit,
            start_date=command.start_date,
            end_date=command.end_date,
        )
        repo.add(promotion)
        return str(promotion.id)


def redeem(code: str | None, order_amount: float, shipping_cost: float) -> tuple[Promotion | None, float]:
    """Apply ``code`` to an order and count the use.

    Returns the promotion and the discount, or ``(None, 0.0)`` when the code
    is unknown or does not apply to this order.
    """
    if not code:
        return None, 0.0

    repo = current_domain.repository_for(Promotion)
    promotion = repo.find_by_code(code)
    if promotion is None or not promotion.applies_to(order_amount):
        logger.info("promotion_not_applied", code=code, order_amount=order_amount)
        return None, 0.0

    discount = promotion.discount_for(order_amount, shipping_cost)
    promotion.record_use()
    repo.add(promotion)
    return promotion, discount
