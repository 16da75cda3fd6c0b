"""FastAPI endpoints for administering promotion codes."""

from datetime import datetime

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain
from pydantic import BaseModel, Field

from storefront.identity.user import User
from storefront.promotion.management import CreatePromotion
from storefront.promotion.promotion import Promotion, PromotionType
from storefront.web.envelope import ApiResponse, ok
from storefront.web.security import admin_only

router = APIRouter(prefix="/api/admin/promotions", tags=["admin"])


class PromotionRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "code": "WELCOME10",
                    "name": "Welcome discount",
                    "type": "Percentage",
                    "value": 10,
                    "minimum_order_amount": 50,
                    "usage_limit": 1000,
                    "start_date": "2026-01-01T00:00:00Z",
                    "end_date": "2026-12-31T23:59:59Z",
                }
            ]
        }
    }

    code: str = Field(..., min_length=1, max_length=50)
    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    type: PromotionType
    value: float = Field(..., gt=0)
    minimum_order_amount: float = Field(0.0, ge=0)
    usage_limit: int | None = Field(None, ge=1)
    start_date: datetime
    end_date: datetime


class PromotionResponse(BaseModel):
    id: str
    code: str
    name: str
    description: str | None = None
    type: str
    value: float
    minimum_order_amount: float
    usage_limit: int | None = None
    usage_count: int
    start_date: datetime
    end_date: datetime
    is_active: bool


def _promotion_response(promotion: Promotion) -> PromotionResponse:
    return PromotionResponse(
        id=str(promotion.id),
        code=promotion.code,
        name=promotion.name,
        description=promotion.description,
        type=promotion.type,
        value=promotion.value,
        minimum_order_amount=promotion.minimum_order_amount or 0.0,
        usage_limit=promotion.usage_limit,
        usage_count=promotion.usage_count or 0,
        start_date=promotion.start_date,
        end_date=promotion.end_date,
        is_active=promotion.is_active,
    )


@router.post("", status_code=201, response_model=ApiResponse[PromotionResponse])
async def create_promotion(body: PromotionRequest, user: User = Depends(admin_only)):
    command = CreatePromotion(
        code=body.code,
        name=body.name,
        description=body.description,
        type=body.type.value,
        value=body.value,
        minimum_order_amount=body.minimum_order_amount,
        usage_limit=body.usage_limit,
        start_date=body.start_date,
        end_date=body.end_date,
    )
    promotion_id = current_domain.process(command, asynchronous=False)
    promotion = current_domain.repository_for(Promotion).get(promotion_id)
    return ok(_promotion_response(promotion), "Promotion created successfully")


@router.get("", response_model=ApiResponse[list[PromotionResponse]])
async def list_running_promotions(user: User = Depends(admin_only)):
    promotions = current_domain.repository_for(Promotion).running()
    return ok([_promotion_response(promotion) for promotion in promotions])
