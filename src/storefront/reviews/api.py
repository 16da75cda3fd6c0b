"""FastAPI endpoints for product reviews and their moderation."""

from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from protean.exceptions import ObjectNotFoundError
from protean.utils.globals import current_domain
from pydantic import BaseModel, Field

from storefront.catalogue.product.product import Product
from storefront.identity.user import Role, User
from storefront.reviews.moderation import ApproveReview, DeleteReview, SubmitReview
from storefront.reviews.review import Review
from storefront.web.envelope import ApiResponse, PaginatedResult, ok, paginated
from storefront.web.security import admin_only, customer_only, get_current_user

product_reviews_router = APIRouter(prefix="/api/products/{product_id}/reviews", tags=["reviews"])
review_router = APIRouter(prefix="/api/reviews", tags=["reviews"])


class ReviewRequest(BaseModel):
    model_config = {"json_schema_extra": {"examples": [{"rating": 5, "comment": "Does exactly what it says."}]}}

    rating: int = Field(..., ge=1, le=5)
    comment: str | None = Field(None, max_length=2000)


class CreateReviewRequest(ReviewRequest):
    product_id: str


class ReviewResponse(BaseModel):
    id: str
    product_id: str
    rating: int
    comment: str | None = None
    user_name: str | None = None
    is_approved: bool
    created_at: datetime | None = None


class PageParams(BaseModel):
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)


def _user_names(user_ids) -> dict[str, str]:
    users = current_domain.repository_for(User)
    names = {}
    for user_id in {str(user_id) for user_id in user_ids}:
        try:
            names[user_id] = users.get(user_id).full_name
        except ObjectNotFoundError:
            continue
    return names


def _review_responses(reviews: list[Review]) -> list[ReviewResponse]:
    names = _user_names(review.user_id for review in reviews)
    return [
        ReviewResponse(
            id=str(review.id),
            product_id=str(review.product_id),
            rating=review.rating,
            comment=review.comment,
            user_name=names.get(str(review.user_id)),
            is_approved=review.is_approved,
            created_at=review.created_at,
        )
        for review in reviews
    ]


@review_router.get("/product/{product_id}", response_model=ApiResponse[PaginatedResult[ReviewResponse]])
@product_reviews_router.get("", response_model=ApiResponse[PaginatedResult[ReviewResponse]])
async def list_product_reviews(product_id: str, params: Annotated[PageParams, Query()]):
    current_domain.repository_for(Product).get(product_id)
    page, total_count = current_domain.repository_for(Review).approved_page(product_id, params.page, params.page_size)
    return ok(paginated(_review_responses(page), total_count, params.page, params.page_size))


def _submit(product_id: str, body: ReviewRequest, user: User):
    command = SubmitReview(
        product_id=product_id,
        user_id=str(user.id),
        rating=body.rating,
        comment=body.comment,
    )
    review_id = current_domain.process(command, asynchronous=False)
    review = current_domain.repository_for(Review).get(review_id)
    return ok(_review_responses([review])[0], "Review submitted and awaiting approval")


@product_reviews_router.post("", status_code=201, response_model=ApiResponse[ReviewResponse])
async def submit_review(product_id: str, body: ReviewRequest, user: User = Depends(customer_only)):
    return _submit(product_id, body, user)


@review_router.post("", status_code=201, response_model=ApiResponse[ReviewResponse])
async def create_review(body: CreateReviewRequest, user: User = Depends(customer_only)):
    return _submit(body.product_id, body, user)


@review_router.get("/pending", response_model=ApiResponse[list[ReviewResponse]])
async def list_pending_reviews(user: User = Depends(admin_only)):
    return ok(_review_responses(current_domain.repository_for(Review).awaiting_approval()))


@review_router.put("/{review_id}/approve", response_model=ApiResponse[ReviewResponse])
async def approve_review(review_id: str, user: User = Depends(admin_only)):
    current_domain.process(ApproveReview(review_id=review_id), asynchronous=False)
    review = current_domain.repository_for(Review).get(review_id)
    return ok(_review_responses([review])[0], "Review approved")


@review_router.delete("/{review_id}", response_model=ApiResponse[bool])
async def delete_review(review_id: str, user: User = Depends(get_current_user)):
    command = DeleteReview(review_id=review_id, user_id=str(user.id), is_admin=user.has_role(Role.ADMIN))
    current_domain.process(command, asynchronous=False)
    return ok(True, "Review deleted successfully")
