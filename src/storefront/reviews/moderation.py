"""Review submission, approval and removal: commands and handler."""

import structlog
from protean import handle
from protean.exceptions import ValidationError
from protean.fields import Boolean, Identifier, Integer, Text
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.identity.exceptions import PermissionDenied
from storefront.reviews.rating import refresh_product_rating
from storefront.reviews.review import Review

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Review")
class SubmitReview:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()


@storefront.command(part_of="Review")
class ApproveReview:
    review_id = Identifier(required=True)


@storefront.command(part_of="Review")
class DeleteReview:
    review_id = Identifier(required=True)
    user_id = Identifier(required=True)
    is_admin = Boolean(default=False)


@storefront.command_handler(part_of=Review)
class ReviewModerationHandler:
    @handle(SubmitReview)
    def submit_review(self, command):
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(Review)
        if repo.by_user_for_product(command.user_id, command.product_id) is not None:
            raise ValidationError({"review": ["You have already reviewed this product"]})

        review = Review.submit(
            product_id=command.product_id,
            user_id=command.user_id,
            rating=command.rating,
            comment=command.comment,
        )
        repo.add(review)
        return str(review.id)

    @handle(ApproveReview)
    def approve_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        review.approve()
        repo.add(review)
        logger.info("review_approved", review_id=str(review.id), product_id=str(review.product_id))

    @handle(DeleteReview)
    def delete_review(self, command):
        repo = current_domain.repository_for(Review)
        review = repo.get(command.review_id)
        if not command.is_admin and str(review.user_id) != str(command.user_id):
            raise PermissionDenied("You are not authorized to delete this review")

        repo._dao.delete(review)
        logger.info("review_deleted", review_id=str(review.id), product_id=str(review.product_id))
        if review.is_approved:
            refresh_product_rating(review.product_id, excluding_review_id=review.id)
