"""Keeps a product's average rating and review count in step with its approved reviews."""

import structlog
from protean.utils.globals import current_domain
from protean.utils.mixins import handle

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.reviews.events import ReviewApproved
from storefront.reviews.review import Review

logger = structlog.get_logger(__name__)


def refresh_product_rating(product_id, excluding_review_id=None) -> None:
    reviews = current_domain.repository_for(Review).approved_for_product(product_id)
    ratings = [review.rating for review in reviews if str(review.id) != str(excluding_review_id)]

    products = current_domain.repository_for(Product)
    product = products.get(product_id)
    product.record_rating(sum(ratings) / len(ratings) if ratings else 0.0, len(ratings))
    products.add(product)

    logger.info(
        "product_rating_refreshed",
        product_id=str(product_id),
        average_rating=product.average_rating,
        review_count=product.review_count,
    )


@storefront.event_handler(part_of=Product, stream_category="storefront::review")
class ProductRatingHandler:
    @handle(ReviewApproved)
    def on_review_approved(self, event: ReviewApproved) -> None:
        refresh_product_rating(event.product_id)
