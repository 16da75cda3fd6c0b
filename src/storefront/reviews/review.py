"""Review aggregate: a customer's rating of a product, visible once approved."""

from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Identifier, Integer, Text

from storefront.domain import storefront
from storefront.reviews.events import ReviewApproved
from storefront.shared.clock import utcnow
from storefront.shared.queries import fetch_all, fetch_page


@storefront.aggregate
class Review:
    product_id = Identifier(required=True)
    user_id = Identifier(required=True)
    rating = Integer(required=True, min_value=1, max_value=5)
    comment = Text()
    is_approved = Boolean(default=False)
    created_at = DateTime(default=utcnow)

    @classmethod
    def submit(cls, product_id, user_id, rating, comment=None):
        return cls(
            product_id=product_id,
            user_id=user_id,
            rating=rating,
            comment=comment,
            is_approved=False,
            created_at=utcnow(),
        )

    def approve(self):
        if self.is_approved:
            raise ValidationError({"review": ["Review is already approved"]})
        self.is_approved = True
        self.raise_(ReviewApproved(review_id=self.id, product_id=self.product_id, rating=self.rating))


@storefront.repository(part_of=Review)
class ReviewRepository:
    def _approved(self, product_id):
        return self._dao.query.filter(product_id=str(product_id), is_approved=True).order_by("-created_at")

    def approved_for_product(self, product_id) -> list:
        return fetch_all(self._approved(product_id))

    def approved_page(self, product_id, page: int, page_size: int) -> tuple[list, int]:
        return fetch_page(self._approved(product_id), page, page_size)

    def awaiting_approval(self) -> list:
        return fetch_all(self._dao.query.filter(is_approved=False).order_by("created_at"))

    def by_user_for_product(self, user_id, product_id):
        return self._dao.query.filter(user_id=str(user_id), product_id=str(product_id)).all().first
