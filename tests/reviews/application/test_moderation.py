"""Application tests for review submission, approval, deletion and product ratings."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.identity.exceptions import PermissionDenied
from storefront.reviews.moderation import ApproveReview, DeleteReview, SubmitReview
from storefront.reviews.review import Review


@pytest.fixture()
def product(make_product):
    return make_product(name="Blender")


@pytest.fixture()
def submit(product):
    def _submit(user, rating, comment=None):
        command = SubmitReview(product_id=str(product.id), user_id=str(user.id), rating=rating, comment=comment)
        return current_domain.process(command, asynchronous=False)

    return _submit


def _approve(review_id):
    current_domain.process(ApproveReview(review_id=review_id), asynchronous=False)


def _product(product):
    return current_domain.repository_for(Product).get(product.id)


class TestSubmitReview:
    def test_pending_until_approved(self, submit, customer, product):
        review_id = submit(customer, 5, "Great")
        repo = current_domain.repository_for(Review)

        assert repo.get(review_id).is_approved is False
        assert [str(r.id) for r in repo.awaiting_approval()] == [review_id]
        assert repo.approved_for_product(product.id) == []

    def test_one_review_per_product(self, submit, customer):
        submit(customer, 5)

        with pytest.raises(ValidationError) as exc:
            submit(customer, 3)
        assert exc.value.messages["review"] == ["You have already reviewed this product"]

    def test_unknown_product(self, customer):
        with pytest.raises(ObjectNotFoundError):
            current_domain.process(
                SubmitReview(product_id="missing", user_id=str(customer.id), rating=4),
                asynchronous=False,
            )


class TestApproval:
    def test_approval_updates_product_rating(self, submit, customer, other_customer, product):
        _approve(submit(customer, 5))
        _approve(submit(other_customer, 2))

        refreshed = _product(product)
        assert refreshed.average_rating == 3.5
        assert refreshed.review_count == 2

    def test_pending_reviews_do_not_count(self, submit, customer, other_customer, product):
        _approve(submit(customer, 4))
        submit(other_customer, 1)

        refreshed = _product(product)
        assert refreshed.average_rating == 4.0
        assert refreshed.review_count == 1


class TestDeletion:
    def test_author_deletes_review(self, submit, customer, product):
        review_id = submit(customer, 5)
        _approve(review_id)

        current_domain.process(
            DeleteReview(review_id=review_id, user_id=str(customer.id)),
            asynchronous=False,
        )

        with pytest.raises(ObjectNotFoundError):
            current_domain.repository_for(Review).get(review_id)
        refreshed = _product(product)
        assert refreshed.average_rating == 0.0
        assert refreshed.review_count == 0

    def test_others_cannot_delete(self, submit, customer, other_customer):
        review_id = submit(customer, 5)

        with pytest.raises(PermissionDenied):
            current_domain.process(
                DeleteReview(review_id=review_id, user_id=str(other_customer.id)),
                asynchronous=False,
            )

    def test_admin_deletes_any_review(self, submit, customer, other_customer, admin, product):
        _approve(submit(customer, 5))
        other_review = submit(other_customer, 3)
        _approve(other_review)

        current_domain.process(
            DeleteReview(review_id=other_review, user_id=str(admin.id), is_admin=True),
            asynchronous=False,
        )

        refreshed = _product(product)
        assert refreshed.average_rating == 5.0
        assert refreshed.review_count == 1
