"""Application tests for saving products to a wishlist."""

import pytest
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.utils.globals import current_domain

from storefront.wishlist.wishlist import AddToWishlist, RemoveFromWishlist, WishlistItem


def _add(user, product_id):
    return current_domain.process(AddToWishlist(user_id=str(user.id), product_id=str(product_id)), asynchronous=False)


def _remove(user, product_id):
    current_domain.process(RemoveFromWishlist(user_id=str(user.id), product_id=str(product_id)), asynchronous=False)


def test_add_product(customer, make_product):
    product = make_product()

    item_id = _add(customer, product.id)

    entries = current_domain.repository_for(WishlistItem).for_user(customer.id)
    assert [str(e.id) for e in entries] == [item_id]


def test_unknown_product(customer):
    with pytest.raises(ObjectNotFoundError):
        _add(customer, "missing")


def test_duplicate_entry(customer, make_product):
    product = make_product()
    _add(customer, product.id)

    with pytest.raises(ValidationError) as exc:
        _add(customer, product.id)
    assert exc.value.messages["product_id"] == ["Product already in wishlist"]


def test_wishlists_are_per_user(customer, other_customer, make_product):
    product = make_product()
    _add(customer, product.id)
    _add(other_customer, product.id)

    repo = current_domain.repository_for(WishlistItem)
    assert len(repo.for_user(customer.id)) == 1
    assert len(repo.for_user(other_customer.id)) == 1


def test_remove_product(customer, make_product):
    product = make_product()
    _add(customer, product.id)

    _remove(customer, product.id)

    assert current_domain.repository_for(WishlistItem).entry(customer.id, product.id) is None


def test_remove_missing_entry(customer, make_product):
    with pytest.raises(ObjectNotFoundError):
        _remove(customer, make_product().id)
