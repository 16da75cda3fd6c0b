"""Wishlist entries: products a user has saved for later."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, Identifier
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.domain import storefront
from storefront.shared.clock import utcnow
from storefront.shared.queries import fetch_all


@storefront.aggregate
class WishlistItem:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    created_at = DateTime(default=utcnow)


@storefront.repository(part_of=WishlistItem)
class WishlistRepository:
    def for_user(self, user_id) -> list:
        return fetch_all(self._dao.query.filter(user_id=str(user_id)).order_by("-created_at"))

    def entry(self, user_id, product_id):
        return self._dao.query.filter(user_id=str(user_id), product_id=str(product_id)).all().first


@storefront.command(part_of="WishlistItem")
class AddToWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command(part_of="WishlistItem")
class RemoveFromWishlist:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)


@storefront.command_handler(part_of=WishlistItem)
class WishlistHandler:
    @handle(AddToWishlist)
    def add_to_wishlist(self, command):
        current_domain.repository_for(Product).get(command.product_id)

        repo = current_domain.repository_for(WishlistItem)
        if repo.entry(command.user_id, command.product_id) is not None:
            raise ValidationError({"product_id": ["Product already in wishlist"]})

        item = WishlistItem(user_id=command.user_id, product_id=command.product_id, created_at=utcnow())
        repo.add(item)
        return str(item.id)

    @handle(RemoveFromWishlist)
    def remove_from_wishlist(self, command):
        repo = current_domain.repository_for(WishlistItem)
        item = repo.entry(command.user_id, command.product_id)
        if item is None:
            raise ObjectNotFoundError("Product not found in wishlist")
        repo._dao.delete(item)
