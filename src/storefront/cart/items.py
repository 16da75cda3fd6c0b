"""Cart item management: commands and handler.

A line's price is never stored; it is read from the product each time the
cart is shown, so sale prices apply until checkout.
"""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product.product import Product
from storefront.domain import storefront

UNAVAILABLE_MESSAGE = "Product not available or insufficient stock"


@storefront.command(part_of="ShoppingCart")
class AddToCart:
    user_id = Identifier(required=True)
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class UpdateCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)


@storefront.command(part_of="ShoppingCart")
class RemoveCartItem:
    user_id = Identifier(required=True)
    item_id = Identifier(required=True)


@storefront.command(part_of="ShoppingCart")
class ClearCart:
    user_id = Identifier(required=True)


def _available_product(product_id, quantity) -> Product:
    try:
        product = current_domain.repository_for(Product).get(product_id)
    except ObjectNotFoundError as exc:
        raise ValidationError({"product_id": [UNAVAILABLE_MESSAGE]}) from exc
    if not product.is_available(quantity):
        raise ValidationError({"product_id": [UNAVAILABLE_MESSAGE]})
    return product


@storefront.command_handler(part_of=ShoppingCart)
class CartItemsHandler:
    @handle(AddToCart)
    def add_to_cart(self, command):
        _available_product(command.product_id, command.quantity)

        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id)
        item = cart.add_item(command.product_id, command.quantity)
        repo.add(cart)
        return str(item.id)

    @handle(UpdateCartItem)
    def update_cart_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id)
        item = cart.item(command.item_id)

        product = current_domain.repository_for(Product).get(item.product_id)
        if not product.is_available(command.quantity):
            raise ValidationError({"quantity": [UNAVAILABLE_MESSAGE]})

        cart.update_quantity(command.item_id, command.quantity)
        repo.add(cart)

    @handle(RemoveCartItem)
    def remove_cart_item(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id)
        cart.remove_item(command.item_id)
        repo.add(cart)

    @handle(ClearCart)
    def clear_cart(self, command):
        repo = current_domain.repository_for(ShoppingCart)
        cart = repo.for_user(command.user_id)
        cart.clear()
        repo.add(cart)
