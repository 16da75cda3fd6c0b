"""Shopping cart aggregate: one per user, created on first use."""

from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import DateTime, HasMany, Identifier, Integer

from storefront.domain import storefront
from storefront.shared.clock import utcnow


@storefront.entity(part_of="ShoppingCart")
class CartItem:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=1)
    added_at = DateTime(default=utcnow)


@storefront.aggregate
class ShoppingCart:
    """The products a user intends to buy.

    Lines are keyed by product: adding a product that is already in the cart
    increases that line's quantity.
    """

    user_id = Identifier(required=True, unique=True)
    items = HasMany(CartItem)
    updated_at = DateTime(default=utcnow)

    @classmethod
    def create(cls, user_id):
        return cls(user_id=user_id, updated_at=utcnow())

    @property
    def is_empty(self) -> bool:
        return not self.items

    def item(self, item_id) -> CartItem:
        item = next((i for i in self.items if str(i.id) == str(item_id)), None)
        if item is None:
            raise ObjectNotFoundError("Cart item not found")
        return item

    def add_item(self, product_id, quantity: int) -> CartItem:
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})

        existing = next((i for i in self.items if str(i.product_id) == str(product_id)), None)
        if existing:
            existing.quantity += quantity
            item = existing
        else:
            item = CartItem(product_id=product_id, quantity=quantity, added_at=utcnow())
            self.add_items(item)

        self.updated_at = utcnow()
        return item

    def update_quantity(self, item_id, quantity: int):
        if quantity < 1:
            raise ValidationError({"quantity": ["Quantity must be at least 1"]})
        self.item(item_id).quantity = quantity
        self.updated_at = utcnow()

    def remove_item(self, item_id):
        self.remove_items(self.item(item_id))
        self.updated_at = utcnow()

    def clear(self):
        for item in list(self.items):
            self.remove_items(item)
        self.updated_at = utcnow()


@storefront.repository(part_of=ShoppingCart)
class ShoppingCartRepository:
    def for_user(self, user_id) -> ShoppingCart:
        """Return the user's cart, creating an unsaved empty one if none exists."""
        cart = self._dao.query.filter(user_id=str(user_id)).all().first
        return cart if cart is not None else ShoppingCart.create(user_id=user_id)
