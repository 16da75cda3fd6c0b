"""Cart lines priced against the current catalogue."""

from dataclasses import dataclass

from protean.utils.globals import current_domain

from storefront.cart.cart import ShoppingCart
from storefront.catalogue.product.product import Product


@dataclass(frozen=True)
class PricedLine:
    item_id: str
    product: Product
    quantity: int

    @property
    def unit_price(self) -> float:
        return self.product.effective_price

    @property
    def total(self) -> float:
        return round(self.unit_price * self.quantity, 2)


def priced_lines(cart: ShoppingCart) -> list[PricedLine]:
    products = current_domain.repository_for(Product)
    return [
        PricedLine(item_id=str(item.id), product=products.get(item.product_id), quantity=item.quantity)
        for item in cart.items
    ]


def cart_total(cart: ShoppingCart) -> float:
    return round(sum(line.total for line in priced_lines(cart)), 2)
