"""Domain events for the Product aggregate."""

from protean.fields import Identifier, Integer, String

from storefront.domain import storefront


@storefront.event(part_of="Product")
class StockRunningLow:
    """Stock was set at or below the low-stock threshold."""

    __version__ = 1

    product_id = Identifier(required=True)
    name = String(required=True)
    stock_quantity = Integer(required=True)
    threshold = Integer(required=True)
