"""Inventory: administrative stock updates and the low-stock report."""

import structlog
from protean import handle
from protean.fields import Identifier, Integer
from protean.utils.globals import current_domain

from storefront.catalogue.product.product import Product
from storefront.config import get_settings
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class UpdateStock:
    product_id = Identifier(required=True)
    quantity = Integer(required=True, min_value=0)


@storefront.command_handler(part_of=Product)
class InventoryHandler:
    @handle(UpdateStock)
    def update_stock(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        threshold = get_settings().low_stock_threshold
        product.set_stock(command.quantity, threshold)
        repo.add(product)

        logger.info("stock_updated", product_id=str(product.id), stock_quantity=command.quantity)
        if command.quantity <= threshold:
            logger.warning("stock_low", product_id=str(product.id), stock_quantity=command.quantity)


def low_stock_products() -> list:
    return current_domain.repository_for(Product).low_stock(get_settings().low_stock_threshold)
