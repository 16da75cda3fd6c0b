"""Product management: create, update and retire catalogue items."""

import json

import structlog
from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Boolean, Float, Identifier, Integer, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product
from storefront.catalogue.tag.tag import Tag
from storefront.domain import storefront

logger = structlog.get_logger(__name__)


@storefront.command(part_of="Product")
class CreateProduct:
    name = String(required=True, max_length=200)
    description = Text()
    sku = String(required=True, max_length=50)
    price = Float(required=True)
    sale_price = Float()
    stock_quantity = Integer(default=0)
    image_url = String(max_length=500)
    images = Text()  # JSON array of URLs
    category_id = Identifier(required=True)
    tag_ids = Text()  # JSON array of tag ids


@storefront.command(part_of="Product")
class UpdateProduct:
    product_id = Identifier(required=True)
    name = String(required=True, max_length=200)
    description = Text()
    price = Float(required=True)
    sale_price = Float()
    stock_quantity = Integer(required=True)
    image_url = String(max_length=500)
    images = Text()
    category_id = Identifier(required=True)
    tag_ids = Text()
    is_active = Boolean(default=True)


@storefront.command(part_of="Product")
class DeactivateProduct:
    product_id = Identifier(required=True)


def _validated_category(category_id):
    try:
        current_domain.repository_for(Category).get(category_id)
    except ObjectNotFoundError as exc:
        raise ValidationError({"category_id": ["Category does not exist"]}) from exc
    return category_id


def _validated_tag_ids(raw) -> list[str]:
    tag_ids = json.loads(raw) if raw else []
    known = current_domain.repository_for(Tag).names_by_id()
    unknown = [tag_id for tag_id in tag_ids if str(tag_id) not in known]
    if unknown:
        raise ValidationError({"tag_ids": [f"Unknown tag: {tag_id}" for tag_id in unknown]})
    return tag_ids


@storefront.command_handler(part_of=Product)
class ManageProductHandler:
    @handle(CreateProduct)
    def create_product(self, command):
        repo = current_domain.repository_for(Product)
        if repo.find_by_sku(command.sku) is not None:
            raise ValidationError({"sku": [f"SKU '{command.sku}' is already in use"]})

        product = Product.create(
            name=command.name,
            sku=command.sku,
            price=command.price,
            category_id=_validated_category(command.category_id),
            description=command.description,
            sale_price=command.sale_price,
            stock_quantity=command.stock_quantity,
            image_url=command.image_url,
            images=json.loads(command.images) if command.images else [],
            tag_ids=_validated_tag_ids(command.tag_ids),
        )
        repo.add(product)
        logger.info("product_created", product_id=str(product.id), sku=product.sku)
        return str(product.id)

    @handle(UpdateProduct)
    def update_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)

        product.update_details(
            name=command.name,
            description=command.description,
            price=command.price,
            sale_price=command.sale_price,
            stock_quantity=command.stock_quantity,
            image_url=command.image_url,
            images=json.loads(command.images) if command.images else [],
            category_id=_validated_category(command.category_id),
            tag_ids=_validated_tag_ids(command.tag_ids),
            is_active=command.is_active,
        )
        repo.add(product)

    @handle(DeactivateProduct)
    def deactivate_product(self, command):
        repo = current_domain.repository_for(Product)
        product = repo.get(command.product_id)
        product.deactivate()
        repo.add(product)
        logger.info("product_deactivated", product_id=str(product.id))
