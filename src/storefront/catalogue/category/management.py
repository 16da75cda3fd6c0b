"""Category management: commands and handlers."""

from protean import handle
from protean.exceptions import ObjectNotFoundError, ValidationError
from protean.fields import Identifier, String, Text
from protean.utils.globals import current_domain

from storefront.catalogue.category.category import Category
from storefront.catalogue.product.product import Product
from storefront.domain import storefront


@storefront.command(part_of="Category")
class CreateCategory:
    name = String(required=True, max_length=100)
    description = Text()
    parent_category_id = Identifier()


@storefront.command(part_of="Category")
class UpdateCategory:
    category_id = Identifier(required=True)
    name = String(required=True, max_length=100)
    description = Text()
    parent_category_id = Identifier()


@storefront.command(part_of="Category")
class DeleteCategory:
    category_id = Identifier(required=True)


def _ensure_parent_exists(repo, parent_category_id):
    try:
        return repo.get(parent_category_id)
    except ObjectNotFoundError as exc:
        raise ValidationError({"parent_category_id": ["Parent category does not exist"]}) from exc


@storefront.command_handler(part_of=Category)
class ManageCategoryHandler:
    @handle(CreateCategory)
    def create_category(self, command):
        repo = current_domain.repository_for(Category)
        if command.parent_category_id:
            _ensure_parent_exists(repo, command.parent_category_id)

        category = Category.create(
            name=command.name,
            description=command.description,
            parent_category_id=command.parent_category_id,
        )
        repo.add(category)
        return str(category.id)

    @handle(UpdateCategory)
    def update_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        # Walk up from the new parent; meeting this category again means a cycle
        ancestor_id = command.parent_category_id
        while ancestor_id:
            if str(ancestor_id) == str(category.id):
                raise ValidationError({"parent_category_id": ["A category cannot be moved beneath itself"]})
            ancestor_id = _ensure_parent_exists(repo, ancestor_id).parent_category_id

        category.update(
            name=command.name,
            description=command.description,
            parent_category_id=command.parent_category_id,
        )
        repo.add(category)

    @handle(DeleteCategory)
    def delete_category(self, command):
        repo = current_domain.repository_for(Category)
        category = repo.get(command.category_id)

        if repo.children_of(category.id):
            raise ValidationError({"category": ["Category has subcategories and cannot be deleted"]})
        if current_domain.repository_for(Product).in_category(category.id):
            raise ValidationError({"category": ["Category has products and cannot be deleted"]})

        repo._dao.delete(category)
