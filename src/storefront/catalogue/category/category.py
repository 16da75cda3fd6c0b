"""Category aggregate: a self-referencing tree of product groupings."""

from protean import invariant
from protean.exceptions import ValidationError
from protean.fields import DateTime, Identifier, String, Text

from storefront.domain import storefront
from storefront.shared.clock import utcnow
from storefront.shared.queries import fetch_all

_UNSET = object()


@storefront.aggregate
class Category:
    """A grouping of products. Root categories have no parent."""

    name = String(required=True, max_length=100)
    description = Text()
    parent_category_id = Identifier()
    created_at = DateTime(default=utcnow)

    @invariant.post
    def cannot_be_its_own_parent(self):
        if self.parent_category_id and str(self.parent_category_id) == str(self.id):
            raise ValidationError({"parent_category_id": ["A category cannot be its own parent"]})

    @classmethod
    def create(cls, name, description=None, parent_category_id=None):
        return cls(
            name=name,
            description=description,
            parent_category_id=parent_category_id,
            created_at=utcnow(),
        )

    def update(self, name=_UNSET, description=_UNSET, parent_category_id=_UNSET):
        if name is not _UNSET:
            self.name = name
        if description is not _UNSET:
            self.description = description
        if parent_category_id is not _UNSET:
            self.parent_category_id = parent_category_id


@storefront.repository(part_of=Category)
class CategoryRepository:
    def everything(self) -> list:
        return fetch_all(self._dao.query.order_by("name"))

    def roots(self) -> list:
        return [category for category in self.everything() if not category.parent_category_id]

    def children_of(self, category_id) -> list:
        return fetch_all(self._dao.query.filter(parent_category_id=str(category_id)).order_by("name"))

    def names_by_id(self) -> dict[str, str]:
        return {str(category.id): category.name for category in self.everything()}
