"""Search criteria and ordering rules for the product listing."""

from dataclasses import dataclass, field
from enum import Enum

from protean.utils.query import Q


class SortField(Enum):
    NAME = "name"
    PRICE = "price"
    RATING = "rating"
    CREATED = "created"


class SortOrder(Enum):
    ASC = "asc"
    DESC = "desc"


_SORT_COLUMNS = {
    SortField.NAME: "name",
    SortField.PRICE: "price",
    SortField.RATING: "average_rating",
    SortField.CREATED: "created_at",
}


@dataclass
class SearchCriteria:
    search: str | None = None
    category_id: str | None = None
    min_price: float | None = None
    max_price: float | None = None
    min_rating: float | None = None
    tag_ids: list[str] = field(default_factory=list)
    sort_by: SortField = SortField.NAME
    sort_order: SortOrder = SortOrder.ASC
    page: int = 1
    page_size: int = 10

    @property
    def lookups(self) -> dict:
        """Column lookups for every criterion the database can evaluate on its own."""
        lookups = {"is_active": True}
        if self.category_id:
            lookups["category_id"] = str(self.category_id)
        if self.min_price is not None:
            lookups["price__gte"] = self.min_price
        if self.max_price is not None:
            lookups["price__lte"] = self.max_price
        if self.min_rating is not None:
            lookups["average_rating__gte"] = self.min_rating
        return lookups

    @property
    def ordering(self) -> str:
        column = _SORT_COLUMNS[self.sort_by]
        return f"-{column}" if self.sort_order is SortOrder.DESC else column

    def apply(self, queryset):
        """Narrow and order ``queryset``; tag matching is left to ``has_tags``."""
        if self.search:
            queryset = queryset.filter(Q(name__icontains=self.search) | Q(description__icontains=self.search))
        return queryset.filter(**self.lookups).order_by(self.ordering)

    def has_tags(self, product) -> bool:
        if not self.tag_ids:
            return True
        wanted = {str(tag_id) for tag_id in self.tag_ids}
        return bool(wanted & set(product.tag_ids))
