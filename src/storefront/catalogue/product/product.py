"""Product aggregate: a sellable catalogue item with its own stock level.

Stock lives directly on the product: checkout reserves it, cancellation
releases it and administrators overwrite it. Rating figures are derived from
approved reviews and are only ever written by the review handlers.
"""

import json

from protean import atomic_change, invariant
from protean.exceptions import ValidationError
from protean.fields import Boolean, DateTime, Float, HasMany, Identifier, Integer, String, Text

from storefront.catalogue.product.events import StockRunningLow
from storefront.catalogue.product.search import SearchCriteria
from storefront.domain import storefront
from storefront.shared.clock import utcnow
from storefront.shared.queries import fetch_all, fetch_page, paginate

_UNSET = object()


@storefront.entity(part_of="Product")
class ProductTag:
    tag_id = Identifier(required=True)


@storefront.aggregate
class Product:
    name = String(required=True, max_length=200)
    description = Text()
    sku = String(required=True, max_length=50, unique=True)
    price = Float(required=True, min_value=0.0)
    sale_price = Float(min_value=0.0)
    stock_quantity = Integer(default=0, min_value=0)
    is_active = Boolean(default=True)
    image_url = String(max_length=500)
    images = Text()  # JSON array of URLs
    average_rating = Float(default=0.0, min_value=0.0, max_value=5.0)
    review_count = Integer(default=0, min_value=0)
    category_id = Identifier(required=True)
    tags = HasMany(ProductTag)
    created_at = DateTime(default=utcnow)
    updated_at = DateTime(default=utcnow)

    @invariant.post
    def price_must_be_positive(self):
        if self.price is not None and self.price <= 0:
            raise ValidationError({"price": ["Price must be greater than zero"]})

    @invariant.post
    def sale_price_must_undercut_price(self):
        if self.sale_price is not None and self.price is not None and self.sale_price >= self.price:
            raise ValidationError({"sale_price": ["Sale price must be lower than the regular price"]})

    # -------------------------------------------------------------------
    # Factory
    # -------------------------------------------------------------------
    @classmethod
    def create(
        cls,
        name,
        sku,
        price,
        category_id,
        description=None,
        sale_price=None,
        stock_quantity=0,
        image_url=None,
        images=None,
        tag_ids=None,
    ):
        now = utcnow()
        product = cls(
            name=name,
            sku=sku,
            price=price,
            category_id=category_id,
            description=description,
            sale_price=sale_price,
            stock_quantity=stock_quantity,
            image_url=image_url,
            images=json.dumps(images or []),
            created_at=now,
            updated_at=now,
        )
        product.set_tags(tag_ids or [])
        return product

    # -------------------------------------------------------------------
    # Derived values
    # -------------------------------------------------------------------
    @property
    def effective_price(self) -> float:
        return self.sale_price if self.sale_price is not None else self.price

    @property
    def image_list(self) -> list[str]:
        return json.loads(self.images) if self.images else []

    @property
    def tag_ids(self) -> list[str]:
        return [str(tag.tag_id) for tag in self.tags]

    def is_available(self, quantity: int) -> bool:
        return bool(self.is_active) and self.stock_quantity >= quantity

    # -------------------------------------------------------------------
    # Details
    # -------------------------------------------------------------------
    def update_details(
        self,
        name=_UNSET,
        description=_UNSET,
        price=_UNSET,
        sale_price=_UNSET,
        stock_quantity=_UNSET,
        image_url=_UNSET,
        images=_UNSET,
        category_id=_UNSET,
        tag_ids=_UNSET,
        is_active=_UNSET,
    ):
        with atomic_change(self):
            for field_name, value in (
                ("name", name),
                ("description", description),
                ("price", price),
                ("sale_price", sale_price),
                ("stock_quantity", stock_quantity),
                ("image_url", image_url),
                ("category_id", category_id),
                ("is_active", is_active),
            ):
                if value is not _UNSET:
                    setattr(self, field_name, value)

            if images is not _UNSET:
                self.images = json.dumps(images or [])
            if tag_ids is not _UNSET:
                self.set_tags(tag_ids or [])

            self.updated_at = utcnow()

    def set_tags(self, tag_ids):
        for tag in list(self.tags):
            self.remove_tags(tag)
        for tag_id in dict.fromkeys(str(tag_id) for tag_id in tag_ids):
            self.add_tags(ProductTag(tag_id=tag_id))

    def deactivate(self):
        self.is_active = False
        self.updated_at = utcnow()

    # -------------------------------------------------------------------
    # Inventory
    # -------------------------------------------------------------------
    def reserve_stock(self, quantity: int):
        if self.stock_quantity < quantity:
            raise ValidationError({"stock_quantity": [f"Insufficient stock for product {self.name}"]})
        self.stock_quantity -= quantity
        self.updated_at = utcnow()

    def release_stock(self, quantity: int):
        self.stock_quantity += quantity
        self.updated_at = utcnow()

    def set_stock(self, quantity: int, low_stock_threshold: int):
        if quantity < 0:
            raise ValidationError({"stock_quantity": ["Stock quantity cannot be negative"]})

        self.stock_quantity = quantity
        self.updated_at = utcnow()

        if quantity <= low_stock_threshold:
            self.raise_(
                StockRunningLow(
                    product_id=self.id,
                    name=self.name,
                    stock_quantity=quantity,
                    threshold=low_stock_threshold,
                )
            )

    # -------------------------------------------------------------------
    # Ratings
    # -------------------------------------------------------------------
    def record_rating(self, average_rating: float, review_count: int):
        self.average_rating = round(average_rating, 2)
        self.review_count = review_count


@storefront.repository(part_of=Product)
class ProductRepository:
    def find_by_sku(self, sku: str):
        return self._dao.query.filter(sku=sku).all().first

    def in_category(self, category_id) -> list:
        return fetch_all(self._dao.query.filter(category_id=str(category_id)))

    def search(self, criteria: SearchCriteria) -> tuple[list, int]:
        """Filter, sort and page the active catalogue; returns ``(page, total_count)``."""
        queryset = criteria.apply(self._dao.query)
        if criteria.tag_ids:
            # Tags live on child records, so they are matched after the query
            tagged = [product for product in fetch_all(queryset) if criteria.has_tags(product)]
            return paginate(tagged, criteria.page, criteria.page_size)

        return fetch_page(queryset, criteria.page, criteria.page_size)

    def featured(self, min_rating: float = 4.0, limit: int = 10) -> list:
        queryset = self._dao.query.filter(is_active=True, average_rating__gte=min_rating)
        return queryset.order_by("-average_rating").limit(limit).all().items

    def related_to(self, product, limit: int = 5) -> list:
        queryset = self._dao.query.filter(is_active=True, category_id=str(product.category_id))
        return queryset.exclude(id=str(product.id)).limit(limit).all().items

    def low_stock(self, threshold: int) -> list:
        queryset = self._dao.query.filter(is_active=True, stock_quantity__lte=threshold)
        return fetch_all(queryset.order_by("stock_quantity"))
