"""FastAPI endpoints for categories, tags and products."""

import json
from datetime import datetime
from typing import Annotated

from fastapi import APIRouter, Depends, Query
from protean.utils.globals import current_domain
from pydantic import BaseModel, Field, model_validator

from storefront.catalogue.category.category import Category
from storefront.catalogue.category.management import CreateCategory, DeleteCategory, UpdateCategory
from storefront.catalogue.product.management import CreateProduct, DeactivateProduct, UpdateProduct
from storefront.catalogue.product.product import Product
from storefront.catalogue.product.search import SearchCriteria, SortField, SortOrder
from storefront.catalogue.tag.tag import CreateTag, Tag
from storefront.identity.user import User
from storefront.web.envelope import ApiResponse, PaginatedResult, ok, paginated
from storefront.web.security import admin_only, admin_or_seller

category_router = APIRouter(prefix="/api/categories", tags=["categories"])
tag_router = APIRouter(prefix="/api/tags", tags=["tags"])
product_router = APIRouter(prefix="/api/products", tags=["products"])


# --- Schemas ---


class CategoryRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"name": "Laptops", "description": "Portable computers", "parent_category_id": None}]
        }
    }

    name: str = Field(..., min_length=1, max_length=100)
    description: str | None = None
    parent_category_id: str | None = None


class CategorySummary(BaseModel):
    id: str
    name: str
    description: str | None = None
    parent_category_id: str | None = None


class CategoryResponse(CategorySummary):
    subcategories: list[CategorySummary] = []


class TagRequest(BaseModel):
    name: str = Field(..., min_length=1, max_length=50)


class TagResponse(BaseModel):
    id: str
    name: str


class ProductFields(BaseModel):
    name: str = Field(..., min_length=1, max_length=200)
    description: str | None = None
    price: float = Field(..., gt=0)
    sale_price: float | None = Field(None, gt=0)
    stock_quantity: int = Field(0, ge=0)
    image_url: str | None = Field(None, max_length=500)
    images: list[str] = []
    category_id: str
    tag_ids: list[str] = []


class ProductRequest(ProductFields):
    model_config = {
        "json_schema_extra": {
            "examples": [
                {
                    "name": "Ultrabook 14",
                    "description": "A light 14-inch laptop",
                    "sku": "UB-14-2024",
                    "price": 1199.0,
                    "sale_price": 999.0,
                    "stock_quantity": 25,
                    "image_url": "https://cdn.example.com/ub14.jpg",
                    "images": ["https://cdn.example.com/ub14-side.jpg"],
                    "category_id": "c5d1c7f2-4d8b-4a57-9b7e-3c4f7a0f1e21",
                    "tag_ids": [],
                }
            ]
        }
    }

    sku: str = Field(..., min_length=1, max_length=50)


class UpdateProductRequest(ProductFields):
    is_active: bool = True


class ProductResponse(BaseModel):
    id: str
    name: str
    description: str | None = None
    sku: str
    price: float
    sale_price: float | None = None
    effective_price: float
    stock_quantity: int
    is_active: bool
    image_url: str | None = None
    images: list[str] = []
    average_rating: float
    review_count: int
    category_id: str
    category_name: str | None = None
    tags: list[str] = []
    created_at: datetime | None = None


class ProductSearchParams(BaseModel):
    search: str | None = None
    category_id: str | None = None
    min_price: float | None = Field(None, ge=0)
    max_price: float | None = Field(None, ge=0)
    min_rating: float | None = Field(None, ge=0, le=5)
    tag_ids: list[str] = []
    sort_by: SortField = SortField.NAME
    sort_order: SortOrder = SortOrder.ASC
    page: int = Field(1, ge=1)
    page_size: int = Field(10, ge=1, le=100)

    @model_validator(mode="after")
    def price_range_must_be_ordered(self):
        if self.min_price is not None and self.max_price is not None and self.min_price > self.max_price:
            raise ValueError("min_price cannot exceed max_price")
        return self


# --- Mapping ---


def _category_summary(category: Category) -> CategorySummary:
    return CategorySummary(
        id=str(category.id),
        name=category.name,
        description=category.description,
        parent_category_id=str(category.parent_category_id) if category.parent_category_id else None,
    )


def _category_response(category: Category) -> CategoryResponse:
    children = current_domain.repository_for(Category).children_of(category.id)
    return CategoryResponse(
        **_category_summary(category).model_dump(),
        subcategories=[_category_summary(child) for child in children],
    )


def product_responses(products: list[Product]) -> list[ProductResponse]:
    category_names = current_domain.repository_for(Category).names_by_id()
    tag_names = current_domain.repository_for(Tag).names_by_id()
    return [
        ProductResponse(
            id=str(product.id),
            name=product.name,
            description=product.description,
            sku=product.sku,
            price=product.price,
            sale_price=product.sale_price,
            effective_price=product.effective_price,
            stock_quantity=product.stock_quantity,
            is_active=product.is_active,
            image_url=product.image_url,
            images=product.image_list,
            average_rating=product.average_rating or 0.0,
            review_count=product.review_count or 0,
            category_id=str(product.category_id),
            category_name=category_names.get(str(product.category_id)),
            tags=[tag_names[tag_id] for tag_id in product.tag_ids if tag_id in tag_names],
            created_at=product.created_at,
        )
        for product in products
    ]


def _product_response(product_id: str) -> ProductResponse:
    return product_responses([current_domain.repository_for(Product).get(product_id)])[0]


# --- Category endpoints ---


@category_router.get("", response_model=ApiResponse[list[CategoryResponse]])
async def list_categories():
    roots = current_domain.repository_for(Category).roots()
    return ok([_category_response(category) for category in roots])


@category_router.get("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def get_category(category_id: str):
    return ok(_category_response(current_domain.repository_for(Category).get(category_id)))


@category_router.get("/{category_id}/subcategories", response_model=ApiResponse[list[CategorySummary]])
async def get_subcategories(category_id: str):
    repo = current_domain.repository_for(Category)
    repo.get(category_id)
    return ok([_category_summary(child) for child in repo.children_of(category_id)])


@category_router.post("", status_code=201, response_model=ApiResponse[CategoryResponse])
async def create_category(body: CategoryRequest, user: User = Depends(admin_only)):
    command = CreateCategory(
        name=body.name,
        description=body.description,
        parent_category_id=body.parent_category_id,
    )
    category_id = current_domain.process(command, asynchronous=False)
    category = current_domain.repository_for(Category).get(category_id)
    return ok(_category_response(category), "Category created successfully")


@category_router.put("/{category_id}", response_model=ApiResponse[CategoryResponse])
async def update_category(category_id: str, body: CategoryRequest, user: User = Depends(admin_only)):
    command = UpdateCategory(
        category_id=category_id,
        name=body.name,
        description=body.description,
        parent_category_id=body.parent_category_id,
    )
    current_domain.process(command, asynchronous=False)
    category = current_domain.repository_for(Category).get(category_id)
    return ok(_category_response(category), "Category updated successfully")


@category_router.delete("/{category_id}", response_model=ApiResponse[bool])
async def delete_category(category_id: str, user: User = Depends(admin_only)):
    current_domain.process(DeleteCategory(category_id=category_id), asynchronous=False)
    return ok(True, "Category deleted successfully")


# --- Tag endpoints ---


@tag_router.get("", response_model=ApiResponse[list[TagResponse]])
async def list_tags():
    tags = current_domain.repository_for(Tag).everything()
    return ok([TagResponse(id=str(tag.id), name=tag.name) for tag in tags])


@tag_router.post("", status_code=201, response_model=ApiResponse[TagResponse])
async def create_tag(body: TagRequest, user: User = Depends(admin_only)):
    tag_id = current_domain.process(CreateTag(name=body.name), asynchronous=False)
    tag = current_domain.repository_for(Tag).get(tag_id)
    return ok(TagResponse(id=str(tag.id), name=tag.name), "Tag created successfully")


# --- Product endpoints ---


@product_router.get("", response_model=ApiResponse[PaginatedResult[ProductResponse]])
async def search_products(params: Annotated[ProductSearchParams, Query()]):
    criteria = SearchCriteria(
        search=params.search,
        category_id=params.category_id,
        min_price=params.min_price,
        max_price=params.max_price,
        min_rating=params.min_rating,
        tag_ids=params.tag_ids,
        sort_by=params.sort_by,
        sort_order=params.sort_order,
        page=params.page,
        page_size=params.page_size,
    )
    products, total_count = current_domain.repository_for(Product).search(criteria)
    return ok(paginated(product_responses(products), total_count, params.page, params.page_size))


@product_router.get("/featured", response_model=ApiResponse[list[ProductResponse]])
async def featured_products():
    return ok(product_responses(current_domain.repository_for(Product).featured()))


@product_router.get("/{product_id}", response_model=ApiResponse[ProductResponse])
async def get_product(product_id: str):
    return ok(_product_response(product_id))


@product_router.get("/{product_id}/related", response_model=ApiResponse[list[ProductResponse]])
async def related_products(product_id: str):
    repo = current_domain.repository_for(Product)
    return ok(product_responses(repo.related_to(repo.get(product_id))))


@product_router.post("", status_code=201, response_model=ApiResponse[ProductResponse])
async def create_product(body: ProductRequest, user: User = Depends(admin_or_seller)):
    command = CreateProduct(
        name=body.name,
        description=body.description,
        sku=body.sku,
        price=body.price,
        sale_price=body.sale_price,
        stock_quantity=body.stock_quantity,
        image_url=body.image_url,
        images=json.dumps(body.images),
        category_id=body.category_id,
        tag_ids=json.dumps(body.tag_ids),
    )
    product_id = current_domain.process(command, asynchronous=False)
    return ok(_product_response(product_id), "Product created successfully")


@product_router.put("/{product_id}", response_model=ApiResponse[ProductResponse])
async def update_product(product_id: str, body: UpdateProductRequest, user: User = Depends(admin_or_seller)):
    command = UpdateProduct(
        product_id=product_id,
        name=body.name,
        description=body.description,
        price=body.price,
        sale_price=body.sale_price,
        stock_quantity=body.stock_quantity,
        image_url=body.image_url,
        images=json.dumps(body.images),
        category_id=body.category_id,
        tag_ids=json.dumps(body.tag_ids),
        is_active=body.is_active,
    )
    current_domain.process(command, asynchronous=False)
    return ok(_product_response(product_id), "Product updated successfully")


@product_router.delete("/{product_id}", response_model=ApiResponse[bool])
async def delete_product(product_id: str, user: User = Depends(admin_or_seller)):
    current_domain.process(DeactivateProduct(product_id=product_id), asynchronous=False)
    return ok(True, "Product deleted successfully")
