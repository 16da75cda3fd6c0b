"""FastAPI endpoints for the authenticated user's wishlist."""

from datetime import datetime

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain
from pydantic import BaseModel

from storefront.catalogue.product.product import Product
from storefront.identity.user import User
from storefront.web.envelope import ApiResponse, ok
from storefront.web.security import get_current_user
from storefront.wishlist.wishlist import AddToWishlist, RemoveFromWishlist, WishlistItem

router = APIRouter(prefix="/api/wishlist", tags=["wishlist"])


class WishlistRequest(BaseModel):
    product_id: str


class WishlistItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    price: float
    image_url: str | None = None
    is_available: bool
    created_at: datetime | None = None


def _wishlist(user: User) -> list[WishlistItemResponse]:
    products = current_domain.repository_for(Product)
    entries = []
    for item in current_domain.repository_for(WishlistItem).for_user(user.id):
        product = products.get(item.product_id)
        entries.append(
            WishlistItemResponse(
                id=str(item.id),
                product_id=str(product.id),
                product_name=product.name,
                price=product.effective_price,
                image_url=product.image_url,
                is_available=product.is_available(1),
                created_at=item.created_at,
            )
        )
    return entries


@router.get("", response_model=ApiResponse[list[WishlistItemResponse]])
async def get_wishlist(user: User = Depends(get_current_user)):
    return ok(_wishlist(user))


def _add(product_id: str, user: User):
    current_domain.process(AddToWishlist(user_id=str(user.id), product_id=product_id), asynchronous=False)
    return ok(_wishlist(user), "Product added to wishlist")


@router.post("", status_code=201, response_model=ApiResponse[list[WishlistItemResponse]])
async def add_to_wishlist(body: WishlistRequest, user: User = Depends(get_current_user)):
    return _add(body.product_id, user)


@router.post("/items/{product_id}", status_code=201, response_model=ApiResponse[list[WishlistItemResponse]])
async def add_item_to_wishlist(product_id: str, user: User = Depends(get_current_user)):
    return _add(product_id, user)


@router.delete("/items/{product_id}", response_model=ApiResponse[bool])
@router.delete("/{product_id}", response_model=ApiResponse[bool])
async def remove_from_wishlist(product_id: str, user: User = Depends(get_current_user)):
    current_domain.process(RemoveFromWishlist(user_id=str(user.id), product_id=product_id), asynchronous=False)
    return ok(True, "Product removed from wishlist")
