"""FastAPI endpoints for the authenticated user's shopping cart."""

from fastapi import APIRouter, Depends
from protean.utils.globals import current_domain
from pydantic import BaseModel, Field

from storefront.cart.cart import ShoppingCart
from storefront.cart.items import AddToCart, ClearCart, RemoveCartItem, UpdateCartItem
from storefront.cart.pricing import cart_total, priced_lines
from storefront.identity.user import User
from storefront.web.envelope import ApiResponse, ok
from storefront.web.security import get_current_user

router = APIRouter(prefix="/api/cart", tags=["cart"])


class AddToCartRequest(BaseModel):
    model_config = {
        "json_schema_extra": {
            "examples": [{"product_id": "8b0e9d6a-7f1c-4a52-b3a4-2f9c1d7e5b60", "quantity": 2}],
        }
    }

    product_id: str
    quantity: int = Field(1, ge=1)


class UpdateCartItemRequest(BaseModel):
    quantity: int = Field(..., ge=1)


class CartItemResponse(BaseModel):
    id: str
    product_id: str
    product_name: str
    price: float
    quantity: int
    total: float
    image_url: str | None = None


def _cart_items(user: User) -> list[CartItemResponse]:
    cart = current_domain.repository_for(ShoppingCart).for_user(user.id)
    return [
        CartItemResponse(
            id=line.item_id,
            product_id=str(line.product.id),
            product_name=line.product.name,
            price=line.unit_price,
            quantity=line.quantity,
            total=line.total,
            image_url=line.product.image_url,
        )
        for line in priced_lines(cart)
    ]


@router.get("", response_model=ApiResponse[list[CartItemResponse]])
async def get_cart(user: User = Depends(get_current_user)):
    return ok(_cart_items(user))


@router.get("/total", response_model=ApiResponse[float])
async def get_cart_total(user: User = Depends(get_current_user)):
    cart = current_domain.repository_for(ShoppingCart).for_user(user.id)
    return ok(cart_total(cart))


@router.post("/items", response_model=ApiResponse[list[CartItemResponse]])
async def add_to_cart(body: AddToCartRequest, user: User = Depends(get_current_user)):
    command = AddToCart(user_id=str(user.id), product_id=body.product_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return ok(_cart_items(user), "Item added to cart")


@router.put("/items/{item_id}", response_model=ApiResponse[list[CartItemResponse]])
async def update_cart_item(item_id: str, body: UpdateCartItemRequest, user: User = Depends(get_current_user)):
    command = UpdateCartItem(user_id=str(user.id), item_id=item_id, quantity=body.quantity)
    current_domain.process(command, asynchronous=False)
    return ok(_cart_items(user), "Cart item updated")


@router.delete("/items/{item_id}", response_model=ApiResponse[list[CartItemResponse]])
async def remove_cart_item(item_id: str, user: User = Depends(get_current_user)):
    current_domain.process(RemoveCartItem(user_id=str(user.id), item_id=item_id), asynchronous=False)
    return ok(_cart_items(user), "Item removed from cart")


@router.delete("", response_model=ApiResponse[bool])
async def clear_cart(user: User = Depends(get_current_user)):
    current_domain.process(ClearCart(user_id=str(user.id)), asynchronous=False)
    return ok(True, "Cart cleared")
