"""The response envelope wrapped around every API payload."""

from datetime import datetime
from typing import Generic, TypeVar

from pydantic import BaseModel, Field

from storefront.shared.clock import utcnow
from storefront.shared.queries import total_pages

T = TypeVar("T")


class ApiResponse(BaseModel, Generic[T]):
    success: bool = True
    message: str = ""
    data: T | None = None
    errors: list[str] = Field(default_factory=list)
    timestamp: datetime = Field(default_factory=utcnow)


class PaginatedResult(BaseModel, Generic[T]):
    items: list[T]
    total_count: int
    page: int
    page_size: int
    total_pages: int
    has_next_page: bool
    has_previous_page: bool


def ok(data=None, message: str = "Success") -> ApiResponse:
    return ApiResponse(success=True, message=message, data=data)


def failure(message: str, errors: list[str] | None = None) -> dict:
    """JSON-ready body for an error response."""
    return ApiResponse(success=False, message=message, errors=errors or [message]).model_dump(mode="json")


def paginated(items: list, total_count: int, page: int, page_size: int) -> PaginatedResult:
    pages = total_pages(total_count, page_size)
    return PaginatedResult(
        items=items,
        total_count=total_count,
        page=page,
        page_size=page_size,
        total_pages=pages,
        has_next_page=page < pages,
        has_previous_page=page > 1,
    )
