"""
Common response models and utilities.

Generic response wrappers and error schemas.

Dependencies: pydantic
System role: Common API response structures
"""

from typing import Generic, TypeVar

from pydantic import BaseModel, Field

T = TypeVar("T")


class ErrorResponse(BaseModel):
    """Error response schema."""

    detail: str = Field(description="Error message")


class PaginatedResponse(BaseModel, Generic[T]):
    """Generic offset-paginated response wrapper."""

    items: list[T]
    total: int
    limit: int
    offset: int
    has_more: bool = False

    @classmethod
    def build(cls, items: list[T], total: int, limit: int, offset: int) -> "PaginatedResponse[T]":
        """Create a page and derive has_more from total."""
        return cls(
            items=items,
            total=total,
            limit=limit,
            offset=offset,
            has_more=offset + len(items) < total,
        )
