"""
Base Pydantic schemas and common types
"""

from datetime import datetime
from typing import Generic, TypeVar, List

from pydantic import BaseModel, ConfigDict, Field


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        use_enum_values=True,
    )


class TimestampSchema(BaseSchema):
    """Schema with timestamp fields."""

    created_at: datetime = Field(description="Creation timestamp")
    updated_at: datetime = Field(description="Last update timestamp")


class IDSchema(BaseSchema):
    """Schema with ID field."""

    id: int = Field(description="Unique identifier")


class IDTimestampSchema(IDSchema, TimestampSchema):
    """Schema with ID and timestamp fields."""
    pass


# Generic type for paginated responses
T = TypeVar("T")


class PaginatedResponse(BaseSchema, Generic[T]):
    """Generic paginated response schema."""

    items: List[T] = Field(description="List of items")
    total: int = Field(description="Total number of items")
    page: int = Field(description="Current page number", ge=1)
    page_size: int = Field(description="Number of items per page", ge=1, le=100)
    total_pages: int = Field(description="Total number of pages")
    has_next: bool = Field(description="Whether there is a next page")
    has_previous: bool = Field(description="Whether there is a previous page")

    @classmethod
    def build(cls, items: List[T], total: int, page: int, page_size: int) -> "PaginatedResponse[T]":
        """Assemble a page from a slice of items and the total count."""
        total_pages = max(1, -(-total // page_size))
        return cls(
            items=items,
            total=total,
            page=page,
            page_size=page_size,
            total_pages=total_pages,
            has_next=page < total_pages,
            has_previous=page > 1,
        )


class MessageResponse(BaseSchema):
    """Simple message response."""

    message: str = Field(description="Response message")
    success: bool = Field(default=True, description="Operation success status")
