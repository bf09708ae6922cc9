"""
Base schema configuration and common schemas.
"""

from typing import Literal
from pydantic import BaseModel, ConfigDict, Field


SortOrder = Literal["asc", "desc"]


class BaseSchema(BaseModel):
    """Base schema with common configuration."""

    model_config = ConfigDict(
        from_attributes=True,
        populate_by_name=True,
        str_strip_whitespace=True,
    )


class PaginatedResponse(BaseSchema):
    """Pagination envelope shared by list responses."""

    total: int
    page: int
    per_page: int
    pages: int

    @staticmethod
    def page_count(total: int, per_page: int) -> int:
        return (total + per_page - 1) // per_page if per_page > 0 else 0


class BulkImportResult(BaseSchema):
    """Outcome of a bulk import."""

    count: int
    success: bool = True
    errors: list[str] = Field(default_factory=list)


class MessageResponse(BaseSchema):
    """Simple message response."""

    message: str
    success: bool = True
