"""Pagination models."""

from pydantic import BaseModel, Field

DEFAULT_OFFSET = 0
DEFAULT_LIMIT = 20


class ListOption(BaseModel):
    """Offset/limit options for a paged query."""

    offset: int = Field(default=DEFAULT_OFFSET, ge=0, description="Number of documents to skip")
    limit: int = Field(default=DEFAULT_LIMIT, ge=0, description="Maximum number of documents to return")
    show_total: bool = Field(default=False, description="Whether to count all matching documents")


class Paginate(BaseModel):
    """Page metadata returned next to the documents of a paged query."""

    offset: int
    limit: int
    total: int = 0
