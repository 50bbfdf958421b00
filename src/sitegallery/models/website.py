from __future__ import annotations

from typing import Literal

from pydantic import BaseModel, ConfigDict, Field
from pydantic.alias_generators import to_camel

SortBy = Literal["latest", "popular"]
OrderField = Literal["uploadedAt", "views"]

# Store field each sort mode orders by (descending)
SORT_FIELDS: dict[str, OrderField] = {
    "latest": "uploadedAt",
    "popular": "views",
}


class _CamelModel(BaseModel):
    """Python attribute names, camelCase on the wire."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class Website(_CamelModel):
    """A gallery entry as returned by list operations."""

    id: str
    name: str = "Untitled"
    video_url: str = ""
    url: str = "#"
    built_with: str | None = None
    categories: list[str] = []
    social_links: dict[str, str] = {}  # platform → handle/URL
    uploaded_at: str  # ISO-8601
    category: str = "uncategorized"  # categories[0] when present
    views: int = Field(default=0, ge=0)


class WebsiteDetail(Website):
    """A single gallery entry with the extended field set.

    Payload fields that have no declared attribute are kept as extras so the
    detail view exposes the full record.
    """

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="allow")

    thumbnail_url: str = ""
    description: str = ""
    tags: list[str] = []
    tech_stack: list[str] = []
    created_at: str


class PageCursor(_CamelModel):
    """Continuation token: the last record of a page and its ordering value."""

    id: str
    order_by: OrderField
    value: int | float | str | None = None


class WebsitePage(_CamelModel):
    websites: list[Website] = []
    last_cursor: PageCursor | None = None


class AdjacentWebsites(_CamelModel):
    prev: Website | None = None
    next: Website | None = None


class CategoryCount(_CamelModel):
    name: str
    count: int = Field(default=0, ge=0)


class WebsiteForSitemap(_CamelModel):
    id: str
    updated_at: str
