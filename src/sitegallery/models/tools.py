"""Input models for the MCP tool handlers."""

from __future__ import annotations

from pydantic import BaseModel, Field, field_validator

from sitegallery.models.website import PageCursor, SortBy


class ListWebsitesInput(BaseModel):
    sort_by: SortBy = "latest"
    limit: int | None = Field(default=None, ge=1, le=500)
    cursor: PageCursor | None = None
    category: str | None = Field(default=None, max_length=100)

    @field_validator("category")
    @classmethod
    def blank_category_means_all(cls, v: str | None) -> str | None:
        if v is not None and not v.strip():
            return None
        return v


class GetWebsiteInput(BaseModel):
    website_id: str = Field(min_length=1, max_length=200)

    @field_validator("website_id")
    @classmethod
    def validate_website_id(cls, v: str) -> str:
        v = v.strip()
        if not v or "/" in v:
            raise ValueError(f"Invalid website ID: {v!r}")
        return v


class GetAdjacentWebsitesInput(GetWebsiteInput):
    sort_by: SortBy = "latest"
