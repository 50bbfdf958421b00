from __future__ import annotations

from sitegallery.models.store import RawDocument
from sitegallery.models.tools import (
    GetAdjacentWebsitesInput,
    GetWebsiteInput,
    ListWebsitesInput,
)
from sitegallery.models.website import (
    SORT_FIELDS,
    AdjacentWebsites,
    CategoryCount,
    OrderField,
    PageCursor,
    SortBy,
    Website,
    WebsiteDetail,
    WebsiteForSitemap,
    WebsitePage,
)

__all__ = [
    # store
    "RawDocument",
    # website
    "SORT_FIELDS",
    "SortBy",
    "OrderField",
    "Website",
    "WebsiteDetail",
    "PageCursor",
    "WebsitePage",
    "AdjacentWebsites",
    "CategoryCount",
    "WebsiteForSitemap",
    # tools
    "ListWebsitesInput",
    "GetWebsiteInput",
    "GetAdjacentWebsitesInput",
]
