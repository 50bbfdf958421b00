"""Tool handler for list_websites.

Receives AppState, delegates to WebsiteService, and returns a structured
dict. No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

import structlog

from sitegallery.errors import ErrorCode, GalleryError
from sitegallery.models.tools import ListWebsitesInput

if TYPE_CHECKING:
    from sitegallery.state import AppState


async def handle(
    sort_by: str,
    limit: int | None,
    cursor: dict[str, Any] | None,
    category: str | None,
    state: AppState,
) -> dict:
    """Handle a list_websites tool call."""
    log = structlog.get_logger().bind(tool="list_websites", sort_by=sort_by, category=category)
    log.info("handler_called")

    try:
        validated = ListWebsitesInput(
            sort_by=sort_by, limit=limit, cursor=cursor, category=category
        )
    except ValueError as exc:
        raise GalleryError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=(
                "sort_by must be 'latest' or 'popular', limit between 1 and 500, "
                "and cursor the lastCursor object of a previous page."
            ),
            recoverable=False,
        ) from exc

    page = await state.service.get_websites(
        sort_by=validated.sort_by,
        limit=validated.limit,
        cursor=validated.cursor,
        category=validated.category,
    )
    log.info("list_complete", count=len(page.websites), has_more=page.last_cursor is not None)
    return page.model_dump(mode="json", by_alias=True)
