"""Tool handlers for get_website and get_adjacent_websites.

Receives AppState, delegates to WebsiteService, and returns a structured
dict. No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

from sitegallery.errors import ErrorCode, GalleryError
from sitegallery.models.tools import GetAdjacentWebsitesInput, GetWebsiteInput

if TYPE_CHECKING:
    from sitegallery.state import AppState

_ID_SUGGESTION = "Provide a non-empty website ID without '/' (max 200 chars)."


async def handle(website_id: str, state: AppState) -> dict:
    """Handle a get_website tool call."""
    log = structlog.get_logger().bind(tool="get_website", website_id=website_id)
    log.info("handler_called")

    try:
        validated = GetWebsiteInput(website_id=website_id)
    except ValueError as exc:
        raise GalleryError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=_ID_SUGGESTION,
            recoverable=False,
        ) from exc

    # WEBSITE_NOT_FOUND and STORE_UNAVAILABLE propagate to server.py
    website = await state.service.get_website_by_id(validated.website_id)
    return website.model_dump(mode="json", by_alias=True)


async def handle_adjacent(website_id: str, sort_by: str, state: AppState) -> dict:
    """Handle a get_adjacent_websites tool call."""
    log = structlog.get_logger().bind(tool="get_adjacent_websites", website_id=website_id)
    log.info("handler_called")

    try:
        validated = GetAdjacentWebsitesInput(website_id=website_id, sort_by=sort_by)
    except ValueError as exc:
        raise GalleryError(
            code=ErrorCode.INVALID_INPUT,
            message=str(exc),
            suggestion=_ID_SUGGESTION + " sort_by must be 'latest' or 'popular'.",
            recoverable=False,
        ) from exc

    adjacent = await state.service.get_adjacent_websites(
        validated.website_id, validated.sort_by
    )
    return adjacent.model_dump(mode="json", by_alias=True)
