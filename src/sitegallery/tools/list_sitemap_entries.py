"""Tool handler for list_sitemap_entries.

No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from sitegallery.state import AppState


async def handle(state: AppState) -> dict:
    """Handle a list_sitemap_entries tool call."""
    log = structlog.get_logger().bind(tool="list_sitemap_entries")
    entries = await state.service.get_all_websites_for_sitemap()
    log.info("sitemap_complete", count=len(entries))
    return {"websites": [e.model_dump(mode="json", by_alias=True) for e in entries]}
