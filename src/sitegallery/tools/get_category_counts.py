"""Tool handler for get_category_counts.

No MCP or FastMCP imports; server.py handles the MCP wiring.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import structlog

if TYPE_CHECKING:
    from sitegallery.state import AppState


async def handle(state: AppState) -> dict:
    """Handle a get_category_counts tool call."""
    log = structlog.get_logger().bind(tool="get_category_counts")
    counts = await state.service.get_category_counts()
    log.info("counts_complete", categories=len(counts))
    return {"categories": [c.model_dump(mode="json", by_alias=True) for c in counts]}
