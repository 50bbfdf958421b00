"""Tool handler for list_categories. Needs no AppState."""

from __future__ import annotations

from sitegallery.categories import ALL_CATEGORIES


async def handle() -> dict:
    """Handle a list_categories tool call."""
    return {"categories": list(ALL_CATEGORIES)}
