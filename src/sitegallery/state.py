"""Application state container.

AppState is created once at server startup (inside the FastMCP lifespan context
manager) and injected into every tool handler via the MCP Context object.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from sitegallery.config import Settings
    from sitegallery.protocols import DocumentStoreProtocol
    from sitegallery.service import WebsiteService


@dataclass
class AppState:
    """Holds all shared runtime state. Passed to every tool handler."""

    settings: Settings
    store: DocumentStoreProtocol
    service: WebsiteService
