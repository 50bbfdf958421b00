"""MCP server entrypoint.

Responsibilities (and nothing more):
- Configure structlog
- Create AppState via the FastMCP lifespan context manager
- Register tools
- Start the stdio transport
"""

from __future__ import annotations

import json
import logging
import sys
from contextlib import asynccontextmanager
from pathlib import Path
from typing import TYPE_CHECKING, Any

import aiosqlite
import structlog
from mcp.server.fastmcp import Context, FastMCP
from mcp.types import CallToolResult, TextContent

import sitegallery.tools.get_category_counts as t_counts
import sitegallery.tools.get_website as t_website
import sitegallery.tools.list_categories as t_categories
import sitegallery.tools.list_sitemap_entries as t_sitemap
import sitegallery.tools.list_websites as t_list
from sitegallery import __version__
from sitegallery.cache import TTLCache
from sitegallery.config import Settings
from sitegallery.errors import GalleryError
from sitegallery.service import WebsiteService
from sitegallery.state import AppState
from sitegallery.store import SqliteDocumentStore

if TYPE_CHECKING:
    from collections.abc import AsyncGenerator, Awaitable

log = structlog.get_logger()


# ---------------------------------------------------------------------------
# Logging setup
# ---------------------------------------------------------------------------


def _setup_logging(settings: Settings) -> None:
    """Configure structlog. Called once at startup before any log statements."""
    log_level = logging.getLevelNamesMapping()[settings.logging.level]

    shared_processors: list[structlog.types.Processor] = [
        structlog.contextvars.merge_contextvars,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.processors.TimeStamper(fmt="iso"),
    ]

    if settings.logging.format == "json":
        processors = [*shared_processors, structlog.processors.JSONRenderer()]
    else:
        processors = [*shared_processors, structlog.dev.ConsoleRenderer()]

    structlog.configure(
        processors=processors,
        wrapper_class=structlog.make_filtering_bound_logger(log_level),
        context_class=dict,
        # Logs go to stderr, stdout is reserved for the MCP JSON-RPC stream
        logger_factory=structlog.PrintLoggerFactory(file=sys.stderr),
        cache_logger_on_first_use=True,
    )


# ---------------------------------------------------------------------------
# Lifespan
# ---------------------------------------------------------------------------


@asynccontextmanager
async def lifespan(server: FastMCP) -> AsyncGenerator[AppState, None]:
    """Create and tear down all shared resources for the server's lifetime."""
    settings = Settings()
    _setup_logging(settings)

    log.info("server_starting", version=__version__, collection=settings.store.collection)

    db_path = Path(settings.store.db_path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)
    db = await aiosqlite.connect(str(db_path))
    store = SqliteDocumentStore(db, settings.store.collection)
    await store.init_db()

    service = WebsiteService(
        store,
        TTLCache(settings.cache.ttl_seconds),
        adjacency_window=settings.gallery.adjacency_window,
    )
    state = AppState(settings=settings, store=store, service=service)

    log.info("server_started", version=__version__, db_path=str(db_path))

    try:
        yield state
    finally:
        await service.aclose()
        await db.close()
        log.info("server_stopping")


# ---------------------------------------------------------------------------
# FastMCP instance and tool registration
# ---------------------------------------------------------------------------

mcp = FastMCP("sitegallery", lifespan=lifespan)
# FastMCP has no version kwarg; setting it on the underlying Server makes the
# MCP initialize handshake report our version, not the SDK's.
mcp._mcp_server.version = __version__  # pyright: ignore[reportPrivateUsage]


def _serialise_tool_error(error: GalleryError) -> CallToolResult:
    """Convert a GalleryError to the MCP tool error result envelope."""
    return CallToolResult(
        content=[TextContent(type="text", text=json.dumps(error.to_dict()))],
        isError=True,
    )


async def _run_tool(tool: str, call: Awaitable[dict]) -> object:
    try:
        return await call
    except GalleryError as exc:
        log.warning(
            "tool_error",
            tool=tool,
            code=exc.code,
            message=exc.message,
            recoverable=exc.recoverable,
        )
        return _serialise_tool_error(exc)
    except Exception:
        log.error("tool_unexpected_error", tool=tool, exc_info=True)
        raise


@mcp.tool()
async def list_websites(
    ctx: Context,
    sort_by: str = "latest",
    limit: int | None = None,
    cursor: dict[str, Any] | None = None,
    category: str | None = None,
) -> object:
    """List gallery websites, newest ("latest") or most viewed ("popular") first.

    Pass the returned lastCursor as cursor to fetch the next page. With a
    category filter a page may hold fewer than limit websites.
    """
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool(
        "list_websites", t_list.handle(sort_by, limit, cursor, category, state)
    )


@mcp.tool()
async def get_website(website_id: str, ctx: Context) -> object:
    """Fetch a single website with its full details. Counts as a view."""
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("get_website", t_website.handle(website_id, state))


@mcp.tool()
async def get_adjacent_websites(website_id: str, ctx: Context, sort_by: str = "latest") -> object:
    """Return the previous and next websites around website_id in the given order."""
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool(
        "get_adjacent_websites", t_website.handle_adjacent(website_id, sort_by, state)
    )


@mcp.tool()
async def get_category_counts(ctx: Context) -> object:
    """Count websites in every canonical category."""
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("get_category_counts", t_counts.handle(state))


@mcp.tool()
async def list_categories() -> object:
    """List the canonical category names."""
    return await _run_tool("list_categories", t_categories.handle())


@mcp.tool()
async def list_sitemap_entries(ctx: Context) -> object:
    """List every website id with its last-updated timestamp."""
    state: AppState = ctx.request_context.lifespan_context
    return await _run_tool("list_sitemap_entries", t_sitemap.handle(state))


# ---------------------------------------------------------------------------
# Entrypoint
# ---------------------------------------------------------------------------


def main() -> None:
    mcp.run()


if __name__ == "__main__":
    main()
