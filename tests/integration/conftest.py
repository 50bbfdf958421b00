"""Integration test fixtures.

Provides a fully wired AppState over the seeded in-memory store. Store,
cache and clock fixtures come from tests/conftest.py.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

import pytest

from sitegallery.config import Settings
from sitegallery.state import AppState

if TYPE_CHECKING:
    from sitegallery.service import WebsiteService
    from sitegallery.store import SqliteDocumentStore


@pytest.fixture()
def app_state(seeded_store: SqliteDocumentStore, service: WebsiteService) -> AppState:
    """AppState wired the way the server lifespan builds it."""
    return AppState(settings=Settings(), store=seeded_store, service=service)
