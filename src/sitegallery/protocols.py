"""Protocol interfaces for swappable components.

The service and AppState reference these protocols, not the concrete
implementations. This allows:
- Tests to use lightweight in-memory or failing implementations
- Other document store backends to be swapped without changing service code
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any, Protocol

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sitegallery.models.store import RawDocument
    from sitegallery.models.website import OrderField, PageCursor


class CacheProtocol(Protocol):
    """Interface for the read-through cache."""

    def get(self, key: str) -> Any | None: ...

    def set(self, key: str, data: Any) -> None: ...


class DocumentStoreProtocol(Protocol):
    """Interface for the remote website collection.

    Implementations raise ``GalleryError`` for infrastructure failures.
    """

    async def add(self, data: Mapping[str, Any], *, doc_id: str | None = None) -> str: ...

    async def get(self, doc_id: str) -> RawDocument | None: ...

    async def query(
        self,
        order_by: OrderField,
        *,
        start_after: PageCursor | None = None,
        limit: int | None = None,
    ) -> list[RawDocument]: ...

    async def list_all(self) -> list[RawDocument]: ...

    async def update(
        self,
        doc_id: str,
        *,
        increments: Mapping[str, int] | None = None,
        values: Mapping[str, Any] | None = None,
    ) -> None: ...
