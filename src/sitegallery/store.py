"""SQLite-backed document store for the website collection.

Each record is a JSON payload keyed by ``(collection, id)``. Ordered queries
extract the ordering field with ``json_extract``; a record missing the field
sorts as ``0`` (numeric fields) or ``''`` (timestamps). Ties are broken by id
ascending so that ``start_after`` continuation is stable.

Infrastructure errors (``aiosqlite.Error``) are translated to
``GalleryError(STORE_UNAVAILABLE)``. Whether that error reaches a caller is
decided by the service, not here. A payload holding NaN or Infinity is rejected
with ``GalleryError(INVALID_INPUT)`` before it is written.
"""

from __future__ import annotations

import json
import re
import uuid
from datetime import UTC, datetime
from typing import TYPE_CHECKING, Any

import aiosqlite
import structlog

from sitegallery.errors import ErrorCode, GalleryError, website_not_found
from sitegallery.mapper import convert_timestamps
from sitegallery.models.store import RawDocument

if TYPE_CHECKING:
    from collections.abc import Mapping

    from sitegallery.models.website import OrderField, PageCursor

log = structlog.get_logger()

_CREATE_DOCUMENTS_TABLE = """
CREATE TABLE IF NOT EXISTS documents (
    collection  TEXT NOT NULL,
    id          TEXT NOT NULL,
    payload     TEXT NOT NULL DEFAULT '{}',
    created_at  TEXT NOT NULL,
    PRIMARY KEY (collection, id)
)
"""

_FIELD_NAME_RE = re.compile(r"^[A-Za-z_][A-Za-z0-9_]*$")

# Sort value used when a record lacks the ordering field
_ORDER_DEFAULTS: dict[str, Any] = {"views": 0, "uploadedAt": ""}


def _check_field(name: str) -> str:
    if not _FIELD_NAME_RE.match(name):
        raise ValueError(f"Invalid field name: {name!r}")
    return name


def _order_expr(field: str) -> tuple[str, Any]:
    _check_field(field)
    default = _ORDER_DEFAULTS.get(field, "")
    return f"COALESCE(json_extract(payload, '$.{field}'), ?)", default


def _decode(doc_id: str, payload: str) -> RawDocument:
    try:
        data = json.loads(payload)
    except json.JSONDecodeError:
        log.warning("store_payload_undecodable", id=doc_id)
        data = {}
    if not isinstance(data, dict):
        data = {}
    return RawDocument(id=doc_id, data=data)


def _encode(value: Any) -> str:
    # SQLite's JSON functions reject NaN and Infinity, so they never reach a payload
    try:
        return json.dumps(convert_timestamps(value), allow_nan=False)
    except ValueError as exc:
        raise GalleryError(
            code=ErrorCode.INVALID_INPUT,
            message="Record contains a non-finite number (NaN or Infinity).",
            suggestion="Replace NaN or Infinity values with finite numbers or null.",
            recoverable=False,
        ) from exc


def _unavailable(action: str) -> GalleryError:
    return GalleryError(
        code=ErrorCode.STORE_UNAVAILABLE,
        message=f"Document store failed during {action}.",
        suggestion="The gallery store may be temporarily unavailable. Try again later.",
        recoverable=True,
    )


class SqliteDocumentStore:
    """aiosqlite implementation of DocumentStoreProtocol for one collection."""

    def __init__(self, db: aiosqlite.Connection, collection: str = "websites") -> None:
        self._db = db
        self._collection = collection

    async def init_db(self) -> None:
        """Create the documents table and set WAL mode. Called once at startup."""
        await self._db.execute("PRAGMA journal_mode = WAL")
        await self._db.execute(_CREATE_DOCUMENTS_TABLE)
        await self._db.commit()

    async def add(self, data: Mapping[str, Any], *, doc_id: str | None = None) -> str:
        """Insert a record and return its id (generated when not supplied)."""
        doc_id = doc_id or uuid.uuid4().hex
        payload = _encode(dict(data))
        try:
            await self._db.execute(
                "INSERT INTO documents (collection, id, payload, created_at) VALUES (?, ?, ?, ?)",
                (self._collection, doc_id, payload, datetime.now(UTC).isoformat()),
            )
            await self._db.commit()
        except aiosqlite.Error as exc:
            raise _unavailable("add") from exc
        return doc_id

    async def get(self, doc_id: str) -> RawDocument | None:
        try:
            cursor = await self._db.execute(
                "SELECT id, payload FROM documents WHERE collection = ? AND id = ?",
                (self._collection, doc_id),
            )
            row = await cursor.fetchone()
        except aiosqlite.Error as exc:
            raise _unavailable("get") from exc
        if row is None:
            return None
        return _decode(row[0], row[1])

    async def query(
        self,
        order_by: OrderField,
        *,
        start_after: PageCursor | None = None,
        limit: int | None = None,
    ) -> list[RawDocument]:
        """Return records ordered by ``order_by`` descending.

        With ``start_after``, only records strictly after the cursor position
        are returned.
        """
        expr, default = _order_expr(order_by)
        sql = "SELECT id, payload FROM documents WHERE collection = ?"
        params: list[Any] = [self._collection]

        if start_after is not None:
            value = start_after.value if start_after.value is not None else default
            sql += f" AND ({expr} < ? OR ({expr} = ? AND id > ?))"
            params += [default, value, default, value, start_after.id]

        sql += f" ORDER BY {expr} DESC, id ASC"
        params.append(default)

        if limit is not None:
            sql += " LIMIT ?"
            params.append(limit)

        try:
            cursor = await self._db.execute(sql, params)
            rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise _unavailable("query") from exc
        return [_decode(row[0], row[1]) for row in rows]

    async def list_all(self) -> list[RawDocument]:
        try:
            cursor = await self._db.execute(
                "SELECT id, payload FROM documents WHERE collection = ? ORDER BY id",
                (self._collection,),
            )
            rows = await cursor.fetchall()
        except aiosqlite.Error as exc:
            raise _unavailable("list_all") from exc
        return [_decode(row[0], row[1]) for row in rows]

    async def update(
        self,
        doc_id: str,
        *,
        increments: Mapping[str, int] | None = None,
        values: Mapping[str, Any] | None = None,
    ) -> None:
        """Apply numeric increments and field sets in a single statement.

        Raises ``GalleryError(WEBSITE_NOT_FOUND)`` if the record does not exist.
        """
        args: list[str] = []
        params: list[Any] = []
        for field, amount in (increments or {}).items():
            _check_field(field)
            args.append(f"'$.{field}', COALESCE(json_extract(payload, '$.{field}'), 0) + ?")
            params.append(amount)
        for field, value in (values or {}).items():
            _check_field(field)
            args.append(f"'$.{field}', json(?)")
            params.append(_encode(value))
        if not args:
            return

        try:
            cursor = await self._db.execute(
                f"UPDATE documents SET payload = json_set(payload, {', '.join(args)}) "
                "WHERE collection = ? AND id = ?",
                (*params, self._collection, doc_id),
            )
            await self._db.commit()
        except aiosqlite.Error as exc:
            raise _unavailable("update") from exc
        if cursor.rowcount == 0:
            raise website_not_found(doc_id)
