"""Raw document payload → Website mapping.

Every field has a default for missing or oddly shaped values, so a malformed
record never raises here. Timestamps are rendered as ISO-8601 UTC strings
with a ``Z`` suffix.
"""

from __future__ import annotations

import math
from collections.abc import Mapping
from datetime import UTC, date, datetime, time
from typing import Any

from sitegallery.models.website import Website, WebsiteDetail


def _iso(dt: datetime) -> str:
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=UTC)
    return dt.astimezone(UTC).isoformat().replace("+00:00", "Z")


def now_iso() -> str:
    return _iso(datetime.now(UTC))


def convert_timestamps(value: Any) -> Any:
    """Recursively replace datetimes with ISO strings.

    Lists, tuples and mappings are walked; ``None`` and every other
    non-timestamp value pass through unchanged.
    """
    if value is None:
        return value
    if isinstance(value, datetime):
        return _iso(value)
    if isinstance(value, date):
        return _iso(datetime.combine(value, time.min))
    if isinstance(value, list | tuple):
        return [convert_timestamps(item) for item in value]
    if isinstance(value, Mapping):
        return {key: convert_timestamps(item) for key, item in value.items()}
    return value


def to_iso(value: Any) -> str:
    """Render a single timestamp-like value, falling back to the current time.

    Accepts datetimes, ``{"seconds": n}`` mappings (epoch seconds) and
    non-empty strings, which are assumed to already be ISO-8601.
    """
    if isinstance(value, datetime | date):
        return convert_timestamps(value)
    if isinstance(value, Mapping):
        seconds = value.get("seconds")
        if (
            isinstance(seconds, int | float)
            and not isinstance(seconds, bool)
            and seconds
            and math.isfinite(seconds)
        ):
            try:
                return _iso(datetime.fromtimestamp(seconds, UTC))
            except (OverflowError, OSError, ValueError):
                pass  # out of datetime range; fall back to now
    if isinstance(value, str) and value:
        return value
    return now_iso()


def _str_or(value: Any, default: str) -> str:
    return value if isinstance(value, str) and value else default


def _str_list(value: Any) -> list[str]:
    if not isinstance(value, list):
        return []
    return [item for item in value if isinstance(item, str)]


def _views(value: Any) -> int:
    if isinstance(value, bool) or not isinstance(value, int | float):
        return 0
    if isinstance(value, float) and not math.isfinite(value):
        return 0
    return max(int(value), 0)


def _social_links(value: Any) -> dict[str, str]:
    if not isinstance(value, Mapping):
        return {}
    return {str(k): v for k, v in value.items() if isinstance(v, str)}


def _website_fields(doc_id: str, data: Mapping[str, Any]) -> dict[str, Any]:
    categories = _str_list(data.get("categories"))
    built_with = data.get("builtWith")
    return {
        "id": doc_id,
        "name": _str_or(data.get("name"), "Untitled"),
        "video_url": _str_or(data.get("videoUrl"), ""),
        "url": _str_or(data.get("url"), "#"),
        "built_with": built_with if isinstance(built_with, str) else None,
        "categories": categories,
        "social_links": _social_links(data.get("socialLinks")),
        "uploaded_at": to_iso(data.get("uploadedAt")),
        "category": categories[0] if categories else "uncategorized",
        "views": _views(data.get("views")),
    }


def map_website(doc_id: str, raw: Mapping[str, Any]) -> Website:
    """Map a list-page record."""
    data = convert_timestamps(raw)
    return Website(**_website_fields(doc_id, data))


def map_website_detail(doc_id: str, raw: Mapping[str, Any]) -> WebsiteDetail:
    """Map a single-record fetch, with the extended default set.

    Unknown payload keys are carried through as extras. A record without a
    ``categories`` list keeps its legacy ``category`` field if it has one.
    """
    data = convert_timestamps(raw)
    fields = _website_fields(doc_id, data)
    if not fields["categories"]:
        fields["category"] = _str_or(data.get("category"), "uncategorized")
    fields.update(
        thumbnail_url=_str_or(data.get("thumbnailUrl"), ""),
        description=_str_or(data.get("description"), ""),
        tags=_str_list(data.get("tags")),
        tech_stack=_str_list(data.get("techStack")),
        created_at=to_iso(data.get("createdAt") or data.get("uploadedAt")),
    )

    declared = set()
    for name, info in WebsiteDetail.model_fields.items():
        declared.add(name)
        if info.alias:
            declared.add(info.alias)
    extras = {key: value for key, value in data.items() if key not in declared}

    return WebsiteDetail.model_validate({**extras, **fields})
