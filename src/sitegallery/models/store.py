from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any


@dataclass
class RawDocument:
    """A record as returned by the document store: id plus untyped payload."""

    id: str
    data: dict[str, Any] = field(default_factory=dict)
