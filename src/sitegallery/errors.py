from __future__ import annotations

from enum import StrEnum


class ErrorCode(StrEnum):
    WEBSITE_NOT_FOUND = "WEBSITE_NOT_FOUND"
    STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
    INVALID_INPUT = "INVALID_INPUT"


class GalleryError(Exception):
    """Raised for all expected failure conditions in the gallery layer.

    Only ``get_website_by_id`` lets this reach its caller; list, count and
    increment operations absorb it and return an empty result. The MCP layer
    serialises it into a structured tool error.
    """

    def __init__(
        self,
        code: ErrorCode,
        message: str,
        suggestion: str,
        recoverable: bool = False,
    ) -> None:
        super().__init__(message)
        self.code = code
        self.message = message
        self.suggestion = suggestion
        self.recoverable = recoverable

    def to_dict(self) -> dict:
        return {
            "error": {
                "code": self.code,
                "message": self.message,
                "suggestion": self.suggestion,
                "recoverable": self.recoverable,
            }
        }


def website_not_found(website_id: str) -> GalleryError:
    return GalleryError(
        code=ErrorCode.WEBSITE_NOT_FOUND,
        message=f"Website '{website_id}' not found.",
        suggestion="Call list_websites to find a valid website ID.",
        recoverable=False,
    )
