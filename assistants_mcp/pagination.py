"""Cursor-based pagination for MCP list methods.

Cursors are base64-encoded JSON objects ``{"index", "total", "timestamp"}``.
A cursor is bound to one snapshot of a collection: it is rejected when the
collection it is replayed against has a different length, when it is older
than an hour, or when it cannot be decoded.
"""

import base64
import binascii
import json
import time
from dataclasses import dataclass, field
from typing import Any, Dict, Generic, List, Optional, Sequence, TypeVar

from pydantic import BaseModel, ValidationError

from .protocol.errors import MCPError
from .protocol.messages import ErrorCode

T = TypeVar("T")

DEFAULT_LIMIT = 10
MIN_LIMIT = 1
MAX_LIMIT = 50
CURSOR_EXPIRY_SECONDS = 60 * 60


class PaginationCursor(BaseModel):
    """Decoded cursor payload."""
    index: int
    total: int
    timestamp: float


@dataclass
class PaginationResult(Generic[T]):
    """A single page of a collection."""
    items: List[T] = field(default_factory=list)
    next_cursor: Optional[str] = None
    total: int = 0
    has_more: bool = False


def encode_cursor(cursor: PaginationCursor) -> str:
    """Encode a cursor to an opaque token."""
    raw = json.dumps(cursor.model_dump(), separators=(",", ":"))
    return base64.b64encode(raw.encode("utf-8")).decode("ascii")


def _invalid_cursor(token: str, reason: str) -> MCPError:
    return MCPError(
        ErrorCode.INVALID_PARAMS,
        "Invalid pagination cursor",
        {
            "cursor": token,
            "error": reason,
            "hint": "Cursor may be malformed, expired, or from a different collection",
        },
    )


def decode_cursor(token: str) -> PaginationCursor:
    """Decode and check an opaque cursor token."""
    if not isinstance(token, str):
        raise _invalid_cursor(repr(token), "Cursor must be a string")
    try:
        raw = base64.b64decode(token.encode("ascii"), validate=True)
        cursor = PaginationCursor.model_validate(json.loads(raw.decode("utf-8")))
    except (binascii.Error, UnicodeError, ValueError, ValidationError) as e:
        raise _invalid_cursor(token, f"Invalid cursor structure: {e}") from e

    if time.time() - cursor.timestamp > CURSOR_EXPIRY_SECONDS:
        raise _invalid_cursor(token, "Cursor has expired")
    if cursor.index < 0:
        raise _invalid_cursor(token, "Negative cursor index")
    return cursor


def normalize_limit(limit: Optional[int]) -> int:
    """Apply the default page size and clamp to the allowed range."""
    if limit is None:
        return DEFAULT_LIMIT
    return max(MIN_LIMIT, min(int(limit), MAX_LIMIT))


def paginate(
    items: Sequence[T],
    cursor: Optional[str] = None,
    limit: Optional[int] = None,
) -> PaginationResult[T]:
    """Return the page of ``items`` starting at ``cursor``."""
    total = len(items)
    page_size = normalize_limit(limit)

    start = 0
    if cursor:
        decoded = decode_cursor(cursor)
        if decoded.total != total:
            raise _invalid_cursor(
                cursor,
                f"Cursor was issued for a collection of {decoded.total} items, not {total}",
            )
        start = decoded.index

    if start >= total:
        return PaginationResult(items=[], next_cursor=None, total=total, has_more=False)

    end = min(start + page_size, total)
    has_more = end < total
    next_cursor = None
    if has_more:
        next_cursor = encode_cursor(
            PaginationCursor(index=end, total=total, timestamp=time.time())
        )

    return PaginationResult(
        items=list(items[start:end]),
        next_cursor=next_cursor,
        total=total,
        has_more=has_more,
    )


def create_pagination_metadata(
    cursor: Optional[str],
    limit: Optional[int],
    result: PaginationResult[Any],
) -> Dict[str, Any]:
    """Summarize a pagination step for debug logging."""
    return {
        "requested_limit": limit,
        "returned": len(result.items),
        "cursor": cursor,
        "next_cursor": result.next_cursor,
        "total": result.total,
        "has_more": result.has_more,
    }
