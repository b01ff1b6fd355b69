"""Tests for cursor pagination."""

import base64
import json
import time
import pytest

from assistants_mcp.pagination import (
    MAX_LIMIT,
    PaginationCursor,
    create_pagination_metadata,
    decode_cursor,
    encode_cursor,
    normalize_limit,
    paginate,
)
from assistants_mcp.protocol.errors import MCPError
from assistants_mcp.protocol.messages import ErrorCode


def make_cursor(index, total, timestamp=None):
    payload = {"index": index, "total": total, "timestamp": timestamp or time.time()}
    return base64.b64encode(json.dumps(payload).encode()).decode()


class TestPaginate:
    """Test paging through collections."""

    def test_first_page(self):
        result = paginate(list(range(25)))

        assert result.items == list(range(10))
        assert result.has_more
        assert result.total == 25
        decoded = decode_cursor(result.next_cursor)
        assert (decoded.index, decoded.total) == (10, 25)

    def test_walks_whole_collection(self):
        items = list(range(23))
        seen = []
        cursor = None
        while True:
            page = paginate(items, cursor=cursor, limit=7)
            seen.extend(page.items)
            cursor = page.next_cursor
            if not cursor:
                break
        assert seen == items

    def test_single_page_has_no_cursor(self):
        result = paginate(["a", "b"])
        assert result.items == ["a", "b"]
        assert result.next_cursor is None
        assert not result.has_more

    def test_cursor_past_end(self):
        result = paginate([1, 2, 3], cursor=make_cursor(3, 3))
        assert result.items == []
        assert result.next_cursor is None

    def test_total_mismatch_rejected(self):
        with pytest.raises(MCPError) as exc_info:
            paginate(list(range(5)), cursor=make_cursor(2, 6))
        assert exc_info.value.code == ErrorCode.INVALID_PARAMS

    def test_metadata(self):
        result = paginate(list(range(12)), limit=5)
        metadata = create_pagination_metadata(None, 5, result)
        assert metadata["returned"] == 5
        assert metadata["total"] == 12
        assert metadata["has_more"] is True


class TestCursor:
    """Test cursor encoding and validation."""

    def test_encode_decode(self):
        cursor = PaginationCursor(index=4, total=9, timestamp=time.time())
        assert decode_cursor(encode_cursor(cursor)) == cursor

    @pytest.mark.parametrize("token", ["!!!", base64.b64encode(b"not json").decode(), base64.b64encode(b"{}").decode()])
    def test_malformed(self, token):
        with pytest.raises(MCPError) as exc_info:
            decode_cursor(token)
        assert exc_info.value.code == ErrorCode.INVALID_PARAMS
        assert exc_info.value.message == "Invalid pagination cursor"

    def test_expired(self):
        with pytest.raises(MCPError) as exc_info:
            decode_cursor(make_cursor(1, 2, timestamp=time.time() - 2 * 3600))
        assert exc_info.value.data["error"] == "Cursor has expired"

    def test_negative_index(self):
        with pytest.raises(MCPError, match="Invalid pagination cursor"):
            decode_cursor(make_cursor(-1, 2))


class TestLimit:
    def test_normalize(self):
        assert normalize_limit(None) == 10
        assert normalize_limit(0) == 1
        assert normalize_limit(500) == MAX_LIMIT
        assert normalize_limit(20) == 20
