from __future__ import annotations

import math
from typing import Optional

DEFAULT_PAGE = 1
DEFAULT_LIMIT = 10


def page_offset(page: int, limit: int) -> int:
    """Rows to skip before `page` (1-based) when pages hold `limit` rows."""
    if limit < 1:
        raise ValueError("limit must be >= 1")
    if page < 1:
        raise ValueError("page must be >= 1")
    return (page - 1) * limit


def total_pages(total_rows: int, limit: int) -> int:
    if limit < 1:
        raise ValueError("limit must be >= 1")
    if total_rows < 0:
        raise ValueError("total_rows must be >= 0")
    return math.ceil(total_rows / limit)


def _to_int(raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(str(raw).strip())
    except ValueError:
        return None


def parse_page_params(raw_page: Optional[str], raw_limit: Optional[str], max_limit: int) -> tuple[int, int]:
    """
    Turn raw query-string values into a usable (page, limit) pair.

    - page: absent / non-numeric -> 1, below 1 -> 1
    - limit: absent / non-numeric / below 1 -> DEFAULT_LIMIT, above max_limit -> max_limit
    """
    page = _to_int(raw_page)
    if page is None or page < 1:
        page = DEFAULT_PAGE

    limit = _to_int(raw_limit)
    if limit is None or limit < 1:
        limit = DEFAULT_LIMIT
    return page, min(limit, max(max_limit, 1))
