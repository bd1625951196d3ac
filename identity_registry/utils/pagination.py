import math
from typing import Optional, Tuple
from identity_registry.core.config import (
    DEFAULT_PAGE, DEFAULT_PAGE_SIZE, MAX_PAGE, MAX_PAGE_SIZE,
    SORTABLE_FIELDS, DEFAULT_SORT_FIELD, DEFAULT_SORT_DIRECTION,
)


def _to_int(value) -> Optional[int]:
    if value is None or isinstance(value, bool):
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        return None


def parse_pagination_params(page=None, page_size=None) -> Tuple[int, int]:
    """Normalize raw page/page_size values.

    Non-numeric or missing values fall back to the defaults; page is clamped
    to [1, MAX_PAGE] so the offset fits a 64-bit integer, and page_size is
    clamped to [1, MAX_PAGE_SIZE].
    """
    parsed_page = _to_int(page)
    parsed_size = _to_int(page_size)

    page = min(MAX_PAGE, max(1, parsed_page if parsed_page is not None else DEFAULT_PAGE))
    if parsed_size is None:
        parsed_size = DEFAULT_PAGE_SIZE
    page_size = min(MAX_PAGE_SIZE, max(1, parsed_size))
    return page, page_size


def calculate_skip(page: int, page_size: int) -> int:
    return (page - 1) * page_size


def generate_meta(page: int, page_size: int, total: int) -> dict:
    total_pages = math.ceil(total / page_size)
    return {
        "page":        page,
        "page_size":   page_size,
        "total":       total,
        "total_pages": total_pages,
        "has_next":    page < total_pages,
        "has_prev":    page > 1,
    }


def parse_sort_param(sort: Optional[str]) -> Tuple[str, str]:
    # "-name" sorts descending, "name" ascending
    if not sort or not sort.strip():
        return DEFAULT_SORT_FIELD, DEFAULT_SORT_DIRECTION

    sort = sort.strip()
    direction = "desc" if sort.startswith("-") else "asc"
    field = sort[1:] if direction == "desc" else sort
    if field not in SORTABLE_FIELDS:
        return DEFAULT_SORT_FIELD, DEFAULT_SORT_DIRECTION
    return field, direction
