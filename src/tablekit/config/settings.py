"""Global defaults for table sorting, pagination and striping."""

from __future__ import annotations

import os
from typing import Final


def _env_int(name: str, default: int) -> int:
    raw = os.environ.get(name)
    if raw is None:
        return default
    try:
        value = int(raw)
    except ValueError:
        return default
    return value if value > 0 else default


DEFAULT_ROWS_PER_PAGE: Final = _env_int("TABLEKIT_ROWS_PER_PAGE", 10)
DEFAULT_ROWS_PER_BLOCK: Final = 1

# Pager host markup class selectors
CSS_FIRST: Final = "first"
CSS_PREV: Final = "prev"
CSS_NEXT: Final = "next"
CSS_LAST: Final = "last"
CSS_PAGE_SIZE: Final = "pagesize"
CSS_PAGE_DISPLAY: Final = "pagedisplay"

# Header indicator classes
CSS_HEADER: Final = "header"
CSS_SORT_ASCENDING: Final = "headerSortUp"
CSS_SORT_DESCENDING: Final = "headerSortDown"

# Row markers shared by pagination, striping and external row filters
CSS_HIDE: Final = "hide"
CSS_ODD: Final = "odd"
CSS_EVEN: Final = "even"
