"""Table components: sorter, paginator and zebra striping.

Each component decorates an existing BeautifulSoup ``<table>`` tag through
`attach(table)` and releases it with `detach()`. Components compose by
ownership (a paginator or striped table may own a sorter) and talk to each
other only through `EventBus` events.
"""

from __future__ import annotations

from .paginator import PageState, PaginationOptions, Paginator
from .striped_table import StripedTable
from .table_sorter import MultiRowTableSorter, RowBlock, SortEvent

__all__ = [
    "MultiRowTableSorter",
    "PageState",
    "PaginationOptions",
    "Paginator",
    "RowBlock",
    "SortEvent",
    "StripedTable",
]
