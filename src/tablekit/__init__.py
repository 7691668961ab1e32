"""Sortable, paginated HTML tables.

Pipeline:
 - `ParserRegistry` classifies raw cell text into comparable values
 - `MultiRowTableSorter` reorders blocks of body rows by column
 - `Paginator` shows one page of rows and follows the sorter's ``sort`` event
 - `StripedTable` keeps odd/even row classes in step with both
"""

from .gui.components.paginator import PageState, PaginationOptions, Paginator  # noqa: F401
from .gui.components.striped_table import StripedTable  # noqa: F401
from .gui.components.table_sorter import MultiRowTableSorter, SortEvent  # noqa: F401
from .gui.services.event_bus import EventBus, TableEvent  # noqa: F401
from .parsing.data_parsers import DataParser, ParserKind, ParserRegistry, default_registry  # noqa: F401

__all__ = [
    "DataParser",
    "EventBus",
    "MultiRowTableSorter",
    "PageState",
    "PaginationOptions",
    "Paginator",
    "ParserKind",
    "ParserRegistry",
    "SortEvent",
    "StripedTable",
    "TableEvent",
    "default_registry",
]
