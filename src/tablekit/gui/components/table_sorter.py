"""Multi-row table sorter.

Sorts the body of an HTML table by column, moving fixed-size blocks of
consecutive rows as one unit. Within a block, one representative row
supplies the value compared for a column (row offset 0 unless a column
exception names another offset).

Values are typed through a `ParserRegistry`: each column is bound to the
parser detected for its representative cell in the first block when the
sorter attaches, unless an override names a parser id for that column.

Sorting is stable and a reversed sort flips the comparator rather than
reversing the result, so equal blocks keep their prior relative order in
both directions. Once the rows are re-inserted the sorter publishes
`TableEvent.SORT` on its bus with a `SortEvent` payload.

Usage:
    sorter = MultiRowTableSorter(rows_per_block=2, column_exceptions={3: 1})
    sorter.attach(table)
    sorter.sort(0)      # ascending
    sorter.sort(0)      # same column again -> descending
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from functools import cmp_to_key
from typing import Any, Dict, Iterable, List, Mapping, Sequence

from bs4 import Tag  # type: ignore

from tablekit.config import settings
from tablekit.gui.services.event_bus import EventBus, TableEvent
from tablekit.parsing.data_parsers import TEXT_PARSER_ID, DataParser, ParserRegistry, default_registry
from tablekit.parsing.errors import (
    AlreadyAttachedError,
    ColumnOutOfRangeError,
    MissingHeaderError,
    NotATableError,
    TableError,
)
from tablekit.utils.html_utils import (
    add_class,
    body_container,
    body_rows,
    cell_text,
    cell_value,
    get_style,
    header_cells,
    header_row,
    is_table,
    remove_class,
    row_cell,
    row_cells,
    set_style,
)

__all__ = [
    "MultiRowTableSorter",
    "RowBlock",
    "SortEvent",
    "parser_input",
    "partition_blocks",
    "resolve_cell",
    "sort_blocks",
]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class SortEvent:
    column: int
    reversed: bool
    parser_id: str
    block_count: int


@dataclass
class RowBlock:
    rows: List[Tag]

    def representative(self, offset: int) -> Tag:
        # A trailing partial block falls back to its last row.
        return self.rows[min(offset, len(self.rows) - 1)]


def partition_blocks(rows: Sequence[Tag], size: int) -> List[RowBlock]:
    return [RowBlock(list(rows[i : i + size])) for i in range(0, len(rows), size)]


def sort_blocks(
    blocks: Sequence[RowBlock], values: Sequence[Any], parser: DataParser, reverse: bool = False
) -> List[RowBlock]:
    """Stable sort of `blocks` by their `values` using the parser's compare."""
    sign = -1 if reverse else 1
    pairs = list(zip(values, blocks))
    pairs.sort(key=cmp_to_key(lambda a, b: sign * parser.compare(a[0], b[0])))
    return [block for _, block in pairs]


def resolve_cell(registry: ParserRegistry, cell: Tag | None) -> DataParser:
    """Parser for a cell, trying its raw markup before its plain text.

    Markup-aware parsers (``blackFontCurrency``) match the raw markup; a
    decorated cell such as ``<b>10</b>`` that only the text parser accepts
    as markup is classified again by its text.
    """
    raw = cell_value(cell)
    parser = registry.resolve(raw)
    if parser.id == TEXT_PARSER_ID:
        text = cell_text(cell)
        if text != raw:
            parser = registry.resolve(text)
    return parser


def parser_input(parser: DataParser, cell: Tag | None) -> str:
    """The raw markup when `parser` recognises it, else the cell text."""
    raw = cell_value(cell)
    if parser.id != TEXT_PARSER_ID and parser.classify(raw):
        return raw
    return cell_text(cell)


class MultiRowTableSorter:
    def __init__(
        self,
        row_offset: int = 0,
        rows_per_block: int = settings.DEFAULT_ROWS_PER_BLOCK,
        fixed_width: bool = False,
        sort_row_selector: str | None = None,
        *,
        registry: ParserRegistry | None = None,
        parser_overrides: Mapping[int, str] | None = None,
        column_exceptions: Mapping[int, int] | None = None,
        reverse_columns: Iterable[int] = (),
        events: EventBus | None = None,
    ) -> None:
        if rows_per_block < 1:
            raise ValueError("rows_per_block must be >= 1")
        if row_offset < 0 or any(v < 0 for v in (column_exceptions or {}).values()):
            raise ValueError("row offsets must be >= 0")
        self._row_offset = row_offset
        self._rows_per_block = rows_per_block
        self._fixed_width = fixed_width
        self._sort_row_selector = sort_row_selector
        self._registry = registry or default_registry
        self._overrides: Dict[int, DataParser] = {
            column: self._registry.get(parser_id)
            for column, parser_id in (parser_overrides or {}).items()
        }
        self._column_exceptions: Dict[int, int] = dict(column_exceptions or {})
        self._reverse_columns = frozenset(reverse_columns)
        self._parser_map: Dict[int, DataParser] = {}
        self._table: Tag | None = None
        self.events = events or EventBus()
        self.sort_column = -1
        self.reversed = False

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def attach(self, table: Tag) -> None:
        """Decorate `table`; it is left untouched when rejected."""
        if not is_table(table):
            raise NotATableError(
                "sorter can only decorate a <table> element",
                context={"element": getattr(table, "name", type(table).__name__)},
            )
        if self._table is not None:
            raise AlreadyAttachedError("sorter is already attached to a table")
        if header_row(table, self._sort_row_selector) is None:
            raise MissingHeaderError(
                "table has no header row", context={"selector": self._sort_row_selector}
            )
        self._table = table
        self._render_header_state()
        if self._fixed_width:
            self._apply_fixed_width()
        self._detect_parsers()
        log.debug(
            "sorter attached: %d columns, %d rows per block, parsers=%s",
            len(self._header_cells()),
            self._rows_per_block,
            {c: p.id for c, p in self.parser_map.items()},
        )

    def detach(self) -> None:
        self._table = None
        self._parser_map.clear()

    @property
    def element(self) -> Tag | None:
        return self._table

    def _require_table(self) -> Tag:
        if self._table is None:
            raise TableError("sorter is not attached to a table")
        return self._table

    def _header_cells(self) -> List[Tag]:
        return header_cells(self._require_table(), self._sort_row_selector)

    # ------------------------------------------------------------------
    # Column parser bindings
    # ------------------------------------------------------------------
    @property
    def parser_map(self) -> Dict[int, DataParser]:
        merged = dict(self._parser_map)
        merged.update(self._overrides)
        return merged

    def _offset_for(self, column: int) -> int:
        return self._column_exceptions.get(column, self._row_offset)

    def _detect(self, column: int, first_block: RowBlock) -> DataParser:
        row = first_block.representative(self._offset_for(column))
        return resolve_cell(self._registry, row_cell(row, column))

    def _detect_parsers(self) -> None:
        self._parser_map.clear()
        rows = body_rows(self._require_table())
        if not rows:
            return
        first_block = RowBlock(rows[: self._rows_per_block])
        for column in range(len(self._header_cells())):
            if column not in self._overrides:
                self._parser_map[column] = self._detect(column, first_block)

    def parser_for(self, column: int) -> DataParser:
        """Parser bound to `column`, detecting and caching it on first use."""
        if column in self._overrides:
            return self._overrides[column]
        parser = self._parser_map.get(column)
        if parser is None:
            rows = body_rows(self._require_table())
            if not rows:
                return self._registry.resolve("")
            parser = self._detect(column, RowBlock(rows[: self._rows_per_block]))
            self._parser_map[column] = parser
        return parser

    # ------------------------------------------------------------------
    # Sorting
    # ------------------------------------------------------------------
    def sort(self, column: int) -> SortEvent:
        """Header-click transition for `column`, then reorder and notify."""
        table = self._require_table()
        cells = self._header_cells()
        if not 0 <= column < len(cells):
            raise ColumnOutOfRangeError(
                f"column {column} out of range", context={"columns": len(cells)}
            )
        if column == self.sort_column:
            self.reversed = not self.reversed
        else:
            self.sort_column = column
            self.reversed = column in self._reverse_columns
        self._render_header_state(cells)
        event = self._sort_rows(table, column, self.reversed)
        self.events.publish(TableEvent.SORT, event)
        return event

    def handle_header_click(self, target: Tag) -> SortEvent:
        """Sort by the header cell containing `target` (the clicked element)."""
        cells = self._header_cells()
        node: Any = target
        while node is not None:
            for idx, cell in enumerate(cells):
                if cell is node:
                    return self.sort(idx)
            node = node.parent
        raise ColumnOutOfRangeError("clicked element is not a sortable header cell")

    def _sort_rows(self, table: Tag, column: int, reverse: bool) -> SortEvent:
        rows = body_rows(table)
        blocks = partition_blocks(rows, self._rows_per_block)
        parser = self.parser_for(column)
        offset = self._offset_for(column)
        values = [
            parser.normalize(parser_input(parser, row_cell(block.representative(offset), column)))
            for block in blocks
        ]
        ordered = sort_blocks(blocks, values, parser, reverse)
        container = body_container(table)
        for row in rows:
            row.extract()
        for block in ordered:
            for row in block.rows:
                container.append(row)
        log.debug(
            "sorted %d blocks by column %d using '%s' (%s)",
            len(blocks),
            column,
            parser.id,
            "descending" if reverse else "ascending",
        )
        return SortEvent(
            column=column, reversed=reverse, parser_id=parser.id, block_count=len(blocks)
        )

    # ------------------------------------------------------------------
    # Header decoration
    # ------------------------------------------------------------------
    def _render_header_state(self, cells: List[Tag] | None = None) -> None:
        for idx, cell in enumerate(cells if cells is not None else self._header_cells()):
            remove_class(cell, settings.CSS_SORT_ASCENDING, settings.CSS_SORT_DESCENDING)
            add_class(cell, settings.CSS_HEADER)
            if idx == self.sort_column:
                add_class(
                    cell,
                    settings.CSS_SORT_DESCENDING if self.reversed else settings.CSS_SORT_ASCENDING,
                )

    def _apply_fixed_width(self) -> None:
        """Copy declared widths of the first body row onto the header cells."""
        rows = body_rows(self._require_table())
        if not rows:
            return
        headers = self._header_cells()
        for idx, cell in enumerate(row_cells(rows[0])[: len(headers)]):
            width = cell.get("width") or get_style(cell, "width")
            if width:
                width = str(width)
                set_style(headers[idx], "width", f"{width}px" if width.isdigit() else width)
