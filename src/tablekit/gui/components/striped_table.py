"""Zebra striping for table body rows.

Applies ``even`` / ``odd`` classes to body rows (index 0 is even). With
`filter_hidden_rows`, rows hidden by pagination (inline ``display: none``) or
by an external filter (the ``hide`` class) are skipped, so the visible rows
alternate cleanly.

Stripes are re-derived after the child sorter publishes ``sort`` and on
``hidden`` / ``shown`` / ``collapsed`` / ``page_changed`` events from any
bus passed to `watch` (collapse collaborators, a paginator).
"""

from __future__ import annotations

import logging
from typing import List

from bs4 import Tag  # type: ignore

from tablekit.config import settings
from tablekit.gui.components.table_sorter import MultiRowTableSorter
from tablekit.gui.services.event_bus import Event, EventBus, Subscription, TableEvent
from tablekit.parsing.errors import AlreadyAttachedError, NotATableError, TableError
from tablekit.utils.html_utils import add_class, body_rows, is_row_hidden, is_table, remove_class

__all__ = ["StripedTable"]

log = logging.getLogger(__name__)

_RESTRIPE_EVENTS = (
    TableEvent.HIDDEN,
    TableEvent.SHOWN,
    TableEvent.COLLAPSED,
    TableEvent.PAGE_CHANGED,
)


class StripedTable:
    def __init__(
        self,
        filter_hidden_rows: bool = False,
        hide_class: str = settings.CSS_HIDE,
        odd_class: str = settings.CSS_ODD,
        even_class: str = settings.CSS_EVEN,
        table_sorter: MultiRowTableSorter | None = None,
    ) -> None:
        self._filter_hidden_rows = filter_hidden_rows
        self._hide_class = hide_class
        self._odd_class = odd_class
        self._even_class = even_class
        self._sorter = table_sorter
        self._table: Tag | None = None
        self._subs: List[tuple[EventBus, Subscription]] = []

    def attach(self, table: Tag) -> None:
        if not is_table(table):
            raise NotATableError(
                "striped table can only decorate a <table> element",
                context={"element": getattr(table, "name", type(table).__name__)},
            )
        if self._table is not None:
            raise AlreadyAttachedError("striped table is already attached to a table")
        if self._sorter is not None:
            self._sorter.attach(table)
            self.watch(self._sorter.events, TableEvent.SORT)
        self._table = table
        self.restripe()

    def watch(self, bus: EventBus, *names: TableEvent) -> None:
        """Re-stripe whenever `bus` publishes one of `names` (default: row visibility events)."""
        for name in names or _RESTRIPE_EVENTS:
            self._subs.append((bus, bus.subscribe(name, self._on_rows_changed)))

    def detach(self) -> None:
        for bus, sub in self._subs:
            bus.unsubscribe(sub)
        self._subs.clear()
        if self._sorter is not None:
            self._sorter.detach()
        self._table = None

    def _on_rows_changed(self, event: Event) -> None:
        if self._table is not None:
            self.restripe()

    def striped_rows(self) -> List[Tag]:
        if self._table is None:
            raise TableError("striped table is not attached to a table")
        rows = body_rows(self._table)
        if not self._filter_hidden_rows:
            return rows
        return [r for r in rows if not is_row_hidden(r, self._hide_class)]

    def restripe(self) -> None:
        rows = self.striped_rows()
        for idx, row in enumerate(rows):
            remove_class(row, self._odd_class, self._even_class)
            add_class(row, self._odd_class if idx % 2 else self._even_class)
        log.debug("restriped %d rows", len(rows))
