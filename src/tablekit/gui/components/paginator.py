"""Table pagination.

Shows one page of body rows at a time by toggling an inline
``display: none`` on the rows outside the current window. Works alone or
composed with a `MultiRowTableSorter` child, in which case it re-derives the
visible window whenever the sorter publishes ``sort``.

The pager host is a container holding the controls, found by class:

    <div id="pager">
      <img class="first"/> <img class="prev"/>
      <input type="text" class="pagedisplay"/>
      <img class="next"/> <img class="last"/>
      <select class="pagesize">
        <option value="10" selected="selected">10</option>
        <option value="20">20</option>
      </select>
    </div>

The page display receives ``"current/total"``. Out-of-range input (page
numbers, non-positive page sizes) is clamped or ignored, never raised.
"""

from __future__ import annotations

import logging
import math
from dataclasses import dataclass
from typing import Callable, Dict, List, Optional

from bs4 import Tag  # type: ignore

from tablekit.config import settings
from tablekit.gui.components.table_sorter import MultiRowTableSorter
from tablekit.gui.services.event_bus import Event, EventBus, Subscription, TableEvent
from tablekit.parsing.errors import AlreadyAttachedError, NotATableError, TableError
from tablekit.utils.html_utils import body_rows, has_class, hide_row, is_table, show_row

__all__ = ["PageState", "PaginationOptions", "Paginator"]

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class PaginationOptions:
    """Class selectors of the pager host controls."""

    css_first: str = settings.CSS_FIRST
    css_prev: str = settings.CSS_PREV
    css_next: str = settings.CSS_NEXT
    css_last: str = settings.CSS_LAST
    css_page_size: str = settings.CSS_PAGE_SIZE
    css_page_display: str = settings.CSS_PAGE_DISPLAY


@dataclass(frozen=True)
class PageState:
    current_page: int
    rows_per_page: int
    total_pages: int

    def as_text(self) -> str:
        return f"{self.current_page}/{self.total_pages}"


def _parse_page_size(value: object) -> Optional[int]:
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        return None


class Paginator:
    def __init__(
        self,
        pager: Tag | None = None,
        options: PaginationOptions | None = None,
        table_sorter: MultiRowTableSorter | None = None,
        *,
        rows_per_page: int | None = None,
        events: EventBus | None = None,
    ) -> None:
        self._pager = pager
        self._options = options or PaginationOptions()
        self._sorter = table_sorter
        self._table: Tag | None = None
        self._sort_sub: Subscription | None = None
        self.events = events or EventBus()
        self.current_page = 1
        self.total_pages = 1
        self.rows_per_page = settings.DEFAULT_ROWS_PER_PAGE
        if rows_per_page is not None and rows_per_page > 0:
            self.rows_per_page = rows_per_page

    # ------------------------------------------------------------------
    # Lifecycle
    # ------------------------------------------------------------------
    def attach(self, table: Tag) -> None:
        """Decorate `table` with pagination (and sorting, when composed)."""
        if not is_table(table):
            raise NotATableError(
                "paginator can only decorate a <table> element",
                context={"element": getattr(table, "name", type(table).__name__)},
            )
        if self._table is not None:
            raise AlreadyAttachedError("paginator is already attached to a table")
        if self._sorter is not None and self._sorter.element is not None:
            raise AlreadyAttachedError("child sorter is already attached to a table")
        # The sorter validates the header; a refused table must stay untouched.
        if self._sorter is not None:
            self._sorter.attach(table)
        self._table = table
        select = self._page_size_select()
        if select is not None:
            size = _parse_page_size(self._selected_option_value(select))
            if size is not None and size > 0:
                self.rows_per_page = size
        self._recompute_total_pages()
        self.render()
        if self._sorter is not None:
            self._sort_sub = self._sorter.events.subscribe(TableEvent.SORT, self._on_sort)
        log.debug("paginator attached: %s, %d rows per page", self.state.as_text(), self.rows_per_page)

    def detach(self) -> None:
        if self._sorter is not None:
            if self._sort_sub is not None:
                self._sorter.events.unsubscribe(self._sort_sub)
                self._sort_sub = None
            self._sorter.detach()
        self._table = None

    @property
    def element(self) -> Tag | None:
        return self._table

    @property
    def table_sorter(self) -> MultiRowTableSorter | None:
        return self._sorter

    @property
    def state(self) -> PageState:
        return PageState(self.current_page, self.rows_per_page, self.total_pages)

    def _require_table(self) -> Tag:
        if self._table is None:
            raise TableError("paginator is not attached to a table")
        return self._table

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def set_rows_per_page(self, rows_per_page: int) -> None:
        if rows_per_page is None or rows_per_page <= 0:
            log.warning("ignoring page size %r; keeping %d", rows_per_page, self.rows_per_page)
            return
        self.rows_per_page = rows_per_page
        if self._table is None:
            return
        self._recompute_total_pages()
        self.render()

    def go_to_page(self, target: int) -> None:
        target = max(1, min(target, self.total_pages))
        if target == self.current_page:
            return
        self.current_page = target
        self.render()

    def next(self) -> None:
        self.go_to_page(self.current_page + 1)

    def prev(self) -> None:
        self.go_to_page(self.current_page - 1)

    def first(self) -> None:
        self.go_to_page(1)

    def last(self) -> None:
        self.go_to_page(self.total_pages)

    def on_row_set_changed(self) -> None:
        """Re-derive bounds and the visible window after rows changed."""
        self._recompute_total_pages()
        self.render()

    def _on_sort(self, event: Event) -> None:
        self.on_row_set_changed()

    def _recompute_total_pages(self) -> None:
        row_count = len(body_rows(self._require_table()))
        self.total_pages = max(1, math.ceil(row_count / self.rows_per_page))
        self.current_page = max(1, min(self.current_page, self.total_pages))

    def visible_rows(self) -> List[Tag]:
        start = (self.current_page - 1) * self.rows_per_page
        return body_rows(self._require_table())[start : start + self.rows_per_page]

    def render(self) -> None:
        """Show the current page's rows, hide the rest, refresh the display."""
        rows = body_rows(self._require_table())
        start = (self.current_page - 1) * self.rows_per_page
        end = self.current_page * self.rows_per_page - 1
        for idx, row in enumerate(rows):
            if start <= idx <= end:
                show_row(row)
            else:
                hide_row(row)
        display = self._page_display()
        if display is not None:
            display["value"] = self.state.as_text()
        log.debug("rendered page %s", self.state.as_text())
        self.events.publish(TableEvent.PAGE_CHANGED, self.state)

    # ------------------------------------------------------------------
    # Pager host controls
    # ------------------------------------------------------------------
    def _find(self, tag_name: str | None, css: str) -> Tag | None:
        if self._pager is None:
            return None
        if has_class(self._pager, css) and (tag_name is None or self._pager.name == tag_name):
            return self._pager
        return self._pager.find(tag_name or True, class_=css)

    def _page_size_select(self) -> Tag | None:
        return self._find("select", self._options.css_page_size)

    def _page_display(self) -> Tag | None:
        return self._find("input", self._options.css_page_display)

    @staticmethod
    def _selected_option_value(select: Tag) -> str | None:
        options = select.find_all("option")
        if not options:
            return None
        chosen = next((o for o in options if o.has_attr("selected")), options[0])
        return chosen.get("value", chosen.get_text())

    def _actions(self) -> Dict[str, Callable[[], None]]:
        o = self._options
        return {
            o.css_first: self.first,
            o.css_prev: self.prev,
            o.css_next: self.next,
            o.css_last: self.last,
        }

    def click(self, control: Tag) -> bool:
        """Dispatch a click on a pager control; False when nothing matched."""
        actions = self._actions()
        node = control
        while node is not None:
            for css, action in actions.items():
                if has_class(node, css):
                    action()
                    return True
            if node is self._pager:
                break
            node = node.parent
        return False

    def change_page_size(self, value: object) -> None:
        """Handle a change event of the page-size select."""
        size = _parse_page_size(value)
        if size is None or size <= 0:
            log.warning("ignoring page size %r; keeping %d", value, self.rows_per_page)
            return
        select = self._page_size_select()
        if select is not None:
            for option in select.find_all("option"):
                if _parse_page_size(option.get("value", option.get_text())) == size:
                    option["selected"] = "selected"
                elif option.has_attr("selected"):
                    del option["selected"]
        self.set_rows_per_page(size)
