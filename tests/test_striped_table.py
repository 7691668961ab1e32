import pytest
from bs4 import BeautifulSoup

from tablekit.gui.components.paginator import Paginator
from tablekit.gui.components.striped_table import StripedTable
from tablekit.gui.components.table_sorter import MultiRowTableSorter
from tablekit.gui.services.event_bus import EventBus, TableEvent
from tablekit.parsing.errors import MissingHeaderError, NotATableError
from tablekit.utils.html_utils import add_class, body_rows, has_class, row_cells

from tests.factories import make_headless_table, make_numbered_table, make_table


def stripes(table):
    out = []
    for row in body_rows(table):
        if has_class(row, "even"):
            out.append("even")
        elif has_class(row, "odd"):
            out.append("odd")
        else:
            out.append(None)
    return out


def test_rows_alternate_starting_with_even():
    table = make_numbered_table(4)
    StripedTable().attach(table)
    assert stripes(table) == ["even", "odd", "even", "odd"]


def test_restripes_after_sort():
    table = make_table(["n"], [["3"], ["1"], ["2"]])
    sorter = MultiRowTableSorter()
    StripedTable(table_sorter=sorter).attach(table)
    moved = body_rows(table)[1]
    assert has_class(moved, "odd")
    sorter.sort(0)
    assert row_cells(body_rows(table)[0])[0].get_text() == "1"
    assert stripes(table) == ["even", "odd", "even"]
    assert has_class(moved, "even") and not has_class(moved, "odd")


def test_filter_hidden_rows_on_collapse_events():
    table = make_numbered_table(4)
    collapse_bus = EventBus()
    striped = StripedTable(filter_hidden_rows=True)
    striped.attach(table)
    striped.watch(collapse_bus)
    rows = body_rows(table)
    add_class(rows[1], "hide")
    collapse_bus.publish(TableEvent.HIDDEN)
    assert [has_class(r, "even") for r in (rows[0], rows[2])] == [True, False]
    assert has_class(rows[2], "odd") and has_class(rows[3], "even")


def test_follows_pagination_page_changes():
    table = make_numbered_table(6)
    paginator = Paginator(rows_per_page=3)
    paginator.attach(table)
    striped = StripedTable(filter_hidden_rows=True)
    striped.attach(table)
    striped.watch(paginator.events, TableEvent.PAGE_CHANGED)
    paginator.next()
    rows = body_rows(table)
    assert [has_class(r, "even") for r in rows[3:]] == [True, False, True]


def test_detach_unsubscribes():
    bus = EventBus()
    striped = StripedTable()
    striped.attach(make_numbered_table(2))
    striped.watch(bus)
    assert bus.subscriber_count(TableEvent.SHOWN) == 1
    striped.detach()
    assert bus.list_events() == []


def test_attach_rejects_non_table():
    with pytest.raises(NotATableError):
        StripedTable().attach(BeautifulSoup("<ul></ul>", "html.parser").ul)


def test_refused_table_keeps_striped_table_detached():
    table = make_headless_table(3)
    sorter = MultiRowTableSorter()
    striped = StripedTable(table_sorter=sorter)
    with pytest.raises(MissingHeaderError):
        striped.attach(table)
    assert stripes(table) == [None, None, None]
    assert sorter.events.subscriber_count(TableEvent.SORT) == 0
    with pytest.raises(MissingHeaderError):
        striped.attach(table)

    plain = StripedTable()
    plain.attach(table)
    assert stripes(table) == ["even", "odd", "even"]
