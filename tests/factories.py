from __future__ import annotations

from typing import Iterable, List, Sequence

from bs4 import BeautifulSoup, Tag

from tablekit.utils.html_utils import body_rows, is_row_hidden, row_cells


def make_table(
    headers: Sequence[str], rows: Iterable[Sequence[str]], *, tbody: bool = True
) -> Tag:
    """Build a <table> tag from header labels and raw cell markup."""
    head = "".join(f"<th>{h}</th>" for h in headers)
    body = "".join("<tr>" + "".join(f"<td>{c}</td>" for c in row) + "</tr>" for row in rows)
    if tbody:
        body = f"<tbody>{body}</tbody>"
    html = f"<table><thead><tr>{head}</tr></thead>{body}</table>"
    return BeautifulSoup(html, "html.parser").table


def make_numbered_table(count: int) -> Tag:
    return make_table(["#", "Name"], ([str(i), f"row {i}"] for i in range(count)))


def make_headless_table(count: int) -> Tag:
    """A <table> of body rows only; sorters refuse it for lacking a header."""
    body = "".join(f"<tr><td>{i}</td></tr>" for i in range(count))
    return BeautifulSoup(f"<table><tbody>{body}</tbody></table>", "html.parser").table


def make_pager(sizes: Sequence[int] = (10, 20, 50), selected: int | None = None) -> Tag:
    chosen = selected if selected is not None else sizes[0]
    options = "".join(
        f'<option value="{s}"{" selected" if s == chosen else ""}>{s}</option>' for s in sizes
    )
    html = (
        '<div id="pager">'
        '<img class="first"/><img class="prev"/>'
        '<input type="text" class="pagedisplay"/>'
        '<img class="next"/><img class="last"/>'
        f'<select class="pagesize">{options}</select>'
        "</div>"
    )
    return BeautifulSoup(html, "html.parser").div


def column(table: Tag, index: int) -> List[str]:
    return [row_cells(r)[index].get_text() for r in body_rows(table)]


def visible_indices(table: Tag) -> List[int]:
    return [i for i, r in enumerate(body_rows(table)) if not is_row_hidden(r)]


__all__ = [
    "make_table",
    "make_numbered_table",
    "make_headless_table",
    "make_pager",
    "column",
    "visible_indices",
]
