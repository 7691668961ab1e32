"""HTML table helpers shared by the sorter, paginator and striping components.

Everything here operates on BeautifulSoup tags in place. Components never
copy rows; they move the existing `<tr>` tags so a caller holding the soup
sees the mutations directly.
"""

from __future__ import annotations

import re
from typing import Iterable, List

from bs4 import BeautifulSoup, Tag  # type: ignore

TAG_RE = re.compile(r"<[^>]+>")


def strip_tags(html: str) -> str:
    return TAG_RE.sub("", html)


def parse_table(html: str) -> Tag:
    """Parse markup and return its first <table> tag.

    Raises ValueError when the markup holds no table.
    """
    soup = BeautifulSoup(html, "html.parser")
    table = soup.find("table")
    if table is None:
        raise ValueError("markup contains no <table> element")
    return table


def is_table(element: object) -> bool:
    return isinstance(element, Tag) and element.name == "table"


# ----------------------------------------------------------------------
# Structure
# ----------------------------------------------------------------------
def row_cells(row: Tag) -> List[Tag]:
    return row.find_all(["td", "th"], recursive=False)


def _is_header_like(row: Tag) -> bool:
    cells = row_cells(row)
    return bool(cells) and all(c.name == "th" for c in cells)


def header_row(table: Tag, selector: str | None = None) -> Tag | None:
    """Return the header row used for sorting.

    Rows of the <thead> are preferred; `selector` picks the first header row
    carrying that class. Tables without a <thead> fall back to the first
    direct row made only of <th> cells.
    """
    thead = table.find("thead", recursive=False)
    if thead is not None:
        rows = thead.find_all("tr", recursive=False)
    else:
        rows = [r for r in table.find_all("tr", recursive=False) if _is_header_like(r)]
    if selector:
        rows = [r for r in rows if has_class(r, selector)]
    return rows[0] if rows else None


def header_cells(table: Tag, selector: str | None = None) -> List[Tag]:
    row = header_row(table, selector)
    return row_cells(row) if row is not None else []


def body_container(table: Tag) -> Tag:
    """First <tbody>, or the table itself when the markup has none."""
    return table.find("tbody", recursive=False) or table


def body_rows(table: Tag) -> List[Tag]:
    container = body_container(table)
    rows = container.find_all("tr", recursive=False)
    if container is table:
        rows = [r for r in rows if not _is_header_like(r)]
    return rows


def row_cell(row: Tag, column: int) -> Tag | None:
    cells = row_cells(row)
    return cells[column] if 0 <= column < len(cells) else None


def cell_value(cell: Tag | None) -> str:
    """Raw comparable text of a cell.

    Plain cells yield their text; cells with child markup yield their inner
    HTML so markup-aware parsers can inspect it.
    """
    if cell is None:
        return ""
    if cell.find(True) is not None:
        return cell.decode_contents().strip()
    return cell.get_text().strip()


def cell_text(cell: Tag | None) -> str:
    """Tag-stripped text of a cell, trimmed."""
    if cell is None:
        return ""
    return cell.get_text().strip()


# ----------------------------------------------------------------------
# Classes
# ----------------------------------------------------------------------
def _classes(tag: Tag) -> List[str]:
    value = tag.get("class") or []
    if isinstance(value, str):
        value = value.split()
    return list(value)


def has_class(tag: Tag, name: str) -> bool:
    return name in _classes(tag)


def add_class(tag: Tag, *names: str) -> None:
    classes = _classes(tag)
    for name in names:
        if name not in classes:
            classes.append(name)
    tag["class"] = classes


def remove_class(tag: Tag, *names: str) -> None:
    classes = [c for c in _classes(tag) if c not in names]
    if classes:
        tag["class"] = classes
    elif "class" in tag.attrs:
        del tag["class"]


# ----------------------------------------------------------------------
# Inline style / visibility
# ----------------------------------------------------------------------
def _style_items(tag: Tag) -> List[tuple[str, str]]:
    items: List[tuple[str, str]] = []
    for decl in str(tag.get("style") or "").split(";"):
        if ":" not in decl:
            continue
        prop, _, value = decl.partition(":")
        items.append((prop.strip().lower(), value.strip()))
    return items


def _write_style(tag: Tag, items: Iterable[tuple[str, str]]) -> None:
    text = "; ".join(f"{p}: {v}" for p, v in items)
    if text:
        tag["style"] = text
    elif "style" in tag.attrs:
        del tag["style"]


def get_style(tag: Tag, prop: str) -> str | None:
    for p, v in _style_items(tag):
        if p == prop:
            return v
    return None


def set_style(tag: Tag, prop: str, value: str | None) -> None:
    """Set (or remove when value is None) one inline style declaration."""
    items = [(p, v) for p, v in _style_items(tag) if p != prop]
    if value is not None:
        items.append((prop, value))
    _write_style(tag, items)


def show_row(row: Tag) -> None:
    set_style(row, "display", None)


def hide_row(row: Tag) -> None:
    set_style(row, "display", "none")


def is_row_hidden(row: Tag, hide_class: str | None = None) -> bool:
    if (get_style(row, "display") or "").lower() == "none":
        return True
    return bool(hide_class) and has_class(row, hide_class)
