import pytest

from tablekit.utils.html_utils import (
    add_class,
    body_rows,
    cell_text,
    cell_value,
    get_style,
    has_class,
    header_row,
    hide_row,
    is_row_hidden,
    parse_table,
    remove_class,
    row_cells,
    set_style,
    show_row,
)


def test_parse_table_requires_table():
    table = parse_table("<p>x</p><table><tr><th>a</th></tr></table>")
    assert table.name == "table"
    with pytest.raises(ValueError):
        parse_table("<p>no table</p>")


def test_header_row_selector_and_fallback():
    table = parse_table(
        "<table><thead><tr class='group'><th>g</th></tr><tr class='sort'><th>a</th></tr></thead>"
        "<tbody><tr><td>1</td></tr></tbody></table>"
    )
    assert header_row(table).get_text() == "g"
    assert header_row(table, "sort").get_text() == "a"
    bare = parse_table("<table><tr><th>h</th></tr><tr><td>1</td></tr></table>")
    assert header_row(bare).get_text() == "h"
    assert [r.get_text() for r in body_rows(bare)] == ["1"]


def test_cell_value_keeps_markup_only_when_present():
    table = parse_table(
        '<table><tr><td> 12 </td><td><font color="black">$5</font></td></tr></table>'
    )
    plain, marked = row_cells(table.tr)
    assert cell_value(plain) == "12"
    assert cell_value(marked) == '<font color="black">$5</font>'
    assert cell_value(None) == ""
    assert cell_text(plain) == "12"
    assert cell_text(marked) == "$5"
    assert cell_text(None) == ""


def test_class_helpers():
    table = parse_table("<table><tr class='a'><td>1</td></tr></table>")
    row = table.tr
    add_class(row, "b", "a")
    assert row["class"] == ["a", "b"]
    remove_class(row, "a", "b")
    assert not row.has_attr("class")
    assert not has_class(row, "a")


def test_visibility_helpers_preserve_other_styles():
    table = parse_table("<table><tr style='color: red'><td>1</td></tr></table>")
    row = table.tr
    hide_row(row)
    assert is_row_hidden(row)
    assert get_style(row, "color") == "red"
    show_row(row)
    assert not is_row_hidden(row)
    assert row["style"] == "color: red"
    set_style(row, "color", None)
    assert not row.has_attr("style")


def test_hide_class_marker_counts_as_hidden():
    table = parse_table("<table><tr class='hide'><td>1</td></tr></table>")
    assert is_row_hidden(table.tr, "hide")
    assert not is_row_hidden(table.tr)
