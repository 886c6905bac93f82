"""Unit tests for core/convert/tables.py and table conversion"""

import pytest

from mdvdom.core.convert.converter import convert
from mdvdom.core.convert.tables import align_cells, footer_rows, header_rows, restructure_table
from mdvdom.core.models import ASTNode


ALIGN = ["left", None, "right"]


def _cells(*values: str) -> list[dict]:
    return [{"type": "tableCell", "children": [{"type": "text", "value": v}]} for v in values]


@pytest.fixture(name="table")
def table_fixture():
    return ASTNode.model_validate({"type": "table", "align": ALIGN, "children": [
        {"type": "tableRow", "children": _cells("1", "2", "3")},
        {"type": "tableHeader", "children": _cells("a", "b", "c")},
        {"type": "tableRow", "children": _cells("4", "5", "6")},
        {"type": "tableFooter", "children": _cells("x", "y", "z")},
    ]})


def test_restructure_orders_header_body_footer(table):
    """Header first, then one body with every row, then footer."""
    out = restructure_table(table)
    assert [c.type for c in out.children] == ["tableHeader", "tableBody", "tableFooter"]
    assert len(out.children[1].children) == 2


def test_restructure_drops_unknown_children():
    """Children that are not header/row/footer are not carried over."""
    table = ASTNode.model_validate({"type": "table", "children": [{"type": "paragraph"}]})
    out = restructure_table(table)
    assert [c.type for c in out.children] == ["tableBody"]


def test_align_cells_positional():
    """Each cell gets the alignment at its index; extra cells get None."""
    row = ASTNode.model_validate({"type": "tableRow", "children": _cells("a", "b", "c", "d")})
    out = align_cells(row, ALIGN)
    assert [c.align for c in out.children] == ["left", None, "right", None]


def test_align_cells_recurses_through_groups():
    """Cells nested under grouping nodes are still aligned by sibling index."""
    header = ASTNode.model_validate({"type": "tableHeader", "children": [
        {"type": "tableRow", "children": _cells("a", "b")},
    ]})
    out = align_cells(header, ALIGN)
    assert [c.align for c in out.children[0].children] == ["left", None]


def test_header_rows_wraps_cells_as_header_cells():
    """A header's cells move into one row and become header cells."""
    header = ASTNode.model_validate({"type": "tableHeader", "children": _cells("a", "b")})
    out = header_rows(header)
    assert len(out.children) == 1
    assert out.children[0].type == "tableRow"
    assert [c.type for c in out.children[0].children] == ["tableHeaderCell", "tableHeaderCell"]


def test_footer_rows_wraps_cells():
    """A footer's cells move into one row."""
    footer = ASTNode.model_validate({"type": "tableFooter", "children": _cells("x")})
    out = footer_rows(footer)
    assert out.children[0].type == "tableRow"
    assert out.children[0].children[0].type == "tableCell"


def test_table_conversion_structure(table):
    """A converted table is thead > tr > th, tbody > tr > td, tfoot > tr > td."""
    el = convert(table)
    assert el.tag == "table"
    thead, tbody, tfoot = el.children
    assert (thead.tag, tbody.tag, tfoot.tag) == ("thead", "tbody", "tfoot")

    header_row = thead.children[0]
    assert header_row.tag == "tr"
    assert [c.tag for c in header_row.children] == ["th", "th", "th"]
    assert [c.children for c in header_row.children] == [["a"], ["b"], ["c"]]

    assert len(tbody.children) == 2
    assert all(r.tag == "tr" for r in tbody.children)
    assert [c.tag for c in tfoot.children[0].children] == ["td", "td", "td"]


def test_table_cell_alignment_everywhere(table):
    """Every header, body and footer cell carries its column's alignment."""
    el = convert(table)
    thead, tbody, tfoot = el.children
    rows = [thead.children[0], *tbody.children, tfoot.children[0]]
    for row in rows:
        assert [cell.props["align"] for cell in row.children] == ALIGN


def test_body_row_count_matches_table_rows(table):
    """The body holds exactly as many rows as the table had tableRow children."""
    el = convert(table)
    row_count = sum(1 for c in table.children if c.type == "tableRow")
    assert len(el.children[1].children) == row_count
