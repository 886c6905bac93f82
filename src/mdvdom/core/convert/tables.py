"""Pure table restructuring: body grouping, header/footer rows, and column alignment"""

from typing import Optional

from mdvdom.core.models import ASTNode


CELL_TYPES = frozenset({'tableCell', 'tableHeaderCell'})


def align_cells(node: ASTNode, alignment: list[Optional[str]]) -> ASTNode:
    """Return a copy of node whose cells carry the alignment of their column.

    A cell's column is its index among its siblings; grouping nodes between
    node and its cells are copied and searched the same way.
    """
    def _align(child: ASTNode, index: int) -> ASTNode:
        if child.type in CELL_TYPES:
            value = alignment[index] if index < len(alignment) else None
            return child.model_copy(update={'align': value})
        if child.children:
            return align_cells(child, alignment)
        return child

    return node.model_copy(update={'children': [_align(c, i) for i, c in enumerate(node.children or [])]})


def restructure_table(table: ASTNode) -> ASTNode:
    """Regroup a table's children as header(s), one tableBody holding every row, then footer(s).

    Children of any other type are dropped.
    """
    alignment = table.align if isinstance(table.align, list) else []
    headers: list[ASTNode] = []
    rows: list[ASTNode] = []
    footers: list[ASTNode] = []

    for child in table.children or []:
        if child.type == 'tableHeader':
            headers.append(align_cells(child, alignment))
        elif child.type == 'tableRow':
            rows.append(align_cells(child, alignment))
        elif child.type == 'tableFooter':
            footers.append(align_cells(child, alignment))

    body = ASTNode(type='tableBody', children=rows)
    return table.model_copy(update={'children': [*headers, body, *footers]})


def _as_header_cell(node: ASTNode) -> ASTNode:
    if node.type == 'tableCell':
        return node.model_copy(update={'type': 'tableHeaderCell'})
    return node


def header_rows(header: ASTNode) -> ASTNode:
    """Wrap a header's cells in a single tableRow and turn them into header cells."""
    children = header.children or []
    if children and all(c.type == 'tableRow' for c in children):
        rows = [r.model_copy(update={'children': [_as_header_cell(c) for c in r.children or []]}) for r in children]
    else:
        rows = [ASTNode(type='tableRow', children=[_as_header_cell(c) for c in children])]
    return header.model_copy(update={'children': rows})


def footer_rows(footer: ASTNode) -> ASTNode:
    """Wrap a footer's cells in a single tableRow."""
    children = footer.children or []
    if children and all(c.type == 'tableRow' for c in children):
        return footer
    return footer.model_copy(update={'children': [ASTNode(type='tableRow', children=children)]})
