"""Reference collection: link/image definitions and footnote bodies, gathered before conversion"""

import logging
from typing import Any, Optional, Union

from mdvdom.config import Settings
from mdvdom.core.convert.converter import Converter
from mdvdom.core.models import ASTNode, Definition, Element, NodeTypeOverrides, References


logger = logging.getLogger(__name__)


def _label_footnote(node: ASTNode) -> ASTNode:
    """Copy of a footnote definition whose sole paragraph starts with "[<identifier>]: "."""
    children = node.children or []
    if len(children) != 1 or children[0].type != 'paragraph':
        return node
    paragraph = children[0]
    prefix = ASTNode(type='textNode', value=f"[{node.identifier}]: ")
    labelled = paragraph.model_copy(update={'children': [prefix, *(paragraph.children or [])]})
    return node.model_copy(update={'children': [labelled]})


def _render_footnote(converter: Converter, node: ASTNode) -> Element:
    children = [node.value] if node.value is not None else converter.convert_children(node.children)
    return Element(tag='div', props={'key': node.identifier, 'id': node.identifier}, children=children)


def walk(ast: ASTNode):
    """Yield every node in depth-first pre-order without recursing."""
    stack = [ast]
    while stack:
        node = stack.pop()
        yield node
        stack.extend(reversed(node.children or []))


def collect(
    ast: ASTNode,
    overrides: Union[NodeTypeOverrides, dict[str, Any], None] = None,
    settings: Optional[Settings] = None,
    ) -> References:
    """Gather definitions (last wins) and render footnotes in order of first definition.

    Footnote bodies are rendered once the whole tree has been walked, so
    references inside them resolve against definitions found anywhere.
    """
    definitions: dict[str, Definition] = {}
    footnotes: dict[str, ASTNode] = {}

    for node in walk(ast):
        if node.type == 'definition':
            definitions[node.identifier] = Definition(title=node.title, link=node.link)
        elif node.type == 'footnoteDefinition':
            # reassigning keeps the first position, takes the last body
            footnotes[node.identifier] = _label_footnote(node)

    converter = Converter(definitions, overrides, settings)
    rendered = [_render_footnote(converter, node) for node in footnotes.values()]
    logger.debug("Collected %d definition(s), %d footnote(s)", len(definitions), len(rendered))
    return References(definitions=definitions, footnotes=rendered)
