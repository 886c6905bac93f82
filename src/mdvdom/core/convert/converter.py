"""Recursive AST -> Element conversion with per-call state"""

import logging
from typing import Any, Optional, Union

from mdvdom.config import Settings
from mdvdom.core.convert.tables import footer_rows, header_rows, restructure_table
from mdvdom.core.convert.tags import TEXT_TYPES, compute_props, resolve_tag
from mdvdom.core.errors import MaxDepthExceededError, UnresolvedReferenceError
from mdvdom.core.models import ASTNode, Definition, Element, NodeTypeOverrides, coerce_overrides


logger = logging.getLogger(__name__)

Converted = Union[Element, str, None]


def coerce_definitions(definitions: Optional[dict[str, Any]]) -> dict[str, Definition]:
    """Accept Definition models or plain {title, link} dicts."""
    return {
        k: v if isinstance(v, Definition) else Definition.model_validate(v)
        for k, v in (definitions or {}).items()
    }


class Converter:
    """Converts one document's AST into an element tree.

    Holds the definitions table and node-type overrides for a single call, so
    separate documents never share working state.
    """

    def __init__(
        self,
        definitions: Optional[dict[str, Any]] = None,
        overrides: Union[NodeTypeOverrides, dict[str, Any], None] = None,
        settings: Optional[Settings] = None,
        ):
        self.definitions = coerce_definitions(definitions)
        self.overrides = coerce_overrides(overrides)
        self.settings = settings or Settings()
        self._depth = 0
        self._handlers = {
            'code':              self._code,
            'listItem':          self._list_item,
            'html':              self._html,
            'table':             self._table,
            'tableHeader':       self._table_header,
            'tableFooter':       self._table_footer,
            'footnoteReference': self._footnote_reference,
        }

    def convert(self, node: ASTNode, index: Any = None) -> Converted:
        """Convert node (and its subtree); index becomes the element key.

        Raises MaxDepthExceededError when nesting passes settings.max_depth,
        or when the interpreter's own recursion limit is reached first.
        """
        if node.type in TEXT_TYPES:
            return node.value

        key = '0' if index is None else str(index)
        outermost = self._depth == 0
        self._depth += 1
        try:
            if self._depth > self.settings.max_depth:
                raise MaxDepthExceededError(self.settings.max_depth)
            handler = self._handlers.get(node.type, self._generic)
            return handler(node, key)
        except RecursionError as e:
            if not outermost:
                raise
            raise MaxDepthExceededError(self.settings.max_depth) from e
        finally:
            self._depth -= 1

    def convert_children(self, children: Optional[list[ASTNode]]) -> list[Union[Element, str]]:
        """Convert each child keyed by its position, dropping nodes that render nothing."""
        out: list[Union[Element, str]] = []
        for i, child in enumerate(children or []):
            converted = self.convert(child, i)
            if converted is not None:
                out.append(converted)
        return out

    # --- special cases ---

    def _code(self, node: ASTNode, key: str) -> Element:
        code_props = {'class': f"lang-{node.lang}"} if node.lang else {}
        code = Element(tag='code', props=code_props, children=[node.value or ''])
        return Element(tag=resolve_tag(node, self.overrides), props=self._props(node, key), children=[code])

    def _list_item(self, node: ASTNode, key: str) -> Converted:
        if node.checked is None:
            return self._generic(node, key)
        checkbox = Element(
            tag='input',
            props={'key': 'checkbox', 'type': 'checkbox', 'checked': node.checked, 'disabled': True},
        )
        return Element(
            tag=resolve_tag(node, self.overrides),
            props=self._props(node, key),
            children=[checkbox, *self.convert_children(node.children)],
        )

    def _html(self, node: ASTNode, key: str) -> Element:
        props = self._props(node, key)
        props['innerHTML'] = node.value or ''
        return Element(tag=resolve_tag(node, self.overrides), props=props)

    def _table(self, node: ASTNode, key: str) -> Converted:
        return self._generic(restructure_table(node), key)

    def _table_header(self, node: ASTNode, key: str) -> Converted:
        return self._generic(header_rows(node), key)

    def _table_footer(self, node: ASTNode, key: str) -> Converted:
        return self._generic(footer_rows(node), key)

    def _footnote_reference(self, node: ASTNode, key: str) -> Converted:
        sup = ASTNode(type='sup', value=node.identifier)
        return self._generic(node.model_copy(update={'children': [sup]}), key)

    # --- generic fallback ---

    def _generic(self, node: ASTNode, key: str) -> Converted:
        tag = resolve_tag(node, self.overrides)
        if tag is None:
            return None
        children = node.children or []
        out: list[Union[Element, str]] = []
        if node.value is not None:
            out.append(node.value)
        elif len(children) == 1 and children[0].type in TEXT_TYPES:
            # a lone text child becomes a plain string, no wrapper element
            if children[0].value is not None:
                out.append(children[0].value)
        else:
            # children are converted here rather than via convert_children
            # to keep two stack frames per nesting level
            for i, child in enumerate(children):
                converted = self.convert(child, i)
                if converted is not None:
                    out.append(converted)
        return Element(tag=tag, props=self._props(node, key), children=out)

    def _props(self, node: ASTNode, key: str) -> dict[str, Any]:
        return compute_props(node, key, self.overrides, self._resolve)

    def _resolve(self, node: ASTNode) -> Definition:
        """Look up a *Reference node's definition, applying the unresolved-reference policy."""
        definition = self.definitions.get(node.identifier)
        if definition is not None:
            return definition
        if self.settings.strict_references:
            raise UnresolvedReferenceError(node.type, node.identifier)
        logger.warning("Unresolved %s identifier %r; rendering without target", node.type, node.identifier)
        return Definition()


def convert(
    node: Union[ASTNode, dict[str, Any]],
    definitions: Optional[dict[str, Any]] = None,
    overrides: Union[NodeTypeOverrides, dict[str, Any], None] = None,
    index: Any = None,
    settings: Optional[Settings] = None,
    ) -> Converted:
    """Convert a single AST node (model or plain dict) with a fresh Converter."""
    if not isinstance(node, ASTNode):
        node = ASTNode.model_validate(node)
    return Converter(definitions, overrides, settings).convert(node, index)
