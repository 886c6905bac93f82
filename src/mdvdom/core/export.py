"""Export: serialize element trees to HTML or JSON and write output files"""

import html
import json
from pathlib import Path
from typing import Any, Union

from mdvdom.core.models import Element


VOID_TAGS = frozenset({'br', 'hr', 'img', 'input'})

# Props consumed by the serializer itself rather than emitted as attributes.
_INTERNAL_PROPS = frozenset({'key', 'innerHTML'})


def _attrs(props: dict[str, Any]) -> str:
    parts = []
    for name, value in props.items():
        if name in _INTERNAL_PROPS or value is None or value is False:
            continue
        if name == 'align':
            name, value = 'style', f"text-align:{value}"
        if value is True:
            parts.append(f" {name}")
        else:
            parts.append(f' {name}="{html.escape(str(value))}"')
    return ''.join(parts)


def to_html(node: Union[Element, str, None]) -> str:
    """Serialize an element tree to HTML.

    Text is escaped; an innerHTML prop is emitted verbatim in place of
    children. Callable tags are invoked as tag(props, children) and their
    result serialized.
    """
    if node is None:
        return ''
    if isinstance(node, str):
        return html.escape(node, quote=False)
    if callable(node.tag):
        return to_html(node.tag(node.props, node.children))

    attrs = _attrs(node.props)
    if node.tag in VOID_TAGS:
        return f"<{node.tag}{attrs}>"
    inner = node.props.get('innerHTML')
    body = inner if inner is not None else ''.join(to_html(c) for c in node.children)
    return f"<{node.tag}{attrs}>{body}</{node.tag}>"


def to_dict(node: Union[Element, str, None]) -> Any:
    """Plain-data form of an element tree; callable tags are named by __name__."""
    if node is None or isinstance(node, str):
        return node
    tag = node.tag if isinstance(node.tag, str) else getattr(node.tag, '__name__', repr(node.tag))
    return {'tag': tag, 'props': dict(node.props), 'children': [to_dict(c) for c in node.children]}


def to_json(node: Union[Element, str, None], indent: int = 2) -> str:
    return json.dumps(to_dict(node), indent=indent, ensure_ascii=False, default=str)


def write_output(node: Union[Element, str, None], output_dir: Path, stem: str, fmt: str = 'json') -> Path:
    """Write a rendered tree as output_dir/<stem>.<fmt> and return the path."""
    output_dir.mkdir(parents=True, exist_ok=True)
    out_path = output_dir / f"{stem}.{fmt}"
    text = to_html(node) if fmt == 'html' else to_json(node)
    out_path.write_text(text, encoding='utf-8')
    return out_path
