"""Node-type dispatch tables: AST type -> output tag, and AST type -> computed props"""

from typing import Any, Callable, Optional, Union

from mdvdom.core.models import ASTNode, Definition, NodeTypeOverrides


TEXT_TYPES = frozenset({'text', 'textNode'})

# Types with no output representation; conversion stops at these nodes.
NO_REPRESENTATION = frozenset({'definition', 'footnoteDefinition', 'yaml'})

DEFAULT_TAGS: dict[str, str] = {
    'blockquote':        'blockquote',
    'break':             'br',
    'code':              'pre',
    'delete':            'del',
    'emphasis':          'em',
    'footnoteReference': 'a',
    'horizontalRule':    'hr',
    'html':              'div',
    'image':             'img',
    'imageReference':    'img',
    'inlineCode':        'code',
    'link':              'a',
    'linkReference':     'a',
    'listItem':          'li',
    'paragraph':         'p',
    'root':              'div',
    'strong':            'strong',
    'table':             'table',
    'tableBody':         'tbody',
    'tableCell':         'td',
    'tableFooter':       'tfoot',
    'tableHeader':       'thead',
    'tableHeaderCell':   'th',
    'tableRow':          'tr',
    'thematicBreak':     'hr',
}

Tag = Union[str, Callable[..., Any]]
Resolver = Callable[[ASTNode], Definition]


def default_tag(node: ASTNode) -> str:
    """Built-in tag for a node; unknown types use their own type name."""
    if node.type == 'heading':
        return f"h{node.depth or 1}"
    if node.type == 'list':
        return 'ol' if node.ordered else 'ul'
    return DEFAULT_TAGS.get(node.type, node.type)


def resolve_tag(node: ASTNode, overrides: NodeTypeOverrides) -> Optional[Tag]:
    """Return the override component or built-in tag, or None if the node renders nothing."""
    if node.type in NO_REPRESENTATION:
        return None
    override = overrides.get(node.type)
    if override is not None and override.component:
        return override.component
    return default_tag(node)


def _link(node: ASTNode, resolve: Resolver) -> dict[str, Any]:
    return {'title': node.title, 'href': node.href}


def _link_reference(node: ASTNode, resolve: Resolver) -> dict[str, Any]:
    definition = resolve(node)
    return {'title': definition.title, 'href': definition.link}


def _image(node: ASTNode, resolve: Resolver) -> dict[str, Any]:
    return {'title': node.title, 'alt': node.alt, 'src': node.src}


def _image_reference(node: ASTNode, resolve: Resolver) -> dict[str, Any]:
    definition = resolve(node)
    return {'title': definition.title, 'alt': node.alt, 'src': definition.link}


def _list(node: ASTNode, resolve: Resolver) -> dict[str, Any]:
    return {'start': node.start}


def _cell(node: ASTNode, resolve: Resolver) -> dict[str, Any]:
    return {'align': node.align}


def _footnote_reference(node: ASTNode, resolve: Resolver) -> dict[str, Any]:
    return {'href': f"#{node.identifier}"}


PROPS_BUILDERS: dict[str, Callable[[ASTNode, Resolver], dict[str, Any]]] = {
    'footnoteReference': _footnote_reference,
    'image':             _image,
    'imageReference':    _image_reference,
    'link':              _link,
    'linkReference':     _link_reference,
    'list':              _list,
    'tableCell':         _cell,
    'tableHeaderCell':   _cell,
}


def compute_props(node: ASTNode, key: str, overrides: NodeTypeOverrides, resolve: Resolver) -> dict[str, Any]:
    """Build props for a node: key, computed defaults, static overrides, then dynamic overrides."""
    props: dict[str, Any] = {'key': key}
    builder = PROPS_BUILDERS.get(node.type)
    if builder is not None:
        props.update(builder(node, resolve))

    override = overrides.get(node.type)
    if override is not None:
        props.update(override.props)
        if override.dynamic_props is not None:
            props.update(override.dynamic_props(node) or {})
    return props
