"""File discovery and markdown-it parsing into the AST node schema"""

import logging
import re
from pathlib import Path
from typing import Any, Callable, Optional

import yaml
from markdown_it import MarkdownIt
from markdown_it.tree import SyntaxTreeNode
from mdit_py_plugins.footnote import footnote_plugin
from mdit_py_plugins.front_matter import front_matter_plugin

from mdvdom.core.errors import ParseError
from mdvdom.core.models import ASTNode


logger = logging.getLogger(__name__)

MD_EXTENSIONS = {'.md', '.mdx'}
TASK_RE = re.compile(r'^\[([ xX])\]\s+')
ALIGN_RE = re.compile(r'text-align:\s*(\w+)')


def _make_parser(preset: str, options: Optional[dict[str, Any]] = None) -> MarkdownIt:
    """Build a MarkdownIt instance for the given preset name, with GFM tables, footnotes and front matter."""
    md = MarkdownIt(preset, options_update={"linkify": False, **(options or {})})
    md.enable(["table", "strikethrough"])
    md.use(front_matter_plugin).use(footnote_plugin)
    # definitions stay where they appear in the source, referenced or not
    md.disable("footnote_tail")
    return md


def _load_front_matter(text: str) -> dict[str, Any]:
    """Parse a YAML front matter block into a mapping."""
    try:
        fm = yaml.safe_load(text) or {}
    except yaml.YAMLError as e:
        raise ParseError(f"Invalid YAML frontmatter: {e}") from e
    if not isinstance(fm, dict):
        raise ParseError(f"Invalid YAML frontmatter: expected a mapping, got {type(fm).__name__}")
    return fm


def _strip_newline(text: str) -> str:
    return text[:-1] if text.endswith('\n') else text


def _cell_align(cell: SyntaxTreeNode) -> Optional[str]:
    m = ALIGN_RE.search(str(cell.attrs.get('style', '')))
    return m.group(1) if m else None


def _footnote_label(meta: dict) -> str:
    """Footnote identifier; inline footnotes have no label and use their 1-based number."""
    return meta.get('label') or str(meta.get('id', 0) + 1)


class TreeBuilder:
    """Walks a markdown-it SyntaxTreeNode and builds ASTNodes.

    Each handler returns a list so that wrapper nodes (inline) can splice
    their children into the parent.
    """

    def __init__(self, position: bool = False):
        self.position = position
        self._handlers: dict[str, Callable[[SyntaxTreeNode], list[ASTNode]]] = {
            'inline':             self._splice,
            'heading':            self._heading,
            'paragraph':          self._container('paragraph'),
            'blockquote':         self._container('blockquote'),
            'bullet_list':        self._list,
            'ordered_list':       self._list,
            'list_item':          self._list_item,
            'fence':              self._code,
            'code_block':         self._code,
            'html_block':         self._html,
            'html_inline':        self._html,
            'hr':                 lambda n: [self._make(n, 'horizontalRule')],
            'table':              self._table,
            'front_matter':       self._front_matter,
            'footnote_reference': self._footnote,
            'footnote_ref':       self._footnote_ref,
            'text':               lambda n: [ASTNode(type='text', value=n.content)],
            'softbreak':          lambda n: [ASTNode(type='text', value='\n')],
            'hardbreak':          lambda n: [ASTNode(type='break')],
            'em':                 self._container('emphasis'),
            'strong':             self._container('strong'),
            's':                  self._container('delete'),
            'code_inline':        lambda n: [ASTNode(type='inlineCode', value=n.content)],
            'link':               self._link,
            'image':              self._image,
        }

    def build(self, tree: SyntaxTreeNode, env: dict[str, Any]) -> ASTNode:
        """Build the root node.

        Reference definitions resolved by markdown-it are appended as definition
        nodes, and inline footnotes (``^[...]``) as footnote definitions.
        """
        children = self.convert_all(tree.children)
        for label, ref in (env.get('references') or {}).items():
            children.append(ASTNode(
                type='definition', identifier=label, label=label,
                link=ref.get('href'), title=ref.get('title') or None,
            ))
        children.extend(self._inline_footnotes(env))
        return ASTNode(type='root', children=children)

    def _inline_footnotes(self, env: dict[str, Any]) -> list[ASTNode]:
        entries = (env.get('footnotes') or {}).get('list') or {}
        if isinstance(entries, list):
            entries = dict(enumerate(entries))
        out = []
        for footnote_id, entry in sorted(entries.items()):
            if not entry or 'tokens' not in entry:
                continue
            label = _footnote_label({'id': footnote_id})
            body = self.convert_all(SyntaxTreeNode(entry['tokens']).children)
            out.append(ASTNode(
                type='footnoteDefinition', identifier=label, label=label,
                children=[ASTNode(type='paragraph', children=body)],
            ))
        return out

    def convert_all(self, nodes: list[SyntaxTreeNode]) -> list[ASTNode]:
        """Convert sibling nodes, merging adjacent text runs."""
        out: list[ASTNode] = []
        for n in nodes:
            for node in self._convert(n):
                if node.type == 'text' and out and out[-1].type == 'text':
                    out[-1] = out[-1].model_copy(update={'value': (out[-1].value or '') + (node.value or '')})
                else:
                    out.append(node)
        return out

    def _convert(self, n: SyntaxTreeNode) -> list[ASTNode]:
        handler = self._handlers.get(n.type)
        if handler is not None:
            return handler(n)
        # plugin token types pass through under their own name
        return [self._make(n, n.type, value=n.content or None, children=self.convert_all(n.children) or None)]

    def _make(self, n: SyntaxTreeNode, type_: str, **fields: Any) -> ASTNode:
        if self.position and n.map:
            start, end = n.map
            fields['position'] = {'start': {'line': start + 1}, 'end': {'line': end}}
        return ASTNode(type=type_, **fields)

    # --- handlers ---

    def _splice(self, n: SyntaxTreeNode) -> list[ASTNode]:
        return self.convert_all(n.children)

    def _container(self, type_: str) -> Callable[[SyntaxTreeNode], list[ASTNode]]:
        def handler(n: SyntaxTreeNode) -> list[ASTNode]:
            return [self._make(n, type_, children=self.convert_all(n.children))]
        return handler

    def _heading(self, n: SyntaxTreeNode) -> list[ASTNode]:
        return [self._make(n, 'heading', depth=int(n.tag[1:]), children=self.convert_all(n.children))]

    def _list(self, n: SyntaxTreeNode) -> list[ASTNode]:
        ordered = n.type == 'ordered_list'
        start = int(n.attrs.get('start', 1)) if ordered else None
        return [self._make(n, 'list', ordered=ordered, start=start, children=self.convert_all(n.children))]

    def _list_item(self, n: SyntaxTreeNode) -> list[ASTNode]:
        children = self.convert_all(n.children)
        checked = None
        first = children[0] if children else None
        if first is not None and first.type == 'paragraph' and first.children and first.children[0].type == 'text':
            text = first.children[0]
            m = TASK_RE.match(text.value or '')
            if m:
                checked = m.group(1) != ' '
                rest = text.model_copy(update={'value': text.value[m.end():]})
                children[0] = first.model_copy(update={'children': [rest, *first.children[1:]]})
        return [self._make(n, 'listItem', checked=checked, children=children)]

    def _code(self, n: SyntaxTreeNode) -> list[ASTNode]:
        info = (n.info or '').split()
        lang = info[0] if info and n.type == 'fence' else None
        return [self._make(n, 'code', lang=lang, value=_strip_newline(n.content))]

    def _html(self, n: SyntaxTreeNode) -> list[ASTNode]:
        return [self._make(n, 'html', value=_strip_newline(n.content))]

    def _table(self, n: SyntaxTreeNode) -> list[ASTNode]:
        align: list[Optional[str]] = []
        children: list[ASTNode] = []
        for section in n.children:
            for tr in section.children:
                cells = [self._make(c, 'tableCell', children=self.convert_all(c.children)) for c in tr.children]
                if section.type == 'thead':
                    align = [_cell_align(c) for c in tr.children]
                    children.append(self._make(section, 'tableHeader', children=cells))
                else:
                    children.append(self._make(tr, 'tableRow', children=cells))
        return [self._make(n, 'table', align=align, children=children)]

    def _front_matter(self, n: SyntaxTreeNode) -> list[ASTNode]:
        return [self._make(n, 'yaml', value=n.content, data=_load_front_matter(n.content))]

    def _footnote(self, n: SyntaxTreeNode) -> list[ASTNode]:
        label = _footnote_label(n.meta or {})
        return [self._make(n, 'footnoteDefinition', identifier=label, label=label,
                           children=self.convert_all(n.children))]

    def _footnote_ref(self, n: SyntaxTreeNode) -> list[ASTNode]:
        label = _footnote_label(n.meta or {})
        return [ASTNode(type='footnoteReference', identifier=label, label=label)]

    def _link(self, n: SyntaxTreeNode) -> list[ASTNode]:
        return [ASTNode(
            type='link', href=n.attrs.get('href'), title=n.attrs.get('title'),
            children=self.convert_all(n.children),
        )]

    def _image(self, n: SyntaxTreeNode) -> list[ASTNode]:
        return [ASTNode(type='image', src=n.attrs.get('src'), alt=n.content, title=n.attrs.get('title'))]


def discover_files(path: Path) -> list[Path]:
    """Return sorted .md/.mdx files under path, or [path] if a single file."""
    if path.is_file():
        return [path] if path.suffix in MD_EXTENSIONS else []
    return sorted(p for p in path.rglob('*') if p.suffix in MD_EXTENSIONS)


def parse_markdown(
    text: str,
    position: bool = False,
    parser_config: str = 'gfm-like',
    **options: Any,
    ) -> ASTNode:
    """Parse markdown text into a root ASTNode; extra options go to markdown-it as options_update."""
    try:
        md = _make_parser(parser_config, options)
        env: dict[str, Any] = {}
        tree = SyntaxTreeNode(md.parse(text, env))
        root = TreeBuilder(position=position).build(tree, env)
    except ParseError:
        raise
    except Exception as e:
        raise ParseError(f"Failed to parse markdown: {e}") from e
    logger.debug("Parsed markdown into %d top-level node(s)", len(root.children or []))
    return root


def parse_file(path: Path, position: bool = False, parser_config: str = 'gfm-like') -> ASTNode:
    """Parse a single markdown file into a root ASTNode."""
    raw = path.read_text(encoding='utf-8')
    try:
        return parse_markdown(raw, position=position, parser_config=parser_config)
    except ParseError as e:
        raise ParseError(e.message, source=str(path)) from e
