"""Top-level orchestration: parse -> collect references -> convert -> append footnotes"""

import logging
from pathlib import Path
from typing import Any, Optional, Union

from mdvdom.config import Settings
from mdvdom.core.collect import collect
from mdvdom.core.convert.converter import Converter
from mdvdom.core.errors import MdvdomError
from mdvdom.core.models import ASTNode, Element, RenderResult, coerce_overrides
from mdvdom.core.parse import parse_file, parse_markdown


logger = logging.getLogger(__name__)


def render_ast(
    ast: Union[ASTNode, dict[str, Any]],
    node_type: Optional[dict[str, Any]] = None,
    settings: Optional[Settings] = None,
    ) -> Union[Element, str, None]:
    """Convert an already-parsed AST; collected footnotes become the root's last child.

    Raises MdvdomError subclasses for conversion failures.
    """
    if not isinstance(ast, ASTNode):
        ast = ASTNode.model_validate(ast)
    settings = settings or Settings()
    overrides = coerce_overrides(node_type)

    refs = collect(ast, overrides, settings)
    root = Converter(refs.definitions, overrides, settings).convert(ast)

    if refs.footnotes and isinstance(root, Element):
        root.children.append(Element(
            tag=settings.footnotes_tag,
            props={'key': 'footnotes'},
            children=list(refs.footnotes),
        ))
    return root


def render(
    markdown: str,
    node_type: Optional[dict[str, Any]] = None,
    position: Optional[bool] = None,
    settings: Optional[Settings] = None,
    **parser_options: Any,
    ) -> RenderResult:
    """Render markdown text to an element tree.

    position defaults to settings.position; any other keyword option is
    passed to the parser untouched. Failures come back as RenderResult.error.
    """
    settings = settings or Settings()
    if position is None:
        position = settings.position
    try:
        ast = parse_markdown(markdown, position=position, parser_config=settings.parser_config, **parser_options)
        element = render_ast(ast, node_type, settings)
    except MdvdomError as e:
        logger.debug("Render failed: %s", e)
        return RenderResult(error=e)
    return RenderResult(element=element)


def render_file(
    path: Path,
    node_type: Optional[dict[str, Any]] = None,
    settings: Optional[Settings] = None,
    ) -> RenderResult:
    """Render a markdown file; errors are tagged with the source path."""
    settings = settings or Settings()
    try:
        ast = parse_file(path, position=settings.position, parser_config=settings.parser_config)
        element = render_ast(ast, node_type, settings)
    except MdvdomError as e:
        return RenderResult(error=e)
    return RenderResult(element=element)
