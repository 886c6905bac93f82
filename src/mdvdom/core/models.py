"""Data models for the AST input, the element tree output, and per-call state"""

from dataclasses import dataclass, field
from typing import Any, Callable, Optional, Union

from pydantic import BaseModel, ConfigDict, Field

from mdvdom.core.errors import MdvdomError


class ASTNode(BaseModel):
    """A typed markdown AST node; unknown extension fields are kept as extras."""
    model_config = ConfigDict(extra="allow")

    type: str
    children: Optional[list["ASTNode"]] = None
    value: Optional[str] = None
    depth: Optional[int] = None         # heading level (1-6)
    ordered: Optional[bool] = None
    start: Optional[int] = None
    identifier: Optional[str] = None    # reference/definition key, case-sensitive
    label: Optional[str] = None
    title: Optional[str] = None
    href: Optional[str] = None
    src: Optional[str] = None
    link: Optional[str] = None          # definition target
    alt: Optional[str] = None
    lang: Optional[str] = None
    align: Union[list[Optional[str]], str, None] = None    # table: per column; cell: its column
    checked: Optional[bool] = None      # None = not a task item
    data: Optional[dict[str, Any]] = None
    position: Optional[dict[str, Any]] = None


class Element(BaseModel):
    """A renderable output node; tag may be a render function from an override."""
    tag: Union[str, Callable[..., Any]]
    props: dict[str, Any] = Field(default_factory=dict)
    children: list[Union["Element", str]] = Field(default_factory=list)


class Definition(BaseModel):
    """Target of a link/image reference definition."""
    title: Optional[str] = None
    link: Optional[str] = None


class NodeTypeOverride(BaseModel):
    """Caller customization for one AST node type."""
    model_config = ConfigDict(populate_by_name=True)

    component: Union[str, Callable[..., Any], None] = None
    props: dict[str, Any] = Field(default_factory=dict)
    dynamic_props: Optional[Callable[[ASTNode], dict[str, Any]]] = Field(default=None, alias="dynamicProps")


NodeTypeOverrides = dict[str, NodeTypeOverride]


def coerce_overrides(node_type: Optional[dict[str, Any]]) -> NodeTypeOverrides:
    """Validate a caller-supplied mapping of node type -> override (dicts or models)."""
    if not node_type:
        return {}
    return {
        name: spec if isinstance(spec, NodeTypeOverride) else NodeTypeOverride.model_validate(spec)
        for name, spec in node_type.items()
    }


@dataclass
class References:
    """Collector output: definitions table plus rendered footnotes in document order."""
    definitions: dict[str, Definition] = field(default_factory=dict)
    footnotes:   list[Element] = field(default_factory=list)


@dataclass(frozen=True)
class RenderResult:
    """Explicit success/failure result of a top-level render call."""
    element: Union[Element, str, None] = None
    error:   Optional[MdvdomError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def unwrap(self) -> Union[Element, str, None]:
        """Return the element tree, or raise the captured error."""
        if self.error is not None:
            raise self.error
        return self.element
