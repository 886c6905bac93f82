"""Exception types raised while parsing and converting markdown"""


class MdvdomError(Exception):
    """Base class for all mdvdom errors."""


class ParseError(MdvdomError):
    """The markdown parser failed or was misconfigured."""

    def __init__(self, message: str, source: str | None = None):
        self.message = message
        self.source = source
        super().__init__(f"{source}: {message}" if source else message)


class UnresolvedReferenceError(MdvdomError):
    """A linkReference/imageReference names an identifier with no definition."""

    def __init__(self, node_type: str, identifier: str | None):
        self.node_type = node_type
        self.identifier = identifier
        super().__init__(f"Unresolved reference in {node_type}: {identifier!r} has no definition")


class MaxDepthExceededError(MdvdomError):
    """The AST nests deeper than Settings.max_depth."""

    def __init__(self, max_depth: int):
        self.max_depth = max_depth
        super().__init__(f"Document nesting exceeds max_depth={max_depth}")
