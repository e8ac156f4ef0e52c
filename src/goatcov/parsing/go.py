"""Go function extraction."""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import TYPE_CHECKING

from goatcov.errors import SourceParseError
from goatcov.parsing.treesitter import (
    collect_error_ranges,
    has_parse_errors,
    node_text,
    parse_code,
)

if TYPE_CHECKING:
    import tree_sitter

logger = logging.getLogger(__name__)

_DECLARATION_TYPES = frozenset({"function_declaration", "method_declaration"})

# Node types that can hold a method receiver.
_PARAM_TYPES = frozenset({"parameter_declaration", "variadic_parameter_declaration"})


@dataclass(frozen=True, slots=True)
class SourceFunction:
    """A function or method declaration and its inclusive line span."""

    name: str
    start_line: int
    end_line: int


class GoExtractor:
    """Extract function and method declarations from Go source."""

    language = "go"

    def extract(self, source: bytes, *, filename: str = "<source>") -> list[SourceFunction]:
        """Parse *source* and return its functions in declaration order.

        Raises:
            SourceParseError: If the source has syntax errors.
        """
        root = parse_code(source, self.language).root_node
        if has_parse_errors(root):
            ranges = ", ".join(
                f"{start}" if start == end else f"{start}-{end}"
                for start, end in collect_error_ranges(root)
            )
            raise SourceParseError(f"{filename}: syntax error at line(s) {ranges or '?'}")
        functions = self.extract_functions(root)
        logger.debug("Extracted %d function(s) from %s", len(functions), filename)
        return functions

    def extract_functions(self, root: tree_sitter.Node) -> list[SourceFunction]:
        return [
            SourceFunction(
                name=self._function_name(child),
                start_line=child.start_point.row + 1,
                end_line=child.end_point.row + 1,
            )
            for child in root.children
            # Declarations without a body are implemented in assembly.
            if child.type in _DECLARATION_TYPES and child.child_by_field_name("body")
        ]

    def _function_name(self, node: tree_sitter.Node) -> str:
        name = node_text(node.child_by_field_name("name"))
        if node.type != "method_declaration":
            return name
        receiver = _receiver_type(node.child_by_field_name("receiver"))
        return f"{receiver}.{name}" if receiver else name


def _receiver_type(receiver: tree_sitter.Node | None) -> str:
    """Return ``T`` or ``(*T)`` for a method receiver, without type parameters."""
    if receiver is None:
        return ""
    type_node = next(
        (
            param.child_by_field_name("type")
            for param in receiver.named_children
            if param.type in _PARAM_TYPES
        ),
        None,
    )
    pointer = False
    while type_node is not None:
        if type_node.type == "pointer_type":
            pointer = True
            type_node = type_node.named_children[0] if type_node.named_children else None
        elif type_node.type == "parenthesized_type":
            type_node = type_node.named_children[0] if type_node.named_children else None
        elif type_node.type == "generic_type":
            type_node = type_node.child_by_field_name("type")
        else:
            break
    name = node_text(type_node)
    if not name:
        return ""
    return f"(*{name})" if pointer else name


def extract_functions(source: bytes, *, filename: str = "<source>") -> list[SourceFunction]:
    """Parse Go *source* and return its functions in declaration order."""
    return GoExtractor().extract(source, filename=filename)
