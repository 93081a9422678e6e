"""
Read-only views over the tree-sitter Go syntax tree used by the rules.

Rules never look at raw tree-sitter node type strings directly when walking a
body; they go through classify_node(), which folds every node into one of a
small, closed set of kinds. Adding a new transparent construct needs no change
here: anything that is not a declaration, a defer or a function literal is
COMPOUND (has named children to descend through) or OTHER (a leaf).

Signatures are exposed as FunctionSignature: the declared name (None for
function literals) and the type node of every parameter declaration; a
variadic parameter contributes its whole declaration, which never matches
the *testing.T shape.
"""

from __future__ import annotations

import enum
import logging
from dataclasses import dataclass
from typing import Optional

from tree_sitter import Node as TSNode

from nodefertest.context import FUNCTION_DECLARATION_TYPES, FileContext, get_source_span

logger = logging.getLogger(__name__)

# Package and type names of the test driver records: *testing.T and *testing.B
TESTING_PACKAGE = "testing"
TESTING_TYPE_NAMES = frozenset({"T", "B"})


class NodeKind(enum.Enum):
    """Closed set of node kinds the walker dispatches on."""

    DECLARATION = "declaration"
    DEFER = "defer"
    FUNC_LITERAL = "func_literal"
    COMPOUND = "compound"
    OTHER = "other"


_KIND_BY_TYPE: dict[str, NodeKind] = {
    "function_declaration": NodeKind.DECLARATION,
    "method_declaration": NodeKind.DECLARATION,
    "defer_statement": NodeKind.DEFER,
    "func_literal": NodeKind.FUNC_LITERAL,
}


def classify_node(node: TSNode) -> NodeKind:
    """Map a tree-sitter node onto its NodeKind."""
    kind = _KIND_BY_TYPE.get(node.type)
    if kind is not None:
        return kind
    if node.named_child_count > 0:
        return NodeKind.COMPOUND
    return NodeKind.OTHER


@dataclass(frozen=True)
class FunctionSignature:
    """Name and ordered parameter type nodes of a declaration or literal."""

    name: Optional[str]
    parameter_types: tuple[TSNode, ...] = ()


def signature_of(context: FileContext, node: TSNode) -> FunctionSignature:
    """
    Build the FunctionSignature of a function/method declaration or func literal.

    A missing parameter list (malformed source) gives an empty signature.
    """
    name: Optional[str] = None
    if node.type in FUNCTION_DECLARATION_TYPES:
        name_node = node.child_by_field_name("name")
        if name_node is not None:
            name = get_source_span(context, name_node)

    params = node.child_by_field_name("parameters")
    if params is None:
        return FunctionSignature(name=name)

    types: list[TSNode] = []
    for param in params.named_children:
        if param.type == "variadic_parameter_declaration":
            # ...T is a slice of T; the whole declaration stands for its type
            types.append(param)
            continue
        if param.type != "parameter_declaration":
            continue
        type_node = param.child_by_field_name("type")
        if type_node is not None:
            types.append(type_node)
    return FunctionSignature(name=name, parameter_types=tuple(types))


def get_body(node: TSNode) -> Optional[TSNode]:
    """Return the body block of a declaration or literal, or None if absent."""
    return node.child_by_field_name("body")


def is_testing_param_type(context: FileContext, type_node: TSNode) -> bool:
    """
    True if type_node spells *testing.T or *testing.B.

    Only the literal package name "testing" is recognised; aliased imports
    are not resolved.
    """
    if type_node.type != "pointer_type" or type_node.named_child_count == 0:
        return False
    target = type_node.named_children[0]
    if target.type != "qualified_type":
        return False
    package = target.child_by_field_name("package")
    type_name = target.child_by_field_name("name")
    if package is None or type_name is None:
        return False
    return (
        get_source_span(context, package) == TESTING_PACKAGE
        and get_source_span(context, type_name) in TESTING_TYPE_NAMES
    )


def has_testing_param(context: FileContext, signature: FunctionSignature) -> bool:
    """True if any parameter of signature is *testing.T or *testing.B."""
    return any(is_testing_param_type(context, t) for t in signature.parameter_types)
