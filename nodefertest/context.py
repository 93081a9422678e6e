# Per-file analysis state: path, source bytes and the Go syntax tree, plus the
# small helpers rules use to turn nodes into text and positions.

import logging
from pathlib import Path
from typing import Optional

from nodefertest.parser import create_parser, parse_bytes
from tree_sitter import Parser, Tree
from tree_sitter import Node as TSNode

logger = logging.getLogger(__name__)

# Top-level Go declarations that carry a name, a parameter list and a body
FUNCTION_DECLARATION_TYPES = frozenset({"function_declaration", "method_declaration"})


def count_tree_stats(root: TSNode) -> tuple[int, int]:
    """
    Return (node count, top-level function/method declaration count).

    Nodes are counted with an explicit stack; generated Go can nest far deeper
    than the recursion limit.
    """
    nodes = 0
    stack = [root]
    while stack:
        node = stack.pop()
        nodes += 1
        stack.extend(node.children)
    functions = sum(1 for child in root.named_children if child.type in FUNCTION_DECLARATION_TYPES)
    return nodes, functions


class FileContext:
    """
    One parsed Go file as seen by the rules.

    has_parse_errors is set when tree-sitter had to insert ERROR/MISSING nodes;
    rules still run on whatever part of the tree is intact.
    """

    def __init__(
        self,
        path: Path,
        source: bytes,
        tree: Tree,
        *,
        has_parse_errors: bool = False,
    ) -> None:
        self.path = path
        self.source = source
        self.tree = tree
        self.has_parse_errors = has_parse_errors

    @property
    def root_node(self) -> TSNode:
        return self.tree.root_node

    def declarations(self) -> list[TSNode]:
        """Top-level function and method declarations, in source order."""
        return [
            child
            for child in self.root_node.named_children
            if child.type in FUNCTION_DECLARATION_TYPES
        ]


def get_source_span(context: FileContext, node: TSNode) -> str:
    """Source text covered by node; invalid UTF-8 is replaced, not raised."""
    return context.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def get_line_col(node: TSNode, one_based: bool = True) -> tuple[int, int]:
    """(line, column) of node's start, 1-based unless one_based is False."""
    row, col = node.start_point
    if one_based:
        return row + 1, col + 1
    return row, col


def create_context(
    path: Path,
    parser: Optional[Parser] = None,
) -> Optional[FileContext]:
    """
    Read and parse one Go file.

    Returns None (and logs an error) when the file cannot be read. A file with
    syntax errors still yields a context, flagged with has_parse_errors.
    """
    if parser is None:
        parser = create_parser()

    try:
        source = path.read_bytes()
    except OSError as e:
        logger.error("Failed to read file %s: %s", path, e)
        return None

    tree = parse_bytes(source, parser=parser)
    has_errors = tree.root_node.has_error
    if has_errors:
        logger.warning("File %s parsed with syntax errors; AST may be incomplete", path)

    node_count, func_count = count_tree_stats(tree.root_node)
    logger.info(
        "Parsed %s: %d nodes, %d function(s)%s",
        path,
        node_count,
        func_count,
        " (with parse errors)" if has_errors else "",
    )

    return FileContext(path=path, source=source, tree=tree, has_parse_errors=has_errors)


def load_contexts(
    paths: list[Path],
    parser: Optional[Parser] = None,
) -> list[FileContext]:
    """Parse every readable file in paths, sharing one parser; unreadable files are dropped."""
    if parser is None:
        parser = create_parser()

    contexts: list[FileContext] = []
    for path in paths:
        ctx = create_context(path, parser=parser)
        if ctx is not None:
            contexts.append(ctx)
    return contexts
