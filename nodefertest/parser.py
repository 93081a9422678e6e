# Tree-sitter setup and AST parsing: parse Go source code into AST trees.

import logging
from typing import Optional

import tree_sitter
from tree_sitter import Language
from tree_sitter_go import language as _go_language_capsule

logger = logging.getLogger(__name__)

# Go language grammar: wrap tree-sitter-go capsule for use with tree_sitter.Parser
_GO_LANGUAGE = Language(_go_language_capsule())


def create_parser() -> tree_sitter.Parser:
    """Create and return a Tree-sitter Parser configured for Go."""
    parser = tree_sitter.Parser(_GO_LANGUAGE)
    return parser


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse Go source bytes into an AST.

    Args:
        source: UTF-8 encoded Go source code.
        parser: Optional parser instance; if None, a new one is created.

    Returns:
        The parse tree. Check tree.root_node for errors (e.g. ERROR nodes).
    """
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.warning(
            "Parse completed with errors: root=%s",
            tree.root_node.type,
        )
    else:
        logger.debug(
            "Parse succeeded: root=%s",
            tree.root_node.type,
        )
    return tree
