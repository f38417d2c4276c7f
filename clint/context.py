# Source files and the per-translation-unit analysis context handed to rules.
# Handles reading C files from disk and exposes span/location helpers for rules.

from __future__ import annotations

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Iterable

from tree_sitter import Node as TSNode
from tree_sitter import Tree

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SourceFile:
    """A source file handle: where it came from and its raw bytes."""

    path: Path
    content: bytes

    @property
    def identifier(self) -> str:
        return str(self.path)

    @property
    def text(self) -> str:
        return self.content.decode("utf-8", errors="replace")


def read_source(path: Path) -> SourceFile:
    """Read one file from disk. Raises OSError if it cannot be read."""
    return SourceFile(path=path, content=path.read_bytes())


def load_source_files(paths: Iterable[Path]) -> list[SourceFile]:
    """
    Read several files, keeping input order.

    Unreadable or missing files are logged and left out of the result.
    """
    sources: list[SourceFile] = []
    for path in paths:
        try:
            sources.append(read_source(path))
        except OSError as e:
            logger.error("Failed to read file %s: %s", path, e)
    return sources


def _count_nodes(node: TSNode) -> int:
    """Count all descendants of node (including node itself)."""
    count = 1
    for child in node.children:
        count += _count_nodes(child)
    return count


def _count_functions(root: TSNode) -> int:
    """Count function_definition nodes under root."""
    count = 1 if root.type == "function_definition" else 0
    for child in root.children:
        count += _count_functions(child)
    return count


def count_tree_stats(root: TSNode) -> tuple[int, int]:
    """Return (total node count, function definition count) for the tree."""
    return _count_nodes(root), _count_functions(root)


class AnalysisContext:
    """
    One parsed translation unit as seen by the rules: the source file and its AST.

    Contexts are read-only. The driver builds one per unit for each lint run and
    shares it between rules (and worker threads) without locking.
    """

    def __init__(self, source_file: SourceFile, tree: Tree) -> None:
        self._source_file = source_file
        self._tree = tree

    @property
    def source_file(self) -> SourceFile:
        return self._source_file

    @property
    def tree(self) -> Tree:
        return self._tree

    @property
    def path(self) -> str:
        """File identifier used in issue locations."""
        return self._source_file.identifier

    @property
    def source(self) -> bytes:
        return self._source_file.content

    @property
    def root_node(self) -> TSNode:
        return self._tree.root_node

    def __repr__(self) -> str:
        return f"AnalysisContext({self.path!r})"


def get_source_span(context: AnalysisContext, node: TSNode) -> str:
    """
    Return the substring of context.source for the given node's byte range.

    Decodes with errors="replace" so bad UTF-8 does not crash.
    """
    return context.source[node.start_byte : node.end_byte].decode("utf-8", errors="replace")


def get_line_col(node: TSNode, one_based: bool = True) -> tuple[int, int]:
    """
    Return (line, column) for the node's start position.

    Tree-sitter uses 0-based (row, col); one_based=True converts for display.
    """
    row, col = node.start_point
    if one_based:
        return row + 1, col + 1
    return row, col
