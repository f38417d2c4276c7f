# Tree-sitter setup and batch parsing: turn source files into parsed units and diagnostics.

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from enum import Enum
from typing import Iterator, Optional, Sequence

import tree_sitter
from tree_sitter import Language
from tree_sitter import Node as TSNode
from tree_sitter_c import language as _c_language_capsule

from clint.context import SourceFile, count_tree_stats

logger = logging.getLogger(__name__)

_C_LANGUAGE = Language(_c_language_capsule())


class DiagnosticLevel(str, Enum):
    FATAL = "fatal"
    ERROR = "error"
    WARNING = "warning"


class ParseStatus(Enum):
    SUCCESS = "success"
    FAILURE = "failure"


@dataclass(frozen=True)
class DiagnosticLocation:
    """
    Where a parser diagnostic points. 1-based, but unlike an issue Location
    the values are not bounded; out-of-range values are clamped when rendered.
    """

    path: str
    line: int
    column: int

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


@dataclass(frozen=True)
class Diagnostic:
    """A parser-level problem. Distinct from lint issues; only shown on the terminal."""

    level: DiagnosticLevel
    location: DiagnosticLocation
    message: str


@dataclass(frozen=True)
class ParsedUnit:
    """One source file after parsing. tree is None when there was nothing to parse."""

    source_file: SourceFile
    tree: Optional[tree_sitter.Tree]


@dataclass
class ParseResult:
    status: ParseStatus
    units: list[ParsedUnit] = field(default_factory=list)
    diagnostics: list[Diagnostic] = field(default_factory=list)

    @property
    def succeeded(self) -> bool:
        return self.status is ParseStatus.SUCCESS


def get_c_language() -> Language:
    """Return the Tree-sitter Language object for C."""
    return _C_LANGUAGE


def create_parser() -> tree_sitter.Parser:
    """Create and return a Tree-sitter Parser configured for C."""
    return tree_sitter.Parser(_C_LANGUAGE)


def parse_bytes(
    source: bytes,
    parser: Optional[tree_sitter.Parser] = None,
) -> tree_sitter.Tree:
    """
    Parse C source bytes into an AST.

    The returned tree may contain ERROR and MISSING nodes; check
    tree.root_node.has_error.
    """
    if parser is None:
        parser = create_parser()
    tree = parser.parse(source)
    if tree.root_node.has_error:
        logger.warning("Parse completed with errors: root=%s", tree.root_node.type)
    else:
        logger.debug("Parse succeeded: root=%s", tree.root_node.type)
    return tree


def _iter_problem_nodes(node: TSNode) -> Iterator[TSNode]:
    """Yield ERROR and MISSING nodes, without descending into ERROR subtrees."""
    if node.is_missing or node.type == "ERROR":
        yield node
        return
    if not node.has_error:
        return
    for child in node.children:
        yield from _iter_problem_nodes(child)


def collect_diagnostics(source_file: SourceFile, tree: tree_sitter.Tree) -> list[Diagnostic]:
    """Translate the tree's ERROR and MISSING nodes into diagnostics."""
    diagnostics: list[Diagnostic] = []
    for node in _iter_problem_nodes(tree.root_node):
        row, col = node.start_point
        location = DiagnosticLocation(path=source_file.identifier, line=row + 1, column=col + 1)
        if node.is_missing:
            diagnostics.append(
                Diagnostic(DiagnosticLevel.WARNING, location, f"missing '{node.type}'")
            )
        else:
            diagnostics.append(Diagnostic(DiagnosticLevel.ERROR, location, "unexpected syntax"))
    return diagnostics


def parse_sources(
    source_files: Sequence[SourceFile],
    parser: Optional[tree_sitter.Parser] = None,
) -> ParseResult:
    """
    Parse a batch of source files.

    Every file yields a ParsedUnit. Files with no content get tree=None.
    The batch fails if any file produced an error-level diagnostic; MISSING
    tokens that tree-sitter recovered from are reported as warnings only.
    """
    if parser is None:
        parser = create_parser()

    units: list[ParsedUnit] = []
    diagnostics: list[Diagnostic] = []
    for source_file in source_files:
        if not source_file.content.strip():
            logger.info("Nothing to parse in %s", source_file.identifier)
            units.append(ParsedUnit(source_file=source_file, tree=None))
            continue

        tree = parse_bytes(source_file.content, parser=parser)
        diagnostics.extend(collect_diagnostics(source_file, tree))
        node_count, func_count = count_tree_stats(tree.root_node)
        logger.info(
            "Parsed %s: %d nodes, %d function(s)",
            source_file.identifier,
            node_count,
            func_count,
        )
        units.append(ParsedUnit(source_file=source_file, tree=tree))

    failed = any(
        d.level in (DiagnosticLevel.FATAL, DiagnosticLevel.ERROR) for d in diagnostics
    )
    status = ParseStatus.FAILURE if failed else ParseStatus.SUCCESS
    return ParseResult(status=status, units=units, diagnostics=diagnostics)
