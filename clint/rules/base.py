# Rule interface (abstract base class): defines the contract all rules must implement.
# Concrete rules (unsafe_functions, use_after_free, etc.) subclass Rule and implement inspect().

from __future__ import annotations

import logging
from abc import ABC, abstractmethod
from typing import Any, Mapping, Optional

from tree_sitter import Node as TSNode

from clint.context import AnalysisContext, get_line_col, get_source_span
from clint.findings.ledger import IssueLedger
from clint.findings.models import Issue, Location, Severity

logger = logging.getLogger(__name__)


class Rule(ABC):
    """
    Abstract base class for all analysis rules.

    Subclasses must define:
    - id: str: unique, stable rule identifier (e.g. "use-after-free")
    - name: str: human-readable rule name
    - category: str: free-form grouping tag (e.g. "memory", "size")
    - severity: Severity: severity of the issues the rule records
    - inspect(context, ledger, configurations): analyze one translation unit

    The driver calls inspect() once per (translation unit, rule) pair, possibly
    from several threads at once, so a rule must not keep per-file state on self.
    """

    id: str
    name: str
    category: str
    severity: Severity
    description: str = ""

    @abstractmethod
    def inspect(
        self,
        context: AnalysisContext,
        ledger: IssueLedger,
        configurations: Optional[Mapping[str, Any]] = None,
    ) -> None:
        """
        Analyze one translation unit and record any issues into the ledger.

        Args:
            context: The parsed unit (source file and AST). Read-only.
            ledger: Where issues are recorded. The only side effect of a rule.
            configurations: Rule options keyed by rule id; see options().
        """
        ...

    def options(self, configurations: Optional[Mapping[str, Any]]) -> Mapping[str, Any]:
        """This rule's own options: configurations[self.id], or an empty mapping."""
        if not configurations:
            return {}
        own = configurations.get(self.id)
        return own if isinstance(own, Mapping) else {}

    def int_option(
        self, configurations: Optional[Mapping[str, Any]], key: str, default: int
    ) -> int:
        """An integer option; values that are not integers fall back to default with a warning."""
        value = self.options(configurations).get(key, default)
        try:
            return int(value)
        except (TypeError, ValueError):
            logger.warning(
                "Option %s.%s must be an integer, got %r; using %d", self.id, key, value, default
            )
            return default

    def record_issue(
        self,
        ledger: IssueLedger,
        context: AnalysisContext,
        node: TSNode,
        message: str,
    ) -> None:
        """Record an issue at node's position with this rule's identity and severity."""
        line, col = get_line_col(node)
        end_row, end_col = node.end_point
        self.record_issue_at(
            ledger,
            Location(
                path=context.path,
                line=line,
                column=col,
                end_line=end_row + 1,
                end_column=end_col + 1,
                snippet=get_source_span(context, node),
            ),
            message,
        )

    def record_issue_at(self, ledger: IssueLedger, location: Location, message: str) -> None:
        ledger.record(
            Issue(
                rule_id=self.id,
                category=self.category,
                severity=self.severity,
                message=message,
                location=location,
            )
        )

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.id}>"


def walk(node: TSNode):
    """Yield every descendant of node in document order (DFS)."""
    yield node
    for child in node.children:
        yield from walk(child)
