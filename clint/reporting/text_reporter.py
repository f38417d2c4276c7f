# Plain-text report: the default format.

from __future__ import annotations

from typing import Sequence

from clint.findings.models import Issue, IssueSummary, Severity
from clint.metadata import TOOL_NAME, TOOL_VERSION
from clint.reporting.base import Reporter, sorted_issues


class TextReporter(Reporter):
    def header(self) -> str:
        return f"{TOOL_NAME} v{TOOL_VERSION} report"

    def handle_summary(self, number_of_total_files: int, issue_summary: IssueSummary) -> str:
        counts = ", ".join(
            f"{severity}: {issue_summary.number_of_issues(severity)}" for severity in Severity
        )
        return (
            "Summary:\n"
            f"  Total files: {number_of_total_files}, "
            f"files with issues: {issue_summary.number_of_files}\n"
            f"  Issues: {issue_summary.total} ({counts})"
        )

    def handle_issues(self, issues: Sequence[Issue]) -> str:
        return self.separator.join(
            f"{issue.location}: {issue.severity} [{issue.rule_id}] {issue.message}"
            for issue in sorted_issues(issues)
        )

    def footer(self) -> str:
        return f"[{TOOL_NAME} v{TOOL_VERSION}] generated at {self.timestamp()}"
