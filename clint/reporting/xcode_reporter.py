# Editor integration: one compiler-style line per issue, understood by Xcode and most IDEs.

from __future__ import annotations

from typing import Sequence

from clint.findings.models import Issue, IssueSummary, Severity
from clint.reporting.base import Reporter, sorted_issues

ERROR_SEVERITIES = frozenset({Severity.CRITICAL, Severity.MAJOR})


class XcodeReporter(Reporter):
    def handle_summary(self, number_of_total_files: int, issue_summary: IssueSummary) -> str:
        return ""

    def handle_issues(self, issues: Sequence[Issue]) -> str:
        lines = []
        for issue in sorted_issues(issues):
            level = "error" if issue.severity in ERROR_SEVERITIES else "warning"
            lines.append(
                f"{issue.location}: {level}: "
                f"[{issue.category}|{issue.rule_id}] {issue.message}"
            )
        return self.separator.join(lines)
