"""
JSON report.

The sections the driver writes form a single JSON object: header() opens it
with tool metadata, the summary and issue sections each contribute one member
(prefixed with a comma), and footer() closes it. An empty issue list renders
nothing, which leaves the "issues" member out of the document.
"""

from __future__ import annotations

import json
from typing import Any, Sequence

from clint.findings.models import Issue, IssueSummary, Severity
from clint.metadata import TOOL_NAME, TOOL_URL, TOOL_VERSION
from clint.reporting.base import Reporter, sorted_issues


def _member(name: str, value: Any) -> str:
    body = json.dumps(value, indent=2)
    return f'  "{name}": ' + body.replace("\n", "\n  ")


def issue_to_dict(issue: Issue) -> dict[str, Any]:
    loc = issue.location
    return {
        "path": loc.path,
        "startLine": loc.line,
        "startColumn": loc.column,
        "endLine": loc.end_line or loc.line,
        "endColumn": loc.end_column or loc.column,
        "rule": issue.rule_id,
        "category": issue.category,
        "severity": issue.severity.value,
        "message": issue.message,
    }


class JSONReporter(Reporter):
    def header(self) -> str:
        members = [
            _member("tool", TOOL_NAME),
            _member("version", TOOL_VERSION),
            _member("url", TOOL_URL),
            _member("timestamp", self.timestamp()),
        ]
        return "{" + self.separator + ("," + self.separator).join(members)

    def handle_summary(self, number_of_total_files: int, issue_summary: IssueSummary) -> str:
        summary: dict[str, Any] = {
            "numberOfFiles": number_of_total_files,
            "numberOfFilesWithIssues": issue_summary.number_of_files,
        }
        for severity in Severity:
            summary[f"numberOf{severity.value.capitalize()}Issues"] = (
                issue_summary.number_of_issues(severity)
            )
        return "," + _member("summary", summary)

    def handle_issues(self, issues: Sequence[Issue]) -> str:
        if not issues:
            return ""
        return "," + _member("issues", [issue_to_dict(i) for i in sorted_issues(issues)])

    def footer(self) -> str:
        return "}"
