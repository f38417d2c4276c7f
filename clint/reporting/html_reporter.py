# HTML report: a standalone, styled document with a summary table and an issue table.

from __future__ import annotations

from html import escape
from typing import Sequence

from clint.findings.models import Issue, IssueSummary, Severity
from clint.metadata import TOOL_NAME, TOOL_URL, TOOL_VERSION
from clint.reporting.base import Reporter, sorted_issues

STYLE = """\
.severity-critical, .severity-major, .severity-minor, .severity-cosmetic {
  font-weight: bold;
  text-align: center;
  color: #BF0A30;
}
.severity-critical { background-color: #FFC200; }
.severity-major { background-color: #FFD3A6; }
.severity-minor { background-color: #FFEEB5; }
.severity-cosmetic { background-color: #FFAAB5; }
table {
  border: 2px solid gray;
  border-collapse: collapse;
  box-shadow: 3px 3px 4px #AAA;
}
td, th {
  border: 1px solid #D3D3D3;
  padding: 4px 20px 4px 20px;
}
th {
  text-shadow: 2px 2px 2px white;
  border-bottom: 1px solid gray;
  background-color: #E9F4FF;
}"""

ISSUE_COLUMNS = ("File", "Location", "Rule Identifier", "Rule Category", "Severity", "Message")


def _issue_row(issue: Issue) -> str:
    loc = issue.location
    cells = [
        f"<td>{escape(loc.path)}</td>",
        f"<td>{loc.line}:{loc.column}</td>",
        f"<td>{escape(issue.rule_id)}</td>",
        f"<td>{escape(issue.category)}</td>",
        f'<td class="severity-{issue.severity.value}">{issue.severity.value}</td>',
        f"<td>{escape(issue.message)}</td>",
    ]
    return "<tr>" + "".join(cells) + "</tr>"


class HTMLReporter(Reporter):
    def header(self) -> str:
        return self.separator.join(
            [
                "<!DOCTYPE html>",
                "<html>",
                "<head>",
                f"<title>{TOOL_NAME} report</title>",
                "<style type='text/css'>",
                STYLE,
                "</style>",
                "</head>",
                "<body>",
                f"<h1>{TOOL_NAME} report</h1>",
                "<hr />",
            ]
        )

    def handle_summary(self, number_of_total_files: int, issue_summary: IssueSummary) -> str:
        head = ["<th>Total Files</th>", "<th>Files with Issues</th>"]
        head += [f"<th>{severity.value.capitalize()}</th>" for severity in Severity]
        body = [f"<td>{number_of_total_files}</td>", f"<td>{issue_summary.number_of_files}</td>"]
        body += [
            f'<td class="severity-{severity.value}">'
            f"{issue_summary.number_of_issues(severity)}</td>"
            for severity in Severity
        ]
        return self.separator.join(
            [
                "<table>",
                "<thead>",
                "<tr>" + "".join(head) + "</tr>",
                "</thead>",
                "<tbody>",
                "<tr>" + "".join(body) + "</tr>",
                "</tbody>",
                "</table>",
            ]
        )

    def handle_issues(self, issues: Sequence[Issue]) -> str:
        if not issues:
            return ""
        lines = [
            "<hr />",
            "<table>",
            "<thead>",
            "<tr>" + "".join(f"<th>{name}</th>" for name in ISSUE_COLUMNS) + "</tr>",
            "</thead>",
            "<tbody>",
        ]
        lines.extend(_issue_row(issue) for issue in sorted_issues(issues))
        lines += ["</tbody>", "</table>"]
        return self.separator.join(lines)

    def footer(self) -> str:
        return self.separator.join(
            [
                "<hr />",
                "<p>",
                f"  {self.timestamp()}",
                "  |",
                f"  Generated with <a href='{TOOL_URL}'>{TOOL_NAME} v{TOOL_VERSION}</a>.",
                "</p>",
                "</body>",
                "</html>",
            ]
        )
