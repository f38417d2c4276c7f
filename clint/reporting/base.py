# Reporter interface: turns an issue set and run summary into text for one output format.

from __future__ import annotations

from abc import ABC, abstractmethod
from datetime import datetime
from typing import Callable, Iterable, Optional, Sequence

from clint.findings.models import Issue, IssueSummary

Clock = Callable[[], datetime]


def sorted_issues(issues: Iterable[Issue]) -> list[Issue]:
    """Presentation order: by file, then position, then rule id."""
    return sorted(
        issues,
        key=lambda i: (i.location.path, i.location.line, i.location.column, i.rule_id),
    )


class Reporter(ABC):
    """
    A report format.

    The driver writes header(), the summary, the issue listing and footer(),
    skipping any that render to an empty string. Every method is a pure
    function of its arguments (plus the clock for timestamps).
    """

    separator: str = "\n"

    def __init__(self, clock: Optional[Clock] = None) -> None:
        self._clock = clock or datetime.now

    def timestamp(self) -> str:
        return self._clock().strftime("%Y-%m-%d %H:%M:%S")

    def header(self) -> str:
        return ""

    def footer(self) -> str:
        return ""

    @abstractmethod
    def handle_summary(self, number_of_total_files: int, issue_summary: IssueSummary) -> str:
        ...

    @abstractmethod
    def handle_issues(self, issues: Sequence[Issue]) -> str:
        ...
