# Pydantic data models for lint issues: Issue, Location, Severity, IssueSummary.

from __future__ import annotations

import functools
from collections import Counter
from enum import Enum
from typing import Iterable, Optional

from pydantic import BaseModel, ConfigDict, Field


@functools.total_ordering
class Severity(Enum):
    """
    How serious an issue is, ordered CRITICAL > MAJOR > MINOR > COSMETIC.

    The value is the stable key used in configuration files and report headers.
    Iterating the enum yields severities from most to least severe.
    """

    CRITICAL = "critical"
    MAJOR = "major"
    MINOR = "minor"
    COSMETIC = "cosmetic"

    @property
    def rank(self) -> int:
        """0 for the most severe level, increasing towards cosmetic."""
        return list(Severity).index(self)

    def __lt__(self, other: object) -> bool:
        if not isinstance(other, Severity):
            return NotImplemented
        return self.rank > other.rank

    def __str__(self) -> str:
        return self.value

    @classmethod
    def from_key(cls, key: str | Severity) -> Optional[Severity]:
        """Resolve a configuration key (case-insensitive) to a Severity, or None."""
        if isinstance(key, Severity):
            return key
        try:
            return cls(str(key).strip().lower())
        except ValueError:
            return None


class Location(BaseModel):
    """Where in the source an issue was reported (file, line, column)."""

    model_config = ConfigDict(frozen=True)

    path: str
    line: int = Field(..., ge=1, description="1-based line number")
    column: int = Field(..., ge=1, description="1-based column number")
    end_line: Optional[int] = Field(None, ge=1)
    end_column: Optional[int] = Field(None, ge=1)
    snippet: Optional[str] = None

    def __str__(self) -> str:
        return f"{self.path}:{self.line}:{self.column}"


class Issue(BaseModel):
    """A single finding recorded by a rule. Never mutated once built."""

    model_config = ConfigDict(frozen=True)

    rule_id: str
    category: str
    severity: Severity
    message: str
    location: Location


class IssueSummary:
    """
    Read-only counts over a drained issue set.

    Every figure is computed from the issues it was built from; the summary
    keeps no other state.
    """

    def __init__(self, issues: Iterable[Issue]) -> None:
        self._issues: tuple[Issue, ...] = tuple(issues)

    @property
    def issues(self) -> tuple[Issue, ...]:
        return self._issues

    @property
    def total(self) -> int:
        return len(self._issues)

    @property
    def number_of_files(self) -> int:
        """Number of distinct files with at least one issue."""
        return len({issue.location.path for issue in self._issues})

    def number_of_issues(self, severity: Severity) -> int:
        return sum(1 for issue in self._issues if issue.severity is severity)

    def counts_by_severity(self) -> dict[Severity, int]:
        """Per-severity counts for every severity, most severe first."""
        counter = Counter(issue.severity for issue in self._issues)
        return {severity: counter.get(severity, 0) for severity in Severity}
