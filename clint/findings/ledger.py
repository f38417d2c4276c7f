# Run-scoped issue ledger: the single collection point rules record issues into.

from __future__ import annotations

import logging
import threading

from clint.findings.models import Issue

logger = logging.getLogger(__name__)


class IssueLedger:
    """
    Append-only, thread-safe collection of the issues recorded during one lint run.

    The driver calls clear() before each run and drain() once every inspection
    has finished. drain() returns a snapshot and keeps the issues, so repeated
    drains within a run return equal sequences; only clear() resets the ledger.
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._issues: list[Issue] = []

    def clear(self) -> None:
        with self._lock:
            self._issues = []

    def record(self, issue: Issue) -> None:
        with self._lock:
            self._issues.append(issue)
        logger.debug("Recorded %s at %s", issue.rule_id, issue.location)

    def drain(self) -> tuple[Issue, ...]:
        with self._lock:
            return tuple(self._issues)

    def __len__(self) -> int:
        with self._lock:
            return len(self._issues)
