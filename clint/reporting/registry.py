# Reporter selection by format name; unknown names fall back to plain text.

from __future__ import annotations

import logging
from enum import Enum
from typing import Optional

from clint.reporting.base import Clock, Reporter
from clint.reporting.html_reporter import HTMLReporter
from clint.reporting.json_reporter import JSONReporter
from clint.reporting.pmd_reporter import PMDReporter
from clint.reporting.text_reporter import TextReporter
from clint.reporting.xcode_reporter import XcodeReporter

logger = logging.getLogger(__name__)


class ReporterKind(str, Enum):
    TEXT = "text"
    HTML = "html"
    JSON = "json"
    PMD = "pmd"
    XCODE = "xcode"

    @classmethod
    def parse(cls, name: str | ReporterKind | None) -> ReporterKind:
        """Map a format name to a kind; anything unrecognized is TEXT."""
        if isinstance(name, ReporterKind):
            return name
        try:
            return cls(str(name).strip().lower())
        except ValueError:
            logger.debug("Unknown report type %r, using text", name)
            return cls.TEXT


REPORTERS: dict[ReporterKind, type[Reporter]] = {
    ReporterKind.TEXT: TextReporter,
    ReporterKind.HTML: HTMLReporter,
    ReporterKind.JSON: JSONReporter,
    ReporterKind.PMD: PMDReporter,
    ReporterKind.XCODE: XcodeReporter,
}


def create_reporter(kind: str | ReporterKind | None, clock: Optional[Clock] = None) -> Reporter:
    return REPORTERS[ReporterKind.parse(kind)](clock=clock)
