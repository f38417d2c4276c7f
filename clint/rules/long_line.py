# Line length check: flags source lines longer than the configured maximum

from __future__ import annotations

from typing import Any, Mapping, Optional

from clint.context import AnalysisContext
from clint.findings.ledger import IssueLedger
from clint.findings.models import Location, Severity
from clint.rules.base import Rule

DEFAULT_MAX_LENGTH = 100


class LongLineRule(Rule):
    id = "long-line"
    name = "Long line"
    category = "size"
    severity = Severity.COSMETIC
    description = f"Lines longer than 'max_length' characters (default {DEFAULT_MAX_LENGTH})."

    def inspect(
        self,
        context: AnalysisContext,
        ledger: IssueLedger,
        configurations: Optional[Mapping[str, Any]] = None,
    ) -> None:
        limit = max(self.int_option(configurations, "max_length", DEFAULT_MAX_LENGTH), 0)
        for index, line in enumerate(context.source_file.text.splitlines(), start=1):
            length = len(line)
            if length <= limit:
                continue
            self.record_issue_at(
                ledger,
                Location(
                    path=context.path,
                    line=index,
                    column=limit + 1,
                    end_line=index,
                    end_column=length,
                ),
                f"Line is {length} characters long, exceeding the limit of {limit}.",
            )
