"""
The lint driver: parse sources, run the active rules, render a report, decide the exit status.

One Driver.lint() call:
1. clears the issue ledger
2. parses the source files (a failed batch ends the run with FAILED_IN_PARSING_FILE)
3. builds an AnalysisContext for every unit that has a syntax tree
4. runs every active rule against every context, in parallel when jobs != 1
5. drains the ledger, summarizes, renders through the selected reporter
6. compares per-severity counts to the thresholds
"""

from __future__ import annotations

import logging
import sys
from concurrent.futures import Future, ThreadPoolExecutor
from enum import IntEnum
from typing import Any, Callable, Iterable, Mapping, Optional, Sequence, TextIO

from clint.context import AnalysisContext, SourceFile
from clint.diagnostics import TerminalDiagnosticConsumer
from clint.findings.ledger import IssueLedger
from clint.findings.models import Issue, IssueSummary, Severity
from clint.parser import Diagnostic, ParseResult, parse_sources
from clint.reporting.base import Reporter
from clint.reporting.registry import ReporterKind, create_reporter
from clint.rules.base import Rule
from clint.rules.catalog import RULES, select_rules

logger = logging.getLogger(__name__)


class ExitStatus(IntEnum):
    SUCCESS = 0
    FAILED_IN_PARSING_FILE = -10
    TOO_MANY_ISSUES = -20


DEFAULT_SEVERITY_THRESHOLDS: Mapping[Severity, int] = {
    Severity.CRITICAL: 0,
    Severity.MAJOR: 10,
    Severity.MINOR: 20,
    Severity.COSMETIC: 50,
}

ParseFn = Callable[[Sequence[SourceFile]], ParseResult]
DiagnosticConsumer = Callable[[Sequence[Diagnostic]], None]


def effective_thresholds(
    overrides: Optional[Mapping[Any, int]] = None,
) -> dict[Severity, int]:
    """Built-in thresholds overlaid with overrides keyed by Severity or its string form."""
    thresholds = dict(DEFAULT_SEVERITY_THRESHOLDS)
    for key, value in (overrides or {}).items():
        severity = Severity.from_key(key)
        if severity is None:
            logger.warning("Ignoring threshold for unknown severity %r", key)
            continue
        thresholds[severity] = int(value)
    return thresholds


def exit_status_for(
    summary: IssueSummary,
    severity_thresholds: Optional[Mapping[Any, int]] = None,
) -> ExitStatus:
    """TOO_MANY_ISSUES if any severity's count exceeds its threshold, else SUCCESS."""
    thresholds = effective_thresholds(severity_thresholds)
    exceeded = [
        severity
        for severity, limit in thresholds.items()
        if summary.number_of_issues(severity) > limit
    ]
    if exceeded:
        logger.info(
            "Issue thresholds exceeded for: %s", ", ".join(s.value for s in exceeded)
        )
        return ExitStatus.TOO_MANY_ISSUES
    return ExitStatus.SUCCESS


class Driver:
    """
    Runs a fixed set of rules over parsed C sources and reports the results.

    Args:
        rule_identifiers: ids of the rules to activate; ids not in the catalog are ignored.
        report_type: reporter name ("text", "html", "json", "pmd", "xcode").
        output: text sink for the rendered report (defaults to stdout).
        catalog: every rule the driver may choose from.
        jobs: worker threads for rule inspection; 1 runs sequentially,
            None lets ThreadPoolExecutor pick.
        parse: the parsing collaborator.
        diagnostic_consumer: receives parser diagnostics before any rule runs.
    """

    def __init__(
        self,
        rule_identifiers: Iterable[str] = (),
        report_type: str | ReporterKind = ReporterKind.TEXT,
        output: Optional[TextIO] = None,
        *,
        catalog: Sequence[Rule] = RULES,
        jobs: Optional[int] = None,
        parse: ParseFn = parse_sources,
        diagnostic_consumer: Optional[DiagnosticConsumer] = None,
    ) -> None:
        self._catalog = tuple(catalog)
        self._rules: list[Rule] = []
        self._reporter: Reporter
        self._output = output if output is not None else sys.stdout
        self._ledger = IssueLedger()
        self._jobs = jobs
        self._parse = parse
        if diagnostic_consumer is None:
            diagnostic_consumer = TerminalDiagnosticConsumer().consume
        self._consume_diagnostics = diagnostic_consumer

        self.set_reporter(report_type)
        self.register_rules(rule_identifiers)

    @property
    def rules(self) -> tuple[Rule, ...]:
        return tuple(self._rules)

    @property
    def reporter(self) -> Reporter:
        return self._reporter

    @property
    def ledger(self) -> IssueLedger:
        return self._ledger

    def set_reporter(self, reporter: str | ReporterKind | Reporter) -> None:
        if isinstance(reporter, Reporter):
            self._reporter = reporter
        else:
            self._reporter = create_reporter(reporter)

    def register_rules(
        self,
        rule_identifiers: Iterable[str],
        catalog: Optional[Sequence[Rule]] = None,
    ) -> None:
        """Activate the catalog rules named in rule_identifiers, in catalog order."""
        self._rules = select_rules(
            rule_identifiers, self._catalog if catalog is None else catalog
        )
        logger.debug("Active rules: %s", ", ".join(r.id for r in self._rules) or "(none)")

    def update_output(self, output: TextIO) -> None:
        self._output = output

    def lint(
        self,
        source_files: Sequence[SourceFile],
        rule_configurations: Optional[Mapping[str, Any]] = None,
        severity_thresholds: Optional[Mapping[Any, int]] = None,
    ) -> ExitStatus:
        self._ledger.clear()

        result = self._parse(source_files)
        if result.diagnostics:
            self._consume_diagnostics(result.diagnostics)
        if not result.succeeded:
            logger.error("Parsing failed; no rules were run")
            return ExitStatus.FAILED_IN_PARSING_FILE

        contexts = [
            AnalysisContext(source_file=unit.source_file, tree=unit.tree)
            for unit in result.units
            if unit.tree is not None
        ]
        logger.info(
            "Inspecting %d translation unit(s) with %d rule(s)", len(contexts), len(self._rules)
        )
        self._inspect(contexts, rule_configurations)

        issues = self._ledger.drain()
        self.render_report(issues, len(source_files))
        return exit_status_for(IssueSummary(issues), severity_thresholds)

    def _inspect_one(
        self,
        rule: Rule,
        context: AnalysisContext,
        rule_configurations: Optional[Mapping[str, Any]],
    ) -> None:
        logger.debug("Running %s on %s", rule.id, context.path)
        rule.inspect(context, self._ledger, rule_configurations)

    def _inspect(
        self,
        contexts: Sequence[AnalysisContext],
        rule_configurations: Optional[Mapping[str, Any]],
    ) -> None:
        """Run every (context, rule) pair; returns only once all of them have finished."""
        pairs = [(context, rule) for context in contexts for rule in self._rules]
        if self._jobs == 1:
            for context, rule in pairs:
                try:
                    self._inspect_one(rule, context, rule_configurations)
                except Exception:
                    logger.exception("Rule %s failed on %s", rule.id, context.path)
            return

        with ThreadPoolExecutor(max_workers=self._jobs) as executor:
            futures: list[tuple[Future[None], AnalysisContext, Rule]] = [
                (
                    executor.submit(self._inspect_one, rule, context, rule_configurations),
                    context,
                    rule,
                )
                for context, rule in pairs
            ]
            for future, context, rule in futures:
                try:
                    future.result()
                except Exception:
                    logger.exception("Rule %s failed on %s", rule.id, context.path)

    def _puts(self, text: str) -> None:
        self._output.write(f"{text}{self._reporter.separator}")

    def render_report(self, issues: Sequence[Issue], number_of_total_files: int) -> None:
        """
        Write header, summary, issues and footer to the output.

        Empty sections are skipped together with their separators; non-empty
        sections are set apart by an empty record.
        """
        reporter = self._reporter
        sections = [
            reporter.header(),
            reporter.handle_summary(number_of_total_files, IssueSummary(issues)),
            reporter.handle_issues(issues),
            reporter.footer(),
        ]
        written = False
        for section in sections:
            if not section:
                continue
            if written:
                self._puts("")
            self._puts(section)
            written = True
        self._output.flush()
