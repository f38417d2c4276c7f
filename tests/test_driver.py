"""End-to-end tests for the Driver and exit status policy."""

import io
import logging
import threading
from pathlib import Path

import pytest

from clint.context import SourceFile
from clint.driver import (
    DEFAULT_SEVERITY_THRESHOLDS,
    Driver,
    ExitStatus,
    effective_thresholds,
    exit_status_for,
)
from clint.findings.models import IssueSummary, Location, Severity
from clint.parser import ParseResult, ParseStatus
from clint.reporting.json_reporter import JSONReporter
from clint.reporting.text_reporter import TextReporter
from clint.rules.base import Rule
from helpers import make_issue


class MarkerRule(Rule):
    """Records one issue per file at line 1, and counts its invocations."""

    id = "marker"
    name = "Marker"
    category = "test"
    severity = Severity.MINOR

    def __init__(self) -> None:
        self.calls = 0
        self._lock = threading.Lock()

    def inspect(self, context, ledger, configurations=None) -> None:
        with self._lock:
            self.calls += 1
        self.record_issue_at(ledger, Location(path=context.path, line=1, column=1), "marker")


class ExplodingRule(Rule):
    id = "exploding"
    name = "Exploding"
    category = "test"
    severity = Severity.CRITICAL

    def inspect(self, context, ledger, configurations=None) -> None:
        raise RuntimeError("boom")


def _source(name: str, content: bytes) -> SourceFile:
    return SourceFile(path=Path(name), content=content)


def _driver(rules, catalog=None, **kwargs) -> tuple[Driver, io.StringIO]:
    out = io.StringIO()
    kwargs.setdefault("diagnostic_consumer", lambda diagnostics: None)
    if catalog is not None:
        kwargs["catalog"] = catalog
    return Driver(rule_identifiers=rules, output=out, **kwargs), out


CLEAN = b"int main(void) { return 0; }\n"
ONE_GETS = b"int main(void) { char b[8]; gets(b); return 0; }\n"


def test_default_thresholds():
    assert DEFAULT_SEVERITY_THRESHOLDS == {
        Severity.CRITICAL: 0,
        Severity.MAJOR: 10,
        Severity.MINOR: 20,
        Severity.COSMETIC: 50,
    }


def test_effective_thresholds_override_and_ignore_unknown(caplog):
    thresholds = effective_thresholds({"major": 2, Severity.MINOR: 1, "blocker": 0})
    assert thresholds[Severity.MAJOR] == 2
    assert thresholds[Severity.MINOR] == 1
    assert thresholds[Severity.CRITICAL] == 0
    assert thresholds[Severity.COSMETIC] == 50
    assert "blocker" in caplog.text


@pytest.mark.parametrize("severity,count,overrides,expected", [
    (Severity.CRITICAL, 0, None, ExitStatus.SUCCESS),
    (Severity.CRITICAL, 1, None, ExitStatus.TOO_MANY_ISSUES),
    (Severity.CRITICAL, 1, {"critical": 1}, ExitStatus.SUCCESS),
    (Severity.MAJOR, 10, None, ExitStatus.SUCCESS),
    (Severity.MAJOR, 11, None, ExitStatus.TOO_MANY_ISSUES),
    (Severity.MINOR, 21, None, ExitStatus.TOO_MANY_ISSUES),
    (Severity.COSMETIC, 50, None, ExitStatus.SUCCESS),
    (Severity.COSMETIC, 3, {"cosmetic": 2}, ExitStatus.TOO_MANY_ISSUES),
])
def test_exit_status_for(severity, count, overrides, expected):
    summary = IssueSummary([make_issue(severity, line=n + 1) for n in range(count)])
    assert exit_status_for(summary, overrides) is expected


def test_exit_status_values():
    assert ExitStatus.SUCCESS == 0
    assert ExitStatus.FAILED_IN_PARSING_FILE < 0
    assert ExitStatus.TOO_MANY_ISSUES < 0
    assert ExitStatus.FAILED_IN_PARSING_FILE != ExitStatus.TOO_MANY_ISSUES


def test_one_major_issue_in_two_files_succeeds():
    driver, out = _driver(["unsafe-functions"])
    status = driver.lint([_source("a.c", ONE_GETS), _source("b.c", CLEAN)])
    assert status is ExitStatus.SUCCESS
    report = out.getvalue()
    assert "Total files: 2, files with issues: 1" in report
    assert "Issues: 1 (critical: 0, major: 1, minor: 0, cosmetic: 0)" in report
    assert [line for line in report.splitlines() if "[unsafe-functions]" in line] == [
        "a.c:1:29: major [unsafe-functions] Unsafe function 'gets' may lead to buffer "
        "overflow or undefined behavior; use a safe alternative."
    ]


def test_eleven_major_issues_are_too_many():
    body = b"".join(b"    gets(b);\n" for _ in range(11))
    source = b"void f(void) {\n    char b[8];\n" + body + b"}\n"
    driver, _ = _driver(["unsafe-functions"])
    assert driver.lint([_source("a.c", source)]) is ExitStatus.TOO_MANY_ISSUES
    assert len(driver.ledger.drain()) == 11


def test_caller_thresholds_override_defaults():
    driver, _ = _driver(["unsafe-functions"])
    status = driver.lint([_source("a.c", ONE_GETS)], severity_thresholds={"major": 0})
    assert status is ExitStatus.TOO_MANY_ISSUES


def test_parse_failure_runs_no_rules_and_renders_nothing():
    marker = MarkerRule()
    seen = []

    def failing_parse(source_files):
        return ParseResult(status=ParseStatus.FAILURE)

    driver, out = _driver(
        ["marker"],
        catalog=[marker],
        parse=failing_parse,
        diagnostic_consumer=seen.append,
    )
    status = driver.lint([_source("a.c", CLEAN)])
    assert status is ExitStatus.FAILED_IN_PARSING_FILE
    assert marker.calls == 0
    assert driver.ledger.drain() == ()
    assert out.getvalue() == ""


def test_real_syntax_error_fails_and_reports_diagnostics():
    diagnostics = []
    driver, out = _driver(["unsafe-functions"], diagnostic_consumer=diagnostics.extend)
    status = driver.lint([_source("bad.c", b"int main( { gets(b); }\n")])
    assert status is ExitStatus.FAILED_IN_PARSING_FILE
    assert diagnostics
    assert out.getvalue() == ""


def test_units_without_tree_are_skipped():
    marker = MarkerRule()
    driver, out = _driver(["marker"], catalog=[marker])
    status = driver.lint([_source("empty.c", b""), _source("a.c", CLEAN)])
    assert status is ExitStatus.SUCCESS
    assert marker.calls == 1
    assert [i.location.path for i in driver.ledger.drain()] == ["a.c"]
    assert "Total files: 2" in out.getvalue()


def test_ledger_is_cleared_between_runs():
    driver, _ = _driver(["unsafe-functions"])
    driver.lint([_source("a.c", ONE_GETS)])
    driver.lint([_source("b.c", CLEAN)])
    assert driver.ledger.drain() == ()


def test_every_rule_runs_on_every_context():
    first, second = MarkerRule(), MarkerRule()
    second.id = "marker-2"
    driver, _ = _driver(["marker", "marker-2"], catalog=[first, second])
    driver.lint([_source(f"{n}.c", CLEAN) for n in range(3)])
    assert first.calls == 3
    assert second.calls == 3
    assert len(driver.ledger.drain()) == 6


@pytest.mark.parametrize("jobs", [1, 2, 8, None])
def test_parallel_and_sequential_runs_agree(jobs):
    sources = [_source(f"{n}.c", ONE_GETS + b"void g(void) { char c[2]; strcpy(c, c); }\n")
               for n in range(6)]
    driver, _ = _driver(["unsafe-functions", "use-after-free", "long-line"], jobs=jobs)
    driver.lint(sources)
    keys = sorted((i.location.path, i.location.line, i.rule_id) for i in driver.ledger.drain())

    reference, _ = _driver(["unsafe-functions", "use-after-free", "long-line"], jobs=1)
    reference.lint(sources)
    expected = sorted((i.location.path, i.location.line, i.rule_id)
                      for i in reference.ledger.drain())
    assert keys == expected
    assert len(keys) == 12


@pytest.mark.parametrize("jobs", [1, 4])
def test_failing_rule_is_logged_and_run_continues(jobs, caplog):
    marker = MarkerRule()
    driver, _ = _driver(["exploding", "marker"], catalog=[ExplodingRule(), marker], jobs=jobs)
    with caplog.at_level(logging.ERROR):
        status = driver.lint([_source("a.c", CLEAN)])
    assert status is ExitStatus.SUCCESS
    assert marker.calls == 1
    assert "Rule exploding failed on a.c" in caplog.text


def test_rule_configurations_reach_rules():
    source = b"int f(int a, int b, int c) { return a; }\n"
    driver, _ = _driver(["too-many-parameters"])
    driver.lint([_source("a.c", source)], rule_configurations={"too-many-parameters": {"max_parameters": 2}})
    assert len(driver.ledger.drain()) == 1


def test_register_rules_ignores_unknown_and_keeps_catalog_order():
    driver, _ = _driver(["long-line", "no-such-rule", "use-after-free"])
    assert [r.id for r in driver.rules] == ["use-after-free", "long-line"]


def test_register_rules_with_empty_catalog_activates_nothing():
    driver, _ = _driver(["long-line"])
    assert [r.id for r in driver.rules] == ["long-line"]
    driver.register_rules(["long-line"], catalog=[])
    assert driver.rules == ()


def test_set_reporter_by_name_and_instance():
    driver, _ = _driver([])
    assert isinstance(driver.reporter, TextReporter)
    driver.set_reporter("json")
    assert isinstance(driver.reporter, JSONReporter)
    driver.set_reporter("unknown-format")
    assert isinstance(driver.reporter, TextReporter)
    custom = JSONReporter()
    driver.set_reporter(custom)
    assert driver.reporter is custom


def test_render_report_skips_empty_sections():
    class Partial(TextReporter):
        def header(self):
            return "HEAD"

        def handle_summary(self, number_of_total_files, issue_summary):
            return ""

        def footer(self):
            return "FOOT"

    driver, out = _driver([])
    driver.set_reporter(Partial())
    driver.render_report([], 0)
    assert out.getvalue() == "HEAD\n\nFOOT\n"

    out2 = io.StringIO()
    driver.update_output(out2)
    driver.render_report([make_issue()], 1)
    assert out2.getvalue() == "HEAD\n\na.c:1:1: major [test-rule] something is wrong\n\nFOOT\n"
