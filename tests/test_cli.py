"""Tests for the typer CLI."""

import json

from typer.testing import CliRunner

from clint.driver import ExitStatus
from clint.main import app, parse_thresholds

runner = CliRunner()


def _write(tmp_path, name, content):
    path = tmp_path / name
    path.write_text(content)
    return path


def test_lint_clean_file_exits_zero(tmp_path):
    path = _write(tmp_path, "ok.c", "int main(void) { return 0; }\n")
    result = runner.invoke(app, ["lint", str(path), "-r", "unsafe-functions"])
    assert result.exit_code == 0, result.output
    assert "Total files: 1, files with issues: 0" in result.stdout


def test_lint_reports_issue_and_threshold(tmp_path):
    path = _write(tmp_path, "bad.c", "int main(void) { char b[8]; gets(b); return 0; }\n")
    result = runner.invoke(app, ["lint", str(path), "-r", "unsafe-functions"])
    assert result.exit_code == 0
    assert "[unsafe-functions]" in result.stdout

    result = runner.invoke(app, ["lint", str(path), "-r", "unsafe-functions", "-t", "major=0"])
    assert result.exit_code == int(ExitStatus.TOO_MANY_ISSUES)


def test_lint_parse_failure_exit_code(tmp_path):
    path = _write(tmp_path, "broken.c", "int main( { return 0; }\n")
    result = runner.invoke(app, ["lint", str(path)])
    assert result.exit_code == int(ExitStatus.FAILED_IN_PARSING_FILE)
    assert "Summary" not in result.stdout


def test_lint_json_to_output_file(tmp_path):
    src = _write(tmp_path, "bad.c", "int main(void) { char b[8]; gets(b); return 0; }\n")
    report = tmp_path / "report.json"
    result = runner.invoke(
        app, ["lint", str(src), "--report-type", "json", "-o", str(report), "-j", "2"]
    )
    assert result.exit_code == 0, result.output
    doc = json.loads(report.read_text())
    assert doc["issues"][0]["rule"] == "unsafe-functions"


def test_lint_uses_config_file(tmp_path):
    src = _write(tmp_path, "a.c", "int abcdefghij;\n")
    config = _write(
        tmp_path,
        ".clint.toml",
        'rules = ["long-line"]\nreport_type = "xcode"\n'
        "[rule_configurations.long-line]\nmax_length = 5\n",
    )
    result = runner.invoke(app, ["lint", str(src), "--config", str(config)])
    assert result.exit_code == 0
    assert "warning: [size|long-line]" in result.stdout


def test_invalid_config_is_bad_parameter(tmp_path):
    src = _write(tmp_path, "a.c", "int a;\n")
    config = _write(tmp_path, ".clint.toml", "jobs = 0\n")
    result = runner.invoke(app, ["lint", str(src), "--config", str(config)])
    assert result.exit_code == 2


def test_rules_command_lists_catalog():
    result = runner.invoke(app, ["rules"])
    assert result.exit_code == 0
    for rule_id in ("use-after-free", "unsafe-functions", "too-many-parameters", "long-line"):
        assert rule_id in result.stdout


def test_parse_thresholds():
    assert parse_thresholds(["Major=5", "critical=1"]) == {"major": 5, "critical": 1}
