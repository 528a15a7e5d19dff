"""Tests for the java-code-analyzer CLI."""

import json
import sys

import pytest
from loguru import logger
from typer.testing import CliRunner

from java_code_analyzer import __version__
from java_code_analyzer.cli.main import app

runner = CliRunner()

JAVA_SOURCE = """public class Greeter {
    public void greet(String name) {
        if (name == "admin") {
            System.out.println("hello admin");
        }
    }
}
"""


@pytest.fixture
def workspace(monkeypatch, tmp_path):
    for name in ("DEEPSEEK_API_KEY", "ANALYZER_DEMO_FALLBACK", "LOG_LEVEL"):
        monkeypatch.setenv(name, "")
        monkeypatch.delenv(name)
    monkeypatch.chdir(tmp_path)
    yield tmp_path
    # the callback rebinds loguru to the runner's stderr
    logger.remove()
    logger.add(sys.stderr)


def test_version():
    result = runner.invoke(app, ["--version"])

    assert result.exit_code == 0
    assert __version__ in result.stdout


def test_analyze_demo_json(workspace):
    source = workspace / "Greeter.java"
    source.write_text(JAVA_SOURCE)

    result = runner.invoke(
        app, ["--log-level", "ERROR", "analyze", str(source), "--demo", "--json"]
    )

    assert result.exit_code == 0
    report = json.loads(result.stdout)
    assert report["summary"]["total"] == len(report["issues"])
    titles = [issue["title"] for issue in report["issues"]]
    assert "String compared with ==" in titles
    assert "Console output instead of logger" in titles


def test_analyze_without_key_uses_demo(workspace):
    source = workspace / "Greeter.java"
    source.write_text(JAVA_SOURCE)

    result = runner.invoke(app, ["--log-level", "ERROR", "analyze", str(source)])

    assert result.exit_code == 0
    assert "Greeter.java" in result.stdout
    assert "DEEPSEEK_API_KEY" in result.stdout


def test_analyze_respects_category_flags(workspace):
    source = workspace / "Greeter.java"
    source.write_text(JAVA_SOURCE)

    result = runner.invoke(
        app,
        [
            "--log-level",
            "ERROR",
            "analyze",
            str(source),
            "--demo",
            "--json",
            "--no-bugs",
            "--no-security",
            "--no-performance",
        ],
    )

    report = json.loads(result.stdout)
    assert [issue["severity"] for issue in report["issues"]] == ["low"]


def test_empty_file_fails(workspace):
    source = workspace / "Empty.java"
    source.write_text("   \n")

    result = runner.invoke(app, ["--log-level", "ERROR", "analyze", str(source)])

    assert result.exit_code == 1


def test_non_utf8_file_fails_cleanly(workspace):
    source = workspace / "Latin1.java"
    source.write_bytes('String s = "café";\n'.encode("latin-1"))

    result = runner.invoke(app, ["--log-level", "ERROR", "analyze", str(source)])

    assert result.exit_code == 1
    assert "Analysis failed" in result.stdout
    assert not isinstance(result.exception, UnicodeDecodeError)


def test_missing_file_is_usage_error(workspace):
    result = runner.invoke(app, ["analyze", str(workspace / "Nope.java")])

    assert result.exit_code == 2
