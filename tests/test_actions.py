"""Tests for GitHub Actions workflow command helpers."""

import logging
import sys
from pathlib import Path

# Add src directory to path
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from pr_metadata.actions import WorkflowCommandFormatter, configure_logging, escape_data, set_output


def _record(level: int, message: str) -> logging.LogRecord:
    return logging.LogRecord("pr_metadata.test", level, __file__, 1, message, None, None)


def test_formatter_renders_warning_and_error_commands():
    """Verify warnings and errors become workflow annotations."""
    formatter = WorkflowCommandFormatter("%(message)s")

    assert formatter.format(_record(logging.WARNING, "careful")) == "::warning::careful"
    assert formatter.format(_record(logging.ERROR, "line1\nline2")) == "::error::line1%0Aline2"


def test_formatter_leaves_info_plain():
    formatter = WorkflowCommandFormatter("%(message)s")

    assert formatter.format(_record(logging.INFO, "Attempt 1 to send data")) == "Attempt 1 to send data"


def test_escape_data_escapes_percent_first():
    assert escape_data("100%\r\n") == "100%25%0D%0A"


def test_set_output_appends_to_output_file(tmp_path):
    """Verify outputs are appended to the GITHUB_OUTPUT file."""
    output_file = tmp_path / "output"
    output_file.write_text("existing=1\n", encoding="utf-8")

    set_output("http_status", 200, output_path=str(output_file))

    assert output_file.read_text(encoding="utf-8") == "existing=1\nhttp_status=200\n"


def test_set_output_uses_env_output_file(tmp_path, monkeypatch):
    output_file = tmp_path / "output"
    monkeypatch.setenv("GITHUB_OUTPUT", str(output_file))

    set_output("http_status", 0)

    assert output_file.read_text(encoding="utf-8") == "http_status=0\n"


def test_set_output_without_file_prints_legacy_command(monkeypatch, capsys):
    monkeypatch.delenv("GITHUB_OUTPUT", raising=False)

    set_output("http_status", 503)

    assert capsys.readouterr().out == "::set-output name=http_status::503\n"


def test_configure_logging_honors_runner_debug(monkeypatch):
    """Verify RUNNER_DEBUG=1 enables debug logging for the package."""
    monkeypatch.setenv("RUNNER_DEBUG", "1")

    configure_logging()

    package_logger = logging.getLogger("pr_metadata")
    assert package_logger.level == logging.DEBUG
    assert len(package_logger.handlers) == 1
    assert isinstance(package_logger.handlers[0].formatter, WorkflowCommandFormatter)


def test_configure_logging_defaults_to_info(monkeypatch):
    monkeypatch.delenv("RUNNER_DEBUG", raising=False)

    configure_logging()

    assert logging.getLogger("pr_metadata").level == logging.INFO
