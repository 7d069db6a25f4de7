"""GitHub Actions workflow command helpers.

Log records are rendered as workflow commands so that warnings and errors are
annotated in the run summary, and action outputs are written to the
``GITHUB_OUTPUT`` file.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import Any, Optional

_COMMANDS = {
    logging.DEBUG: "debug",
    logging.WARNING: "warning",
    logging.ERROR: "error",
    logging.CRITICAL: "error",
}


def escape_data(value: Any) -> str:
    """Escape a workflow command message."""
    return str(value).replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def escape_property(value: Any) -> str:
    """Escape a workflow command property value."""
    return escape_data(value).replace(":", "%3A").replace(",", "%2C")


class WorkflowCommandFormatter(logging.Formatter):
    """Format records as ``::level::message``; INFO records stay plain text."""

    def format(self, record: logging.LogRecord) -> str:
        message = super().format(record)
        command = _COMMANDS.get(record.levelno)
        if command is None:
            return message
        return f"::{command}::{escape_data(message)}"


def configure_logging(debug: Optional[bool] = None) -> None:
    """Route package logging to stdout using workflow commands.

    Debug output is enabled when ``debug`` is true or, if unset, when the
    runner was started with ``RUNNER_DEBUG=1``.
    """
    if debug is None:
        debug = os.getenv("RUNNER_DEBUG") == "1"

    handler = logging.StreamHandler(sys.stdout)
    handler.setFormatter(WorkflowCommandFormatter("%(message)s"))

    package_logger = logging.getLogger("pr_metadata")
    for existing in list(package_logger.handlers):
        package_logger.removeHandler(existing)
    package_logger.addHandler(handler)
    package_logger.setLevel(logging.DEBUG if debug else logging.INFO)
    package_logger.propagate = False


def set_output(name: str, value: Any, output_path: Optional[str] = None) -> None:
    """Set an action output.

    Writes ``name=value`` to the ``GITHUB_OUTPUT`` file; without one, falls
    back to the legacy ``::set-output`` command on stdout.
    """
    if output_path is None:
        output_path = os.getenv("GITHUB_OUTPUT")

    text = str(value)
    if output_path:
        with open(output_path, "a", encoding="utf-8") as output_file:
            output_file.write(f"{name}={text}\n")
        return

    print(f"::set-output name={escape_property(name)}::{escape_data(text)}")
