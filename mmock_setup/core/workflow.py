"""
Invocation environment of the action.

Wraps the workflow-runner conventions the action talks to:
- Inputs from INPUT_<NAME> environment variables
- Outputs appended to the $GITHUB_OUTPUT file
- Search-path registration through PATH and the $GITHUB_PATH file
- Collapsible output groups and ::debug:: / ::warning:: / ::error:: lines

All state lives in a WorkflowContext so tests can point it at a private
environment mapping and temporary files.
"""

import logging
import os
import sys
import uuid
from contextlib import contextmanager
from dataclasses import dataclass, field
from pathlib import Path
from typing import MutableMapping, Optional, TextIO

logger = logging.getLogger(__name__)


def _escape_data(value: str) -> str:
    return value.replace("%", "%25").replace("\r", "%0D").replace("\n", "%0A")


def issue_command(
    command: str,
    message: str = "",
    stream: Optional[TextIO] = None,
) -> None:
    """
    Write one workflow command line, e.g. ``::warning::message``.

    Args:
        command: Command name ('debug', 'warning', 'error', 'group', ...)
        message: Command payload
        stream: Output stream (default: sys.stdout)
    """
    stream = stream or sys.stdout
    stream.write(f"::{command}::{_escape_data(message)}\n")
    stream.flush()


class WorkflowCommandHandler(logging.Handler):
    """
    Logging handler that renders records as workflow commands.

    DEBUG becomes ``::debug::``, WARNING ``::warning::``, ERROR and above
    ``::error::``; INFO is written as a plain line.
    """

    def __init__(self, stream: Optional[TextIO] = None):
        super().__init__()
        self.stream = stream

    def emit(self, record: logging.LogRecord) -> None:
        try:
            message = self.format(record)
            stream = self.stream or sys.stdout
            if record.levelno >= logging.ERROR:
                issue_command("error", message, stream=stream)
            elif record.levelno >= logging.WARNING:
                issue_command("warning", message, stream=stream)
            elif record.levelno >= logging.INFO:
                stream.write(message + "\n")
                stream.flush()
            else:
                issue_command("debug", message, stream=stream)
        except Exception:
            self.handleError(record)


def configure_logging(verbose: bool = False, quiet: bool = False) -> None:
    """
    Route the root logger through WorkflowCommandHandler.

    Debug records are always forwarded; the runner hides them unless step
    debugging is enabled, so ``verbose`` only matters outside a runner.
    """
    if quiet:
        level = logging.ERROR
    elif verbose or os.environ.get("GITHUB_ACTIONS") == "true":
        level = logging.DEBUG
    else:
        level = logging.INFO

    handler = WorkflowCommandHandler()
    handler.setFormatter(logging.Formatter("%(message)s"))

    root = logging.getLogger()
    for existing in list(root.handlers):
        root.removeHandler(existing)
    root.addHandler(handler)
    root.setLevel(level)


@dataclass
class WorkflowContext:
    """
    Environment the action runs in.

    Attributes:
        env: Environment mapping (default: os.environ)
        stream: Stream for workflow commands and plain output
        exit_code: 0 until set_failed() is called
    """

    env: MutableMapping[str, str] = field(default_factory=lambda: os.environ)
    stream: Optional[TextIO] = None
    exit_code: int = 0

    @property
    def out(self) -> TextIO:
        return self.stream or sys.stdout

    def get_input(self, name: str) -> str:
        """
        Read an action input.

        Args:
            name: Input name as declared by the action (e.g. 'github-token')

        Returns:
            Whitespace-trimmed value, or '' when absent
        """
        key = f"INPUT_{name.replace(' ', '_').upper()}"
        return self.env.get(key, "").strip()

    def set_output(self, name: str, value: str) -> None:
        """
        Publish an output value for downstream steps.

        Appended to $GITHUB_OUTPUT; logged when no output file is configured.
        """
        output_file = self.env.get("GITHUB_OUTPUT")
        if not output_file:
            logger.info(f"Output {name}={value}")
            return

        with open(output_file, "a", encoding="utf-8") as f:
            if "\n" in value:
                delimiter = f"ghadelimiter_{uuid.uuid4()}"
                f.write(f"{name}<<{delimiter}\n{value}\n{delimiter}\n")
            else:
                f.write(f"{name}={value}\n")

    def add_path(self, directory: Path) -> None:
        """
        Make executables in directory callable by name for the rest of the run.

        Prepends to PATH of this process and, under a runner, appends to the
        $GITHUB_PATH file so later steps see it too.
        """
        directory = str(directory)
        path_file = self.env.get("GITHUB_PATH")
        if path_file:
            with open(path_file, "a", encoding="utf-8") as f:
                f.write(directory + "\n")

        current = self.env.get("PATH", "")
        self.env["PATH"] = (
            f"{directory}{os.pathsep}{current}" if current else directory
        )
        logger.debug(f"Added {directory} to PATH")

    def set_failed(self, message: str) -> None:
        """Mark the run as failed with message as the reason."""
        self.exit_code = 1
        issue_command("error", message, stream=self.out)

    @contextmanager
    def group(self, title: str):
        """Fold everything written inside the block under title."""
        issue_command("group", title, stream=self.out)
        try:
            yield
        finally:
            issue_command("endgroup", stream=self.out)


__all__ = [
    "WorkflowContext",
    "WorkflowCommandHandler",
    "configure_logging",
    "issue_command",
]
