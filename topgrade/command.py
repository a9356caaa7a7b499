"""Run external programs, checking their exit status and reporting failures clearly."""

from __future__ import annotations

import logging
import os
import shlex
import subprocess
from dataclasses import dataclass
from typing import Callable, Iterable

from .errors import ProcessFailed, ProcessFailedWithOutput

log = logging.getLogger(__name__)


@dataclass(frozen=True)
class Utf8Output:
    """Captured output of a finished program, decoded as UTF-8."""

    returncode: int
    stdout: str
    stderr: str

    @property
    def success(self) -> bool:
        return self.returncode == 0

    def __str__(self) -> str:
        return self.stdout


def _lossy(data) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    return data.decode("utf-8", errors="replace")


def _strict(data, stream: str) -> str:
    if data is None:
        return ""
    if isinstance(data, str):
        return data
    try:
        return data.decode("utf-8")
    except UnicodeDecodeError as err:
        raise ValueError(f"{stream} contained invalid UTF-8: {_lossy(data)}") from err


def decode_output(completed: subprocess.CompletedProcess) -> Utf8Output:
    """Decode a finished process's output; raise ValueError on invalid UTF-8."""
    stdout = _strict(completed.stdout, "Stdout")
    stderr = _strict(completed.stderr, "Stderr")
    return Utf8Output(completed.returncode, stdout, stderr)


def _normalise(argv: Iterable) -> list[str]:
    return [os.fsdecode(item) if isinstance(item, bytes) else os.fspath(item) for item in argv]


def format_command(argv: Iterable) -> str:
    """Render a command line with shell quoting of its arguments."""
    program, *args = _normalise(argv)
    if not args:
        return program
    return f"{program} {shlex.join(args)}"


def _log(argv: list[str]) -> str:
    command = format_command(argv)
    log.debug("Executing command `%s`", command)
    return command


def output_checked(
    argv: Iterable,
    succeeded: Callable[[subprocess.CompletedProcess], bool] | None = None,
    **kwargs,
) -> subprocess.CompletedProcess:
    """Run a program capturing its output; raise if it fails.

    ``succeeded`` decides success from the finished process; by default a zero
    exit status is success.
    """
    argv = _normalise(argv)
    command = _log(argv)
    try:
        completed = subprocess.run(argv, capture_output=True, **kwargs)
    except OSError as err:
        err.add_note(f"Failed to execute `{command}`")
        raise

    ok = succeeded(completed) if succeeded is not None else completed.returncode == 0
    if ok:
        return completed

    message = f"Command failed: `{command}`"
    stdout = _lossy(completed.stdout).strip()
    stderr_full = _lossy(completed.stderr)
    stderr = stderr_full.strip()
    if stdout:
        message += f"\n\nStdout:\n{stdout}"
    if stderr:
        message += f"\n\nStderr:\n{stderr}"

    error = ProcessFailedWithOutput(argv[0], completed.returncode, stderr_full)
    error.add_note(message)
    log.debug("Command failed: %s\n%s", error, message)
    raise error


def output_checked_utf8(
    argv: Iterable,
    succeeded: Callable[[Utf8Output], bool] | None = None,
    **kwargs,
) -> Utf8Output:
    """Like :func:`output_checked`, but decode the output as UTF-8.

    With ``succeeded`` given, output that is not valid UTF-8 counts as failure.
    """
    if succeeded is None:
        return decode_output(output_checked(argv, **kwargs))

    def check(completed: subprocess.CompletedProcess) -> bool:
        try:
            decoded = decode_output(completed)
        except ValueError:
            return False
        return succeeded(decoded)

    return decode_output(output_checked(argv, check, **kwargs))


def status_checked(
    argv: Iterable,
    succeeded: Callable[[int], bool] | None = None,
    **kwargs,
) -> None:
    """Run a program with inherited output; raise if it fails.

    ``succeeded`` receives the exit status; by default zero is success.
    """
    argv = _normalise(argv)
    command = _log(argv)
    try:
        completed = subprocess.run(argv, **kwargs)
    except OSError as err:
        err.add_note(f"Failed to execute `{command}`")
        raise

    ok = succeeded(completed.returncode) if succeeded is not None else completed.returncode == 0
    if ok:
        return
    error = ProcessFailed(argv[0], completed.returncode)
    error.add_note(f"Command failed: `{command}`")
    log.debug("Command failed: %s", error)
    raise error


def spawn_checked(argv: Iterable, **kwargs) -> subprocess.Popen:
    """Start a program without waiting for it."""
    argv = _normalise(argv)
    command = _log(argv)
    try:
        return subprocess.Popen(argv, **kwargs)
    except OSError as err:
        err.add_note(f"Failed to execute `{command}`")
        raise