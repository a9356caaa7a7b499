"""Commands that either run for real or, in a dry run, only print themselves."""

from __future__ import annotations

import enum
import logging
import os
import shlex
import subprocess
from typing import Callable, Iterable

from . import command as _command
from .command import Utf8Output
from .errors import DryRun

log = logging.getLogger(__name__)


class RunType(enum.Enum):
    """Whether commands are performed or only printed."""

    DRY = "dry"
    WET = "wet"

    def execute(self, program) -> "Executor":
        """Create an executor that will run ``program``."""
        return Executor(program, dry=self is RunType.DRY)

    def dry(self) -> bool:
        """Tell whether this is a dry run."""
        return self is RunType.DRY


def run_type_for(dry_run: bool) -> RunType:
    """Pick the run type from a dry-run flag."""
    return RunType.DRY if dry_run else RunType.WET


def _text(value) -> str:
    return os.fsdecode(value) if isinstance(value, bytes) else os.fspath(value)


class Executor:
    """A command line to run, or in a dry run, to print."""

    def __init__(self, program, *, dry: bool = False) -> None:
        self.program = _text(program)
        self.arguments: list[str] = []
        self.directory: str | None = None
        self.dry = dry
        self._env: dict[str, str | None] = {}

    def get_program(self) -> str:
        return self.program

    def arg(self, arg) -> "Executor":
        self.arguments.append(_text(arg))
        return self

    def args(self, args: Iterable) -> "Executor":
        self.arguments.extend(_text(arg) for arg in args)
        return self

    def current_dir(self, directory) -> "Executor":
        self.directory = _text(directory)
        return self

    def env(self, key: str, value: str) -> "Executor":
        """Set an environment variable for the program; ignored in a dry run."""
        if not self.dry:
            self._env[key] = value
        return self

    def env_remove(self, key: str) -> "Executor":
        """Remove an environment variable for the program; ignored in a dry run."""
        if not self.dry:
            self._env[key] = None
        return self

    def describe(self) -> str:
        """The line printed when this command is dry-run."""
        line = f"Dry running: {self.program} {shlex.join(self.arguments)}"
        if self.directory is not None:
            line += f" in {self.directory}"
        return line

    def _dry_run(self) -> None:
        print(self.describe())

    def _argv(self) -> list[str]:
        return [self.program, *self.arguments]

    def _run_kwargs(self) -> dict:
        kwargs: dict = {}
        if self.directory is not None:
            kwargs["cwd"] = self.directory
        if self._env:
            environment = dict(os.environ)
            for key, value in self._env.items():
                if value is None:
                    environment.pop(key, None)
                else:
                    environment[key] = value
            kwargs["env"] = environment
        return kwargs

    def spawn(self) -> subprocess.Popen | None:
        """Start the program; in a dry run print it and return None."""
        if self.dry:
            self._dry_run()
            return None
        log.debug("Running %s", self._argv())
        return _command.spawn_checked(self._argv(), **self._run_kwargs())

    def output(self) -> subprocess.CompletedProcess | None:
        """Run capturing output; in a dry run print it and return None."""
        if self.dry:
            self._dry_run()
            return None
        return _command.output_checked(self._argv(), **self._run_kwargs())

    def status_checked(self) -> None:
        self.status_checked_with(None)

    def status_checked_with(self, succeeded: Callable[[int], bool] | None) -> None:
        if self.dry:
            self._dry_run()
            return
        _command.status_checked(self._argv(), succeeded, **self._run_kwargs())

    def status_checked_with_codes(self, codes: Iterable[int]) -> None:
        """Like ``status_checked`` but the given exit codes also mean success."""
        accepted = set(codes)
        self.status_checked_with(lambda code: code == 0 or code in accepted)

    def output_checked(self) -> subprocess.CompletedProcess:
        return self.output_checked_with(None)

    def output_checked_with(
        self, succeeded: Callable[[subprocess.CompletedProcess], bool] | None
    ) -> subprocess.CompletedProcess:
        """Run capturing output; a dry run prints the command and raises DryRun."""
        if self.dry:
            self._dry_run()
            raise DryRun()
        return _command.output_checked(self._argv(), succeeded, **self._run_kwargs())

    def output_checked_utf8(self) -> Utf8Output:
        if self.dry:
            self._dry_run()
            raise DryRun()
        return _command.output_checked_utf8(self._argv(), **self._run_kwargs())