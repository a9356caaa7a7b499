"""Exceptions raised while running update steps."""

from __future__ import annotations


def _format_status(returncode: int) -> str:
    """Describe a process exit status the way a shell user expects to read it."""
    if returncode < 0:
        return f"signal: {-returncode}"
    return f"exit status: {returncode}"


class TopgradeError(Exception):
    """Base class for errors raised by this package."""


class ProcessFailed(TopgradeError):
    """A program ran but reported failure through its exit status."""

    def __init__(self, program: str, status: int) -> None:
        self.program = program
        self.status = status
        super().__init__(f"`{program}` failed: {_format_status(status)}")


class ProcessFailedWithOutput(TopgradeError):
    """A program whose output was captured ran but reported failure."""

    def __init__(self, program: str, status: int, stderr: str) -> None:
        self.program = program
        self.status = status
        self.stderr = stderr
        super().__init__(f"`{program}` failed: {_format_status(status)}")


class UnknownLinuxDistribution(TopgradeError):
    """The running Linux distribution could not be identified."""

    def __init__(self) -> None:
        super().__init__("Unknown Linux Distribution")


class EmptyOSReleaseFile(TopgradeError):
    """The os-release file is missing or empty."""

    def __init__(self) -> None:
        super().__init__('File "/etc/os-release" does not exist or is empty')


class FailedGettingPackageManager(TopgradeError):
    """The system package manager could not be determined."""

    def __init__(self) -> None:
        super().__init__("Failed getting the system package manager")


class StepFailed(TopgradeError):
    """At least one step of the run failed."""

    def __init__(self) -> None:
        super().__init__("A step failed")


class DryRun(TopgradeError):
    """Raised where a dry run cannot produce a command's real output."""

    def __init__(self) -> None:
        super().__init__("Dry running")


class SkipStep(TopgradeError):
    """A step does not apply to this system and was skipped."""

    def __init__(self, reason: str) -> None:
        self.reason = reason
        super().__init__(reason)