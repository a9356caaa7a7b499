"""Results of the steps performed during a run."""

from __future__ import annotations

import enum
from dataclasses import dataclass
from typing import Iterator


class Outcome(enum.Enum):
    """How a step ended."""

    SUCCESS = "success"
    FAILURE = "failure"
    IGNORED = "ignored"
    SKIPPED = "skipped"


@dataclass(frozen=True)
class StepResult:
    """The outcome of one step, with the reason when it was skipped."""

    outcome: Outcome
    reason: str | None = None

    @classmethod
    def success(cls) -> "StepResult":
        return cls(Outcome.SUCCESS)

    @classmethod
    def failure(cls) -> "StepResult":
        return cls(Outcome.FAILURE)

    @classmethod
    def ignored(cls) -> "StepResult":
        return cls(Outcome.IGNORED)

    @classmethod
    def skipped(cls, reason: str) -> "StepResult":
        return cls(Outcome.SKIPPED, reason)

    def failed(self) -> bool:
        """Tell whether the step failed; ignored and skipped steps did not."""
        return self.outcome is Outcome.FAILURE


class Report:
    """Step results in the order the steps were run."""

    def __init__(self) -> None:
        self._data: list[tuple[str, StepResult]] = []

    @property
    def data(self) -> list[tuple[str, StepResult]]:
        """The reported ``(key, result)`` pairs, oldest first."""
        return list(self._data)

    def push_result(self, key: str, result: StepResult) -> None:
        """Record the result of the step named ``key``; each key is reported once."""
        if any(existing == key for existing, _ in self._data):
            raise ValueError(f"{key} already reported")
        self._data.append((key, result))

    def __iter__(self) -> Iterator[tuple[str, StepResult]]:
        return iter(self._data)

    def __len__(self) -> int:
        return len(self._data)