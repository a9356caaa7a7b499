"""Run steps, record their results and offer to retry failures."""

from __future__ import annotations

import logging
import sys
import traceback
from typing import Callable

from .errors import DryRun, SkipStep
from .execution_context import ExecutionContext
from .interrupted import interrupted, unset_interrupted
from .report import Report, StepResult
from .step import Step

log = logging.getLogger(__name__)


def _print_error(key: str, error: BaseException) -> None:
    details = "".join(traceback.format_exception_only(type(error), error)).rstrip()
    print(f"{key} failed:\n{details}", file=sys.stderr)


def _prompt_retry(was_interrupted: bool, key: str) -> bool:
    """Ask the user whether to retry the step; 'q' quits the run."""
    if was_interrupted:
        print(f"\n{key} was interrupted")
    while True:
        try:
            answer = input(f"Retry {key}? (y)es/(N)o/(q)uit ").strip().lower()
        except EOFError:
            return False
        if answer == "y":
            return True
        if answer in ("", "n"):
            return False
        if answer == "q":
            raise KeyboardInterrupt


class Runner:
    """Perform steps allowed by the configuration and collect a report."""

    def __init__(
        self,
        ctx: ExecutionContext,
        ask_retry: Callable[[bool, str], bool] | None = None,
    ) -> None:
        self._ctx = ctx
        self._ask_retry = ask_retry if ask_retry is not None else _prompt_retry
        self.report = Report()

    def execute(self, step: Step, key: str, func: Callable[[], object]) -> None:
        """Run ``func`` as the step named ``key`` if ``step`` is allowed.

        A dry run records nothing; a skipped step is recorded only when
        skipped steps are shown; a failure may be retried.
        """
        config = self._ctx.config
        if not config.should_run(step):
            return

        log.debug("Step %r", key)
        while True:
            try:
                func()
            except DryRun:
                return
            except SkipStep as err:
                if config.verbose() or config.show_skipped():
                    self.report.push_result(key, StepResult.skipped(str(err)))
                return
            except Exception as err:
                log.debug("Step %r failed: %r", key, err)
                was_interrupted = interrupted()
                if was_interrupted:
                    unset_interrupted()

                ignore_failure = config.ignore_failure(step)
                should_ask = was_interrupted or not (config.no_retry() or ignore_failure)
                retry = False
                if should_ask:
                    _print_error(key, err)
                    retry = self._ask_retry(was_interrupted, key)

                if not retry:
                    result = StepResult.ignored() if ignore_failure else StepResult.failure()
                    self.report.push_result(key, result)
                    return
            else:
                self.report.push_result(key, StepResult.success())
                return