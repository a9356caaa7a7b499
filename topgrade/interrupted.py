"""Process-wide flag recording that the user pressed Ctrl+C."""

from __future__ import annotations

import signal
import threading

_interrupted = threading.Event()


def interrupted() -> bool:
    """Tell whether the program has been interrupted."""
    return _interrupted.is_set()


def set_interrupted() -> None:
    """Record that the program has been interrupted."""
    _interrupted.set()


def unset_interrupted() -> None:
    """Clear the interrupted flag; it must have been set."""
    assert _interrupted.is_set(), "the interrupted flag is not set"
    _interrupted.clear()


def _handle_sigint(signum, frame) -> None:
    set_interrupted()


def set_handler():
    """Install a SIGINT handler that sets the flag; return the previous handler."""
    return signal.signal(signal.SIGINT, _handle_sigint)