"""State shared by all steps of a run."""

from __future__ import annotations

import os
import threading
from typing import Any

from .config import Config
from .executor import RunType


class ExecutionContext:
    """The run type, privilege escalation tool and configuration of a run."""

    def __init__(self, run_type: RunType, sudo: Any, config: Config) -> None:
        self.run_type = run_type
        self.sudo = sudo
        self.config = config
        self.under_ssh = "SSH_CLIENT" in os.environ or "SSH_TTY" in os.environ
        self._lock = threading.Lock()
        self._tmux_session: str | None = None

    def set_tmux_session(self, session_name: str) -> None:
        """Remember the tmux session that commands should run in."""
        with self._lock:
            self._tmux_session = session_name

    def get_tmux_session(self) -> str | None:
        """The tmux session commands run in, if any."""
        with self._lock:
            return self._tmux_session