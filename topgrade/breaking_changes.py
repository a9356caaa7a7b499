"""Tell users about breaking changes on the first run of a new major release."""

from __future__ import annotations

import os
import re
import shutil
from dataclasses import dataclass
from pathlib import Path

from .cli_args import VERSION

_NOT_SEMVER = "Topgrade version is not semantic"
_NOT_NUMBER = "Topgrade version is not dot-separated numbers"
_NUMBER = re.compile(r"\+?[0-9]+")

KEEP_FILE = "topgrade_keep"
BREAKING_CHANGES = ""
"""Breaking changes of this release, shown on its first run."""


@dataclass(frozen=True)
class Version:
    """A ``major.minor.patch`` version number."""

    major: int
    minor: int
    patch: int

    @classmethod
    def parse(cls, text: str) -> "Version":
        """Parse ``x.y.z``; extra components are ignored. Raise ValueError if invalid."""
        parts = text.split(".")[:3]
        for part in parts:
            if not _NUMBER.fullmatch(part):
                raise ValueError(_NOT_NUMBER)
        if len(parts) < 3:
            raise ValueError(_NOT_SEMVER)
        major, minor, patch = (int(part) for part in parts)
        if major == minor == patch == 0:
            raise ValueError("Version numbers can not be all 0s")
        return cls(major, minor, patch)

    def is_new_major_release(self) -> bool:
        """True for ``x.0.0`` releases."""
        return self.minor == 0 and self.patch == 0


def _data_directory() -> Path:
    if os.name == "nt":
        import platformdirs

        return Path(platformdirs.user_data_dir(appname=None, appauthor=False, roaming=True))
    xdg = os.environ.get("XDG_DATA_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    return Path.home() / ".local" / "share"


def should_skip() -> bool:
    """True when TOPGRADE_SKIP_BRKC_NOTIFY is set to ``true``."""
    return os.environ.get("TOPGRADE_SKIP_BRKC_NOTIFY") == "true"


def keep_file_path(data_dir=None) -> Path:
    """The file recording the major release whose breaking changes were confirmed."""
    directory = Path(data_dir) if data_dir is not None else _data_directory()
    return directory / KEEP_FILE


def first_run_of_major_release(version: str = VERSION, data_dir=None) -> bool:
    """True if ``version`` is a new major release not yet confirmed in the keep file."""
    if not Version.parse(version).is_new_major_release():
        return False
    keep_file = keep_file_path(data_dir)
    return not keep_file.exists() or keep_file.read_text() != version


def _print_separator(title: str) -> None:
    width = shutil.get_terminal_size((80, 20)).columns
    line = f"── {title} "
    print(f"\n{line}{'─' * max(width - len(line), 0)}")


def print_breaking_changes(version: str = VERSION, contents: str = BREAKING_CHANGES) -> None:
    """Print the breaking changes of ``version``."""
    _print_separator(f"Topgrade {version} Breaking Changes")
    print(f"{contents or 'No Breaking changes'}\n")


def write_keep_file(version: str = VERSION, data_dir=None) -> Path:
    """Record that the breaking changes of ``version`` were confirmed; return the file."""
    keep_file = keep_file_path(data_dir)
    keep_file.parent.mkdir(parents=True, exist_ok=True)
    keep_file.write_text(version)
    return keep_file