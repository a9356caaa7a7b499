"""Reading, validating and merging the TOML configuration files."""

from __future__ import annotations

import enum
import logging
import os
import re
import tomllib
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Callable, Iterator

from .step import parse_step

log = logging.getLogger(__name__)

EXAMPLE_CONFIG = """\
# Configuration for the update runner.
# Uncomment and change the settings you need.

[misc]
# Do not ask to retry failed steps
# no_retry = true

# Steps that should never run
# disable = ["system"]

# Run inside tmux
# run_in_tmux = true

[git]
# Additional git repositories to pull
# repos = ["~/src/*/"]

[commands]
# "Example command" = "echo example"
"""


class ArchPackageManager(enum.Enum):
    """Package manager used to update an Arch Linux system."""

    AUTODETECT = "autodetect"
    AURA = "aura"
    GARUDA_UPDATE = "garuda_update"
    PACMAN = "pacman"
    PAMAC = "pamac"
    PARU = "paru"
    PIKAUR = "pikaur"
    TRIZEN = "trizen"
    YAY = "yay"


def _where(section: str, key: str) -> str:
    return f"{section}.{key}"


def _bool(value: Any, where: str) -> bool:
    if not isinstance(value, bool):
        raise ValueError(f"invalid type for `{where}`: expected a boolean")
    return value


def _uint(value: Any, where: str) -> int:
    if isinstance(value, bool) or not isinstance(value, int) or value < 0:
        raise ValueError(f"invalid value for `{where}`: expected a non-negative integer")
    return value


def _string(value: Any, where: str) -> str:
    if not isinstance(value, str):
        raise ValueError(f"invalid type for `{where}`: expected a string")
    return value


def _strings(value: Any, where: str) -> list[str]:
    if not isinstance(value, list) or not all(isinstance(item, str) for item in value):
        raise ValueError(f"invalid type for `{where}`: expected a list of strings")
    return list(value)


def _steps(value: Any, where: str) -> list:
    names = _strings(value, where)
    try:
        return [parse_step(name) for name in names]
    except ValueError as err:
        raise ValueError(f"invalid value for `{where}`: {err}") from None


def _arch(value: Any, where: str) -> ArchPackageManager:
    try:
        return ArchPackageManager(_string(value, where))
    except ValueError as err:
        raise ValueError(f"invalid value for `{where}`: {err}") from None


def _keep_first(left, right):
    return left if left is not None else right


def _append_string(left, right):
    if left is None:
        return right
    if right is None:
        return left
    return f"{left} {right}"


def _prepend_list(left, right):
    if left is None:
        return right
    if right is None:
        return left
    return [*right, *left]


_Field = tuple[Callable[[Any, str], Any], Callable[[Any, Any], Any]]

BOOL: _Field = (_bool, _keep_first)
UINT: _Field = (_uint, _keep_first)
STRING: _Field = (_string, _keep_first)
ARGUMENTS: _Field = (_string, _append_string)
LIST: _Field = (_strings, _prepend_list)
LIST_KEEP: _Field = (_strings, _keep_first)
STEPS: _Field = (_steps, _prepend_list)
ARCH: _Field = (_arch, _keep_first)

_SECTIONS: dict[str, dict[str, _Field]] = {
    "include": {"paths": LIST},
    "misc": {
        "pre_sudo": BOOL,
        "sudo_command": STRING,
        "disable": STEPS,
        "ignore_failures": STEPS,
        "remote_topgrades": LIST,
        "remote_topgrade_path": STRING,
        "ssh_arguments": ARGUMENTS,
        "tmux_arguments": ARGUMENTS,
        "set_title": BOOL,
        "display_time": BOOL,
        "assume_yes": BOOL,
        "no_retry": BOOL,
        "run_in_tmux": BOOL,
        "cleanup": BOOL,
        "notify_each_step": BOOL,
        "skip_notify": BOOL,
        "bashit_branch": STRING,
        "only": STEPS,
        "no_self_update": BOOL,
        "log_filters": LIST_KEEP,
    },
    "python": {
        "enable_pip_review": BOOL,
        "enable_pip_review_local": BOOL,
        "enable_pipupgrade": BOOL,
        "pipupgrade_arguments": STRING,
    },
    "composer": {"self_update": BOOL},
    "brew": {
        "greedy_cask": BOOL,
        "greedy_latest": BOOL,
        "autoremove": BOOL,
        "fetch_head": BOOL,
    },
    "linux": {
        "yay_arguments": ARGUMENTS,
        "aura_aur_arguments": ARGUMENTS,
        "aura_pacman_arguments": ARGUMENTS,
        "arch_package_manager": ARCH,
        "show_arch_news": BOOL,
        "garuda_update_arguments": ARGUMENTS,
        "trizen_arguments": ARGUMENTS,
        "pikaur_arguments": ARGUMENTS,
        "pamac_arguments": ARGUMENTS,
        "dnf_arguments": ARGUMENTS,
        "nix_arguments": ARGUMENTS,
        "nix_env_arguments": ARGUMENTS,
        "apt_arguments": ARGUMENTS,
        "enable_tlmgr": BOOL,
        "redhat_distro_sync": BOOL,
        "suse_dup": BOOL,
        "rpm_ostree": BOOL,
        "emerge_sync_flags": ARGUMENTS,
        "emerge_update_flags": ARGUMENTS,
        "home_manager_arguments": LIST,
    },
    "git": {
        "max_concurrency": UINT,
        "arguments": ARGUMENTS,
        "repos": LIST,
        "pull_predefined": BOOL,
    },
    "containers": {"ignored_containers": LIST},
    "windows": {
        "accept_all_updates": BOOL,
        "self_rename": BOOL,
        "open_remotes_in_new_terminal": BOOL,
        "wsl_update_pre_release": BOOL,
        "wsl_update_use_web_download": BOOL,
    },
    "npm": {"use_sudo": BOOL},
    "yarn": {"use_sudo": BOOL},
    "vim": {"force_plug_update": BOOL},
    "firmware": {"upgrade": BOOL},
    "vagrant": {
        "directories": LIST,
        "power_on": BOOL,
        "always_suspend": BOOL,
    },
    "flatpak": {"use_sudo": BOOL},
    "distrobox": {"use_root": BOOL, "containers": LIST},
    "lensfun": {"use_sudo": BOOL},
}

_COMMAND_SECTIONS = frozenset({"pre_commands", "post_commands", "commands"})


def _parse_section(name: str, table: Any) -> dict[str, Any]:
    if not isinstance(table, dict):
        raise ValueError(f"invalid type for `{name}`: expected a table")
    if name in _COMMAND_SECTIONS:
        return {key: _string(value, _where(name, key)) for key, value in sorted(table.items())}
    fields = _SECTIONS[name]
    parsed: dict[str, Any] = {}
    for key, value in table.items():
        if key not in fields:
            raise ValueError(f"unknown field `{key}` in section [{name}]")
        convert, _ = fields[key]
        parsed[key] = convert(value, _where(name, key))
    return parsed


@dataclass
class ConfigFile:
    """A validated configuration: a mapping of section names to their settings."""

    sections: dict[str, dict[str, Any]] = field(default_factory=dict)

    def merge(self, other: "ConfigFile") -> "ConfigFile":
        """Merge ``other`` into this configuration; settings already here take priority.

        Argument strings are joined, lists are prepended with ``other``'s items and
        command tables are extended, ``other``'s commands replacing same-named ones.
        """
        for name, right in other.sections.items():
            left = self.sections.get(name)
            if left is None:
                self.sections[name] = dict(right)
            elif name in _COMMAND_SECTIONS:
                self.sections[name] = dict(sorted({**left, **right}.items()))
            else:
                fields = _SECTIONS[name]
                merged = dict(left)
                for key, value in right.items():
                    merged[key] = fields[key][1](left.get(key), value)
                self.sections[name] = merged
        return self

    def section(self, name: str) -> dict[str, Any] | None:
        """The settings of a section, or None if it is absent."""
        return self.sections.get(name)

    def get(self, section: str, key: str) -> Any:
        """One setting, or None if it or its section is absent."""
        settings = self.sections.get(section)
        return None if settings is None else settings.get(key)


def parse_config(text: str) -> ConfigFile:
    """Parse and validate configuration text; raise ValueError on any problem."""
    data = tomllib.loads(text)
    sections: dict[str, dict[str, Any]] = {}
    for name, table in data.items():
        if name not in _SECTIONS and name not in _COMMAND_SECTIONS:
            raise ValueError(f"unknown field `{name}`")
        sections[name] = _parse_section(name, table)
    return ConfigFile(sections)


def _parse_include_only(text: str) -> ConfigFile:
    data = tomllib.loads(text)
    if "include" not in data:
        return ConfigFile()
    return ConfigFile({"include": _parse_section("include", data["include"])})


_INCLUDE_RE = re.compile(r"^\s*\[include]")


def _split_inclusive_left(pattern: re.Pattern, text: str) -> Iterator[str]:
    last = 0
    for match in pattern.finditer(text):
        if match.start() > last:
            yield text[last:match.start()]
        last = match.start()
    if last < len(text):
        yield text[last:]


def ensure_misc_is_present(path, contents: str) -> str:
    """Add a leading ``[misc]`` section to the file if it has none; return the contents."""
    if "[misc]" in contents:
        return contents
    path = Path(path)
    log.debug("Adding [misc] section to %s", path)
    contents = "[misc]\n" + contents
    try:
        path.write_text(contents)
    except OSError as err:
        raise RuntimeError(
            "Tried to auto-migrate the config file, unable to write to config file.\n"
            'Please add "[misc]" section manually to the first line of the file.\n'
            f"Error: {err}"
        ) from err
    return contents


def ensure_topgrade_d(config_directory) -> list[Path]:
    """List the extra configuration files in ``topgrade.d``, creating the directory if missing."""
    directory = Path(config_directory) / "topgrade.d"
    if directory.exists():
        found = sorted(entry for entry in directory.iterdir() if entry.is_file())
        for entry in found:
            log.debug("Found additional (directory) configuration file at %s", entry)
        return found
    log.debug("No additional configuration directory exists, creating one")
    directory.mkdir(parents=True, exist_ok=True)
    return []


def ensure_config(config_directory) -> tuple[Path | None, list[Path]]:
    """Find the main configuration file and the extra ones.

    When neither exists, the example configuration is written as the main file.
    """
    config_directory = Path(config_directory)
    candidates = [
        config_directory / "topgrade.toml",
        config_directory / "topgrade" / "topgrade.toml",
    ]
    main = next((path for path in candidates if path.exists()), None)
    if main is not None:
        log.debug("Configuration at %s", main)

    extras = ensure_topgrade_d(config_directory)

    if main is None and not extras:
        main = candidates[0]
        log.debug("No configuration exists")
        try:
            main.write_text(EXAMPLE_CONFIG)
        except OSError as err:
            log.debug("Unable to write the example configuration file to %s: %s", main, err)
            raise
    return main, extras


def _read_text(path: Path) -> str:
    try:
        return path.read_text()
    except OSError:
        log.error("Unable to read %s", path)
        raise


def read_config(config_directory, config_path=None) -> ConfigFile:
    """Read the configuration, with its ``topgrade.d`` files and ``[include]`` files.

    Without ``config_path`` the main file is looked up in ``config_directory``.
    """
    result = ConfigFile()

    if config_path is None:
        main, extras = ensure_config(config_directory)
        for extra in extras:
            text = _read_text(extra)
            try:
                parsed = parse_config(text)
            except ValueError:
                log.error("Failed to deserialize %s", extra)
                raise
            result.merge(parsed)
        if main is None:
            return result
        config_path = main

    config_path = Path(config_path)
    contents = ensure_misc_is_present(config_path, _read_text(config_path))

    for chunk in _split_inclusive_left(_INCLUDE_RE, contents):
        try:
            include_only = _parse_include_only(chunk)
        except ValueError:
            log.error("Failed to deserialize an include section of %s", config_path)
            raise

        for include in reversed(include_only.get("include", "paths") or []):
            include_path = Path(os.path.expanduser(include))
            try:
                text = include_path.read_text()
            except OSError as err:
                log.error("Unable to read %s: %s", include_path, err)
                continue
            try:
                result.merge(parse_config(text))
            except ValueError as err:
                log.error("Failed to deserialize %s: %s", include_path, err)

        try:
            result.merge(parse_config(chunk))
        except ValueError as err:
            log.error("Failed to deserialize %s: %s", config_path, err)

    git = result.sections.get("git")
    if git is not None and git.get("repos") is not None:
        expanded = []
        for repo in git["repos"]:
            path = os.path.expanduser(repo)
            log.debug("Path %s expanded to %s", repo, path)
            expanded.append(path)
        git["repos"] = expanded

    log.debug("Loaded configuration: %r", result)
    return result