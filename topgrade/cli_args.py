"""Command line options of the update runner."""

from __future__ import annotations

import argparse
import re
from dataclasses import dataclass, field
from pathlib import Path

from .step import Step, parse_step

DEFAULT_LOG_LEVEL = "warn"
"""Log filter used when none is given on the command line."""

VERSION = "15.0.0"

SHELLS = ("bash", "elvish", "fish", "powershell", "zsh")


@dataclass
class CommandLineArgs:
    """Options given on the command line."""

    edit_config: bool = False
    show_config_reference: bool = False
    run_in_tmux: bool = False
    cleanup: bool = False
    dry_run: bool = False
    no_retry: bool = False
    disable: list[Step] = field(default_factory=list)
    only: list[Step] = field(default_factory=list)
    custom_commands: list[str] = field(default_factory=list)
    env: list[str] = field(default_factory=list)
    verbose: bool = False
    keep_at_end: bool = False
    skip_notify: bool = False
    yes: list[Step] | None = None
    disable_predefined_git_repos: bool = False
    config: Path | None = None
    remote_host_limit: re.Pattern | None = None
    show_skipped: bool = False
    log_filter: str = DEFAULT_LOG_LEVEL
    gen_completion: str | None = None
    gen_manpage: bool = False
    no_self_update: bool = False

    def tracing_filter_directives(self) -> str:
        """Log filter directives known before the configuration file is read."""
        directives = self.log_filter
        if self.verbose:
            directives += ",debug"
        return directives


def _step(value: str) -> Step:
    try:
        return parse_step(value)
    except ValueError as err:
        raise argparse.ArgumentTypeError(str(err)) from None


def _regex(value: str) -> re.Pattern:
    try:
        return re.compile(value)
    except re.error as err:
        raise argparse.ArgumentTypeError(f"invalid regular expression `{value}`: {err}") from None


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(prog="topgrade", description="Upgrade all the things")
    parser.add_argument("-V", "--version", action="version", version=f"topgrade {VERSION}")
    parser.add_argument("--edit-config", dest="edit_config", action="store_true",
                        help="Edit the configuration file")
    parser.add_argument("--config-reference", dest="show_config_reference", action="store_true",
                        help="Show config reference")
    parser.add_argument("-t", "--tmux", dest="run_in_tmux", action="store_true", help="Run inside tmux")
    parser.add_argument("-c", "--cleanup", dest="cleanup", action="store_true",
                        help="Cleanup temporary or old files")
    parser.add_argument("-n", "--dry-run", dest="dry_run", action="store_true",
                        help="Print what would be done")
    parser.add_argument("--no-retry", dest="no_retry", action="store_true",
                        help="Do not ask to retry failed steps")
    parser.add_argument("--disable", dest="disable", metavar="STEP", type=_step, nargs="+",
                        action="extend", default=[],
                        help="Do not perform upgrades for the given steps")
    parser.add_argument("--only", dest="only", metavar="STEP", type=_step, nargs="+",
                        action="extend", default=[],
                        help="Perform only the specified steps (experimental)")
    parser.add_argument("--custom-commands", dest="custom_commands", metavar="NAME", nargs="+",
                        action="extend", default=[], help="Run only specific custom commands")
    parser.add_argument("--env", dest="env", metavar="NAME=VALUE", nargs="+", action="extend",
                        default=[], help="Set environment variables")
    parser.add_argument("-v", "--verbose", dest="verbose", action="store_true",
                        help="Output debug logs. Alias for `--log-filter debug`.")
    parser.add_argument("-k", "--keep", dest="keep_at_end", action="store_true",
                        help="Prompt for a key before exiting")
    parser.add_argument("--skip-notify", dest="skip_notify", action="store_true",
                        help="Skip sending a notification at the end of a run")
    parser.add_argument("-y", "--yes", dest="yes", metavar="STEP", type=_step, nargs="*",
                        action="extend", default=None,
                        help="Say yes to package manager's prompt")
    parser.add_argument("--disable-predefined-git-repos", dest="disable_predefined_git_repos",
                        action="store_true", help="Don't pull the predefined git repos")
    parser.add_argument("--config", dest="config", metavar="PATH", type=Path,
                        help="Alternative configuration file")
    parser.add_argument("--remote-host-limit", dest="remote_host_limit", metavar="REGEX",
                        type=_regex,
                        help="A regular expression for restricting remote host execution")
    parser.add_argument("--show-skipped", dest="show_skipped", action="store_true",
                        help="Show the reason for skipped steps")
    parser.add_argument("--log-filter", dest="log_filter", default=DEFAULT_LOG_LEVEL,
                        help="Tracing filter directives")
    parser.add_argument("--gen-completion", dest="gen_completion", choices=SHELLS,
                        help=argparse.SUPPRESS)
    parser.add_argument("--gen-manpage", dest="gen_manpage", action="store_true",
                        help=argparse.SUPPRESS)
    parser.add_argument("--no-self-update", dest="no_self_update", action="store_true",
                        help="Don't update Topgrade")
    return parser


def parse_args(argv=None) -> CommandLineArgs:
    """Parse the command line (``sys.argv[1:]`` by default); exit on invalid options."""
    namespace = _build_parser().parse_args(argv)
    return CommandLineArgs(**vars(namespace))