"""The effective configuration: the configuration file combined with the command line."""

from __future__ import annotations

import logging
import os
import shlex
from pathlib import Path
from typing import Any

from .cli_args import CommandLineArgs, parse_args
from .config_file import ArchPackageManager, ConfigFile, read_config
from .step import Step

log = logging.getLogger(__name__)


def config_directory() -> Path:
    """The platform's configuration directory."""
    if os.name == "nt":
        import platformdirs

        return Path(platformdirs.user_config_dir(appname=None, appauthor=False, roaming=True))
    xdg = os.environ.get("XDG_CONFIG_HOME")
    if xdg and os.path.isabs(xdg):
        return Path(xdg)
    return Path.home() / ".config"


def compute_allowed_steps(opt: CommandLineArgs, config_file: ConfigFile) -> list[Step]:
    """Steps enabled by ``only`` lists minus those disabled, keeping steps named by ``--only``."""
    enabled = [*opt.only, *(config_file.get("misc", "only") or [])]
    if not enabled:
        enabled = list(Step)
    disabled = [*opt.disable, *(config_file.get("misc", "disable") or [])]
    return [step for step in enabled if step not in disabled or step in opt.only]


class Config:
    """Options decided from the configuration file and the command line together."""

    def __init__(self, opt: CommandLineArgs | None = None, config_file: ConfigFile | None = None) -> None:
        self.opt = opt if opt is not None else parse_args([])
        self.config_file = config_file if config_file is not None else ConfigFile()
        self.allowed_steps = compute_allowed_steps(self.opt, self.config_file)

    def load(self, opt: CommandLineArgs) -> "Config":
        """Read the configuration file for ``opt`` into this configuration and return it.

        Errors while reading are logged and the default configuration is used.
        """
        directory = config_directory()
        if directory.is_dir():
            try:
                config_file = read_config(directory, opt.config)
            except (OSError, ValueError, RuntimeError) as err:
                log.error("failed to load configuration: %s", err)
                config_file = ConfigFile()
        else:
            log.debug("Configuration directory %s does not exist", directory)
            config_file = ConfigFile()
        self.opt = opt
        self.config_file = config_file
        self.allowed_steps = compute_allowed_steps(opt, config_file)
        return self

    def _value(self, section: str, key: str, default: Any = None) -> Any:
        value = self.config_file.get(section, key)
        return default if value is None else value

    # Commands and lists

    def pre_commands(self) -> dict[str, str] | None:
        return self.config_file.section("pre_commands")

    def post_commands(self) -> dict[str, str] | None:
        return self.config_file.section("post_commands")

    def commands(self) -> dict[str, str] | None:
        return self.config_file.section("commands")

    def git_repos(self) -> list[str] | None:
        return self._value("git", "repos")

    def containers_ignored_tags(self) -> list[str] | None:
        return self._value("containers", "ignored_containers")

    def remote_topgrades(self) -> list[str] | None:
        return self._value("misc", "remote_topgrades")

    def home_manager(self) -> list[str] | None:
        return self._value("linux", "home_manager_arguments")

    def distrobox_containers(self) -> list[str] | None:
        return self._value("distrobox", "containers")

    def vagrant_directories(self) -> list[str] | None:
        return self._value("vagrant", "directories")

    # Steps

    def should_run(self, step: Step) -> bool:
        """Tell whether ``step`` is enabled and not disabled."""
        return step in self.allowed_steps

    def ignore_failure(self, step: Step) -> bool:
        return step in (self._value("misc", "ignore_failures") or [])

    def yes(self, step: Step) -> bool:
        """Whether to say yes to package managers' prompts for ``step``."""
        assume_yes = self._value("misc", "assume_yes")
        if assume_yes is not None:
            return assume_yes
        if self.opt.yes is not None:
            return not self.opt.yes or step in self.opt.yes
        return False

    def should_run_custom_command(self, name: str) -> bool:
        return not self.opt.custom_commands or name in self.opt.custom_commands

    def should_execute_remote(self, hostname, remote: str) -> bool:
        """Tell whether to run on ``remote``; ``hostname`` is this host's name or None if unknown."""
        _, _, remote_host = remote.rpartition("@") if "@" in remote else ("", "", remote)
        if "@" in remote:
            remote_host = remote.split("@", 1)[1]
        if isinstance(hostname, str) and remote_host == hostname:
            return False
        if self.opt.remote_host_limit is not None:
            return self.opt.remote_host_limit.search(remote_host) is not None
        return True

    # Flags combined from the command line and the file

    def no_self_update(self) -> bool:
        return self.opt.no_self_update or self._value("misc", "no_self_update", False)

    def run_in_tmux(self) -> bool:
        return self.opt.run_in_tmux or self._value("misc", "run_in_tmux", False)

    def cleanup(self) -> bool:
        return self.opt.cleanup or self._value("misc", "cleanup", False)

    def dry_run(self) -> bool:
        return self.opt.dry_run

    def no_retry(self) -> bool:
        return self.opt.no_retry or self._value("misc", "no_retry", False)

    def keep_at_end(self) -> bool:
        return self.opt.keep_at_end or "TOPGRADE_KEEP_END" in os.environ

    def skip_notify(self) -> bool:
        return self._value("misc", "skip_notify", self.opt.skip_notify)

    def use_predefined_git_repos(self) -> bool:
        return not self.opt.disable_predefined_git_repos and self._value("git", "pull_predefined", True)

    def verbose(self) -> bool:
        return self.opt.verbose

    def show_skipped(self) -> bool:
        return self.opt.show_skipped

    def tracing_filter_directives(self) -> str:
        """Log filter directives: the file's, then the command line's, then ``debug`` if verbose."""
        directives = ",".join(self._value("misc", "log_filters") or [])
        directives += "," + self.opt.log_filter
        if self.verbose():
            directives += ",debug"
        return directives

    # Misc

    def remote_topgrade_path(self) -> str:
        return self._value("misc", "remote_topgrade_path", "topgrade")

    def ssh_arguments(self) -> str | None:
        return self._value("misc", "ssh_arguments")

    def tmux_arguments(self) -> list[str]:
        """Extra tmux arguments split shell-style; raise ValueError on unbalanced quotes."""
        arguments = self._value("misc", "tmux_arguments", "")
        try:
            return shlex.split(arguments)
        except ValueError as err:
            raise ValueError(f"Failed to parse `tmux_arguments`: `{arguments}`: {err}") from err

    def set_title(self) -> bool:
        return self._value("misc", "set_title", True)

    def display_time(self) -> bool:
        return self._value("misc", "display_time", True)

    def notify_each_step(self) -> bool:
        return self._value("misc", "notify_each_step", False)

    def bashit_branch(self) -> str:
        return self._value("misc", "bashit_branch", "stable")

    def sudo_command(self) -> str | None:
        return self._value("misc", "sudo_command")

    def pre_sudo(self) -> bool:
        return self._value("misc", "pre_sudo", False)

    # Git and containers

    def git_arguments(self) -> str | None:
        return self._value("git", "arguments")

    def git_concurrency_limit(self) -> int | None:
        return self._value("git", "max_concurrency")

    # Windows

    def accept_all_windows_updates(self) -> bool:
        return self._value("windows", "accept_all_updates", True)

    def self_rename(self) -> bool:
        return self._value("windows", "self_rename", False)

    def wsl_update_pre_release(self) -> bool:
        return self._value("windows", "wsl_update_pre_release", False)

    def wsl_update_use_web_download(self) -> bool:
        return self._value("windows", "wsl_update_use_web_download", False)

    def open_remotes_in_new_terminal(self) -> bool:
        return self._value("windows", "open_remotes_in_new_terminal", False)

    # Brew, composer, vim

    def brew_cask_greedy(self) -> bool:
        return self._value("brew", "greedy_cask", False)

    def brew_greedy_latest(self) -> bool:
        return self._value("brew", "greedy_latest", False)

    def brew_autoremove(self) -> bool:
        return self._value("brew", "autoremove", False)

    def brew_fetch_head(self) -> bool:
        return self._value("brew", "fetch_head", False)

    def composer_self_update(self) -> bool:
        return self._value("composer", "self_update", False)

    def force_vim_plug_update(self) -> bool:
        return self._value("vim", "force_plug_update", False)

    # Linux

    def garuda_update_arguments(self) -> str:
        return self._value("linux", "garuda_update_arguments", "")

    def trizen_arguments(self) -> str:
        return self._value("linux", "trizen_arguments", "")

    def pikaur_arguments(self) -> str:
        return self._value("linux", "pikaur_arguments", "")

    def pamac_arguments(self) -> str:
        return self._value("linux", "pamac_arguments", "")

    def show_arch_news(self) -> bool:
        return self._value("linux", "show_arch_news", True)

    def arch_package_manager(self) -> ArchPackageManager:
        return self._value("linux", "arch_package_manager", ArchPackageManager.AUTODETECT)

    def yay_arguments(self) -> str:
        return self._value("linux", "yay_arguments", "")

    def aura_aur_arguments(self) -> str:
        return self._value("linux", "aura_aur_arguments", "")

    def aura_pacman_arguments(self) -> str:
        return self._value("linux", "aura_pacman_arguments", "")

    def apt_arguments(self) -> str | None:
        return self._value("linux", "apt_arguments")

    def dnf_arguments(self) -> str | None:
        return self._value("linux", "dnf_arguments")

    def nix_arguments(self) -> str | None:
        return self._value("linux", "nix_arguments")

    def nix_env_arguments(self) -> str | None:
        return self._value("linux", "nix_env_arguments")

    def enable_tlmgr_linux(self) -> bool:
        return self._value("linux", "enable_tlmgr", False)

    def redhat_distro_sync(self) -> bool:
        return self._value("linux", "redhat_distro_sync", False)

    def suse_dup(self) -> bool:
        return self._value("linux", "suse_dup", False)

    def rpm_ostree(self) -> bool:
        return self._value("linux", "rpm_ostree", False)

    def emerge_sync_flags(self) -> str | None:
        return self._value("linux", "emerge_sync_flags")

    def emerge_update_flags(self) -> str | None:
        return self._value("linux", "emerge_update_flags")

    def npm_use_sudo(self) -> bool:
        return self._value("npm", "use_sudo", False)

    def yarn_use_sudo(self) -> bool:
        return self._value("yarn", "use_sudo", False)

    def firmware_upgrade(self) -> bool:
        return self._value("firmware", "upgrade", False)

    def flatpak_use_sudo(self) -> bool:
        return self._value("flatpak", "use_sudo", False)

    def distrobox_root(self) -> bool:
        return self._value("distrobox", "use_root", False)

    def lensfun_use_sudo(self) -> bool:
        return self._value("lensfun", "use_sudo", False)

    # Vagrant

    def vagrant_power_on(self) -> bool | None:
        return self._value("vagrant", "power_on")

    def vagrant_always_suspend(self) -> bool | None:
        return self._value("vagrant", "always_suspend")

    # Python

    def enable_pipupgrade(self) -> bool:
        return self._value("python", "enable_pipupgrade", False)

    def pipupgrade_arguments(self) -> str:
        return self._value("python", "pipupgrade_arguments", "")

    def enable_pip_review(self) -> bool:
        return self._value("python", "enable_pip_review", False)

    def enable_pip_review_local(self) -> bool:
        return self._value("python", "enable_pip_review_local", False)

    def __repr__(self) -> str:
        return f"Config(opt={self.opt!r}, config_file={self.config_file!r})"