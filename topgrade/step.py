"""The update steps that a run can perform, enable or disable."""

from __future__ import annotations

import enum


class Step(enum.Enum):
    """One kind of update. Steps are listed in their canonical order."""

    AM = "am"
    APP_MAN = "app_man"
    ASDF = "asdf"
    ATOM = "atom"
    AUDIT = "audit"
    AUTO_CPUFREQ = "auto_cpufreq"
    BIN = "bin"
    BOB = "bob"
    BREW_CASK = "brew_cask"
    BREW_FORMULA = "brew_formula"
    BUN = "bun"
    BUN_PACKAGES = "bun_packages"
    CARGO = "cargo"
    CERTBOT = "certbot"
    CHEZMOI = "chezmoi"
    CHOCOLATEY = "chocolatey"
    CHOOSENIM = "choosenim"
    CLAM_AV_DB = "clam_av_db"
    COMPOSER = "composer"
    CONDA = "conda"
    CONFIG_UPDATE = "config_update"
    CONTAINERS = "containers"
    CUSTOM_COMMANDS = "custom_commands"
    DEB_GET = "deb_get"
    DENO = "deno"
    DISTROBOX = "distrobox"
    DKP_PACMAN = "dkp_pacman"
    DOTNET = "dotnet"
    ELAN = "elan"
    EMACS = "emacs"
    FIRMWARE = "firmware"
    FLATPAK = "flatpak"
    FLUTTER = "flutter"
    FOSSIL = "fossil"
    GCLOUD = "gcloud"
    GEM = "gem"
    GHCUP = "ghcup"
    GITHUB_CLI_EXTENSIONS = "github_cli_extensions"
    GIT_REPOS = "git_repos"
    GNOME_SHELL_EXTENSIONS = "gnome_shell_extensions"
    GO = "go"
    GUIX = "guix"
    HAXELIB = "haxelib"
    HELM = "helm"
    HOME_MANAGER = "home_manager"
    JETPACK = "jetpack"
    JULIA = "julia"
    JULIAUP = "juliaup"
    KAKOUNE = "kakoune"
    HELIX = "helix"
    KREW = "krew"
    LURE = "lure"
    LENSFUN = "lensfun"
    MACPORTS = "macports"
    MAMBA = "mamba"
    MIKTEX = "miktex"
    MAS = "mas"
    MAZA = "maza"
    MICRO = "micro"
    MISE = "mise"
    MYREPOS = "myrepos"
    NIX = "nix"
    NODE = "node"
    OPAM = "opam"
    PACDEF = "pacdef"
    PACSTALL = "pacstall"
    PEARL = "pearl"
    PIP3 = "pip3"
    PIP_REVIEW = "pip_review"
    PIP_REVIEW_LOCAL = "pip_review_local"
    PIPUPGRADE = "pipupgrade"
    PIPX = "pipx"
    PKG = "pkg"
    PKGIN = "pkgin"
    PLATFORMIO_CORE = "platformio_core"
    PNPM = "pnpm"
    POETRY = "poetry"
    POWERSHELL = "powershell"
    PROTONUP = "protonup"
    PYENV = "pyenv"
    RACO = "raco"
    RCM = "rcm"
    REMOTES = "remotes"
    RESTARTS = "restarts"
    RTCL = "rtcl"
    RUBY_GEMS = "ruby_gems"
    RUSTUP = "rustup"
    RYE = "rye"
    SCOOP = "scoop"
    SDKMAN = "sdkman"
    SELF_UPDATE = "self_update"
    SHELDON = "sheldon"
    SHELL = "shell"
    SNAP = "snap"
    SPARKLE = "sparkle"
    SPICETIFY = "spicetify"
    STACK = "stack"
    STEW = "stew"
    SYSTEM = "system"
    TLDR = "tldr"
    TLMGR = "tlmgr"
    TMUX = "tmux"
    TOOLBX = "toolbx"
    VAGRANT = "vagrant"
    VCPKG = "vcpkg"
    VIM = "vim"
    VSCODE = "vscode"
    WAYDROID = "waydroid"
    WINGET = "winget"
    WSL = "wsl"
    WSL_UPDATE = "wsl_update"
    XCODES = "xcodes"
    YADM = "yadm"
    YARN = "yarn"

    def __str__(self) -> str:
        return self.value


def parse_step(name: str) -> Step:
    """Look a step up by its snake_case name; raise ValueError if unknown."""
    try:
        return Step(name)
    except ValueError:
        choices = ", ".join(step.value for step in Step)
        raise ValueError(f"invalid step `{name}`; possible values: {choices}") from None