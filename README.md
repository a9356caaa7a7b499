# topgrade

Keeping a machine current usually means running a long list of updaters by
hand: the system package manager, language toolchains, editor plugins, shell
frameworks, container images and so on. `topgrade` is the engine for running
such a list as a series of *steps*. It decides which steps should run from the
command line and the configuration file, executes each one (or only prints it
in a dry run), offers to retry a failed step, and collects the outcome of every
step into a report.

## What is in the package

- `topgrade.step` – the `Step` enumeration naming every kind of update step,
  and `parse_step()` to turn a snake_case name such as `"git_repos"` into a
  `Step` (raising `ValueError` for unknown names).
- `topgrade.config_file` – reads and validates the TOML configuration
  (`topgrade.toml`, files in `topgrade.d/`, and `[include]` sections) with
  `read_config(config_directory, config_path)` and `parse_config(text)`.
  `ConfigFile` objects can be merged: settings already present win, lists from
  the merged-in file are placed in front, argument strings are joined with a
  space, and custom command tables are combined.
- `topgrade.cli_args` – `parse_args(argv)` turns command-line arguments into a
  `CommandLineArgs` value (`--dry-run`, `--disable`, `--only`, `--yes`,
  `--custom-commands`, `--remote-host-limit`, `--log-filter` and the rest).
- `topgrade.config` – `Config` combines a `CommandLineArgs` and a
  `ConfigFile` and answers questions such as `should_run(step)`, `yes(step)`,
  `cleanup()`, `no_retry()`, `tmux_arguments()` or
  `should_execute_remote(hostname, remote)`. `Config().load(opt)` reads the
  configuration from the user's configuration directory.
- `topgrade.executor` – `run_type_for(dry_run)` gives a `RunType`, whose
  `execute(program)` returns an `Executor`. A wet executor really starts the
  program; a dry one only prints what it would have run.
- `topgrade.command` – `output_checked`, `output_checked_utf8`,
  `status_checked` and `spawn_checked` run a program, check its exit status
  and raise an error carrying the command line, its exit status and its
  captured output.
- `topgrade.errors` – the exceptions a step may raise: `SkipStep` when a step
  does not apply, `DryRun`, `StepFailed`, and `ProcessFailed` /
  `ProcessFailedWithOutput`, all derived from `TopgradeError`.
- `topgrade.runner` and `topgrade.report` – `Runner.execute(step, key, func)`
  runs one step and records a `StepResult` (success, failure, ignored or
  skipped) in `runner.report`.
- `topgrade.execution_context` – `ExecutionContext` carries the run type, an
  optional sudo helper and the configuration to every step, and notes whether
  the run happens over SSH.
- `topgrade.interrupted` – `set_handler()` makes Ctrl+C set a flag instead of
  ending the program, so the runner can offer to retry the interrupted step.
- `topgrade.breaking_changes` – notices the first run of a new major release
  (`first_run_of_major_release()`), prints its breaking changes and records the
  confirmation in a keep file (`write_keep_file()`).

## Dry runs

Programs are started through an `Executor`, so a whole run can be rehearsed
without changing anything:

```python
from topgrade.executor import run_type_for

executor = run_type_for(True).execute("git")
executor.args(["pull", "--ff-only"]).current_dir("/tmp/repo")
executor.status_checked()
# prints: Dry running: git pull --ff-only in /tmp/repo
```

With `run_type_for(False)` the same calls run `git` and raise
`ProcessFailed` if it exits with a non-zero status. In a dry run,
`output_checked()` prints the command and raises `DryRun`, which the runner
treats as "nothing to record".

## Running steps

```python
from topgrade.config import Config
from topgrade.execution_context import ExecutionContext
from topgrade.executor import run_type_for
from topgrade.runner import Runner
from topgrade.step import Step

config = Config()
ctx = ExecutionContext(run_type_for(config.dry_run()), None, config)
runner = Runner(ctx)
runner.execute(Step.GIT_REPOS, "Git Repositories", lambda: None)
for key, result in runner.report:
    print(key, result.outcome.value)
```

A failing step is offered for retry on the terminal unless retries are turned
off (`--no-retry` or `no_retry` in `[misc]`) or its failures are ignored; a
custom prompt can be passed to `Runner` as `ask_retry`.

## Choosing steps

A step runs when it is among the enabled steps and has not been disabled.
Steps named with `--only` (or `only` in the `[misc]` section) narrow the
enabled set; steps named with `--disable` (or `disable` in `[misc]`) are taken
out of it, unless they were also named with `--only` on the command line.

Failures of steps listed in `ignore_failures` are recorded as ignored rather
than failed, and no retry is offered for them unless the step was interrupted.

## Configuration

The configuration lives in the user's configuration directory as
`topgrade.toml` (or `topgrade/topgrade.toml`), with further files read from
`topgrade.d/` in sorted order. When neither exists, an example configuration is
written as `topgrade.toml`; a file lacking a `[misc]` section gets one added at
its top. Unknown sections or keys, and values of the wrong type, are rejected.
A short example:

```toml
[misc]
disable = ["vagrant"]
ignore_failures = ["containers"]
cleanup = true

[git]
repos = ["~/src/*"]
max_concurrency = 4

[commands]
"Backup dotfiles" = "rsync -a ~/.config /tmp/backup"
```

Setting the environment variable `TOPGRADE_SKIP_BRKC_NOTIFY=true` makes
`should_skip()` report that the breaking-changes notice should not be shown.

## What the package does not do

The package provides the machinery for a run but not the updaters themselves:
there are no built-in steps for package managers, git repositories, editors or
containers, and no installed command. Options such as `--edit-config`,
`--gen-completion` or `--gen-manpage` are parsed into `CommandLineArgs`, but
acting on them is left to the program using the package.