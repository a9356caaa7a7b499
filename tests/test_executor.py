import os
import sys
from pathlib import Path

import pytest

from topgrade.errors import DryRun, ProcessFailed, ProcessFailedWithOutput
from topgrade.executor import Executor, RunType, run_type_for

PY = sys.executable


def test_run_type_for():
    assert run_type_for(True) is RunType.DRY
    assert run_type_for(False) is RunType.WET
    assert RunType.DRY.dry() is True
    assert RunType.WET.dry() is False


def test_execute_builds_executor():
    executor = RunType.DRY.execute(Path("bin") / "tool")
    assert executor.get_program() == str(Path("bin") / "tool")
    assert executor.dry is True
    assert RunType.WET.execute("x").dry is False


def test_arguments_chain():
    executor = RunType.DRY.execute("prog").arg("a").args(["b c", Path("d")])
    assert executor.arguments == ["a", "b c", "d"]


def test_dry_status_prints(capsys):
    RunType.DRY.execute("prog").args(["a", "b c"]).status_checked()
    assert capsys.readouterr().out == "Dry running: prog a 'b c'\n"


def test_dry_describe_with_directory():
    executor = RunType.DRY.execute("prog").arg("x").current_dir("/srv")
    assert executor.describe() == "Dry running: prog x in /srv"


def test_dry_output_returns_none(capsys):
    assert RunType.DRY.execute("prog").output() is None
    assert capsys.readouterr().out.startswith("Dry running: prog")


def test_dry_spawn_returns_none(capsys):
    assert RunType.DRY.execute("prog").spawn() is None
    assert "Dry running: prog" in capsys.readouterr().out


def test_dry_output_checked_raises_dry_run(capsys):
    with pytest.raises(DryRun):
        RunType.DRY.execute("prog").output_checked()
    with pytest.raises(DryRun):
        RunType.DRY.execute("prog").output_checked_utf8()
    assert capsys.readouterr().out.count("Dry running: prog") == 2


def test_dry_status_with_codes_does_not_run(capsys):
    RunType.DRY.execute("prog").status_checked_with_codes([1])
    assert capsys.readouterr().out == "Dry running: prog \n"


def test_wet_env_is_passed():
    out = (
        RunType.WET.execute(PY)
        .args(["-c", "import os; print(os.environ['TG_TEST_VAR'])"])
        .env("TG_TEST_VAR", "hello")
        .output_checked_utf8()
    )
    assert out.stdout.strip() == "hello"


def test_wet_env_remove(monkeypatch):
    monkeypatch.setenv("TG_TEST_VAR", "present")
    out = (
        RunType.WET.execute(PY)
        .args(["-c", "import os; print(os.environ.get('TG_TEST_VAR', 'missing'))"])
        .env_remove("TG_TEST_VAR")
        .output_checked_utf8()
    )
    assert out.stdout.strip() == "missing"


def test_wet_current_dir(tmp_path):
    out = (
        RunType.WET.execute(PY)
        .args(["-c", "import os; print(os.getcwd())"])
        .current_dir(tmp_path)
        .output_checked_utf8()
    )
    assert os.path.realpath(out.stdout.strip()) == os.path.realpath(tmp_path)


def test_wet_status_with_codes():
    RunType.WET.execute(PY).args(["-c", "import sys; sys.exit(1)"]).status_checked_with_codes([1])
    with pytest.raises(ProcessFailed) as info:
        RunType.WET.execute(PY).args(["-c", "import sys; sys.exit(2)"]).status_checked_with_codes([1])
    assert info.value.status == 2


def test_wet_output_checked_failure():
    with pytest.raises(ProcessFailedWithOutput) as info:
        RunType.WET.execute(PY).args(["-c", "import sys; sys.exit(4)"]).output_checked()
    assert info.value.status == 4


def test_wet_output_checked_with_predicate():
    completed = (
        RunType.WET.execute(PY)
        .args(["-c", "import sys; sys.exit(4)"])
        .output_checked_with(lambda p: p.returncode == 4)
    )
    assert completed.returncode == 4


def test_wet_output_returns_completed_process():
    completed = RunType.WET.execute(PY).args(["-c", "print('x')"]).output()
    assert completed.stdout.strip() == b"x"


def test_wet_spawn():
    child = RunType.WET.execute(PY).args(["-c", "pass"]).spawn()
    assert child.wait() == 0


def test_dry_env_ignored():
    executor = Executor("prog", dry=True).env("A", "1").env_remove("B")
    assert executor.describe() == "Dry running: prog "