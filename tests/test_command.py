import subprocess
import sys
from pathlib import Path

import pytest

from topgrade.command import (
    Utf8Output,
    decode_output,
    format_command,
    output_checked,
    output_checked_utf8,
    spawn_checked,
    status_checked,
)
from topgrade.errors import ProcessFailed, ProcessFailedWithOutput

PY = sys.executable


def script(code):
    return [PY, "-c", code]


def test_format_command_without_arguments():
    assert format_command(["git"]) == "git"


def test_format_command_quotes_arguments():
    assert format_command(["git", "log", "a b"]) == "git log 'a b'"


def test_format_command_accepts_paths():
    assert format_command([Path("bin") / "tool", "x"]) == f"{Path('bin') / 'tool'} x"


def test_decode_output_round_trip():
    completed = subprocess.CompletedProcess(["x"], 0, "héllo".encode(), b"warn")
    decoded = decode_output(completed)
    assert decoded == Utf8Output(0, "héllo", "warn")
    assert str(decoded) == "héllo"
    assert decoded.success


def test_decode_output_rejects_invalid_utf8():
    completed = subprocess.CompletedProcess(["x"], 0, b"\xff", b"")
    with pytest.raises(ValueError, match="Stdout contained invalid UTF-8"):
        decode_output(completed)


def test_output_checked_returns_output():
    completed = output_checked(script("print('hi')"))
    assert completed.returncode == 0
    assert completed.stdout.strip() == b"hi"


def test_output_checked_failure_carries_output():
    code = "import sys; print('out'); sys.stderr.write('boom'); sys.exit(3)"
    with pytest.raises(ProcessFailedWithOutput) as info:
        output_checked(script(code))
    err = info.value
    assert err.status == 3
    assert err.stderr == "boom"
    assert err.program == PY
    notes = "\n".join(err.__notes__)
    assert "Command failed: `" in notes
    assert "Stdout:\nout" in notes
    assert "Stderr:\nboom" in notes


def test_output_checked_custom_success():
    completed = output_checked(script("import sys; sys.exit(3)"), lambda p: p.returncode == 3)
    assert completed.returncode == 3


def test_output_checked_utf8_decodes():
    result = output_checked_utf8(script("print('abc')"))
    assert result.stdout.strip() == "abc"
    assert result.returncode == 0


def test_output_checked_utf8_invalid_output_raises_value_error():
    with pytest.raises(ValueError, match="invalid UTF-8"):
        output_checked_utf8(script("import sys; sys.stdout.buffer.write(b'\\xff')"))


def test_output_checked_utf8_with_predicate_treats_bad_utf8_as_failure():
    with pytest.raises(ProcessFailedWithOutput):
        output_checked_utf8(
            script("import sys; sys.stdout.buffer.write(b'\\xff')"), lambda out: True
        )


def test_output_checked_utf8_predicate_sees_decoded_output():
    result = output_checked_utf8(
        script("import sys; print('ok'); sys.exit(1)"), lambda out: "ok" in out.stdout
    )
    assert result.returncode == 1


def test_status_checked_failure():
    with pytest.raises(ProcessFailed) as info:
        status_checked(script("import sys; sys.exit(2)"))
    assert info.value.status == 2
    assert any(note.startswith("Command failed: `") for note in info.value.__notes__)


def test_status_checked_custom_success_accepts_code():
    calls = []

    def accept(code):
        calls.append(code)
        return code == 2

    status_checked(script("import sys; sys.exit(2)"), accept)
    with pytest.raises(ProcessFailed) as info:
        status_checked(script("import sys; sys.exit(3)"), accept)
    assert info.value.status == 3
    assert calls == [2, 3]


def test_missing_program_reports_command(tmp_path):
    missing = tmp_path / "no-such-program"
    with pytest.raises(OSError) as info:
        status_checked([missing, "arg"])
    assert f"Failed to execute `{missing} arg`" in info.value.__notes__


def test_spawn_checked_starts_process():
    child = spawn_checked(script("import sys; sys.exit(0)"))
    assert child.wait() == 0


def test_spawn_checked_missing_program(tmp_path):
    with pytest.raises(OSError):
        spawn_checked([tmp_path / "absent"])