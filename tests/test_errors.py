import pytest

from topgrade.errors import (
    DryRun,
    EmptyOSReleaseFile,
    FailedGettingPackageManager,
    ProcessFailed,
    ProcessFailedWithOutput,
    SkipStep,
    StepFailed,
    TopgradeError,
    UnknownLinuxDistribution,
)


def test_process_failed_message_and_fields():
    err = ProcessFailed("ls", 1)
    assert str(err) == "`ls` failed: exit status: 1"
    assert err.program == "ls"
    assert err.status == 1


def test_process_failed_by_signal():
    err = ProcessFailed("sleep", -9)
    assert str(err).endswith("signal: 9")


def test_process_failed_with_output_keeps_stderr():
    err = ProcessFailedWithOutput("git", 128, "fatal: bad")
    assert err.stderr == "fatal: bad"
    assert err.status == 128
    assert str(err).startswith("`git` failed: ")


@pytest.mark.parametrize(
    "error, message",
    [
        (UnknownLinuxDistribution(), "Unknown Linux Distribution"),
        (EmptyOSReleaseFile(), 'File "/etc/os-release" does not exist or is empty'),
        (FailedGettingPackageManager(), "Failed getting the system package manager"),
        (StepFailed(), "A step failed"),
        (DryRun(), "Dry running"),
    ],
)
def test_fixed_messages(error, message):
    assert str(error) == message
    assert isinstance(error, TopgradeError)


def test_skip_step_reason_is_message():
    err = SkipStep("No cargo detected")
    assert str(err) == "No cargo detected"
    assert err.reason == "No cargo detected"


def test_errors_can_be_caught_by_base_class():
    err = SkipStep("pip does not exist")
    with pytest.raises(TopgradeError) as info:
        raise err
    assert info.value is err
    assert info.value.reason == "pip does not exist"
    assert str(info.value) == "pip does not exist"