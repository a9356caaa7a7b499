import signal

import pytest

from topgrade.interrupted import (
    interrupted,
    set_handler,
    set_interrupted,
    unset_interrupted,
)


@pytest.fixture(autouse=True)
def clean_flag():
    if interrupted():
        unset_interrupted()
    yield
    if interrupted():
        unset_interrupted()


def test_flag_starts_clear():
    assert interrupted() is False


def test_set_and_unset():
    set_interrupted()
    assert interrupted() is True
    unset_interrupted()
    assert interrupted() is False


def test_unset_requires_flag():
    with pytest.raises(AssertionError):
        unset_interrupted()
    assert interrupted() is False


def test_handler_sets_flag_on_sigint():
    previous = set_handler()
    try:
        signal.raise_signal(signal.SIGINT)
        assert interrupted() is True
    finally:
        signal.signal(signal.SIGINT, previous)


def test_set_handler_returns_previous_handler():
    original = signal.getsignal(signal.SIGINT)
    previous = set_handler()
    try:
        assert previous == original
        assert signal.getsignal(signal.SIGINT) != original
    finally:
        signal.signal(signal.SIGINT, previous)