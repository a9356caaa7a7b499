import pytest

from topgrade.breaking_changes import (
    Version,
    first_run_of_major_release,
    keep_file_path,
    print_breaking_changes,
    should_skip,
    write_keep_file,
)


def test_is_new_major_release_works():
    assert Version.parse("1.0.0").is_new_major_release()
    assert not Version.parse("0.1.0").is_new_major_release()


def test_invalid_version():
    with pytest.raises(ValueError, match="Version numbers can not be all 0s"):
        Version.parse("0.0.0")


def test_parse_fields():
    assert Version.parse("15.2.3") == Version(15, 2, 3)


@pytest.mark.parametrize("text", ["1", "1.2"])
def test_not_semantic(text):
    with pytest.raises(ValueError, match="not semantic"):
        Version.parse(text)


@pytest.mark.parametrize("text", ["a.0.0", "1.x.0", "1.0.0-beta"])
def test_not_numbers(text):
    with pytest.raises(ValueError, match="dot-separated numbers"):
        Version.parse(text)


def test_should_skip(monkeypatch):
    monkeypatch.setenv("TOPGRADE_SKIP_BRKC_NOTIFY", "true")
    assert should_skip() is True
    monkeypatch.setenv("TOPGRADE_SKIP_BRKC_NOTIFY", "yes")
    assert should_skip() is False
    monkeypatch.delenv("TOPGRADE_SKIP_BRKC_NOTIFY")
    assert should_skip() is False


def test_keep_file_path(tmp_path):
    assert keep_file_path(tmp_path) == tmp_path / "topgrade_keep"


def test_first_run_without_keep_file(tmp_path):
    assert first_run_of_major_release("15.0.0", tmp_path) is True


def test_not_major_release(tmp_path):
    assert first_run_of_major_release("15.1.0", tmp_path) is False


def test_keep_file_round_trip(tmp_path):
    data_dir = tmp_path / "data"
    path = write_keep_file("15.0.0", data_dir)
    assert path.read_text() == "15.0.0"
    assert first_run_of_major_release("15.0.0", data_dir) is False
    assert first_run_of_major_release("16.0.0", data_dir) is True


def test_print_breaking_changes(capsys):
    print_breaking_changes("15.0.0", "Removed an option")
    out = capsys.readouterr().out
    assert "Topgrade 15.0.0 Breaking Changes" in out
    assert "Removed an option" in out


def test_print_no_breaking_changes(capsys):
    print_breaking_changes("15.0.0", "")
    assert "No Breaking changes" in capsys.readouterr().out