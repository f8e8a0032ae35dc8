"""Tests for the command line entry point."""
import pytest

from tagclusters import cli


def test_dispatches_to_migration(monkeypatch: pytest.MonkeyPatch) -> None:
    calls = []
    monkeypatch.setitem(cli.COMMANDS, "add-misc-cluster", lambda: calls.append("misc"))

    cli.main(["add-misc-cluster"])

    assert calls == ["misc"]


def test_unknown_command_exits() -> None:
    with pytest.raises(SystemExit) as exc_info:
        cli.main(["drop-everything"])

    assert exc_info.value.code == 2
