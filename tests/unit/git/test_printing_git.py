"""Tests for PrintingGit."""

from pathlib import Path

import pytest

from regedit.core.git.printing import PrintingGit
from tests.fakes.git import FakeGit


def test_printing_git_echoes_and_delegates(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    fake = FakeGit()
    git = PrintingGit(fake)

    git.checkout(tmp_path, "main", force=True)
    git.reset_hard(tmp_path, "origin/main")

    err = capsys.readouterr().err
    assert "git checkout -f main" in err
    assert "git reset --hard origin/main" in err
    assert fake.operations == [("checkout", "main", "-f"), ("reset_hard", "origin/main")]


def test_printing_git_does_not_echo_queries(
    tmp_path: Path, capsys: pytest.CaptureFixture[str]
) -> None:
    git = PrintingGit(FakeGit())

    assert git.get_remote_default_branch(tmp_path, "origin") == "main"
    assert capsys.readouterr().err == ""


def test_printing_git_with_config_keeps_printing() -> None:
    fake = FakeGit()

    configured = PrintingGit(fake).with_config({"user.name": "RegEdit"})

    assert isinstance(configured, PrintingGit)
    assert fake.config_overlays == [{"user.name": "RegEdit"}]
