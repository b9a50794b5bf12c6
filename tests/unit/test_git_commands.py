"""Unit tests for the subprocess git capability."""
# ruff: noqa: D103

from __future__ import annotations

import subprocess
import typing as typ

import pytest

from fontsources.git import GitFailureError, SubprocessGit
from fontsources.git.revisions import checkout_rev
from tests.support.git_repos import commit_files, current_head, make_repo, requires_git

if typ.TYPE_CHECKING:
    from pathlib import Path

    from tests.support.fakes import FakeGit


@pytest.fixture
def upstream(tmp_path: Path) -> Path:
    repo = tmp_path / "upstream"
    make_repo(repo, {"sources/config.yaml": "sources: []\n"})
    commit_files(repo, {"README.md": "second\n"}, "second")
    return repo


@requires_git
def test_clone_is_shallow_and_resolves_head(upstream: Path, tmp_path: Path) -> None:
    git = SubprocessGit(timeout=30)
    target = tmp_path / "clone"

    git.clone(upstream.as_uri(), target)

    assert git.rev_parse(target) == current_head(upstream)
    assert git.is_shallow(target)
    assert git.ls_remote(upstream.as_uri()) == current_head(upstream)


@requires_git
def test_unshallow_then_checkout_older_commit(upstream: Path, tmp_path: Path) -> None:
    git = SubprocessGit(timeout=30)
    first = git.rev_parse(upstream, "HEAD~1")
    target = tmp_path / "clone"
    git.clone(upstream.as_uri(), target)

    assert checkout_rev(git, target, first)
    assert git.rev_parse(target) == first


@requires_git
def test_has_commit_reports_unknown_revisions(upstream: Path) -> None:
    git = SubprocessGit(timeout=30)

    assert git.has_commit(upstream, current_head(upstream))
    assert not git.has_commit(upstream, "f" * 40)


@requires_git
def test_failed_command_carries_stderr(tmp_path: Path) -> None:
    git = SubprocessGit(timeout=30)
    target = tmp_path / "clone"

    with pytest.raises(GitFailureError) as excinfo:
        git.clone((tmp_path / "missing").as_uri(), target)

    assert excinfo.value.stderr
    assert excinfo.value.path == target


def test_missing_git_executable(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    monkeypatch.setattr("fontsources.git.commands.shutil.which", lambda _: None)

    with pytest.raises(GitFailureError, match="git executable not found"):
        SubprocessGit().rev_parse(tmp_path)


def test_timeout_becomes_git_failure(
    monkeypatch: pytest.MonkeyPatch, tmp_path: Path
) -> None:
    def fake_run(args: list[str], **kwargs: object) -> None:
        raise subprocess.TimeoutExpired(args, typ.cast("float", kwargs["timeout"]))

    monkeypatch.setattr("fontsources.git.commands.shutil.which", lambda _: "git")
    monkeypatch.setattr("fontsources.git.commands.subprocess.run", fake_run)

    with pytest.raises(GitFailureError, match="timed out after 3"):
        SubprocessGit(timeout=3).fetch(tmp_path)


def test_commands_never_prompt_for_credentials() -> None:
    assert SubprocessGit()._env["GIT_TERMINAL_PROMPT"] == "0"  # noqa: SLF001


def test_checkout_rev_skips_fetch_when_commit_present(
    fake_git: FakeGit, tmp_path: Path
) -> None:
    fake_git.commits.add("abc")

    assert checkout_rev(fake_git, tmp_path, "abc")
    assert fake_git.called("fetch") == []
    assert fake_git.called("checkout") == [("checkout", str(tmp_path), "abc")]


def test_checkout_rev_gives_up_after_unshallow(
    fake_git: FakeGit, tmp_path: Path
) -> None:
    assert not checkout_rev(fake_git, tmp_path, "abc")
    assert fake_git.called("fetch") == [
        ("fetch", str(tmp_path), "abc", "False"),
        ("fetch", str(tmp_path), "", "True"),
    ]
    assert fake_git.called("checkout") == []


def test_checkout_rev_does_not_unshallow_full_clones(
    fake_git: FakeGit, tmp_path: Path
) -> None:
    fake_git.shallow = False

    assert not checkout_rev(fake_git, tmp_path, "abc")
    assert len(fake_git.called("fetch")) == 1
