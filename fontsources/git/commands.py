"""Subprocess-backed git commands.

Every command runs with ``GIT_TERMINAL_PROMPT=0`` so repositories that need
credentials fail immediately instead of waiting for input, and with a timeout
so a stalled network operation cannot hang a discovery worker forever.
"""

from __future__ import annotations

import os
import shutil
import subprocess
import typing as typ

from .errors import GitFailureError

if typ.TYPE_CHECKING:
    from pathlib import Path

DEFAULT_GIT_TIMEOUT = 300.0


class GitCommands(typ.Protocol):
    """Git operations consumed by discovery and checkout."""

    def clone(self, url: str, target: Path, *, depth: int | None = 1) -> None:
        """Clone ``url`` into ``target``."""
        ...

    def fetch(
        self, checkout: Path, *, rev: str | None = None, unshallow: bool = False
    ) -> None:
        """Fetch from ``origin``, optionally a single revision or full history."""
        ...

    def checkout(self, checkout: Path, rev: str) -> None:
        """Check out ``rev`` in a detached state."""
        ...

    def rev_parse(self, checkout: Path, rev: str = "HEAD") -> str:
        """Return the full sha ``rev`` resolves to."""
        ...

    def has_commit(self, checkout: Path, rev: str) -> bool:
        """Return True when ``rev`` names a commit present locally."""
        ...

    def is_shallow(self, checkout: Path) -> bool:
        """Return True when the checkout has truncated history."""
        ...

    def ls_remote(self, url: str, ref: str = "HEAD") -> str:
        """Return the sha ``ref`` points to on the remote."""
        ...


class SubprocessGit:
    """:class:`GitCommands` implemented by running the ``git`` executable."""

    def __init__(self, *, timeout: float = DEFAULT_GIT_TIMEOUT) -> None:
        """Initialise with a per-command timeout in seconds."""
        self.timeout = timeout
        self._env = {**os.environ, "GIT_TERMINAL_PROMPT": "0"}

    def clone(self, url: str, target: Path, *, depth: int | None = 1) -> None:
        """Clone ``url`` into ``target``, shallowly unless ``depth`` is None."""
        args = ["clone"]
        if depth is not None:
            args += ["--depth", str(depth)]
        self._run([*args, url, str(target)], path=target)

    def fetch(
        self, checkout: Path, *, rev: str | None = None, unshallow: bool = False
    ) -> None:
        """Fetch from ``origin``."""
        args = ["fetch"]
        if unshallow:
            args.append("--unshallow")
        args.append("origin")
        if rev is not None:
            args.append(rev)
        self._run(args, cwd=checkout)

    def checkout(self, checkout: Path, rev: str) -> None:
        """Check out ``rev`` without creating a branch."""
        self._run(["checkout", "--quiet", "--detach", rev], cwd=checkout)

    def rev_parse(self, checkout: Path, rev: str = "HEAD") -> str:
        """Return the full sha ``rev`` resolves to."""
        return self._run(["rev-parse", rev], cwd=checkout).strip()

    def has_commit(self, checkout: Path, rev: str) -> bool:
        """Return True when ``rev`` names a commit present locally."""
        try:
            self._run(["cat-file", "-e", f"{rev}^{{commit}}"], cwd=checkout)
        except GitFailureError:
            return False
        return True

    def is_shallow(self, checkout: Path) -> bool:
        """Return True when the checkout has truncated history."""
        output = self._run(["rev-parse", "--is-shallow-repository"], cwd=checkout)
        return output.strip() == "true"

    def ls_remote(self, url: str, ref: str = "HEAD") -> str:
        """Return the sha ``ref`` points to on the remote."""
        output = self._run(["ls-remote", url, ref])
        sha, _, _ = output.partition("\t")
        sha = sha.strip()
        if not sha:
            msg = f"ls-remote returned no sha for {ref} on {url}"
            raise GitFailureError(msg)
        return sha

    def _run(
        self,
        args: list[str],
        *,
        cwd: Path | None = None,
        path: Path | None = None,
    ) -> str:
        git_executable = shutil.which("git")
        if git_executable is None:
            raise GitFailureError.missing_executable()

        target = path if path is not None else cwd
        try:
            result = subprocess.run(  # noqa: S603  # fixed git argv, no shell
                [git_executable, *args],
                cwd=cwd,
                env=self._env,
                capture_output=True,
                text=True,
                timeout=self.timeout,
                check=False,
            )
        except subprocess.TimeoutExpired as exc:
            raise GitFailureError.timed_out(args, self.timeout, target) from exc
        except OSError as exc:
            raise GitFailureError(str(exc), target) from exc

        if result.returncode != 0:
            raise GitFailureError(result.stderr, target)
        return result.stdout
