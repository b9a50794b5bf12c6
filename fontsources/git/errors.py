"""Git process errors."""

from __future__ import annotations

import typing as typ

from fontsources.errors import FontSourcesError

if typ.TYPE_CHECKING:
    from pathlib import Path


class GitFailureError(FontSourcesError):
    """Raised when a git command cannot run or exits unsuccessfully.

    Attributes
    ----------
    stderr
        Captured standard error text, or the process/OS failure message.
    path
        Checkout directory the command targeted, when there is one.

    """

    def __init__(self, stderr: str, path: Path | None = None) -> None:
        """Initialise with captured stderr and the target path."""
        self.stderr = stderr.strip()
        self.path = path
        location = f" at {path}" if path is not None else ""
        super().__init__(f"git failed{location}: '{self.stderr}'")

    @classmethod
    def missing_executable(cls) -> GitFailureError:
        """Return an error when git is not on PATH."""
        return cls("git executable not found on PATH")

    @classmethod
    def timed_out(
        cls, args: list[str], timeout: float, path: Path | None
    ) -> GitFailureError:
        """Return an error for a command that exceeded its timeout."""
        return cls(f"'git {' '.join(args)}' timed out after {timeout}s", path)
