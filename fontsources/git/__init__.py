"""Git process capability used by discovery and checkout."""

from __future__ import annotations

from .commands import GitCommands, SubprocessGit
from .errors import GitFailureError

__all__ = ["GitCommands", "GitFailureError", "SubprocessGit"]
