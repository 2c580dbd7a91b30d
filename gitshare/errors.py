#!/usr/bin/env python3

"""Error types raised by gitshare.

Every failure is terminal: errors propagate up to the command line entry
point, which reports them and exits with status 1.
"""

from typing import List, Union

__all__ = [
    "GitShareError",
    "UsageError",
    "PreconditionError",
    "ToolInvocationError",
    "ShareStepError",
]


class GitShareError(Exception):
    """Base class for all gitshare failures."""


class UsageError(GitShareError):
    """The command line did not supply both a branch name and a revision."""


class PreconditionError(GitShareError):
    """The working tree is not clean enough to start sharing."""


class ToolInvocationError(GitShareError):
    """An external command could not run or exited with a non-zero status."""

    def __init__(
        self, cmd: List[str], returncode: int, stderr: Union[str, bytes] = ""
    ) -> None:
        self.cmd = list(cmd)
        self.returncode = returncode
        if isinstance(stderr, bytes):
            stderr = stderr.decode(errors="replace")
        self.stderr = stderr or ""
        super().__init__(
            f"Command failed with exit code {returncode}: {' '.join(self.cmd)}"
        )


class ShareStepError(ToolInvocationError):
    """A step of the share workflow failed; later steps were not attempted."""

    def __init__(self, step: str, description: str, cause: ToolInvocationError):
        self.step = step
        self.description = description
        super().__init__(cause.cmd, cause.returncode, cause.stderr)
