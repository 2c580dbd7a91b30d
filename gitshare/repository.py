#!/usr/bin/env python3

"""Repository operations used by the share workflow.

`Repository` describes the handful of version control operations the
workflow needs. `GitRepository` implements them by running the git binary;
tests substitute `gitshare.testing.RecordingRepository`.
"""

import logging
from typing import List, Optional, Protocol

from .shell import run_command

__all__ = [
    "Repository",
    "GitRepository",
]

log = logging.getLogger(__name__)


class Repository(Protocol):
    """Version control operations consumed by the share workflow.

    Every method raises `ToolInvocationError` when the underlying call fails.
    """

    async def current_ref(self) -> str:
        """Return the abbreviated name of the checked out reference."""
        ...

    async def status_short(self) -> str:
        """Return the short status listing, one changed or untracked path per line."""
        ...

    async def create_branch(
        self, name: str, base_ref: str, no_track: bool = True
    ) -> None: ...

    async def checkout(self, ref: str, quiet: bool = True) -> None: ...

    async def cherry_pick(self, revision: str) -> None: ...

    async def push(self, remote: str, branch: str) -> None: ...

    async def delete_branch(self, name: str, force: bool = True) -> None: ...


class GitRepository:
    """Repository operations backed by the git command line tool."""

    def __init__(self, cwd: Optional[str] = None) -> None:
        self.cwd = cwd

    async def _query(self, args: List[str]) -> str:
        result = await run_command(["git"] + args, cwd=self.cwd, capture_output=True)
        return str(result.stdout)

    async def _run(self, args: List[str]) -> None:
        # Output goes straight to the terminal so progress and errors are live
        await run_command(["git"] + args, cwd=self.cwd, capture_output=False)

    async def current_ref(self) -> str:
        return (await self._query(["rev-parse", "--abbrev-ref", "HEAD"])).strip()

    async def status_short(self) -> str:
        return await self._query(["status", "-s"])

    async def create_branch(
        self, name: str, base_ref: str, no_track: bool = True
    ) -> None:
        args = ["branch"]
        if no_track:
            args.append("--no-track")
        await self._run(args + [name, base_ref])

    async def checkout(self, ref: str, quiet: bool = True) -> None:
        args = ["checkout"]
        if quiet:
            args.append("-q")
        await self._run(args + [ref])

    async def cherry_pick(self, revision: str) -> None:
        await self._run(["cherry-pick", revision])

    async def push(self, remote: str, branch: str) -> None:
        await self._run(["push", remote, branch])

    async def delete_branch(self, name: str, force: bool = True) -> None:
        await self._run(["branch", "-D" if force else "-d", name])
