#!/usr/bin/env python3


import asyncio
import os
import subprocess
import tempfile
import unittest
from typing import Any, Dict, List, Optional, Tuple, Union
from unittest import mock

from expecttest import TestCase

from .errors import ToolInvocationError

__all__ = [
    "RecordingRepository",
    "GitShareEndToEndTestCase",
]


class RecordingRepository:
    """In-memory stand-in for GitRepository.

    Every call is appended to `calls` as a tuple of the method name and its
    arguments. Queries answer from `ref` and `status`; any operation named in
    `failures` raises ToolInvocationError instead of succeeding. The checked
    out branch and local branch set are tracked so tests can assert on the
    state a failed share leaves behind.
    """

    def __init__(
        self,
        ref: str = "main",
        status: str = "",
        failures: Optional[Dict[str, str]] = None,
    ) -> None:
        self.ref = ref
        self.status = status
        self.failures = dict(failures or {})
        self.calls: List[Tuple[Any, ...]] = []
        self.branches = {ref}
        self.remote_branches: set[str] = set()
        self.picked: Dict[str, List[str]] = {}

    @property
    def mutating_calls(self) -> List[Tuple[Any, ...]]:
        return [c for c in self.calls if c[0] not in ("current_ref", "status_short")]

    def _record(self, name: str, *args: Any) -> None:
        self.calls.append((name,) + args)
        if name in self.failures:
            raise ToolInvocationError(["git", name], 1, self.failures[name])

    async def current_ref(self) -> str:
        self._record("current_ref")
        return self.ref

    async def status_short(self) -> str:
        self._record("status_short")
        return self.status

    async def create_branch(
        self, name: str, base_ref: str, no_track: bool = True
    ) -> None:
        self._record("create_branch", name, base_ref, no_track)
        self.branches.add(name)

    async def checkout(self, ref: str, quiet: bool = True) -> None:
        self._record("checkout", ref, quiet)
        self.ref = ref

    async def cherry_pick(self, revision: str) -> None:
        self._record("cherry_pick", revision)
        self.picked.setdefault(self.ref, []).append(revision)

    async def push(self, remote: str, branch: str) -> None:
        self._record("push", remote, branch)
        self.remote_branches.add(branch)

    async def delete_branch(self, name: str, force: bool = True) -> None:
        self._record("delete_branch", name, force)
        self.branches.discard(name)


class GitShareEndToEndTestCase(TestCase, unittest.IsolatedAsyncioTestCase):
    """Base class for tests that share commits in real git repositories.

    Sets up a bare `origin` repository with a `master` branch and a clone of
    it in `self.repo_dir`, checked out on a local `main` branch.
    """

    async def asyncSetUp(self):
        self.temp_dir = tempfile.TemporaryDirectory()
        self.testing_time = "1112911993"  # Fixed timestamp for git

        self.env = os.environ.copy()
        # Set environment variables for reproducible git behavior
        self.env.setdefault("GIT_TERMINAL_PROMPT", "0")
        self.env.setdefault("EDITOR", ":")
        self.env.setdefault("GIT_MERGE_AUTOEDIT", "no")
        self.env.setdefault("LANG", "C")
        self.env.setdefault("LC_ALL", "C")
        self.env.setdefault("PAGER", "cat")
        self.env.setdefault("TZ", "UTC")
        self.env.setdefault("TERM", "dumb")
        self.env.setdefault("GIT_AUTHOR_EMAIL", "author@example.com")
        self.env.setdefault("GIT_AUTHOR_NAME", "A U Thor")
        self.env.setdefault("GIT_COMMITTER_EMAIL", "committer@example.com")
        self.env.setdefault("GIT_COMMITTER_NAME", "C O Mitter")
        self.env.setdefault("GIT_COMMITTER_DATE", f"{self.testing_time} -0700")
        self.env.setdefault("GIT_AUTHOR_DATE", f"{self.testing_time} -0700")
        # Keep the user's global git config out of the tests
        self.env["GIT_CONFIG_GLOBAL"] = os.devnull
        self.env["GIT_CONFIG_NOSYSTEM"] = "1"

        self.env_patcher = mock.patch(
            "gitshare.shell.get_subprocess_env", return_value=self.env
        )
        self.env_patcher.start()

        self.origin_dir = os.path.join(self.temp_dir.name, "origin.git")
        self.repo_dir = os.path.join(self.temp_dir.name, "work")
        await self.setup_repository()

    async def asyncTearDown(self):
        self.env_patcher.stop()
        self.temp_dir.cleanup()

    async def setup_repository(self):
        """Create the bare origin, clone it and add an initial commit on master.

        This method can be overridden by subclasses to customize the repository setup.
        """
        try:
            await self.git_run(
                ["init", "--bare", "-b", "master", self.origin_dir],
                cwd=self.temp_dir.name,
            )
        except subprocess.CalledProcessError:
            self.fail(
                "git version is too old for tests! Please install a newer version of git."
            )
        await self.git_run(
            ["clone", "-q", self.origin_dir, self.repo_dir], cwd=self.temp_dir.name
        )
        await self.git_run(["symbolic-ref", "HEAD", "refs/heads/master"])
        await self.git_run(["config", "user.email", "test@example.com"])
        await self.git_run(["config", "user.name", "Test User"])

        self.write_file("README.md", "# Test Repository\n")
        await self.git_run(["add", "README.md"])
        await self.git_run(["commit", "-q", "-m", "Initial commit"])
        await self.git_run(["push", "-q", "origin", "master"])

        # Local work happens on main, which starts from master
        await self.git_run(["checkout", "-q", "-b", "main"])

    def write_file(self, name: str, content: str) -> str:
        path = os.path.join(self.repo_dir, name)
        with open(path, "w") as f:
            f.write(content)
        return path

    async def commit_file(self, name: str, content: str, message: str) -> str:
        """Commit a file on the current branch and return the new commit hash."""
        self.write_file(name, content)
        await self.git_run(["add", name])
        await self.git_run(["commit", "-q", "-m", message])
        return await self.git_run(["rev-parse", "HEAD"], capture_output=True, text=True)

    async def local_branches(self) -> List[str]:
        output = await self.git_run(
            ["branch", "--format=%(refname:short)"], capture_output=True, text=True
        )
        return str(output).split()

    async def remote_branches(self) -> List[str]:
        output = await self.git_run(
            ["branch", "--format=%(refname:short)"],
            capture_output=True,
            text=True,
            cwd=self.origin_dir,
        )
        return str(output).split()

    async def git_run(
        self,
        args: List[str],
        check: bool = True,
        capture_output: bool = False,
        text: bool = False,
        **kwargs: Any,
    ) -> Union[subprocess.CompletedProcess[bytes], str]:
        """Run git command asynchronously with appropriate repo_dir and env settings.

        Args:
            args: List of git command arguments (without 'git' prefix)
            check: If True, raises if the command returns a non-zero exit code
            capture_output: If True, captures stdout and stderr
            text: If True, decodes stdout and stderr using the preferred encoding
            **kwargs: Additional keyword arguments to pass to create_subprocess_exec

        Returns:
            If capture_output is False: subprocess.CompletedProcess instance
            If capture_output is True and text is True: The stdout content as string
        """
        cmd = ["git"] + args

        kwargs.setdefault("cwd", self.repo_dir)
        kwargs.setdefault("env", self.env)

        if capture_output:
            kwargs.setdefault("stdout", subprocess.PIPE)
            kwargs.setdefault("stderr", subprocess.PIPE)

        proc = await asyncio.create_subprocess_exec(
            *cmd,
            **kwargs,
        )

        stdout, stderr = await proc.communicate()

        result = subprocess.CompletedProcess[bytes](
            args=cmd,
            returncode=proc.returncode or 0,  # Use 0 if returncode is None
            stdout=stdout,
            stderr=stderr,
        )

        if check and proc.returncode and proc.returncode != 0:
            cmd_str = " ".join(cmd)
            raise subprocess.CalledProcessError(
                proc.returncode, cmd_str, output=stdout, stderr=stderr
            )

        if capture_output and text:
            # Always decode to string when text=True even if stdout is empty
            return stdout.decode().strip() if stdout else ""
        return result
