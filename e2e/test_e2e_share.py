#!/usr/bin/env python3

import os

from gitshare.errors import PreconditionError, ShareStepError, ToolInvocationError
from gitshare.preconditions import capture_original_ref, count_pending_changes
from gitshare.repository import GitRepository
from gitshare.share import share_commit
from gitshare.testing import GitShareEndToEndTestCase


class TestShare(GitShareEndToEndTestCase):
    """Share commits between real repositories."""

    async def asyncSetUp(self):
        await super().asyncSetUp()
        self.repo = GitRepository(self.repo_dir)

    async def current_branch(self) -> str:
        return str(
            await self.git_run(
                ["rev-parse", "--abbrev-ref", "HEAD"], capture_output=True, text=True
            )
        )

    async def test_share_publishes_commit_and_restores_branch(self):
        rev = await self.commit_file("fix.txt", "fixed\n", "Fix the thing")

        result = await share_commit(self.repo, "feature-x", rev)

        self.assertEqual(result.original_ref, "main")
        self.assertEqual(await self.current_branch(), "main")
        self.assertNotIn("feature-x", await self.local_branches())
        self.assertIn("feature-x", await self.remote_branches())

        # The published branch is master plus exactly the shared commit
        log = await self.git_run(
            ["log", "--format=%s", "master..feature-x"],
            capture_output=True,
            text=True,
            cwd=self.origin_dir,
        )
        self.assertExpectedInline(str(log), """Fix the thing""")

    async def test_only_the_named_commit_is_shared(self):
        await self.commit_file("first.txt", "one\n", "First change")
        rev = await self.commit_file("second.txt", "two\n", "Second change")

        await share_commit(self.repo, "only-second", rev)

        files = await self.git_run(
            ["ls-tree", "--name-only", "only-second"],
            capture_output=True,
            text=True,
            cwd=self.origin_dir,
        )
        self.assertExpectedInline(str(files), """\
README.md
second.txt""")

    async def test_pending_changes_abort_before_mutation(self):
        rev = await self.commit_file("fix.txt", "fixed\n", "Fix the thing")
        self.write_file("scratch.txt", "untracked\n")

        with self.assertRaises(PreconditionError):
            await share_commit(self.repo, "feature-x", rev)

        self.assertEqual(await self.local_branches(), ["main", "master"])
        self.assertNotIn("feature-x", await self.remote_branches())

    async def test_pending_change_count_is_stable(self):
        self.write_file("a.txt", "a\n")
        self.write_file("README.md", "changed\n")
        first = await count_pending_changes(self.repo)
        second = await count_pending_changes(self.repo)
        self.assertEqual(first, 2)
        self.assertEqual(first, second)

    async def test_conflicting_cherry_pick_stops_on_new_branch(self):
        await self.commit_file("README.md", "# Version two\n", "Rewrite readme")
        rev = await self.commit_file(
            "README.md", "# Version three\n", "Rewrite readme again"
        )

        with self.assertRaises(ShareStepError) as cm:
            await share_commit(self.repo, "feature-x", rev)

        self.assertEqual(cm.exception.step, "cherry-pick")
        self.assertEqual(await self.current_branch(), "feature-x")
        self.assertIn("feature-x", await self.local_branches())
        self.assertNotIn("feature-x", await self.remote_branches())

    async def test_failed_push_keeps_local_branch(self):
        rev = await self.commit_file("fix.txt", "fixed\n", "Fix the thing")
        await self.git_run(
            [
                "remote",
                "set-url",
                "--push",
                "origin",
                os.path.join(self.temp_dir.name, "missing.git"),
            ]
        )

        with self.assertRaises(ShareStepError) as cm:
            await share_commit(self.repo, "feature-x", rev)

        self.assertEqual(cm.exception.step, "push")
        self.assertEqual(await self.current_branch(), "feature-x")
        self.assertIn("feature-x", await self.local_branches())
        head_subject = await self.git_run(
            ["log", "-1", "--format=%s"], capture_output=True, text=True
        )
        self.assertEqual(head_subject, "Fix the thing")

    async def test_outside_repository(self):
        outside = os.path.join(self.temp_dir.name, "plain")
        os.makedirs(outside)
        # Keep git from discovering the temp dir's parents as a repository
        self.env["GIT_CEILING_DIRECTORIES"] = self.temp_dir.name

        with self.assertRaises(ToolInvocationError) as cm:
            await capture_original_ref(GitRepository(outside))
        self.assertIn("not a git repository", cm.exception.stderr)

    async def test_non_utf8_pending_path_still_blocks(self):
        rev = await self.commit_file("fix.txt", "fixed\n", "Fix the thing")
        await self.git_run(["config", "core.quotePath", "false"])
        with open(os.path.join(os.fsencode(self.repo_dir), b"caf\xe9.txt"), "wb") as f:
            f.write(b"latin-1 name\n")

        with self.assertRaises(PreconditionError):
            await share_commit(self.repo, "feature-x", rev)

        self.assertEqual(await count_pending_changes(self.repo), 1)
        self.assertNotIn("feature-x", await self.local_branches())
