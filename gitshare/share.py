#!/usr/bin/env python3

"""Publish a single commit on a fresh remote branch.

The workflow copies one revision onto a new branch cut from the upstream
branch, pushes that branch, then puts the local repository back on the
branch it started from and removes the scratch branch.

Steps run strictly in order and the first failure stops the workflow.
Nothing already done is undone: a failed push, for example, leaves the new
branch checked out with the cherry-picked commit on it so it can be
inspected by hand.
"""

import logging
from dataclasses import dataclass, field
from typing import Awaitable, Callable, List

from .errors import ShareStepError, ToolInvocationError
from .preconditions import capture_original_ref, ensure_clean
from .repository import Repository

__all__ = [
    "UPSTREAM_REF",
    "REMOTE_NAME",
    "ShareStep",
    "ShareResult",
    "build_share_steps",
    "share_commit",
]

log = logging.getLogger(__name__)

UPSTREAM_REF = "origin/master"
REMOTE_NAME = "origin"


@dataclass(frozen=True)
class ShareStep:
    """One repository operation in the share workflow."""

    name: str
    description: str
    action: Callable[[], Awaitable[None]]


@dataclass
class ShareResult:
    branch_name: str
    revision: str
    original_ref: str
    completed_steps: List[str] = field(default_factory=list)


def build_share_steps(
    repo: Repository, branch_name: str, revision: str, original_ref: str
) -> List[ShareStep]:
    """Build the ordered list of operations that share `revision` as `branch_name`.

    Args:
        repo: The repository to operate on
        branch_name: Name of the branch to create and push
        revision: The commit to cherry-pick onto the new branch
        original_ref: The reference to return to once the branch is pushed

    Returns:
        The six steps, in the order they must run
    """
    return [
        ShareStep(
            "create",
            f"create branch {branch_name} from {UPSTREAM_REF}",
            lambda: repo.create_branch(branch_name, UPSTREAM_REF, no_track=True),
        ),
        ShareStep(
            "switch",
            f"check out {branch_name}",
            lambda: repo.checkout(branch_name, quiet=True),
        ),
        ShareStep(
            "cherry-pick",
            f"cherry-pick {revision}",
            lambda: repo.cherry_pick(revision),
        ),
        ShareStep(
            "push",
            f"push {branch_name} to {REMOTE_NAME}",
            lambda: repo.push(REMOTE_NAME, branch_name),
        ),
        ShareStep(
            "restore",
            f"check out {original_ref}",
            lambda: repo.checkout(original_ref, quiet=True),
        ),
        ShareStep(
            "cleanup",
            f"delete local branch {branch_name}",
            lambda: repo.delete_branch(branch_name, force=True),
        ),
    ]


async def share_commit(
    repo: Repository, branch_name: str, revision: str
) -> ShareResult:
    """Share `revision` on a new remote branch named `branch_name`.

    The original reference is captured and the working tree checked for
    pending changes before anything is modified.

    Args:
        repo: The repository to operate on
        branch_name: Name of the branch to publish
        revision: The commit to publish

    Returns:
        A ShareResult listing every completed step

    Raises:
        ToolInvocationError: If either precondition query fails
        PreconditionError: If the working tree has pending changes
        ShareStepError: If any step fails; later steps are not attempted
    """
    original_ref = await capture_original_ref(repo)
    await ensure_clean(repo)

    result = ShareResult(branch_name, revision, original_ref)
    for step in build_share_steps(repo, branch_name, revision, original_ref):
        log.info(f"Step {step.name}: {step.description}")
        try:
            await step.action()
        except ToolInvocationError as e:
            log.info(
                f"Step {step.name} failed with exit code {e.returncode}; "
                f"completed steps: {', '.join(result.completed_steps) or 'none'}"
            )
            raise ShareStepError(step.name, step.description, e) from e
        result.completed_steps.append(step.name)
        log.info(f"Step {step.name} done")

    log.info(f"Shared {revision} as {REMOTE_NAME}/{branch_name}")
    return result
