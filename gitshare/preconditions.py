#!/usr/bin/env python3

import logging

from .errors import PreconditionError
from .repository import Repository

__all__ = [
    "capture_original_ref",
    "count_status_lines",
    "count_pending_changes",
    "ensure_clean",
]

log = logging.getLogger(__name__)


async def capture_original_ref(repo: Repository) -> str:
    """Get the reference that is checked out before sharing starts.

    Args:
        repo: The repository to query

    Returns:
        The abbreviated reference name, e.g. "main"

    Raises:
        ToolInvocationError: If the query cannot run (for example outside a repository)
    """
    ref = await repo.current_ref()
    log.debug(f"Original ref: {ref}")
    return ref


def count_status_lines(status: str) -> int:
    """Count the non-blank lines of a short status listing."""
    return sum(1 for line in status.split("\n") if line.strip())


async def count_pending_changes(repo: Repository) -> int:
    """Get the number of changed or untracked paths in the working tree.

    Raises:
        ToolInvocationError: If the status query cannot run
    """
    count = count_status_lines(await repo.status_short())
    log.debug(f"Pending changes: {count}")
    return count


async def ensure_clean(repo: Repository) -> None:
    """Raise PreconditionError unless the working tree has no pending changes."""
    count = await count_pending_changes(repo)
    if count > 0:
        log.info(f"Refusing to share with {count} pending change(s)")
        raise PreconditionError("Cannot continue: pending changes")
