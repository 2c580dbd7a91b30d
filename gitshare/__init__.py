#!/usr/bin/env python3

from .errors import (
    GitShareError,
    PreconditionError,
    ShareStepError,
    ToolInvocationError,
    UsageError,
)
from .main import cli, configure_logging
from .repository import GitRepository, Repository
from .share import share_commit
from .shell import get_subprocess_env, run_command

__all__ = [
    "cli",
    "configure_logging",
    "share_commit",
    "Repository",
    "GitRepository",
    "run_command",
    "get_subprocess_env",
    "GitShareError",
    "UsageError",
    "PreconditionError",
    "ToolInvocationError",
    "ShareStepError",
]
