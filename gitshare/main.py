#!/usr/bin/env python3

import asyncio
import logging
import os
import sys
from typing import Tuple

import click

from .errors import (
    GitShareError,
    PreconditionError,
    ShareStepError,
    ToolInvocationError,
    UsageError,
)
from .repository import GitRepository
from .share import REMOTE_NAME, share_commit

USAGE = "Usage: git share [name] [rev]"


def configure_logging(log_file: str = "gitshare.log") -> None:
    """Configure logging to write to both a file and the console.

    The log level is determined from the configuration file.
    It can be overridden by setting the GITSHARE_DEBUG_LEVEL environment variable.
    Setting GITSHARE_DEBUG forces DEBUG and echoes every record to the console.
    Example: GITSHARE_DEBUG=1 git share my-fix abc123

    The log directory is read from the configuration file's logger.path setting.
    By default, logs are written to $HOME/.gitshare.

    The console only shows warnings and errors unless in debug mode, so git's
    own output is not interleaved with log records.
    """
    from .config import get_logger_path, get_logger_verbosity

    log_dir = get_logger_path()
    os.makedirs(log_dir, exist_ok=True)
    log_path = os.path.join(log_dir, log_file)

    log_level_str = os.environ.get("GITSHARE_DEBUG_LEVEL") or get_logger_verbosity()

    log_level_map = {
        "DEBUG": logging.DEBUG,
        "INFO": logging.INFO,
        "WARNING": logging.WARNING,
        "ERROR": logging.ERROR,
        "CRITICAL": logging.CRITICAL,
    }

    # Default to INFO if the configured level is invalid
    log_level = log_level_map.get(log_level_str.upper(), logging.INFO)

    debug_mode = False
    if os.environ.get("GITSHARE_DEBUG"):
        log_level = logging.DEBUG
        debug_mode = True

    root_logger = logging.getLogger()
    root_logger.setLevel(log_level)

    if root_logger.hasHandlers():
        root_logger.handlers.clear()

    file_handler = logging.FileHandler(log_path)
    file_handler.setLevel(log_level)

    console_handler = logging.StreamHandler()
    console_handler.setLevel(logging.DEBUG if debug_mode else logging.WARNING)

    formatter = logging.Formatter(
        "%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )
    file_handler.setFormatter(formatter)
    console_handler.setFormatter(formatter)

    root_logger.addHandler(file_handler)
    root_logger.addHandler(console_handler)

    logging.debug(f"Logging configured. Log file: {log_path}")
    logging.debug(f"Log level set to: {logging.getLevelName(log_level)}")


def parse_share_args(args: Tuple[str, ...]) -> Tuple[str, str]:
    """Return (branch_name, revision) from the positional arguments.

    Extra arguments are ignored.

    Raises:
        UsageError: If fewer than two arguments were given
    """
    if len(args) < 2:
        raise UsageError(USAGE)
    return args[0], args[1]


@click.command(context_settings={"ignore_unknown_options": True})
@click.argument("args", nargs=-1)
def cli(args: Tuple[str, ...]) -> None:
    """Publish a single commit on a new branch of origin.

    Creates NAME from origin/master, cherry-picks REV onto it, pushes it to
    origin, then returns to the current branch and deletes the local copy
    of NAME. The working tree must be clean.

    Example:
        git share fix-typo 1a2b3c4
    """
    try:
        branch_name, revision = parse_share_args(args)
    except UsageError as e:
        click.echo(str(e))
        sys.exit(1)

    configure_logging()
    logging.info(f"Sharing {revision} as {branch_name}")

    try:
        asyncio.run(share_commit(GitRepository(), branch_name, revision))
    except PreconditionError as e:
        click.echo(str(e))
        sys.exit(1)
    except ShareStepError as e:
        if e.stderr:
            click.echo(e.stderr.rstrip("\n"))
        click.echo(f"Cannot continue: {e.description} failed")
        sys.exit(1)
    except ToolInvocationError as e:
        if e.stderr:
            click.echo(e.stderr.rstrip("\n"))
        click.echo(f"Cannot continue: {e}")
        sys.exit(1)
    except GitShareError as e:
        click.echo(f"Error: {e}")
        sys.exit(1)

    click.echo(f"Shared {revision} as {REMOTE_NAME}/{branch_name}")
