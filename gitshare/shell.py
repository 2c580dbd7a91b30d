#!/usr/bin/env python3

import asyncio
import logging
import subprocess
from typing import Dict, List, Optional

from .errors import ToolInvocationError

__all__ = [
    "run_command",
    "get_subprocess_env",
]

log = logging.getLogger(__name__)


def get_subprocess_env() -> Optional[Dict[str, str]]:
    """
    Get the environment variables to be used for subprocess execution.
    This function can be mocked in tests to control the environment.

    Returns:
        Optional dictionary of environment variables, or None to use the current environment.
    """
    return None


async def run_command(
    cmd: List[str],
    cwd: Optional[str] = None,
    capture_output: bool = True,
) -> subprocess.CompletedProcess[str]:
    """
    Run a subprocess command with consistent logging asynchronously.

    The call is fully awaited before returning, so commands issued one after
    another never overlap.

    Args:
        cmd: Command to run as a list of strings
        cwd: Current working directory for the command
        capture_output: If True, capture stdout and stderr. Otherwise the child
            writes straight to this process's stdout and stderr.

    Returns:
        CompletedProcess instance with attributes args, returncode, stdout, stderr

    Raises:
        ToolInvocationError: If the program cannot be started or exits non-zero
    """
    log_cmd = " ".join(str(c) for c in cmd)
    log.info(f"Running command: {log_cmd}")

    stdout_pipe = asyncio.subprocess.PIPE if capture_output else None
    stderr_pipe = asyncio.subprocess.PIPE if capture_output else None

    try:
        process = await asyncio.create_subprocess_exec(
            *cmd,
            cwd=cwd,
            env=get_subprocess_env(),
            stdout=stdout_pipe,
            stderr=stderr_pipe,
        )
    except OSError as e:
        log.error(f"Could not start command {log_cmd}: {e}")
        raise ToolInvocationError(cmd, 127, str(e)) from e

    stdout_data, stderr_data = await process.communicate()

    stdout = ""
    stderr = ""
    if capture_output:
        if stdout_data:
            stdout = stdout_data.decode(errors="replace")
            log.debug(f"Command stdout: {stdout}")
        if stderr_data:
            stderr = stderr_data.decode(errors="replace")
            log.debug(f"Command stderr: {stderr}")

    returncode = 0 if process.returncode is None else process.returncode
    log.debug(f"Command return code: {returncode}")

    if returncode != 0:
        raise ToolInvocationError(cmd, returncode, stderr)

    return subprocess.CompletedProcess[str](
        args=cmd,
        returncode=returncode,
        stdout=stdout,
        stderr=stderr,
    )
