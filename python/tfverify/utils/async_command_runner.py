"""
tfverify/utils/async_command_runner.py

Runs local commands in a subprocess, asynchronously, capturing both output
streams. Standard output and standard error are drained by two independently
scheduled tasks, so a process that writes a lot to both never blocks on a full
pipe. There is no retry and no timeout: one failed command is one failure.

Usage example:
    from tfverify.utils.async_command_runner import run_process, run_command

    result = await run_process(["docker", "exec", cid, "echo", "ok"])
    print(result.exit_code, result.stdout, result.stderr)

    # Or raise on a non-zero exit:
    stdout = await run_command(["docker", "info"])
"""

from __future__ import annotations

import os
import asyncio
import logging
from typing import Dict, List, Optional

from tfverify.models.exec_result import ExecResult

logger = logging.getLogger(__name__)


class CommandError(Exception):
    """Represents a failure when executing a shell command.

    Attributes:
        message (str): The error message describing the command failure.
        return_code (Optional[int]): The exit code if available.
    """

    def __init__(self, message: str, return_code: Optional[int] = None) -> None:
        """
        Initialize a CommandError.

        Args:
            message (str): The error message describing the command failure.
            return_code (Optional[int]): The exit code if known.
        """
        super().__init__(message)
        self.message = message
        self.return_code = return_code


def build_process_env(
    env: Optional[Dict[str, str]] = None,
    suppress_env_prefixes: Optional[List[str]] = None,
) -> Optional[Dict[str, str]]:
    """
    Builds the child environment from the current one.

    Args:
        env (Optional[Dict[str, str]]):
            Additional environment variables to add or override.
        suppress_env_prefixes (Optional[List[str]]):
            Inherited variables starting with any of these prefixes are removed
            before `env` is applied.

    Returns:
        Optional[Dict[str, str]]: None if the child should simply inherit the
        parent environment, otherwise the full environment mapping.
    """
    if env is None and not suppress_env_prefixes:
        return None

    proc_env = os.environ.copy()
    if suppress_env_prefixes:
        for name in list(proc_env):
            if any(name.startswith(prefix) for prefix in suppress_env_prefixes):
                del proc_env[name]
    if env:
        proc_env.update(env)
    return proc_env


async def _drain(stream: Optional[asyncio.StreamReader]) -> str:
    """Read a pipe to EOF and decode it."""
    if stream is None:
        return ""
    data = await stream.read()
    return data.decode(errors="replace")


async def run_process(
    command: List[str],
    *,
    env: Optional[Dict[str, str]] = None,
    cwd: Optional[str] = None,
    suppress_env_prefixes: Optional[List[str]] = None,
) -> ExecResult:
    """
    Executes a command and returns its exit code with both captured streams,
    whatever the exit code is.

    Args:
        command (List[str]):
            The command and arguments to execute.
        env (Optional[Dict[str, str]]):
            Additional environment variables to add or override.
        cwd (Optional[str]):
            Working directory for the command.
        suppress_env_prefixes (Optional[List[str]]):
            Prefixes of inherited environment variables to drop.

    Returns:
        ExecResult: exit code, stdout and stderr. Streams are not stripped.
    """
    proc_env = build_process_env(env, suppress_env_prefixes)

    logger.debug("Running %s (cwd=%s)", command[0], cwd)
    proc = await asyncio.create_subprocess_exec(
        *command,
        stdin=asyncio.subprocess.DEVNULL,
        stdout=asyncio.subprocess.PIPE,
        stderr=asyncio.subprocess.PIPE,
        env=proc_env,
        cwd=cwd,
    )

    stdout_task = asyncio.create_task(_drain(proc.stdout))
    stderr_task = asyncio.create_task(_drain(proc.stderr))
    stdout_str, stderr_str = await asyncio.gather(stdout_task, stderr_task)
    return_code = await proc.wait()

    logger.debug("%s exited with code %d", command[0], return_code)
    return ExecResult(exit_code=return_code, stdout=stdout_str, stderr=stderr_str)


async def run_command(
    command: List[str],
    *,
    sensitive: bool = True,
    env: Optional[Dict[str, str]] = None,
    cwd: Optional[str] = None,
) -> str:
    """
    Executes a command and returns its stripped stdout, raising on failure.

    When `sensitive=True`, we omit the command, stdout, and stderr from the final error
    message.

    Args:
        command (List[str]):
            The command and arguments to execute.
        sensitive (bool):
            If True, hides command details in the raised error.
        env (Optional[Dict[str, str]]):
            Additional environment variables to add or override.
        cwd (Optional[str]):
            Working directory for the command.

    Returns:
        str: The captured stdout of the command on success.

    Raises:
        CommandError: If the command exits non-zero.
    """
    result = await run_process(command, env=env, cwd=cwd)

    if result.exit_code != 0:
        detail = ""
        if not sensitive:
            detail = (
                f"\nCommand: {' '.join(command)}"
                f"\nStdout: {result.stdout.strip()}"
                f"\nStderr: {result.stderr.strip()}"
            )
        raise CommandError(
            f"Command failed with return code {result.exit_code}.{detail}",
            result.exit_code,
        )

    return result.stdout.strip()
