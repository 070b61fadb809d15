"""
tfverify/utils/docker.py

Thin async bridge to the docker CLI: start a labeled, auto-removing container
on the host network, exec commands inside it, and remove it again.
"""

from __future__ import annotations

import shlex
import logging
from contextlib import asynccontextmanager
from typing import AsyncGenerator, List, Optional

from tfverify.models.exec_result import ExecResult
from tfverify.models.harness_settings import HarnessSettings
from tfverify.utils.async_command_runner import CommandError, run_command, run_process

logger = logging.getLogger(__name__)

_GONE_MARKERS = ("No such container", "is already in progress")


class ContainerStartError(CommandError):
    """'docker run' exited non-zero. The message is what docker printed to stdout."""


async def is_docker_running(settings: Optional[HarnessSettings] = None) -> bool:
    """
    Checks whether the Docker daemon is reachable by invoking 'docker info'.
    Returns True if Docker is running, False otherwise.
    """
    settings = settings or HarnessSettings()
    try:
        await run_command([settings.docker_bin, "info"], sensitive=True)
        return True
    except (CommandError, OSError):
        return False


async def run_container(
    image: str,
    init: Optional[str] = None,
    settings: Optional[HarnessSettings] = None,
) -> str:
    """
    Starts a detached container from `image` running `sh -c <init>`.

    The container is auto-removed when it stops, labeled for the harness, and
    attached to the configured network (host by default).

    Args:
        image (str): The image to run.
        init (Optional[str]): Entry command. Defaults to settings.keep_alive_command
            ("sleep infinity"), which keeps the container alive for exec.
        settings (Optional[HarnessSettings]): Tool locations and container options.

    Returns:
        str: The container id, trimmed.

    Raises:
        ContainerStartError: If 'docker run' exits non-zero.
    """
    settings = settings or HarnessSettings()
    command = [
        settings.docker_bin,
        "run",
        "--rm",
        "-d",
        "--label",
        settings.container_label,
        "--network",
        settings.container_network,
        "--entrypoint",
        "sh",
        image,
        "-c",
        init if init is not None else settings.keep_alive_command,
    ]
    result = await run_process(command)
    if result.exit_code != 0:
        raise ContainerStartError(result.stdout, result.exit_code)

    container_id = result.stdout.strip()
    logger.debug("Started container %s from %s", container_id, image)
    return container_id


async def exec_container(
    container_id: str,
    command: List[str],
    settings: Optional[HarnessSettings] = None,
) -> ExecResult:
    """
    Runs `command` inside a running container.

    The result is returned whatever the exit code is; callers assert on it.

    Args:
        container_id (str): Id returned by run_container.
        command (List[str]): Command and arguments to execute.
        settings (Optional[HarnessSettings]): Tool locations.

    Returns:
        ExecResult: exit code with the raw stdout and stderr.
    """
    settings = settings or HarnessSettings()
    return await run_process([settings.docker_bin, "exec", container_id, *command])


async def remove_container(
    container_id: str, settings: Optional[HarnessSettings] = None
) -> None:
    """
    Force-remove a container. A container that is already gone, or that docker
    is already removing (--rm racing with us), is not an error.
    """
    settings = settings or HarnessSettings()
    result = await run_process([settings.docker_bin, "rm", "-f", container_id])
    if result.exit_code != 0 and not any(
        marker in result.stderr for marker in _GONE_MARKERS
    ):
        raise CommandError(result.stderr, result.exit_code)


@asynccontextmanager
async def ephemeral_container(
    image: str,
    init: Optional[str] = None,
    settings: Optional[HarnessSettings] = None,
) -> AsyncGenerator[str, None]:
    """
    Async context manager around run_container / remove_container.

    A failed removal is logged, never raised over the body's own outcome.

    Yields:
        str: The container id. The container is removed on exit.
    """
    container_id = await run_container(image, init, settings)
    try:
        yield container_id
    finally:
        try:
            await remove_container(container_id, settings)
        except CommandError as exc:
            logger.warning("Could not remove container %s: %s", container_id, exc)


async def write_coder(
    container_id: str, script: str, settings: Optional[HarnessSettings] = None
) -> None:
    """
    Installs `script` as an executable /usr/bin/coder inside the container, so
    module scripts that call the coder CLI can be exercised against a fake.

    Raises:
        CommandError: If writing the file fails.
    """
    result = await exec_container(
        container_id,
        [
            "sh",
            "-c",
            f"printf '%s\\n' {shlex.quote(script)} > /usr/bin/coder"
            " && chmod +x /usr/bin/coder",
        ],
        settings,
    )
    if result.exit_code != 0:
        raise CommandError(
            f"Failed to write /usr/bin/coder: {result.stderr.strip()}",
            result.exit_code,
        )
