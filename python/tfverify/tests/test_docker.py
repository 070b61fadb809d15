import logging

import pytest

from tfverify.models.exec_result import ExecResult
from tfverify.models.harness_settings import HarnessSettings
from tfverify.utils import async_command_runner, docker
from tfverify.utils.async_command_runner import CommandError
from tfverify.utils.docker import (
    ContainerStartError,
    ephemeral_container,
    exec_container,
    remove_container,
    run_container,
    write_coder,
)


def _ok(stdout="", stderr=""):
    return lambda command, **kwargs: ExecResult(
        exit_code=0, stdout=stdout, stderr=stderr
    )


@pytest.mark.asyncio
async def test_run_container_command_and_trimmed_id(monkeypatch, fake_runner_factory):
    runner = fake_runner_factory(_ok(stdout="abc123\n"))
    monkeypatch.setattr(docker, "run_process", runner)

    container_id = await run_container("alpine")

    assert container_id == "abc123"
    assert runner.calls[0]["command"] == [
        "docker",
        "run",
        "--rm",
        "-d",
        "--label",
        "modules-test=true",
        "--network",
        "host",
        "--entrypoint",
        "sh",
        "alpine",
        "-c",
        "sleep infinity",
    ]


@pytest.mark.asyncio
async def test_run_container_custom_init_and_settings(monkeypatch, fake_runner_factory):
    runner = fake_runner_factory(_ok(stdout="id"))
    monkeypatch.setattr(docker, "run_process", runner)
    settings = HarnessSettings(docker_bin="podman", container_network="bridge")

    await run_container("debian", "sleep 60", settings)

    command = runner.calls[0]["command"]
    assert command[0] == "podman"
    assert command[command.index("--network") + 1] == "bridge"
    assert command[-1] == "sleep 60"


@pytest.mark.asyncio
async def test_run_container_failure_carries_stdout(monkeypatch, fake_runner_factory):
    runner = fake_runner_factory(
        lambda command, **kwargs: ExecResult(
            exit_code=125, stdout="partial output", stderr="Unable to find image"
        )
    )
    monkeypatch.setattr(docker, "run_process", runner)

    with pytest.raises(ContainerStartError) as excinfo:
        await run_container("nope")

    assert excinfo.value.message == "partial output"
    assert excinfo.value.return_code == 125


@pytest.mark.asyncio
async def test_exec_returns_result_even_on_failure(monkeypatch, fake_runner_factory):
    runner = fake_runner_factory(
        lambda command, **kwargs: ExecResult(exit_code=7, stdout="o", stderr="e")
    )
    monkeypatch.setattr(docker, "run_process", runner)

    result = await exec_container("abc", ["sh", "-c", "exit 7"])

    assert result == ExecResult(exit_code=7, stdout="o", stderr="e")
    assert runner.calls[0]["command"] == ["docker", "exec", "abc", "sh", "-c", "exit 7"]


@pytest.mark.asyncio
async def test_remove_container_tolerates_missing(monkeypatch, fake_runner_factory):
    runner = fake_runner_factory(
        lambda command, **kwargs: ExecResult(
            exit_code=1, stdout="", stderr="Error: No such container: abc"
        )
    )
    monkeypatch.setattr(docker, "run_process", runner)

    await remove_container("abc")

    assert runner.calls[0]["command"] == ["docker", "rm", "-f", "abc"]


@pytest.mark.asyncio
async def test_remove_container_tolerates_auto_removal_in_progress(
    monkeypatch, fake_runner_factory
):
    runner = fake_runner_factory(
        lambda command, **kwargs: ExecResult(
            exit_code=1,
            stdout="",
            stderr="Error response from daemon: removal of container abc "
            "is already in progress",
        )
    )
    monkeypatch.setattr(docker, "run_process", runner)

    await remove_container("abc")


@pytest.mark.asyncio
async def test_ephemeral_container_logs_failed_removal(
    monkeypatch, fake_runner_factory, caplog
):
    def responder(command, **kwargs):
        if command[1] == "rm":
            return ExecResult(exit_code=1, stdout="", stderr="permission denied")
        return ExecResult(exit_code=0, stdout="cid\n", stderr="")

    monkeypatch.setattr(docker, "run_process", fake_runner_factory(responder))

    with caplog.at_level(logging.WARNING, logger="tfverify.utils.docker"):
        async with ephemeral_container("alpine") as container_id:
            assert container_id == "cid"

    assert "Could not remove container cid" in caplog.text


@pytest.mark.asyncio
async def test_remove_container_other_failure_raises(monkeypatch, fake_runner_factory):
    runner = fake_runner_factory(
        lambda command, **kwargs: ExecResult(
            exit_code=1, stdout="", stderr="permission denied"
        )
    )
    monkeypatch.setattr(docker, "run_process", runner)

    with pytest.raises(CommandError, match="permission denied"):
        await remove_container("abc")


@pytest.mark.asyncio
async def test_ephemeral_container_removes_on_error(monkeypatch, fake_runner_factory):
    runner = fake_runner_factory(_ok(stdout="cid\n"))
    monkeypatch.setattr(docker, "run_process", runner)

    with pytest.raises(RuntimeError):
        async with ephemeral_container("alpine") as container_id:
            assert container_id == "cid"
            raise RuntimeError("test body failed")

    assert runner.calls[-1]["command"] == ["docker", "rm", "-f", "cid"]


@pytest.mark.asyncio
async def test_write_coder_quotes_script(monkeypatch, fake_runner_factory):
    runner = fake_runner_factory()
    monkeypatch.setattr(docker, "run_process", runner)

    await write_coder("cid", "#!/bin/sh\necho 'it works'")

    command = runner.calls[0]["command"]
    assert command[:5] == ["docker", "exec", "cid", "sh", "-c"]
    assert command[5].startswith(
        "printf '%s\\n' '#!/bin/sh\necho '\"'\"'it works"
    )
    assert command[5].endswith("> /usr/bin/coder && chmod +x /usr/bin/coder")


@pytest.mark.asyncio
async def test_write_coder_passes_backslashes_verbatim(
    monkeypatch, fake_runner_factory
):
    runner = fake_runner_factory()
    monkeypatch.setattr(docker, "run_process", runner)

    await write_coder("cid", "printf 'a\\tb\\n'")

    command = runner.calls[0]["command"][5]
    assert not command.startswith("echo")
    assert "'printf '\"'\"'a\\tb\\n'\"'\"''" in command


@pytest.mark.asyncio
async def test_write_coder_failure(monkeypatch, fake_runner_factory):
    runner = fake_runner_factory(
        lambda command, **kwargs: ExecResult(
            exit_code=1, stdout="", stderr="read-only file system"
        )
    )
    monkeypatch.setattr(docker, "run_process", runner)

    with pytest.raises(CommandError, match="read-only file system"):
        await write_coder("cid", "echo hi")


@pytest.mark.asyncio
async def test_is_docker_running_false_when_binary_missing():
    settings = HarnessSettings(docker_bin="tfverify-no-such-docker-binary")

    assert await docker.is_docker_running(settings) is False


@pytest.mark.asyncio
async def test_is_docker_running_false_when_daemon_down(
    monkeypatch, fake_runner_factory
):
    runner = fake_runner_factory(
        lambda command, **kwargs: ExecResult(
            exit_code=1,
            stdout="",
            stderr="Cannot connect to the Docker daemon at unix:///var/run/docker.sock",
        )
    )
    monkeypatch.setattr(async_command_runner, "run_process", runner)

    assert await docker.is_docker_running() is False
    assert runner.calls[0]["command"] == ["docker", "info"]


@pytest.mark.asyncio
async def test_is_docker_running_true_when_daemon_answers(
    monkeypatch, fake_runner_factory
):
    monkeypatch.setattr(async_command_runner, "run_process", fake_runner_factory())

    assert await docker.is_docker_running() is True
