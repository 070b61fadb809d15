"""
tfverify/harness/script_exec.py

Runs the script a module declares through its 'coder_script' resource inside a
fresh container and reports what it printed.
"""

from __future__ import annotations

from typing import List, Optional

from tfverify.models.exec_result import ScriptResult
from tfverify.models.harness_settings import HarnessSettings
from tfverify.models.terraform_state import TerraformState
from tfverify.utils.docker import ephemeral_container, exec_container
from tfverify.utils.terraform.locator import find_coder_script


def split_lines(text: str) -> List[str]:
    """Trim and split captured output on newlines. Empty output gives [""]."""
    return text.strip().split("\n")


async def execute_script_in_container(
    state: TerraformState,
    image: str,
    shell: str = "sh",
    settings: Optional[HarnessSettings] = None,
) -> ScriptResult:
    """
    Finds the only 'coder_script' resource in the given state and runs it in a
    container started from `image`.

    The container is kept alive with the configured keep-alive command while
    the script runs through `shell -c`, and removed afterwards.

    Args:
        state (TerraformState): State returned by apply_terraform.
        image (str): Image to run the script in, e.g. "alpine".
        shell (str): Shell used to run the script. Defaults to "sh".
        settings (Optional[HarnessSettings]): Tool locations and container options.

    Returns:
        ScriptResult: exit code plus stdout/stderr split into lines.

    Raises:
        NotFoundError / CardinalityError: If the module does not declare exactly
            one coder_script instance.
        ContainerStartError: If the container cannot be started.
    """
    script = find_coder_script(state)
    async with ephemeral_container(image, settings=settings) as container_id:
        resp = await exec_container(
            container_id, [shell, "-c", script.script], settings
        )

    return ScriptResult(
        exit_code=resp.exit_code,
        stdout=split_lines(resp.stdout),
        stderr=split_lines(resp.stderr),
    )
