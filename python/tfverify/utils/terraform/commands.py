"""
tfverify/utils/terraform/commands.py

Implements the two Terraform commands the harness needs:

    - init_terraform: 'terraform init' once per module directory.
    - apply_terraform: a single-shot 'terraform apply' into a throwaway state
      file, with variables injected as TF_VAR_<name> environment entries,
      returning the parsed TerraformState.

Both raise immediately on a non-zero exit, carrying the raw Terraform output.
There is no retry.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional, Union

from tfverify.models.harness_settings import HarnessSettings
from tfverify.models.terraform_state import TerraformState
from tfverify.utils.async_command_runner import CommandError, run_process
from tfverify.utils.terraform.ephemeral import consume_state_file, unique_state_path

logger = logging.getLogger(__name__)

TF_VAR_PREFIX = "TF_VAR_"

VariableValue = Union[str, bool]


class InitError(CommandError):
    """'terraform init' exited non-zero. The message is Terraform's stdout."""


class ApplyError(CommandError):
    """'terraform apply' exited non-zero. The message is Terraform's stderr."""


def _coerce_variable(name: str, value: VariableValue) -> str:
    """Render a variable value the way Terraform reads it from the environment."""
    # bool first: Terraform expects lowercase literals
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, str):
        return value
    raise TypeError(
        f"Variable '{name}' must be a str or bool, got {type(value).__name__}"
    )


def variables_to_env(variables: Mapping[str, VariableValue]) -> Dict[str, str]:
    """
    Serializes a variable set into Terraform's environment convention.

    Strings pass through unchanged; booleans become "true" / "false".

    Args:
        variables (Mapping[str, VariableValue]): Variable name -> value.

    Returns:
        Dict[str, str]: e.g. {"TF_VAR_agent_id": "foo", "TF_VAR_enabled": "true"}.

    Raises:
        TypeError: If a value is neither str nor bool.
    """
    return {
        f"{TF_VAR_PREFIX}{name}": _coerce_variable(name, value)
        for name, value in variables.items()
    }


def _make_apply_command(terraform_bin: str, state_path: str) -> List[str]:
    """Non-interactive, auto-approved, color-free apply into `state_path`."""
    return [
        terraform_bin,
        "apply",
        "-compact-warnings",
        "-input=false",
        "-auto-approve",
        "-no-color",
        "-state",
        state_path,
    ]


async def init_terraform(
    module_dir: str, settings: Optional[HarnessSettings] = None
) -> None:
    """Run 'terraform init' in the given module directory.

    Args:
        module_dir (str):
            Directory containing the Terraform module.
        settings (HarnessSettings, optional):
            Tool locations. Read from the environment when omitted.

    Raises:
        InitError: If 'terraform init' exits non-zero; carries its stdout.
    """
    settings = settings or HarnessSettings()
    result = await run_process(
        [settings.terraform_bin, "init", "-input=false", "-no-color"],
        cwd=module_dir,
    )
    if result.exit_code != 0:
        raise InitError(result.stdout, result.exit_code)


async def apply_terraform(
    module_dir: str,
    variables: Mapping[str, VariableValue],
    env: Optional[Dict[str, str]] = None,
    settings: Optional[HarnessSettings] = None,
) -> TerraformState:
    """Run 'terraform apply' with a fresh state file and return the resulting state.

    It is fine to run this concurrently against the same module directory: each
    call writes its own randomly named state file, which is deleted once read.

    Inherited TF_VAR_* entries are stripped from the child environment, so only
    `variables` reach Terraform.

    Args:
        module_dir (str):
            Directory containing the (already initialized) Terraform module.
        variables (Mapping[str, VariableValue]):
            Input variables, passed as TF_VAR_<name> environment entries.
        env (Dict[str,str], optional):
            Additional environment variables for Terraform. Variables win on conflict.
        settings (HarnessSettings, optional):
            Tool locations. Read from the environment when omitted.

    Returns:
        TerraformState: The parsed state written by this apply.

    Raises:
        ApplyError: If 'terraform apply' exits non-zero; carries its stderr.
        TypeError: If a variable value is neither str nor bool.
        pydantic.ValidationError: If the state file does not match TerraformState.
    """
    settings = settings or HarnessSettings()
    state_path = unique_state_path(module_dir)

    combined_env = dict(env) if env is not None else {}
    combined_env.update(variables_to_env(variables))

    result = await run_process(
        _make_apply_command(settings.terraform_bin, state_path),
        env=combined_env,
        cwd=module_dir,
        suppress_env_prefixes=[TF_VAR_PREFIX],
    )
    if result.exit_code != 0:
        raise ApplyError(result.stderr, result.exit_code)

    content = await consume_state_file(state_path)
    logger.debug("Applied %s into %s", module_dir, state_path)
    return TerraformState.model_validate_json(content)
