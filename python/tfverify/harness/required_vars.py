"""
tfverify/harness/required_vars.py

Derives "required variable" checks for a module from a working variable set:

  1) "required variables": applying with every variable must succeed.
  2) "missing variable <name>": for each variable, applying without it must
     fail with Terraform's 'input variable "<name>" is not set' error.

A variable that can be omitted without an apply failure is reported by name,
since the module treats it as optional while the caller claims it is required.
"""

from __future__ import annotations

import logging
from typing import Dict, List, Mapping, Optional

from pydantic import BaseModel

from tfverify.models.harness_settings import HarnessSettings
from tfverify.utils.terraform.commands import (
    ApplyError,
    VariableValue,
    apply_terraform,
)

logger = logging.getLogger(__name__)


def missing_variable_message(name: str) -> str:
    """The phrase Terraform prints when a required input variable is absent."""
    return f'input variable "{name}" is not set'


class RequiredVariableCase(BaseModel):
    """
    One generated check.

    Attributes:
        module_dir: Terraform module under test.
        variables: The variables passed to apply for this case.
        omitted: The variable left out, or None for the all-present case.
    """

    module_dir: str
    variables: Dict[str, VariableValue]
    omitted: Optional[str] = None

    @property
    def name(self) -> str:
        if self.omitted is None:
            return "required variables"
        return f"missing variable {self.omitted}"

    async def run(self, settings: Optional[HarnessSettings] = None) -> None:
        """
        Apply the module and assert on the outcome.

        Raises:
            ApplyError: If the all-present case fails to apply.
            AssertionError: If a missing-variable case applies successfully, or
                fails with an unexpected message.
        """
        if self.omitted is None:
            await apply_terraform(self.module_dir, self.variables, settings=settings)
            return

        expected = missing_variable_message(self.omitted)
        try:
            await apply_terraform(self.module_dir, self.variables, settings=settings)
        except ApplyError as exc:
            if expected not in exc.message:
                raise AssertionError(
                    f"Expected apply error containing {expected!r}, got:\n{exc.message}"
                ) from exc
            logger.debug("%s: apply rejected as expected", self.name)
            return

        raise AssertionError(f"{self.omitted} is not a required variable!")


def generate_required_variable_cases(
    module_dir: str, variables: Mapping[str, VariableValue]
) -> List[RequiredVariableCase]:
    """
    Creates the all-present case followed by one case per omitted variable,
    in the order of `variables`.

    Args:
        module_dir (str): The module directory.
        variables (Mapping[str, VariableValue]): A complete, valid variable set.

    Returns:
        List[RequiredVariableCase]: len(variables) + 1 cases.
    """
    full = dict(variables)
    cases = [RequiredVariableCase(module_dir=module_dir, variables=full)]
    cases.extend(
        RequiredVariableCase(
            module_dir=module_dir,
            variables={k: v for k, v in full.items() if k != omitted},
            omitted=omitted,
        )
        for omitted in full
    )
    return cases
