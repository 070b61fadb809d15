"""
tfverify/harness/pytest_binding.py

Turns generated required-variable cases into a parametrized pytest test.

Usage, at module level of a test file:

    test_required_variables = required_variables_test(
        MODULE_DIR, {"agent_id": "foo", "url": "https://example.com"}
    )
"""

from __future__ import annotations

from typing import Any, Callable, Coroutine, Mapping

import pytest

from tfverify.harness.required_vars import (
    RequiredVariableCase,
    generate_required_variable_cases,
)
from tfverify.utils.terraform.commands import VariableValue


def required_variables_test(
    module_dir: str, variables: Mapping[str, VariableValue]
) -> Callable[[RequiredVariableCase], Coroutine[Any, Any, None]]:
    """Build an async test function parametrized over the generated cases."""
    cases = generate_required_variable_cases(module_dir, variables)

    @pytest.mark.asyncio
    @pytest.mark.parametrize("case", cases, ids=[c.name for c in cases])
    async def test_required_variables(case: RequiredVariableCase) -> None:
        await case.run()

    return test_required_variables
