"""
tfverify/utils/terraform/__init__.py

Provides a convenient import interface for the Terraform submodules:

- commands.py for 'terraform init' / 'terraform apply'
- ephemeral.py for per-apply state files
- locator.py for finding resource instances in a parsed state

Exports:
  - Terraform command functions (init_terraform, apply_terraform, variables_to_env)
  - Errors (InitError, ApplyError, NotFoundError, CardinalityError)
  - Locator functions (find_resource_instance, find_coder_script)
"""

from tfverify.utils.terraform.commands import (
    ApplyError,
    InitError,
    apply_terraform,
    init_terraform,
    variables_to_env,
)
from tfverify.utils.terraform.locator import (
    CardinalityError,
    LocatorError,
    NotFoundError,
    find_coder_script,
    find_resource_instance,
)

__all__ = [
    "ApplyError",
    "InitError",
    "apply_terraform",
    "init_terraform",
    "variables_to_env",
    "CardinalityError",
    "LocatorError",
    "NotFoundError",
    "find_coder_script",
    "find_resource_instance",
]
