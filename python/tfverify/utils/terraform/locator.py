"""
tfverify/utils/terraform/locator.py

Finds a single resource instance inside a TerraformState by type and optional
name. The first matching record in document order wins; provider is never
considered, so two records differing only in provider are not told apart.
"""

from __future__ import annotations

from typing import Any, Dict, Optional

from tfverify.models.terraform_state import CoderScriptAttributes, TerraformState
from tfverify.models.validator import narrow_attributes

CODER_SCRIPT_TYPE = "coder_script"


class LocatorError(Exception):
    """Base class for resource lookup failures."""


class NotFoundError(LocatorError):
    """No resource record matched the requested type (and name)."""


class CardinalityError(LocatorError):
    """The matched resource record does not have exactly one instance.

    Attributes:
        count (int): The observed number of instances.
    """

    def __init__(self, message: str, count: int) -> None:
        super().__init__(message)
        self.count = count


def find_resource_instance(
    state: TerraformState, type: str, name: Optional[str] = None
) -> Dict[str, Any]:
    """
    Finds the first resource of the given type and returns its only instance's
    attributes. If a non-empty name is given, only a resource with that name
    matches; an empty name filters nothing.

    Args:
        state (TerraformState): The parsed state.
        type (str): Resource type, e.g. "coder_script".
        name (Optional[str]): Resource name to match as well.

    Returns:
        Dict[str, Any]: The attribute map, unmodified.

    Raises:
        NotFoundError: If no resource matches.
        CardinalityError: If the matched resource does not have exactly one instance.
    """
    resource = next(
        (
            r
            for r in state.resources
            if r.type == type and (not name or r.name == name)
        ),
        None,
    )
    if resource is None:
        label = f"{type}.{name}" if name else type
        raise NotFoundError(f"Resource {label} not found")

    count = len(resource.instances)
    if count != 1:
        raise CardinalityError(f"Resource {type} has {count} instances", count)

    return resource.instances[0].attributes


def find_coder_script(state: TerraformState) -> CoderScriptAttributes:
    """Locate the only 'coder_script' resource and narrow its attributes."""
    attributes = find_resource_instance(state, CODER_SCRIPT_TYPE)
    return narrow_attributes(attributes, CoderScriptAttributes)
