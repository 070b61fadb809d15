"""
tfverify/models/terraform_state.py

Holds the pydantic models for the state file written by 'terraform apply -state'.
Only the parts the harness reads are typed; everything else Terraform writes
(version, serial, lineage, mode, schema_version, ...) is kept as extra data.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OutputValue(BaseModel):
    """
    Represents one entry of the 'outputs' block in a Terraform state file.

    Attributes:
        value: The actual output data, can be any type.
        type: Terraform type hint, either a string ("string") or the list form
            Terraform uses for collection types (["list", "string"]).
        sensitive: Whether the output is sensitive.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    value: Any
    type: Any = None
    sensitive: bool = False


class InstanceRecord(BaseModel):
    """One concrete materialization of a resource block."""

    model_config = ConfigDict(frozen=True, extra="allow")

    attributes: Dict[str, Any]


class ResourceRecord(BaseModel):
    """
    A resource block in the state file.

    The number of instances is not checked here; the locator decides whether a
    record with zero or several instances is an error.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    type: str
    name: str
    provider: str
    instances: List[InstanceRecord]


class TerraformState(BaseModel):
    """
    A pydantic model for the state document produced by a single apply.

    Attributes:
        outputs: Mapping of output_name -> OutputValue.
        resources: Resource blocks in document order. Never empty.
    """

    model_config = ConfigDict(frozen=True, extra="allow")

    outputs: Dict[str, OutputValue] = Field(default_factory=dict)
    resources: List[ResourceRecord] = Field(min_length=1)


class CoderScriptAttributes(BaseModel):
    """
    Narrowed attributes of a 'coder_script' resource instance.

    Recent coder providers no longer write 'url' for coder_script, so it is
    optional.
    """

    model_config = ConfigDict(extra="ignore")

    script: str
    agent_id: str
    url: Optional[str] = None
