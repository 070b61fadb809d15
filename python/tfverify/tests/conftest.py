"""
Shared fixtures: a realistic state document and a recording fake for the
process runner, so unit tests never spawn terraform or docker.
"""

from __future__ import annotations

import copy
from typing import Any, Callable, Dict, List, Optional

import pytest

from tfverify.models.exec_result import ExecResult
from tfverify.models.harness_settings import HarnessSettings

SAMPLE_STATE: Dict[str, Any] = {
    "version": 4,
    "terraform_version": "1.9.2",
    "serial": 1,
    "lineage": "0c7c2f1e-6d1b-4c8e-9a57-1c1f0f3f0f10",
    "outputs": {
        "url": {"value": "http://localhost:6800", "type": "string"},
        "ports": {"value": [6800, 6801], "type": ["list", "number"]},
    },
    "resources": [
        {
            "mode": "managed",
            "type": "coder_app",
            "name": "kasm_vnc",
            "provider": 'provider["registry.terraform.io/coder/coder"]',
            "instances": [
                {
                    "schema_version": 0,
                    "attributes": {
                        "agent_id": "foo",
                        "slug": "kasm-vnc",
                        "subdomain": True,
                        "healthcheck": [{"interval": 5, "threshold": 5}],
                    },
                }
            ],
        },
        {
            "mode": "managed",
            "type": "coder_script",
            "name": "kasm_vnc",
            "provider": 'provider["registry.terraform.io/coder/coder"]',
            "instances": [
                {
                    "schema_version": 1,
                    "attributes": {
                        "agent_id": "foo",
                        "display_name": "KasmVNC",
                        "run_on_start": True,
                        "script": "echo hello",
                        "url": "http://localhost:6800",
                    },
                }
            ],
        },
    ],
}


@pytest.fixture
def state_dict() -> Dict[str, Any]:
    """A fresh deep copy of SAMPLE_STATE, safe to mutate."""
    return copy.deepcopy(SAMPLE_STATE)


@pytest.fixture
def settings() -> HarnessSettings:
    return HarnessSettings()


class FakeRunner:
    """
    Stands in for run_process. Records every call and answers through
    `responder`, which receives the command and keyword arguments.
    """

    def __init__(
        self, responder: Optional[Callable[..., ExecResult]] = None
    ) -> None:
        self.calls: List[Dict[str, Any]] = []
        self.responder = responder or (
            lambda command, **kwargs: ExecResult(exit_code=0, stdout="", stderr="")
        )

    async def __call__(self, command: List[str], **kwargs: Any) -> ExecResult:
        self.calls.append({"command": list(command), **kwargs})
        return self.responder(command, **kwargs)


@pytest.fixture
def fake_runner_factory() -> Callable[..., FakeRunner]:
    return FakeRunner
