"""
tfverify/models/exec_result.py

Result models for finished processes: raw captured streams (ExecResult) and the
line-split form returned when running a module's script (ScriptResult).
"""

from typing import List

from pydantic import BaseModel


class ExecResult(BaseModel):
    """
    Exit code and captured streams of a terminated process.

    Attributes:
        exit_code: The process return code.
        stdout: Everything written to standard output, decoded as UTF-8.
        stderr: Everything written to standard error, decoded as UTF-8.
    """

    exit_code: int
    stdout: str
    stderr: str


class ScriptResult(BaseModel):
    """Outcome of a module script run inside a container, split into lines."""

    exit_code: int
    stdout: List[str]
    stderr: List[str]
