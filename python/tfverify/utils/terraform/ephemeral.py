"""
tfverify/utils/terraform/ephemeral.py

Handles the per-apply state file. Each apply gets its own randomly named
'.tfstate' inside the module directory, so concurrent applies against the same
module never share a state file. Once Terraform has written it, the file is
read back and removed.
"""

from __future__ import annotations

import os
import uuid
import logging

import aiofiles

logger = logging.getLogger(__name__)


def unique_state_path(module_dir: str, suffix: str = ".tfstate") -> str:
    """
    Builds a collision-resistant state file path inside `module_dir`.

    Args:
        module_dir (str): The Terraform module directory.
        suffix (str): File suffix. Defaults to ".tfstate".

    Returns:
        str: e.g. "<module_dir>/5f0c...e1.tfstate".
    """
    return os.path.join(module_dir, f"{uuid.uuid4()}{suffix}")


async def consume_state_file(state_path: str) -> str:
    """
    Reads a state file as UTF-8 text, then attempts to delete it.

    A failed deletion is logged and otherwise ignored; the content has already
    been read at that point.

    Args:
        state_path (str): Path written by 'terraform apply -state'.

    Returns:
        str: The raw JSON text of the state file.
    """
    async with aiofiles.open(state_path, "r", encoding="utf-8") as f:
        content = await f.read()

    try:
        os.remove(state_path)
    except OSError as exc:
        logger.warning("Could not remove state file %s: %s", state_path, exc)

    return content
