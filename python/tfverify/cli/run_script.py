#!/usr/bin/env python3
"""
tfverify/cli/run_script.py

Applies a module and runs its coder_script inside a container, printing the
result as JSON. The exit status mirrors the script's exit code.

Usage:
  python -m tfverify.cli.run_script --module-dir ./kasmvnc --image alpine \
      --var agent_id=foo --var desktop_environment=xfce
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from tfverify.cli.args import add_common_arguments, collect_vars, configure_logging
from tfverify.harness.script_exec import execute_script_in_container
from tfverify.models.exec_result import ScriptResult
from tfverify.models.harness_settings import HarnessSettings
from tfverify.utils.async_command_runner import CommandError
from tfverify.utils.terraform import (
    LocatorError,
    apply_terraform,
    init_terraform,
)


async def _run(args: argparse.Namespace) -> ScriptResult:
    """Init (unless skipped), apply, then execute the declared script."""
    settings = HarnessSettings()
    if not args.no_init:
        await init_terraform(args.module_dir, settings)

    state = await apply_terraform(
        args.module_dir, collect_vars(args.vars), settings=settings
    )
    return await execute_script_in_container(
        state, args.image, shell=args.shell or settings.default_shell, settings=settings
    )


def main() -> None:
    """CLI entry point for running a module's script in a container."""
    parser = argparse.ArgumentParser(
        prog="tfverify.cli.run_script",
        description="Apply a Terraform module and run its coder_script in a container.",
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--image", required=True, help="Container image to run the script in."
    )
    parser.add_argument(
        "--shell",
        default=None,
        help="Shell used to run the script (default: TFVERIFY_DEFAULT_SHELL or 'sh').",
    )
    parser.add_argument(
        "--no-init",
        action="store_true",
        default=False,
        help="Skip 'terraform init' (module already initialized).",
    )
    args = parser.parse_args()
    configure_logging(args.log_level)

    try:
        result = asyncio.run(_run(args))
    except (CommandError, LocatorError, ValueError) as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    print(result.model_dump_json(indent=2))
    sys.exit(result.exit_code)


if __name__ == "__main__":
    main()
