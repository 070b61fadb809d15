#!/usr/bin/env python3
"""
tfverify/cli/required_vars.py

Runs the generated required-variable checks for a module outside of pytest.
Every --var given is claimed to be required.

Usage:
  python -m tfverify.cli.required_vars --module-dir ./kasmvnc --var agent_id=foo
"""

from __future__ import annotations

import argparse
import asyncio
import sys

from tfverify.cli.args import add_common_arguments, collect_vars, configure_logging
from tfverify.harness.required_vars import generate_required_variable_cases
from tfverify.models.harness_settings import HarnessSettings
from tfverify.utils.async_command_runner import CommandError
from tfverify.utils.terraform import init_terraform


async def _run(args: argparse.Namespace) -> int:
    """Run each case in turn and return the number of failures."""
    settings = HarnessSettings()
    if not args.no_init:
        await init_terraform(args.module_dir, settings)

    cases = generate_required_variable_cases(args.module_dir, collect_vars(args.vars))
    failures = 0
    for case in cases:
        try:
            await case.run(settings)
        except (AssertionError, CommandError) as exc:
            failures += 1
            print(f"FAIL {case.name}: {exc}")
            continue
        print(f"PASS {case.name}")
    return failures


def main() -> None:
    """CLI entry point for required-variable checks."""
    parser = argparse.ArgumentParser(
        prog="tfverify.cli.required_vars",
        description="Check that every given variable is required by a Terraform module.",
    )
    add_common_arguments(parser)
    parser.add_argument(
        "--no-init",
        action="store_true",
        default=False,
        help="Skip 'terraform init' (module already initialized).",
    )
    args = parser.parse_args()
    configure_logging(args.log_level)

    try:
        failures = asyncio.run(_run(args))
    except CommandError as exc:
        print(f"ERROR: {exc}", file=sys.stderr)
        sys.exit(1)

    sys.exit(1 if failures else 0)


if __name__ == "__main__":
    main()
