"""
tfverify/cli/args.py

Argument helpers shared by the tfverify CLI modules.
"""

from __future__ import annotations

import argparse
import logging
from typing import Dict, List, Tuple


def parse_var(raw: str) -> Tuple[str, str]:
    """argparse type for '--var name=value'. The value may contain '='."""
    name, sep, value = raw.partition("=")
    if not sep or not name:
        raise argparse.ArgumentTypeError(f"Expected name=value, got {raw!r}")
    return name, value


def collect_vars(pairs: List[Tuple[str, str]]) -> Dict[str, str]:
    """Later occurrences of a name override earlier ones."""
    return {name: value for name, value in pairs}


def add_common_arguments(parser: argparse.ArgumentParser) -> None:
    """Adds --module-dir, --var and --log-level."""
    parser.add_argument(
        "--module-dir",
        required=True,
        help="Directory containing the Terraform module under test.",
    )
    parser.add_argument(
        "--var",
        dest="vars",
        type=parse_var,
        action="append",
        default=[],
        metavar="NAME=VALUE",
        help="Input variable passed as TF_VAR_NAME. May be repeated.",
    )
    parser.add_argument(
        "--log-level",
        default="WARNING",
        choices=["DEBUG", "INFO", "WARNING", "ERROR"],
        help="Logging level (default: WARNING).",
    )


def configure_logging(level: str) -> None:
    logging.basicConfig(
        level=level, format="%(asctime)s %(levelname)s %(name)s: %(message)s"
    )
