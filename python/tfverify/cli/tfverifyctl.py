"""
tfverify/cli/tfverifyctl.py

Entry point that forwards `tfverifyctl <subcommand> [args...]` to
`python -m tfverify.cli.<subcommand>`. Only real subcommands are dispatched,
so a typo fails loudly instead of importing an arbitrary module.
"""

import sys
import subprocess
from typing import List, Optional

SUBCOMMANDS = ("run_script", "required_vars")

USAGE = f"Usage: tfverifyctl <{'|'.join(SUBCOMMANDS)}> [args...]"


def main(argv: Optional[List[str]] = None) -> None:
    args = sys.argv[1:] if argv is None else argv
    if not args or args[0] not in SUBCOMMANDS:
        if args:
            print(f"Unknown subcommand: {args[0]}", file=sys.stderr)
        print(USAGE, file=sys.stderr)
        sys.exit(1)

    subcommand, subcommand_args = args[0], args[1:]
    cmd = [sys.executable, "-m", f"tfverify.cli.{subcommand}"] + subcommand_args
    sys.exit(subprocess.call(cmd))


if __name__ == "__main__":
    main()
