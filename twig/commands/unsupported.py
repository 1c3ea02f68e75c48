# The commands: twig merge | fetch | pull | push
# What it does: Declares the commands so they show up in `--help`, and reports that they are not implemented
# How it does: Prints an error and exits non-zero

import sys


def run(args):
    print(f"fatal: '{args.command}' is not implemented", file=sys.stderr)
    sys.exit(1)
