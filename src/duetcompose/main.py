"""Subcommand dispatcher for duetcompose.

Usage:
    duetcompose probe   left.mp4 right.mp4
    duetcompose plan    --mode side_by_side left.mp4 right.mp4
    duetcompose render  --manifest duet.yaml --output duet.mp4
"""

import argparse
import sys


def main(args=None):
    parser = argparse.ArgumentParser(
        prog="duetcompose",
        description="Plan and render two-source (duet) video compositions.",
        exit_on_error=False,
    )
    subparsers = parser.add_subparsers(dest="command")

    # Register subcommands. Each delegates to its own module's main().
    subparsers.add_parser("probe", help="Print normalized metadata of sources")
    subparsers.add_parser("plan", help="Build and print a composition plan")
    subparsers.add_parser("render", help="Build a composition plan and render it")

    # Parse only the subcommand name, pass the rest to the subcommand's parser.
    try:
        parsed, remaining = parser.parse_known_args(args)
    except argparse.ArgumentError:
        # Unknown subcommand name.
        parser.print_help()
        sys.exit(1)

    if parsed.command is None:
        # No subcommand given at all: show help and exit with error.
        parser.print_help()
        sys.exit(1)

    if parsed.command == "probe":
        from .probe_cli import main as probe_main
        probe_main(remaining)
    elif parsed.command == "plan":
        from .cli import plan_main
        plan_main(remaining)
    elif parsed.command == "render":
        from .cli import render_main
        render_main(remaining)


if __name__ == "__main__":
    main()
