"""CLI for duet planning and rendering.

Builds a composition plan either from a YAML duet manifest or from
sources given on the command line, prints it, and optionally renders it.

Usage:
    # Print the plan for a manifest
    duetcompose plan --manifest duet.yaml

    # Plan from the command line, as JSON
    duetcompose plan --mode side_by_side left.mp4 right.mp4 --json

    # Picture-in-picture of a single source (shown full-frame and inset)
    duetcompose render --mode picture_in_picture clip.mp4 \
        --size 360x240 --output /tmp/pip.mp4

    # Render a manifest
    duetcompose render --manifest duet.yaml --output /tmp/duet.mp4
"""

import argparse
import json
import time

from .common import parse_size
from .layouts import PIP_DEFAULT_SIZE, VALID_MODES, PictureInPicture, SideBySide
from .manifest import DEFAULT_FPS, build_mode, load_duet_manifest, validate_sources
from .media import FFmpegRetriever
from .plan import assemble, print_plan_summary
from .render import render_plan


def _add_plan_args(parser):
    parser.add_argument(
        "sources", nargs="*",
        help="Primary and secondary source (with --mode)",
    )
    parser.add_argument(
        "--manifest", default=None,
        help="Path to duet YAML manifest",
    )
    parser.add_argument(
        "--mode", choices=sorted(VALID_MODES), default=None,
        help="Layout mode (command-line mode, instead of --manifest)",
    )
    parser.add_argument(
        "--size", default=None,
        help="Presentation size WIDTHxHEIGHT for picture_in_picture "
             f"(default: {PIP_DEFAULT_SIZE})",
    )


def _resolve_mode(parsed, parser):
    """Return (mode, fps) from either --manifest or --mode + sources."""
    if parsed.manifest is not None:
        if parsed.mode is not None or parsed.sources or parsed.size is not None:
            parser.error("--manifest cannot be combined with --mode, --size or sources")
        config = load_duet_manifest(parsed.manifest)
        validate_sources(config)
        return build_mode(config), config["output"]["fps"]

    if parsed.mode is None:
        parser.error("Specify either --manifest or --mode with sources")

    if parsed.mode == SideBySide.tag:
        if len(parsed.sources) != 2:
            parser.error("side_by_side requires exactly two sources")
        if parsed.size is not None:
            parser.error("--size only applies to picture_in_picture")
        primary, secondary = parsed.sources
        return SideBySide(primary, secondary, FFmpegRetriever()), DEFAULT_FPS

    if len(parsed.sources) not in (1, 2):
        parser.error("picture_in_picture requires one or two sources")
    try:
        size = parse_size(parsed.size) if parsed.size else PIP_DEFAULT_SIZE
    except ValueError as exc:
        parser.error(str(exc))
    if len(parsed.sources) == 1:
        return PictureInPicture.single(parsed.sources[0], size), DEFAULT_FPS
    primary, secondary = parsed.sources
    return PictureInPicture(primary, secondary, size), DEFAULT_FPS


def plan_main(args=None):
    parser = argparse.ArgumentParser(
        prog="duetcompose plan",
        description="Build and print a duet composition plan.",
    )
    _add_plan_args(parser)
    parser.add_argument(
        "--json", action="store_true",
        help="Print the plan as JSON instead of a summary",
    )
    parsed = parser.parse_intermixed_args(args)

    mode, _ = _resolve_mode(parsed, parser)
    if parsed.json:
        plan = assemble(mode)
        print(json.dumps(plan.to_dict(), indent=2))
    else:
        assemble(mode, observer=print_plan_summary)


def render_main(args=None):
    parser = argparse.ArgumentParser(
        prog="duetcompose render",
        description="Build a duet composition plan and render it to mp4.",
    )
    _add_plan_args(parser)
    parser.add_argument(
        "--output", required=True,
        help="Output mp4 path",
    )
    parser.add_argument(
        "--fps", type=int, default=None,
        help=f"Output frame rate (default: manifest value or {DEFAULT_FPS})",
    )
    parser.add_argument(
        "--quiet", action="store_true",
        help="Suppress the moviepy progress bar",
    )
    parsed = parser.parse_intermixed_args(args)

    mode, fps = _resolve_mode(parsed, parser)
    if parsed.fps is not None:
        if parsed.fps <= 0:
            parser.error("--fps must be > 0")
        fps = parsed.fps

    plan = assemble(mode, observer=print_plan_summary)
    print(f"\nWriting to: {parsed.output} ({fps}fps)")
    t0 = time.monotonic()
    size = render_plan(plan, parsed.output, fps=fps, quiet=parsed.quiet)
    elapsed = time.monotonic() - t0
    print(f"\nDone: {parsed.output} ({size}, {elapsed:.1f}s wall)")
