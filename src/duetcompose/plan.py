"""Composition plan assembly: descriptors, layout and timeline in one value.

assemble() is the single entry point. It reads descriptors when the
mode needs them, asks the mode's layout strategy for canvas size and
placements, aligns the secondary timeline, and returns a frozen
CompositionPlan. Errors from any step propagate unchanged; a failed
input invalidates the whole plan.

An optional observer is called with the finished plan. It cannot affect
the result, so the planning itself stays free of side effects.
"""

from dataclasses import dataclass

from .common import Size
from .layouts import (
    Layout,
    OverlayPlacement,
    Presentation,
    SideBySide,
    plan_layout,
)
from .media import MediaDescriptor, MediaSource, describe, extract
from .timeline import TimeRange, align


@dataclass(frozen=True)
class CompositionPlan:
    mode: str
    inputs: tuple[MediaSource, MediaSource]
    canvas_size: Size | None
    placements: tuple[OverlayPlacement, OverlayPlacement]
    presentation: Presentation
    trimmed_secondary_range: TimeRange | None = None
    descriptors: tuple[MediaDescriptor, ...] = ()

    def __post_init__(self):
        if len(self.inputs) != 2 or len(self.placements) != 2:
            raise ValueError(
                f"A duet plan needs exactly 2 inputs and 2 placements, got "
                f"{len(self.inputs)} and {len(self.placements)}"
            )
        canvas = self.canvas_size
        if canvas is not None and (canvas.width <= 0 or canvas.height <= 0):
            raise ValueError(f"Canvas size must be positive, got {canvas}")

    def output_size(self, input_sizes) -> Size:
        """Compositor output size for the given input sizes.

        A plan without a fixed canvas composites at input 0's size.
        """
        if self.canvas_size is not None:
            return self.canvas_size
        return Size(*input_sizes[0])

    def to_dict(self) -> dict:
        """JSON-serializable view of the plan."""
        trim = self.trimmed_secondary_range
        return {
            "mode": self.mode,
            "inputs": [s.uri for s in self.inputs],
            "canvas_size": None if self.canvas_size is None else list(self.canvas_size),
            "placements": [
                {
                    "scale": list(p.scale),
                    "overlay_anchor": list(p.overlay_anchor),
                    "background_anchor": list(p.background_anchor),
                }
                for p in self.placements
            ],
            "presentation": {
                "width": self.presentation.width,
                "height": self.presentation.height,
                "layout": self.presentation.layout,
            },
            "trimmed_secondary_range": (
                None if trim is None
                else {"start_ns": trim.start_ns, "end_ns": trim.end_ns}
            ),
            "descriptors": [
                {
                    "uri": d.uri,
                    "raw_size": list(d.raw_size),
                    "rotation": d.rotation,
                    "display_size": list(d.display_size),
                    "aspect_ratio": list(d.aspect_ratio),
                    "duration_ns": d.duration_ns,
                }
                for d in self.descriptors
            ],
        }


def assemble(mode, observer=None) -> CompositionPlan:
    """Build the composition plan for a layout mode.

    side_by_side reads both descriptors (primary first) through the
    mode's retriever and clips the secondary to the primary's duration.
    picture_in_picture reads no metadata and applies no clipping.

    Args:
        mode: SideBySide or PictureInPicture.
        observer: Optional callable(plan), invoked after a successful
            build. Exceptions it raises propagate.

    Returns:
        CompositionPlan.
    """
    primary = secondary = None
    trim = None
    descriptors = ()

    if isinstance(mode, SideBySide):
        primary = extract(mode.primary, mode.retriever)
        secondary = extract(mode.secondary, mode.retriever)
        descriptors = (primary, secondary)

    layout: Layout = plan_layout(mode, primary, secondary)

    if isinstance(mode, SideBySide):
        trim = align(primary.duration_ns, secondary)

    plan = CompositionPlan(
        mode=mode.tag,
        inputs=(mode.primary, mode.secondary),
        canvas_size=layout.canvas_size,
        placements=layout.placements,
        presentation=layout.presentation,
        trimmed_secondary_range=trim,
        descriptors=descriptors,
    )

    if observer is not None:
        observer(plan)
    return plan


# ── Diagnostics ──────────────────────────────────────────────────


def summarize_plan(plan: CompositionPlan) -> list[str]:
    """Human-readable lines describing a plan's inputs and layout."""
    canvas = plan.canvas_size or "input 0 size"
    lines = [f"Plan: {plan.mode}  canvas {canvas}  "
             f"presentation {plan.presentation.size} ({plan.presentation.layout})"]
    if plan.descriptors:
        for i, d in enumerate(plan.descriptors):
            lines.append(f"  [{i}] {describe(d)}")
    else:
        for i, source in enumerate(plan.inputs):
            lines.append(f"  [{i}] {source.uri}  (metadata not read)")
    if plan.trimmed_secondary_range is not None:
        t = plan.trimmed_secondary_range
        lines.append(f"  secondary clip: {t.start_s:.3f}s - {t.end_s:.3f}s")
    return lines


def print_plan_summary(plan: CompositionPlan) -> None:
    """Observer that prints summarize_plan() to stdout."""
    for line in summarize_plan(plan):
        print(line)
