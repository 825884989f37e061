"""Rendering adapter: execute a CompositionPlan with moviepy.

Plays the role of the downstream compositing engine:
  1. Load both inputs in plan order (index 0 is the bottom layer).
  2. Clip the secondary to the plan's trimmed range, if any. A range past
     the clip's end is not clamped; moviepy rejects it with ValueError.
  3. Scale each layer by its placement scale and pin its overlay anchor
     to the background anchor on the canvas.
  4. Resize the composite to the presentation size (scale to fit,
     letterboxed on black).
  5. Export mp4.

Audio is not carried over.
"""

from pathlib import Path

import numpy as np
from moviepy import CompositeVideoClip, ImageClip, VideoFileClip

from .common import Size
from .layouts import SCALE_TO_FIT, OverlayPlacement, Presentation
from .media import require_local_file
from .plan import CompositionPlan


LETTERBOX_COLOR = (0, 0, 0)


# ── Placement math ───────────────────────────────────────────────


def _anchor_to_px(anchor: float, extent: int) -> float:
    """Map a normalized [-1, 1] coordinate onto [0, extent] pixels."""
    return (anchor + 1) / 2 * extent


def anchor_position(
    placement: OverlayPlacement,
    overlay_size: tuple[int, int],
    canvas_size: tuple[int, int],
) -> tuple[int, int]:
    """Top-left (x, y) that pins a layer's overlay anchor to the canvas.

    Args:
        placement: Anchors for this layer.
        overlay_size: Layer size in pixels, after scaling.
        canvas_size: Compositor canvas size in pixels.

    Returns:
        Integer (x, y) of the layer's top-left corner on the canvas.
    """
    ow, oh = overlay_size
    cw, ch = canvas_size
    bax, bay = placement.background_anchor
    oax, oay = placement.overlay_anchor
    x = _anchor_to_px(bax, cw) - _anchor_to_px(oax, ow)
    y = _anchor_to_px(bay, ch) - _anchor_to_px(oay, oh)
    return round(x), round(y)


def scaled_size(size: tuple[int, int], scale: tuple[float, float]) -> Size:
    """Layer size after applying a placement scale (at least 1px)."""
    w, h = size
    sx, sy = scale
    return Size(max(1, round(w * sx)), max(1, round(h * sy)))


def fit_size(size: tuple[int, int], target: tuple[int, int]) -> Size:
    """Largest size with size's aspect ratio that fits inside target."""
    w, h = size
    tw, th = target
    scale = min(tw / w, th / h)
    return Size(max(1, int(w * scale)), max(1, int(h * scale)))


# ── Compositing ──────────────────────────────────────────────────


def _place_layer(clip, placement: OverlayPlacement, canvas: Size):
    """Scale and position one input on the canvas."""
    size = scaled_size(clip.size, placement.scale)
    if tuple(size) != tuple(clip.size):
        clip = clip.resized(tuple(size))
    return clip.with_position(anchor_position(placement, size, canvas))


def _present(clip, presentation: Presentation, fps: int):
    """Resize the composited frame per the presentation directive."""
    if presentation.layout != SCALE_TO_FIT:
        raise ValueError(f"Unsupported presentation layout: '{presentation.layout}'")
    target = presentation.size
    if tuple(clip.size) == tuple(target):
        return clip

    fitted = fit_size(clip.size, target)
    clip = clip.resized(tuple(fitted))
    if tuple(fitted) == tuple(target):
        return clip

    # Letterbox: center the fitted frame on a solid background.
    bg_frame = np.full((target.height, target.width, 3), LETTERBOX_COLOR, dtype=np.uint8)
    bg_clip = ImageClip(bg_frame).with_duration(clip.duration).with_position((0, 0))
    cx = (target.width - fitted.width) // 2
    cy = (target.height - fitted.height) // 2
    return CompositeVideoClip(
        [bg_clip, clip.with_position((cx, cy))], size=tuple(target),
    ).with_fps(fps)


def compose_plan(plan: CompositionPlan, fps: int = 30) -> tuple[CompositeVideoClip, list]:
    """Build the moviepy composite for a plan.

    Returns (composite, source_clips). The caller closes source_clips
    after the composite has been written. If building the composite
    fails, every clip opened so far is closed before the error propagates.
    """
    opened = []
    try:
        layers = []
        for source in plan.inputs:
            path = require_local_file(source)
            clip = VideoFileClip(str(path), audio=False)
            opened.append(clip)
            if clip.fps != fps:
                clip = clip.with_fps(fps)
            layers.append(clip)

        trim = plan.trimmed_secondary_range
        if trim is not None:
            layers[1] = layers[1].subclipped(trim.start_s, trim.end_s)

        canvas = plan.output_size([c.size for c in layers])
        placed = [
            _place_layer(clip, placement, canvas)
            for clip, placement in zip(layers, plan.placements)
        ]

        composite = CompositeVideoClip(placed, size=tuple(canvas)).with_fps(fps)
        return _present(composite, plan.presentation, fps), opened
    except Exception:
        for clip in opened:
            clip.close()
        raise


def _export_clip(clip, output_path, fps, quiet=False):
    """Write a clip to mp4 with standard encoding settings."""
    Path(output_path).parent.mkdir(parents=True, exist_ok=True)
    clip.write_videofile(
        str(output_path),
        fps=fps,
        codec="libx264",
        audio=False,
        preset="medium",
        ffmpeg_params=["-crf", "20", "-pix_fmt", "yuv420p"],
        logger=None if quiet else "bar",
    )


def render_plan(
    plan: CompositionPlan,
    output_path: str | Path,
    fps: int = 30,
    quiet: bool = False,
) -> Size:
    """Render a plan to an mp4 file.

    Args:
        plan: CompositionPlan from assemble().
        output_path: Destination mp4 (parent dirs are created).
        fps: Output frame rate.
        quiet: Suppress moviepy's progress bar.

    Returns:
        The rendered frame size.
    """
    composite, sources = compose_plan(plan, fps)
    try:
        _export_clip(composite, output_path, fps, quiet=quiet)
        return Size(*composite.size)
    finally:
        composite.close()
        for clip in sources:
            clip.close()
