"""Layout strategies: canvas size and per-input placement for each mode.

Each composition mode is a small frozen dataclass carrying exactly what
its plan needs:

  - SideBySide: both sources plus the metadata retriever used to read
    their descriptors. The primary's display size sets the canvas.
  - PictureInPicture: both sources plus a fixed presentation size. No
    metadata is read; inputs keep their native size while compositing
    and the presentation step resizes the final frame.

Placements use normalized anchors in [-1, 1] per axis, with (-1, -1) the
top-left corner and (1, 1) the bottom-right. A layer is positioned so the
point at overlay_anchor on the layer sits on the point at
background_anchor on the canvas. scale multiplies the layer's native size.

Dispatch goes through LAYOUT_STRATEGIES, keyed by the mode's tag. All
strategies share the signature: (mode, primary, secondary) -> Layout.
"""

from dataclasses import dataclass, field
from typing import ClassVar

from .common import MetadataUnavailable, Size, UnsupportedLayoutMode, parse_size
from .media import MediaDescriptor, MediaSource, as_source


# ── Placement types ──────────────────────────────────────────────


@dataclass(frozen=True)
class OverlayPlacement:
    scale: tuple[float, float] = (1.0, 1.0)
    overlay_anchor: tuple[float, float] = (0.0, 0.0)
    background_anchor: tuple[float, float] = (0.0, 0.0)

    def __post_init__(self):
        sx, sy = self.scale
        if sx <= 0 or sy <= 0:
            raise ValueError(f"Overlay scale must be > 0, got {self.scale}")
        for name in ("overlay_anchor", "background_anchor"):
            ax, ay = getattr(self, name)
            if not (-1 <= ax <= 1 and -1 <= ay <= 1):
                raise ValueError(
                    f"{name} must be within [-1, 1], got {getattr(self, name)}"
                )


SCALE_TO_FIT = "scale_to_fit"


@dataclass(frozen=True)
class Presentation:
    """Final resize directive applied to the composited frame."""

    width: int
    height: int
    layout: str = SCALE_TO_FIT

    @property
    def size(self) -> Size:
        return Size(self.width, self.height)


@dataclass(frozen=True)
class Layout:
    canvas_size: Size | None
    placements: tuple[OverlayPlacement, OverlayPlacement]
    presentation: Presentation


# ── Modes ────────────────────────────────────────────────────────


@dataclass(frozen=True)
class SideBySide:
    tag: ClassVar[str] = "side_by_side"

    primary: MediaSource
    secondary: MediaSource
    retriever: object = field(compare=False)

    def __post_init__(self):
        object.__setattr__(self, "primary", as_source(self.primary))
        object.__setattr__(self, "secondary", as_source(self.secondary))


PIP_DEFAULT_SIZE = Size(360, 240)


@dataclass(frozen=True)
class PictureInPicture:
    tag: ClassVar[str] = "picture_in_picture"

    primary: MediaSource
    secondary: MediaSource
    output_size: Size = PIP_DEFAULT_SIZE

    def __post_init__(self):
        object.__setattr__(self, "primary", as_source(self.primary))
        object.__setattr__(self, "secondary", as_source(self.secondary))
        object.__setattr__(self, "output_size", parse_size(self.output_size))

    @classmethod
    def single(cls, source, output_size: Size = PIP_DEFAULT_SIZE) -> "PictureInPicture":
        """One source shown both full-frame and as its own inset."""
        source = as_source(source)
        return cls(source, source, output_size)


LayoutMode = SideBySide | PictureInPicture

VALID_MODES = {SideBySide.tag, PictureInPicture.tag}


# ── Strategies ───────────────────────────────────────────────────

FULL_FRAME = OverlayPlacement(
    scale=(1.0, 1.0),
    overlay_anchor=(-1.0, -1.0),
    background_anchor=(-1.0, -1.0),
)

# Right half of a double-width canvas: layer's top-right on canvas top-right.
RIGHT_HALF = OverlayPlacement(
    scale=(1.0, 1.0),
    overlay_anchor=(1.0, -1.0),
    background_anchor=(1.0, -1.0),
)

# Small inset pinned near the top-right corner, offset inward from the edge.
PIP_INSET = OverlayPlacement(
    scale=(0.35, 0.35),
    overlay_anchor=(1.0, -1.0),
    background_anchor=(0.9, -0.3),
)


def _side_by_side(
    mode: SideBySide,
    primary: MediaDescriptor | None,
    secondary: MediaDescriptor | None,
) -> Layout:
    """Primary on the left half, secondary on the right half.

    The canvas is twice the primary's display width and as tall as the
    primary. The secondary is not resized to match; the presentation
    step scales the final frame to fit the canvas size.
    """
    if primary is None:
        raise MetadataUnavailable(
            "side_by_side layout requires the primary source's descriptor"
        )
    w, h = primary.display_size
    canvas = Size(2 * w, h)
    return Layout(
        canvas_size=canvas,
        placements=(FULL_FRAME, RIGHT_HALF),
        presentation=Presentation(canvas.width, canvas.height, SCALE_TO_FIT),
    )


def _picture_in_picture(
    mode: PictureInPicture,
    primary: MediaDescriptor | None,
    secondary: MediaDescriptor | None,
) -> Layout:
    """Primary fills the frame, secondary is a 35% inset near a corner.

    The compositing canvas follows input 0's native size (canvas_size
    is None) and the presentation resizes the result to output_size.
    """
    size = mode.output_size
    return Layout(
        canvas_size=None,
        placements=(FULL_FRAME, PIP_INSET),
        presentation=Presentation(size.width, size.height, SCALE_TO_FIT),
    )


LAYOUT_STRATEGIES = {
    SideBySide.tag: _side_by_side,
    PictureInPicture.tag: _picture_in_picture,
}


def plan_layout(
    mode,
    primary: MediaDescriptor | None = None,
    secondary: MediaDescriptor | None = None,
) -> Layout:
    """Compute canvas size and placements for a mode.

    Inputs keep the caller's order: placement 0 belongs to the primary,
    placement 1 to the secondary.

    Raises:
        UnsupportedLayoutMode: mode has no registered strategy.
    """
    tag = getattr(mode, "tag", None)
    strategy = LAYOUT_STRATEGIES.get(tag)
    if strategy is None:
        raise UnsupportedLayoutMode(
            f"Unsupported layout mode: {tag or repr(mode)}. Valid: {sorted(LAYOUT_STRATEGIES)}"
        )
    return strategy(mode, primary, secondary)
