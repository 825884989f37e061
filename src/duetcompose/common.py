"""duetcompose.common: shared utilities for duet planning.

Contains: planner error types, path variable resolution, size parsing,
and aspect ratio reduction.
"""

import re
from typing import NamedTuple


# ── Errors ─────────────────────────────────────────────────────────
# Raised by the planner and propagated unchanged to the caller.


class MetadataUnavailable(ValueError):
    """A required metadata field is missing or unreadable."""


class InvalidDimension(ValueError):
    """A raw width or height is not positive."""


class UnsupportedLayoutMode(ValueError):
    """The layout mode has no registered strategy."""


class MissingLocalSource(FileNotFoundError):
    """A source that must resolve to a local file does not."""


# ── Sizes ──────────────────────────────────────────────────────────


class Size(NamedTuple):
    width: int
    height: int

    def __str__(self):
        return f"{self.width}x{self.height}"


def parse_size(value) -> Size:
    """Parse '1920x1080', [1920, 1080] or (1920, 1080) into a Size.

    Both components must be positive integers.
    """
    if isinstance(value, str):
        match = re.fullmatch(r"\s*(\d+)\s*[xX]\s*(\d+)\s*", value)
        if not match:
            raise ValueError(f"Invalid size: '{value}'. Expected WIDTHxHEIGHT.")
        w, h = int(match.group(1)), int(match.group(2))
    else:
        try:
            w, h = value
        except (TypeError, ValueError):
            raise ValueError(f"Invalid size: {value!r}. Expected [width, height].")
        if not isinstance(w, int) or not isinstance(h, int):
            raise ValueError(f"Invalid size: {value!r}. Components must be integers.")
    if w <= 0 or h <= 0:
        raise ValueError(f"Invalid size: {w}x{h}. Components must be > 0.")
    return Size(w, h)


# ── Aspect ratio ───────────────────────────────────────────────────


def gcd(a: int, b: int) -> int:
    """Euclidean greatest common divisor. gcd(a, 0) == a."""
    while b != 0:
        a, b = b, a % b
    return abs(a)


def reduce_ratio(width: int, height: int) -> Size:
    """Reduce width:height to the smallest integer ratio.

    A zero divisor (both sides zero) leaves the input unchanged instead
    of dividing by it.
    """
    d = gcd(width, height)
    if d == 0:
        return Size(width, height)
    return Size(width // d, height // d)


# ── Path utilities ─────────────────────────────────────────────────

def resolve_path_vars(text: str, paths: dict[str, str]) -> str:
    """Replace ${name} variables in a string using the paths dict."""
    def _replace(match):
        key = match.group(1)
        if key not in paths:
            raise ValueError(f"Unknown path variable: ${{{key}}}")
        return paths[key]
    return re.sub(r"\$\{(\w+)\}", _replace, text)
