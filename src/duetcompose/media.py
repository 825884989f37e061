"""Media descriptors: normalized size, rotation and duration of a source.

A MediaDescriptor is read once per source when a plan is built. Raw
metadata comes from a *retriever*: any object with a
``retrieve(source) -> dict`` method returning strings (or None) under
the keys:

  - width, height: stored pixel dimensions, before rotation.
  - rotation: display rotation in degrees (missing = 0).
  - duration: length in milliseconds.

FFmpegRetriever probes local files with moviepy's ffmpeg parser (the
bundled imageio-ffmpeg binary, no ffprobe needed). StaticRetriever serves
metadata the host already knows.

Usage:
  descriptor = extract(MediaSource("clips/left.mp4"), FFmpegRetriever())
  descriptor.display_size   # Size(width=1920, height=1080)
  descriptor.aspect_ratio   # Size(width=16, height=9)
"""

from dataclasses import dataclass
from pathlib import Path
from urllib.parse import unquote, urlparse

from moviepy.video.io.ffmpeg_reader import ffmpeg_parse_infos

from .common import (
    InvalidDimension,
    MetadataUnavailable,
    MissingLocalSource,
    Size,
    reduce_ratio,
)


VALID_ROTATIONS = {0, 90, 180, 270}

NS_PER_MS = 1_000_000
NS_PER_S = 1_000_000_000


# ── Source handles ───────────────────────────────────────────────


@dataclass(frozen=True)
class MediaSource:
    """Opaque reference to a media item, identified by URI.

    Plain filesystem paths and file:// URIs resolve to a local path.
    Any other scheme (http, content, ...) does not.
    """

    uri: str

    @property
    def local_path(self) -> Path | None:
        parsed = urlparse(self.uri)
        if parsed.scheme == "file":
            return Path(unquote(parsed.path))
        # Empty scheme, or a Windows drive letter parsed as one.
        if parsed.scheme == "" or len(parsed.scheme) == 1:
            return Path(self.uri)
        return None

    def __str__(self):
        return self.uri


def as_source(value) -> MediaSource:
    """Wrap a path or URI string as a MediaSource (no-op for sources)."""
    if isinstance(value, MediaSource):
        return value
    return MediaSource(str(value))


# ── Descriptor ───────────────────────────────────────────────────


@dataclass(frozen=True)
class MediaDescriptor:
    """Immutable description of one video source.

    display_size and aspect_ratio are derived from the raw fields on
    every access and cannot be set independently.
    """

    raw_width: int
    raw_height: int
    rotation: int
    duration_ns: int
    uri: str = ""

    def __post_init__(self):
        if self.raw_width <= 0 or self.raw_height <= 0:
            raise InvalidDimension(
                f"Invalid video dimension: {self.raw_width} x {self.raw_height}"
            )
        if self.rotation not in VALID_ROTATIONS:
            raise ValueError(
                f"Invalid rotation: {self.rotation}. "
                f"Valid: {sorted(VALID_ROTATIONS)}"
            )
        if self.duration_ns < 0:
            raise ValueError(f"Duration must be >= 0, got {self.duration_ns}")

    @property
    def raw_size(self) -> Size:
        return Size(self.raw_width, self.raw_height)

    @property
    def display_size(self) -> Size:
        """Size as displayed: width and height swap for 90/270 rotation."""
        if self.rotation in (90, 270):
            return Size(self.raw_height, self.raw_width)
        return Size(self.raw_width, self.raw_height)

    @property
    def aspect_ratio(self) -> Size:
        return reduce_ratio(*self.display_size)

    @property
    def duration_s(self) -> float:
        return self.duration_ns / NS_PER_S


def describe(descriptor: MediaDescriptor) -> str:
    """One-line human-readable summary of a descriptor."""
    ratio = descriptor.aspect_ratio
    return (
        f"{descriptor.uri}  {descriptor.display_size}  "
        f"ratio {ratio.width}:{ratio.height}  "
        f"rotation {descriptor.rotation}  "
        f"{descriptor.duration_s:.3f}s"
    )


# ── Extraction ───────────────────────────────────────────────────


def _read_int(metadata: dict, key: str, source: MediaSource) -> int | None:
    """Parse an integer metadata field. Missing fields return None."""
    value = metadata.get(key)
    if value is None:
        return None
    try:
        return int(str(value).strip())
    except ValueError:
        raise MetadataUnavailable(
            f"Unreadable {key} '{value}' in metadata of {source.uri}"
        )


def extract(source, retriever) -> MediaDescriptor:
    """Read a source's metadata and build its MediaDescriptor.

    Args:
        source: MediaSource, path or URI string.
        retriever: Object with retrieve(source) -> metadata dict.

    Returns:
        MediaDescriptor with rotation normalized to {0, 90, 180, 270}
        and duration converted from milliseconds to nanoseconds.

    Raises:
        MetadataUnavailable: width, height or duration missing or
            unparseable, or rotation is not a right angle.
        InvalidDimension: width or height <= 0.
    """
    source = as_source(source)
    metadata = retriever.retrieve(source)

    width = _read_int(metadata, "width", source)
    height = _read_int(metadata, "height", source)
    if width is None:
        raise MetadataUnavailable(f"Failed to get video width from {source.uri}")
    if height is None:
        raise MetadataUnavailable(f"Failed to get video height from {source.uri}")
    if width <= 0 or height <= 0:
        raise InvalidDimension(f"Invalid video dimension: {width} x {height}")

    rotation = _read_int(metadata, "rotation", source)
    rotation = 0 if rotation is None else abs(rotation) % 360
    if rotation not in VALID_ROTATIONS:
        raise MetadataUnavailable(
            f"Unsupported rotation {rotation} in metadata of {source.uri}"
        )

    duration_ms = _read_int(metadata, "duration", source)
    if duration_ms is None:
        raise MetadataUnavailable(f"Failed to get video duration from {source.uri}")
    if duration_ms < 0:
        raise MetadataUnavailable(
            f"Negative duration {duration_ms}ms in metadata of {source.uri}"
        )

    return MediaDescriptor(
        raw_width=width,
        raw_height=height,
        rotation=rotation,
        duration_ns=duration_ms * NS_PER_MS,
        uri=source.uri,
    )


# ── Retrievers ───────────────────────────────────────────────────


def require_local_file(source: MediaSource) -> Path:
    """Return the source's local path, or raise MissingLocalSource."""
    path = source.local_path
    if path is None:
        raise MissingLocalSource(
            f"Source must be a local file: {source.uri}. "
            "Please pick a local media item."
        )
    if not path.exists():
        raise MissingLocalSource(f"Source file not found: {path}")
    return path


class FFmpegRetriever:
    """Probe local video files with moviepy's ffmpeg info parser.

    The parser reports the coded frame size (pre-rotation) and the
    display rotation from the stream's rotate tag or display matrix.
    """

    def retrieve(self, source: MediaSource) -> dict:
        path = require_local_file(source)
        try:
            infos = ffmpeg_parse_infos(str(path))
        except (IOError, OSError) as exc:
            raise MetadataUnavailable(f"Failed to probe {source.uri}: {exc}")

        metadata = {"width": None, "height": None, "rotation": None, "duration": None}
        if infos.get("video_found") and infos.get("video_size"):
            w, h = infos["video_size"]
            metadata["width"] = str(w)
            metadata["height"] = str(h)
        if infos.get("video_rotation") is not None:
            metadata["rotation"] = str(int(round(infos["video_rotation"])))
        if infos.get("duration") is not None:
            metadata["duration"] = str(round(infos["duration"] * 1000))
        return metadata


class StaticRetriever:
    """Serve known metadata from a {uri: metadata dict} mapping.

    Values may be strings or ints; missing keys read as None.
    """

    def __init__(self, metadata: dict[str, dict]):
        self._metadata = {str(k): dict(v) for k, v in metadata.items()}

    def retrieve(self, source: MediaSource) -> dict:
        if source.uri not in self._metadata:
            raise MetadataUnavailable(f"No metadata registered for {source.uri}")
        return dict(self._metadata[source.uri])
