"""Duet manifest loader: one two-source composition described in YAML.

Source paths may use ${var} variables defined under paths.

Duet manifest schema:
  paths:
    raw: "/data/recordings"
  mode: side_by_side            # or picture_in_picture
  primary: "${raw}/left.mp4"
  secondary: "${raw}/right.mp4" # optional for picture_in_picture
  output:
    fps: 30                     # default 30
    size: [360, 240]            # picture_in_picture presentation size
"""

from pathlib import Path

import yaml

from .common import parse_size, resolve_path_vars
from .layouts import PIP_DEFAULT_SIZE, VALID_MODES, PictureInPicture, SideBySide
from .media import FFmpegRetriever, MediaSource


DEFAULT_FPS = 30


def load_duet_manifest(manifest_path: str | Path) -> dict:
    """Load, validate, and normalize a duet manifest.

    Processing pipeline:
      1. Parse YAML.
      2. Validate mode.
      3. Resolve ${path} variables in primary/secondary.
      4. Apply output defaults (fps, size).

    Args:
        manifest_path: Path to the YAML duet manifest.

    Returns:
        Normalized config dict: mode, primary, secondary, output.

    Raises:
        ValueError: Missing/invalid fields.
    """
    with open(manifest_path) as f:
        raw = yaml.safe_load(f)

    if not isinstance(raw, dict):
        raise ValueError("Duet manifest: expected a mapping at top level")

    if "mode" not in raw:
        raise ValueError("Duet manifest: missing required 'mode' field")
    mode = raw["mode"]
    if mode not in VALID_MODES:
        raise ValueError(
            f"Duet manifest: invalid mode '{mode}'. Valid: {sorted(VALID_MODES)}"
        )

    if "primary" not in raw:
        raise ValueError("Duet manifest: missing required 'primary' field")

    paths = raw.get("paths", {})
    primary = resolve_path_vars(str(raw["primary"]), paths)

    if "secondary" in raw:
        secondary = resolve_path_vars(str(raw["secondary"]), paths)
    elif mode == PictureInPicture.tag:
        # Same source as full frame and inset.
        secondary = primary
    else:
        raise ValueError(
            f"Duet manifest: mode '{mode}' requires a 'secondary' field"
        )

    output = dict(raw.get("output") or {})
    fps = output.get("fps", DEFAULT_FPS)
    if not isinstance(fps, int) or fps <= 0:
        raise ValueError(f"Duet manifest: output.fps must be a positive integer, got {fps!r}")
    output["fps"] = fps

    if "size" in output:
        if mode != PictureInPicture.tag:
            raise ValueError(
                "Duet manifest: output.size only applies to picture_in_picture "
                "(side_by_side derives its size from the primary source)"
            )
        output["size"] = parse_size(output["size"])
    elif mode == PictureInPicture.tag:
        output["size"] = PIP_DEFAULT_SIZE

    return {
        "mode": mode,
        "primary": primary,
        "secondary": secondary,
        "output": output,
    }


def build_mode(config: dict, retriever=None):
    """Turn a loaded manifest config into a layout mode.

    Args:
        config: Dict from load_duet_manifest().
        retriever: Metadata retriever for side_by_side. Defaults to
            FFmpegRetriever.
    """
    primary = MediaSource(config["primary"])
    secondary = MediaSource(config["secondary"])
    if config["mode"] == SideBySide.tag:
        if retriever is None:
            retriever = FFmpegRetriever()
        return SideBySide(primary, secondary, retriever)
    return PictureInPicture(primary, secondary, config["output"]["size"])


def validate_sources(config: dict) -> None:
    """Check that local source files exist on disk.

    Non-local URIs are left for the retriever to resolve.

    Raises:
        FileNotFoundError: Lists all missing files.
    """
    missing = []
    for key in ("primary", "secondary"):
        path = MediaSource(config[key]).local_path
        if path is not None and not path.exists() and str(path) not in missing:
            missing.append(str(path))

    if missing:
        msg = f"Missing {len(missing)} source file(s):\n"
        for p in missing:
            msg += f"  - {p}\n"
        raise FileNotFoundError(msg)
