#!/usr/bin/env python3
"""Generate synthetic duet sources for the duetcompose demo manifests.

Writes examples/demo-clips/left.mp4 (3s) and right.mp4 (5s). Every frame
shows the clip's name and its own clock, so a side-by-side render makes
the alignment visible: both clocks run together and the right clip stops
at 3.0s instead of reaching 5.0s.

Usage:
    python examples/generate_demo_clips.py
    duetcompose plan --manifest examples/duet-side-by-side.yaml
    duetcompose render --manifest examples/duet-side-by-side.yaml \
        --output examples/demo-renders/side-by-side.mp4
"""

from pathlib import Path

import numpy as np
from moviepy import VideoClip
from PIL import Image, ImageDraw, ImageFont

OUTPUT_DIR = Path(__file__).resolve().parent / "demo-clips"
FPS = 30
FONT_PATH = "/usr/share/fonts/truetype/dejavu/DejaVuSans-Bold.ttf"

# (name, size, background, duration in seconds)
SOURCES = [
    ("left", (320, 240), (40, 70, 160), 3.0),
    ("right", (320, 240), (160, 50, 50), 5.0),
]


def _font(size):
    try:
        return ImageFont.truetype(FONT_PATH, size)
    except OSError:
        return ImageFont.load_default()


def _center_text(draw, text, cy, width, font, fill):
    left, top, right, bottom = draw.textbbox((0, 0), text, font=font)
    draw.text(((width - (right - left)) / 2, cy - (bottom - top) / 2), text, fill=fill, font=font)


def _clock_frames(name, size, color, duration):
    """Frame function drawing the source name and elapsed time."""
    title_font, clock_font = _font(40), _font(28)
    w, h = size

    def frame(t):
        img = Image.new("RGB", size, color)
        draw = ImageDraw.Draw(img)
        _center_text(draw, name.upper(), h * 0.35, w, title_font, (255, 255, 255))
        _center_text(draw, f"{t:4.1f} / {duration:.1f}s", h * 0.65, w, clock_font, (230, 230, 230))
        # Progress bar along the bottom edge.
        bar = int(w * min(t / duration, 1.0))
        draw.rectangle([0, h - 8, bar, h], fill=(255, 255, 255))
        return np.array(img)

    return frame


def main():
    OUTPUT_DIR.mkdir(parents=True, exist_ok=True)
    for name, size, color, duration in SOURCES:
        out = OUTPUT_DIR / f"{name}.mp4"
        if out.exists():
            print(f"  skip {out.name} (exists)")
            continue
        clip = VideoClip(_clock_frames(name, size, color, duration), duration=duration)
        clip.write_videofile(str(out), fps=FPS, codec="libx264", audio=False, logger=None)
        print(f"  wrote {out.name} ({size[0]}x{size[1]}, {duration}s)")

    print(f"\nDone. Sources in {OUTPUT_DIR}")


if __name__ == "__main__":
    main()
