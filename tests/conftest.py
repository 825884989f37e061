"""Shared test fixtures for duetcompose tests."""

import subprocess

import pytest
import imageio_ffmpeg

_FFMPEG = imageio_ffmpeg.get_ffmpeg_exe()


def _make_video(path, size="320x240", duration=5, color="blue"):
    """Write a solid-color test video (10fps, h264) using ffmpeg."""
    subprocess.run(
        [
            _FFMPEG, "-y",
            "-f", "lavfi", "-i", f"color=c={color}:s={size}:d={duration}:r=10",
            "-c:v", "libx264", "-crf", "28", "-pix_fmt", "yuv420p",
            str(path),
        ],
        check=True,
        capture_output=True,
    )
    return path


@pytest.fixture
def source_video(tmp_path):
    """A 5-second 320x240 test video."""
    return _make_video(tmp_path / "source.mp4")


@pytest.fixture
def short_video(tmp_path):
    """A 3-second 160x120 test video, shorter and smaller than source_video."""
    return _make_video(tmp_path / "short.mp4", size="160x120", duration=3, color="red")
