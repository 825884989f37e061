"""Tests for layout strategies."""

import pytest

from duetcompose.common import MetadataUnavailable, Size, UnsupportedLayoutMode
from duetcompose.layouts import (
    LAYOUT_STRATEGIES,
    OverlayPlacement,
    PictureInPicture,
    SideBySide,
    plan_layout,
)
from duetcompose.media import MediaDescriptor, MediaSource, StaticRetriever


def _descriptor(w=1920, h=1080, rotation=0, duration_ms=5000):
    return MediaDescriptor(w, h, rotation, duration_ms * 1_000_000)


def _side_by_side():
    return SideBySide("left.mp4", "right.mp4", StaticRetriever({}))


class TestOverlayPlacement:
    def test_defaults(self):
        p = OverlayPlacement()
        assert p.scale == (1.0, 1.0)
        assert p.overlay_anchor == (0.0, 0.0)
        assert p.background_anchor == (0.0, 0.0)

    def test_non_positive_scale_raises(self):
        with pytest.raises(ValueError, match="scale"):
            OverlayPlacement(scale=(0, 1))

    def test_anchor_out_of_range_raises(self):
        with pytest.raises(ValueError, match="background_anchor"):
            OverlayPlacement(background_anchor=(1.5, 0))


class TestModes:
    def test_side_by_side_wraps_sources(self):
        mode = _side_by_side()
        assert mode.primary == MediaSource("left.mp4")
        assert mode.secondary == MediaSource("right.mp4")
        assert mode.tag == "side_by_side"

    def test_picture_in_picture_default_size(self):
        mode = PictureInPicture("a.mp4", "b.mp4")
        assert mode.output_size == Size(360, 240)
        assert mode.tag == "picture_in_picture"

    def test_picture_in_picture_single_reuses_source(self):
        mode = PictureInPicture.single("a.mp4")
        assert mode.primary == mode.secondary == MediaSource("a.mp4")

    def test_picture_in_picture_rejects_bad_size(self):
        with pytest.raises(ValueError, match="> 0"):
            PictureInPicture("a.mp4", "b.mp4", (0, 240))

    def test_strategy_per_mode(self):
        assert set(LAYOUT_STRATEGIES) == {"side_by_side", "picture_in_picture"}


class TestSideBySide:
    def test_canvas_is_double_width(self):
        layout = plan_layout(_side_by_side(), _descriptor(1920, 1080), _descriptor(640, 480))
        assert layout.canvas_size == Size(3840, 1080)

    def test_canvas_uses_rotated_primary(self):
        primary = _descriptor(1920, 1080, rotation=90)
        layout = plan_layout(_side_by_side(), primary, _descriptor())
        assert layout.canvas_size == Size(2160, 1920)

    def test_canvas_ignores_secondary_size(self):
        a = plan_layout(_side_by_side(), _descriptor(640, 480), _descriptor(1920, 1080))
        b = plan_layout(_side_by_side(), _descriptor(640, 480), _descriptor(320, 240))
        assert a.canvas_size == b.canvas_size == Size(1280, 480)

    def test_primary_placement(self):
        layout = plan_layout(_side_by_side(), _descriptor(), _descriptor())
        p = layout.placements[0]
        assert p.scale == (1.0, 1.0)
        assert p.overlay_anchor == (-1.0, -1.0)
        assert p.background_anchor == (-1.0, -1.0)

    def test_secondary_placement(self):
        layout = plan_layout(_side_by_side(), _descriptor(), _descriptor())
        p = layout.placements[1]
        assert p.scale == (1.0, 1.0)
        assert p.overlay_anchor == (1.0, -1.0)
        assert p.background_anchor == (1.0, -1.0)

    def test_presentation_matches_canvas(self):
        layout = plan_layout(_side_by_side(), _descriptor(1280, 720), _descriptor())
        assert layout.presentation.size == Size(2560, 720)
        assert layout.presentation.layout == "scale_to_fit"

    def test_missing_primary_descriptor_raises(self):
        with pytest.raises(MetadataUnavailable):
            plan_layout(_side_by_side(), None, _descriptor())


class TestPictureInPicture:
    def test_full_frame_primary(self):
        layout = plan_layout(PictureInPicture.single("a.mp4"))
        p = layout.placements[0]
        assert p.scale == (1.0, 1.0)
        assert p.overlay_anchor == (-1.0, -1.0)
        assert p.background_anchor == (-1.0, -1.0)

    def test_inset_secondary(self):
        layout = plan_layout(PictureInPicture.single("a.mp4"))
        p = layout.placements[1]
        assert p.scale == (0.35, 0.35)
        assert p.overlay_anchor == (1.0, -1.0)
        assert p.background_anchor == (0.9, -0.3)

    def test_presentation_is_output_size(self):
        layout = plan_layout(PictureInPicture("a.mp4", "b.mp4", (640, 360)))
        assert layout.presentation.size == Size(640, 360)

    def test_canvas_follows_first_input(self):
        layout = plan_layout(PictureInPicture("a.mp4", "b.mp4"))
        assert layout.canvas_size is None

    def test_descriptors_do_not_matter(self):
        mode = PictureInPicture("a.mp4", "b.mp4")
        assert plan_layout(mode) == plan_layout(mode, _descriptor(), _descriptor(10, 10))


class TestUnsupportedMode:
    def test_string_mode_raises(self):
        with pytest.raises(UnsupportedLayoutMode):
            plan_layout("side_by_side")

    def test_unknown_object_raises(self):
        class Mosaic:
            tag = "mosaic"

        with pytest.raises(UnsupportedLayoutMode, match="mosaic"):
            plan_layout(Mosaic())
