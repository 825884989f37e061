"""Tests for the duet manifest loader."""

import tempfile

import pytest
import yaml

from duetcompose.common import Size
from duetcompose.layouts import PictureInPicture, SideBySide
from duetcompose.manifest import build_mode, load_duet_manifest, validate_sources
from duetcompose.media import FFmpegRetriever, MediaSource, StaticRetriever


def _write_manifest(content) -> str:
    """Write a manifest dict to a temp YAML file, return path."""
    f = tempfile.NamedTemporaryFile(mode="w", suffix=".yaml", delete=False)
    yaml.dump(content, f)
    f.close()
    return f.name


def _minimal_manifest(**overrides):
    """Return a minimal valid side_by_side manifest dict."""
    m = {
        "mode": "side_by_side",
        "primary": "/fake/left.mp4",
        "secondary": "/fake/right.mp4",
    }
    m.update(overrides)
    return m


class TestLoadDuetManifest:
    def test_parses_sources(self):
        config = load_duet_manifest(_write_manifest(_minimal_manifest()))
        assert config["mode"] == "side_by_side"
        assert config["primary"] == "/fake/left.mp4"
        assert config["secondary"] == "/fake/right.mp4"

    def test_default_fps(self):
        config = load_duet_manifest(_write_manifest(_minimal_manifest()))
        assert config["output"]["fps"] == 30

    def test_custom_fps(self):
        m = _minimal_manifest(output={"fps": 24})
        config = load_duet_manifest(_write_manifest(m))
        assert config["output"]["fps"] == 24

    def test_resolves_path_variables(self):
        m = _minimal_manifest(
            paths={"raw": "/data/recordings"},
            primary="${raw}/left.mp4",
            secondary="${raw}/right.mp4",
        )
        config = load_duet_manifest(_write_manifest(m))
        assert config["primary"] == "/data/recordings/left.mp4"
        assert config["secondary"] == "/data/recordings/right.mp4"

    def test_pip_default_size(self):
        m = _minimal_manifest(mode="picture_in_picture")
        config = load_duet_manifest(_write_manifest(m))
        assert config["output"]["size"] == Size(360, 240)

    def test_pip_custom_size(self):
        m = _minimal_manifest(mode="picture_in_picture", output={"size": [640, 360]})
        config = load_duet_manifest(_write_manifest(m))
        assert config["output"]["size"] == Size(640, 360)

    def test_pip_without_secondary_reuses_primary(self):
        m = {"mode": "picture_in_picture", "primary": "/fake/clip.mp4"}
        config = load_duet_manifest(_write_manifest(m))
        assert config["secondary"] == "/fake/clip.mp4"


class TestDuetManifestValidation:
    def test_not_a_mapping_raises(self):
        with pytest.raises(ValueError, match="mapping"):
            load_duet_manifest(_write_manifest(["a", "b"]))

    def test_missing_mode_raises(self):
        m = _minimal_manifest()
        del m["mode"]
        with pytest.raises(ValueError, match="mode"):
            load_duet_manifest(_write_manifest(m))

    def test_invalid_mode_raises(self):
        with pytest.raises(ValueError, match="invalid mode"):
            load_duet_manifest(_write_manifest(_minimal_manifest(mode="grid_2x2")))

    def test_missing_primary_raises(self):
        m = _minimal_manifest()
        del m["primary"]
        with pytest.raises(ValueError, match="primary"):
            load_duet_manifest(_write_manifest(m))

    def test_side_by_side_missing_secondary_raises(self):
        m = _minimal_manifest()
        del m["secondary"]
        with pytest.raises(ValueError, match="secondary"):
            load_duet_manifest(_write_manifest(m))

    def test_unknown_path_variable_raises(self):
        m = _minimal_manifest(primary="${nope}/left.mp4")
        with pytest.raises(ValueError, match="Unknown path variable"):
            load_duet_manifest(_write_manifest(m))

    @pytest.mark.parametrize("fps", [0, -1, "fast"])
    def test_invalid_fps_raises(self, fps):
        m = _minimal_manifest(output={"fps": fps})
        with pytest.raises(ValueError, match="fps"):
            load_duet_manifest(_write_manifest(m))

    def test_size_on_side_by_side_raises(self):
        m = _minimal_manifest(output={"size": [640, 360]})
        with pytest.raises(ValueError, match="output.size"):
            load_duet_manifest(_write_manifest(m))

    def test_invalid_size_raises(self):
        m = _minimal_manifest(mode="picture_in_picture", output={"size": [0, 360]})
        with pytest.raises(ValueError, match="size"):
            load_duet_manifest(_write_manifest(m))


class TestBuildMode:
    def test_side_by_side(self):
        config = load_duet_manifest(_write_manifest(_minimal_manifest()))
        retriever = StaticRetriever({})
        mode = build_mode(config, retriever)
        assert isinstance(mode, SideBySide)
        assert mode.primary == MediaSource("/fake/left.mp4")
        assert mode.retriever is retriever

    def test_side_by_side_default_retriever(self):
        config = load_duet_manifest(_write_manifest(_minimal_manifest()))
        assert isinstance(build_mode(config).retriever, FFmpegRetriever)

    def test_picture_in_picture(self):
        m = _minimal_manifest(mode="picture_in_picture", output={"size": "640x360"})
        mode = build_mode(load_duet_manifest(_write_manifest(m)))
        assert isinstance(mode, PictureInPicture)
        assert mode.output_size == Size(640, 360)
        assert mode.secondary == MediaSource("/fake/right.mp4")


class TestValidateSources:
    def test_existing_files_pass(self, source_video):
        config = {"primary": str(source_video), "secondary": str(source_video)}
        validate_sources(config)

    def test_missing_files_listed_once(self, tmp_path):
        missing = str(tmp_path / "gone.mp4")
        config = {"primary": missing, "secondary": missing}
        with pytest.raises(FileNotFoundError, match="Missing 1 source file"):
            validate_sources(config)

    def test_remote_sources_skipped(self):
        config = {
            "primary": "https://example.com/a.mp4",
            "secondary": "https://example.com/b.mp4",
        }
        validate_sources(config)
