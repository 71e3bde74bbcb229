"""Tests for trickfilm/manifest.py — YAML manifest loading."""

from __future__ import annotations

from pathlib import Path

import pytest
import yaml

from trickfilm.clip import SpriteKeyframes, SpriteSheetKeyframes
from trickfilm.manifest import (
    VALID_KEYFRAME_TYPES,
    AnimationAssets,
    ManifestError,
    load_manifest,
    load_manifests,
    parse_manifest,
)

MANIFESTS_DIR = Path(__file__).parent.parent / "manifests"


# ---------------------------------------------------------------------------
# Helper: write a temporary YAML manifest
# ---------------------------------------------------------------------------

def _write_yaml(tmp_path: Path, name: str, data: dict) -> Path:
    p = tmp_path / f"{name}.yaml"
    p.write_text(yaml.dump(data))
    return p


def _minimal_manifest(**overrides) -> dict:
    """Return a minimal valid manifest dict, with optional overrides."""
    base = {
        "name": "test_set",
        "atlases": {
            "sheet": {"image": "sheet.png", "tile_width": 16, "tile_height": 16, "columns": 4},
        },
        "animations": {
            "walk": {
                "keyframes": {"sprite_sheet": {"atlas": "sheet", "indices": [0, 1, 2, 3]}},
                "duration": 0.4,
            },
        },
    }
    base.update(overrides)
    return base


def _with_animation(entry: dict) -> dict:
    return _minimal_manifest(animations={"anim": entry})


# ---------------------------------------------------------------------------
# Real manifest file
# ---------------------------------------------------------------------------

class TestLoadRealManifest:
    def test_load_gabe(self):
        assets = AnimationAssets()
        set_handle = load_manifest(MANIFESTS_DIR / "gabe-idle-run.yaml", assets)
        clip_set = assets.clip_set(set_handle)
        assert clip_set.name == "gabe"
        assert clip_set.names() == ["blink", "idle", "run"]
        assert len(assets.atlases) == 1
        assert len(assets.clips) == 3

    def test_run_range_and_auto_timestamps(self):
        assets = AnimationAssets()
        set_handle = load_manifest(MANIFESTS_DIR / "gabe-idle-run.yaml", assets)
        _, run = assets.clip_named(set_handle, "run")
        assert isinstance(run.keyframes, SpriteSheetKeyframes)
        assert run.keyframes.indices == (1, 2, 3, 4, 5, 6)
        assert run.keyframe_timestamps == pytest.approx((0.0, 0.1, 0.2, 0.3, 0.4, 0.5))
        assert run.duration == pytest.approx(0.6)

    def test_atlas_path_relative_to_manifest(self):
        assets = AnimationAssets()
        set_handle = load_manifest(MANIFESTS_DIR / "gabe-idle-run.yaml", assets)
        _, idle = assets.clip_named(set_handle, "idle")
        atlas = assets.atlases.get(idle.keyframes.atlas)
        assert atlas is not None
        assert atlas.image == str(MANIFESTS_DIR / "gabe-idle-run.png")
        assert atlas.columns == 7
        assert atlas.rows == 1

    def test_sprite_images(self):
        assets = AnimationAssets()
        set_handle = load_manifest(MANIFESTS_DIR / "gabe-idle-run.yaml", assets)
        _, blink = assets.clip_named(set_handle, "blink")
        assert isinstance(blink.keyframes, SpriteKeyframes)
        assert blink.keyframes.images == (
            str(MANIFESTS_DIR / "blink_open.png"),
            str(MANIFESTS_DIR / "blink_shut.png"),
        )

    def test_unknown_animation_lists_available(self):
        assets = AnimationAssets()
        set_handle = load_manifest(MANIFESTS_DIR / "gabe-idle-run.yaml", assets)
        with pytest.raises(KeyError, match="Available"):
            assets.clip_named(set_handle, "jump")


# ---------------------------------------------------------------------------
# Parsing
# ---------------------------------------------------------------------------

class TestParse:
    def test_parse_without_base(self):
        assets = AnimationAssets()
        set_handle = parse_manifest(_minimal_manifest(), assets)
        handle, clip = assets.clip_named(set_handle, "walk")
        assert assets.clips.get(handle) is clip
        atlas = assets.atlases.get(clip.keyframes.atlas)
        assert atlas.image == "sheet.png"

    def test_explicit_timestamps(self, tmp_path):
        data = _with_animation({
            "keyframe_timestamps": [0.0, 0.05, 0.3, 0.35],
            "keyframes": {"sprite_sheet": {"atlas": "sheet", "indices": [3, 2, 1, 0]}},
            "duration": 0.4,
        })
        assets = AnimationAssets()
        set_handle = load_manifest(_write_yaml(tmp_path, "m", data), assets)
        _, clip = assets.clip_named(set_handle, "anim")
        assert clip.keyframe_timestamps == (0.0, 0.05, 0.3, 0.35)
        assert clip.keyframes.indices == (3, 2, 1, 0)

    def test_name_optional(self):
        data = _minimal_manifest()
        del data["name"]
        assets = AnimationAssets()
        assert assets.clip_set(parse_manifest(data, assets)).name is None

    def test_clip_atlas_handle_is_weak(self):
        assets = AnimationAssets()
        set_handle = parse_manifest(_minimal_manifest(), assets)
        _, clip = assets.clip_named(set_handle, "walk")
        assert clip.keyframes.atlas.is_weak()

    def test_load_manifests_share_tables(self, tmp_path):
        p1 = _write_yaml(tmp_path, "a", _minimal_manifest(name="a"))
        p2 = _write_yaml(tmp_path, "b", _minimal_manifest(name="b"))
        assets, handles = load_manifests([p1, p2])
        assert len(handles) == 2
        assert len(assets.clips) == 2
        assert {assets.clip_set(h).name for h in handles} == {"a", "b"}

    def test_valid_keyframe_types(self):
        assert VALID_KEYFRAME_TYPES == {"sprite_sheet", "sprite"}


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------

class TestValidation:
    def test_no_animations(self):
        with pytest.raises(ManifestError, match="no animations"):
            parse_manifest(_minimal_manifest(animations={}), AnimationAssets())

    def test_not_a_mapping(self):
        with pytest.raises(ManifestError):
            parse_manifest(["walk"], AnimationAssets())

    def test_unknown_keyframe_type(self):
        data = _with_animation({"keyframes": {"skeleton": {}}, "duration": 1.0})
        with pytest.raises(ManifestError, match="unknown keyframe type"):
            parse_manifest(data, AnimationAssets())

    def test_two_keyframe_types(self):
        data = _with_animation({
            "keyframes": {
                "sprite": ["a.png"],
                "sprite_sheet": {"atlas": "sheet", "indices": [0]},
            },
            "duration": 1.0,
        })
        with pytest.raises(ManifestError, match="exactly one"):
            parse_manifest(data, AnimationAssets())

    def test_unknown_atlas(self):
        data = _with_animation({
            "keyframes": {"sprite_sheet": {"atlas": "nope", "indices": [0]}},
            "duration": 1.0,
        })
        with pytest.raises(ManifestError, match="unknown atlas"):
            parse_manifest(data, AnimationAssets())

    def test_index_out_of_atlas(self):
        data = _with_animation({
            "keyframes": {"sprite_sheet": {"atlas": "sheet", "indices": [0, 4]}},
            "duration": 1.0,
        })
        with pytest.raises(ManifestError, match="out of range"):
            parse_manifest(data, AnimationAssets())

    def test_empty_range(self):
        data = _with_animation({
            "keyframes": {"sprite_sheet": {"atlas": "sheet", "range": {"start": 3, "end": 3}}},
            "duration": 1.0,
        })
        with pytest.raises(ManifestError, match="empty index range"):
            parse_manifest(data, AnimationAssets())

    def test_missing_indices(self):
        data = _with_animation({
            "keyframes": {"sprite_sheet": {"atlas": "sheet"}},
            "duration": 1.0,
        })
        with pytest.raises(ManifestError):
            parse_manifest(data, AnimationAssets())

    def test_missing_duration(self):
        data = _with_animation({"keyframes": {"sprite": ["a.png"]}})
        with pytest.raises(ManifestError, match="duration"):
            parse_manifest(data, AnimationAssets())

    def test_timestamp_count_mismatch(self):
        data = _with_animation({
            "keyframe_timestamps": [0.0, 0.1],
            "keyframes": {"sprite": ["a.png"]},
            "duration": 1.0,
        })
        with pytest.raises(ManifestError, match="'anim'"):
            parse_manifest(data, AnimationAssets())

    def test_duration_shorter_than_timestamps(self):
        data = _with_animation({
            "keyframe_timestamps": [0.0, 0.9],
            "keyframes": {"sprite": ["a.png", "b.png"]},
            "duration": 0.5,
        })
        with pytest.raises(ManifestError):
            parse_manifest(data, AnimationAssets())

    def test_atlas_missing_field(self):
        data = _minimal_manifest(atlases={"sheet": {"image": "s.png", "tile_width": 8}})
        with pytest.raises(ManifestError, match="tile_height"):
            parse_manifest(data, AnimationAssets())

    def test_error_names_file(self, tmp_path):
        path = _write_yaml(tmp_path, "broken", _minimal_manifest(animations={}))
        with pytest.raises(ManifestError, match="broken.yaml"):
            load_manifest(path, AnimationAssets())

    def test_manifest_error_is_value_error(self):
        assert issubclass(ManifestError, ValueError)


# ---------------------------------------------------------------------------
# Malformed entries
# ---------------------------------------------------------------------------

SHEET = {"atlas": "sheet", "indices": [0]}


class TestMalformedEntries:
    @pytest.mark.parametrize("entry", [
        {"keyframes": {"sprite_sheet": SHEET}, "duration": "abc"},
        {"keyframes": {"sprite_sheet": {"atlas": "sheet", "indices": ["x"]}}, "duration": 1.0},
        {"keyframes": {"sprite_sheet": {"atlas": "sheet", "indices": 3}}, "duration": 1.0},
        {"keyframes": {"sprite_sheet": {"atlas": "sheet", "range": {"start": 0}}}, "duration": 1.0},
        {"keyframes": {"sprite_sheet": {"atlas": "sheet", "range": [0, 2]}}, "duration": 1.0},
        {"keyframe_timestamps": ["zero"], "keyframes": {"sprite_sheet": SHEET}, "duration": 1.0},
        {"keyframe_timestamps": 0.0, "keyframes": {"sprite_sheet": SHEET}, "duration": 1.0},
        {"keyframes": {"sprite": "a.png"}, "duration": 1.0},
        {"keyframes": {"sprite": [1, 2]}, "duration": 1.0},
        ["not", "a", "mapping"],
    ])
    def test_raises_manifest_error_naming_animation(self, entry):
        with pytest.raises(ManifestError, match="'anim'"):
            parse_manifest(_with_animation(entry), AnimationAssets())

    @pytest.mark.parametrize("atlas", [
        {"image": "s.png", "tile_width": "wide", "tile_height": 16, "columns": 4},
        {"image": "s.png", "tile_width": 16, "tile_height": None, "columns": 4},
        "s.png",
    ])
    def test_bad_atlas_names_atlas(self, atlas):
        with pytest.raises(ManifestError, match="'sheet'"):
            parse_manifest(_minimal_manifest(atlases={"sheet": atlas}), AnimationAssets())

    def test_animations_not_a_mapping(self):
        with pytest.raises(ManifestError, match="animations"):
            parse_manifest(_minimal_manifest(animations=["walk"]), AnimationAssets())


# ---------------------------------------------------------------------------
# Failed loads leave the tables untouched
# ---------------------------------------------------------------------------

class TestFailedLoadRollback:
    def test_failed_parse_adds_nothing(self):
        data = _minimal_manifest()
        data["animations"]["broken"] = {
            "keyframes": {"sprite_sheet": SHEET},
            "duration": -1.0,
        }
        assets = AnimationAssets()
        with pytest.raises(ManifestError, match="'broken'"):
            parse_manifest(data, assets)
        assert len(assets.clips) == 0
        assert len(assets.atlases) == 0
        assert len(assets.clip_sets) == 0

    def test_failed_file_keeps_earlier_manifests(self, tmp_path):
        good = _write_yaml(tmp_path, "good", _minimal_manifest())
        bad_data = _minimal_manifest()
        bad_data["animations"]["walk"]["duration"] = 0.0
        bad = _write_yaml(tmp_path, "bad", bad_data)

        assets = AnimationAssets()
        set_handle = load_manifest(good, assets)
        with pytest.raises(ManifestError, match="bad.yaml"):
            load_manifests([bad], assets)
        assert len(assets.clips) == 1
        assert len(assets.atlases) == 1
        handle, _ = assets.clip_named(set_handle, "walk")
        assert handle in assets.clips


# ---------------------------------------------------------------------------
# File-level errors
# ---------------------------------------------------------------------------

class TestManifestFile:
    def test_yaml_syntax_error(self, tmp_path):
        path = tmp_path / "broken.yaml"
        path.write_text("animations: [unclosed\n")
        with pytest.raises(ManifestError, match="broken.yaml"):
            load_manifest(path, AnimationAssets())

    def test_unknown_suffix(self, tmp_path):
        path = tmp_path / "walk.json"
        path.write_text(yaml.dump(_minimal_manifest()))
        with pytest.raises(ManifestError, match="not a manifest file"):
            load_manifest(path, AnimationAssets())

    @pytest.mark.parametrize("suffix", [".yml", ".trickfilm"])
    def test_other_manifest_suffixes(self, tmp_path, suffix):
        path = tmp_path / f"walk{suffix}"
        path.write_text(yaml.dump(_minimal_manifest()))
        assets = AnimationAssets()
        set_handle = load_manifest(path, assets)
        assert assets.clip_set(set_handle).names() == ["walk"]
