"""trickfilm/manifest.py — YAML animation manifest loading.

A manifest describes a set of named animations, each with keyframes taken
either from a texture atlas (tile indices) or from standalone images::

    name: gabe
    atlases:
      gabe: {image: gabe-idle-run.png, tile_width: 24, tile_height: 24, columns: 7}
    animations:
      idle:
        keyframe_timestamps: [0.0]
        keyframes: {sprite_sheet: {atlas: gabe, indices: [0]}}
        duration: 0.1
      run:
        keyframes: {sprite_sheet: {atlas: gabe, range: {start: 1, end: 7}}}
        duration: 0.6

Omitted (or null) keyframe_timestamps are spaced evenly over the duration.
Range ends are exclusive. Image paths resolve relative to the manifest file.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass, field
from pathlib import Path
from typing import Any, Optional

import yaml

from trickfilm.assets import Assets, Handle
from trickfilm.clip import (
    AnimationClip,
    AnimationClipSet,
    ClipError,
    Keyframes,
    SpriteKeyframes,
    SpriteSheetKeyframes,
    TextureAtlas,
    validate_clip,
)
from trickfilm.constants import MANIFEST_SUFFIXES

logger = logging.getLogger(__name__)

VALID_KEYFRAME_TYPES: frozenset[str] = frozenset({"sprite_sheet", "sprite"})


class ManifestError(ValueError):
    """Raised for malformed animation manifests."""


# ---------------------------------------------------------------------------
# Asset tables
# ---------------------------------------------------------------------------

@dataclass
class AnimationAssets:
    """The tables a manifest loads into."""
    clips: Assets[AnimationClip] = field(default_factory=Assets)
    atlases: Assets[TextureAtlas] = field(default_factory=Assets)
    clip_sets: Assets[AnimationClipSet] = field(default_factory=Assets)

    def clip_set(self, handle: Handle) -> AnimationClipSet:
        clip_set = self.clip_sets.get(handle)
        if clip_set is None:
            raise KeyError(f"Clip set {handle!r} is not loaded")
        return clip_set

    def clip_named(self, set_handle: Handle, name: str) -> tuple[Handle, AnimationClip]:
        """Resolve animation *name* of a loaded set to (handle, clip)."""
        clip_set = self.clip_set(set_handle)
        handle = clip_set.get(name)
        if handle is None:
            raise KeyError(
                f"Unknown animation: {name!r}. Available: {clip_set.names()}"
            )
        clip = self.clips.get(handle)
        if clip is None:
            raise KeyError(f"Animation {name!r} is not loaded")
        return handle, clip


# ---------------------------------------------------------------------------
# Parsing helpers
# ---------------------------------------------------------------------------

def _resolve_path(base: Optional[Path], path: str) -> str:
    if base is None:
        return str(path)
    return str(base / path)


def _parse_atlas(name: str, data: dict, base: Optional[Path]) -> TextureAtlas:
    """Parse one atlas entry into a TextureAtlas."""
    if not isinstance(data, dict):
        raise ManifestError(f"Atlas {name!r} must be a mapping")
    try:
        atlas = TextureAtlas(
            image=_resolve_path(base, data["image"]),
            tile_width=int(data["tile_width"]),
            tile_height=int(data["tile_height"]),
            columns=int(data["columns"]),
            rows=int(data.get("rows", 1)),
        )
    except KeyError as exc:
        raise ManifestError(f"Atlas {name!r} is missing {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise ManifestError(f"Atlas {name!r}: {exc}") from exc
    if atlas.tile_width <= 0 or atlas.tile_height <= 0 or atlas.columns <= 0 or atlas.rows <= 0:
        raise ManifestError(f"Atlas {name!r} has a non-positive dimension")
    return atlas


def _parse_indices(anim: str, data: dict) -> tuple[int, ...]:
    """Parse either an explicit index list or a half-open range."""
    if "indices" in data:
        try:
            return tuple(int(i) for i in data["indices"])
        except (TypeError, ValueError) as exc:
            raise ManifestError(f"Animation {anim!r}: bad tile indices: {exc}") from exc
    if "range" not in data:
        raise ManifestError(f"Animation {anim!r}: sprite_sheet needs 'indices' or 'range'")
    rng = data["range"]
    try:
        start, end = int(rng["start"]), int(rng["end"])
    except KeyError as exc:
        raise ManifestError(f"Animation {anim!r}: range is missing {exc.args[0]!r}") from exc
    except (TypeError, ValueError) as exc:
        raise ManifestError(f"Animation {anim!r}: bad index range: {exc}") from exc
    if end <= start:
        raise ManifestError(
            f"Animation {anim!r}: empty index range {start}..{end}"
        )
    return tuple(range(start, end))


def _parse_keyframes(
    anim: str,
    data: dict,
    atlas_handles: dict[str, Handle],
    atlases: Assets[TextureAtlas],
    base: Optional[Path],
) -> Keyframes:
    """Parse the keyframes block of one animation."""
    if not isinstance(data, dict) or len(data) != 1:
        raise ManifestError(
            f"Animation {anim!r}: keyframes must have exactly one of "
            f"{sorted(VALID_KEYFRAME_TYPES)}"
        )
    (ktype, body), = data.items()
    if ktype not in VALID_KEYFRAME_TYPES:
        raise ManifestError(f"Animation {anim!r}: unknown keyframe type {ktype!r}")

    if ktype == "sprite":
        if not isinstance(body, list) or not all(isinstance(p, str) for p in body):
            raise ManifestError(f"Animation {anim!r}: sprite must be a list of image paths")
        return SpriteKeyframes(tuple(_resolve_path(base, p) for p in body))

    if not isinstance(body, dict):
        raise ManifestError(f"Animation {anim!r}: sprite_sheet must be a mapping")
    atlas_name = body.get("atlas")
    if atlas_name not in atlas_handles:
        raise ManifestError(
            f"Animation {anim!r}: unknown atlas {atlas_name!r}. "
            f"Available: {sorted(atlas_handles)}"
        )
    handle = atlas_handles[atlas_name]
    indices = _parse_indices(anim, body)
    atlas = atlases.get(handle)
    if atlas is not None and any(i < 0 or i >= len(atlas) for i in indices):
        raise ManifestError(
            f"Animation {anim!r}: tile index out of range for atlas {atlas_name!r} "
            f"({len(atlas)} tiles)"
        )
    return SpriteSheetKeyframes(atlas=handle.clone_weak(), indices=indices)


def _parse_clip(
    anim: str,
    data: dict,
    atlas_handles: dict[str, Handle],
    atlases: Assets[TextureAtlas],
    base: Optional[Path],
) -> AnimationClip:
    """Parse and validate one animation entry."""
    if not isinstance(data, dict) or "keyframes" not in data or "duration" not in data:
        raise ManifestError(f"Animation {anim!r} needs 'keyframes' and 'duration'")
    keyframes = _parse_keyframes(anim, data["keyframes"], atlas_handles, atlases, base)
    try:
        clip = AnimationClip.from_keyframes(
            keyframes,
            duration=float(data["duration"]),
            timestamps=data.get("keyframe_timestamps"),
        )
    except (TypeError, ValueError) as exc:
        raise ManifestError(f"Animation {anim!r}: {exc}") from exc
    try:
        return validate_clip(clip)
    except ClipError as exc:
        raise ManifestError(f"Animation {anim!r}: {exc}") from exc


# ---------------------------------------------------------------------------
# Public API
# ---------------------------------------------------------------------------

def parse_manifest(
    data: dict[str, Any],
    assets: AnimationAssets,
    base: Optional[Path] = None,
) -> Handle:
    """Load an already-parsed manifest dict into *assets*.

    Returns:
        Strong handle to the resulting AnimationClipSet.

    Raises:
        ManifestError: If any atlas or animation entry is malformed. Nothing
            from this manifest is left in *assets* in that case.
    """
    if not isinstance(data, dict):
        raise ManifestError("Manifest must be a mapping")
    animations = data.get("animations")
    if not animations:
        raise ManifestError("Manifest defines no animations")
    if not isinstance(animations, dict):
        raise ManifestError("'animations' must be a mapping of name to animation")
    atlas_entries = data.get("atlases") or {}
    if not isinstance(atlas_entries, dict):
        raise ManifestError("'atlases' must be a mapping of name to atlas")

    atlas_handles: dict[str, Handle] = {}
    clip_handles: dict[str, Handle] = {}
    try:
        for name, entry in atlas_entries.items():
            atlas_handles[name] = assets.atlases.add(_parse_atlas(name, entry, base))

        for anim, entry in animations.items():
            clip = _parse_clip(str(anim), entry, atlas_handles, assets.atlases, base)
            clip_handles[str(anim)] = assets.clips.add(clip)
            logger.debug(
                "Loaded animation %r: %d keyframes, %.3fs", anim, len(clip), clip.duration,
            )
    except ManifestError:
        for handle in clip_handles.values():
            assets.clips.remove(handle)
        for handle in atlas_handles.values():
            assets.atlases.remove(handle)
        raise

    name = data.get("name")
    clip_set = AnimationClipSet(
        name=str(name) if name is not None else None,
        animations=clip_handles,
    )
    return assets.clip_sets.add(clip_set)


def load_manifest(path: Path | str, assets: AnimationAssets) -> Handle:
    """Load a single manifest from a YAML file.

    Raises:
        OSError: If the file cannot be read.
        ManifestError: If the suffix is not a manifest suffix, the YAML does
            not parse, or the manifest is malformed.
    """
    path = Path(path)
    if path.suffix not in MANIFEST_SUFFIXES:
        raise ManifestError(
            f"{path}: not a manifest file (expected one of {list(MANIFEST_SUFFIXES)})"
        )
    with open(path) as f:
        try:
            data = yaml.safe_load(f)
        except yaml.YAMLError as exc:
            raise ManifestError(f"{path}: {exc}") from exc
    logger.debug("Loading manifest %s", path)
    try:
        return parse_manifest(data, assets, base=path.parent)
    except ManifestError as exc:
        raise ManifestError(f"{path}: {exc}") from exc


def load_manifests(
    paths: list[Path],
    assets: Optional[AnimationAssets] = None,
) -> tuple[AnimationAssets, list[Handle]]:
    """Load several manifests into one set of tables.

    Returns:
        The (possibly new) AnimationAssets and one clip set handle per path.
    """
    if assets is None:
        assets = AnimationAssets()
    handles = [load_manifest(p, assets) for p in paths]
    return assets, handles
