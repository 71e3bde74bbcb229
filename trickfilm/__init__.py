"""trickfilm — Keyframe playback for 2D sprite animations."""

from trickfilm.assets import Assets, Handle
from trickfilm.clip import (
    AnimationClip,
    AnimationClipSet,
    ClipError,
    Keyframes,
    SpriteKeyframes,
    SpriteSheetKeyframes,
    TextureAtlas,
    evenly_spaced_timestamps,
    validate_clip,
)
from trickfilm.manifest import (
    AnimationAssets,
    ManifestError,
    load_manifest,
    load_manifests,
    parse_manifest,
)
from trickfilm.playback import Count, Forever, Never, PlayingAnimation, RepeatAnimation
from trickfilm.player import AnimationPlayer
from trickfilm.system import Sprite, animate_sprite, animate_sprites

__all__ = [
    "Assets",
    "Handle",
    "AnimationClip",
    "AnimationClipSet",
    "ClipError",
    "Keyframes",
    "SpriteKeyframes",
    "SpriteSheetKeyframes",
    "TextureAtlas",
    "evenly_spaced_timestamps",
    "validate_clip",
    "AnimationAssets",
    "ManifestError",
    "load_manifest",
    "load_manifests",
    "parse_manifest",
    "Never",
    "Forever",
    "Count",
    "RepeatAnimation",
    "PlayingAnimation",
    "AnimationPlayer",
    "Sprite",
    "animate_sprite",
    "animate_sprites",
]
