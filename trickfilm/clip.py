"""trickfilm/clip.py — Immutable clip data model.

AnimationClip holds ordered keyframe timestamps, the keyframes themselves and
the clip duration. Clips carry no playback state, so any number of players may
share one clip through its handle.

Clips are assumed well-formed when read: timestamps non-decreasing starting at
0.0, one timestamp per keyframe, and duration > 0 and >= the last timestamp.
Producers call validate_clip() to enforce this once, at construction time.
"""

from __future__ import annotations

import bisect
from dataclasses import dataclass, field
from types import MappingProxyType
from typing import Mapping, Optional, Sequence

import numpy as np

from trickfilm.assets import Handle


class ClipError(ValueError):
    """Raised when a clip violates the data model's invariants."""


# ---------------------------------------------------------------------------
# Keyframes
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class SpriteSheetKeyframes:
    """Keyframes given as tile indices into one texture atlas."""
    atlas: Handle
    indices: tuple[int, ...] = ()

    def __len__(self) -> int:
        return len(self.indices)


@dataclass(frozen=True)
class SpriteKeyframes:
    """Keyframes given as standalone image references."""
    images: tuple[Handle | str, ...] = ()

    def __len__(self) -> int:
        return len(self.images)


Keyframes = SpriteSheetKeyframes | SpriteKeyframes


# ---------------------------------------------------------------------------
# Texture atlas layout
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class TextureAtlas:
    """Uniform grid of tiles cut from a single image, indexed row-major."""
    image: str
    tile_width: int
    tile_height: int
    columns: int
    rows: int = 1

    def __len__(self) -> int:
        return self.columns * self.rows

    def tile_rect(self, index: int) -> tuple[int, int, int, int]:
        """Return (u, v, w, h) of tile *index* in image pixels."""
        row, col = divmod(index, self.columns)
        return (
            col * self.tile_width,
            row * self.tile_height,
            self.tile_width,
            self.tile_height,
        )


# ---------------------------------------------------------------------------
# Clips
# ---------------------------------------------------------------------------

def evenly_spaced_timestamps(frame_count: int, duration: float) -> tuple[float, ...]:
    """Timestamps ``i * duration / frame_count`` for each keyframe."""
    stamps = np.linspace(0.0, duration, num=frame_count, endpoint=False)
    return tuple(float(t) for t in stamps)


@dataclass(frozen=True)
class AnimationClip:
    keyframe_timestamps: tuple[float, ...]
    keyframes: Keyframes = field(default_factory=SpriteKeyframes)
    duration: float = 0.0

    @classmethod
    def from_keyframes(
        cls,
        keyframes: Keyframes,
        duration: float,
        timestamps: Optional[Sequence[float]] = None,
    ) -> AnimationClip:
        """Build a clip, spacing keyframes evenly when no timestamps are given."""
        if timestamps is None:
            stamps = evenly_spaced_timestamps(len(keyframes), duration)
        else:
            stamps = tuple(float(t) for t in timestamps)
        return cls(keyframe_timestamps=stamps, keyframes=keyframes, duration=float(duration))

    def __len__(self) -> int:
        return len(self.keyframe_timestamps)

    def keyframe_index(self, seek_time: float) -> int | None:
        """Index of the keyframe shown at *seek_time*.

        The last keyframe whose timestamp is <= seek_time; None before the
        first timestamp.
        """
        pos = bisect.bisect_right(self.keyframe_timestamps, seek_time)
        if pos == 0:
            return None
        return pos - 1


def validate_clip(clip: AnimationClip) -> AnimationClip:
    """Check the clip invariants, raising ClipError on the first violation."""
    stamps = clip.keyframe_timestamps
    if len(clip.keyframes) == 0:
        raise ClipError("Clip has no keyframes")
    if len(stamps) != len(clip.keyframes):
        raise ClipError(
            f"Clip has {len(stamps)} timestamps but {len(clip.keyframes)} keyframes"
        )
    if stamps[0] != 0.0:
        raise ClipError(f"First keyframe timestamp must be 0.0, got {stamps[0]!r}")
    for prev, cur in zip(stamps, stamps[1:]):
        if cur < prev:
            raise ClipError(f"Keyframe timestamps decrease: {prev!r} -> {cur!r}")
    if clip.duration <= 0.0:
        raise ClipError(f"Clip duration must be positive, got {clip.duration!r}")
    if clip.duration < stamps[-1]:
        raise ClipError(
            f"Clip duration {clip.duration!r} is shorter than last timestamp {stamps[-1]!r}"
        )
    return clip


# ---------------------------------------------------------------------------
# Clip sets
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class AnimationClipSet:
    """Named clips loaded together, e.g. from one manifest."""
    name: Optional[str] = None
    animations: Mapping[str, Handle] = field(default_factory=dict)

    def __post_init__(self) -> None:
        object.__setattr__(self, "animations", MappingProxyType(dict(self.animations)))

    def get(self, name: str) -> Handle | None:
        return self.animations.get(name)

    def __contains__(self, name: object) -> bool:
        return name in self.animations

    def names(self) -> list[str]:
        return sorted(self.animations)
