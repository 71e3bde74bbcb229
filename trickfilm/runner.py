"""trickfilm/runner.py — Headless playback runs.

Drives one AnimationPlayer over a clip at a fixed tick rate and records the
cursor, keyframe and completion state every tick. Used by the CLI and tests.
"""

from __future__ import annotations

import time
from dataclasses import dataclass, field
from typing import Optional

from trickfilm.assets import Assets, Handle
from trickfilm.clip import AnimationClip
from trickfilm.constants import DEFAULT_DELTA, DEFAULT_SPEED, MAX_RUN_TICKS
from trickfilm.playback import Forever, Never, RepeatAnimation
from trickfilm.player import AnimationPlayer
from trickfilm.system import Sprite, animate_sprite


# ---------------------------------------------------------------------------
# Data types
# ---------------------------------------------------------------------------

@dataclass
class FrameRecord:
    """Playback state after one tick."""

    tick: int
    elapsed: float
    seek_time: float
    keyframe: Optional[int]
    completions: int
    finished: bool


@dataclass
class PlaybackOutcome:
    """Result of a headless run."""

    name: str
    finished: bool
    clip_finished: bool
    ticks: int
    completions: int
    repeat: str
    final_seek_time: float
    wall_time_ms: float
    trajectory: list[FrameRecord] = field(default_factory=list)


def describe_repeat(repeat: RepeatAnimation) -> str:
    """Short human-readable form of a repeat policy."""
    if isinstance(repeat, Never):
        return "never"
    if isinstance(repeat, Forever):
        return "forever"
    return f"count({repeat.n})"


# ---------------------------------------------------------------------------
# Runner
# ---------------------------------------------------------------------------

def run_playback(
    clip: AnimationClip,
    name: str = "clip",
    *,
    ticks: int = MAX_RUN_TICKS,
    dt: float = DEFAULT_DELTA,
    repeat: RepeatAnimation | None = None,
    reverse: bool = False,
    speed: float = DEFAULT_SPEED,
    start_at: float = 0.0,
) -> PlaybackOutcome:
    """Play *clip* for up to *ticks* ticks of *dt* seconds.

    Stops early once the player is finished under its repeat policy.
    """
    clips: Assets[AnimationClip] = Assets()
    handle: Handle = clips.add(clip)

    player = AnimationPlayer()
    player.start(handle.clone_weak())
    player.set_repeat(repeat if repeat is not None else Never())
    player.set_speed(speed)
    if reverse:
        player.reverse()
    if start_at:
        player.seek_to(start_at)

    sprite = Sprite()
    trajectory: list[FrameRecord] = []

    t_start = time.perf_counter()
    tick = 0
    for tick in range(1, ticks + 1):
        animate_sprite(player, sprite, dt, clips)
        trajectory.append(FrameRecord(
            tick=tick,
            elapsed=player.elapsed(),
            seek_time=player.seek_time(),
            keyframe=clip.keyframe_index(player.seek_time()),
            completions=player.completions(),
            finished=player.is_finished(),
        ))
        if player.is_finished():
            break
    wall_ms = (time.perf_counter() - t_start) * 1000

    return PlaybackOutcome(
        name=name,
        finished=player.is_finished(),
        clip_finished=player.is_clip_finished(),
        ticks=tick,
        completions=player.completions(),
        repeat=describe_repeat(player.repeat_mode()),
        final_seek_time=player.seek_time(),
        wall_time_ms=wall_ms,
        trajectory=trajectory,
    )
