"""trickfilm/playback.py — Repeat policy and the per-clip playback cursor.

PlayingAnimation translates elapsed time into a clip-local cursor (seek_time)
and a completion count, under reversal, speed scaling and the repeat policy.
It is owned by exactly one AnimationPlayer and advanced once per tick.
"""

from __future__ import annotations

from dataclasses import dataclass, field

from trickfilm.assets import Handle
from trickfilm.constants import DEFAULT_SPEED


# ---------------------------------------------------------------------------
# Repeat policy
# ---------------------------------------------------------------------------

@dataclass(frozen=True)
class Never:
    """Play the clip once."""


@dataclass(frozen=True)
class Forever:
    """Loop the clip indefinitely."""


@dataclass(frozen=True)
class Count:
    """Play the clip *n* times in total."""
    n: int

    def __post_init__(self) -> None:
        if self.n < 1:
            raise ValueError(f"Repeat count must be a positive integer, got {self.n!r}")


RepeatAnimation = Never | Forever | Count


# ---------------------------------------------------------------------------
# Playback state
# ---------------------------------------------------------------------------

@dataclass
class PlayingAnimation:
    repeat: RepeatAnimation = field(default_factory=Never)
    reverse: bool = False
    # Set the first time the cursor reaches the terminal boundary
    clip_finished: bool = False
    speed: float = DEFAULT_SPEED
    elapsed: float = 0.0
    seek_time: float = 0.0
    animation_clip: Handle = field(default_factory=Handle.default)
    completions: int = 0

    def is_finished(self) -> bool:
        """Whether the repeat policy is exhausted. Forever never finishes."""
        repeat = self.repeat
        if isinstance(repeat, Forever):
            return False
        if isinstance(repeat, Never):
            return self.completions >= 1
        if isinstance(repeat, Count):
            return self.completions >= repeat.n
        raise TypeError(f"Unknown repeat policy: {repeat!r}")

    def update(self, delta: float, clip_duration: float) -> None:
        """Advance the cursor by *delta* seconds of a clip of *clip_duration*.

        At most one completion is registered per call, however many clip
        lengths *delta* spans. clip_duration must be positive.
        """
        if self.is_finished():
            return

        direction = -1.0 if self.reverse else 1.0
        self.elapsed += delta
        self.seek_time += delta * self.speed * direction

        # Forward completion is judged before wrapping; afterwards the cursor
        # is always below clip_duration.
        reached_end = not self.reverse and self.seek_time >= clip_duration

        # Python's modulo is non-negative for a positive divisor, so a cursor
        # pushed more than one clip length below zero still lands in range.
        if self.seek_time >= clip_duration or self.seek_time < 0.0:
            self.seek_time %= clip_duration

        reached_start = self.reverse and self.seek_time <= 0.0

        if reached_start or reached_end:
            self.completions += 1
            self.clip_finished = True
            if self.reverse:
                self.seek_time = clip_duration

    def replay(self) -> None:
        """Reset to the initial state as if no time has elapsed."""
        self.completions = 0
        self.elapsed = 0.0
        self.seek_time = 0.0
        self.clip_finished = False
