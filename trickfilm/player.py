"""trickfilm/player.py — AnimationPlayer, the public playback control surface.

One player per animated entity. A player plays a single clip at a time; it
owns its PlayingAnimation exclusively and references the clip by handle.
Mutators return the player so calls can be chained::

    player.play(run_handle).repeat().set_speed(1.5)
"""

from __future__ import annotations

from dataclasses import dataclass, field

from trickfilm.assets import Handle
from trickfilm.playback import Forever, PlayingAnimation, RepeatAnimation


@dataclass
class AnimationPlayer:
    paused: bool = False
    animation: PlayingAnimation = field(default_factory=PlayingAnimation)

    # -----------------------------------------------------------------------
    # Starting playback
    # -----------------------------------------------------------------------

    def start(self, handle: Handle) -> AnimationPlayer:
        """Start playing *handle* from scratch, discarding all playback state.

        The paused flag is left as it is.
        """
        self.animation = PlayingAnimation(animation_clip=handle)
        return self

    def play(self, handle: Handle) -> AnimationPlayer:
        """Start *handle* unless it is already bound and the player is running."""
        if self.animation.animation_clip != handle or self.is_paused():
            self.start(handle)
        return self

    def replay(self) -> None:
        """Rewind the current clip as if no time has elapsed."""
        self.animation.replay()

    def tick(self, delta_time: float, clip_duration: float) -> None:
        """Advance playback by one external frame unless paused."""
        if self.paused:
            return
        self.animation.update(delta_time, clip_duration)

    # -----------------------------------------------------------------------
    # Clip
    # -----------------------------------------------------------------------

    def animation_clip(self) -> Handle:
        return self.animation.animation_clip

    def is_playing_clip(self, handle: Handle) -> bool:
        return self.animation_clip() == handle

    def is_finished(self) -> bool:
        """Finished according to the repeat policy."""
        return self.animation.is_finished()

    def is_clip_finished(self) -> bool:
        """Whether the clip end was ever reached, regardless of repeat policy."""
        return self.animation.clip_finished

    # -----------------------------------------------------------------------
    # Direction
    # -----------------------------------------------------------------------

    def reverse(self) -> AnimationPlayer:
        self.animation.reverse = True
        return self

    def stop_reverse(self) -> AnimationPlayer:
        self.animation.reverse = False
        return self

    def is_reverse(self) -> bool:
        return self.animation.reverse

    def is_playback_reversed(self) -> bool:
        """True when the speed is negative. Independent of is_reverse()."""
        return self.animation.speed < 0.0

    # -----------------------------------------------------------------------
    # Repetition
    # -----------------------------------------------------------------------

    def repeat(self) -> AnimationPlayer:
        """Loop forever. See also set_repeat()."""
        self.animation.repeat = Forever()
        return self

    def set_repeat(self, repeat: RepeatAnimation) -> AnimationPlayer:
        self.animation.repeat = repeat
        return self

    def repeat_mode(self) -> RepeatAnimation:
        return self.animation.repeat

    def completions(self) -> int:
        return self.animation.completions

    # -----------------------------------------------------------------------
    # Pause
    # -----------------------------------------------------------------------

    def pause(self) -> None:
        self.paused = True

    def resume(self) -> None:
        self.paused = False

    def is_paused(self) -> bool:
        return self.paused

    # -----------------------------------------------------------------------
    # Speed and time
    # -----------------------------------------------------------------------

    def speed(self) -> float:
        return self.animation.speed

    def set_speed(self, speed: float) -> AnimationPlayer:
        """Set the time multiplier.

        Effective velocity is ``speed * (-1 if reversed else 1)``; a negative
        speed runs backwards without touching the reverse flag.
        """
        self.animation.speed = speed
        return self

    def elapsed(self) -> float:
        """Total time fed into this playback since it was (re)started."""
        return self.animation.elapsed

    def seek_time(self) -> float:
        """Cursor inside the clip, within [0, clip duration] after a tick."""
        return self.animation.seek_time

    def seek_to(self, seek_time: float) -> AnimationPlayer:
        """Move the cursor. Out-of-range values are wrapped on the next tick."""
        self.animation.seek_time = seek_time
        return self
