"""trickfilm/system.py — Per-tick driver connecting players to sprites.

Resolves each player's clip handle, advances the player by the frame delta,
and writes the keyframe under the cursor into the sprite it animates. Players
whose clip is not loaded are skipped.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from typing import Iterable, Optional

from trickfilm.assets import Assets, Handle
from trickfilm.clip import AnimationClip, SpriteKeyframes, SpriteSheetKeyframes
from trickfilm.debug import DEBUG
from trickfilm.player import AnimationPlayer

logger = logging.getLogger(__name__)


@dataclass
class Sprite:
    """Visual target of a player: an atlas tile or a standalone image."""
    atlas: Optional[Handle] = None
    index: int = 0
    image: Handle | str | None = None


def animate_sprite(
    player: AnimationPlayer,
    sprite: Sprite,
    delta: float,
    clips: Assets[AnimationClip],
) -> bool:
    """Advance *player* by *delta* and update *sprite*.

    Returns True if the sprite was written this tick.
    """
    if player.is_paused():
        return False

    clip = clips.get(player.animation_clip())
    if clip is None:
        if DEBUG:
            logger.debug("Clip %r not loaded, skipping", player.animation_clip())
        return False

    if DEBUG and clip.duration <= 0.0:
        logger.warning(
            "Clip %r has non-positive duration %r, skipping",
            player.animation_clip(), clip.duration,
        )
        return False

    player.tick(delta, clip.duration)

    index = clip.keyframe_index(player.seek_time())
    if index is None:
        return False

    keyframes = clip.keyframes
    if isinstance(keyframes, SpriteSheetKeyframes):
        sprite.atlas = keyframes.atlas
        sprite.index = keyframes.indices[index]
        sprite.image = None
    elif isinstance(keyframes, SpriteKeyframes):
        sprite.atlas = None
        sprite.image = keyframes.images[index]
    return True


def animate_sprites(
    pairs: Iterable[tuple[AnimationPlayer, Sprite]],
    delta: float,
    clips: Assets[AnimationClip],
) -> int:
    """Tick every (player, sprite) pair; returns how many sprites changed."""
    updated = 0
    for player, sprite in pairs:
        if animate_sprite(player, sprite, delta, clips):
            updated += 1
    return updated
