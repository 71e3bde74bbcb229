"""trickfilm/renderer.py — Pyxel drawing of animated sprites.

Blits the keyframe a Sprite currently shows: a tile cut from its atlas image,
or a standalone image. Images are loaded once into pyxel Image objects keyed
by their path.
"""

from __future__ import annotations

from typing import Iterable

import pyxel

from trickfilm.assets import Assets
from trickfilm.clip import TextureAtlas
from trickfilm.constants import HUD_COLOR, TRANSPARENT_COLOR
from trickfilm.player import AnimationPlayer
from trickfilm.system import Sprite


# ---------------------------------------------------------------------------
# Images
# ---------------------------------------------------------------------------

def load_images(paths: Iterable[str]) -> dict[str, pyxel.Image]:
    """Load each distinct image path once. Call after pyxel.init()."""
    images: dict[str, pyxel.Image] = {}
    for path in paths:
        if path not in images:
            images[path] = pyxel.Image.from_image(path)
    return images


def sprite_size(
    sprite: Sprite,
    atlases: Assets[TextureAtlas],
    images: dict[str, pyxel.Image],
) -> tuple[int, int]:
    """Width and height of the keyframe the sprite shows, (0, 0) if unknown."""
    if sprite.atlas is not None:
        atlas = atlases.get(sprite.atlas)
        if atlas is not None:
            return atlas.tile_width, atlas.tile_height
        return 0, 0
    if sprite.image is not None:
        img = images.get(str(sprite.image))
        if img is not None:
            return img.width, img.height
    return 0, 0


# ---------------------------------------------------------------------------
# Sprites
# ---------------------------------------------------------------------------

def draw_sprite(
    sprite: Sprite,
    x: int,
    y: int,
    atlases: Assets[TextureAtlas],
    images: dict[str, pyxel.Image],
) -> bool:
    """Draw the sprite's keyframe with its top-left corner at (x, y).

    Returns False when the atlas or image is not loaded.
    """
    if sprite.atlas is not None:
        atlas = atlases.get(sprite.atlas)
        if atlas is None:
            return False
        img = images.get(atlas.image)
        if img is None:
            return False
        u, v, w, h = atlas.tile_rect(sprite.index)
        pyxel.blt(x, y, img, u, v, w, h, TRANSPARENT_COLOR)
        return True

    if sprite.image is None:
        return False
    img = images.get(str(sprite.image))
    if img is None:
        return False
    pyxel.blt(x, y, img, 0, 0, img.width, img.height, TRANSPARENT_COLOR)
    return True


# ---------------------------------------------------------------------------
# HUD
# ---------------------------------------------------------------------------

def draw_player_hud(player: AnimationPlayer, name: str, frame_counter: int) -> None:
    """Draw playback state in the top-left corner."""
    state = "PAUSED" if player.is_paused() else "PLAY"
    direction = "REV" if player.is_reverse() else "FWD"
    pyxel.text(4, 4, f"{name} {state} {direction}", HUD_COLOR)
    pyxel.text(4, 12, f"SPD:{player.speed():.2f} SEEK:{player.seek_time():.2f}", HUD_COLOR)
    pyxel.text(4, 20, f"DONE:{player.completions()} F:{frame_counter}", HUD_COLOR)
