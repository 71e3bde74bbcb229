"""trickfilm/viewer.py — Interactive pyxel preview of a manifest's animations.

Usage::

    python -m trickfilm.viewer manifests/gabe-idle-run.yaml run

Keys: SPACE pause/resume, R toggle reverse, UP/DOWN speed, ENTER replay,
LEFT/RIGHT previous/next animation, Q quit.
"""

from __future__ import annotations

import argparse
from pathlib import Path

import pyxel

from trickfilm import renderer
from trickfilm.clip import SpriteKeyframes
from trickfilm.constants import (
    BACKGROUND_COLOR,
    DEFAULT_DELTA,
    DEFAULT_TICK_RATE,
    DISPLAY_SCALE,
    SCREEN_HEIGHT,
    SCREEN_WIDTH,
    SPEED_STEP,
)
from trickfilm.manifest import AnimationAssets, load_manifest
from trickfilm.player import AnimationPlayer
from trickfilm.system import Sprite, animate_sprite


def _image_paths(assets: AnimationAssets) -> list[str]:
    """Every image referenced by the loaded atlases and sprite clips."""
    paths = [atlas.image for _, atlas in assets.atlases]
    for _, clip in assets.clips:
        if isinstance(clip.keyframes, SpriteKeyframes):
            paths.extend(str(img) for img in clip.keyframes.images)
    return paths


class App:
    def __init__(self, manifest: Path, animation: str | None = None, scale: int = DISPLAY_SCALE):
        self.assets = AnimationAssets()
        self.set_handle = load_manifest(manifest, self.assets)
        self.names = self.assets.clip_set(self.set_handle).names()
        self.selected = 0
        if animation:
            self.assets.clip_named(self.set_handle, animation)
            self.selected = self.names.index(animation)

        self.player = AnimationPlayer()
        self.sprite = Sprite()
        self.frame_counter = 0

        pyxel.init(
            SCREEN_WIDTH, SCREEN_HEIGHT, title="trickfilm",
            fps=DEFAULT_TICK_RATE, display_scale=scale,
        )
        self.images = renderer.load_images(_image_paths(self.assets))
        self._select(self.selected)
        pyxel.run(self.update, self.draw)

    def _select(self, index: int) -> None:
        self.selected = index % len(self.names)
        handle, _ = self.assets.clip_named(self.set_handle, self.names[self.selected])
        self.player.play(handle.clone_weak()).repeat()

    # ------------------------------------------------------------------
    # Update
    # ------------------------------------------------------------------

    def update(self):
        if pyxel.btnp(pyxel.KEY_Q):
            pyxel.quit()

        if pyxel.btnp(pyxel.KEY_SPACE):
            if self.player.is_paused():
                self.player.resume()
            else:
                self.player.pause()
        if pyxel.btnp(pyxel.KEY_R):
            if self.player.is_reverse():
                self.player.stop_reverse()
            else:
                self.player.reverse()
        if pyxel.btnp(pyxel.KEY_UP):
            self.player.set_speed(self.player.speed() + SPEED_STEP)
        if pyxel.btnp(pyxel.KEY_DOWN):
            self.player.set_speed(self.player.speed() - SPEED_STEP)
        if pyxel.btnp(pyxel.KEY_RETURN):
            self.player.replay()
        if pyxel.btnp(pyxel.KEY_RIGHT):
            self._select(self.selected + 1)
        if pyxel.btnp(pyxel.KEY_LEFT):
            self._select(self.selected - 1)

        animate_sprite(self.player, self.sprite, DEFAULT_DELTA, self.assets.clips)
        self.frame_counter += 1

    # ------------------------------------------------------------------
    # Draw
    # ------------------------------------------------------------------

    def draw(self):
        pyxel.cls(BACKGROUND_COLOR)
        w, h = renderer.sprite_size(self.sprite, self.assets.atlases, self.images)
        x = (SCREEN_WIDTH - w) // 2
        y = (SCREEN_HEIGHT - h) // 2
        renderer.draw_sprite(self.sprite, x, y, self.assets.atlases, self.images)
        renderer.draw_player_hud(self.player, self.names[self.selected], self.frame_counter)


def main(argv: list[str] | None = None) -> None:
    parser = argparse.ArgumentParser(description="Preview trickfilm animations")
    parser.add_argument("manifest", help="Animation manifest (YAML)")
    parser.add_argument("animation", nargs="?", help="Animation to show first")
    parser.add_argument("--scale", type=int, default=DISPLAY_SCALE, help="Window scale")
    args = parser.parse_args(argv)
    App(Path(args.manifest), args.animation, scale=args.scale)


if __name__ == "__main__":
    main()
