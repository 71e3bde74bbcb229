"""trickfilm/cli — CLI entry point for headless playback runs.

Usage::

    python -m trickfilm.cli manifests/gabe-idle-run.yaml run
    python -m trickfilm.cli manifests/gabe-idle-run.yaml --all --repeat 3
    python -m trickfilm.cli manifests/gabe-idle-run.yaml run --reverse --timeline
    python -m trickfilm.cli manifests/gabe-idle-run.yaml --all -o results/runs.json
    python -m trickfilm.cli manifests/gabe-idle-run.yaml --list
"""

from __future__ import annotations

import argparse
import logging
import sys
from pathlib import Path

from trickfilm.constants import DEFAULT_SPEED, DEFAULT_TICK_RATE, MAX_RUN_TICKS
from trickfilm.manifest import AnimationAssets, ManifestError, load_manifest
from trickfilm.output import print_outcome, print_summary, print_timeline, save_results
from trickfilm.playback import Count, Forever, Never, RepeatAnimation
from trickfilm.runner import PlaybackOutcome, run_playback


def parse_repeat(value: str) -> RepeatAnimation:
    """Parse ``never``, ``forever`` or a positive count."""
    lowered = value.strip().lower()
    if lowered == "never":
        return Never()
    if lowered == "forever":
        return Forever()
    try:
        return Count(int(lowered))
    except ValueError as exc:
        raise argparse.ArgumentTypeError(
            f"invalid repeat {value!r}: use 'never', 'forever' or a positive integer"
        ) from exc


def _run_ok(outcome: PlaybackOutcome) -> bool:
    # Forever never finishes; a looping run is fine once it wrapped at least once.
    if outcome.repeat == "forever":
        return outcome.clip_finished
    return outcome.finished


def main(argv: list[str] | None = None) -> None:
    """Play animations from a manifest headlessly."""
    parser = argparse.ArgumentParser(description="Run trickfilm animations headlessly")
    parser.add_argument("manifest", help="Animation manifest (YAML)")
    parser.add_argument("animations", nargs="*", help="Animation names to play")
    parser.add_argument(
        "--all", action="store_true", help="Play every animation in the manifest",
    )
    parser.add_argument(
        "--list", action="store_true", help="List animation names and exit",
    )
    parser.add_argument(
        "--repeat", type=parse_repeat, default=Never(),
        help="never, forever or a play count (default: never)",
    )
    parser.add_argument("--reverse", action="store_true", help="Play in reverse")
    parser.add_argument(
        "--speed", type=float, default=DEFAULT_SPEED, help="Playback speed multiplier",
    )
    parser.add_argument(
        "--seek", type=float, default=0.0, help="Start cursor position in seconds",
    )
    parser.add_argument(
        "--fps", type=float, default=float(DEFAULT_TICK_RATE), help="Tick rate",
    )
    parser.add_argument(
        "--ticks", type=int, default=MAX_RUN_TICKS, help="Maximum ticks per animation",
    )
    parser.add_argument(
        "--timeline", action="store_true", help="Print every tick",
    )
    parser.add_argument(
        "--output", "-o", help="Output file path for results JSON",
    )
    parser.add_argument(
        "--trajectory", action="store_true",
        help="Include per-tick records in JSON output",
    )
    parser.add_argument(
        "--verbose", "-v", action="store_true", help="Enable debug logging",
    )
    args = parser.parse_args(argv)

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG)

    if args.fps <= 0:
        parser.error("--fps must be positive")

    assets = AnimationAssets()
    try:
        set_handle = load_manifest(Path(args.manifest), assets)
    except (OSError, ManifestError) as exc:
        print(f"error: {exc}", file=sys.stderr)
        sys.exit(2)
    clip_set = assets.clip_set(set_handle)

    if args.list:
        for name in clip_set.names():
            print(name)
        sys.exit(0)

    # Must specify animations or --all
    if not args.animations and not args.all:
        parser.print_usage()
        sys.exit(2)

    names = clip_set.names() if args.all else args.animations

    results = []
    for name in names:
        try:
            _, clip = assets.clip_named(set_handle, name)
        except KeyError as exc:
            print(f"error: {exc.args[0]}", file=sys.stderr)
            sys.exit(2)
        outcome = run_playback(
            clip,
            name,
            ticks=args.ticks,
            dt=1.0 / args.fps,
            repeat=args.repeat,
            reverse=args.reverse,
            speed=args.speed,
            start_at=args.seek,
        )
        results.append(outcome)
        print_outcome(outcome)
        if args.timeline:
            print_timeline(outcome)

    print_summary(results)

    if args.output:
        save_results(results, args.output, include_trajectory=args.trajectory)

    if all(_run_ok(r) for r in results):
        sys.exit(0)
    else:
        sys.exit(1)


if __name__ == "__main__":
    main()
