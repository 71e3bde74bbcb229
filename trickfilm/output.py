"""trickfilm/output.py — Console output and JSON serialization."""

from __future__ import annotations

import json
import sys
from dataclasses import asdict
from pathlib import Path
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from trickfilm.runner import PlaybackOutcome


# ---------------------------------------------------------------------------
# TTY / color helpers
# ---------------------------------------------------------------------------

_GREEN = "\033[32m"
_YELLOW = "\033[33m"
_RESET = "\033[0m"


def _is_tty() -> bool:
    return hasattr(sys.stdout, "isatty") and sys.stdout.isatty()


def _colorize(text: str, color: str) -> str:
    if _is_tty():
        return f"{color}{text}{_RESET}"
    return text


# ---------------------------------------------------------------------------
# Console output
# ---------------------------------------------------------------------------

def print_outcome(outcome: PlaybackOutcome) -> None:
    """Print a one-line summary of a playback run."""
    if outcome.finished:
        status = _colorize("DONE", _GREEN)
    else:
        status = _colorize("LOOP", _YELLOW)

    parts = [
        f"{status}  {outcome.name:<20s}",
        f"{outcome.ticks:>6d} ticks",
        f"{outcome.completions:>3d} completions",
        f"repeat={outcome.repeat}",
        f"seek={outcome.final_seek_time:.3f}",
        f"{outcome.wall_time_ms:>7.1f}ms",
    ]
    print("  ".join(parts))


def print_timeline(outcome: PlaybackOutcome) -> None:
    """Print one line per recorded tick."""
    for rec in outcome.trajectory:
        keyframe = "-" if rec.keyframe is None else str(rec.keyframe)
        flag = " finished" if rec.finished else ""
        print(
            f"  {rec.tick:>5d}  t={rec.elapsed:8.3f}  seek={rec.seek_time:7.3f}"
            f"  key={keyframe:>3s}  done={rec.completions}{flag}"
        )


def print_summary(results: list[PlaybackOutcome]) -> None:
    """Print a summary line with finished/looping counts."""
    total = len(results)
    finished = sum(1 for r in results if r.finished)
    print(f"\n{total} animations: {finished} finished, {total - finished} still looping")


# ---------------------------------------------------------------------------
# JSON serialization
# ---------------------------------------------------------------------------

def _outcome_to_dict(
    outcome: PlaybackOutcome, include_trajectory: bool = False,
) -> dict:
    """Convert a PlaybackOutcome to a JSON-serializable dict."""
    d = asdict(outcome)
    if not include_trajectory:
        d.pop("trajectory", None)
    return d


def save_results(
    results: list[PlaybackOutcome],
    path: Path | str,
    include_trajectory: bool = False,
) -> None:
    """Save playback outcomes as a JSON file."""
    path = Path(path)
    path.parent.mkdir(parents=True, exist_ok=True)
    data = [_outcome_to_dict(r, include_trajectory) for r in results]
    path.write_text(json.dumps(data, indent=2) + "\n")
