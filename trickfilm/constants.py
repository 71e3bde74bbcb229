"""trickfilm/constants.py — Playback defaults and viewer configuration."""

# ---------------------------------------------------------------------------
# Playback
# ---------------------------------------------------------------------------

DEFAULT_SPEED = 1.0

# Fixed tick rate used by the headless runner, the CLI and the viewer
DEFAULT_TICK_RATE = 60
DEFAULT_DELTA = 1.0 / DEFAULT_TICK_RATE

# Upper bound on ticks for a single headless run (10 minutes at 60 fps)
MAX_RUN_TICKS = 36000

# ---------------------------------------------------------------------------
# Manifests
# ---------------------------------------------------------------------------

MANIFEST_SUFFIXES = (".trickfilm", ".yaml", ".yml")

# ---------------------------------------------------------------------------
# Viewer
# ---------------------------------------------------------------------------

SCREEN_WIDTH = 160
SCREEN_HEIGHT = 120
DISPLAY_SCALE = 4
BACKGROUND_COLOR = 1
HUD_COLOR = 7
TRANSPARENT_COLOR = 0

SPEED_STEP = 0.25
