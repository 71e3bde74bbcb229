"""trickfilm/debug.py — Debug flag from environment variable."""

import os

DEBUG = os.environ.get("TRICKFILM_DEBUG", "") == "1"
