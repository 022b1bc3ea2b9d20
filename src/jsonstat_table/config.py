from __future__ import annotations

import os
from pathlib import Path

# ---------------------------------------------------------------------------
# Project paths
# ---------------------------------------------------------------------------

# Root of the project (repo root)
PROJECT_ROOT = Path(__file__).resolve().parents[2]

# Data directories
DATA_DIR = PROJECT_ROOT / "data"
SAMPLES_DIR = DATA_DIR / "samples"        # bundled JSON-stat example files

# ---------------------------------------------------------------------------
# App identity
# ---------------------------------------------------------------------------

APP_NAME = "JSON-stat Table Viewer"
APP_VERSION = "0.1.0"


def _env_flag(name: str, default: bool) -> bool:
    raw = os.getenv(name, "").strip().lower()
    if not raw:
        return default
    return raw in {"1", "true", "yes", "on"}


# ---------------------------------------------------------------------------
# Remote source
#
# Optional default JSON-stat endpoint for the viewer, e.g. a statistics
# office API returning a single dataset. Leave empty to use bundled samples.
# ---------------------------------------------------------------------------

JSONSTAT_SOURCE_URL = os.getenv("JSONSTAT_SOURCE_URL", "").strip()

# Seconds before an HTTP fetch of a dataset is abandoned
JSONSTAT_HTTP_TIMEOUT = int(os.getenv("JSONSTAT_HTTP_TIMEOUT", "60").strip() or 60)

# ---------------------------------------------------------------------------
# Rendering defaults
#
# These only seed LayoutOptions.from_config(); explicit options passed by the
# caller always win.
# ---------------------------------------------------------------------------

# Text written into cells whose value (or label) is null
JSONSTAT_NULL_LABEL = os.getenv("JSONSTAT_NULL_LABEL", "")

JSONSTAT_EXCLUDE_ONE_DIM = _env_flag("JSONSTAT_EXCLUDE_ONE_DIM", False)
JSONSTAT_USE_ROW_SPANS = _env_flag("JSONSTAT_USE_ROW_SPANS", True)

JSONSTAT_LOG_LEVEL = os.getenv("JSONSTAT_LOG_LEVEL", "INFO").strip().upper() or "INFO"
