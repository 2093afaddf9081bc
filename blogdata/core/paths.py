#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants for the blog data layer.

    ROOT/
    ├── blogdata/      # Package code
    ├── data/          # Local SQLite database
    └── logs/          # Application logs

Every constant can be overridden per invocation through the CLI options
(``--db-path``, ``--log-dir``).
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
from pathlib import Path

# paths.py -> core/ -> blogdata/ -> ROOT/
ROOT: Path = Path(__file__).resolve().parent.parent.parent

# --- Data ---
DATA_DIR = ROOT / "data"
DB_PATH = DATA_DIR / "blog.db"

# --- Logs ---
LOG_DIR = ROOT / "logs"
