#!/usr/bin/env python3
"""
paths.py
-------------------
Path constants and configuration for the accessdb project.

This module defines all project paths as Path objects for consistent path handling
across the codebase. Defaults are relative to the project root directory and can
be overridden through environment variables:

    ACCESSDB_DATA_DIR   Base directory for the database and its logs
    ACCESSDB_DB_PATH    Full path to the SQLite database file

The project structure:
    ROOT/
    ├── accessdb/      # Package code
    │   └── migrations/  # Alembic environment and revisions
    ├── data/          # Database file
    └── logs/          # Application logs
"""
# --- Annotations ---
from __future__ import annotations

# --- Standard library imports ---
import os
import sys
from pathlib import Path


def _get_project_root() -> Path:
    """
    Determine project root directory.

    Assumes this file is at ROOT/accessdb/core/paths.py and navigates up
    the directory tree to find ROOT.

    Returns:
        Path object for project root

    Raises:
        RuntimeError: If project root cannot be determined or validated
    """
    current_file = Path(__file__).resolve()

    # Navigate up: paths.py -> core/ -> accessdb/ -> ROOT/
    root = current_file.parent.parent.parent

    if not (root / "accessdb").is_dir():
        raise RuntimeError(
            f"Cannot determine valid project root. "
            f"Expected {root / 'accessdb'} to exist. "
            f"Current file: {current_file}"
        )

    return root


# ----- Project directory -----
ROOT: Path = _get_project_root()
PACKAGE_DIR = ROOT / "accessdb"
DATA_DIR = Path(os.environ.get("ACCESSDB_DATA_DIR", ROOT / "data")).expanduser()

# --- Database ---
ALEMBIC_DIR = PACKAGE_DIR / "migrations"
ALEMBIC_INI = ROOT / "alembic.ini"
DB_PATH = Path(
    os.environ.get("ACCESSDB_DB_PATH", DATA_DIR / "accessdb.db")
).expanduser()

# ---- Logs ----
LOG_DIR = DATA_DIR / "logs"


# ----- Path Validation -----
def _validate_critical_paths() -> None:
    """
    Warn about missing critical paths without failing the import.
    """
    critical_paths = [
        (ROOT, "project root"),
        (PACKAGE_DIR, "package directory"),
    ]

    missing_paths = [
        f"{description} ({path})"
        for path, description in critical_paths
        if not path.exists()
    ]

    if missing_paths:
        print(
            "Warning: Critical paths missing:\n  " + "\n  ".join(missing_paths),
            file=sys.stderr,
        )


_validate_critical_paths()
