from __future__ import annotations
import os
import sqlite3
import sys
from pathlib import Path

DB_NAME = "timecalc.sqlite3"


def data_dir(app_name: str = "TimeCalculator") -> Path:
    home = Path.home()
    if sys.platform == "darwin":
        base = home / "Library" / "Application Support"
    elif sys.platform.startswith("win"):
        base = Path(os.environ.get("APPDATA", str(home)))
    else:
        base = home / ".local" / "share"
    d = base / app_name
    d.mkdir(parents=True, exist_ok=True)
    return d


def db_path() -> Path:
    return data_dir() / DB_NAME


def connect(path: Path | str | None = None) -> sqlite3.Connection:
    conn = sqlite3.connect(path if path is not None else db_path())
    conn.row_factory = sqlite3.Row
    return conn


def migrate(conn: sqlite3.Connection) -> None:
    # Configuration only. Intervals are never stored.
    conn.executescript(
        """
        CREATE TABLE IF NOT EXISTS settings (
            key TEXT PRIMARY KEY,
            value TEXT NOT NULL
        );
        """
    )

    defaults = {
        "cutoffs": "15:00,17:00,19:00",  # HH:MM, comma separated
        "countdown_interval_ms": "1000",
        "clock_refresh_ms": "60000",
        "cascade": "1",
    }
    for key, value in defaults.items():
        conn.execute("INSERT OR IGNORE INTO settings(key,value) VALUES(?,?)", (key, value))

    conn.commit()
