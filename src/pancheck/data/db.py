# data/db.py
import sqlite3
from pathlib import Path
from typing import Mapping, Optional

# applied to every connection
_BASE_PRAGMAS = (
    ("foreign_keys", "ON"),
    ("busy_timeout", 120000),
)

_JOURNAL_PRAGMAS = {
    True: (("journal_mode", "WAL"), ("synchronous", "NORMAL")),
    False: (("journal_mode", "DELETE"), ("synchronous", "NORMAL"), ("temp_store", "MEMORY")),
}


def connect(db_path: str, use_wal: bool = False, pragma_settings: Optional[Mapping[str, object]] = None) -> sqlite3.Connection:
    """Open ``db_path`` with pancheck's PRAGMAs; ``pragma_settings`` override the defaults."""
    conn = sqlite3.connect(str(db_path))
    pragmas = list(_BASE_PRAGMAS) + list(_JOURNAL_PRAGMAS[bool(use_wal)])
    pragmas += list((pragma_settings or {}).items())
    for name, value in pragmas:
        conn.execute(f"PRAGMA {name} = {value};")
    return conn


def connect_readonly(db_path: str) -> sqlite3.Connection:
    """
    Open ``db_path`` read-only for loading staged records.

    Only the per-connection busy_timeout is set. Persistent PRAGMAs such as
    journal_mode are left as the database's owner configured them.
    """
    uri = Path(db_path).resolve().as_uri() + "?mode=ro"
    conn = sqlite3.connect(uri, uri=True)
    conn.execute(f"PRAGMA busy_timeout = {dict(_BASE_PRAGMAS)['busy_timeout']};")
    return conn
