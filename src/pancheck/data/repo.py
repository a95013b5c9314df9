# data/repo.py
"""Reads raw records from, and writes results to, the PAN database."""
from typing import Iterable, List, Optional, Tuple
from itertools import islice
import sqlite3

from pancheck.domain.models import ClassificationResult, Status, SummaryCounts
from pancheck.domain.exceptions import DatabaseError, InputProviderError, OutputSinkError

def _executemany_chunked(conn: sqlite3.Connection, sql: str, rows: Iterable[Tuple], chunk_size: int) -> int:
    it = iter(rows)
    written = 0
    while True:
        batch = list(islice(it, chunk_size))
        if not batch:
            break
        conn.executemany(sql, batch)
        written += len(batch)
    return written


def load_raw_records(conn: sqlite3.Connection) -> List[Optional[str]]:
    """Return every staged raw record in insertion order, NULLs included."""
    try:
        rows = conn.execute("""
            SELECT pan_number
            FROM stg_pan_numbers_dataset
            ORDER BY rowid;
        """).fetchall()
    except sqlite3.Error as e:
        raise InputProviderError(
            f"Could not read staged records: {e}",
            source="stg_pan_numbers_dataset"
        ) from e
    return [row[0] for row in rows]


def _write_raw(conn: sqlite3.Connection, raw_records: Iterable[Optional[str]], chunk_size: int) -> int:
    conn.execute("DELETE FROM stg_pan_numbers_dataset;")
    sql = "INSERT INTO stg_pan_numbers_dataset (pan_number) VALUES (?);"
    return _executemany_chunked(conn, sql, ((r,) for r in raw_records), chunk_size)


def _write_cleaned(conn: sqlite3.Connection, cleaned: Iterable[str], chunk_size: int) -> int:
    conn.execute("DELETE FROM pan_numbers_dataset_cleaned;")
    sql = "INSERT INTO pan_numbers_dataset_cleaned (pan_number) VALUES (?);"
    return _executemany_chunked(conn, sql, ((v,) for v in sorted(cleaned)), chunk_size)


def _write_classifications(
    conn: sqlite3.Connection,
    results: Iterable[ClassificationResult],
    chunk_size: int,
    include_details: bool,
) -> int:
    conn.execute("DELETE FROM pan_classifications;")
    sql = """
    INSERT INTO pan_classifications (pan_number, status, details)
    VALUES (?, ?, ?);
    """
    rows = (r.to_row(include_details) for r in sorted(results, key=lambda r: r.pan_number))
    return _executemany_chunked(conn, sql, rows, chunk_size)


def _write_summary(conn: sqlite3.Connection, counts: SummaryCounts, run_tag: Optional[str]) -> int:
    cur = conn.execute("""
        INSERT INTO pan_summary
          (run_tag, total_processed_records, total_valid_pans,
           total_invalid_pans, missing_incomplete_pans)
        VALUES (?, ?, ?, ?, ?);
    """, (
        run_tag,
        counts.total_processed,
        counts.total_valid,
        counts.total_invalid,
        counts.missing_or_incomplete,
    ))
    return cur.lastrowid


# The _write_* helpers never commit; each public writer below owns one transaction.

def stage_raw_records(conn: sqlite3.Connection, raw_records: Iterable[Optional[str]], chunk_size: int = 2000) -> int:
    """Replace the staging table with ``raw_records``. Uses a single transaction."""
    try:
        with conn:
            return _write_raw(conn, raw_records, chunk_size)
    except sqlite3.Error as e:
        raise OutputSinkError(
            f"Could not stage raw records: {e}",
            sink="stg_pan_numbers_dataset",
            operation="stage"
        ) from e


def store_cleaned(conn: sqlite3.Connection, cleaned: Iterable[str], chunk_size: int = 2000) -> int:
    """Replace the cleaned table with ``cleaned``."""
    try:
        with conn:
            return _write_cleaned(conn, cleaned, chunk_size)
    except sqlite3.Error as e:
        raise OutputSinkError(
            f"Could not store cleaned records: {e}",
            sink="pan_numbers_dataset_cleaned",
            operation="store_cleaned"
        ) from e


def store_classifications(
    conn: sqlite3.Connection,
    results: Iterable[ClassificationResult],
    chunk_size: int = 2000,
    include_details: bool = False,
) -> int:
    """Replace the classification table with ``results``."""
    try:
        with conn:
            return _write_classifications(conn, results, chunk_size, include_details)
    except sqlite3.Error as e:
        raise OutputSinkError(
            f"Could not store classifications: {e}",
            sink="pan_classifications",
            operation="store_classifications"
        ) from e


def store_summary(conn: sqlite3.Connection, counts: SummaryCounts, run_tag: Optional[str] = None) -> int:
    """Append a summary row and return its run_id."""
    try:
        with conn:
            return _write_summary(conn, counts, run_tag)
    except sqlite3.Error as e:
        raise OutputSinkError(
            f"Could not store summary: {e}",
            sink="pan_summary",
            operation="store_summary"
        ) from e


def store_run(
    conn: sqlite3.Connection,
    raw_records: Iterable[Optional[str]],
    cleaned: Iterable[str],
    results: Iterable[ClassificationResult],
    counts: SummaryCounts,
    *,
    run_tag: Optional[str] = None,
    chunk_size: int = 2000,
    include_details: bool = False,
) -> int:
    """
    Replace the per-run tables and append the summary row in ONE transaction.

    Either every table reflects the new run or, on any error, the database
    is left exactly as the previous run wrote it.

    Returns:
        run_id of the new summary row
    """
    try:
        with conn:
            _write_raw(conn, raw_records, chunk_size)
            _write_cleaned(conn, cleaned, chunk_size)
            _write_classifications(conn, results, chunk_size, include_details)
            return _write_summary(conn, counts, run_tag)
    except sqlite3.Error as e:
        raise OutputSinkError(
            f"Could not store run results: {e}",
            sink="pan_database",
            operation="store_run"
        ) from e


def fetch_latest_summary(conn: sqlite3.Connection) -> Optional[Tuple[int, Optional[str], str, SummaryCounts]]:
    """
    Returns (run_id, run_tag, created_at, SummaryCounts) of the newest run,
    or None when no run has been stored.
    """
    try:
        row = conn.execute("""
            SELECT run_id, run_tag, created_at,
                   total_processed_records, total_valid_pans,
                   total_invalid_pans, missing_incomplete_pans
            FROM pan_summary
            ORDER BY run_id DESC
            LIMIT 1;
        """).fetchone()
    except sqlite3.Error as e:
        raise DatabaseError(f"Could not read summary: {e}") from e
    if row is None:
        return None
    run_id, run_tag, created_at, total, valid, invalid, missing = row
    return run_id, run_tag, created_at, SummaryCounts(
        total_processed=total,
        total_valid=valid,
        total_invalid=invalid,
        missing_or_incomplete=missing,
    )


def fetch_classifications(conn: sqlite3.Connection, status: Optional[Status] = None) -> List[Tuple[str, Status]]:
    """Returns [(pan_number, Status), ...] ordered by pan_number."""
    sql = "SELECT pan_number, status FROM vw_valid_invalid_pans"
    params: Tuple = ()
    if status is not None:
        sql += " WHERE status = ?"
        params = (status.value,)
    sql += " ORDER BY pan_number;"
    try:
        rows = conn.execute(sql, params).fetchall()
    except sqlite3.Error as e:
        raise DatabaseError(f"Could not read classifications: {e}") from e
    return [(pan, Status.from_label(label)) for pan, label in rows]
