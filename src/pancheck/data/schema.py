"""Schema of the PAN results database"""
import sqlite3

TABLES = (
    "stg_pan_numbers_dataset",
    "pan_numbers_dataset_cleaned",
    "pan_classifications",
    "pan_summary",
)


def create_schema(con: sqlite3.Connection, fresh: bool = False) -> sqlite3.Connection:
    """
    Create the staging, cleaned, classification and summary tables if missing.

    With ``fresh`` every table and the view are dropped first, including the
    summary history.
    """
    with con:
        if fresh:
            con.executescript("""
                DROP VIEW IF EXISTS vw_valid_invalid_pans;
                DROP TABLE IF EXISTS pan_classifications;
                DROP TABLE IF EXISTS pan_numbers_dataset_cleaned;
                DROP TABLE IF EXISTS stg_pan_numbers_dataset;
                DROP TABLE IF EXISTS pan_summary;
            """)

        con.executescript("""
            -- Raw records as loaded; NULL and blank values are kept
            CREATE TABLE IF NOT EXISTS stg_pan_numbers_dataset (
                pan_number TEXT NULL
            );

            -- Trimmed, upper-cased, non-blank and distinct
            CREATE TABLE IF NOT EXISTS pan_numbers_dataset_cleaned (
                pan_number TEXT PRIMARY KEY
            );

            CREATE TABLE IF NOT EXISTS pan_classifications (
                pan_number TEXT PRIMARY KEY,
                status     TEXT NOT NULL CHECK (status IN ('Valid PAN', 'Invalid PAN')),
                details    TEXT
            );

            CREATE TABLE IF NOT EXISTS pan_summary (
                run_id                  INTEGER PRIMARY KEY,
                run_tag                 TEXT,
                created_at              TEXT NOT NULL DEFAULT CURRENT_TIMESTAMP,
                total_processed_records INTEGER NOT NULL,
                total_valid_pans        INTEGER NOT NULL,
                total_invalid_pans      INTEGER NOT NULL,
                missing_incomplete_pans INTEGER NOT NULL CHECK (missing_incomplete_pans >= 0)
            );

            CREATE INDEX IF NOT EXISTS idx_pan_classifications_status
              ON pan_classifications(status);

            CREATE VIEW IF NOT EXISTS vw_valid_invalid_pans AS
              SELECT pan_number, status FROM pan_classifications;
        """)
    return con
