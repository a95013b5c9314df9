import sqlite3

import pytest

from pancheck.data.db import connect
from pancheck.data.schema import TABLES, create_schema


@pytest.fixture
def conn(tmp_path):
    con = connect(tmp_path / "schema.sqlite")
    yield con
    con.close()


def _objects(conn, kind):
    rows = conn.execute("SELECT name FROM sqlite_master WHERE type = ?;", (kind,)).fetchall()
    return {r[0] for r in rows}


class TestCreateSchema:
    def test_tables_and_view(self, conn):
        create_schema(conn)
        assert set(TABLES) <= _objects(conn, "table")
        assert "vw_valid_invalid_pans" in _objects(conn, "view")
        assert "idx_pan_classifications_status" in _objects(conn, "index")

    def test_idempotent(self, conn):
        create_schema(conn)
        conn.execute("INSERT INTO pan_numbers_dataset_cleaned VALUES ('KXRPT2045M');")
        conn.commit()
        create_schema(conn)
        assert conn.execute("SELECT COUNT(*) FROM pan_numbers_dataset_cleaned;").fetchone()[0] == 1

    def test_fresh_drops_data(self, conn):
        create_schema(conn)
        conn.execute("""
            INSERT INTO pan_summary (total_processed_records, total_valid_pans,
                                     total_invalid_pans, missing_incomplete_pans)
            VALUES (1, 1, 0, 0);
        """)
        conn.commit()
        create_schema(conn, fresh=True)
        assert conn.execute("SELECT COUNT(*) FROM pan_summary;").fetchone()[0] == 0

    def test_status_check(self, conn):
        create_schema(conn)
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO pan_classifications (pan_number, status) VALUES ('X', 'Maybe');")

    def test_missing_count_check(self, conn):
        create_schema(conn)
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("""
                INSERT INTO pan_summary (total_processed_records, total_valid_pans,
                                         total_invalid_pans, missing_incomplete_pans)
                VALUES (1, 1, 1, -1);
            """)

    def test_cleaned_is_distinct(self, conn):
        create_schema(conn)
        conn.execute("INSERT INTO pan_numbers_dataset_cleaned VALUES ('A');")
        with pytest.raises(sqlite3.IntegrityError):
            conn.execute("INSERT INTO pan_numbers_dataset_cleaned VALUES ('A');")

    def test_staging_accepts_null(self, conn):
        create_schema(conn)
        conn.execute("INSERT INTO stg_pan_numbers_dataset VALUES (NULL);")
        assert conn.execute("SELECT pan_number FROM stg_pan_numbers_dataset;").fetchone() == (None,)

