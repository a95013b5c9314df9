import sqlite3

import pytest

from pancheck.data.db import connect, connect_readonly


def _pragma(conn, name):
    return conn.execute(f"PRAGMA {name};").fetchone()[0]


class TestConnect:
    def test_defaults(self, tmp_path):
        conn = connect(tmp_path / "a.sqlite")
        try:
            assert isinstance(conn, sqlite3.Connection)
            assert _pragma(conn, "foreign_keys") == 1
            assert _pragma(conn, "busy_timeout") == 120000
            assert _pragma(conn, "journal_mode").lower() == "delete"
            assert _pragma(conn, "temp_store") == 2
        finally:
            conn.close()

    def test_wal(self, tmp_path):
        conn = connect(tmp_path / "a.sqlite", use_wal=True)
        try:
            assert _pragma(conn, "journal_mode").lower() == "wal"
            assert _pragma(conn, "synchronous") == 1
        finally:
            conn.close()

    def test_explicit_pragmas_applied_last(self, tmp_path):
        conn = connect(tmp_path / "a.sqlite", pragma_settings={"cache_size": -4000, "synchronous": "FULL"})
        try:
            assert _pragma(conn, "cache_size") == -4000
            assert _pragma(conn, "synchronous") == 2
        finally:
            conn.close()

    def test_creates_file(self, tmp_path):
        path = tmp_path / "new.sqlite"
        conn = connect(str(path))
        conn.execute("CREATE TABLE t (x INTEGER);")
        conn.commit()
        conn.close()
        assert path.exists()


class TestConnectReadonly:
    @pytest.fixture
    def wal_db(self, tmp_path):
        path = tmp_path / "source.sqlite"
        conn = connect(path, use_wal=True)
        with conn:
            conn.execute("CREATE TABLE t (x TEXT);")
            conn.execute("INSERT INTO t VALUES ('a');")
        conn.close()
        return path

    def test_reads_rows(self, wal_db):
        conn = connect_readonly(wal_db)
        try:
            assert conn.execute("SELECT x FROM t;").fetchall() == [("a",)]
            assert _pragma(conn, "busy_timeout") == 120000
        finally:
            conn.close()

    def test_keeps_journal_mode(self, wal_db):
        connect_readonly(wal_db).close()
        conn = sqlite3.connect(str(wal_db))
        try:
            assert _pragma(conn, "journal_mode").lower() == "wal"
        finally:
            conn.close()

    def test_refuses_writes(self, wal_db):
        conn = connect_readonly(wal_db)
        try:
            with pytest.raises(sqlite3.OperationalError):
                conn.execute("INSERT INTO t VALUES ('b');")
        finally:
            conn.close()

    def test_missing_file_not_created(self, tmp_path):
        path = tmp_path / "absent.sqlite"
        with pytest.raises(sqlite3.OperationalError):
            connect_readonly(path)
        assert not path.exists()
