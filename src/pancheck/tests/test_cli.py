import logging

import pytest

from pancheck.cli import build_parser, main
from pancheck.utils.logging import LOGGER_NAME, SUMMARY_LOGGER_NAME


@pytest.fixture(autouse=True)
def restore_loggers():
    yield
    for name in (LOGGER_NAME, SUMMARY_LOGGER_NAME):
        lg = logging.getLogger(name)
        for handler in list(lg.handlers):
            handler.close()
            lg.removeHandler(handler)
        lg.propagate = True
        lg.setLevel(logging.NOTSET)


def _exit_code(argv):
    with pytest.raises(SystemExit) as exc:
        main(argv)
    return exc.value.code


@pytest.fixture
def log_file(tmp_path):
    (tmp_path / "logs").mkdir()
    return str(tmp_path / "logs" / "run.log")


class TestParser:
    def test_run_requires_an_input(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["run"])

    def test_run_inputs_are_exclusive(self):
        with pytest.raises(SystemExit):
            build_parser().parse_args(["run", "-i", "a.txt", "--source-db", "b.sqlite"])

    def test_run_options(self):
        args = build_parser().parse_args([
            "run", "-i", "a.txt", "-o", "out.sqlite", "--chunk-size", "10",
            "--max-workers", "2", "--details", "--run-tag", "x",
        ])
        assert args.cmd == "run"
        assert args.chunk_size == 10
        assert args.max_workers == 2
        assert args.details is True
        assert args.parallel_threshold is None


class TestCheckCommand:
    def test_valid(self, capsys):
        assert _exit_code(["check", "kxrpt2045m"]) == 0
        assert capsys.readouterr().out.strip() == "KXRPT2045M\tValid PAN"

    def test_invalid(self, capsys):
        assert _exit_code(["check", "KXRPT2045M", "AABCD1234Z"]) == 1
        lines = capsys.readouterr().out.splitlines()
        assert lines[0] == "KXRPT2045M\tValid PAN"
        assert lines[1] == "AABCD1234Z\tInvalid PAN\t(adjacent_repetition, sequential_digits)"

    def test_blank(self, capsys):
        assert _exit_code(["check", "  "]) == 1
        assert "Missing" in capsys.readouterr().out


class TestProfileCommand:
    def test_profile(self, write_text, capsys):
        path = write_text(["abc", "abc", " ABC", ""])
        assert _exit_code(["profile", "-i", str(path)]) == 0
        out = capsys.readouterr().out
        assert "Total records:        4" in out
        assert "Duplicate records:    1" in out
        assert "'abc': 2" in out

    def test_missing_file(self, tmp_path):
        assert _exit_code(["profile", "-i", str(tmp_path / "nope.txt")]) == 1

    def test_encoding_option(self, tmp_path, capsys):
        path = tmp_path / "latin.txt"
        path.write_bytes("ÄBCDE1234F\nÄBCDE1234F\n".encode("latin-1"))
        assert _exit_code(["profile", "-i", str(path), "--encoding", "latin-1"]) == 0
        assert "'ÄBCDE1234F': 2" in capsys.readouterr().out

    def test_undecodable_without_encoding(self, tmp_path):
        path = tmp_path / "latin.txt"
        path.write_bytes("ÄBCDE1234F\n".encode("latin-1"))
        assert _exit_code(["profile", "-i", str(path)]) == 1

    def test_encoding_default(self):
        args = build_parser().parse_args(["profile", "-i", "a.txt"])
        assert args.encoding == "utf-8-sig"


class TestRunAndReport:
    def test_run_then_report(self, tmp_path, write_text, log_file, capsys):
        path = write_text(["abcde1234f", " ABCDE1234F ", "", "KXRPT2045M"])
        out_db = tmp_path / "out.sqlite"

        code = _exit_code([
            "run", "-i", str(path), "-o", str(out_db), "--log-file", log_file, "--run-tag", "first",
        ])
        assert code == 0
        out = capsys.readouterr().out
        assert "Total valid PANs" in out
        assert f"Results: {out_db} (run 1)" in out

        assert _exit_code(["report", "-o", str(out_db)]) == 0
        report = capsys.readouterr().out
        assert report.startswith("Run 1 [first] at ")
        assert "Missing/incomplete PANs" in report

    def test_dry_run(self, tmp_path, write_text, log_file, capsys):
        out_db = tmp_path / "out.sqlite"
        code = _exit_code([
            "run", "-i", str(write_text(["KXRPT2045M"])), "-o", str(out_db),
            "--log-file", log_file, "--dry-run",
        ])
        assert code == 0
        assert "DRY RUN SUMMARY" in capsys.readouterr().out
        assert not out_db.exists()

    @pytest.mark.parametrize("extra, level", [([], logging.INFO), (["--debug"], logging.DEBUG)])
    def test_run_logger_level_from_settings(self, tmp_path, write_text, log_file, extra, level):
        code = _exit_code([
            "run", "-i", str(write_text(["KXRPT2045M"])), "-o", str(tmp_path / "out.sqlite"),
            "--log-file", log_file, "--dry-run", *extra,
        ])
        assert code == 0
        assert logging.getLogger(LOGGER_NAME).level == level

    def test_run_log_file_uses_settings_format(self, tmp_path, write_text, log_file):
        code = _exit_code([
            "run", "-i", str(write_text(["KXRPT2045M"])), "-o", str(tmp_path / "out.sqlite"),
            "--log-file", log_file, "--dry-run",
        ])
        assert code == 0
        for handler in logging.getLogger(LOGGER_NAME).handlers:
            handler.flush()
        text = next((tmp_path / "logs").glob("pancheck_*.log")).read_text(encoding="utf-8")
        assert "INFO    pancheck - DRY RUN MODE" in text

    def test_run_missing_input(self, tmp_path, log_file):
        code = _exit_code([
            "run", "-i", str(tmp_path / "missing.txt"), "-o", str(tmp_path / "out.sqlite"),
            "--log-file", log_file,
        ])
        assert code == 1

    def test_run_bad_chunk_size(self, tmp_path, write_text, log_file):
        code = _exit_code([
            "run", "-i", str(write_text(["A"])), "-o", str(tmp_path / "out.sqlite"),
            "--log-file", log_file, "--chunk-size", "0",
        ])
        assert code == 1

    def test_report_missing_db(self, tmp_path):
        assert _exit_code(["report", "-o", str(tmp_path / "none.sqlite")]) == 1

    def test_report_empty_db(self, tmp_path, capsys):
        db_path = tmp_path / "empty.sqlite"
        db_path.write_bytes(b"")
        assert _exit_code(["report", "-o", str(db_path)]) == 1
        assert "No runs stored" in capsys.readouterr().out
