import pytest

from pancheck.data.sources import read_csv_records, read_records, read_text_records
from pancheck.domain.exceptions import InputProviderError


class TestReadTextRecords:
    def test_lines(self, write_text):
        path = write_text(["abcde1234f", " ABCDE1234F ", "", "KXRPT2045M"])
        assert read_text_records(path) == ["abcde1234f", " ABCDE1234F ", "", "KXRPT2045M"]

    def test_crlf(self, tmp_path):
        path = tmp_path / "win.txt"
        path.write_bytes(b"A\r\nB\r\n")
        assert read_text_records(path) == ["A", "B"]

    def test_missing_file(self, tmp_path):
        with pytest.raises(InputProviderError):
            read_text_records(tmp_path / "nope.txt")

    def test_bad_encoding(self, tmp_path):
        path = tmp_path / "latin.txt"
        path.write_bytes(b"\xff\xfe\xfa\n")
        with pytest.raises(InputProviderError):
            read_text_records(path, encoding="utf-8")

    def test_leading_bom_dropped(self, tmp_path):
        path = tmp_path / "bom.txt"
        path.write_bytes(b"\xef\xbb\xbfKXRPT2045M\r\nAB1234\r\n")
        assert read_text_records(path) == ["KXRPT2045M", "AB1234"]


class TestReadCsvRecords:
    def test_empty_cells_are_null(self, write_csv, scenario_raw):
        path = write_csv(scenario_raw)
        assert read_csv_records(path) == ["abcde1234f", " ABCDE1234F ", None, None]

    def test_custom_column(self, write_csv):
        path = write_csv(["KXRPT2045M"], column="pan")
        assert read_csv_records(path, column="pan") == ["KXRPT2045M"]

    def test_missing_column(self, write_csv):
        path = write_csv(["KXRPT2045M"], column="pan")
        with pytest.raises(InputProviderError) as exc:
            read_csv_records(path)
        assert exc.value.context["columns"] == ["id", "pan"]

    def test_blank_cell_kept(self, write_csv):
        path = write_csv(["   "])
        assert read_csv_records(path) == ["   "]

    def test_bom_header(self, tmp_path):
        path = tmp_path / "excel.csv"
        path.write_bytes(b"\xef\xbb\xbfpan_number,id\r\nKXRPT2045M,1\r\n,2\r\n")
        assert read_csv_records(path) == ["KXRPT2045M", None]

    def test_bom_header_single_column(self, tmp_path):
        path = tmp_path / "excel.csv"
        path.write_bytes(b"\xef\xbb\xbfpan_number\nKXRPT2045M\n")
        assert read_records(path) == ["KXRPT2045M"]


class TestReadRecords:
    def test_dispatch(self, write_text, write_csv):
        assert read_records(write_text(["A"])) == ["A"]
        assert read_records(write_csv(["A", None])) == ["A", None]

    def test_extension_case_insensitive(self, tmp_path):
        path = tmp_path / "PANS.TXT"
        path.write_text("A\n", encoding="utf-8")
        assert read_records(path) == ["A"]

    def test_unsupported(self, tmp_path):
        path = tmp_path / "pans.xlsx"
        path.write_text("", encoding="utf-8")
        with pytest.raises(InputProviderError):
            read_records(path)
