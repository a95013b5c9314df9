import csv
import pytest

import pancheck.config.settings as settings_module


@pytest.fixture(autouse=True)
def _quiet_pipeline(monkeypatch):
    """No progress bars, no leftover global settings between tests."""
    monkeypatch.setenv("NO_PROGRESS", "1")
    settings_module.reset_settings()
    yield
    settings_module.reset_settings()


@pytest.fixture
def scenario_raw():
    """Raw records of the dedup/trim/upper scenario."""
    return ["abcde1234f", " ABCDE1234F ", None, ""]


@pytest.fixture
def mixed_raw():
    return [
        "KXRPT2045M",      # valid
        " kxrpt2045m ",    # duplicate after cleaning
        "AABCD1234Z",      # adjacent repetition
        "AB1234",          # wrong length
        "ABCDE1234E",      # sequential letters
        "KXRPT1234M",      # sequential digits
        "BQWPM7391K",      # valid
        None,
        "   ",
        "",
    ]


@pytest.fixture
def write_text(tmp_path):
    def _write(lines, name="pans.txt"):
        path = tmp_path / name
        path.write_text("\n".join(lines) + "\n", encoding="utf-8")
        return path
    return _write


@pytest.fixture
def write_csv(tmp_path):
    def _write(values, name="pans.csv", column="pan_number"):
        path = tmp_path / name
        with open(path, "w", encoding="utf-8", newline="") as fh:
            writer = csv.writer(fh)
            writer.writerow(["id", column])
            for i, value in enumerate(values, 1):
                writer.writerow([i, "" if value is None else value])
        return path
    return _write
