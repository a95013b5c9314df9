"""File-based input providers for raw PAN records."""
import csv
import logging
from pathlib import Path
from typing import List, Optional

from pancheck.domain.exceptions import InputProviderError

logger = logging.getLogger(__name__)

DEFAULT_COLUMN = "pan_number"
# decodes plain UTF-8 too; a leading byte-order mark is dropped
DEFAULT_ENCODING = "utf-8-sig"
TEXT_EXTENSIONS = (".txt",)
CSV_EXTENSIONS = (".csv",)
SUPPORTED_EXTENSIONS = TEXT_EXTENSIONS + CSV_EXTENSIONS


def read_text_records(path: str | Path, encoding: str = DEFAULT_ENCODING) -> List[Optional[str]]:
    """
    One raw record per line, line terminators removed.

    Empty lines are kept as blank records; a text file cannot express NULL.
    """
    try:
        with open(path, "r", encoding=encoding, newline=None) as fh:
            records = [line.rstrip("\n") for line in fh]
    except (OSError, UnicodeDecodeError) as e:
        raise InputProviderError(f"Could not read {path}: {e}", source=str(path)) from e
    logger.debug("Read %d records from %s", len(records), path)
    return records


def read_csv_records(path: str | Path, column: str = DEFAULT_COLUMN, encoding: str = DEFAULT_ENCODING) -> List[Optional[str]]:
    """
    Values of ``column`` from a CSV file with a header row.

    Empty cells and short rows become None.
    """
    try:
        with open(path, "r", encoding=encoding, newline="") as fh:
            reader = csv.DictReader(fh)
            if reader.fieldnames is None or column not in reader.fieldnames:
                raise InputProviderError(
                    f"Column '{column}' not found in {path}",
                    source=str(path)
                ).add_context('columns', list(reader.fieldnames or []))\
                 .add_suggestion("Pass the PAN column name with --column")
            records = [row.get(column) or None for row in reader]
    except InputProviderError:
        raise
    except (OSError, UnicodeDecodeError, csv.Error) as e:
        raise InputProviderError(f"Could not read {path}: {e}", source=str(path)) from e
    logger.debug("Read %d records from column %s of %s", len(records), column, path)
    return records


def read_records(path: str | Path, column: str = DEFAULT_COLUMN, encoding: str = DEFAULT_ENCODING) -> List[Optional[str]]:
    """Dispatch on file extension."""
    suffix = Path(path).suffix.lower()
    if suffix in CSV_EXTENSIONS:
        return read_csv_records(path, column=column, encoding=encoding)
    if suffix in TEXT_EXTENSIONS:
        return read_text_records(path, encoding=encoding)
    raise InputProviderError(
        f"Unsupported input extension '{suffix}' for {path}",
        source=str(path)
    ).add_suggestion(f"Use one of: {', '.join(SUPPORTED_EXTENSIONS)}")
