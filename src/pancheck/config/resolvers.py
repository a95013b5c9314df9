# config/resolvers.py
from pathlib import Path
from typing import Optional
from platformdirs import user_data_dir

from pancheck.data.sources import SUPPORTED_EXTENSIONS
from pancheck.domain.exceptions import InputFileNotFoundError, InvalidFileFormatError

APP = "pancheck"
SCHEMA_VERSION = 1  # increment when schema changes

def default_output_path() -> Path:
    p = Path(user_data_dir(APP))
    p.mkdir(parents=True, exist_ok=True)
    return p / f"pan-results-v{SCHEMA_VERSION}.sqlite"

def resolve_output_path(output_path: Optional[str]) -> Path:
    """Explicit path if given, else the per-user default; parent is created."""
    if not output_path:
        return default_output_path()
    p = Path(output_path).expanduser()
    p.parent.mkdir(parents=True, exist_ok=True)
    return p

def resolve_input_file(input_file: str) -> Path:
    """Validate an input file path and its extension."""
    p = Path(input_file).expanduser()
    if not p.is_file():
        raise InputFileNotFoundError(str(p))
    if p.suffix.lower() not in SUPPORTED_EXTENSIONS:
        raise InvalidFileFormatError(
            str(p),
            expected_formats=list(SUPPORTED_EXTENSIONS),
            actual_format=p.suffix.lower() or None
        )
    return p.resolve()
