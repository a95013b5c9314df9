"""Typed settings for a pancheck run.

Each section is a dataclass with a ``validate()`` that raises
PipelineConfigurationError naming the offending field. ``Settings`` groups
the sections and adds the cross-section rules (exactly one raw input source,
an output database).
"""

import logging
from dataclasses import dataclass, field, asdict
from enum import Enum
from pathlib import Path
from typing import Optional, Dict, Any

from pancheck.domain.exceptions import PipelineConfigurationError as ConfigurationError

logger = logging.getLogger(__name__)


class LogLevel(Enum):
    DEBUG = "DEBUG"
    INFO = "INFO"
    WARNING = "WARNING"
    ERROR = "ERROR"
    CRITICAL = "CRITICAL"


@dataclass
class ProcessingSettings:
    """How classification work is split up."""
    chunk_size: int = 2000
    max_workers: int = 1
    parallel_threshold: int = 50_000

    def validate(self) -> None:
        for name in ("chunk_size", "max_workers"):
            if getattr(self, name) < 1:
                raise ConfigurationError(
                    f"{name} must be positive, got {getattr(self, name)}",
                    config_field=f"processing.{name}",
                    expected_type="positive integer"
                )
        if self.parallel_threshold < 0:
            raise ConfigurationError(
                f"parallel_threshold must not be negative, got {self.parallel_threshold}",
                config_field="processing.parallel_threshold",
                expected_type="non-negative integer"
            )


@dataclass
class DatabaseSettings:
    """Results database and optional source database."""
    output_path: Optional[Path] = None
    source_path: Optional[Path] = None
    fresh_output: bool = False
    pragma_settings: Dict[str, Any] = field(default_factory=lambda: {
        "journal_mode": "DELETE",
        "synchronous": "NORMAL",
        "temp_store": "MEMORY"
    })

    def validate(self) -> None:
        if self.output_path and not self.output_path.parent.is_dir():
            raise ConfigurationError(
                f"No directory for the results database: {self.output_path.parent}",
                config_field="database.output_path"
            ).add_suggestion("Pass an --sqlite-output path inside an existing directory")

        if self.source_path and not self.source_path.is_file():
            raise ConfigurationError(
                f"No source database at {self.source_path}",
                config_field="database.source_path"
            ).add_suggestion("Point --source-db at an existing SQLite file")


@dataclass
class InputSettings:
    """Raw records read from a text or CSV file."""
    input_file: Optional[Path] = None
    column: str = "pan_number"
    encoding: str = "utf-8-sig"

    def validate(self) -> None:
        if not self.column:
            raise ConfigurationError(
                "The CSV column name is empty",
                config_field="input.column"
            )


@dataclass
class OutputSettings:
    include_details: bool = False

    def validate(self) -> None:
        # nothing to check, kept for symmetry with the other sections
        pass


@dataclass
class LoggingSettings:
    level: LogLevel = LogLevel.INFO
    file_path: Optional[Path] = None
    console_output: bool = True
    # str.format style, used for the log file
    format_string: str = "{asctime} {levelname:<7} {name} - {message}"

    def validate(self) -> None:
        if self.file_path and not self.file_path.parent.is_dir():
            raise ConfigurationError(
                f"No directory for the log file: {self.file_path.parent}",
                config_field="logging.file_path"
            ).add_suggestion("Create the directory first or drop --log-file")
        if "{message}" not in self.format_string:
            raise ConfigurationError(
                f"Log format has no {{message}} field: {self.format_string!r}",
                config_field="logging.format_string",
                expected_type="str.format style template"
            )


def _plain(value: Any) -> Any:
    """Make asdict() output printable: paths to str, enums to their value."""
    if isinstance(value, dict):
        return {k: _plain(v) for k, v in value.items()}
    if isinstance(value, Path):
        return str(value)
    if isinstance(value, Enum):
        return value.value
    return value


@dataclass
class Settings:
    """Everything a ``pancheck run`` needs."""

    processing: ProcessingSettings = field(default_factory=ProcessingSettings)
    database: DatabaseSettings = field(default_factory=DatabaseSettings)
    input: InputSettings = field(default_factory=InputSettings)
    output: OutputSettings = field(default_factory=OutputSettings)
    logging: LoggingSettings = field(default_factory=LoggingSettings)

    run_tag: Optional[str] = None
    debug_mode: bool = False
    dry_run: bool = False

    def validate(self) -> None:
        """Validate every section, then the rules spanning sections."""
        try:
            for section in (self.processing, self.database, self.input, self.output, self.logging):
                section.validate()
            self._check_single_source()
            self._check_output()
        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Configuration validation failed: {e}") from e

    def _check_single_source(self) -> None:
        input_file = self.input.input_file
        source_db = self.database.source_path

        if input_file is None and source_db is None:
            raise ConfigurationError(
                "A raw input source must be specified (input file or source database)",
                config_field="input_sources"
            ).add_suggestion("Pass --input FILE or --source-db DB")

        if input_file is not None and source_db is not None:
            raise ConfigurationError(
                "Got both an input file and a source database",
                config_field="input_sources"
            ).add_suggestion("Keep only one of --input and --source-db")

        if input_file is not None and not input_file.is_file():
            raise ConfigurationError(
                f"No input file at {input_file}",
                config_field="input.input_file"
            )

    def _check_output(self) -> None:
        if not self.database.output_path:
            raise ConfigurationError(
                "No results database configured",
                config_field="database.output_path"
            ).add_suggestion("Pass --sqlite-output PATH")

    def to_dict(self) -> dict:
        """Plain nested dict of all settings, for debug logging."""
        data = _plain(asdict(self))
        runtime = {key: data.pop(key) for key in ("run_tag", "debug_mode", "dry_run")}
        data["runtime"] = runtime
        return data


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Process-wide settings installed by set_settings()."""
    if _settings is None:
        raise ConfigurationError(
            "Settings have not been set"
        ).add_suggestion("Call set_settings() during startup")
    return _settings


def set_settings(settings: Settings) -> None:
    """Validate ``settings`` and install them process-wide."""
    global _settings
    settings.validate()
    _settings = settings
    logger.info("Configuration loaded and validated successfully")


def reset_settings() -> None:
    global _settings
    _settings = None
