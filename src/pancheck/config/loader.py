"""Build Settings from argparse namespaces."""

import logging
from dataclasses import replace
from pathlib import Path

from pancheck.config.settings import Settings, LogLevel
from pancheck.config.resolvers import resolve_output_path
from pancheck.domain.exceptions import ConfigurationError

logger = logging.getLogger(__name__)

# (argument name, settings field, converter); applied when the argument is not None
_VALUE_ARGS = {
    "processing": (
        ("chunk_size", "chunk_size", int),
        ("max_workers", "max_workers", int),
        ("parallel_threshold", "parallel_threshold", int),
    ),
    "database": (
        ("source_db", "source_path", Path),
    ),
    "input": (
        ("input", "input_file", Path),
        ("column", "column", str),
        ("encoding", "encoding", str),
    ),
    "logging": (
        ("log_file", "file_path", Path),
    ),
}

# store_true flags: (argument name, section, settings field)
_FLAG_ARGS = (
    ("fresh_output", "database", "fresh_output"),
    ("details", "output", "include_details"),
)


class ConfigurationLoader:
    """Overlays CLI arguments on the dataclass defaults."""

    def load_from_cli_args(self, args) -> Settings:
        """Settings for ``args``; unset arguments keep their defaults."""
        try:
            settings = self.load_defaults()
            updates = {section: {} for section in ("processing", "database", "input", "output", "logging")}

            for section, specs in _VALUE_ARGS.items():
                for arg_name, field_name, convert in specs:
                    value = getattr(args, arg_name, None)
                    if value is not None and value != "":
                        updates[section][field_name] = convert(value)

            for arg_name, section, field_name in _FLAG_ARGS:
                if getattr(args, arg_name, False):
                    updates[section][field_name] = True

            updates["database"]["output_path"] = resolve_output_path(getattr(args, 'sqlite_output', None))
            if getattr(args, 'wal', False):
                updates["database"]["pragma_settings"] = dict(
                    settings.database.pragma_settings, journal_mode="WAL"
                )

            debug = bool(getattr(args, 'debug', False))
            if debug:
                updates["logging"]["level"] = LogLevel.DEBUG

            return replace(
                settings,
                **{section: replace(getattr(settings, section), **changes) for section, changes in updates.items()},
                run_tag=getattr(args, 'run_tag', None),
                debug_mode=debug,
                dry_run=bool(getattr(args, 'dry_run', False)),
            )

        except ConfigurationError:
            raise
        except Exception as e:
            raise ConfigurationError(f"Could not build settings from command line: {e}") from e

    def load_defaults(self) -> Settings:
        """Dataclass defaults; no input or output is set."""
        return Settings()


def configure_from_cli(args) -> Settings:
    """Load and validate settings for ``args``."""
    settings = ConfigurationLoader().load_from_cli_args(args)
    settings.validate()
    logger.debug("Settings built from command line: %s", settings.to_dict())
    return settings
