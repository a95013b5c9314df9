"""Logging setup for the pancheck CLI and pipeline."""
import logging
import logging.config
from datetime import datetime
from pathlib import Path
from typing import Optional, Tuple

LOGGER_NAME = "pancheck"
SUMMARY_LOGGER_NAME = f"{LOGGER_NAME}.summary"
DETAILED_FORMAT = "{asctime} {levelname:<7} {name} - {message}"


def _handlers(log_path: str, console: bool, console_level: str, quiet_console: bool) -> dict:
    handlers = {
        "file": {
            "class": "logging.FileHandler",
            "formatter": "detailed",
            "filename": log_path,
            "encoding": "utf-8",
            "mode": "w",
            "level": "DEBUG",
        },
        # same file, opened after "file" so it appends
        "summary_file": {
            "class": "logging.FileHandler",
            "formatter": "summary",
            "filename": log_path,
            "encoding": "utf-8",
            "mode": "a",
            "level": "INFO",
        },
    }
    if console:
        handlers["console"] = {
            "class": "logging.StreamHandler",
            "formatter": "brief",
            "level": "ERROR" if quiet_console else console_level,
        }
    return handlers


def setup_logging(
    log_dir: str = "./logs",
    console: bool = True,
    level: str = "INFO",
    quiet_console: bool = False,
    console_level: Optional[str] = None,
    file_format: str = DETAILED_FORMAT,
) -> Tuple[logging.Logger, logging.Logger]:
    """
    Route the ``pancheck`` logger tree to a timestamped file and the console.

    Args:
        log_dir: Directory receiving ``pancheck_<timestamp>.log``
        console: Attach a stderr handler at all
        level: Level of the ``pancheck`` logger
        quiet_console: Console shows only summary-logger errors
        console_level: Console threshold, defaults to ``level``
        file_format: ``{``-style format of the main log file records

    Returns:
        (logger, summary_logger)
    """
    Path(log_dir).mkdir(parents=True, exist_ok=True)
    stamp = datetime.now().strftime("%Y%m%d_%H%M%S")
    log_path = str(Path(log_dir) / f"{LOGGER_NAME}_{stamp}.log")

    console_level = (console_level or level).upper()
    main_handlers = ["file"]
    summary_handlers = ["summary_file"]
    if console:
        summary_handlers.append("console")
        if not quiet_console:
            main_handlers.append("console")

    logging.config.dictConfig({
        "version": 1,
        "disable_existing_loggers": False,
        "formatters": {
            "detailed": {"format": file_format, "style": "{"},
            "summary": {"format": "{asctime} SUMMARY - {message}", "style": "{"},
            "brief": {"format": "{levelname:<7} {message}", "style": "{"},
        },
        "handlers": _handlers(log_path, console, console_level, quiet_console),
        "loggers": {
            LOGGER_NAME: {"level": level.upper(), "handlers": main_handlers, "propagate": False},
            SUMMARY_LOGGER_NAME: {"level": "INFO", "handlers": summary_handlers, "propagate": False},
        },
        "root": {"handlers": []},
    })
    logging.captureWarnings(True)

    logger = logging.getLogger(LOGGER_NAME)
    logger.info("Logging initialised. File: %s", log_path)
    return logger, logging.getLogger(SUMMARY_LOGGER_NAME)
