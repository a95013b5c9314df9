"""Command line interface for pancheck."""

import argparse
import logging
import sys
from pathlib import Path
from typing import List, Optional

from pancheck.config.loader import configure_from_cli
from pancheck.config.settings import set_settings
from pancheck.config.integration import PipelineConfig
from pancheck.config.resolvers import resolve_input_file, resolve_output_path
from pancheck.classification.classifier import classify_one
from pancheck.data import db, repo, schema, sources
from pancheck.domain.exceptions import ConfigurationError, PanCheckError, ValidationError
from pancheck.domain.models import DataQualityReport
from pancheck.processing.cleaner import normalize
from pancheck.processing.quality import profile_records
from pancheck.reporting.summary import format_summary
from pancheck.runners.pipeline import run_pan_validation
from pancheck.utils.logging import setup_logging


def build_parser() -> argparse.ArgumentParser:
    """Build the argument parser for the pancheck CLI."""
    parser = argparse.ArgumentParser(
        prog="pancheck",
        description=(
            "Clean a list of PAN numbers, classify each as valid or invalid "
            "and report summary counts."
        ),
    )
    sub = parser.add_subparsers(dest="cmd", required=True)

    run_p = sub.add_parser("run", help="Run the cleaning and validation pipeline")

    mx = run_p.add_mutually_exclusive_group(required=True)
    mx.add_argument(
        "-i",
        "--input",
        help="Input file of raw PAN numbers (.txt: one per line, .csv: see --column).",
    )
    mx.add_argument(
        "--source-db",
        help="SQLite DB whose stg_pan_numbers_dataset table holds the raw records.",
    )
    run_p.add_argument(
        "-o",
        "--sqlite-output",
        help="Path to results SQLite DB (created if missing). Defaults to the user data directory.",
    )
    run_p.add_argument(
        "--column",
        help="CSV column holding the PAN numbers (default: pan_number).",
    )
    run_p.add_argument(
        "--encoding",
        help="Input file encoding (default: utf-8-sig, which also reads plain UTF-8).",
    )
    run_p.add_argument(
        "--fresh-output",
        action="store_true",
        help="Drop all tables in the output DB, including previous run summaries.",
    )
    run_p.add_argument(
        "--details",
        action="store_true",
        help="Store the names of the failed rules for each invalid PAN.",
    )
    run_p.add_argument(
        "--run-tag",
        help="Free-text label stored with the run summary.",
    )

    performance_group = run_p.add_argument_group("Performance Options")
    performance_group.add_argument(
        "--chunk-size",
        type=int,
        metavar="N",
        help="Rows per database write and per worker task (default: 2,000).",
    )
    performance_group.add_argument(
        "--max-workers",
        type=int,
        metavar="N",
        help="Worker processes for classification (default: 1, no workers).",
    )
    performance_group.add_argument(
        "--parallel-threshold",
        type=int,
        metavar="N",
        help="Minimum cleaned entries before workers are used (default: 50,000).",
    )
    performance_group.add_argument(
        "--wal",
        action="store_true",
        help="Open the output DB in WAL journal mode.",
    )

    debug_group = run_p.add_argument_group("Debug Options")
    debug_group.add_argument(
        "--debug",
        action="store_true",
        help="Log at DEBUG level and print tracebacks on failure.",
    )
    debug_group.add_argument(
        "--dry-run",
        action="store_true",
        help="Validate the configuration without processing records.",
    )
    debug_group.add_argument(
        "--log-file",
        type=str,
        metavar="PATH",
        help="Directory of PATH receives the log file (default: ./logs).",
    )

    profile_p = sub.add_parser("profile", help="Print a data quality profile of a raw input file")
    profile_p.add_argument("-i", "--input", required=True, help="Input file (.txt or .csv).")
    profile_p.add_argument("--column", default=sources.DEFAULT_COLUMN, help="CSV column name.")
    profile_p.add_argument(
        "--encoding",
        default=sources.DEFAULT_ENCODING,
        help=f"Input file encoding (default: {sources.DEFAULT_ENCODING}).",
    )
    profile_p.add_argument("--top", type=int, default=10, help="Duplicated values to list (default: 10).")

    check_p = sub.add_parser("check", help="Classify the given values")
    check_p.add_argument("values", nargs="+", help="PAN numbers to check.")

    report_p = sub.add_parser("report", help="Print the latest stored run summary")
    report_p.add_argument(
        "-o",
        "--sqlite-output",
        help="Results SQLite DB. Defaults to the user data directory.",
    )

    return parser


def main(argv: Optional[List[str]] = None) -> None:
    """Main entry point for the pancheck CLI."""
    args = build_parser().parse_args(argv)

    handlers = {
        "run": _cmd_run,
        "profile": _cmd_profile,
        "check": _cmd_check,
        "report": _cmd_report,
    }
    handler = handlers.get(args.cmd)
    if handler is None:
        logging.error("Unknown command: %s", args.cmd)
        sys.exit(2)

    try:
        sys.exit(handler(args))

    except ConfigurationError as e:
        logging.error("Configuration error: %s", e.message)
        _log_suggestions(e)
        sys.exit(1)

    except PanCheckError as e:
        logging.error("%s failed: %s", args.cmd, e.message)
        _log_suggestions(e)
        sys.exit(1)

    except KeyboardInterrupt:
        logging.info("Interrupted by user")
        sys.exit(130)

    except Exception as e:
        logging.error("Pipeline failed: %s", e)
        if getattr(args, "debug", False):
            logging.exception("Full traceback:")
        sys.exit(1)


def _log_suggestions(error: PanCheckError) -> None:
    if getattr(error, "suggestions", None):
        logging.error("Suggestions:")
        for suggestion in error.suggestions:
            logging.error("  - %s", suggestion)


def _cmd_run(args) -> int:
    settings = configure_from_cli(args)
    set_settings(settings)

    logger, _ = setup_logging(
        log_dir=str(settings.logging.file_path.parent)
        if settings.logging.file_path
        else "./logs",
        console=settings.logging.console_output,
        level=settings.logging.level.value,
        console_level="DEBUG" if settings.debug_mode else "WARNING",
        file_format=settings.logging.format_string,
    )

    if settings.debug_mode:
        logger.debug("Configuration details:")
        for section, values in settings.to_dict().items():
            logger.debug("  %s: %s", section, values)

    logger.info("Processing Configuration:")
    logger.info("  Input: %s", settings.input.input_file or settings.database.source_path)
    logger.info("  Chunk size: %s", f"{settings.processing.chunk_size:,}")
    logger.info("  Max workers: %s", settings.processing.max_workers)
    logger.info("  Output: %s", settings.database.output_path)

    if settings.dry_run:
        logger.info("DRY RUN MODE - configuration validated successfully")
        _print_dry_run_summary(settings)
        return 0

    cfg = PipelineConfig.from_settings(settings)
    res = run_pan_validation(cfg)

    logger.info("Pipeline completed successfully!")
    print()
    print(format_summary(res.summary))
    print(f"\nResults: {res.output_path} (run {res.run_id})")
    return 0


def _cmd_profile(args) -> int:
    path = resolve_input_file(args.input)
    report = profile_records(sources.read_records(path, column=args.column, encoding=args.encoding))
    print(_format_profile(report, top=args.top))
    return 0


def _cmd_check(args) -> int:
    all_valid = True
    for raw in args.values:
        value = normalize(raw)
        if value is None:
            print(f"{raw!r}\tMissing")
            all_valid = False
            continue
        result = classify_one(value)
        line = f"{value}\t{result.status.value}"
        if result.violations:
            line += f"\t({', '.join(result.violations)})"
            all_valid = False
        print(line)
    return 0 if all_valid else 1


def _cmd_report(args) -> int:
    path = resolve_output_path(args.sqlite_output)
    if not Path(path).is_file():
        raise ValidationError(
            f"Results database not found: {path}",
            field_name="sqlite_output",
            field_value=path
        ).add_suggestion("Run 'pancheck run' first or pass -o")

    conn = db.connect(str(path))
    try:
        schema.create_schema(conn)
        latest = repo.fetch_latest_summary(conn)
    finally:
        conn.close()

    if latest is None:
        print(f"No runs stored in {path}")
        return 1

    run_id, run_tag, created_at, counts = latest
    tag = f" [{run_tag}]" if run_tag else ""
    print(f"Run {run_id}{tag} at {created_at}")
    print(format_summary(counts))
    return 0


def _format_profile(report: DataQualityReport, top: int = 10) -> str:
    lines = [
        f"Total records:        {report.total_records:,}",
        f"Missing (null):       {report.missing:,}",
        f"Blank:                {report.blank:,}",
        f"Leading/trailing ws:  {report.padded:,}",
        f"Not upper-case:       {report.not_upper:,}",
        f"Distinct values:      {report.distinct_values:,}",
        f"Duplicate records:    {report.duplicate_records:,}",
    ]
    if report.duplicates and top > 0:
        lines.append("Most duplicated values:")
        ranked = sorted(report.duplicates.items(), key=lambda kv: (-kv[1], kv[0]))
        for value, count in ranked[:top]:
            lines.append(f"  {value!r}: {count}")
    return "\n".join(lines)


def _print_dry_run_summary(settings) -> None:
    """Show what a real run would do."""
    print("\n" + "=" * 60)
    print("DRY RUN SUMMARY")
    print("=" * 60)
    print(f"Input file:         {settings.input.input_file or '-'}")
    print(f"Source DB:          {settings.database.source_path or '-'}")
    print(f"Output path:        {settings.database.output_path}")
    print(f"Fresh output:       {settings.database.fresh_output}")
    print(f"Chunk size:         {settings.processing.chunk_size:,}")
    print(f"Max workers:        {settings.processing.max_workers}")
    print(f"Store details:      {settings.output.include_details}")
    print(f"Debug mode:         {settings.debug_mode}")
    print("=" * 60)


if __name__ == "__main__":
    main()
