"""End-to-end PAN validation: load, clean, classify, summarise, store."""
import os
import time
import sqlite3
import logging
import psutil
from tqdm import tqdm
from pathlib import Path
from dataclasses import dataclass
from typing import Dict, Iterable, List, Optional, Set

from pancheck.config.integration import PipelineConfig
from pancheck.classification.classifier import PanClassifier, DEFAULT_CHUNK_SIZE, DEFAULT_PARALLEL_THRESHOLD
from pancheck.data import db, repo, schema, sources
from pancheck.domain.models import ClassificationResult, DataQualityReport, Status, SummaryCounts
from pancheck.domain.exceptions import (
    PanCheckError,
    ConfigurationError,
    InputProviderError,
    InternalConsistencyError,
    ProcessingError,
)
from pancheck.processing.cleaner import clean
from pancheck.processing.quality import profile_records
from pancheck.reporting.summary import summarize
from pancheck.utils.timing import section_timer, timeit

logger = logging.getLogger(__name__)
summary_logger = logging.getLogger("pancheck.summary")


@dataclass
class ValidationOutcome:
    """In-memory result of one clean/classify/summarise pass."""
    total_raw: int
    cleaned: Set[str]
    results: Dict[str, ClassificationResult]
    summary: SummaryCounts

    @property
    def statuses(self) -> Dict[str, Status]:
        return {value: r.status for value, r in self.results.items()}


def validate_records(
    raw_records: Iterable[Optional[str]],
    *,
    max_workers: int = 1,
    chunk_size: int = DEFAULT_CHUNK_SIZE,
    parallel_threshold: int = DEFAULT_PARALLEL_THRESHOLD,
) -> ValidationOutcome:
    """
    Clean, classify and summarise raw records without touching storage.

    Every cleaned entry ends up in exactly one classification; anything else
    is an InternalConsistencyError.
    """
    raw = list(raw_records)
    cleaned = clean(raw)

    classifier = PanClassifier(
        max_workers=max_workers,
        chunk_size=chunk_size,
        parallel_threshold=parallel_threshold,
    )
    results = classifier.results(cleaned)

    if results.keys() != cleaned:
        raise InternalConsistencyError(
            "Classified entries differ from the cleaned set",
            expected=len(cleaned),
            actual=len(results)
        )

    counts = summarize(len(raw), results)
    return ValidationOutcome(total_raw=len(raw), cleaned=cleaned, results=results, summary=counts)


@dataclass
class PipelineResult:
    """Counts and bookkeeping of one stored run."""
    total_processed: int
    total_valid: int
    total_invalid: int
    missing_or_incomplete: int
    output_path: Optional[str] = None
    processing_time: float = 0.0
    run_id: Optional[int] = None
    quality: Optional[DataQualityReport] = None

    @property
    def summary(self) -> SummaryCounts:
        return SummaryCounts(
            total_processed=self.total_processed,
            total_valid=self.total_valid,
            total_invalid=self.total_invalid,
            missing_or_incomplete=self.missing_or_incomplete,
        )


class PanValidationPipeline:
    """
    Batch PAN validation against a SQLite results database.

    Steps:
    1. Load raw records (text/CSV file, or the staging table of a source DB)
    2. Open the output DB and create any missing tables
    3. Clean, classify and summarise in memory
    4. Replace staging, cleaned set and classifications and append the
       summary row, all in one transaction

    Store failures surface as InputProviderError / OutputSinkError and are
    not retried. A failed store leaves the previous run's rows in place.
    """

    def __init__(self, config: PipelineConfig):
        self.config = config
        self.start_time = None
        self.out_conn: Optional[sqlite3.Connection] = None
        self.process = psutil.Process(os.getpid())

        self._validate_config()

        self.metrics = {
            'raw_records': 0,
            'cleaned_records': 0,
            'valid': 0,
            'invalid': 0,
            'missing_or_incomplete': 0,
            'processing_time': 0.0,
        }

    def run(self) -> PipelineResult:
        """Load, validate and store one batch; returns the run counts."""
        self.start_time = time.time()
        show_progress = not os.getenv('NO_PROGRESS', '').lower() in ['1', 'true', 'yes']

        pbar = tqdm(
            total=100,
            desc="Pipeline",
            unit="%",
            bar_format="{desc}: {percentage:3.0f}%|{bar}| {postfix} [{elapsed}<{remaining}]",
            ncols=100,
            disable=not show_progress,
        )
        try:
            pbar.set_postfix_str("Loading records...")
            raw = self._load_raw_records()
            pbar.update(10)

            pbar.set_postfix_str("Opening results database...")
            self._setup_output_database()
            pbar.update(15)

            pbar.set_postfix_str("Classifying...")
            outcome = self._validate(raw)
            quality = profile_records(raw)
            pbar.update(50)

            pbar.set_postfix_str("Writing results...")
            run_id = self._store(raw, outcome)
            pbar.update(25)
            pbar.set_postfix_str("Complete")

            return self._finalize(outcome, run_id, quality)

        except PanCheckError:
            self._cleanup()
            raise
        except Exception as e:
            self._cleanup()
            exc = ProcessingError(
                f"Unexpected pipeline error: {str(e)}",
                stage="pipeline_execution"
            )
            exc.add_context('elapsed_time', time.time() - self.start_time)
            raise exc from e
        finally:
            pbar.close()

    def _validate_config(self) -> None:
        """Check the input/output combination and create the output directory."""
        if not self.config.input_file and not self.config.source_db:
            raise ConfigurationError(
                "Either an input file or a source database must be specified",
                config_field="input_sources"
            ).add_suggestion("Provide config.input_file or config.source_db")

        if self.config.input_file and self.config.source_db:
            raise ConfigurationError(
                "Cannot specify both an input file and a source database",
                config_field="input_sources"
            ).add_suggestion("Use either config.input_file OR config.source_db, not both")

        if not self.config.sqlite_output_path:
            raise ConfigurationError(
                "SQLite output path is required",
                config_field="sqlite_output_path"
            ).add_suggestion("Set config.sqlite_output_path")

        output_path = Path(self.config.sqlite_output_path)
        try:
            output_path.parent.mkdir(parents=True, exist_ok=True)
        except OSError as e:
            raise ConfigurationError(
                f"Cannot create output directory: {output_path.parent}",
                config_field="sqlite_output_path"
            ).add_context('error', str(e)) from e

        logger.debug("Configuration validated successfully")

    def _load_raw_records(self) -> List[Optional[str]]:
        """Read raw records from the configured input provider."""
        with section_timer("load raw records", logger):
            if self.config.input_file:
                raw = sources.read_records(
                    self.config.input_file,
                    column=self.config.column,
                    encoding=self.config.encoding,
                )
                origin = self.config.input_file
            else:
                raw = self._load_from_source_db(self.config.source_db)
                origin = self.config.source_db

        self.metrics['raw_records'] = len(raw)
        summary_logger.info(f"[load] Read {len(raw):,} raw records from {origin}")
        return raw

    def _load_from_source_db(self, source_db: str) -> List[Optional[str]]:
        if not Path(source_db).is_file():
            raise InputProviderError(f"Source database not found: {source_db}", source=source_db)
        try:
            conn = db.connect_readonly(source_db)
        except sqlite3.Error as e:
            raise InputProviderError(f"Could not open {source_db}: {e}", source=source_db) from e
        try:
            return repo.load_raw_records(conn)
        finally:
            conn.close()

    def _setup_output_database(self) -> None:
        """Open the results database and make sure the schema exists."""
        path = self.config.sqlite_output_path
        try:
            self.out_conn = db.connect(path, use_wal=self.config.use_wal, pragma_settings=self.config.pragma_settings)
            schema.create_schema(self.out_conn, fresh=self.config.fresh_output)
        except sqlite3.Error as e:
            raise ProcessingError(
                f"Failed to set up output database: {e}",
                stage="database_setup"
            ).add_context('output_path', path) from e
        logger.info(f"[db-setup] Output database ready at {path}")

    def _validate(self, raw: List[Optional[str]]) -> ValidationOutcome:
        with section_timer(f"validate {len(raw)} records", logger):
            outcome = validate_records(
                raw,
                max_workers=self.config.max_workers,
                chunk_size=self.config.chunk_size,
                parallel_threshold=self.config.parallel_threshold,
            )
        self.metrics['cleaned_records'] = len(outcome.cleaned)
        self.metrics['valid'] = outcome.summary.total_valid
        self.metrics['invalid'] = outcome.summary.total_invalid
        self.metrics['missing_or_incomplete'] = outcome.summary.missing_or_incomplete
        return outcome

    def _store(self, raw: List[Optional[str]], outcome: ValidationOutcome) -> int:
        with section_timer("store results", logger):
            return repo.store_run(
                self.out_conn,
                raw,
                outcome.cleaned,
                outcome.results.values(),
                outcome.summary,
                run_tag=self.config.run_tag,
                chunk_size=self.config.chunk_size,
                include_details=self.config.include_details,
            )

    def _finalize(self, outcome: ValidationOutcome, run_id: int, quality: DataQualityReport) -> PipelineResult:
        """Close the output DB, log metrics and build the PipelineResult."""
        self._cleanup()

        elapsed_time = time.time() - self.start_time
        self.metrics['processing_time'] = elapsed_time
        summary_logger.info(f"[shutdown] Pipeline completed in {elapsed_time:.2f} seconds")
        self._log_final_metrics(quality)

        counts = outcome.summary
        return PipelineResult(
            total_processed=counts.total_processed,
            total_valid=counts.total_valid,
            total_invalid=counts.total_invalid,
            missing_or_incomplete=counts.missing_or_incomplete,
            output_path=self.config.sqlite_output_path,
            processing_time=elapsed_time,
            run_id=run_id,
            quality=quality,
        )

    def _cleanup(self) -> None:
        """Clean up resources."""
        if self.out_conn:
            self.out_conn.close()
            self.out_conn = None

    def _memory_report(self, label: str) -> None:
        try:
            rss = self.process.memory_info().rss / 1e6  # MB
            logger.debug(f"[mem] {label} RSS={rss:.1f}MB")
        except psutil.Error as e:
            logger.debug(f"[mem] Could not get memory info: {e}")

    def _log_final_metrics(self, quality: DataQualityReport) -> None:
        """Log final pipeline metrics."""
        logger.info("=" * 60)
        logger.info("PIPELINE METRICS")
        logger.info("=" * 60)
        logger.info(f"Raw records:         {self.metrics['raw_records']:,}")
        logger.info(f"  null:              {quality.missing:,}")
        logger.info(f"  blank:             {quality.blank:,}")
        logger.info(f"  padded:            {quality.padded:,}")
        logger.info(f"  not upper-case:    {quality.not_upper:,}")
        logger.info(f"Cleaned records:     {self.metrics['cleaned_records']:,}")
        logger.info(f"Valid PANs:          {self.metrics['valid']:,}")
        logger.info(f"Invalid PANs:        {self.metrics['invalid']:,}")
        logger.info(f"Missing/incomplete:  {self.metrics['missing_or_incomplete']:,}")
        logger.info(f"Processing time:     {self.metrics['processing_time']:.2f}s")
        if self.metrics['processing_time'] > 0:
            rate = self.metrics['raw_records'] / self.metrics['processing_time']
            logger.info(f"Processing rate:     {rate:.1f} records/second")
        self._memory_report("Final memory usage")
        logger.info("=" * 60)


@timeit(logger, "run_pan_validation")
def run_pan_validation(cfg: PipelineConfig) -> PipelineResult:
    """Run the pipeline for ``cfg``."""
    return PanValidationPipeline(cfg).run()
