"""Bridges global Settings and the pipeline runner."""
from typing import Optional
from dataclasses import dataclass
from pancheck.config.settings import Settings, get_settings

@dataclass
class PipelineConfig:
    """Flat view of the settings a single pipeline run needs."""
    sqlite_output_path: str
    input_file: Optional[str] = None
    source_db: Optional[str] = None
    column: str = "pan_number"
    encoding: str = "utf-8-sig"
    fresh_output: bool = False
    include_details: bool = False
    chunk_size: int = 2000
    max_workers: int = 1
    parallel_threshold: int = 50_000
    use_wal: bool = False
    pragma_settings: Optional[dict] = None
    run_tag: Optional[str] = None

    @classmethod
    def from_settings(cls, settings: Settings) -> 'PipelineConfig':
        """Create PipelineConfig from Settings."""
        return cls(
            sqlite_output_path=(
                str(settings.database.output_path) if settings.database.output_path else None
                ),
            input_file=str(settings.input.input_file) if settings.input.input_file else None,
            source_db=str(settings.database.source_path) if settings.database.source_path else None,
            column=settings.input.column,
            encoding=settings.input.encoding,
            fresh_output=settings.database.fresh_output,
            include_details=settings.output.include_details,
            chunk_size=settings.processing.chunk_size,
            max_workers=settings.processing.max_workers,
            parallel_threshold=settings.processing.parallel_threshold,
            use_wal=settings.database.pragma_settings.get("journal_mode", "DELETE") == "WAL",
            pragma_settings=dict(settings.database.pragma_settings),
            run_tag=settings.run_tag,
        )

def get_pipeline_config() -> PipelineConfig:
    """Get PipelineConfig from current settings."""
    return PipelineConfig.from_settings(get_settings())
