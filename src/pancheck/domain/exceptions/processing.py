"""Errors raised while a pipeline run is in progress."""

from typing import Optional
from .base import PanCheckError, ConfigurationError, ResourceError


class ProcessingError(PanCheckError):
    """A pipeline stage failed; ``stage`` names it in the context."""

    def __init__(
        self,
        message: str,
        *,
        stage: Optional[str] = None,
        batch_id: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        for key, value in (('processing_stage', stage), ('batch_id', batch_id)):
            if value:
                self.add_context(key, value)


class BatchProcessingError(ProcessingError):
    """The worker pool could not classify a chunk of cleaned entries."""

    def __init__(
        self,
        message: str,
        *,
        batch_size: Optional[int] = None,
        failed_count: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, stage="batch_processing", **kwargs)
        if batch_size:
            self.add_context('batch_size', batch_size)
        if failed_count:
            self.add_context('failed_records', failed_count)
        self.add_suggestion("Re-run with --max-workers 1 to classify serially")
        self.add_suggestion("Check the process limit and free memory")

    def _get_default_error_code(self) -> str:
        return "BATCH_PROCESSING_FAILED"


class InternalConsistencyError(ProcessingError):
    """Derived counts contradict each other.

    Raised for a negative missing/incomplete count or when the classified
    entries are not exactly the cleaned set. Such counts are never reported.
    """

    def __init__(
        self,
        message: str,
        *,
        expected: Optional[int] = None,
        actual: Optional[int] = None,
        **kwargs
    ):
        super().__init__(message, stage="consistency_check", **kwargs)
        if expected is not None:
            self.add_context('expected', expected)
        if actual is not None:
            self.add_context('actual', actual)

    def _get_default_error_code(self) -> str:
        return "INTERNAL_CONSISTENCY_FAILED"


class InputProviderError(ResourceError):
    """Raw records could not be read from a file or the staging table."""

    def __init__(self, message: str, *, source: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if source:
            self.add_context('source', source)
        self.add_suggestion("Fix the input source and re-run the pipeline")

    def _get_default_error_code(self) -> str:
        return "INPUT_PROVIDER_FAILED"


class OutputSinkError(ResourceError):
    """Results could not be written to the output database."""

    def __init__(
        self,
        message: str,
        *,
        sink: Optional[str] = None,
        operation: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if sink:
            self.add_context('sink', sink)
        if operation:
            self.add_context('operation', operation)
        self.add_suggestion("Check the output database path and disk space")

    def _get_default_error_code(self) -> str:
        return "OUTPUT_SINK_FAILED"


class PipelineConfigurationError(ConfigurationError):
    """A pipeline setting failed validation."""

    def __init__(
        self,
        message: str,
        *,
        config_field: Optional[str] = None,
        expected_type: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, config_field=config_field, **kwargs)
        self.add_context('processing_stage', "configuration")
        if expected_type:
            self.add_context('expected_type', expected_type)

    def _get_default_error_code(self) -> str:
        return "PIPELINE_CONFIG_INVALID"
