"""pancheck error hierarchy, rooted at PanCheckError."""

from .base import (
    PanCheckError,
    ConfigurationError,
    ResourceError,
    DatabaseError,
    FileSystemError,
)
from .processing import (
    ProcessingError,
    BatchProcessingError,
    InternalConsistencyError,
    InputProviderError,
    OutputSinkError,
    PipelineConfigurationError,
)
from .validation import (
    ValidationError,
    FileValidationError,
    InputFileNotFoundError,
    InvalidFileFormatError,
    ParameterValidationError,
)

__all__ = [
    "PanCheckError",
    "ConfigurationError",
    "ResourceError",
    "DatabaseError",
    "FileSystemError",
    "ProcessingError",
    "BatchProcessingError",
    "InternalConsistencyError",
    "InputProviderError",
    "OutputSinkError",
    "PipelineConfigurationError",
    "ValidationError",
    "FileValidationError",
    "InputFileNotFoundError",
    "InvalidFileFormatError",
    "ParameterValidationError",
]
