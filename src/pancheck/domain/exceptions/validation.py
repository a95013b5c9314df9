"""Errors for bad values handed to pancheck: arguments, records, input files."""

from typing import Optional, Sequence, Any
from .base import PanCheckError


class ValidationError(PanCheckError):
    """A value supplied by the caller is unusable."""

    def __init__(
        self,
        message: str,
        *,
        field_name: Optional[str] = None,
        field_value: Optional[Any] = None,
        **kwargs
    ):
        super().__init__(message, **kwargs)
        if field_name:
            self.add_context('field_name', field_name)
        if field_value is not None:
            # stringified so the context stays printable for any record type
            self.add_context('field_value', str(field_value))

    def _get_default_error_code(self) -> str:
        return "VALIDATION_ERROR"


class FileValidationError(ValidationError):
    """An input file failed a pre-flight check."""

    check = "file_check"

    def __init__(self, message: str, *, file_path: Optional[str] = None, **kwargs):
        kwargs.setdefault('field_name', 'input_file')
        super().__init__(message, **kwargs)
        if file_path:
            self.add_context('file_path', file_path)
        self.add_context('validation_type', self.check)

    def _get_default_error_code(self) -> str:
        return "FILE_VALIDATION_FAILED"


class InputFileNotFoundError(FileValidationError):
    check = "existence_check"

    def __init__(self, file_path: str, **kwargs):
        super().__init__(f"Input file not found: {file_path}", file_path=file_path, **kwargs)
        self.add_suggestion("Check the path passed with --input")

    def _get_default_error_code(self) -> str:
        return "FILE_NOT_FOUND"


class InvalidFileFormatError(FileValidationError):
    check = "format_check"

    def __init__(
        self,
        file_path: str,
        expected_formats: Sequence[str],
        actual_format: Optional[str] = None,
        **kwargs
    ):
        accepted = ", ".join(expected_formats)
        super().__init__(
            f"Cannot read {file_path}: unsupported format (accepted: {accepted})",
            file_path=file_path,
            **kwargs
        )
        self.add_context('expected_formats', list(expected_formats))
        if actual_format:
            self.add_context('actual_format', actual_format)
        self.add_suggestion(f"Save the PAN list as one of {accepted}")

    def _get_default_error_code(self) -> str:
        return "INVALID_FILE_FORMAT"


class ParameterValidationError(ValidationError):
    """A function argument is outside its allowed range."""

    def __init__(
        self,
        message: str,
        *,
        parameter_name: str,
        parameter_value: Any,
        expected_type: Optional[str] = None,
        **kwargs
    ):
        super().__init__(message, field_name=parameter_name, field_value=parameter_value, **kwargs)
        if expected_type:
            self.add_context('expected_type', expected_type)
            self.add_suggestion(f"Pass {parameter_name} as a {expected_type}")

    def _get_default_error_code(self) -> str:
        return "PARAMETER_VALIDATION_FAILED"
