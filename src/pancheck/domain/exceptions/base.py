from typing import Optional, Dict, Any, List
from datetime import datetime


class PanCheckError(Exception):
    """
    Root of every error pancheck raises on purpose.

    Carries a machine-readable ``error_code``, a ``context`` dict for the
    values involved and ``suggestions`` shown to CLI users. ``add_context``
    and ``add_suggestion`` return the error so they can be chained onto a
    ``raise``.
    """

    def __init__(
        self,
        message: str,
        *,
        error_code: Optional[str] = None,
        context: Optional[Dict[str, Any]] = None,
        suggestions: Optional[List[str]] = None,
        recoverable: bool = False
    ):
        super().__init__(message)
        self.message = message
        self.error_code = error_code or self._get_default_error_code()
        self.context: Dict[str, Any] = dict(context or {})
        self.suggestions: List[str] = list(suggestions or [])
        self.recoverable = recoverable
        self.timestamp = datetime.now()
        self.config_field: Optional[str] = None

    def _get_default_error_code(self) -> str:
        return "PANCHECK_ERROR"

    def add_context(self, key: str, value: Any) -> "PanCheckError":
        if key:
            self.context[key] = value
        return self

    def add_suggestion(self, suggestion: str) -> "PanCheckError":
        if suggestion:
            self.suggestions.append(suggestion)
        return self

    def _headline(self) -> str:
        return self.message or ""

    def __str__(self) -> str:
        text = self._headline()
        if not self.suggestions:
            return text
        return f"{text} -- Suggestions: {'; '.join(self.suggestions)}"


class ConfigurationError(PanCheckError):
    """A setting is missing, out of range or inconsistent with another."""

    def __init__(self, message: str, *, config_field: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.config_field = config_field
        if config_field:
            self.add_context('config_field', config_field)

    def _get_default_error_code(self) -> str:
        return "CONFIGURATION_ERROR"

    def _headline(self) -> str:
        if self.config_field:
            return f"[{self.config_field}] {self.message}"
        return self.message or ""


class ResourceError(PanCheckError):
    """Something outside the process (file, database) failed."""

    def _get_default_error_code(self) -> str:
        return "RESOURCE_ERROR"


class DatabaseError(ResourceError):
    def _get_default_error_code(self) -> str:
        return "DATABASE_ERROR"


class FileSystemError(ResourceError):
    def __init__(self, message: str, *, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        if path:
            self.add_context('path', path)

    def _get_default_error_code(self) -> str:
        return "FILE_SYSTEM_ERROR"
