"""
Custom exceptions for sesctl.

Provides a hierarchy of exceptions so each failure category can be reported
through a single top-level boundary.
"""

from typing import Any, Dict, Optional


class SesCtlError(Exception):
    """Base exception for all sesctl errors."""

    def __init__(self, message: str, details: Optional[Dict[str, Any]] = None):
        super().__init__(message)
        self.message = message
        self.details = details or {}


class ConfigurationError(SesCtlError):
    """Raised when credentials, the env file or settings are unusable."""
    pass


class TemplateFileError(SesCtlError):
    """Base class for local template file errors."""

    def __init__(self, message: str, path: Optional[str] = None, **kwargs):
        super().__init__(message, **kwargs)
        self.path = path


class TemplateFileNotFoundError(TemplateFileError):
    """A template's JSON metadata or HTML body file does not exist."""

    def __init__(self, message: str, path: Optional[str] = None, file_kind: str = "json", **kwargs):
        super().__init__(message, path=path, **kwargs)
        self.file_kind = file_kind


class TemplateFileFormatError(TemplateFileError):
    """A template's JSON metadata file could not be parsed."""
    pass


class SesApiError(SesCtlError):
    """SES API returned an error or could not be reached."""

    def __init__(self, operation: str, message: str, code: Optional[str] = None, **kwargs):
        super().__init__(f"{operation}: {message}", **kwargs)
        self.operation = operation
        self.code = code


class TemplateNotFoundError(SesApiError):
    """The named template does not exist in the account."""
    pass


class TemplateAlreadyExistsError(SesApiError):
    """A template with the same name already exists."""
    pass


class PaginationError(SesApiError):
    """A page of the template listing could not be fetched."""
    pass
