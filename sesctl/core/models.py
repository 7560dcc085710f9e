"""
Data models and type definitions for sesctl.

Provides type-safe data structures for templates and operation results.
"""

from __future__ import annotations

from datetime import datetime
from enum import Enum
from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field


class OperationType(str, Enum):
    """Operations selectable with --type."""

    GET = "get"
    LIST = "list"
    CREATE = "create"
    UPDATE = "update"
    DELETE = "delete"
    TEST = "test"


class ProcessingStatus(str, Enum):
    """Status of an operation."""

    COMPLETED = "completed"
    FAILED = "failed"


class ErrorKind(str, Enum):
    """Failure categories reported by operations."""

    CONFIGURATION = "configuration"
    TEMPLATE_FILE = "template_file"
    NOT_FOUND = "not_found"
    ALREADY_EXISTS = "already_exists"
    REMOTE = "remote"
    PAGINATION = "pagination"
    UNEXPECTED = "unexpected"


# Template Models


class TemplateRecord(BaseModel):
    """An email template: name, subject line and HTML body."""

    name: str = ""
    subject: str = ""
    html: str = ""

    model_config = ConfigDict(extra="ignore", strict=True)


class TemplateSummary(BaseModel):
    """One entry of a template listing page."""

    name: str
    created_at: Optional[datetime] = None


# Processing Models


class OperationResult(BaseModel):
    """Result of a single operation, success or tagged failure."""

    operation: OperationType
    status: ProcessingStatus = Field(default=ProcessingStatus.COMPLETED)

    # Lines printed to stdout on success
    output: List[str] = Field(default_factory=list)
    data: Dict[str, Any] = Field(default_factory=dict)

    # Error tracking
    error_kind: Optional[ErrorKind] = None
    error_message: Optional[str] = None
    error_details: Dict[str, Any] = Field(default_factory=dict)

    @property
    def succeeded(self) -> bool:
        return self.status == ProcessingStatus.COMPLETED

    @classmethod
    def completed(cls, operation: OperationType, output: List[str], **data: Any) -> "OperationResult":
        return cls(operation=operation, output=output, data=data)

    @classmethod
    def failed(
        cls,
        operation: OperationType,
        kind: ErrorKind,
        message: str,
        details: Optional[Dict[str, Any]] = None,
    ) -> "OperationResult":
        return cls(
            operation=operation,
            status=ProcessingStatus.FAILED,
            error_kind=kind,
            error_message=message,
            error_details=details or {},
        )
