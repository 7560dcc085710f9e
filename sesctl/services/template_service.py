"""Template service: the six operations exposed by the CLI."""

from typing import Iterable, List, Optional

import structlog

from sesctl.core.config import SendTestConfig
from sesctl.core.exceptions import (
    ConfigurationError,
    PaginationError,
    SesApiError,
    SesCtlError,
    TemplateAlreadyExistsError,
    TemplateFileError,
    TemplateNotFoundError,
)
from sesctl.core.models import ErrorKind, OperationResult, OperationType, TemplateSummary
from sesctl.data.ses_client import DEFAULT_PAGE_SIZE, SesTemplateClient
from sesctl.data.template_files import TemplateFileReader

logger = structlog.get_logger(__name__)

NO_TEMPLATES_MESSAGE = "No templates have been created."
LIST_HEADER = "=-=-=- Templates -=-=-="


def collect_template_names(pages: Iterable[List[TemplateSummary]]) -> List[str]:
    """
    Drain a page sequence into one list of template names.

    Page order and order within each page are preserved.
    """
    names: List[str] = []
    for page in pages:
        names.extend(item.name for item in page)
    return names


def _error_kind(error: SesCtlError) -> ErrorKind:
    if isinstance(error, TemplateFileError):
        return ErrorKind.TEMPLATE_FILE
    if isinstance(error, PaginationError):
        return ErrorKind.PAGINATION
    if isinstance(error, TemplateNotFoundError):
        return ErrorKind.NOT_FOUND
    if isinstance(error, TemplateAlreadyExistsError):
        return ErrorKind.ALREADY_EXISTS
    if isinstance(error, SesApiError):
        return ErrorKind.REMOTE
    if isinstance(error, ConfigurationError):
        return ErrorKind.CONFIGURATION
    return ErrorKind.UNEXPECTED


def _failure(operation: OperationType, error: SesCtlError) -> OperationResult:
    details = dict(error.details)
    code = getattr(error, "code", None)
    if code:
        details["code"] = code
    path = getattr(error, "path", None)
    if path:
        details["path"] = path
    return OperationResult.failed(operation, _error_kind(error), error.message, details)


class TemplateService:
    """Run template operations against SES and report typed results."""

    def __init__(
        self,
        ses_client: SesTemplateClient,
        file_reader: Optional[TemplateFileReader] = None,
        send_config: Optional[SendTestConfig] = None,
        page_size: int = DEFAULT_PAGE_SIZE,
    ):
        """Initialise the service with an SES client and optional collaborators."""
        self.ses_client = ses_client
        self.file_reader = file_reader or TemplateFileReader()
        self.send_config = send_config or SendTestConfig()
        self.page_size = page_size

    def get_template(self, name: str) -> OperationResult:
        """Fetch a template and render its subject and body."""
        try:
            record = self.ses_client.get_template(name)
        except SesCtlError as e:
            logger.error("Get template failed", name=name, error=str(e))
            return _failure(OperationType.GET, e)

        return OperationResult.completed(
            OperationType.GET,
            [f"Template subject: {record.subject}", f"Template body: {record.html}"],
            subject=record.subject,
            html=record.html,
        )

    def list_templates(self) -> OperationResult:
        """List every template name across all pages."""
        return self.list_from_pages(self.ses_client.iter_template_pages(self.page_size))

    def list_from_pages(self, pages: Iterable[List[TemplateSummary]]) -> OperationResult:
        """
        Combine a page sequence into the listing output.

        Any exception raised while pages are drained becomes a failed result;
        nothing is printed for a partially drained listing.
        """
        try:
            names = collect_template_names(pages)
        except SesCtlError as e:
            logger.error("Template listing failed", error=str(e))
            return _failure(OperationType.LIST, e)
        except Exception as e:
            logger.exception("Unexpected error while listing templates")
            return OperationResult.failed(
                OperationType.LIST,
                ErrorKind.UNEXPECTED,
                f"Unexpected error while listing templates: {e}",
                {"error_type": type(e).__name__},
            )

        if not names:
            return OperationResult.completed(OperationType.LIST, [NO_TEMPLATES_MESSAGE], names=[])

        logger.info("Templates listed", count=len(names))
        return OperationResult.completed(OperationType.LIST, [LIST_HEADER, *names], names=names)

    def create_template(self, template_id: str) -> OperationResult:
        """Create a template from ``<id>.json`` and ``<id>.html``."""
        return self._put_template(OperationType.CREATE, template_id)

    def update_template(self, template_id: str) -> OperationResult:
        """Update a template from ``<id>.json`` and ``<id>.html``."""
        return self._put_template(OperationType.UPDATE, template_id)

    def _put_template(self, operation: OperationType, template_id: str) -> OperationResult:
        try:
            record = self.file_reader.load(template_id)
        except TemplateFileError as e:
            logger.error("Template files unusable", template_id=template_id, error=str(e))
            return _failure(operation, e)

        try:
            if operation == OperationType.CREATE:
                self.ses_client.create_template(record)
            else:
                self.ses_client.update_template(record)
        except SesCtlError as e:
            logger.error(
                "Template write rejected", operation=operation.value, name=record.name, error=str(e)
            )
            return _failure(operation, e)

        message = "Template created." if operation == OperationType.CREATE else "Template updated."
        return OperationResult.completed(
            operation, [message], name=record.name, dry_run=self.ses_client.dry_run
        )

    def delete_template(self, name: str) -> OperationResult:
        """Delete a template by name."""
        try:
            self.ses_client.delete_template(name)
        except SesCtlError as e:
            logger.error("Delete template failed", name=name, error=str(e))
            return _failure(OperationType.DELETE, e)

        return OperationResult.completed(
            OperationType.DELETE, ["Template deleted."], name=name, dry_run=self.ses_client.dry_run
        )

    def send_test_email(self, template_name: str, to: str) -> OperationResult:
        """Send one email rendered from a template using the configured sample data."""
        try:
            message_id = self.ses_client.send_templated_email(
                template_name=template_name,
                to=to,
                sender=self.send_config.sender,
                template_data=self.send_config.template_data,
            )
        except SesCtlError as e:
            logger.error("Test send failed", template=template_name, to=to, error=str(e))
            return _failure(OperationType.TEST, e)

        output = ["Email sent."]
        if message_id:
            output.append(f"Message ID: {message_id}")
        return OperationResult.completed(
            OperationType.TEST,
            output,
            message_id=message_id,
            dry_run=self.ses_client.dry_run,
        )
