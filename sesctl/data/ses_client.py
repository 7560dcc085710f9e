"""
Amazon SES (v2) client for email template management.

Wraps the boto3 ``sesv2`` client with structured logging, dry-run support and
translation of SDK errors into the sesctl exception hierarchy.
"""

from typing import Any, Dict, Iterator, List, Optional

import boto3
import structlog
from botocore.exceptions import BotoCoreError, ClientError, NoRegionError

from sesctl.core.config import AwsConfig, Settings
from sesctl.core.exceptions import (
    ConfigurationError,
    PaginationError,
    SesApiError,
    TemplateAlreadyExistsError,
    TemplateNotFoundError,
)
from sesctl.core.models import TemplateRecord, TemplateSummary

logger = structlog.get_logger(__name__)

DEFAULT_PAGE_SIZE = 10

_ERROR_CLASSES = {
    "NotFoundException": TemplateNotFoundError,
    "AlreadyExistsException": TemplateAlreadyExistsError,
}


def translate_error(operation: str, error: Exception) -> SesApiError:
    """Map a botocore exception onto the matching SesApiError subclass."""
    if isinstance(error, ClientError):
        err = error.response.get("Error", {})
        code = err.get("Code", "Unknown")
        message = err.get("Message") or str(error)
        status_code = error.response.get("ResponseMetadata", {}).get("HTTPStatusCode")
        error_class = _ERROR_CLASSES.get(code, SesApiError)
        return error_class(operation, message, code=code, details={"status_code": status_code})
    return SesApiError(operation, str(error))


class SesTemplateClient:
    """SES v2 template and send operations."""

    def __init__(self, config: AwsConfig, client: Optional[Any] = None, dry_run: bool = False):
        """
        Initialise the client.

        Args:
            config: AWS credentials and region
            client: Pre-built boto3 ``sesv2`` client (tests inject a stubbed one)
            dry_run: Log mutating calls instead of sending them
        """
        self.config = config
        self.dry_run = dry_run
        self._client = client

        logger.debug("SES client initialized", region=config.region, dry_run=dry_run)

    @property
    def client(self):
        """Lazy initialization of the boto3 client."""
        if self._client is None:
            self._client = self._build_client()
        return self._client

    def _build_client(self):
        """Build the boto3 sesv2 client from static credentials."""
        try:
            session = boto3.session.Session(
                aws_access_key_id=self.config.access_key_id,
                aws_secret_access_key=self.config.secret_access_key,
                aws_session_token=self.config.session_token or None,
                region_name=self.config.region,
            )
            client = session.client("sesv2")
        except NoRegionError:
            raise ConfigurationError("AWS region is not configured; set AWS_REGION")
        except ValueError as e:
            # botocore rejects an unusable region while building the endpoint
            raise ConfigurationError(f"Invalid AWS region {self.config.region!r}: {e}")
        except BotoCoreError as e:
            logger.error("Failed to initialize SES client", error=str(e))
            raise ConfigurationError(f"Failed to initialize SES client: {e}")

        logger.debug("SES client built", region=client.meta.region_name)
        return client

    def get_template(self, name: str) -> TemplateRecord:
        """
        Fetch a template by name.

        Raises:
            TemplateNotFoundError: If no template has this name
            SesApiError: On any other API or transport error
        """
        logger.info("Fetching SES template", name=name)
        try:
            response = self.client.get_email_template(TemplateName=name)
        except (ClientError, BotoCoreError) as e:
            raise translate_error("GetEmailTemplate", e)

        content = response.get("TemplateContent", {})
        return TemplateRecord(
            name=response.get("TemplateName", name),
            subject=content.get("Subject", ""),
            html=content.get("Html", ""),
        )

    def iter_template_pages(self, page_size: int = DEFAULT_PAGE_SIZE) -> Iterator[List[TemplateSummary]]:
        """
        Lazily yield pages of template summaries until the listing is drained.

        Each request is issued only when the previous page has been consumed.

        Raises:
            PaginationError: If any page cannot be fetched
        """
        params: Dict[str, Any] = {"PageSize": page_size}
        page_number = 0

        while True:
            page_number += 1
            try:
                response = self.client.list_email_templates(**params)
            except (ClientError, BotoCoreError) as e:
                error = translate_error("ListEmailTemplates", e)
                logger.error("Template listing failed", page=page_number, error=str(e))
                raise PaginationError(
                    "ListEmailTemplates",
                    f"pagination error on page {page_number}: {error.message}",
                    code=error.code,
                    details=error.details,
                )

            items = response.get("TemplatesMetadata", [])
            logger.debug("Template page fetched", page=page_number, items=len(items))
            yield [
                TemplateSummary(name=item["TemplateName"], created_at=item.get("CreatedTimestamp"))
                for item in items
            ]

            next_token = response.get("NextToken")
            if not next_token:
                return
            params["NextToken"] = next_token

    def create_template(self, record: TemplateRecord) -> None:
        """
        Create a template.

        Raises:
            TemplateAlreadyExistsError: If a template with this name exists
            SesApiError: On any other API or transport error
        """
        self._put_template("CreateEmailTemplate", record)

    def update_template(self, record: TemplateRecord) -> None:
        """
        Replace the subject and body of an existing template.

        Raises:
            TemplateNotFoundError: If no template has this name
            SesApiError: On any other API or transport error
        """
        self._put_template("UpdateEmailTemplate", record)

    def _put_template(self, operation: str, record: TemplateRecord) -> None:
        if self.dry_run:
            logger.info(
                f"DRY RUN: Would call {operation}",
                name=record.name,
                subject=record.subject,
                html_size=len(record.html),
            )
            return

        method = (
            self.client.create_email_template
            if operation == "CreateEmailTemplate"
            else self.client.update_email_template
        )
        logger.info("Writing SES template", operation=operation, name=record.name)
        try:
            method(
                TemplateName=record.name,
                TemplateContent={"Subject": record.subject, "Html": record.html},
            )
        except (ClientError, BotoCoreError) as e:
            raise translate_error(operation, e)

    def delete_template(self, name: str) -> None:
        """
        Delete a template by name.

        Raises:
            TemplateNotFoundError: If no template has this name
            SesApiError: On any other API or transport error
        """
        if self.dry_run:
            logger.info("DRY RUN: Would delete SES template", name=name)
            return

        logger.info("Deleting SES template", name=name)
        try:
            self.client.delete_email_template(TemplateName=name)
        except (ClientError, BotoCoreError) as e:
            raise translate_error("DeleteEmailTemplate", e)

    def send_templated_email(
        self, template_name: str, to: str, sender: str, template_data: str
    ) -> Optional[str]:
        """
        Send one email rendered from a stored template.

        Args:
            template_name: Name of the stored template
            to: Destination address
            sender: From address, optionally with a display name
            template_data: JSON object with the placeholder values

        Returns:
            SES message ID, or None in dry-run mode
        """
        if self.dry_run:
            logger.info(
                "DRY RUN: Would send templated email",
                template=template_name,
                to=to,
                sender=sender,
            )
            return None

        logger.info("Sending templated email", template=template_name, to=to, sender=sender)
        try:
            response = self.client.send_email(
                FromEmailAddress=sender,
                Destination={"ToAddresses": [to]},
                Content={"Template": {"TemplateName": template_name, "TemplateData": template_data}},
            )
        except (ClientError, BotoCoreError) as e:
            raise translate_error("SendEmail", e)

        message_id = response.get("MessageId")
        logger.info("Templated email sent", message_id=message_id, to=to)
        return message_id


def create_ses_client(settings: Settings) -> SesTemplateClient:
    """
    Create an SES client with its boto3 handle already built.

    Raises:
        ConfigurationError: If the SDK cannot be configured
    """
    ses = SesTemplateClient(settings.aws, dry_run=settings.dry_run)
    ses._client = ses._build_client()
    return ses
