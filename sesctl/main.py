"""
Main application entry point for sesctl.

One invocation runs one operation chosen with ``--type``. Operation
parameters are prompted for interactively.
"""

import sys
from typing import Callable

import click
import structlog
from click.core import ParameterSource
from rich.console import Console
from rich.markup import escape

from sesctl.core.config import configuration_summary, load_settings
from sesctl.core.exceptions import ConfigurationError
from sesctl.core.logging import bind_invocation, setup_logging
from sesctl.core.models import ErrorKind, OperationResult, OperationType
from sesctl.data.ses_client import create_ses_client
from sesctl.data.template_files import TemplateFileReader
from sesctl.services.template_service import TemplateService

logger = structlog.get_logger(__name__)
err_console = Console(stderr=True)

TYPE_HELP = "AWS SES template command, one of: " + ", ".join(op.value for op in OperationType)


def run_operation(
    service: TemplateService,
    operation: OperationType,
    prompt: Callable[[str], str] = click.prompt,
) -> OperationResult:
    """Prompt for the operation's parameters and run it."""
    if operation == OperationType.GET:
        name = prompt("Template name to look up").strip()
        return service.get_template(name)

    if operation == OperationType.LIST:
        return service.list_templates()

    if operation == OperationType.CREATE:
        template_id = prompt("Template file name (without extension)").strip()
        return service.create_template(template_id)

    if operation == OperationType.UPDATE:
        template_id = prompt("Template file name (without extension)").strip()
        return service.update_template(template_id)

    if operation == OperationType.DELETE:
        name = prompt("Template name to delete").strip()
        return service.delete_template(name)

    template_name = prompt("Template name to send").strip()
    to = prompt("Destination email address").strip()
    return service.send_test_email(template_name, to)


def _exit_with_failure(result: OperationResult) -> None:
    """Log a failed result and terminate the process."""
    logger.error(
        "Operation failed",
        operation=result.operation.value,
        error_kind=result.error_kind.value if result.error_kind else None,
        error=result.error_message,
        details=result.error_details,
    )
    err_console.print(
        f"[red]Error:[/red] {escape(result.error_message or 'unknown error')}", soft_wrap=True
    )
    sys.exit(1)


@click.command()
@click.option("--type", "op_type", default=OperationType.GET.value, show_default=True, help=TYPE_HELP)
@click.pass_context
def main(ctx, op_type: str):
    """Manage AWS SES email templates and send test emails."""
    # Usage is shown unless --type was given explicitly
    if ctx.get_parameter_source("op_type") != ParameterSource.COMMANDLINE:
        click.echo(ctx.get_help())
        ctx.exit(0)

    try:
        operation = OperationType(op_type)
    except ValueError:
        click.echo(ctx.get_help())
        ctx.exit(0)

    try:
        settings = load_settings()
    except ConfigurationError as e:
        setup_logging()
        _exit_with_failure(
            OperationResult.failed(operation, ErrorKind.CONFIGURATION, e.message, e.details)
        )

    setup_logging(debug=settings.debug, rich_output=settings.log_format == "console")
    bind_invocation(operation.value)
    logger.debug("Configuration loaded", **configuration_summary(settings))

    try:
        ses_client = create_ses_client(settings)
    except ConfigurationError as e:
        _exit_with_failure(
            OperationResult.failed(operation, ErrorKind.CONFIGURATION, e.message, e.details)
        )

    service = TemplateService(
        ses_client,
        file_reader=TemplateFileReader(settings.templates_dir),
        send_config=settings.send_test,
        page_size=settings.list_page_size,
    )

    result = run_operation(service, operation)
    if not result.succeeded:
        _exit_with_failure(result)

    for line in result.output:
        click.echo(line)


if __name__ == "__main__":
    main()
