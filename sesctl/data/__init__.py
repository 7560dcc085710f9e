"""Data access: local template files and the SES API."""

from .ses_client import SesTemplateClient, create_ses_client
from .template_files import TemplateFileReader

__all__ = ["SesTemplateClient", "create_ses_client", "TemplateFileReader"]
