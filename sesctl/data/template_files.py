"""
Template file loading.

A template lives on disk as two files sharing an identifier:
``<id>.json`` holds the name and subject, ``<id>.html`` holds the body.
"""

import json
from pathlib import Path
from typing import Union

import structlog
from pydantic import ValidationError

from sesctl.core.exceptions import (
    TemplateFileError,
    TemplateFileFormatError,
    TemplateFileNotFoundError,
)
from sesctl.core.models import TemplateRecord

logger = structlog.get_logger(__name__)


class TemplateFileReader:
    """Build TemplateRecords from the files in a templates directory."""

    def __init__(self, templates_dir: Union[str, Path] = "templates"):
        self.templates_dir = Path(templates_dir)

    def json_path(self, template_id: str) -> Path:
        return self.templates_dir / f"{template_id}.json"

    def html_path(self, template_id: str) -> Path:
        return self.templates_dir / f"{template_id}.html"

    def load(self, template_id: str) -> TemplateRecord:
        """
        Load and merge a template's metadata and body files.

        Any ``html`` key in the JSON file is discarded in favour of the
        contents of the HTML file. Empty names or subjects are passed through
        unvalidated.

        Args:
            template_id: File stem shared by the JSON and HTML files

        Returns:
            Fully populated TemplateRecord

        Raises:
            TemplateFileNotFoundError: If either file is missing
            TemplateFileFormatError: If the JSON file cannot be parsed
        """
        metadata = self._read_metadata(template_id)
        html = self._read_body(template_id)

        try:
            record = TemplateRecord.model_validate({**metadata, "html": html})
        except ValidationError as e:
            path = self.json_path(template_id)
            raise TemplateFileFormatError(
                f"Invalid template metadata in {path}: {e.errors()[0]['msg']}", path=str(path)
            )

        logger.debug(
            "Template files loaded",
            template_id=template_id,
            name=record.name,
            html_size=len(record.html),
        )
        return record

    def _read_metadata(self, template_id: str) -> dict:
        path = self.json_path(template_id)
        try:
            raw = path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise TemplateFileNotFoundError(
                f"Template metadata file not found: {path}", path=str(path), file_kind="json"
            )
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateFileError(f"Unable to read {path}: {e}", path=str(path))

        try:
            metadata = json.loads(raw)
        except json.JSONDecodeError as e:
            raise TemplateFileFormatError(f"Malformed JSON in {path}: {e}", path=str(path))

        if not isinstance(metadata, dict):
            raise TemplateFileFormatError(
                f"Template metadata in {path} must be a JSON object", path=str(path)
            )
        return metadata

    def _read_body(self, template_id: str) -> str:
        path = self.html_path(template_id)
        try:
            return path.read_text(encoding="utf-8")
        except FileNotFoundError:
            raise TemplateFileNotFoundError(
                f"Template body file not found: {path}", path=str(path), file_kind="html"
            )
        except (OSError, UnicodeDecodeError) as e:
            raise TemplateFileError(f"Unable to read {path}: {e}", path=str(path))
