"""Tests for loading templates from their JSON and HTML files."""

import pytest

from sesctl.core.exceptions import (
    TemplateFileError,
    TemplateFileFormatError,
    TemplateFileNotFoundError,
)
from sesctl.data.template_files import TemplateFileReader


class TestTemplateFileReader:
    """Merge metadata and body files into a TemplateRecord."""

    def test_loads_welcome_template(self, write_template):
        templates_dir = write_template(
            "welcome", metadata={"name": "welcome", "subject": "Hi"}, html="<p>Hello</p>"
        )

        record = TemplateFileReader(templates_dir).load("welcome")

        assert record.name == "welcome"
        assert record.subject == "Hi"
        assert record.html == "<p>Hello</p>"

    def test_html_file_overrides_json_html(self, write_template):
        body = "<html><body>{{name}}\n  second line</body></html>\n"
        templates_dir = write_template(
            "promo",
            metadata={"name": "promo", "subject": "Sale", "html": "<p>stale</p>"},
            html=body,
        )

        record = TemplateFileReader(templates_dir).load("promo")

        assert record.html == body

    def test_non_ascii_content_preserved(self, write_template):
        templates_dir = write_template(
            "korean", metadata={"name": "korean", "subject": "안녕하세요 {{name}}"}, html="<p>테스트</p>"
        )

        record = TemplateFileReader(templates_dir).load("korean")

        assert record.subject == "안녕하세요 {{name}}"
        assert record.html == "<p>테스트</p>"

    def test_empty_and_missing_fields_pass_through(self, write_template):
        templates_dir = write_template("blank", metadata={"name": ""}, html="")

        record = TemplateFileReader(templates_dir).load("blank")

        assert record.name == ""
        assert record.subject == ""
        assert record.html == ""

    def test_unknown_json_keys_ignored(self, write_template):
        templates_dir = write_template(
            "extra", metadata={"name": "extra", "subject": "S", "text": "plain"}, html="<p/>"
        )

        record = TemplateFileReader(templates_dir).load("extra")

        assert record.model_dump() == {"name": "extra", "subject": "S", "html": "<p/>"}

    def test_missing_json_file(self, write_template):
        templates_dir = write_template("orphan", html="<p>body only</p>")

        with pytest.raises(TemplateFileNotFoundError) as exc_info:
            TemplateFileReader(templates_dir).load("orphan")

        assert exc_info.value.file_kind == "json"
        assert "metadata file not found" in str(exc_info.value)
        assert exc_info.value.path.endswith("orphan.json")

    def test_missing_html_file(self, write_template):
        templates_dir = write_template("headless", metadata={"name": "headless", "subject": "S"})

        with pytest.raises(TemplateFileNotFoundError) as exc_info:
            TemplateFileReader(templates_dir).load("headless")

        assert exc_info.value.file_kind == "html"
        assert "body file not found" in str(exc_info.value)

    def test_missing_templates_directory(self, tmp_path):
        with pytest.raises(TemplateFileNotFoundError):
            TemplateFileReader(tmp_path / "nowhere").load("welcome")

    def test_malformed_json(self, write_template):
        templates_dir = write_template("broken", raw_json='{"name": "broken",', html="<p/>")

        with pytest.raises(TemplateFileFormatError) as exc_info:
            TemplateFileReader(templates_dir).load("broken")

        assert "Malformed JSON" in str(exc_info.value)

    def test_json_must_be_object(self, write_template):
        templates_dir = write_template("list", raw_json='["name", "subject"]', html="<p/>")

        with pytest.raises(TemplateFileFormatError):
            TemplateFileReader(templates_dir).load("list")

    def test_wrong_field_type_rejected(self, write_template):
        templates_dir = write_template("numeric", metadata={"name": 42, "subject": "S"}, html="<p/>")

        with pytest.raises(TemplateFileFormatError) as exc_info:
            TemplateFileReader(templates_dir).load("numeric")

        assert "Invalid template metadata" in str(exc_info.value)

    def test_file_errors_share_base_class(self, write_template):
        templates_dir = write_template("orphan", html="<p/>")

        with pytest.raises(TemplateFileError):
            TemplateFileReader(templates_dir).load("orphan")

    def test_default_directory_is_relative_templates(self, write_template):
        write_template("welcome", metadata={"name": "welcome", "subject": "Hi"}, html="<p>Hello</p>")

        record = TemplateFileReader().load("welcome")

        assert record.name == "welcome"
