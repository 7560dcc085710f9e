"""Configure pytest fixtures and environment for sesctl tests."""

import json
import os
from unittest.mock import Mock

import boto3
import pytest
import structlog
from botocore.stub import Stubber

from sesctl.core.config import AwsConfig
from sesctl.data.ses_client import SesTemplateClient

_ISOLATED_PREFIXES = ("AWS_", "SES_", "SESCTL_")
_ISOLATED_NAMES = ("DEBUG", "DRY_RUN", "LOG_FORMAT")


@pytest.fixture(autouse=True)
def isolated_environment(monkeypatch, tmp_path):
    """Run each test in an empty working directory with no AWS or sesctl variables.

    load_dotenv writes straight into os.environ, so the whole environment is
    snapshotted and restored rather than patched variable by variable.
    """
    saved = dict(os.environ)
    for name in list(os.environ):
        if name.startswith(_ISOLATED_PREFIXES) or name in _ISOLATED_NAMES:
            del os.environ[name]

    # Keep boto3 away from the developer's ~/.aws files and instance metadata
    os.environ["AWS_CONFIG_FILE"] = str(tmp_path / "aws_config")
    os.environ["AWS_SHARED_CREDENTIALS_FILE"] = str(tmp_path / "aws_credentials")
    os.environ["AWS_EC2_METADATA_DISABLED"] = "true"

    monkeypatch.chdir(tmp_path)
    yield
    os.environ.clear()
    os.environ.update(saved)
    # main() binds structlog to the runner's captured stderr
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture
def aws_config():
    return AwsConfig(
        AWS_ACCESS_KEY_ID="testing",
        AWS_SECRET_ACCESS_KEY="testing",
        AWS_REGION="us-east-1",
    )


@pytest.fixture
def stubbed_ses(aws_config):
    """Real sesv2 client with a Stubber attached, wrapped in SesTemplateClient."""
    client = boto3.client(
        "sesv2",
        region_name="us-east-1",
        aws_access_key_id="testing",
        aws_secret_access_key="testing",
    )
    stubber = Stubber(client)
    return SesTemplateClient(aws_config, client=client), stubber


@pytest.fixture
def boto_mock():
    """Plain Mock standing in for the boto3 sesv2 client."""
    return Mock()


@pytest.fixture
def write_template(tmp_path):
    """Write ``<id>.json`` / ``<id>.html`` into ``tmp_path/templates``."""
    templates_dir = tmp_path / "templates"
    templates_dir.mkdir(exist_ok=True)

    def _write(template_id, metadata=None, html=None, raw_json=None):
        if raw_json is not None:
            (templates_dir / f"{template_id}.json").write_text(raw_json, encoding="utf-8")
        elif metadata is not None:
            (templates_dir / f"{template_id}.json").write_text(
                json.dumps(metadata, ensure_ascii=False), encoding="utf-8"
            )
        if html is not None:
            (templates_dir / f"{template_id}.html").write_text(html, encoding="utf-8")
        return templates_dir

    return _write
