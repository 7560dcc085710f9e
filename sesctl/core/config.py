"""
Configuration management for sesctl.

Provides validated configuration from environment variables, populated from a
local env file, with proper type checking and defaults.
"""

from __future__ import annotations

import io
import json
import os
from pathlib import Path
from typing import Any, Dict, List, Optional

from dotenv import load_dotenv
from dotenv.parser import parse_stream
from pydantic import AliasChoices, Field, ValidationError, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

from sesctl.core.exceptions import ConfigurationError

DEFAULT_ENV_FILE = ".env"
DEFAULT_TEST_SENDER = "Plip <contact@plip.kr>"
DEFAULT_TEST_TEMPLATE_DATA = '{ "name": "테스팅" }'


class AwsConfig(BaseSettings):
    """AWS credentials and region."""

    access_key_id: Optional[str] = Field(default=None, alias="AWS_ACCESS_KEY_ID")
    secret_access_key: Optional[str] = Field(default=None, alias="AWS_SECRET_ACCESS_KEY")
    session_token: Optional[str] = Field(default=None, alias="AWS_SESSION_TOKEN")

    # Falls back to boto3's own resolution (~/.aws/config) when unset
    region: Optional[str] = Field(
        default=None,
        validation_alias=AliasChoices("AWS_REGION", "AWS_DEFAULT_REGION"),
    )

    @field_validator("region", mode="before")
    @classmethod
    def blank_region_is_unset(cls, v):
        # A blank AWS_REGION= entry must not hide AWS_DEFAULT_REGION
        if isinstance(v, str) and not v.strip():
            return os.environ.get("AWS_DEFAULT_REGION", "").strip() or None
        return v

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")


class SendTestConfig(BaseSettings):
    """Sender and placeholder payload used by the test send."""

    sender: str = Field(default=DEFAULT_TEST_SENDER, alias="SES_TEST_SENDER")
    template_data: str = Field(default=DEFAULT_TEST_TEMPLATE_DATA, alias="SES_TEST_TEMPLATE_DATA")

    @field_validator("template_data")
    @classmethod
    def validate_template_data(cls, v):
        try:
            parsed = json.loads(v)
        except json.JSONDecodeError as e:
            raise ValueError(f"SES_TEST_TEMPLATE_DATA is not valid JSON: {e}")
        if not isinstance(parsed, dict):
            raise ValueError("SES_TEST_TEMPLATE_DATA must be a JSON object")
        return v

    model_config = SettingsConfigDict(env_prefix="", extra="ignore")


class Settings(BaseSettings):
    """Main application settings."""

    # Runtime
    debug: bool = Field(default=False, alias="DEBUG")
    dry_run: bool = Field(default=False, alias="DRY_RUN")
    log_format: str = Field(default="console", alias="LOG_FORMAT")

    # Templates
    templates_dir: Path = Field(default=Path("templates"), alias="SESCTL_TEMPLATES_DIR")
    list_page_size: int = Field(default=10, ge=1, le=100, alias="SESCTL_LIST_PAGE_SIZE")

    # Component configurations
    aws: AwsConfig = Field(default_factory=AwsConfig)
    send_test: SendTestConfig = Field(default_factory=SendTestConfig)

    @field_validator("debug", "dry_run", mode="before")
    @classmethod
    def parse_flag(cls, v):
        if isinstance(v, str):
            return v.lower() in ("1", "true", "yes")
        return bool(v)

    @field_validator("log_format")
    @classmethod
    def validate_log_format(cls, v):
        v = v.lower()
        if v not in ("console", "json"):
            raise ValueError("LOG_FORMAT must be 'console' or 'json'")
        return v

    model_config = SettingsConfigDict(
        env_prefix="",
        case_sensitive=False,
        extra="ignore",
    )


def load_env_file(path: Path) -> None:
    """
    Parse an env file and export its entries into the process environment.

    Variables that are already set are left untouched.

    Raises:
        ConfigurationError: If the file is missing, unreadable or malformed
    """
    if not path.is_file():
        raise ConfigurationError(f"Env file not found: {path}", details={"path": str(path)})

    try:
        content = path.read_text(encoding="utf-8")
    except (OSError, UnicodeDecodeError) as e:
        raise ConfigurationError(f"Unable to read env file {path}: {e}", details={"path": str(path)})

    bad_lines = [binding.original.line for binding in parse_stream(io.StringIO(content)) if binding.error]
    if bad_lines:
        raise ConfigurationError(
            f"Malformed env file {path}: could not parse line(s) {', '.join(map(str, bad_lines))}",
            details={"path": str(path), "lines": bad_lines},
        )

    load_dotenv(dotenv_path=path, override=False)


def validate_required_settings(config: Settings) -> List[str]:
    """
    Validate that the credentials needed to reach SES are present.

    Returns:
        List of missing required settings
    """
    missing = []
    if not config.aws.access_key_id:
        missing.append("AWS_ACCESS_KEY_ID")
    if not config.aws.secret_access_key:
        missing.append("AWS_SECRET_ACCESS_KEY")
    return missing


def load_settings(env_file: Optional[str] = None) -> Settings:
    """
    Load the env file, build settings and check credentials.

    Args:
        env_file: Env file path; defaults to $SESCTL_ENV_FILE or ``.env``

    Raises:
        ConfigurationError: On any configuration problem
    """
    path = Path(env_file or os.environ.get("SESCTL_ENV_FILE") or DEFAULT_ENV_FILE)
    load_env_file(path)

    try:
        config = Settings()
    except ValidationError as e:
        raise ConfigurationError(f"Invalid configuration: {e}")

    missing = validate_required_settings(config)
    if missing:
        raise ConfigurationError(
            f"Missing required settings: {', '.join(missing)}", details={"missing": missing}
        )

    return config


def configuration_summary(config: Settings) -> Dict[str, Any]:
    """Non-secret view of the settings, for debug logging."""
    return {
        "dry_run": config.dry_run,
        "region": config.aws.region or "(sdk default)",
        "templates_dir": str(config.templates_dir),
        "list_page_size": config.list_page_size,
        "test_sender": config.send_test.sender,
    }
