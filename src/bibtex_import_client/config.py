from __future__ import annotations

from typing import Literal
from urllib.parse import urlparse

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict

DEFAULT_ENDPOINT = "http://localhost:8080/import-bibtex"
DEFAULT_TIMEOUT_SECONDS = 5.0
DEFAULT_USER_AGENT = "bibtex-import-client/0.1"


def is_absolute_http_url(url: str) -> bool:
    parts = urlparse(url)
    return parts.scheme in ("http", "https") and bool(parts.netloc)


class ClientSettings(BaseSettings):
    """Connection settings for the import service, read from ``BIBTEX_IMPORT_*`` env vars or ``.env``."""

    model_config = SettingsConfigDict(
        env_prefix="BIBTEX_IMPORT_",
        extra="ignore",
        case_sensitive=False,
        env_file=".env",
        env_file_encoding="utf-8",
    )

    endpoint: str = Field(default=DEFAULT_ENDPOINT, description="URL of the import-bibtex service.")
    connect_timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Time allowed to establish the connection (seconds).",
    )
    read_timeout_seconds: float = Field(
        default=DEFAULT_TIMEOUT_SECONDS,
        gt=0,
        description="Time allowed for the service to answer once the request is sent (seconds).",
    )
    user_agent: str = Field(default=DEFAULT_USER_AGENT, min_length=1)
    log_level: Literal["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"] = Field(
        default="INFO", description="Level for the JSON request log."
    )

    @field_validator("endpoint")
    @classmethod
    def _endpoint_is_absolute(cls, value: str) -> str:
        if not is_absolute_http_url(value):
            raise ValueError(f"endpoint must be an absolute http(s) URL, got {value!r}")
        return value

    @field_validator("log_level", mode="before")
    @classmethod
    def _upper_level(cls, value: object) -> object:
        return value.upper() if isinstance(value, str) else value
