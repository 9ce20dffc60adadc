"""
Infrastructure configuration system.

Environment-based settings, read once at startup into an immutable value.
Verification and the document/notify clients receive what they need from
here explicitly; nothing below this module reads the environment.
"""

import os
from dataclasses import dataclass
from pathlib import Path
from typing import Literal, Optional, Tuple

from dotenv import load_dotenv

from completion import CompletionOptions, DEFAULT_MARKER
from documents import (
    DEFAULT_HIGHLIGHT_RGB,
    DocumentClient,
    GoogleDocsClient,
    ServiceAccountTokenSource,
    StubDocumentClient,
)
from documents.google_docs import DEFAULT_BASE_URL
from transport.slack.security import DEFAULT_MAX_AGE_SECONDS
from transport.slack.sender import NotifyClient, SlackResponseUrlClient

DocumentBackendType = Literal["google", "stub"]

ENV_PATH = Path(__file__).parent.parent / ".env"


class ConfigError(Exception):
    """Configuration is missing or invalid."""
    pass


def _env_bool(name: str, default: bool) -> bool:
    return os.getenv(name, "true" if default else "false").strip().lower() in ("1", "true", "yes")


def _env_number(name: str, default: str, cast=int):
    raw = os.getenv(name, default)
    try:
        return cast(raw)
    except ValueError:
        raise ConfigError(f"{name} must be a number, got {raw!r}")


@dataclass(frozen=True)
class AppConfig:
    """Process-wide configuration. Built once, never mutated."""

    # Slack
    slack_signing_secret: str
    signature_max_age_seconds: int
    ignore_slack_retries: bool
    require_response_url: bool
    notify_failures: bool

    # Documents
    document_backend: DocumentBackendType
    google_service_account_email: str
    google_private_key: str
    google_docs_base_url: str
    completion_marker: str
    highlight_rgb: Tuple[float, float, float]

    # Process
    http_timeout_seconds: float
    environment: str
    app_port: int

    @classmethod
    def from_env(cls, env_file: Optional[Path] = ENV_PATH) -> "AppConfig":
        """
        Load configuration from environment variables (and `.env` if present).

        GOOGLE_PRIVATE_KEY is usually stored on one line with literal "\\n"
        sequences; they are turned back into newlines.
        """
        if env_file is not None:
            load_dotenv(env_file)

        return cls(
            # Slack Configuration
            slack_signing_secret=os.getenv("SLACK_SIGNING_SECRET", ""),
            signature_max_age_seconds=_env_number(
                "SIGNATURE_MAX_AGE_SECONDS", str(DEFAULT_MAX_AGE_SECONDS)
            ),
            ignore_slack_retries=_env_bool("IGNORE_SLACK_RETRIES", True),
            require_response_url=_env_bool("REQUIRE_RESPONSE_URL", True),
            notify_failures=_env_bool("NOTIFY_FAILURES", False),

            # Document Configuration
            document_backend=os.getenv("DOCUMENT_BACKEND", "google"),  # type: ignore
            google_service_account_email=os.getenv("GOOGLE_SERVICE_ACCOUNT_EMAIL", ""),
            google_private_key=os.getenv("GOOGLE_PRIVATE_KEY", "").replace("\\n", "\n"),
            google_docs_base_url=os.getenv("GOOGLE_DOCS_BASE_URL", DEFAULT_BASE_URL),
            completion_marker=os.getenv("COMPLETION_MARKER", DEFAULT_MARKER),
            highlight_rgb=DEFAULT_HIGHLIGHT_RGB,

            # Process Configuration
            http_timeout_seconds=_env_number("HTTP_TIMEOUT_SECONDS", "30", float),
            environment=os.getenv("ENVIRONMENT", "development"),
            app_port=_env_number("APP_PORT", "8000"),
        )

    def missing_settings(self) -> list[str]:
        """Names of required settings that are not set."""
        required = ["SLACK_SIGNING_SECRET"]
        if self.document_backend == "google":
            required += ["GOOGLE_SERVICE_ACCOUNT_EMAIL", "GOOGLE_PRIVATE_KEY"]
        return [name for name in required if not getattr(self, name.lower())]

    def completion_options(self) -> CompletionOptions:
        return CompletionOptions(
            marker=self.completion_marker,
            highlight_rgb=self.highlight_rgb,
            require_response_url=self.require_response_url,
            notify_failures=self.notify_failures,
        )

    def create_document_client(self) -> DocumentClient:
        """Create document backend instance based on configuration."""
        if self.document_backend == "stub":
            return StubDocumentClient()
        if self.document_backend == "google":
            return GoogleDocsClient(
                token_source=ServiceAccountTokenSource(
                    client_email=self.google_service_account_email,
                    private_key=self.google_private_key,
                ),
                base_url=self.google_docs_base_url,
                timeout=self.http_timeout_seconds,
            )
        raise ConfigError(f"Unknown DOCUMENT_BACKEND: {self.document_backend!r}")

    def create_notify_client(self) -> NotifyClient:
        return SlackResponseUrlClient(timeout=self.http_timeout_seconds)


def get_config() -> AppConfig:
    """Get configuration from environment."""
    return AppConfig.from_env()
