"""
Configuration Tests

AppConfig.from_env and client factories.
"""

import dataclasses
from unittest.mock import patch

import pytest

from documents import GoogleDocsClient, StubDocumentClient
from infra.bootstrap import AppBootstrap
from infra.config import AppConfig, ConfigError
from transport.slack.sender import SlackResponseUrlClient


def _from_env(env: dict) -> AppConfig:
    with patch.dict("os.environ", env, clear=True):
        return AppConfig.from_env(env_file=None)


class TestFromEnv:

    def test_defaults(self):
        config = _from_env({})

        assert config.slack_signing_secret == ""
        assert config.signature_max_age_seconds == 300
        assert config.ignore_slack_retries is True
        assert config.require_response_url is True
        assert config.notify_failures is False
        assert config.document_backend == "google"
        assert config.google_docs_base_url == "https://docs.googleapis.com/v1"
        assert config.completion_marker == "✅ "
        assert config.http_timeout_seconds == 30.0
        assert config.app_port == 8000

    def test_reads_values(self):
        config = _from_env(
            {
                "SLACK_SIGNING_SECRET": "s3cret",
                "SIGNATURE_MAX_AGE_SECONDS": "120",
                "IGNORE_SLACK_RETRIES": "false",
                "NOTIFY_FAILURES": "yes",
                "DOCUMENT_BACKEND": "stub",
                "HTTP_TIMEOUT_SECONDS": "2.5",
                "COMPLETION_MARKER": "[x] ",
            }
        )

        assert config.slack_signing_secret == "s3cret"
        assert config.signature_max_age_seconds == 120
        assert config.ignore_slack_retries is False
        assert config.notify_failures is True
        assert config.document_backend == "stub"
        assert config.http_timeout_seconds == 2.5
        assert config.completion_marker == "[x] "

    def test_private_key_newlines_unescaped(self):
        config = _from_env({"GOOGLE_PRIVATE_KEY": "-----BEGIN-----\\nabc\\n-----END-----"})
        assert config.google_private_key == "-----BEGIN-----\nabc\n-----END-----"

    def test_invalid_number(self):
        with pytest.raises(ConfigError, match="APP_PORT"):
            _from_env({"APP_PORT": "eighty"})

    def test_immutable(self, app_config):
        with pytest.raises(dataclasses.FrozenInstanceError):
            app_config.slack_signing_secret = "changed"


class TestMissingSettings:

    def test_google_backend_requires_credentials(self):
        config = _from_env({"SLACK_SIGNING_SECRET": "s"})
        assert config.missing_settings() == [
            "GOOGLE_SERVICE_ACCOUNT_EMAIL",
            "GOOGLE_PRIVATE_KEY",
        ]

    def test_stub_backend_only_needs_secret(self):
        assert _from_env({"DOCUMENT_BACKEND": "stub"}).missing_settings() == ["SLACK_SIGNING_SECRET"]

    def test_complete(self, app_config):
        assert app_config.missing_settings() == []


class TestFactories:

    def test_stub_document_client(self, app_config):
        assert isinstance(app_config.create_document_client(), StubDocumentClient)

    def test_google_document_client(self, app_config):
        config = dataclasses.replace(app_config, document_backend="google")
        client = config.create_document_client()

        assert isinstance(client, GoogleDocsClient)
        assert client.timeout == 5.0

    def test_unknown_backend(self, app_config):
        config = dataclasses.replace(app_config, document_backend="dropbox")
        with pytest.raises(ConfigError):
            config.create_document_client()

    def test_notify_client(self, app_config):
        assert isinstance(app_config.create_notify_client(), SlackResponseUrlClient)

    def test_completion_options(self, app_config):
        options = dataclasses.replace(app_config, notify_failures=True).completion_options()

        assert options.marker == "✅ "
        assert options.notify_failures is True
        assert options.require_response_url is True


class TestAppBootstrap:

    def setup_method(self):
        AppBootstrap.reset()

    def teardown_method(self):
        AppBootstrap.reset()

    def test_singleton(self, app_config):
        first = AppBootstrap.get_instance(app_config)
        assert AppBootstrap.get_instance() is first
        assert first.orchestrator.document_client is first.document_client

    def test_injected_clients(self, app_config, task_document, notify_client):
        bootstrap = AppBootstrap(app_config, document_client=task_document, notify_client=notify_client)

        assert bootstrap.orchestrator.document_client is task_document
        assert bootstrap.orchestrator.notify_client is notify_client
        assert bootstrap.orchestrator.options == app_config.completion_options()
