"""Pytest configuration and fixtures."""

import json
import sys
import time
from pathlib import Path
from urllib.parse import urlencode

import pytest

# Add project root to sys.path for imports
PROJECT_ROOT = Path(__file__).parent.parent
sys.path.insert(0, str(PROJECT_ROOT))

from documents import DEFAULT_HIGHLIGHT_RGB, StubDocumentClient  # noqa: E402
from infra.config import AppConfig  # noqa: E402
from transport.slack.security import (  # noqa: E402
    SLACK_SIGNATURE_HEADER,
    SLACK_TIMESTAMP_HEADER,
    compute_signature,
)
from transport.slack.sender import NotifyClient, NotifySenderError  # noqa: E402

SIGNING_SECRET = "8f742231b10e8888abcd99yyyzzz85a5"
RESPONSE_URL = "https://hooks.slack.com/actions/T000/1234/abcd"


class RecordingNotifyClient(NotifyClient):
    """NotifyClient that records posts and optionally fails."""

    def __init__(self, fail: bool = False):
        self.fail = fail
        self.posts: list[tuple[str, dict]] = []

    async def post(self, callback_url, payload):
        self.posts.append((callback_url, payload))
        if self.fail:
            raise NotifySenderError("response_url returned 500")


@pytest.fixture
def signing_secret():
    return SIGNING_SECRET


@pytest.fixture
def interaction_body():
    """Factory for form-encoded block_actions bodies."""

    def _build(
        document_id="D1",
        item_locator=3,
        response_url=RESPONSE_URL,
        actions=None,
        value=None,
    ) -> bytes:
        if actions is None:
            if value is None:
                value = json.dumps({"documentId": document_id, "itemLocator": item_locator})
            actions = [{"action_id": "mark_done", "type": "button", "value": value}]

        payload = {
            "type": "block_actions",
            "user": {"id": "U123", "username": "alice"},
            "actions": actions,
        }
        if response_url is not None:
            payload["response_url"] = response_url

        return urlencode({"payload": json.dumps(payload)}).encode("utf-8")

    return _build


@pytest.fixture
def signed_headers(signing_secret):
    """Factory for Slack signature headers over a body."""

    def _sign(body: bytes, timestamp=None, secret=None) -> dict[str, str]:
        timestamp = str(int(time.time()) if timestamp is None else timestamp)
        return {
            SLACK_SIGNATURE_HEADER: compute_signature(body, timestamp, secret or signing_secret),
            SLACK_TIMESTAMP_HEADER: timestamp,
            "Content-Type": "application/x-www-form-urlencoded",
        }

    return _sign


@pytest.fixture
def task_document():
    """Stub document D1 whose content unit 3 is "Buy milk"."""
    return StubDocumentClient({"D1": ["Shopping list", "Eggs", "Bread", "Buy milk", None]})


@pytest.fixture
def notify_client():
    return RecordingNotifyClient()


@pytest.fixture
def app_config(signing_secret):
    return AppConfig(
        slack_signing_secret=signing_secret,
        signature_max_age_seconds=300,
        ignore_slack_retries=True,
        require_response_url=True,
        notify_failures=False,
        document_backend="stub",
        google_service_account_email="",
        google_private_key="",
        google_docs_base_url="https://docs.googleapis.com/v1",
        completion_marker="✅ ",
        highlight_rgb=DEFAULT_HIGHLIGHT_RGB,
        http_timeout_seconds=5.0,
        environment="test",
        app_port=8000,
    )


@pytest.fixture
def failing_notify_client():
    return RecordingNotifyClient(fail=True)
