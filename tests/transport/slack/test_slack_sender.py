"""
Slack Response Sender Tests

response_url delivery over httpx (MockTransport, no network).
"""

import json

import httpx
import pytest

from transport.slack.sender import (
    NotifySenderError,
    SlackResponseUrlClient,
    build_completion_message,
    build_failure_message,
)

RESPONSE_URL = "https://hooks.slack.com/actions/T000/1234/abcd"


def _client(handler) -> SlackResponseUrlClient:
    return SlackResponseUrlClient(timeout=5.0, transport=httpx.MockTransport(handler))


class TestSlackResponseUrlClient:
    """POST JSON to response_url."""

    @pytest.mark.asyncio
    async def test_posts_json_payload(self):
        seen = []

        def handler(request: httpx.Request) -> httpx.Response:
            seen.append(request)
            return httpx.Response(200, text="ok")

        payload = {"replace_original": True, "text": "done"}
        await _client(handler).post(RESPONSE_URL, payload)

        assert len(seen) == 1
        assert seen[0].method == "POST"
        assert str(seen[0].url) == RESPONSE_URL
        assert seen[0].headers["content-type"] == "application/json"
        assert json.loads(seen[0].content) == payload

    @pytest.mark.asyncio
    async def test_error_status_raises(self):
        def handler(request):
            return httpx.Response(404, text="expired_url")

        with pytest.raises(NotifySenderError, match="404"):
            await _client(handler).post(RESPONSE_URL, {"text": "done"})

    @pytest.mark.asyncio
    async def test_network_error_raises(self):
        def handler(request):
            raise httpx.ConnectError("connection refused", request=request)

        with pytest.raises(NotifySenderError, match="HTTP request failed"):
            await _client(handler).post(RESPONSE_URL, {"text": "done"})


class TestMessageBuilders:
    """Callback payload shapes."""

    def test_completion_message_replaces_original(self):
        payload = build_completion_message("Buy milk", "✅ ").to_payload()

        assert payload["replace_original"] is True
        assert payload["text"] == "✅ Buy milk"
        assert payload["blocks"][0]["type"] == "section"
        assert payload["blocks"][0]["text"] == {"type": "mrkdwn", "text": "✅ Buy milk"}
        assert "response_type" not in payload

    def test_failure_message_is_ephemeral(self):
        payload = build_failure_message("the document could not be read").to_payload()

        assert payload["replace_original"] is False
        assert payload["response_type"] == "ephemeral"
        assert "could not be read" in payload["text"]
        assert payload["blocks"] == []
