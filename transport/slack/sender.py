"""
Slack Response Sender

Posts a message to an interaction's response_url.
No formatting intelligence. No retries.
"""

import logging
from abc import ABC, abstractmethod
from typing import Any, Optional

import httpx

from .schemas import ResponseUrlMessage

logger = logging.getLogger(__name__)


class NotifySenderError(Exception):
    """Failed to deliver a message to the callback URL."""
    pass


class NotifyClient(ABC):
    """
    Abstract callback boundary.
    The completion workflow depends ONLY on this interface.
    """

    @abstractmethod
    async def post(self, callback_url: str, payload: dict[str, Any]) -> None:
        """Deliver `payload` as JSON to `callback_url`; raise NotifySenderError on failure."""
        raise NotImplementedError


class SlackResponseUrlClient(NotifyClient):
    """
    Sends JSON to Slack response_url webhooks over httpx.

    response_url needs no bearer token; the URL itself is the credential.
    """

    def __init__(
        self,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.timeout = timeout
        self._transport = transport

    async def post(self, callback_url: str, payload: dict[str, Any]) -> None:
        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.post(
                    callback_url,
                    json=payload,
                    headers={"Content-Type": "application/json"},
                    timeout=self.timeout,
                )
        except httpx.RequestError as e:
            logger.error(
                f"HTTP request to response_url failed: {e}",
                extra={"error": str(e)},
            )
            raise NotifySenderError(f"HTTP request failed: {e}") from e

        if not response.is_success:
            error_text = response.text
            logger.error(
                f"Slack response_url error: {response.status_code} - {error_text}",
                extra={
                    "status_code": response.status_code,
                    "error_body": error_text,
                },
            )
            raise NotifySenderError(
                f"response_url returned {response.status_code}"
            )

        logger.debug("Message delivered to response_url")


def build_completion_message(task_text: str, marker: str) -> ResponseUrlMessage:
    """Replacement for the original interactive message: the task, marked done."""
    text = f"{marker}{task_text}"
    return ResponseUrlMessage(
        replace_original=True,
        text=text,
        blocks=[
            {
                "type": "section",
                "text": {"type": "mrkdwn", "text": text},
            }
        ],
    )


def build_failure_message(reason: str) -> ResponseUrlMessage:
    """Ephemeral notice that leaves the original message (and its button) in place."""
    return ResponseUrlMessage(
        replace_original=False,
        response_type="ephemeral",
        text=f"Could not mark the task as complete: {reason}",
    )
