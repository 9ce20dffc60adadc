"""Slack Transport Layer - Module Exports

The router lives in transport.slack.webhook and is imported by main; it is
not re-exported here so the workflow can import these pure modules without
pulling in the application wiring.
"""

from .decode import DecodeError, decode_action_payload
from .schemas import ActionValue, CompletionRequest, ResponseUrlMessage, VerifiedRequest
from .security import (
    SLACK_SIGNATURE_HEADER,
    SLACK_TIMESTAMP_HEADER,
    compute_signature,
    verify_request,
    verify_signature,
)
from .sender import (
    NotifyClient,
    NotifySenderError,
    SlackResponseUrlClient,
    build_completion_message,
    build_failure_message,
)

__all__ = [
    # Schemas
    "VerifiedRequest",
    "CompletionRequest",
    "ActionValue",
    "ResponseUrlMessage",
    # Security
    "SLACK_SIGNATURE_HEADER",
    "SLACK_TIMESTAMP_HEADER",
    "compute_signature",
    "verify_signature",
    "verify_request",
    # Decoding
    "DecodeError",
    "decode_action_payload",
    # Sender
    "NotifyClient",
    "NotifySenderError",
    "SlackResponseUrlClient",
    "build_completion_message",
    "build_failure_message",
]
