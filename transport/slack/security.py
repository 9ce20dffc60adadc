"""
Slack Signature Verification

SECURITY BOUNDARY - Verify Slack's v0 HMAC request signature.
No workflow imports. No retries. No shared state.

ref: https://api.slack.com/authentication/verifying-requests-from-slack
"""

import hashlib
import hmac
import logging
import time
from typing import Mapping, Optional

from .schemas import VerifiedRequest

logger = logging.getLogger(__name__)

SLACK_SIGNATURE_HEADER = "X-Slack-Signature"
SLACK_TIMESTAMP_HEADER = "X-Slack-Request-Timestamp"
SIGNATURE_VERSION = "v0"
DEFAULT_MAX_AGE_SECONDS = 300


def compute_signature(raw_body: bytes, timestamp: str, signing_secret: str) -> str:
    """
    Compute the `v0=<hex>` signature Slack attaches to a request.

    The base string is `v0:<timestamp>:<raw body>`. The body must be the
    bytes received on the wire; a re-serialized body will not match.
    """
    base = f"{SIGNATURE_VERSION}:{timestamp}:".encode("utf-8") + raw_body
    digest = hmac.new(
        key=signing_secret.encode("utf-8"),
        msg=base,
        digestmod=hashlib.sha256,
    ).hexdigest()
    return f"{SIGNATURE_VERSION}={digest}"


def verify_signature(
    raw_body: bytes,
    signature: Optional[str],
    timestamp: Optional[str],
    signing_secret: str,
    now: float,
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
) -> bool:
    """
    Check a request's signature and freshness.

    Returns False (never raises) when:
    - either header is missing
    - the timestamp is not an integer or is more than `max_age_seconds`
      away from `now` in either direction
    - the recomputed signature differs from the supplied one

    Args:
        raw_body: Request body exactly as received
        signature: X-Slack-Signature header value
        timestamp: X-Slack-Request-Timestamp header value
        signing_secret: Shared secret from the Slack app config
        now: Current unix time in seconds
        max_age_seconds: Replay window

    Returns:
        True if the request is authentic and fresh
    """

    if not signature or not timestamp or not signing_secret:
        logger.debug("Signature check failed: missing header or secret")
        return False

    try:
        request_time = int(timestamp)
    except ValueError:
        logger.debug("Signature check failed: non-numeric timestamp")
        return False

    if abs(now - request_time) > max_age_seconds:
        logger.debug(
            "Signature check failed: timestamp outside replay window",
            extra={"skew_seconds": int(now - request_time)},
        )
        return False

    expected = compute_signature(raw_body, timestamp, signing_secret)

    # compare_digest raises TypeError on non-ASCII str, so compare bytes.
    # A length mismatch is simply unequal.
    try:
        supplied = signature.encode("ascii")
    except UnicodeEncodeError:
        return False

    return hmac.compare_digest(expected.encode("ascii"), supplied)


def verify_request(
    raw_body: bytes,
    headers: Mapping[str, str],
    signing_secret: str,
    now: Optional[float] = None,
    max_age_seconds: int = DEFAULT_MAX_AGE_SECONDS,
) -> Optional[VerifiedRequest]:
    """
    Verify an inbound request and wrap it as a VerifiedRequest.

    Args:
        raw_body: Request body exactly as received
        headers: Request headers (Starlette headers are case-insensitive)
        signing_secret: Shared secret
        now: Current unix time; defaults to time.time()
        max_age_seconds: Replay window

    Returns:
        VerifiedRequest, or None if verification failed
    """
    if now is None:
        now = time.time()

    signature = headers.get(SLACK_SIGNATURE_HEADER)
    timestamp = headers.get(SLACK_TIMESTAMP_HEADER)

    if not verify_signature(
        raw_body,
        signature,
        timestamp,
        signing_secret,
        now,
        max_age_seconds=max_age_seconds,
    ):
        return None

    return VerifiedRequest(
        raw_body=raw_body,
        signature=signature,
        timestamp=timestamp,
        received_at=now,
    )
