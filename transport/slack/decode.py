"""
Slack Interaction Decoding

PURE CONVERSION - NO I/O, NO RAISING

Turns the form-encoded body of a block_actions interaction into a
CompletionRequest. Every failure is returned as a DecodeError member so the
caller can log and stop without a try/except around this module.
"""

import json
from enum import Enum
from typing import Any, Optional, Union
from urllib.parse import parse_qs, urlparse

from pydantic import ValidationError

from .schemas import ActionValue, CompletionRequest


class DecodeError(str, Enum):
    """Why an interaction body could not be turned into a CompletionRequest."""

    MISSING_PAYLOAD = "missing_payload"
    MALFORMED_PAYLOAD = "malformed_payload"
    MISSING_ACTION = "missing_action"
    MISSING_FIELDS = "missing_fields"
    MISSING_RESPONSE_URL = "missing_response_url"


DecodeResult = Union[CompletionRequest, DecodeError]


def decode_action_payload(
    body: Union[bytes, str],
    require_response_url: bool = True,
) -> DecodeResult:
    """
    Decode a Slack interaction body.

    Stages (each fails independently):
    1. form field `payload`        -> MISSING_PAYLOAD
    2. JSON object                 -> MALFORMED_PAYLOAD
    3. non-empty `actions` list    -> MISSING_ACTION
    4. first action's JSON `value` -> MISSING_FIELDS
    5. `response_url`              -> MISSING_RESPONSE_URL (if required)

    Args:
        body: Raw form-encoded request body
        require_response_url: When False, a missing URL yields
            response_url=None instead of an error

    Returns:
        CompletionRequest or a DecodeError member
    """

    raw_payload = _extract_payload_field(body)
    if isinstance(raw_payload, DecodeError):
        return raw_payload

    payload = _load_json(raw_payload)
    if not isinstance(payload, dict):
        return DecodeError.MALFORMED_PAYLOAD

    actions = payload.get("actions")
    if not isinstance(actions, list) or not actions or not isinstance(actions[0], dict):
        return DecodeError.MISSING_ACTION

    action_value = _decode_action_value(actions[0].get("value"))
    if action_value is None:
        return DecodeError.MISSING_FIELDS

    response_url = _extract_response_url(payload)
    if response_url is None and require_response_url:
        return DecodeError.MISSING_RESPONSE_URL

    return CompletionRequest(
        document_id=action_value.document_id,
        item_locator=action_value.item_locator,
        response_url=response_url,
        user_id=_extract_user_id(payload),
    )


def _extract_payload_field(body: Union[bytes, str]) -> Union[str, DecodeError]:
    if isinstance(body, bytes):
        try:
            body = body.decode("utf-8")
        except UnicodeDecodeError:
            return DecodeError.MALFORMED_PAYLOAD

    fields = parse_qs(body, keep_blank_values=True)
    values = fields.get("payload")
    if not values or not values[0]:
        return DecodeError.MISSING_PAYLOAD
    return values[0]


def _load_json(text: str) -> Any:
    """json.loads that returns None instead of raising."""
    try:
        return json.loads(text)
    except (ValueError, RecursionError):
        return None


def _decode_action_value(value: Any) -> Optional[ActionValue]:
    if not isinstance(value, str):
        return None

    nested = _load_json(value)
    if not isinstance(nested, dict):
        return None

    try:
        return ActionValue.model_validate(nested)
    except ValidationError:
        return None


def _extract_response_url(payload: dict) -> Optional[str]:
    url = payload.get("response_url") or payload.get("responseUrl")
    if not isinstance(url, str):
        return None

    try:
        parsed = urlparse(url)
    except ValueError:
        return None
    if parsed.scheme not in ("http", "https") or not parsed.netloc:
        return None
    return url


def _extract_user_id(payload: dict) -> Optional[str]:
    user = payload.get("user")
    if isinstance(user, dict) and isinstance(user.get("id"), str):
        return user["id"]
    return None
