"""
Slack Transport Layer - Schemas

PURE DATA MODELS - NO LOGIC
Contract between the Slack interaction payload and the completion workflow.
"""

from dataclasses import dataclass
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, Field, StrictInt, field_validator


# ============================================================================
# REQUEST-SCOPED VALUES
# ============================================================================

@dataclass(frozen=True)
class VerifiedRequest:
    """
    An inbound request whose signature and timestamp have been checked.

    Produced only by security.verify_request. The raw body is kept verbatim
    because the signature was computed over those exact bytes.
    """

    raw_body: bytes
    signature: str
    timestamp: str
    received_at: float


@dataclass(frozen=True)
class CompletionRequest:
    """Decoded intent: which item of which document to mark complete."""

    document_id: str
    item_locator: int
    response_url: Optional[str]
    user_id: Optional[str] = None  # logging only


# ============================================================================
# SLACK INTERACTION PAYLOAD (INPUT)
# ============================================================================

class ActionValue(BaseModel):
    """
    Nested JSON carried in the button's `value` field.

    The original slash command emitted `docId` / `taskIndex`; both spellings
    are accepted.
    """

    document_id: str = Field(
        ...,
        min_length=1,
        validation_alias=AliasChoices("documentId", "docId"),
    )
    item_locator: StrictInt = Field(
        ...,
        ge=0,
        validation_alias=AliasChoices("itemLocator", "taskIndex"),
    )

    @field_validator("document_id")
    @classmethod
    def document_id_not_blank(cls, v):
        """Document id must not be just whitespace."""
        if not v.strip():
            raise ValueError("document_id cannot be blank")
        return v.strip()

    class Config:
        extra = "ignore"


# ============================================================================
# CALLBACK PAYLOAD (OUTPUT)
# ============================================================================

class ResponseUrlMessage(BaseModel):
    """
    Message posted to an interaction's response_url.

    ref: https://api.slack.com/interactivity/handling#message_responses
    """

    replace_original: bool = True
    response_type: Optional[str] = None
    text: str
    blocks: list[dict[str, Any]] = Field(default_factory=list)

    def to_payload(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)
