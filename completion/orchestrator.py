"""
Completion Orchestrator

Runs after Slack has been acknowledged. Turns a verified button click into
a document edit and a replacement message:

    decode -> fetch document -> locate range -> update -> notify

Steps are strictly sequential. Every failure is terminal, logged with the
stage and identifiers, and never raised: nothing awaits this coroutine.
"""

import logging
from dataclasses import dataclass
from typing import Any, Optional, Tuple
from uuid import uuid4

from documents import (
    DEFAULT_HIGHLIGHT_RGB,
    DocumentClient,
    DocumentEdit,
    DocumentServiceError,
    resolve_item_locator,
)
from transport.slack.decode import DecodeError, decode_action_payload
from transport.slack.schemas import CompletionRequest, VerifiedRequest
from transport.slack.sender import (
    NotifyClient,
    NotifySenderError,
    build_completion_message,
    build_failure_message,
)

from .outcome import STAGE_FAILURES, CompletionOutcome, CompletionStage

logger = logging.getLogger(__name__)

DEFAULT_MARKER = "✅ "

# Shown to the clicking user when NOTIFY_FAILURES is enabled.
_FAILURE_REASONS = {
    CompletionOutcome.FETCH_FAILED: "the document could not be read",
    CompletionOutcome.RANGE_NOT_FOUND: "the task is no longer at that position in the document",
    CompletionOutcome.UPDATE_FAILED: "the document could not be updated",
}


@dataclass(frozen=True)
class CompletionOptions:
    marker: str = DEFAULT_MARKER
    highlight_rgb: Tuple[float, float, float] = DEFAULT_HIGHLIGHT_RGB
    require_response_url: bool = True
    notify_failures: bool = False


class CompletionOrchestrator:
    """
    Drives one completion run per verified request.

    Holds no per-request state; a single instance serves concurrent runs.
    """

    def __init__(
        self,
        document_client: DocumentClient,
        notify_client: NotifyClient,
        options: Optional[CompletionOptions] = None,
    ):
        self.document_client = document_client
        self.notify_client = notify_client
        self.options = options or CompletionOptions()

    async def run(self, verified: VerifiedRequest) -> CompletionOutcome:
        """
        Execute the completion workflow for a verified request.

        Args:
            verified: Request that passed signature verification

        Returns:
            The terminal CompletionOutcome (for logging and tests)
        """
        context: dict[str, Any] = {"run_id": str(uuid4())}
        stage = CompletionStage.DECODING

        try:
            decoded = decode_action_payload(
                verified.raw_body,
                require_response_url=self.options.require_response_url,
            )
            if isinstance(decoded, DecodeError):
                return self._log_failure(
                    CompletionOutcome.DECODE_FAILED, stage, context, decoded.value
                )

            request: CompletionRequest = decoded
            context.update(
                document_id=request.document_id,
                item_locator=request.item_locator,
                user_id=request.user_id,
            )

            stage = CompletionStage.FETCHING_DOCUMENT
            try:
                snapshot = await self.document_client.fetch(request.document_id)
            except DocumentServiceError as e:
                return await self._abort(
                    CompletionOutcome.FETCH_FAILED, stage, context, request, str(e)
                )
            logger.debug(
                f"Fetched document '{snapshot.title or request.document_id}' "
                f"({len(snapshot.units)} units, revision {snapshot.revision_id})",
                extra={**context, "document_title": snapshot.title},
            )

            stage = CompletionStage.LOCATING_RANGE
            target = resolve_item_locator(snapshot, request.item_locator)
            if target is None:
                return await self._abort(
                    CompletionOutcome.RANGE_NOT_FOUND,
                    stage,
                    context,
                    request,
                    f"no text unit at position {request.item_locator} "
                    f"(document has {len(snapshot.units)} units)",
                )

            stage = CompletionStage.UPDATING
            edit = DocumentEdit(
                target=target,
                marker=self.options.marker,
                highlight_rgb=self.options.highlight_rgb,
                required_revision_id=snapshot.revision_id,
            )
            try:
                await self.document_client.update(request.document_id, edit)
            except DocumentServiceError as e:
                return await self._abort(
                    CompletionOutcome.UPDATE_FAILED, stage, context, request, str(e)
                )

            logger.info(
                f"Task marked complete in document {request.document_id}",
                extra={**context, "range_start": target.start, "range_end": target.end},
            )

            if request.response_url is None:
                logger.info("No response_url; skipping notification", extra=context)
                return self._log_success(context)

            stage = CompletionStage.NOTIFYING
            message = build_completion_message(target.text, self.options.marker)
            try:
                await self.notify_client.post(request.response_url, message.to_payload())
            except NotifySenderError as e:
                # The document edit stands; notification is best-effort.
                return self._log_failure(
                    CompletionOutcome.NOTIFY_FAILED, stage, context, str(e)
                )

            return self._log_success(context)

        except Exception as e:
            logger.error(
                f"Unexpected error during {stage.value}: {e}",
                exc_info=True,
                extra={**context, "stage": stage.value},
            )
            return STAGE_FAILURES[stage]

    async def _abort(
        self,
        outcome: CompletionOutcome,
        stage: CompletionStage,
        context: dict[str, Any],
        request: CompletionRequest,
        reason: str,
    ) -> CompletionOutcome:
        """Log a failure after decoding and optionally tell the user."""
        self._log_failure(outcome, stage, context, reason)

        if self.options.notify_failures and request.response_url:
            notice = build_failure_message(_FAILURE_REASONS[outcome])
            try:
                await self.notify_client.post(request.response_url, notice.to_payload())
            except NotifySenderError as e:
                logger.warning(f"Failure notice not delivered: {e}", extra=context)

        return outcome

    @staticmethod
    def _log_failure(
        outcome: CompletionOutcome,
        stage: CompletionStage,
        context: dict[str, Any],
        reason: str,
    ) -> CompletionOutcome:
        logger.warning(
            f"Completion failed at {stage.value}: {reason}",
            extra={**context, "stage": stage.value, "outcome": outcome.value},
        )
        return outcome

    @staticmethod
    def _log_success(context: dict[str, Any]) -> CompletionOutcome:
        logger.info(
            "Completion finished",
            extra={**context, "outcome": CompletionOutcome.COMPLETED.value},
        )
        return CompletionOutcome.COMPLETED
