"""
Slack Interaction Webhook

FastAPI router for block_actions callbacks ("mark complete" clicks).

Slack expects an answer within 3 seconds and retries slow deliveries, so the
route only verifies the signature and acknowledges. The document edit and
the replacement message run afterwards as a background task.
"""

import logging

from fastapi import APIRouter, BackgroundTasks, HTTPException, Request, status

from completion import CompletionOutcome
from infra.bootstrap import get_bootstrap

from .security import verify_request

logger = logging.getLogger(__name__)

router = APIRouter(tags=["Slack Transport"])

SLACK_RETRY_HEADER = "X-Slack-Retry-Num"
SLACK_RETRY_REASON_HEADER = "X-Slack-Retry-Reason"

# Only a timed-out delivery is known to have reached this service.
RECEIVED_RETRY_REASONS = frozenset({"http_timeout"})


# ============================================================================
# INTERACTION RECEIVER
# ============================================================================

@router.post("/slack/actions")
@router.post("/api/task-complete")
async def slack_action_receiver(
    request: Request,
    background_tasks: BackgroundTasks,
) -> dict[str, str]:
    """
    Receive a Slack interaction callback.

    Flow:
    1. Read the raw body (before any parsing, the signature covers it)
    2. Verify signature and timestamp (400 if invalid)
    3. Schedule the completion run
    4. Return 200 immediately

    Returns:
        {"status": "ok"} once the request is verified

    Raises:
        HTTPException(400): Verification failed (reason not disclosed)
    """

    bootstrap = get_bootstrap()
    config = bootstrap.config

    # Step 1: Raw body for signature verification
    body = await request.body()

    # Step 2: Verify signature (security boundary)
    verified = verify_request(
        body,
        request.headers,
        config.slack_signing_secret,
        max_age_seconds=config.signature_max_age_seconds,
    )
    if verified is None:
        logger.warning(
            "Slack request rejected",
            extra={"outcome": CompletionOutcome.VERIFICATION_FAILED.value},
        )
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Verification failed",
        )

    # Step 3: Skip only retries whose first delivery reached this route
    retry_num = request.headers.get(SLACK_RETRY_HEADER)
    if retry_num:
        retry_reason = request.headers.get(SLACK_RETRY_REASON_HEADER, "")
        if config.ignore_slack_retries and retry_reason in RECEIVED_RETRY_REASONS:
            logger.info(
                f"Acknowledging Slack retry #{retry_num} ({retry_reason}) without reprocessing",
                extra={"retry_num": retry_num, "retry_reason": retry_reason},
            )
            return {"status": "ok"}
        logger.warning(
            f"Processing Slack retry #{retry_num} ({retry_reason or 'unknown reason'})",
            extra={"retry_num": retry_num, "retry_reason": retry_reason},
        )

    # Step 4: Detached continuation; runs after the response is sent
    background_tasks.add_task(bootstrap.orchestrator.run, verified)
    logger.debug("Slack request verified, completion scheduled")

    return {"status": "ok"}
