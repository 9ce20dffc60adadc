from enum import Enum


class CompletionStage(str, Enum):
    """Steps of the detached completion run, in execution order."""

    DECODING = "decoding"
    FETCHING_DOCUMENT = "fetching_document"
    LOCATING_RANGE = "locating_range"
    UPDATING = "updating"
    NOTIFYING = "notifying"


class CompletionOutcome(str, Enum):
    """
    Terminal result of one inbound click.

    Logged only. Slack already has its acknowledgement by the time any of
    these (except VERIFICATION_FAILED) is known.
    """

    COMPLETED = "completed"
    VERIFICATION_FAILED = "verification_failed"
    DECODE_FAILED = "decode_failed"
    FETCH_FAILED = "fetch_failed"
    RANGE_NOT_FOUND = "range_not_found"
    UPDATE_FAILED = "update_failed"
    NOTIFY_FAILED = "notify_failed"


# Outcome reported when an unexpected error escapes a stage.
STAGE_FAILURES = {
    CompletionStage.DECODING: CompletionOutcome.DECODE_FAILED,
    CompletionStage.FETCHING_DOCUMENT: CompletionOutcome.FETCH_FAILED,
    CompletionStage.LOCATING_RANGE: CompletionOutcome.RANGE_NOT_FOUND,
    CompletionStage.UPDATING: CompletionOutcome.UPDATE_FAILED,
    CompletionStage.NOTIFYING: CompletionOutcome.NOTIFY_FAILED,
}
