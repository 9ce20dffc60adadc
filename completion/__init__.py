"""Completion workflow: the work done after a click has been acknowledged."""

from .orchestrator import DEFAULT_MARKER, CompletionOptions, CompletionOrchestrator
from .outcome import CompletionOutcome, CompletionStage

__all__ = [
    "CompletionOrchestrator",
    "CompletionOptions",
    "CompletionOutcome",
    "CompletionStage",
    "DEFAULT_MARKER",
]
