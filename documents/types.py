from dataclasses import dataclass, field
from typing import Optional, Tuple

# Light green, as used for completed tasks in the task documents.
DEFAULT_HIGHLIGHT_RGB: Tuple[float, float, float] = (0.83, 0.93, 0.85)


@dataclass(frozen=True)
class ContentUnit:
    """
    One entry of a document's top-level content list.

    `text` is None for units that carry no text (tables, section breaks).
    Indexes are the remote service's own offsets, not derived locally.
    """
    position: int
    start_index: int
    end_index: int
    text: Optional[str] = None


@dataclass(frozen=True)
class DocumentSnapshot:
    document_id: str
    units: Tuple[ContentUnit, ...] = ()
    revision_id: Optional[str] = None
    title: Optional[str] = None


@dataclass(frozen=True)
class DocumentRange:
    """Half-open span [start, end) plus the text currently inside it."""
    start: int
    end: int
    text: str

    def __post_init__(self):
        if self.start < 0 or self.start > self.end:
            raise ValueError(f"invalid range [{self.start}, {self.end})")


@dataclass(frozen=True)
class DocumentEdit:
    """
    A single atomic batch: highlight `target`, then insert `marker` at its start.

    `required_revision_id` makes the remote service reject the batch if the
    document changed after the snapshot the range was located in.
    """
    target: DocumentRange
    marker: str
    highlight_rgb: Tuple[float, float, float] = DEFAULT_HIGHLIGHT_RGB
    required_revision_id: Optional[str] = None

    @property
    def completed_text(self) -> str:
        return f"{self.marker}{self.target.text}"
