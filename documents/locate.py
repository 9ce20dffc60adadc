"""
Item locator resolution.

A locator is a position in the document's top-level content list. The
character range comes from that unit's own start/end offsets in the fetched
snapshot; offsets are never computed from the position itself.
"""

from typing import Optional

from .types import DocumentRange, DocumentSnapshot


def resolve_item_locator(
    snapshot: DocumentSnapshot,
    item_locator: int,
) -> Optional[DocumentRange]:
    """
    Find the text range of the unit at `item_locator`.

    Returns None when the position is out of range, the unit holds no text,
    or its text is empty once the paragraph's trailing newline is dropped.
    Callers must not fall back to any other position.
    """
    if item_locator < 0 or item_locator >= len(snapshot.units):
        return None

    unit = snapshot.units[item_locator]
    if unit.text is None:
        return None

    text = unit.text
    end = unit.end_index
    # Paragraphs end in "\n"; it belongs to the paragraph, not the task.
    if text.endswith("\n"):
        text = text[:-1]
        end -= 1

    if not text.strip() or end <= unit.start_index:
        return None

    return DocumentRange(start=unit.start_index, end=end, text=text)
