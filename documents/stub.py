from typing import Optional

from .base import DocumentClient, DocumentServiceError
from .types import ContentUnit, DocumentEdit, DocumentSnapshot


def _utf16_len(text: str) -> int:
    return len(text.encode("utf-16-le")) // 2


class StubDocumentClient(DocumentClient):
    """
    In-memory document store for testing and local development.

    Each document is a list of paragraphs; `None` stands for a non-text
    unit such as a table. Offsets follow the Docs API convention: UTF-16
    code units, body starting at index 1, every paragraph ending in "\\n".
    Updates bump the revision and honour `required_revision_id`.
    """

    def __init__(self, documents: Optional[dict[str, list[Optional[str]]]] = None):
        self._documents: dict[str, list[Optional[str]]] = {
            document_id: list(paragraphs)
            for document_id, paragraphs in (documents or {}).items()
        }
        self._revisions: dict[str, int] = {document_id: 1 for document_id in self._documents}
        self.fetch_calls: list[str] = []
        self.update_calls: list[tuple[str, DocumentEdit]] = []

    def paragraphs(self, document_id: str) -> list[Optional[str]]:
        return list(self._documents[document_id])

    async def fetch(self, document_id: str) -> DocumentSnapshot:
        self.fetch_calls.append(document_id)
        return self._snapshot(document_id)

    async def update(self, document_id: str, edit: DocumentEdit) -> None:
        self.update_calls.append((document_id, edit))
        snapshot = self._snapshot(document_id)

        if edit.required_revision_id and edit.required_revision_id != snapshot.revision_id:
            raise DocumentServiceError(
                f"Revision {edit.required_revision_id} is stale (current {snapshot.revision_id})",
                status_code=400,
            )

        for unit in snapshot.units:
            if unit.text is not None and unit.start_index <= edit.target.start < unit.end_index:
                paragraph = self._documents[document_id][unit.position]
                head = paragraph.encode("utf-16-le")[: (edit.target.start - unit.start_index) * 2]
                cut = len(head.decode("utf-16-le", errors="ignore"))
                self._documents[document_id][unit.position] = (
                    paragraph[:cut] + edit.marker + paragraph[cut:]
                )
                break
        else:
            raise DocumentServiceError(
                f"Index {edit.target.start} is outside the document", status_code=400
            )

        self._revisions[document_id] += 1

    def _snapshot(self, document_id: str) -> DocumentSnapshot:
        if document_id not in self._documents:
            raise DocumentServiceError(f"Document {document_id} not found", status_code=404)

        units = []
        index = 1
        for position, paragraph in enumerate(self._documents[document_id]):
            if paragraph is None:
                units.append(ContentUnit(position=position, start_index=index, end_index=index + 1))
                index += 1
                continue
            content = f"{paragraph}\n"
            end = index + _utf16_len(content)
            units.append(ContentUnit(position=position, start_index=index, end_index=end, text=content))
            index = end

        return DocumentSnapshot(
            document_id=document_id,
            units=tuple(units),
            revision_id=str(self._revisions[document_id]),
        )
