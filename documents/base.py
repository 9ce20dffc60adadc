from abc import ABC, abstractmethod

from .types import DocumentEdit, DocumentSnapshot


class DocumentServiceError(Exception):
    """The remote document service could not complete a fetch or update."""

    def __init__(self, message: str, status_code: int | None = None):
        super().__init__(message)
        self.status_code = status_code


class DocumentClient(ABC):
    """
    Abstract document boundary.
    The completion workflow depends ONLY on this interface.
    """

    @abstractmethod
    async def fetch(self, document_id: str) -> DocumentSnapshot:
        """Return the current content of a document."""
        raise NotImplementedError

    @abstractmethod
    async def update(self, document_id: str, edit: DocumentEdit) -> None:
        """Apply every operation of `edit` atomically, or none of them."""
        raise NotImplementedError
