"""
Document boundary layer.

The completion workflow reads and edits remote documents only through
DocumentClient, so the backend can be swapped without touching it.

Supported backends:
- StubDocumentClient: in-memory documents (default for CI/tests)
- GoogleDocsClient: Google Docs REST API with a service account

Example usage:
    from documents import StubDocumentClient, resolve_item_locator

    client = StubDocumentClient({"D1": ["Buy milk"]})
    snapshot = await client.fetch("D1")
    target = resolve_item_locator(snapshot, 0)
"""

from .base import DocumentClient, DocumentServiceError
from .google_docs import GoogleDocsClient, ServiceAccountTokenSource
from .locate import resolve_item_locator
from .stub import StubDocumentClient
from .types import (
    DEFAULT_HIGHLIGHT_RGB,
    ContentUnit,
    DocumentEdit,
    DocumentRange,
    DocumentSnapshot,
)

__all__ = [
    "DocumentClient",
    "DocumentServiceError",
    "GoogleDocsClient",
    "ServiceAccountTokenSource",
    "StubDocumentClient",
    "resolve_item_locator",
    "ContentUnit",
    "DocumentEdit",
    "DocumentRange",
    "DocumentSnapshot",
    "DEFAULT_HIGHLIGHT_RGB",
]
