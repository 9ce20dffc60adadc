"""
Google Docs backend.

Talks to the Docs REST API (v1) with httpx, authenticated as a service
account through google-auth.

ref: https://developers.google.com/docs/api/reference/rest
"""

import asyncio
import logging
from typing import Any, Optional, Protocol
from urllib.parse import quote

import httpx
from google.auth.exceptions import GoogleAuthError
from google.auth.transport.requests import Request as GoogleAuthRequest
from google.oauth2 import service_account

from .base import DocumentClient, DocumentServiceError
from .types import ContentUnit, DocumentEdit, DocumentSnapshot

logger = logging.getLogger(__name__)

DOCS_SCOPES = ["https://www.googleapis.com/auth/documents"]
GOOGLE_TOKEN_URI = "https://oauth2.googleapis.com/token"
DEFAULT_BASE_URL = "https://docs.googleapis.com/v1"


class TokenSource(Protocol):
    async def token(self) -> str: ...


class ServiceAccountTokenSource:
    """
    Bearer tokens for a Google service account.

    Credentials are built on first use and refreshed when expired. The
    refresh is a blocking HTTP call (google-auth uses requests), so it runs
    in the default executor.
    """

    def __init__(
        self,
        client_email: str,
        private_key: str,
        scopes: Optional[list[str]] = None,
        token_uri: str = GOOGLE_TOKEN_URI,
    ):
        self.client_email = client_email
        self._private_key = private_key
        self.scopes = scopes or DOCS_SCOPES
        self.token_uri = token_uri
        self._credentials = None

    def _build_credentials(self):
        return service_account.Credentials.from_service_account_info(
            {
                "type": "service_account",
                "client_email": self.client_email,
                "private_key": self._private_key,
                "token_uri": self.token_uri,
            },
            scopes=self.scopes,
        )

    def _refresh(self) -> str:
        try:
            if self._credentials is None:
                self._credentials = self._build_credentials()
            if not self._credentials.valid:
                self._credentials.refresh(GoogleAuthRequest())
        except (ValueError, GoogleAuthError) as e:
            raise DocumentServiceError(f"Service account authorization failed: {e}") from e

        return self._credentials.token

    async def token(self) -> str:
        if self._credentials is not None and self._credentials.valid:
            return self._credentials.token

        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(None, self._refresh)


class GoogleDocsClient(DocumentClient):
    """
    DocumentClient backed by the Google Docs API.

    A document's body.content list is exposed as snapshot units, one per
    structural element, keeping the API's own startIndex/endIndex.
    """

    def __init__(
        self,
        token_source: TokenSource,
        base_url: str = DEFAULT_BASE_URL,
        timeout: float = 30.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ):
        self.token_source = token_source
        self.base_url = base_url.rstrip("/")
        self.timeout = timeout
        self._transport = transport

    def _document_url(self, document_id: str) -> str:
        return f"{self.base_url}/documents/{quote(document_id, safe='')}"

    async def _request(self, method: str, url: str, **kwargs) -> dict[str, Any]:
        token = await self.token_source.token()
        headers = {"Authorization": f"Bearer {token}"}

        try:
            async with httpx.AsyncClient(transport=self._transport) as client:
                response = await client.request(
                    method,
                    url,
                    headers=headers,
                    timeout=self.timeout,
                    **kwargs,
                )
        except httpx.RequestError as e:
            raise DocumentServiceError(f"HTTP request failed: {e}") from e

        if not response.is_success:
            raise DocumentServiceError(
                f"Docs API returned {response.status_code}: {_error_message(response)}",
                status_code=response.status_code,
            )

        try:
            return response.json()
        except ValueError as e:
            raise DocumentServiceError("Docs API returned invalid JSON") from e

    async def fetch(self, document_id: str) -> DocumentSnapshot:
        document = await self._request("GET", self._document_url(document_id))
        snapshot = parse_document(document, document_id)
        logger.debug(
            f"Fetched document with {len(snapshot.units)} content units",
            extra={"document_id": document_id, "revision_id": snapshot.revision_id},
        )
        return snapshot

    async def update(self, document_id: str, edit: DocumentEdit) -> None:
        await self._request(
            "POST",
            f"{self._document_url(document_id)}:batchUpdate",
            json=build_batch_update(edit),
        )


def parse_document(document: dict[str, Any], document_id: str) -> DocumentSnapshot:
    """Convert a Docs API `Document` resource into a DocumentSnapshot."""
    content = (document.get("body") or {}).get("content") or []

    units = []
    for position, element in enumerate(content):
        start = element.get("startIndex", 0)
        end = element.get("endIndex", start)

        text = None
        paragraph = element.get("paragraph")
        if paragraph is not None:
            runs = [
                part["textRun"].get("content", "")
                for part in paragraph.get("elements", [])
                if "textRun" in part
            ]
            if runs:
                text = "".join(runs)

        units.append(ContentUnit(position=position, start_index=start, end_index=end, text=text))

    return DocumentSnapshot(
        document_id=document.get("documentId", document_id),
        units=tuple(units),
        revision_id=document.get("revisionId"),
        title=document.get("title"),
    )


def build_batch_update(edit: DocumentEdit) -> dict[str, Any]:
    """
    Request body for documents.batchUpdate.

    Requests run in order, so the style is applied to the original range
    before the marker insertion shifts it.
    """
    red, green, blue = edit.highlight_rgb
    body: dict[str, Any] = {
        "requests": [
            {
                "updateTextStyle": {
                    "range": {
                        "startIndex": edit.target.start,
                        "endIndex": edit.target.end,
                    },
                    "textStyle": {
                        "backgroundColor": {
                            "color": {
                                "rgbColor": {"red": red, "green": green, "blue": blue}
                            }
                        }
                    },
                    "fields": "backgroundColor",
                }
            },
            {
                "insertText": {
                    "location": {"index": edit.target.start},
                    "text": edit.marker,
                }
            },
        ]
    }

    if edit.required_revision_id:
        body["writeControl"] = {"requiredRevisionId": edit.required_revision_id}

    return body


def _error_message(response: httpx.Response) -> str:
    try:
        return response.json()["error"]["message"]
    except (ValueError, KeyError, TypeError):
        return response.text[:200]
