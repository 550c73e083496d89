"""HTTP transport — Executes index requests against the configured backend.

Paths handed to the transport are already encoded and relative to the
backend base URL (``index.url``).  The transport never retries.
"""

from __future__ import annotations

import logging
from typing import Protocol

import httpx
from pydantic import BaseModel, Field

from chef_index.config.settings import IndexSettings
from chef_index.exceptions import TransportError

logger = logging.getLogger(__name__)


class HttpResponse(BaseModel):
    """Status, headers and raw body of a backend response."""

    status_code: int
    headers: dict[str, str] = Field(default_factory=dict)
    body: bytes = b""


class IndexTransport(Protocol):
    """Anything that can send a request to the search backend."""

    def request(
        self,
        url: str,
        method: str,
        body: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse: ...


class HttpxTransport:
    """``IndexTransport`` backed by a synchronous ``httpx.Client``.

    Args:
        settings: Backend URL, timeout and credentials.
        **httpx_kwargs: Additional keyword arguments passed to ``httpx.Client``.
    """

    def __init__(self, settings: IndexSettings | None = None, **httpx_kwargs: object) -> None:
        settings = settings or IndexSettings()
        auth = None
        if settings.username and settings.password:
            auth = httpx.BasicAuth(settings.username, settings.password)
        self.base_url = settings.url
        self._client = httpx.Client(
            base_url=settings.url,
            timeout=httpx.Timeout(settings.timeout),
            auth=auth,
            **httpx_kwargs,  # type: ignore[arg-type]
        )

    def __enter__(self) -> HttpxTransport:
        return self

    def __exit__(self, *exc: object) -> None:
        self.close()

    def close(self) -> None:
        """Close the underlying HTTP client."""
        self._client.close()

    def request(
        self,
        url: str,
        method: str,
        body: str | None = None,
        headers: dict[str, str] | None = None,
    ) -> HttpResponse:
        """Send one request.

        Raises:
            TransportError: If the backend cannot be reached or the request times out.
        """
        try:
            resp = self._client.request(method.upper(), url, content=body, headers=headers)
        except httpx.HTTPError as e:
            raise TransportError(f"{method.upper()} {self.base_url} failed: {e}") from e
        return HttpResponse(status_code=resp.status_code, headers=dict(resp.headers), body=resp.content)
