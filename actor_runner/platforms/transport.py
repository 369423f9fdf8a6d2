"""Authenticated JSON transport over ``httpx``.

Every platform call goes through ``HttpTransport.request``. It attaches
the bearer credential, serialises the JSON body, and turns any failure
into a ``TransportError`` with a human-readable message:

- Non-2xx response: ``error.message`` from the JSON body when present,
  otherwise ``"HTTP <status>: <reason>"``.
- No response at all (DNS, refused connection, timeout): the ``httpx``
  error text with ``status_code=0``.

There is no retry and no backoff. A fresh ``httpx.AsyncClient`` is
opened per request so no connection outlives a single exchange.
"""

from __future__ import annotations

import json
import logging
from typing import Any

import httpx

from actor_runner.core.constants import DEFAULT_HTTP_TIMEOUT_SECONDS
from actor_runner.platforms.base import TransportError

logger = logging.getLogger(__name__)


class HttpTransport:
    """Bearer-authenticated JSON client bound to one base URL and credential.

    Args:
        base_url: API root, e.g. ``https://api.apify.com/v2``.
        credential: Bearer token. Never logged.
        timeout_seconds: Per-request timeout.
        transport: Optional ``httpx`` transport (``httpx.MockTransport`` in tests).
    """

    def __init__(
        self,
        base_url: str,
        credential: str,
        *,
        timeout_seconds: float = DEFAULT_HTTP_TIMEOUT_SECONDS,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        if not credential or not credential.strip():
            msg = "A non-empty credential is required"
            raise ValueError(msg)
        self._base_url = base_url.rstrip("/")
        self._credential = credential
        self._timeout = timeout_seconds
        self._transport = transport

    @property
    def base_url(self) -> str:
        return self._base_url

    def __repr__(self) -> str:
        return f"HttpTransport(base_url={self._base_url!r})"

    async def request(
        self,
        endpoint: str,
        method: str = "GET",
        body: Any = None,
    ) -> Any:
        """Issue one request and return the decoded JSON response.

        Args:
            endpoint: Path relative to the base URL, starting with ``/``.
            method: HTTP method.
            body: JSON-serialisable request body, or ``None``.

        Raises:
            TransportError: On network failure or non-success status.
        """
        url = f"{self._base_url}{endpoint}"
        headers = {
            "Authorization": f"Bearer {self._credential}",
            "Content-Type": "application/json",
        }
        content = json.dumps(body) if body is not None else None

        logger.debug("platform request | method=%s | endpoint=%s", method, endpoint)

        try:
            async with httpx.AsyncClient(
                timeout=self._timeout,
                transport=self._transport,
            ) as client:
                response = await client.request(method, url, headers=headers, content=content)
        except httpx.HTTPError as exc:
            msg = str(exc) or type(exc).__name__
            logger.warning(
                "platform request failed | method=%s | endpoint=%s | error=%s",
                method,
                endpoint,
                msg,
            )
            raise TransportError(msg, status_code=0) from exc

        if not response.is_success:
            message, error_type = _extract_error(response)
            logger.warning(
                "platform request rejected | method=%s | endpoint=%s | status=%d | error=%s",
                method,
                endpoint,
                response.status_code,
                message,
            )
            raise TransportError(
                message,
                status_code=response.status_code,
                error_type=error_type,
            )

        try:
            return response.json()
        except ValueError as exc:
            msg = f"Response from {endpoint} is not valid JSON"
            raise TransportError(msg, status_code=response.status_code) from exc


def _extract_error(response: httpx.Response) -> tuple[str, str]:
    """Return ``(message, error_type)`` for a failed response.

    Falls back to ``"HTTP <status>: <reason>"`` when the body is not JSON
    or has no ``error.message``.
    """
    fallback = f"HTTP {response.status_code}: {response.reason_phrase}"
    try:
        data = response.json()
    except ValueError:
        return fallback, ""

    error = data.get("error") if isinstance(data, dict) else None
    if not isinstance(error, dict):
        return fallback, ""

    message = error.get("message")
    error_type = str(error.get("type") or "")
    if isinstance(message, str) and message:
        return message, error_type
    return fallback, error_type
