"""Apify REST API adapter.

Talks to the platform directly (``https://api.apify.com/v2`` by default).
Apify wraps single objects and pages in a ``{"data": ...}`` envelope,
while dataset items come back as a bare JSON array.

References:
    Apify API v2: https://docs.apify.com/api/v2
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from actor_runner.core.exceptions import ContractError
from actor_runner.platforms.base import PlatformAdapter


class ApifyAdapter(PlatformAdapter):
    """Direct Apify API adapter."""

    name = "apify"

    async def list_actors(self, limit: int) -> list[dict[str, Any]]:
        response = await self._transport.request(f"/acts?my=true&limit={int(limit)}")
        items = _unwrap(response, "list_actors").get("items")
        if not isinstance(items, list):
            msg = "Actor listing response has no 'data.items' list"
            raise ContractError(msg, stage="list_actors", code="UNEXPECTED_RESPONSE")
        return items

    async def get_input_schema(self, actor_id: str) -> dict[str, Any] | None:
        response = await self._transport.request(f"/acts/{_segment(actor_id)}")
        options = _unwrap(response, "fetch_schema").get("defaultRunOptions") or {}
        schema = options.get("inputSchema") if isinstance(options, dict) else None
        return schema or None

    async def start_run(self, actor_id: str, payload: dict[str, Any]) -> str:
        response = await self._transport.request(
            f"/acts/{_segment(actor_id)}/runs",
            method="POST",
            body=payload,
        )
        run_id = _unwrap(response, "start_run").get("id")
        if not run_id:
            msg = "Run creation response has no 'data.id'"
            raise ContractError(msg, stage="start_run", code="UNEXPECTED_RESPONSE")
        return str(run_id)

    async def get_run(self, run_id: str) -> dict[str, Any]:
        response = await self._transport.request(f"/actor-runs/{_segment(run_id)}")
        return _unwrap(response, "get_run")

    async def get_dataset_items(self, dataset_id: str) -> list[dict[str, Any]]:
        response = await self._transport.request(
            f"/datasets/{_segment(dataset_id)}/items?format=json"
        )
        if not isinstance(response, list):
            msg = f"Dataset items response is a {type(response).__name__}, expected a list"
            raise ContractError(msg, stage="fetch_dataset", code="UNEXPECTED_RESPONSE")
        return response


# ---------------------------------------------------------------------------
# Internal helpers
# ---------------------------------------------------------------------------


def _unwrap(response: Any, stage: str) -> dict[str, Any]:
    """Return ``response["data"]``, checking it is an object."""
    data = response.get("data") if isinstance(response, dict) else None
    if not isinstance(data, dict):
        msg = "Response has no 'data' object"
        raise ContractError(msg, stage=stage, code="UNEXPECTED_RESPONSE")
    return data


def _segment(value: str) -> str:
    """Quote an identifier for use as a single path segment.

    Apify actor ids may be given as ``username~actor-name``; ``~`` is kept.
    """
    return quote(value, safe="~")
