"""Adapter for this project's own proxy routes.

Lets a client that only holds the proxy's URL drive the same poller the
proxy runs server-side. Every proxy response is a ``{"data": ...}``
envelope; see ``function_app.py`` for the route table.
"""

from __future__ import annotations

from typing import Any
from urllib.parse import quote

from actor_runner.core.constants import SCHEMA_NOT_FOUND_TYPE
from actor_runner.core.exceptions import ContractError
from actor_runner.platforms.base import PlatformAdapter, TransportError


class ProxyAdapter(PlatformAdapter):
    """Adapter for the ``/apify/...`` proxy routes."""

    name = "proxy"

    async def list_actors(self, limit: int) -> list[dict[str, Any]]:
        # The proxy applies its own page size.
        data = _data(await self._transport.request("/apify/actors"), "list_actors")
        if not isinstance(data, list):
            msg = "Proxy actor listing did not return a list"
            raise ContractError(msg, stage="list_actors", code="UNEXPECTED_RESPONSE")
        return data[:limit]

    async def get_input_schema(self, actor_id: str) -> dict[str, Any] | None:
        try:
            response = await self._transport.request(f"/apify/actors/{_segment(actor_id)}/schema")
        except TransportError as exc:
            if exc.status_code == 404 and exc.error_type == SCHEMA_NOT_FOUND_TYPE:
                return None
            raise
        data = _data(response, "fetch_schema")
        return data if isinstance(data, dict) and data else None

    async def start_run(self, actor_id: str, payload: dict[str, Any]) -> str:
        response = await self._transport.request(
            f"/apify/actors/{_segment(actor_id)}/runs",
            method="POST",
            body=payload,
        )
        data = _data(response, "start_run")
        run_id = data.get("runId") if isinstance(data, dict) else None
        if not run_id:
            msg = "Proxy run creation response has no 'data.runId'"
            raise ContractError(msg, stage="start_run", code="UNEXPECTED_RESPONSE")
        return str(run_id)

    async def get_run(self, run_id: str) -> dict[str, Any]:
        data = _data(await self._transport.request(f"/apify/runs/{_segment(run_id)}"), "get_run")
        if not isinstance(data, dict):
            msg = "Proxy run response is not an object"
            raise ContractError(msg, stage="get_run", code="UNEXPECTED_RESPONSE")
        return data

    async def get_dataset_items(self, dataset_id: str) -> list[dict[str, Any]]:
        response = await self._transport.request(f"/apify/datasets/{_segment(dataset_id)}/items")
        data = _data(response, "fetch_dataset")
        if not isinstance(data, list):
            msg = "Proxy dataset response is not a list"
            raise ContractError(msg, stage="fetch_dataset", code="UNEXPECTED_RESPONSE")
        return data


def _data(response: Any, stage: str) -> Any:
    if not isinstance(response, dict) or "data" not in response:
        msg = "Proxy response has no 'data' envelope"
        raise ContractError(msg, stage=stage, code="UNEXPECTED_RESPONSE")
    return response["data"]


def _segment(value: str) -> str:
    return quote(value, safe="~")
