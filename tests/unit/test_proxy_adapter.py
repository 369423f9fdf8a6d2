"""Tests for the proxy-route adapter."""

from __future__ import annotations

import json
from collections.abc import Callable
from typing import Any

import httpx
import pytest

from actor_runner.core.exceptions import ContractError
from actor_runner.platforms.base import TransportError
from actor_runner.platforms.proxy import ProxyAdapter
from actor_runner.platforms.transport import HttpTransport

PROXY_BASE = "http://proxy.test/api"


def _proxy(status: int, body: Any, seen: list[httpx.Request] | None = None) -> ProxyAdapter:
    def handler(request: httpx.Request) -> httpx.Response:
        if seen is not None:
            seen.append(request)
        return httpx.Response(status, json=body)

    return ProxyAdapter(HttpTransport(PROXY_BASE, "token", transport=httpx.MockTransport(handler)))


class TestListActors:
    @pytest.mark.asyncio()
    async def test_unwraps_envelope(self) -> None:
        seen: list[httpx.Request] = []
        actors = [{"id": "a"}, {"id": "b"}, {"id": "c"}]

        result = await _proxy(200, {"data": actors}, seen).list_actors(2)

        assert result == [{"id": "a"}, {"id": "b"}]
        assert seen[0].url.path == "/api/apify/actors"
        assert seen[0].headers["Authorization"] == "Bearer token"

    @pytest.mark.asyncio()
    async def test_missing_envelope(self) -> None:
        with pytest.raises(ContractError):
            await _proxy(200, [{"id": "a"}]).list_actors(10)


class TestGetInputSchema:
    @pytest.mark.asyncio()
    async def test_returns_schema(self) -> None:
        seen: list[httpx.Request] = []
        schema = {"type": "object", "properties": {}}

        result = await _proxy(200, {"data": schema}, seen).get_input_schema("abc")

        assert result == schema
        assert seen[0].url.path == "/api/apify/actors/abc/schema"

    @pytest.mark.asyncio()
    async def test_schema_not_found_is_none(self) -> None:
        body = {"error": {"message": "No input schema found for this actor", "type": "schema-not-found"}}
        assert await _proxy(404, body).get_input_schema("abc") is None

    @pytest.mark.asyncio()
    async def test_other_404_propagates(self) -> None:
        body = {"error": {"message": "Actor was not found", "type": "record-not-found"}}
        with pytest.raises(TransportError) as exc_info:
            await _proxy(404, body).get_input_schema("abc")
        assert exc_info.value.status_code == 404


class TestStartRun:
    @pytest.mark.asyncio()
    async def test_returns_run_id(self) -> None:
        seen: list[httpx.Request] = []

        run_id = await _proxy(200, {"data": {"runId": "run_1"}}, seen).start_run("abc", {"q": 1})

        assert run_id == "run_1"
        assert seen[0].method == "POST"
        assert seen[0].url.path == "/api/apify/actors/abc/runs"
        assert json.loads(seen[0].content) == {"q": 1}

    @pytest.mark.asyncio()
    async def test_missing_run_id(self) -> None:
        with pytest.raises(ContractError):
            await _proxy(200, {"data": {}}).start_run("abc", {})


class TestRunsAndDatasets:
    @pytest.mark.asyncio()
    async def test_get_run(self) -> None:
        seen: list[httpx.Request] = []
        run = {"id": "run_1", "status": "SUCCEEDED", "defaultDatasetId": "ds_1"}

        assert await _proxy(200, {"data": run}, seen).get_run("run_1") == run
        assert seen[0].url.path == "/api/apify/runs/run_1"

    @pytest.mark.asyncio()
    async def test_get_run_non_object(self) -> None:
        with pytest.raises(ContractError):
            await _proxy(200, {"data": "RUNNING"}).get_run("run_1")

    @pytest.mark.asyncio()
    async def test_get_dataset_items(self) -> None:
        seen: list[httpx.Request] = []

        items = await _proxy(200, {"data": [{"x": 1}]}, seen).get_dataset_items("ds_1")

        assert items == [{"x": 1}]
        assert seen[0].url.path == "/api/apify/datasets/ds_1/items"

    @pytest.mark.asyncio()
    async def test_get_dataset_items_non_list(self) -> None:
        with pytest.raises(ContractError):
            await _proxy(200, {"data": {}}).get_dataset_items("ds_1")
