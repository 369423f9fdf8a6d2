"""Thin ingress boundary for the proxy's HTTP routes.

Centralises the HTTP concerns so that ``function_app.py`` contains only
trigger bindings and handoff:

- **extract_credential**: reads the bearer token from ``Authorization``.
- **deserialize_request_body**: normalises a JSON request body to a dict.
- **parse_wait_options**: validates the wait route's query parameters.
- **error_response**: maps the exception taxonomy onto HTTP statuses and
  a stable ``{"error": {...}}`` body.
- ``*_route`` coroutines: one per proxy route, each returning a
  ``ProxyResponse`` instead of a Functions-specific object so they can
  be exercised without the Functions host.

Every successful body is a ``{"data": ...}`` envelope, which is the
shape ``ProxyAdapter`` expects.
"""

from __future__ import annotations

import json
import logging
import math
from dataclasses import dataclass
from typing import TYPE_CHECKING, Any

from actor_runner import __version__
from actor_runner.activities.fetch_dataset import fetch_run_dataset
from actor_runner.activities.fetch_schema import SchemaNotFoundError, fetch_schema
from actor_runner.activities.get_run import get_run
from actor_runner.activities.list_actors import list_actors
from actor_runner.activities.start_run import start_run
from actor_runner.core.constants import (
    MISSING_API_KEY_MESSAGE,
    MISSING_API_KEY_TYPE,
    NO_SCHEMA_MESSAGE,
    SCHEMA_NOT_FOUND_TYPE,
)
from actor_runner.core.exceptions import ActorRunnerError, ContractError, ValidationError
from actor_runner.models.responses import ErrorDetail, ErrorDocument
from actor_runner.orchestrators.run_lifecycle import RunFailedError, RunTimeoutError, wait_for_run
from actor_runner.platforms.base import TransportError
from actor_runner.platforms.factory import get_platform

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable, Mapping

    from actor_runner.core.config import RunnerConfig
    from actor_runner.platforms.base import PlatformAdapter

    PlatformFactory = Callable[[str], PlatformAdapter]

logger = logging.getLogger("actor_runner.core.ingress")

_BEARER_PREFIX = "Bearer "


# ---------------------------------------------------------------------------
# Response type
# ---------------------------------------------------------------------------


@dataclass(frozen=True, slots=True)
class ProxyResponse:
    """Status code and JSON body for one proxy route invocation."""

    status_code: int
    body: dict[str, Any]

    def to_json(self) -> str:
        return json.dumps(self.body)


def ok(data: Any) -> ProxyResponse:
    return ProxyResponse(200, {"data": data})


# ---------------------------------------------------------------------------
# Request helpers
# ---------------------------------------------------------------------------


class MissingCredentialError(ValidationError):
    """Raised when a request carries no bearer token."""

    default_stage = "ingress"
    default_code = "MISSING_API_KEY"


def extract_credential(headers: Mapping[str, str]) -> str:
    """Return the bearer token from *headers* (header name is case-insensitive).

    Raises:
        MissingCredentialError: If the header is absent or the token is empty.
    """
    value = ""
    for name, header_value in headers.items():
        if name.lower() == "authorization":
            value = header_value or ""
            break

    token = value[len(_BEARER_PREFIX) :] if value.startswith(_BEARER_PREFIX) else value
    token = token.strip()
    if not token:
        raise MissingCredentialError(MISSING_API_KEY_MESSAGE)
    return token


def deserialize_request_body(raw: bytes | str | dict[str, Any] | None) -> dict[str, Any]:
    """Normalise a JSON request body to a plain dict.

    An empty body is treated as ``{}``.

    Raises:
        ContractError: If the body is not UTF-8 encoded JSON or not a JSON
            object.
    """
    if raw is None:
        return {}
    if isinstance(raw, dict):
        return raw
    if isinstance(raw, bytes):
        try:
            raw = raw.decode("utf-8")
        except UnicodeDecodeError as exc:
            msg = f"Request body is not valid UTF-8: {exc}"
            raise ContractError(msg, stage="ingress", code="INVALID_JSON") from exc
    if not raw.strip():
        return {}
    try:
        parsed = json.loads(raw)
    except (json.JSONDecodeError, ValueError) as exc:
        msg = f"Request body is not valid JSON: {exc}"
        raise ContractError(msg, stage="ingress", code="INVALID_JSON") from exc
    if not isinstance(parsed, dict):
        msg = f"Request body must be a JSON object, got {type(parsed).__name__}"
        raise ContractError(msg, stage="ingress", code="INVALID_INPUT_TYPE")
    return parsed


def parse_wait_options(params: Mapping[str, str]) -> tuple[float | None, float | None]:
    """Read ``maxWaitSeconds`` / ``pollIntervalSeconds`` query parameters.

    Returns:
        ``(max_wait_seconds, poll_interval_seconds)``; ``None`` when absent.

    Raises:
        ValidationError: If a value is not a positive number.
    """
    return (
        _positive_float(params, "maxWaitSeconds"),
        _positive_float(params, "pollIntervalSeconds"),
    )


def _positive_float(params: Mapping[str, str], key: str) -> float | None:
    raw = params.get(key)
    if raw is None or raw == "":
        return None
    try:
        value = float(raw)
    except ValueError:
        value = 0.0
    if not math.isfinite(value) or value <= 0:
        msg = f"{key} must be a positive number, got {raw!r}"
        raise ValidationError(msg, stage="ingress", code="INVALID_QUERY_PARAMETER")
    return value


# ---------------------------------------------------------------------------
# Error mapping
# ---------------------------------------------------------------------------


def error_response(exc: ActorRunnerError) -> ProxyResponse:
    """Map an ``ActorRunnerError`` onto an HTTP status and error body."""
    status, error_type = _classify(exc)
    detail = exc.detail if isinstance(exc, RunFailedError) else None
    error = ErrorDetail.from_exception(exc, error_type, detail=detail)
    return ProxyResponse(status, ErrorDocument(error=error).to_dict())


def _classify(exc: ActorRunnerError) -> tuple[int, str]:
    if isinstance(exc, MissingCredentialError):
        return 401, MISSING_API_KEY_TYPE
    if isinstance(exc, TransportError):
        status = exc.status_code if 400 <= exc.status_code < 600 else 502
        return status, exc.error_type or "platform-error"
    if isinstance(exc, RunFailedError):
        return 502, "run-failed"
    if isinstance(exc, RunTimeoutError):
        return 504, "run-timeout"
    if isinstance(exc, ValidationError):
        return 400, "invalid-request"
    if isinstance(exc, ContractError):
        if exc.stage == "ingress":
            return 400, "invalid-request"
        return 502, "unexpected-response"
    return 500, "internal-error"


# ---------------------------------------------------------------------------
# Routes
# ---------------------------------------------------------------------------


async def _guarded(
    route: str,
    headers: Mapping[str, str],
    config: RunnerConfig,
    platform_factory: PlatformFactory | None,
    handler: Callable[[PlatformAdapter], Awaitable[ProxyResponse]],
    correlation_id: str = "",
) -> ProxyResponse:
    """Authenticate, build the adapter, run *handler*, and map errors.

    *correlation_id* is stamped on any error that does not carry one yet.
    """
    try:
        credential = extract_credential(headers)
        if platform_factory is None:
            platform = get_platform(config.platform, credential, config=config)
        else:
            platform = platform_factory(credential)
        return await handler(platform)
    except ActorRunnerError as exc:
        exc.correlation_id = exc.correlation_id or correlation_id
        response = error_response(exc)
        logger.warning(
            "proxy route failed | route=%s | status=%d | stage=%s | code=%s | correlation_id=%s | error=%s",
            route,
            response.status_code,
            exc.stage,
            exc.code,
            exc.correlation_id,
            exc,
        )
        return response


async def list_actors_route(
    headers: Mapping[str, str],
    *,
    config: RunnerConfig,
    platform_factory: PlatformFactory | None = None,
    correlation_id: str = "",
) -> ProxyResponse:
    """``GET apify/actors``."""

    async def handler(platform: PlatformAdapter) -> ProxyResponse:
        actors = await list_actors(platform, limit=config.actor_list_limit)
        return ok([actor.to_dict() for actor in actors])

    return await _guarded("list_actors", headers, config, platform_factory, handler, correlation_id)


async def actor_schema_route(
    headers: Mapping[str, str],
    actor_id: str,
    *,
    config: RunnerConfig,
    platform_factory: PlatformFactory | None = None,
    correlation_id: str = "",
) -> ProxyResponse:
    """``GET apify/actors/{actorId}/schema``; 404 ``schema-not-found`` when absent."""

    async def handler(platform: PlatformAdapter) -> ProxyResponse:
        try:
            schema = await fetch_schema(platform, actor_id)
        except SchemaNotFoundError:
            # Clients match on the bare message, without the fetch context.
            error = ErrorDetail(
                message=NO_SCHEMA_MESSAGE,
                type=SCHEMA_NOT_FOUND_TYPE,
                correlation_id=correlation_id or None,
            )
            return ProxyResponse(404, ErrorDocument(error=error).to_dict())
        return ok(schema)

    return await _guarded("actor_schema", headers, config, platform_factory, handler, correlation_id)


async def start_run_route(
    headers: Mapping[str, str],
    actor_id: str,
    body: bytes | str | None,
    *,
    config: RunnerConfig,
    platform_factory: PlatformFactory | None = None,
    correlation_id: str = "",
) -> ProxyResponse:
    """``POST apify/actors/{actorId}/runs`` with the run input as JSON body."""

    async def handler(platform: PlatformAdapter) -> ProxyResponse:
        payload = deserialize_request_body(body)
        run_id = await start_run(platform, actor_id, payload)
        return ok({"runId": run_id})

    return await _guarded("start_run", headers, config, platform_factory, handler, correlation_id)


async def get_run_route(
    headers: Mapping[str, str],
    run_id: str,
    *,
    config: RunnerConfig,
    platform_factory: PlatformFactory | None = None,
    correlation_id: str = "",
) -> ProxyResponse:
    """``GET apify/runs/{runId}``."""

    async def handler(platform: PlatformAdapter) -> ProxyResponse:
        record = await get_run(platform, run_id)
        return ok(record.to_dict())

    return await _guarded("get_run", headers, config, platform_factory, handler, correlation_id)


async def run_dataset_route(
    headers: Mapping[str, str],
    run_id: str,
    *,
    config: RunnerConfig,
    platform_factory: PlatformFactory | None = None,
    correlation_id: str = "",
) -> ProxyResponse:
    """``GET apify/runs/{runId}/dataset``; answers ``[]`` on any platform failure."""

    async def handler(platform: PlatformAdapter) -> ProxyResponse:
        return ok(await fetch_run_dataset(platform, run_id))

    return await _guarded("run_dataset", headers, config, platform_factory, handler, correlation_id)


async def dataset_items_route(
    headers: Mapping[str, str],
    dataset_id: str,
    *,
    config: RunnerConfig,
    platform_factory: PlatformFactory | None = None,
    correlation_id: str = "",
) -> ProxyResponse:
    """``GET apify/datasets/{datasetId}/items`` (used by ``ProxyAdapter``)."""

    async def handler(platform: PlatformAdapter) -> ProxyResponse:
        try:
            items = await platform.get_dataset_items(dataset_id)
        except TransportError as exc:
            raise exc.with_context("Failed to fetch dataset", stage="fetch_dataset") from exc
        return ok(items)

    return await _guarded("dataset_items", headers, config, platform_factory, handler, correlation_id)


async def wait_for_run_route(
    headers: Mapping[str, str],
    run_id: str,
    params: Mapping[str, str],
    *,
    config: RunnerConfig,
    platform_factory: PlatformFactory | None = None,
    correlation_id: str = "",
) -> ProxyResponse:
    """``GET apify/runs/{runId}/wait``: polls server-side, returns the ``RunOutcome``."""

    async def handler(platform: PlatformAdapter) -> ProxyResponse:
        max_wait, interval = parse_wait_options(params)
        outcome = await wait_for_run(
            platform,
            run_id,
            max_wait_seconds=max_wait,
            poll_interval_seconds=interval,
            config=config,
        )
        return ok(outcome.to_dict())

    return await _guarded("wait_for_run", headers, config, platform_factory, handler, correlation_id)


def health_route() -> ProxyResponse:
    """``GET health``."""
    return ProxyResponse(200, {"status": "ok", "version": __version__})
