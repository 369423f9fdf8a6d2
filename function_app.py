"""Azure Functions entry point for the Actor Runner proxy.

This module registers the proxy's HTTP routes using the Python v2
programming model. The Functions host adds the ``api/`` route prefix.

All business logic lives in the actor_runner package. This file is purely
the wiring layer between HTTP trigger bindings and
``actor_runner.core.ingress``.
"""

from __future__ import annotations

import logging

import azure.functions as func

from actor_runner.core import ingress
from actor_runner.core.config import RunnerConfig

app = func.FunctionApp(http_auth_level=func.AuthLevel.ANONYMOUS)

logger = logging.getLogger("actor_runner.function_app")

# Fail fast on bad settings when the host loads the app.
CONFIG = RunnerConfig.from_env()


def _to_http(response: ingress.ProxyResponse) -> func.HttpResponse:
    return func.HttpResponse(
        response.to_json(),
        status_code=response.status_code,
        mimetype="application/json",
    )


# ---------------------------------------------------------------------------
# Actors
# ---------------------------------------------------------------------------


@app.function_name("list_actors")
@app.route(route="apify/actors", methods=["GET"])
async def list_actors(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """List the actors owned by the caller's credential."""
    logger.info("list_actors request received")
    response = await ingress.list_actors_route(
        req.headers,
        config=CONFIG,
        correlation_id=context.invocation_id,
    )
    return _to_http(response)


@app.function_name("actor_schema")
@app.route(route="apify/actors/{actorId}/schema", methods=["GET"])
async def actor_schema(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Return an actor's input schema (404 when it declares none)."""
    actor_id = req.route_params.get("actorId", "")
    logger.info("actor_schema request received | actor_id=%s", actor_id)
    response = await ingress.actor_schema_route(
        req.headers,
        actor_id,
        config=CONFIG,
        correlation_id=context.invocation_id,
    )
    return _to_http(response)


@app.function_name("start_run")
@app.route(route="apify/actors/{actorId}/runs", methods=["POST"])
async def start_run(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Start a run; the request body is the run input."""
    actor_id = req.route_params.get("actorId", "")
    logger.info("start_run request received | actor_id=%s", actor_id)
    response = await ingress.start_run_route(
        req.headers,
        actor_id,
        req.get_body(),
        config=CONFIG,
        correlation_id=context.invocation_id,
    )
    return _to_http(response)


# ---------------------------------------------------------------------------
# Runs and datasets
# ---------------------------------------------------------------------------


@app.function_name("get_run")
@app.route(route="apify/runs/{runId}", methods=["GET"])
async def get_run(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Return the current run object."""
    run_id = req.route_params.get("runId", "")
    response = await ingress.get_run_route(
        req.headers,
        run_id,
        config=CONFIG,
        correlation_id=context.invocation_id,
    )
    return _to_http(response)


@app.function_name("run_dataset")
@app.route(route="apify/runs/{runId}/dataset", methods=["GET"])
async def run_dataset(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Return a run's dataset records (``[]`` if they cannot be read)."""
    run_id = req.route_params.get("runId", "")
    response = await ingress.run_dataset_route(
        req.headers,
        run_id,
        config=CONFIG,
        correlation_id=context.invocation_id,
    )
    return _to_http(response)


@app.function_name("wait_for_run")
@app.route(route="apify/runs/{runId}/wait", methods=["GET"])
async def wait_for_run(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Poll a run server-side and return its consolidated outcome.

    Optional query parameters ``maxWaitSeconds`` and
    ``pollIntervalSeconds`` override the configured polling budget.
    """
    run_id = req.route_params.get("runId", "")
    logger.info("wait_for_run request received | run_id=%s", run_id)
    response = await ingress.wait_for_run_route(
        req.headers,
        run_id,
        req.params,
        config=CONFIG,
        correlation_id=context.invocation_id,
    )
    logger.info(
        "wait_for_run request completed | run_id=%s | status=%d",
        run_id,
        response.status_code,
    )
    return _to_http(response)


@app.function_name("dataset_items")
@app.route(route="apify/datasets/{datasetId}/items", methods=["GET"])
async def dataset_items(req: func.HttpRequest, context: func.Context) -> func.HttpResponse:
    """Return the records of a dataset."""
    dataset_id = req.route_params.get("datasetId", "")
    response = await ingress.dataset_items_route(
        req.headers,
        dataset_id,
        config=CONFIG,
        correlation_id=context.invocation_id,
    )
    return _to_http(response)


# ---------------------------------------------------------------------------
# Health
# ---------------------------------------------------------------------------


@app.function_name("health")
@app.route(route="health", methods=["GET"])
def health(req: func.HttpRequest) -> func.HttpResponse:  # noqa: ARG001
    """Liveness probe."""
    return _to_http(ingress.health_route())
