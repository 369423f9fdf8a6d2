"""Start run activity: launch an actor run.

Returns only the new run id; waiting for the run is the poller's job
(see ``actor_runner.orchestrators.run_lifecycle``).

The input payload is forwarded as-is. When the caller passes the actor's
input schema, the payload's required properties are checked first so an
obviously incomplete run is never launched.
"""

from __future__ import annotations

import logging
from typing import Any

from actor_runner.core.exceptions import ContractError, ValidationError
from actor_runner.platforms.base import PlatformAdapter, TransportError

logger = logging.getLogger("actor_runner.activities.start_run")

_CONTEXT = "Failed to start actor run"


class InputValidationError(ValidationError):
    """Raised when a run payload lacks properties its schema requires.

    Attributes:
        missing: Names of the required properties that are absent or blank.
    """

    default_stage = "start_run"
    default_code = "INPUT_VALIDATION_FAILED"

    def __init__(self, missing: list[str]) -> None:
        self.missing = missing
        super().__init__(f"Missing required input field(s): {', '.join(missing)}")


def validate_input(schema: dict[str, Any], payload: dict[str, Any]) -> None:
    """Check that *payload* has a value for every property *schema* requires.

    A property counts as missing when it is absent, ``None``, or a
    string that is empty after stripping.

    Raises:
        InputValidationError: Listing every missing property, in schema order.
    """
    required = schema.get("required") or []
    missing = [name for name in required if _is_blank(payload.get(name))]
    if missing:
        raise InputValidationError(missing)


def _is_blank(value: object) -> bool:
    if value is None:
        return True
    return isinstance(value, str) and not value.strip()


async def start_run(
    platform: PlatformAdapter,
    actor_id: str,
    payload: dict[str, Any],
    *,
    schema: dict[str, Any] | None = None,
) -> str:
    """Start a run of *actor_id* and return the run id.

    Args:
        platform: Credential-bound platform adapter.
        actor_id: Actor to run (non-empty).
        payload: Run input; free-form JSON object.
        schema: Optional input schema to validate *payload* against.

    Raises:
        ValidationError: If *actor_id* is empty or *payload* is not a dict.
        InputValidationError: If *schema* is given and required inputs are missing.
        TransportError: ``"Failed to start actor run: <cause>"``.
        ContractError: If the platform response carries no run id.
    """
    if not actor_id or not actor_id.strip():
        msg = "actor_id must not be empty"
        raise ValidationError(msg, stage="start_run", code="MISSING_ACTOR_ID")
    if not isinstance(payload, dict):
        msg = f"Run input must be a JSON object, got {type(payload).__name__}"
        raise ValidationError(msg, stage="start_run", code="INVALID_RUN_INPUT")

    if schema is not None:
        validate_input(schema, payload)

    logger.info("start_run started | actor_id=%s | platform=%s", actor_id, platform.name)

    try:
        run_id = await platform.start_run(actor_id, payload)
    except TransportError as exc:
        raise exc.with_context(_CONTEXT, stage="start_run") from exc
    except ContractError as exc:
        msg = f"{_CONTEXT}: {exc.message}"
        raise ContractError(msg, stage="start_run", code=exc.code) from exc

    logger.info("start_run completed | actor_id=%s | run_id=%s", actor_id, run_id)
    return run_id
