"""Fetch schema activity: an actor's declared input schema.

"This actor has no schema" is reported as ``SchemaNotFoundError`` and
kept apart from ``TransportError`` so callers can tell a credential or
network problem from an actor that simply cannot be rendered as a form.
"""

from __future__ import annotations

import logging
from typing import Any

from actor_runner.core.constants import NO_SCHEMA_MESSAGE
from actor_runner.core.exceptions import PermanentError, ValidationError
from actor_runner.platforms.base import PlatformAdapter, TransportError

logger = logging.getLogger("actor_runner.activities.fetch_schema")

_CONTEXT = "Failed to fetch actor schema"


class SchemaNotFoundError(PermanentError):
    """Raised when an actor declares no input schema.

    Attributes:
        actor_id: The actor that was looked up.
    """

    default_stage = "fetch_schema"
    default_code = "SCHEMA_NOT_FOUND"

    def __init__(self, actor_id: str, message: str = f"{_CONTEXT}: {NO_SCHEMA_MESSAGE}") -> None:
        self.actor_id = actor_id
        super().__init__(message)


async def fetch_schema(platform: PlatformAdapter, actor_id: str) -> dict[str, Any]:
    """Return the input schema declared by *actor_id*.

    Raises:
        ValidationError: If *actor_id* is empty.
        SchemaNotFoundError: If the actor has no input schema.
        TransportError: ``"Failed to fetch actor schema: <cause>"``.
    """
    if not actor_id or not actor_id.strip():
        msg = "actor_id must not be empty"
        raise ValidationError(msg, stage="fetch_schema", code="MISSING_ACTOR_ID")

    try:
        schema = await platform.get_input_schema(actor_id)
    except TransportError as exc:
        raise exc.with_context(_CONTEXT, stage="fetch_schema") from exc

    if not schema:
        logger.info("fetch_schema found no schema | actor_id=%s", actor_id)
        raise SchemaNotFoundError(actor_id)

    logger.info(
        "fetch_schema completed | actor_id=%s | properties=%d",
        actor_id,
        len(schema.get("properties") or {}),
    )
    return schema
