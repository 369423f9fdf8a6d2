"""Get run activity: read the current state of a run.

A single request with no retry. Reading never mutates anything, so two
reads with no remote change in between return the same content.
"""

from __future__ import annotations

import logging

from actor_runner.core.exceptions import ValidationError
from actor_runner.models.run import RunRecord
from actor_runner.platforms.base import PlatformAdapter, TransportError

logger = logging.getLogger("actor_runner.activities.get_run")

_CONTEXT = "Failed to fetch run details"


async def get_run(platform: PlatformAdapter, run_id: str) -> RunRecord:
    """Return the current ``RunRecord`` for *run_id*.

    Raises:
        ValidationError: If *run_id* is empty.
        TransportError: ``"Failed to fetch run details: <cause>"``.
        ContractError: If the platform returns a malformed run object.
    """
    if not run_id or not run_id.strip():
        msg = "run_id must not be empty"
        raise ValidationError(msg, stage="get_run", code="MISSING_RUN_ID")

    try:
        data = await platform.get_run(run_id)
    except TransportError as exc:
        raise exc.with_context(_CONTEXT, stage="get_run") from exc

    record = RunRecord.from_dict(data)
    logger.debug("get_run completed | run_id=%s | status=%s", record.id, record.status)
    return record
