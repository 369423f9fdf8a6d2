"""List actors activity: the actors a credential can run.

A failure here usually means the credential is wrong or the platform is
unreachable, so it is the first thing a caller surfaces to the user.
"""

from __future__ import annotations

import logging

from actor_runner.core.constants import DEFAULT_ACTOR_LIST_LIMIT
from actor_runner.core.exceptions import ContractError, ValidationError
from actor_runner.models.actor import ActorSummary
from actor_runner.platforms.base import PlatformAdapter, TransportError

logger = logging.getLogger("actor_runner.activities.list_actors")

_CONTEXT = "Failed to fetch actors"


async def list_actors(
    platform: PlatformAdapter,
    *,
    limit: int = DEFAULT_ACTOR_LIST_LIMIT,
) -> list[ActorSummary]:
    """Return up to *limit* actors owned by the platform credential.

    Raises:
        ValidationError: If *limit* is not positive.
        TransportError: ``"Failed to fetch actors: <cause>"``.
        ContractError: If the platform response is not an actor listing.

    Items without an ``id`` are skipped with a WARNING; one bad item does
    not fail the listing.
    """
    if limit < 1:
        msg = f"limit must be >= 1, got {limit}"
        raise ValidationError(msg, stage="list_actors", code="INVALID_LIMIT")

    try:
        raw_actors = await platform.list_actors(limit)
    except TransportError as exc:
        raise exc.with_context(_CONTEXT, stage="list_actors") from exc
    except ContractError as exc:
        msg = f"{_CONTEXT}: {exc.message}"
        raise ContractError(msg, stage="list_actors", code=exc.code) from exc

    actors: list[ActorSummary] = []
    for raw in raw_actors:
        try:
            actors.append(ActorSummary.from_dict(raw))
        except ContractError as exc:
            logger.warning(
                "list_actors skipped actor | platform=%s | code=%s | error=%s",
                platform.name,
                exc.code,
                exc,
            )

    logger.info("list_actors completed | platform=%s | actors=%d", platform.name, len(actors))
    return actors
