"""Fetch dataset activity: output records of a finished run.

Dataset failures never fail a run. ``EMPTY_DATASET_ON_FAILURE`` is the
fallback policy: when the dataset cannot be read, for any reason, the
caller receives an empty list and a WARNING is logged. A run without a
``defaultDatasetId`` also yields an empty list, without a warning.
"""

from __future__ import annotations

import logging
from typing import Any

from actor_runner.activities.get_run import get_run
from actor_runner.core.exceptions import ActorRunnerError
from actor_runner.models.run import RunRecord
from actor_runner.platforms.base import PlatformAdapter

logger = logging.getLogger("actor_runner.activities.fetch_dataset")

EMPTY_DATASET_ON_FAILURE: list[dict[str, Any]] = []
"""Fallback returned when the dataset cannot be fetched (copied per call)."""


async def fetch_dataset(platform: PlatformAdapter, record: RunRecord) -> list[dict[str, Any]]:
    """Return the dataset records of *record*, or ``[]``.

    Never raises; see ``EMPTY_DATASET_ON_FAILURE``.
    """
    dataset_id = record.default_dataset_id
    if not dataset_id:
        logger.debug("fetch_dataset skipped | run_id=%s | reason=no dataset id", record.id)
        return []

    try:
        items = await platform.get_dataset_items(dataset_id)
    except Exception as exc:  # noqa: BLE001
        logger.warning(
            "Failed to fetch dataset | run_id=%s | dataset_id=%s | error=%s",
            record.id,
            dataset_id,
            exc,
        )
        return list(EMPTY_DATASET_ON_FAILURE)

    logger.info(
        "fetch_dataset completed | run_id=%s | dataset_id=%s | items=%d",
        record.id,
        dataset_id,
        len(items),
    )
    return items


async def fetch_run_dataset(platform: PlatformAdapter, run_id: str) -> list[dict[str, Any]]:
    """Look up *run_id* and return its dataset records, or ``[]``.

    Unlike ``fetch_dataset`` this also swallows failures of the run
    lookup itself.
    """
    try:
        record = await get_run(platform, run_id)
    except ActorRunnerError as exc:
        logger.warning(
            "Failed to fetch dataset | run_id=%s | error=%s",
            run_id,
            exc.message,
        )
        return list(EMPTY_DATASET_ON_FAILURE)
    return await fetch_dataset(platform, record)
