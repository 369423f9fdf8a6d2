"""Run lifecycle orchestration: start a run and poll it to completion.

``poll_until_terminal`` is the only stateful piece of the runner. It
re-reads a run until the platform reports a terminal status or the
polling budget runs out:

- ``SUCCEEDED``                      → fetch the dataset, return ``RunOutcome``.
- ``FAILED`` / ``ABORTED`` / ``TIMED-OUT`` → raise ``RunFailedError``.
- anything else (including statuses unknown to this package)
                                     → sleep ``poll_interval_seconds`` and poll again.

The deadline is computed once on entry and checked before every fetch,
so no request is ever started at or after it. Exceeding it raises
``RunTimeoutError`` with a fixed message that never reuses the
platform's own status text.

All loop state is local, so any number of runs can be awaited
concurrently (``asyncio.gather``) against the same or different
adapters. The same loop serves library callers (``run_and_wait``) and
the proxy's wait route (``wait_for_run``).
"""

from __future__ import annotations

import asyncio
import logging
import math
import time
from typing import TYPE_CHECKING, Any

from actor_runner.activities.fetch_dataset import fetch_dataset
from actor_runner.activities.get_run import get_run
from actor_runner.activities.start_run import start_run
from actor_runner.core.config import RunnerConfig
from actor_runner.core.constants import (
    DEFAULT_MAX_WAIT_SECONDS,
    DEFAULT_POLL_INTERVAL_SECONDS,
    NO_STATUS_MESSAGE,
    RUN_TIMEOUT_MESSAGE,
)
from actor_runner.core.exceptions import PermanentError, ValidationError
from actor_runner.models.run import RunOutcome, RunPhase, RunRecord

if TYPE_CHECKING:
    from collections.abc import Awaitable, Callable

    from actor_runner.platforms.base import PlatformAdapter

logger = logging.getLogger("actor_runner.orchestrators.run_lifecycle")


# ---------------------------------------------------------------------------
# Exceptions
# ---------------------------------------------------------------------------


class RunFailedError(PermanentError):
    """The platform reported a terminal failure for the run.

    Attributes:
        detail: Lower-cased terminal status (``"failed"``, ``"aborted"``,
            ``"timed-out"``).
        run: The final ``RunRecord``.
    """

    default_stage = "poll_run"
    default_code = "RUN_FAILED"

    def __init__(self, run: RunRecord) -> None:
        self.run = run
        self.detail = run.status.lower()
        super().__init__(run.status_message or NO_STATUS_MESSAGE)

    def __str__(self) -> str:
        return f"Actor run {self.detail}: {self.message}"


class RunTimeoutError(PermanentError):
    """The polling budget ran out while the run was still pending.

    Attributes:
        run_id: The run that was being polled.
        poll_count: Number of status fetches issued.
        elapsed_seconds: Time spent polling.
    """

    default_stage = "poll_run"
    default_code = "RUN_TIMEOUT"

    def __init__(self, run_id: str, *, poll_count: int, elapsed_seconds: float) -> None:
        self.run_id = run_id
        self.poll_count = poll_count
        self.elapsed_seconds = elapsed_seconds
        super().__init__(RUN_TIMEOUT_MESSAGE)


# ---------------------------------------------------------------------------
# Poller
# ---------------------------------------------------------------------------


async def poll_until_terminal(
    platform: PlatformAdapter,
    run_id: str,
    *,
    max_wait_seconds: float = DEFAULT_MAX_WAIT_SECONDS,
    poll_interval_seconds: float = DEFAULT_POLL_INTERVAL_SECONDS,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> RunOutcome:
    """Poll *run_id* until it reaches a terminal status.

    Args:
        platform: Credential-bound platform adapter.
        run_id: Run to poll.
        max_wait_seconds: Total budget, shared by fetches and sleeps.
        poll_interval_seconds: Delay after each non-terminal observation.
        clock: Monotonic time source in seconds.
        sleep: Awaitable delay.

    Returns:
        ``RunOutcome`` for a ``SUCCEEDED`` run, with its dataset
        (``[]`` when there is none or it could not be fetched).

    Raises:
        ValidationError: On an empty *run_id*, or a duration that is not a
            finite positive number.
        RunFailedError: The run ended ``FAILED``, ``ABORTED`` or ``TIMED-OUT``.
        RunTimeoutError: The budget ran out first.
        TransportError: A status fetch failed (not retried).
    """
    if not run_id or not run_id.strip():
        msg = "run_id must not be empty"
        raise ValidationError(msg, stage="poll_run", code="MISSING_RUN_ID")
    if not math.isfinite(max_wait_seconds) or max_wait_seconds <= 0:
        msg = f"max_wait_seconds must be a finite number > 0, got {max_wait_seconds}"
        raise ValidationError(msg, stage="poll_run", code="INVALID_POLL_BUDGET")
    if not math.isfinite(poll_interval_seconds) or poll_interval_seconds <= 0:
        msg = f"poll_interval_seconds must be a finite number > 0, got {poll_interval_seconds}"
        raise ValidationError(msg, stage="poll_run", code="INVALID_POLL_INTERVAL")

    started = clock()
    deadline = started + max_wait_seconds
    poll_count = 0

    logger.info(
        "poll_run started | run_id=%s | max_wait=%.1fs | interval=%.1fs",
        run_id,
        max_wait_seconds,
        poll_interval_seconds,
    )

    while True:
        now = clock()
        if now >= deadline:
            elapsed = now - started
            logger.warning(
                "poll_run timed out | run_id=%s | polls=%d | elapsed=%.1fs",
                run_id,
                poll_count,
                elapsed,
            )
            raise RunTimeoutError(run_id, poll_count=poll_count, elapsed_seconds=elapsed)

        poll_count += 1
        record = await get_run(platform, run_id)
        phase = record.phase

        logger.debug(
            "poll_run observed | run_id=%s | poll=%d | status=%s",
            run_id,
            poll_count,
            record.status,
        )

        if phase is RunPhase.SUCCEEDED:
            dataset = await fetch_dataset(platform, record)
            elapsed = clock() - started
            logger.info(
                "poll_run succeeded | run_id=%s | polls=%d | items=%d | elapsed=%.1fs",
                run_id,
                poll_count,
                len(dataset),
                elapsed,
            )
            return RunOutcome.from_run(
                record,
                dataset,
                poll_count=poll_count,
                elapsed_seconds=elapsed,
            )

        if phase is RunPhase.FAILED:
            logger.warning(
                "poll_run failed | run_id=%s | status=%s | polls=%d | message=%s",
                run_id,
                record.status,
                poll_count,
                record.status_message or NO_STATUS_MESSAGE,
            )
            raise RunFailedError(record)

        await sleep(poll_interval_seconds)


async def wait_for_run(
    platform: PlatformAdapter,
    run_id: str,
    *,
    max_wait_seconds: float | None = None,
    poll_interval_seconds: float | None = None,
    config: RunnerConfig | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> RunOutcome:
    """Poll an already started run, with knobs defaulting to *config*."""
    config = config or RunnerConfig()
    return await poll_until_terminal(
        platform,
        run_id,
        max_wait_seconds=config.max_wait_seconds if max_wait_seconds is None else max_wait_seconds,
        poll_interval_seconds=(
            config.poll_interval_seconds
            if poll_interval_seconds is None
            else poll_interval_seconds
        ),
        clock=clock,
        sleep=sleep,
    )


async def run_and_wait(
    platform: PlatformAdapter,
    actor_id: str,
    payload: dict[str, Any],
    *,
    max_wait_seconds: float | None = None,
    poll_interval_seconds: float | None = None,
    config: RunnerConfig | None = None,
    schema: dict[str, Any] | None = None,
    clock: Callable[[], float] = time.monotonic,
    sleep: Callable[[float], Awaitable[Any]] = asyncio.sleep,
) -> RunOutcome:
    """Start a run of *actor_id* and wait for its outcome.

    Args:
        platform: Credential-bound platform adapter.
        actor_id: Actor to run.
        payload: Run input.
        max_wait_seconds: Polling budget (defaults to ``config``).
        poll_interval_seconds: Poll delay (defaults to ``config``).
        config: Runner configuration; ``RunnerConfig()`` when omitted.
        schema: Optional input schema; required inputs are checked first.
        clock: Monotonic time source, forwarded to the poller.
        sleep: Awaitable delay, forwarded to the poller.

    Raises:
        InputValidationError: Required inputs are missing.
        TransportError: Launch or status fetch failed.
        RunFailedError: The run ended in a failure status.
        RunTimeoutError: The run did not finish within the budget.
    """
    run_id = await start_run(platform, actor_id, payload, schema=schema)
    return await wait_for_run(
        platform,
        run_id,
        max_wait_seconds=max_wait_seconds,
        poll_interval_seconds=poll_interval_seconds,
        config=config,
        clock=clock,
        sleep=sleep,
    )
