"""Tests for the run lifecycle poller and ``run_and_wait``.

Covers:
- Terminal success with and without a dataset
- Dataset fetch failures replaced by an empty dataset
- Terminal failure statuses (failed / aborted / timed-out)
- Deadline handling: no fetch at or after the deadline
- Unknown statuses treated as pending
- End-to-end launch → poll → dataset scenarios
"""

from __future__ import annotations

import asyncio
from typing import Any
from unittest.mock import MagicMock

import pytest

from actor_runner.activities.start_run import InputValidationError
from actor_runner.core.config import RunnerConfig
from actor_runner.core.constants import NO_STATUS_MESSAGE, RUN_TIMEOUT_MESSAGE
from actor_runner.core.exceptions import ValidationError
from actor_runner.orchestrators.run_lifecycle import (
    RunFailedError,
    RunTimeoutError,
    poll_until_terminal,
    run_and_wait,
    wait_for_run,
)
from actor_runner.platforms.base import TransportError


def _run(status: str, **extra: Any) -> dict[str, Any]:
    return {"id": "run_1", "status": status, **extra}


def _record_fetch_times(platform: MagicMock, clock: Any, runs: list[dict[str, Any]]) -> list[float]:
    """Script ``get_run`` responses and record the clock at each call."""
    times: list[float] = []
    remaining = list(runs)

    async def _get_run(run_id: str) -> dict[str, Any]:
        times.append(clock())
        return remaining.pop(0) if len(remaining) > 1 else remaining[0]

    platform.get_run.side_effect = _get_run
    return times


# ---------------------------------------------------------------------------
# Success path
# ---------------------------------------------------------------------------


class TestSucceeded:
    @pytest.mark.asyncio()
    async def test_returns_dataset_items(self, platform: MagicMock, clock: Any) -> None:
        platform.get_run.return_value = _run(
            "SUCCEEDED",
            defaultDatasetId="ds_1",
            finishedAt="2026-10-19T10:00:00.000Z",
            stats={"computeUnits": 0.01},
        )
        platform.get_dataset_items.return_value = [{"title": "x"}, {"title": "y"}]

        outcome = await poll_until_terminal(platform, "run_1", clock=clock, sleep=clock.sleep)

        assert outcome.status == "SUCCEEDED"
        assert outcome.dataset == [{"title": "x"}, {"title": "y"}]
        assert outcome.finished_at == "2026-10-19T10:00:00.000Z"
        assert outcome.stats == {"computeUnits": 0.01}
        assert outcome.run.id == "run_1"
        assert outcome.poll_count == 1
        platform.get_dataset_items.assert_awaited_once_with("ds_1")

    @pytest.mark.asyncio()
    async def test_no_dataset_id_gives_empty_dataset(
        self, platform: MagicMock, clock: Any
    ) -> None:
        platform.get_run.return_value = _run("SUCCEEDED")

        outcome = await poll_until_terminal(platform, "run_1", clock=clock, sleep=clock.sleep)

        assert outcome.dataset == []
        platform.get_dataset_items.assert_not_called()

    @pytest.mark.asyncio()
    async def test_dataset_transport_failure_is_swallowed(
        self, platform: MagicMock, clock: Any
    ) -> None:
        platform.get_run.return_value = _run("SUCCEEDED", defaultDatasetId="ds_1")
        platform.get_dataset_items.side_effect = TransportError("boom", status_code=500)

        outcome = await poll_until_terminal(platform, "run_1", clock=clock, sleep=clock.sleep)

        assert outcome.status == "SUCCEEDED"
        assert outcome.dataset == []

    @pytest.mark.asyncio()
    async def test_dataset_unexpected_failure_is_swallowed(
        self, platform: MagicMock, clock: Any
    ) -> None:
        platform.get_run.return_value = _run("SUCCEEDED", defaultDatasetId="ds_1")
        platform.get_dataset_items.side_effect = RuntimeError("unexpected")

        outcome = await poll_until_terminal(platform, "run_1", clock=clock, sleep=clock.sleep)

        assert outcome.dataset == []

    @pytest.mark.asyncio()
    async def test_polls_until_succeeded(self, platform: MagicMock, clock: Any) -> None:
        times = _record_fetch_times(
            platform,
            clock,
            [_run("READY"), _run("RUNNING"), _run("SUCCEEDED")],
        )

        outcome = await poll_until_terminal(
            platform,
            "run_1",
            poll_interval_seconds=2.0,
            clock=clock,
            sleep=clock.sleep,
        )

        assert outcome.poll_count == 3
        assert clock.sleeps == [2.0, 2.0]
        assert times == [1000.0, 1002.0, 1004.0]
        assert outcome.elapsed_seconds == 4.0


# ---------------------------------------------------------------------------
# Failure path
# ---------------------------------------------------------------------------


class TestFailed:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize("status", ["FAILED", "ABORTED", "TIMED-OUT"])
    async def test_terminal_failure_statuses(
        self, platform: MagicMock, clock: Any, status: str
    ) -> None:
        platform.get_run.return_value = _run(status, statusMessage="went wrong")

        with pytest.raises(RunFailedError) as exc_info:
            await poll_until_terminal(platform, "run_1", clock=clock, sleep=clock.sleep)

        assert exc_info.value.detail == status.lower()
        assert exc_info.value.message == "went wrong"
        platform.get_dataset_items.assert_not_called()

    @pytest.mark.asyncio()
    async def test_missing_status_message_uses_placeholder(
        self, platform: MagicMock, clock: Any
    ) -> None:
        platform.get_run.return_value = _run("ABORTED")

        with pytest.raises(RunFailedError) as exc_info:
            await poll_until_terminal(platform, "run_1", clock=clock, sleep=clock.sleep)

        assert exc_info.value.message == NO_STATUS_MESSAGE
        assert str(exc_info.value) == f"Actor run aborted: {NO_STATUS_MESSAGE}"

    @pytest.mark.asyncio()
    async def test_status_fetch_failure_propagates(self, platform: MagicMock, clock: Any) -> None:
        platform.get_run.side_effect = TransportError("Unauthorized", status_code=401)

        with pytest.raises(TransportError) as exc_info:
            await poll_until_terminal(platform, "run_1", clock=clock, sleep=clock.sleep)

        assert exc_info.value.message == "Failed to fetch run details: Unauthorized"
        assert exc_info.value.status_code == 401
        assert platform.get_run.await_count == 1


# ---------------------------------------------------------------------------
# Deadline
# ---------------------------------------------------------------------------


class TestDeadline:
    @pytest.mark.asyncio()
    async def test_times_out_while_pending(self, platform: MagicMock, clock: Any) -> None:
        times = _record_fetch_times(platform, clock, [_run("RUNNING")])

        with pytest.raises(RunTimeoutError) as exc_info:
            await poll_until_terminal(
                platform,
                "run_1",
                max_wait_seconds=10.0,
                poll_interval_seconds=2.0,
                clock=clock,
                sleep=clock.sleep,
            )

        deadline = 1000.0 + 10.0
        assert all(t < deadline for t in times)
        assert len(times) == 5
        assert exc_info.value.message == RUN_TIMEOUT_MESSAGE
        assert exc_info.value.poll_count == 5
        assert exc_info.value.elapsed_seconds >= 10.0

    @pytest.mark.asyncio()
    async def test_interval_longer_than_budget_polls_once(
        self, platform: MagicMock, clock: Any
    ) -> None:
        platform.get_run.return_value = _run("RUNNING")

        with pytest.raises(RunTimeoutError):
            await poll_until_terminal(
                platform,
                "run_1",
                max_wait_seconds=1.0,
                poll_interval_seconds=2.0,
                clock=clock,
                sleep=clock.sleep,
            )

        assert platform.get_run.await_count == 1

    @pytest.mark.asyncio()
    async def test_timeout_message_ignores_status_message(
        self, platform: MagicMock, clock: Any
    ) -> None:
        platform.get_run.return_value = _run("RUNNING", statusMessage="Crawled 10 pages")

        with pytest.raises(RunTimeoutError) as exc_info:
            await poll_until_terminal(
                platform,
                "run_1",
                max_wait_seconds=3.0,
                poll_interval_seconds=1.0,
                clock=clock,
                sleep=clock.sleep,
            )

        assert "Crawled" not in str(exc_info.value)

    @pytest.mark.asyncio()
    async def test_unknown_status_is_treated_as_pending(
        self, platform: MagicMock, clock: Any
    ) -> None:
        _record_fetch_times(
            platform,
            clock,
            [_run("SOMETHING-NEW"), _run("TIMING-OUT"), _run("SUCCEEDED")],
        )

        outcome = await poll_until_terminal(platform, "run_1", clock=clock, sleep=clock.sleep)

        assert outcome.status == "SUCCEEDED"
        assert outcome.poll_count == 3

    @pytest.mark.asyncio()
    async def test_slow_fetch_counts_against_budget(self, platform: MagicMock, clock: Any) -> None:
        async def _slow_get_run(run_id: str) -> dict[str, Any]:
            clock.now += 4.0
            return _run("RUNNING")

        platform.get_run.side_effect = _slow_get_run

        with pytest.raises(RunTimeoutError):
            await poll_until_terminal(
                platform,
                "run_1",
                max_wait_seconds=10.0,
                poll_interval_seconds=1.0,
                clock=clock,
                sleep=clock.sleep,
            )

        # Fetches start at 0, 5 and 10 s; the third would start at the deadline.
        assert platform.get_run.await_count == 2


# ---------------------------------------------------------------------------
# Argument validation
# ---------------------------------------------------------------------------


class TestArguments:
    @pytest.mark.asyncio()
    @pytest.mark.parametrize(
        ("run_id", "max_wait", "interval"),
        [
            ("", 10.0, 1.0),
            ("run_1", 0.0, 1.0),
            ("run_1", 10.0, 0.0),
            ("run_1", -1.0, 1.0),
            ("run_1", float("nan"), 1.0),
            ("run_1", float("inf"), 1.0),
            ("run_1", 10.0, float("nan")),
            ("run_1", 10.0, float("inf")),
        ],
    )
    async def test_invalid_arguments(
        self,
        platform: MagicMock,
        run_id: str,
        max_wait: float,
        interval: float,
    ) -> None:
        with pytest.raises(ValidationError):
            await poll_until_terminal(
                platform,
                run_id,
                max_wait_seconds=max_wait,
                poll_interval_seconds=interval,
            )
        platform.get_run.assert_not_called()

    @pytest.mark.asyncio()
    async def test_wait_for_run_uses_config_defaults(
        self, platform: MagicMock, clock: Any
    ) -> None:
        platform.get_run.return_value = _run("RUNNING")
        config = RunnerConfig(max_wait_seconds=6.0, poll_interval_seconds=3.0)

        with pytest.raises(RunTimeoutError):
            await wait_for_run(platform, "run_1", config=config, clock=clock, sleep=clock.sleep)

        assert clock.sleeps == [3.0, 3.0]

    @pytest.mark.asyncio()
    async def test_wait_for_run_arguments_override_config(
        self, platform: MagicMock, clock: Any
    ) -> None:
        platform.get_run.return_value = _run("RUNNING")
        config = RunnerConfig(max_wait_seconds=600.0, poll_interval_seconds=30.0)

        with pytest.raises(RunTimeoutError):
            await wait_for_run(
                platform,
                "run_1",
                max_wait_seconds=2.0,
                poll_interval_seconds=1.0,
                config=config,
                clock=clock,
                sleep=clock.sleep,
            )

        assert clock.sleeps == [1.0, 1.0]


# ---------------------------------------------------------------------------
# End-to-end
# ---------------------------------------------------------------------------


class TestRunAndWait:
    @pytest.mark.asyncio()
    async def test_launch_poll_dataset(self, platform: MagicMock, clock: Any) -> None:
        """Run → RUNNING → SUCCEEDED with dataset ds_1."""
        platform.start_run.return_value = "run_1"
        _record_fetch_times(
            platform,
            clock,
            [_run("RUNNING"), _run("SUCCEEDED", defaultDatasetId="ds_1")],
        )
        platform.get_dataset_items.return_value = [{"title": "x"}]

        outcome = await run_and_wait(
            platform,
            "abc",
            {"url": "https://x"},
            clock=clock,
            sleep=clock.sleep,
        )

        platform.start_run.assert_awaited_once_with("abc", {"url": "https://x"})
        platform.get_dataset_items.assert_awaited_once_with("ds_1")
        payload = outcome.to_dict()
        assert payload["status"] == "SUCCEEDED"
        assert payload["dataset"] == [{"title": "x"}]
        assert payload["run"] == {"id": "run_1", "status": "SUCCEEDED", "defaultDatasetId": "ds_1"}

    @pytest.mark.asyncio()
    async def test_failed_run(self, platform: MagicMock, clock: Any) -> None:
        platform.start_run.return_value = "run_1"
        platform.get_run.return_value = _run("FAILED", statusMessage="bad input")

        with pytest.raises(RunFailedError) as exc_info:
            await run_and_wait(platform, "abc", {}, clock=clock, sleep=clock.sleep)

        assert exc_info.value.message == "bad input"
        assert exc_info.value.detail == "failed"

    @pytest.mark.asyncio()
    async def test_budget_shorter_than_interval(self, platform: MagicMock, clock: Any) -> None:
        platform.start_run.return_value = "run_1"
        platform.get_run.return_value = _run("RUNNING")

        with pytest.raises(RunTimeoutError):
            await run_and_wait(
                platform,
                "abc",
                {},
                max_wait_seconds=1.0,
                poll_interval_seconds=2.0,
                clock=clock,
                sleep=clock.sleep,
            )

        assert platform.get_run.await_count == 1

    @pytest.mark.asyncio()
    async def test_schema_validation_blocks_launch(self, platform: MagicMock) -> None:
        schema = {"type": "object", "required": ["url"], "properties": {"url": {"type": "string"}}}

        with pytest.raises(InputValidationError):
            await run_and_wait(platform, "abc", {"url": "  "}, schema=schema)

        platform.start_run.assert_not_called()

    @pytest.mark.asyncio()
    async def test_concurrent_runs_do_not_interfere(self, platform: MagicMock) -> None:
        platform.start_run.side_effect = lambda actor_id, payload: f"run_{actor_id}"

        async def _get_run(run_id: str) -> dict[str, Any]:
            return {"id": run_id, "status": "SUCCEEDED", "defaultDatasetId": f"ds_{run_id}"}

        async def _items(dataset_id: str) -> list[dict[str, Any]]:
            return [{"dataset": dataset_id}]

        platform.get_run.side_effect = _get_run
        platform.get_dataset_items.side_effect = _items

        first, second = await asyncio.gather(
            run_and_wait(platform, "a", {}, poll_interval_seconds=0.01),
            run_and_wait(platform, "b", {}, poll_interval_seconds=0.01),
        )

        assert first.dataset == [{"dataset": "ds_run_a"}]
        assert second.dataset == [{"dataset": "ds_run_b"}]
