"""Typed models for the run lifecycle.

Defines the data structures exchanged between the platform adapters,
the run poller, and its callers:

- ``RunPhase``: Poller-level classification of a remote run status
- ``RunRecord``: Snapshot of a remote run as returned by the platform
- ``RunOutcome``: Consolidated result of a successful run

Design notes:
- Models are frozen dataclasses; a ``RunRecord`` is never mutated
  locally, only re-read.
- ``status`` stays a plain string because the platform may introduce
  statuses this package does not know about. ``classify_status`` treats
  anything unrecognised as still pending.
- Free-form platform data (``stats``, dataset records) is carried as
  ``dict[str, Any]`` without interpretation.
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from typing import Any

from actor_runner.core.constants import FAILED_STATUSES, STATUS_SUCCEEDED
from actor_runner.core.exceptions import ContractError


class RunPhase(enum.Enum):
    """Poller view of a run status.

    Values:
        PENDING:   Not terminal yet (``READY``, ``RUNNING``, or unknown).
        SUCCEEDED: Terminal success; the dataset can be fetched.
        FAILED:    Terminal failure (``FAILED``, ``ABORTED``, ``TIMED-OUT``).
    """

    PENDING = "pending"
    SUCCEEDED = "succeeded"
    FAILED = "failed"


def classify_status(status: str) -> RunPhase:
    """Map a platform status string onto a ``RunPhase``."""
    if status == STATUS_SUCCEEDED:
        return RunPhase.SUCCEEDED
    if status in FAILED_STATUSES:
        return RunPhase.FAILED
    return RunPhase.PENDING


@dataclass(frozen=True, slots=True)
class RunRecord:
    """Snapshot of a remote run.

    Attributes:
        id: Platform-assigned run identifier.
        status: Platform status string (e.g. ``"RUNNING"``, ``"SUCCEEDED"``).
        status_message: Optional explanation, mostly present on failures.
        default_dataset_id: Output dataset identifier, once allocated.
        finished_at: Completion timestamp (ISO 8601), once terminal.
        stats: Metering data, passed through uninterpreted.
        raw: The full run object exactly as the platform returned it.
    """

    id: str
    status: str
    status_message: str | None = None
    default_dataset_id: str | None = None
    finished_at: str | None = None
    stats: dict[str, Any] | None = None
    raw: dict[str, Any] = field(default_factory=dict)

    @property
    def phase(self) -> RunPhase:
        """Return the poller classification of ``status``."""
        return classify_status(self.status)

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> RunRecord:
        """Build a ``RunRecord`` from a platform run object.

        Raises:
            ContractError: If *data* is not a mapping or has no ``id``.
        """
        if not isinstance(data, dict):
            msg = f"Run object must be a JSON object, got {type(data).__name__}"
            raise ContractError(msg, stage="get_run", code="INVALID_RUN_OBJECT")

        run_id = data.get("id")
        if not run_id:
            msg = "Run object is missing its 'id'"
            raise ContractError(msg, stage="get_run", code="INVALID_RUN_OBJECT")

        stats = data.get("stats")
        return cls(
            id=str(run_id),
            status=str(data.get("status", "")),
            status_message=data.get("statusMessage") or None,
            default_dataset_id=data.get("defaultDatasetId") or None,
            finished_at=data.get("finishedAt") or None,
            stats=stats if isinstance(stats, dict) else None,
            raw=dict(data),
        )

    def to_dict(self) -> dict[str, Any]:
        """Return the run object as received from the platform."""
        return dict(self.raw)


@dataclass(frozen=True, slots=True)
class RunOutcome:
    """Consolidated result of a run that finished with ``SUCCEEDED``.

    Failures never produce a ``RunOutcome``; the poller raises instead,
    so ``dataset`` is only ever populated for successful runs.

    Attributes:
        status: Terminal status observed (always ``"SUCCEEDED"``).
        finished_at: Copied from the final run record.
        stats: Copied from the final run record.
        dataset: Output records, possibly empty.
        run: The final ``RunRecord``.
        poll_count: Number of status fetches issued.
        elapsed_seconds: Wall-clock time spent polling.
    """

    status: str
    run: RunRecord
    dataset: list[dict[str, Any]] = field(default_factory=list)
    finished_at: str | None = None
    stats: dict[str, Any] | None = None
    poll_count: int = 0
    elapsed_seconds: float = 0.0

    @classmethod
    def from_run(
        cls,
        run: RunRecord,
        dataset: list[dict[str, Any]],
        *,
        poll_count: int = 0,
        elapsed_seconds: float = 0.0,
    ) -> RunOutcome:
        """Build the outcome for a succeeded *run*."""
        return cls(
            status=run.status,
            run=run,
            dataset=list(dataset),
            finished_at=run.finished_at,
            stats=run.stats,
            poll_count=poll_count,
            elapsed_seconds=elapsed_seconds,
        )

    def to_dict(self) -> dict[str, Any]:
        """Serialise to the JSON shape returned by the proxy wait route."""
        from actor_runner.models.responses import RunOutcomeDocument

        return RunOutcomeDocument.from_outcome(self).to_dict()
