"""Pydantic documents returned by the proxy routes.

These are the JSON bodies a client of the proxy actually sees:

- **RunOutcomeDocument**: the wait route's consolidated run result
- **ErrorDocument**: the ``{"error": {...}}`` body of every failed route

Field names are snake_case in Python and camelCase on the wire
(``by_alias=True``), matching the platform's own run objects.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, Field

if TYPE_CHECKING:
    from actor_runner.core.exceptions import ActorRunnerError
    from actor_runner.models.run import RunOutcome


class RunOutcomeDocument(BaseModel):
    """Wire form of a ``RunOutcome``.

    Attributes:
        status: Terminal status (always ``"SUCCEEDED"``).
        finished_at: Completion timestamp copied from the run.
        stats: Run metering data, uninterpreted.
        dataset: Output records, possibly empty.
        run: The final run object as the platform returned it.
        poll_count: Number of status fetches issued.
        elapsed_seconds: Time spent polling, to the millisecond.
    """

    status: str
    finished_at: str | None = Field(default=None, alias="finishedAt")
    stats: dict[str, Any] | None = None
    dataset: list[Any] = Field(default_factory=list)
    run: dict[str, Any] = Field(default_factory=dict)
    poll_count: int = Field(default=0, alias="pollCount")
    elapsed_seconds: float = Field(default=0.0, alias="elapsedSeconds")

    model_config = {"populate_by_name": True}

    @classmethod
    def from_outcome(cls, outcome: RunOutcome) -> RunOutcomeDocument:
        return cls(
            status=outcome.status,
            finished_at=outcome.finished_at,
            stats=outcome.stats,
            dataset=list(outcome.dataset),
            run=outcome.run.to_dict(),
            poll_count=outcome.poll_count,
            elapsed_seconds=round(outcome.elapsed_seconds, 3),
        )

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True)


class ErrorDetail(BaseModel):
    """Body of the ``error`` key.

    ``type`` is the stable value clients switch on (``"schema-not-found"``,
    ``"run-timeout"``, ...). ``detail`` is only set for failed runs and
    carries the lower-cased terminal status. ``correlation_id`` is the
    Functions invocation id, for matching a response to the host log.
    """

    message: str
    type: str
    category: str | None = None
    stage: str | None = None
    code: str | None = None
    retryable: bool | None = None
    correlation_id: str | None = Field(default=None, alias="correlationId")
    detail: str | None = None

    model_config = {"populate_by_name": True}

    @classmethod
    def from_exception(
        cls,
        exc: ActorRunnerError,
        error_type: str,
        *,
        detail: str | None = None,
    ) -> ErrorDetail:
        """Build the error body from ``exc.to_error_dict()``; empty strings are dropped."""
        payload = {key: value for key, value in exc.to_error_dict().items() if value != ""}
        return cls(type=error_type, detail=detail, **payload)


class ErrorDocument(BaseModel):
    """``{"error": {...}}`` envelope; unset fields are omitted."""

    error: ErrorDetail

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(by_alias=True, exclude_none=True)
