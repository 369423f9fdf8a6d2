"""Unified exception taxonomy.

Provides a shared base exception hierarchy for every activity, platform
adapter, and the run poller. Every domain exception inherits from
``ActorRunnerError`` and carries structured context fields so that the
proxy routes and callers can tell failure modes apart without parsing
message text.

Taxonomy categories
-------------------
- ``ValidationError``: input/contract violations, never retryable.
- ``PermanentError``: unrecoverable domain failures, not retryable.
- ``ContractError``: payload/schema drift between stages, never retryable.

Errors outside these bases (``TransportError``) report ``"transient"``
when retryable and ``"permanent"`` otherwise.

Every exception exposes ``to_error_dict()``, the payload the proxy
routes return as their error body.
"""

from __future__ import annotations


class ActorRunnerError(Exception):
    """Base exception for all actor-runner errors.

    Attributes:
        message: Human-readable error description.
        stage: Stage where the error occurred
            (e.g. ``"list_actors"``, ``"poll_run"``).
        code: Machine-readable error code (e.g. ``"RUN_FAILED"``).
        retryable: Whether the caller could reasonably retry the operation.
        correlation_id: Invocation id of the proxy request that failed,
            empty outside the proxy.
    """

    #: Default stage for subclasses (override via class attribute or kwarg).
    default_stage: str = ""
    #: Default code for subclasses (override via class attribute or kwarg).
    default_code: str = ""

    def __init__(
        self,
        message: str = "",
        *,
        stage: str = "",
        code: str = "",
        retryable: bool = False,
        correlation_id: str = "",
    ) -> None:
        self.message = message
        self.stage = stage or self.default_stage
        self.code = code or self.default_code
        self.retryable = retryable
        self.correlation_id = correlation_id
        super().__init__(message)

    @property
    def category(self) -> str:
        """Return the error category based on concrete class."""
        if isinstance(self, ContractError):
            return "contract"
        if isinstance(self, ValidationError):
            return "validation"
        if isinstance(self, PermanentError):
            return "permanent"
        return "transient" if self.retryable else "permanent"

    def to_error_dict(self) -> dict[str, object]:
        """Return a structured error payload with stable keys."""
        return {
            "category": self.category,
            "code": self.code,
            "stage": self.stage,
            "message": str(self),
            "retryable": self.retryable,
            "correlation_id": self.correlation_id,
        }


# ---------------------------------------------------------------------------
# Category base classes
# ---------------------------------------------------------------------------


class ValidationError(ActorRunnerError):
    """Input or domain-model validation failure. Never retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class PermanentError(ActorRunnerError):
    """Unrecoverable domain failure. Not retryable."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]


class ContractError(ActorRunnerError):
    """Response or payload shape differs from what the caller expects."""

    def __init__(self, message: str = "", **kwargs: object) -> None:
        kwargs.setdefault("retryable", False)
        super().__init__(message, **kwargs)  # type: ignore[arg-type]
