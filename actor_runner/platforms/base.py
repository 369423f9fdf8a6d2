"""PlatformAdapter abstract base class.

Defines the contract every automation-platform adapter implements. The
activities and the run poller interact exclusively with this interface,
so the same poll loop runs whether it talks to the platform directly or
to this project's own proxy.

Lifecycle:
    1. ``list_actors(limit)``: actors owned by the credential.
    2. ``get_input_schema(actor_id)``: an actor's declared input schema.
    3. ``start_run(actor_id, payload)``: launch a run, return its id.
    4. ``get_run(run_id)``: current run object.
    5. ``get_dataset_items(dataset_id)``: output records of a dataset.

Every adapter owns one ``HttpTransport`` which carries the credential;
adapters are cheap and should be created per user session.
"""

from __future__ import annotations

import abc
from typing import TYPE_CHECKING, Any

from actor_runner.core.exceptions import ActorRunnerError

if TYPE_CHECKING:
    from actor_runner.platforms.transport import HttpTransport


class PlatformAdapter(abc.ABC):
    """Abstract base class for automation-platform adapters.

    Example usage::

        platform = get_platform("apify", credential=api_token)
        actors = await platform.list_actors(100)
        run_id = await platform.start_run(actors[0]["id"], {"url": "https://x"})
        run = await platform.get_run(run_id)
    """

    #: Registry name of the adapter.
    name: str = ""

    def __init__(self, transport: HttpTransport) -> None:
        self._transport = transport

    @property
    def transport(self) -> HttpTransport:
        """Return the transport used for every call (read-only)."""
        return self._transport

    # ------------------------------------------------------------------
    # Abstract methods: every adapter must implement these
    # ------------------------------------------------------------------

    @abc.abstractmethod
    async def list_actors(self, limit: int) -> list[dict[str, Any]]:
        """Return up to *limit* raw actor objects owned by the credential.

        Raises:
            TransportError: On network or HTTP failures.
            ContractError: If the response has an unexpected shape.
        """

    @abc.abstractmethod
    async def get_input_schema(self, actor_id: str) -> dict[str, Any] | None:
        """Return the actor's input schema, or ``None`` if it declares none.

        Raises:
            TransportError: On network or HTTP failures.
        """

    @abc.abstractmethod
    async def start_run(self, actor_id: str, payload: dict[str, Any]) -> str:
        """Start a run of *actor_id* with *payload* and return the run id.

        Raises:
            TransportError: On network or HTTP failures.
            ContractError: If the response carries no run id.
        """

    @abc.abstractmethod
    async def get_run(self, run_id: str) -> dict[str, Any]:
        """Return the current run object for *run_id*.

        Raises:
            TransportError: On network or HTTP failures.
            ContractError: If the response has an unexpected shape.
        """

    @abc.abstractmethod
    async def get_dataset_items(self, dataset_id: str) -> list[dict[str, Any]]:
        """Return the records stored in *dataset_id*, in order.

        Raises:
            TransportError: On network or HTTP failures.
            ContractError: If the response is not a list.
        """


# ---------------------------------------------------------------------------
# Platform exceptions
# ---------------------------------------------------------------------------


class PlatformError(ActorRunnerError):
    """Base exception for platform adapter errors."""

    default_stage = "platform"
    default_code = "PLATFORM_ERROR"


class TransportError(PlatformError):
    """Network failure or non-success HTTP status from the platform.

    Attributes:
        status_code: HTTP status, or ``0`` when no response was received
            (DNS failure, refused connection, timeout).
        error_type: The ``error.type`` field of the response body, if any.
    """

    default_stage = "transport"
    default_code = "TRANSPORT_FAILED"

    def __init__(
        self,
        message: str,
        *,
        status_code: int = 0,
        error_type: str = "",
        stage: str = "",
    ) -> None:
        self.status_code = status_code
        self.error_type = error_type
        retryable = status_code == 0 or status_code == 429 or status_code >= 500
        super().__init__(message, stage=stage, retryable=retryable)

    def with_context(self, context: str, *, stage: str = "") -> TransportError:
        """Return a copy whose message is prefixed with *context*."""
        return TransportError(
            f"{context}: {self.message}",
            status_code=self.status_code,
            error_type=self.error_type,
            stage=stage or self.stage,
        )
