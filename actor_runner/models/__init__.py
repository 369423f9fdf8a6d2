"""Data models.

Defines the data structures used throughout the runner:
- RunRecord: Snapshot of a remote run
- RunOutcome: Consolidated result of a successful run
- RunPhase: Poller classification of a run status
- ActorSummary: Display-ready actor listing entry
- RunOutcomeDocument, ErrorDocument: Pydantic wire documents of the proxy
"""

from actor_runner.models.actor import ActorSummary
from actor_runner.models.responses import ErrorDetail, ErrorDocument, RunOutcomeDocument
from actor_runner.models.run import RunOutcome, RunPhase, RunRecord, classify_status

__all__ = [
    "ActorSummary",
    "ErrorDetail",
    "ErrorDocument",
    "RunOutcome",
    "RunOutcomeDocument",
    "RunPhase",
    "RunRecord",
    "classify_status",
]
