"""Actor summary model used by the listing activity.

Fills in display defaults the platform leaves out: ``title`` falls back
to ``name``, a missing description becomes a placeholder, and missing
stats read as zero runs.
"""

from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any

from actor_runner.core.constants import NO_DESCRIPTION_PLACEHOLDER
from actor_runner.core.exceptions import ContractError


@dataclass(frozen=True, slots=True)
class ActorSummary:
    """One actor available to the credential.

    Attributes:
        id: Platform actor identifier.
        name: Technical actor name.
        title: Display title (``name`` when the platform has none).
        description: Description or the placeholder text.
        stats: Platform stats mapping; at least ``{"totalRuns": 0}``.
    """

    id: str
    name: str
    title: str
    description: str = NO_DESCRIPTION_PLACEHOLDER
    stats: dict[str, Any] = field(default_factory=lambda: {"totalRuns": 0})

    @property
    def total_runs(self) -> int:
        """Return ``stats.totalRuns`` as an int (0 when missing)."""
        value = self.stats.get("totalRuns", 0)
        try:
            return int(value)
        except (TypeError, ValueError):
            return 0

    @classmethod
    def from_dict(cls, data: dict[str, Any]) -> ActorSummary:
        """Build a summary from a platform actor object.

        Raises:
            ContractError: If *data* is not a mapping or has no ``id``.
        """
        if not isinstance(data, dict) or not data.get("id"):
            msg = "Actor object must be a JSON object with an 'id'"
            raise ContractError(msg, stage="list_actors", code="INVALID_ACTOR_OBJECT")

        name = str(data.get("name") or "")
        stats = data.get("stats")
        return cls(
            id=str(data["id"]),
            name=name,
            title=str(data.get("title") or name),
            description=str(data.get("description") or NO_DESCRIPTION_PLACEHOLDER),
            stats=dict(stats) if isinstance(stats, dict) else {"totalRuns": 0},
        )

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "title": self.title,
            "description": self.description,
            "stats": dict(self.stats),
        }
