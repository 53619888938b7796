"""Immutable outcome of one agent attempt."""

from dataclasses import dataclass, field, replace
from datetime import UTC, datetime
from typing import Any, Self


def _now() -> datetime:
    return datetime.now(UTC)


@dataclass(frozen=True)
class AgentResult:
    agent_id: str
    success: bool
    payload: Any = None
    error: str | None = None
    completed_at: datetime = field(default_factory=_now)
    metadata: dict[str, Any] = field(default_factory=dict)

    @classmethod
    def ok(cls, agent_id: str, payload: Any = None, **metadata: Any) -> Self:
        return cls(agent_id=agent_id, success=True, payload=payload, metadata=metadata)

    @classmethod
    def fail(cls, agent_id: str, error: str, **metadata: Any) -> Self:
        return cls(agent_id=agent_id, success=False, error=error, metadata=metadata)

    def with_metadata(self, **extra: Any) -> Self:
        """Return a copy with ``extra`` merged over the existing metadata."""
        return replace(self, metadata={**self.metadata, **extra})

    def to_dict(self) -> dict[str, Any]:
        return {
            "agent_id": self.agent_id,
            "success": self.success,
            "payload": self.payload,
            "error": self.error,
            "completed_at": self.completed_at.isoformat(),
            "metadata": dict(self.metadata),
        }
