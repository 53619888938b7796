"""Shared data and result store flowing through one workflow run."""

import re
import threading
import uuid
from typing import Any

from agentflow.core.result import AgentResult

_TEMPLATE_RE = re.compile(r"\{([^{}]+)\}")


class Context:
    """Key-value store plus the map of recorded agent results.

    Agents read with ``get()`` and write with ``set()``.
    The runner records each agent's outcome with ``record_result`` under the
    agent id; an id is recorded at most once per run.

    Both maps sit behind one lock, so agents that push work onto threads can
    still write safely. Every operation is a dict access and never waits on
    anything but that lock.
    """

    def __init__(
        self,
        initial: dict[str, Any] | None = None,
        *,
        workflow_id: str | None = None,
    ) -> None:
        self.workflow_id = workflow_id or str(uuid.uuid4())
        self._data: dict[str, Any] = dict(initial) if initial else {}
        self._results: dict[str, AgentResult] = {}
        self._lock = threading.Lock()

    def get(self, key: str, default: Any = None) -> Any:
        with self._lock:
            return self._data.get(key, default)

    def set(self, key: str, value: Any) -> None:
        with self._lock:
            self._data[key] = value

    def record_result(self, agent_id: str, result: AgentResult) -> None:
        with self._lock:
            if agent_id in self._results:
                raise ValueError(f"Result for {agent_id!r} already recorded")
            self._results[agent_id] = result

    def get_result(self, agent_id: str) -> AgentResult | None:
        with self._lock:
            return self._results.get(agent_id)

    def is_unit_satisfied(self, agent_id: str) -> bool:
        """True iff a result exists for ``agent_id`` and it succeeded."""
        result = self.get_result(agent_id)
        return result is not None and result.success

    @property
    def results(self) -> dict[str, AgentResult]:
        with self._lock:
            return dict(self._results)

    def format_template(self, template: str) -> str:
        """Format a string template using context values.

        Replaces ``{key}`` placeholders with values from the context data.
        Missing keys are left as-is (e.g. ``{missing}`` stays ``{missing}``).
        """
        data = self.snapshot()

        def _replace(match: re.Match[str]) -> str:
            key = match.group(1)
            if key in data:
                return str(data[key])
            return match.group(0)

        return _TEMPLATE_RE.sub(_replace, template)

    def snapshot(self) -> dict[str, Any]:
        """Return a shallow copy of all context data."""
        with self._lock:
            return dict(self._data)

    def to_dict(self) -> dict[str, Any]:
        return {
            "workflow_id": self.workflow_id,
            "data": self.snapshot(),
            "results": {aid: r.to_dict() for aid, r in self.results.items()},
        }

    def __contains__(self, key: str) -> bool:
        with self._lock:
            return key in self._data

    def __repr__(self) -> str:
        return f"Context({self.workflow_id!r}, data={len(self._data)}, results={len(self._results)})"
