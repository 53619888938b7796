"""Agent ABC, the uniform capability every unit of work implements."""

import logging
import time
from abc import ABC, abstractmethod

from agentflow.core.context import Context
from agentflow.core.result import AgentResult

logger = logging.getLogger(__name__)


class Agent(ABC):
    """Abstract base class for all agents.

    Subclasses set ``agent_id`` and ``description`` and implement ``attempt``.
    Other nodes declare dependencies on the ``agent_id``, never on a node id.
    """

    agent_id: str = ""
    description: str = ""

    def identify(self) -> str:
        return self.agent_id

    def describe(self) -> str:
        return self.description

    def is_ready(self, ctx: Context) -> bool:
        """Precondition check callers run before the graph starts.

        Returns False when required configuration is absent and may raise
        ``ConfigurationError`` when it is present but malformed.
        """
        return True

    @abstractmethod
    async def attempt(self, ctx: Context) -> AgentResult: ...

    async def execute(self, ctx: Context) -> AgentResult:
        """Run ``attempt`` with timing metadata; exceptions become failure results."""
        start = time.monotonic()
        try:
            result = await self.attempt(ctx)
            if not isinstance(result, AgentResult):
                raise TypeError(f"attempt() returned {type(result).__name__}, not AgentResult")
        except Exception as e:
            logger.exception("Agent %s raised", self.agent_id)
            result = AgentResult.fail(self.agent_id, str(e) or type(e).__name__)
        elapsed_ms = round((time.monotonic() - start) * 1000, 1)
        if "duration_ms" in result.metadata:
            return result
        return result.with_metadata(duration_ms=elapsed_ms)

    def __repr__(self) -> str:
        return f"{type(self).__name__}({self.agent_id!r})"
