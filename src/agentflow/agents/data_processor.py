"""Cleans the workflow input into a structured record."""

import asyncio

from agentflow.core.agent import Agent
from agentflow.core.context import Context
from agentflow.core.result import AgentResult

DEFAULT_INPUT = "default input data"


class DataProcessorAgent(Agent):
    """Normalise ``ctx["input"]`` and report its cleaned form.

    Outputs: ``original_data``, ``processed_data``, ``data_size``.
    Has no preconditions, so it always works as a start node.
    """

    agent_id = "data-processor-agent"
    description = "Data processor - cleans and transforms the workflow input"

    def __init__(self, *, delay: float = 0.0) -> None:
        self.delay = delay

    async def attempt(self, ctx: Context) -> AgentResult:
        raw = ctx.get("input")
        if raw is None:
            raw = DEFAULT_INPUT

        processed = f"processed: [{_clean(str(raw))}] -> structured record"
        if self.delay:
            await asyncio.sleep(self.delay)

        return AgentResult.ok(
            self.agent_id,
            {
                "original_data": raw,
                "processed_data": processed,
                "data_size": len(processed),
            },
        )


def _clean(text: str) -> str:
    return " ".join(text.split())
