"""Checks that the workflow input is present and well formed."""

import asyncio
import random

from agentflow.core.agent import Agent
from agentflow.core.context import Context
from agentflow.core.result import AgentResult

INVALID_SCORE = 0.3


class ValidationAgent(Agent):
    """Score ``ctx["input"]``.

    Non-blank input is valid and scores between 0.85 and 1.0; anything else
    scores 0.3. An invalid input is still a successful attempt: the verdict
    is in the payload (``is_valid``, ``validation_score``,
    ``validation_report``).
    """

    agent_id = "validation-agent"
    description = "Validator - checks input integrity and scores it"

    def __init__(self, *, delay: float = 0.0, rng: random.Random | None = None) -> None:
        self.delay = delay
        self._rng = rng or random.Random()

    async def attempt(self, ctx: Context) -> AgentResult:
        raw = ctx.get("input")
        valid = raw is not None and bool(str(raw).strip())
        score = 0.85 + self._rng.random() * 0.15 if valid else INVALID_SCORE
        report = (
            "validation passed: format correct, content complete"
            if valid
            else "validation failed: content empty or malformed"
        )
        if self.delay:
            await asyncio.sleep(self.delay)

        return AgentResult.ok(
            self.agent_id,
            {
                "input_data": raw,
                "is_valid": valid,
                "validation_score": round(score, 3),
                "validation_report": report,
            },
        )
