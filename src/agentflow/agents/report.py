"""Report generator agent: assembles a text report from upstream agent results."""

import asyncio
import logging
from datetime import UTC, datetime
from typing import Any

import anthropic

from agentflow.agents.api_call import ApiCallAgent
from agentflow.agents.data_processor import DataProcessorAgent
from agentflow.agents.summary import ClaudeSummarizer
from agentflow.agents.validation import ValidationAgent
from agentflow.core.agent import Agent
from agentflow.core.context import Context
from agentflow.core.result import AgentResult
from agentflow.errors import UnitFailure

logger = logging.getLogger(__name__)

DEFAULT_SOURCES = (DataProcessorAgent.agent_id, ValidationAgent.agent_id)

CANNED_SUMMARY = (
    "Based on the results above the workflow ran normally: upstream processing "
    "finished and its checks held. Keep monitoring downstream data flow."
)


class ReportGeneratorAgent(Agent):
    """Build ``final_report`` from the results of ``sources``.

    With ``require_all`` (the default) every source must have succeeded;
    otherwise one successful source is enough. The closing summary comes
    from ``summarizer`` when given, else a fixed paragraph.
    """

    agent_id = "report-generator-agent"
    description = "Report generator - builds a combined report from upstream results"

    def __init__(
        self,
        *,
        sources: tuple[str, ...] | list[str] = DEFAULT_SOURCES,
        require_all: bool = True,
        summarizer: ClaudeSummarizer | None = None,
        delay: float = 0.0,
    ) -> None:
        self.sources = tuple(sources)
        self.require_all = require_all
        self.summarizer = summarizer
        self.delay = delay

    async def attempt(self, ctx: Context) -> AgentResult:
        available: dict[str, AgentResult] = {}
        for source in self.sources:
            result = ctx.get_result(source)
            if result is not None and result.success:
                available[source] = result
            elif self.require_all:
                raise UnitFailure(f"{source} did not complete successfully")
        if not available:
            raise UnitFailure(f"none of {list(self.sources)} completed successfully")

        generated_at = datetime.now(UTC).isoformat()
        summary = await self._summarize(available)
        report = _render(ctx.workflow_id, generated_at, available, summary)
        if self.delay:
            await asyncio.sleep(self.delay)

        logger.info("Report generated (%d chars)", len(report))
        return AgentResult.ok(
            self.agent_id,
            {
                "final_report": report,
                "generated_at": generated_at,
                "source_summaries": {aid: _summarize_result(r) for aid, r in available.items()},
            },
        )

    async def _summarize(self, available: dict[str, AgentResult]) -> str:
        if self.summarizer is None:
            return CANNED_SUMMARY
        try:
            return await self.summarizer.summarize({aid: r.payload for aid, r in available.items()})
        except anthropic.APIError as e:
            logger.warning("Summary model unavailable, using canned summary: %s", e)
            return CANNED_SUMMARY


def _render(
    workflow_id: str,
    generated_at: str,
    available: dict[str, AgentResult],
    summary: str,
) -> str:
    lines = [
        "=== Workflow Report ===",
        f"Workflow: {workflow_id}",
        f"Generated: {generated_at}",
        "",
    ]
    for agent_id, result in available.items():
        lines.extend(_section(agent_id, result.payload))
        lines.append("")
    lines += ["## Summary", summary, "", "=== End of Report ==="]
    return "\n".join(lines)


def _section(agent_id: str, payload: Any) -> list[str]:
    data = payload if isinstance(payload, dict) else {}
    if agent_id == DataProcessorAgent.agent_id:
        return [
            "## Data processing",
            f"- original: {data.get('original_data')}",
            f"- processed: {data.get('processed_data')}",
            f"- size: {data.get('data_size')} chars",
        ]
    if agent_id == ValidationAgent.agent_id:
        return [
            "## Validation",
            f"- valid: {data.get('is_valid')}",
            f"- score: {data.get('validation_score')}",
            f"- report: {data.get('validation_report')}",
        ]
    if agent_id == ApiCallAgent.agent_id:
        request = data.get("request", {})
        response = data.get("response", {})
        return [
            "## API call",
            f"- request: {request.get('method')} {request.get('url')}",
            f"- status: {response.get('status_code')}",
            f"- attempts: {response.get('attempts')}",
        ]
    return [f"## {agent_id}", f"- result: {payload}"]


def _summarize_result(result: AgentResult) -> dict[str, Any]:
    return {
        "agent_id": result.agent_id,
        "success": result.success,
        "completed_at": result.completed_at.isoformat(),
    }
