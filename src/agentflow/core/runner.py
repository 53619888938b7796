"""Round-based executor using asyncio.gather per wave of ready nodes."""

import asyncio
import logging
import time
from contextlib import nullcontext
from dataclasses import dataclass, field
from typing import Any

from agentflow.core.context import Context
from agentflow.core.graph import Graph
from agentflow.core.node import DependencyNode
from agentflow.errors import ExecutionError, StallError

logger = logging.getLogger(__name__)


@dataclass
class RunReport:
    graph: Graph
    context: Context
    rounds: list[list[str]] = field(default_factory=list)
    stalled: list[str] = field(default_factory=list)
    aborted: bool = False
    duration_ms: float = 0.0

    @property
    def success(self) -> bool:
        return not self.stalled and not self.aborted and not self.failed_nodes

    @property
    def failed_nodes(self) -> list[str]:
        results = self.context.results
        return [
            n.node_id for n in self.graph
            if n.executed and not results[n.agent.agent_id].success
        ]

    def summary(self) -> dict[str, Any]:
        return {
            **self.graph.summarize(self.context),
            "rounds": [list(r) for r in self.rounds],
            "stalled": list(self.stalled),
            "duration_ms": self.duration_ms,
            "success": self.success,
        }


class Runner:
    """Execute a graph in rounds, running every ready node of a round concurrently.

    Each round re-evaluates every unexecuted node's gate against the context,
    dispatches the ready ones together and waits for all of them before the
    next round. The run ends when nothing is left, or stalls when nodes
    remain but none is ready.
    """

    def __init__(
        self,
        *,
        max_concurrency: int | None = None,
        raise_on_stall: bool = False,
        fail_fast: bool = False,
    ) -> None:
        if max_concurrency is not None and max_concurrency < 1:
            raise ValueError("max_concurrency must be >= 1")
        self.max_concurrency = max_concurrency
        self.raise_on_stall = raise_on_stall
        self.fail_fast = fail_fast

    async def run(self, graph: Graph, ctx: Context) -> RunReport:
        if any(n.executed for n in graph):
            raise ExecutionError(f"Graph {graph.workflow_id!r} has already been run")

        report = RunReport(graph=graph, context=ctx)
        start = time.monotonic()
        semaphore = asyncio.Semaphore(self.max_concurrency) if self.max_concurrency else None
        logger.info("Starting workflow %s (%d nodes)", graph.workflow_id, len(graph))

        while pending := graph.pending():
            wave = [node for node in pending if node.is_ready(ctx)]
            if not wave:
                report.stalled = [n.node_id for n in pending]
                logger.warning("Workflow %s stalled, unexecuted: %s", graph.workflow_id, report.stalled)
                break

            round_idx = len(report.rounds) + 1
            report.rounds.append([n.node_id for n in wave])
            logger.info("Round %d: %s", round_idx, report.rounds[-1])

            await asyncio.gather(*(self._run_node(node, ctx, round_idx, semaphore) for node in wave))

            if self.fail_fast and any(not ctx.is_unit_satisfied(n.agent.agent_id) for n in wave):
                logger.warning("Fail-fast triggered at round %d", round_idx)
                report.aborted = True
                break

        report.duration_ms = round((time.monotonic() - start) * 1000, 1)
        logger.info("Finished workflow %s: %s", graph.workflow_id, graph.summarize(ctx))

        if report.stalled and self.raise_on_stall:
            raise StallError(report.stalled, report)
        return report

    async def _run_node(
        self,
        node: DependencyNode,
        ctx: Context,
        round_idx: int,
        semaphore: asyncio.Semaphore | None,
    ) -> None:
        agent_id = node.agent.agent_id
        async with semaphore or nullcontext():
            logger.info("Running %s (%s)", node.node_id, agent_id)
            result = await node.agent.execute(ctx)

        ctx.record_result(agent_id, result.with_metadata(round=round_idx, node_id=node.node_id))
        node.executed = True
        logger.info("Finished %s: %s", node.node_id, "success" if result.success else "failure")
