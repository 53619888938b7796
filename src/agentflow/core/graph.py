"""Ordered set of dependency nodes with dry-run levels and summaries."""

import uuid
from typing import Any, Self

from agentflow.core.context import Context
from agentflow.core.node import DependencyNode
from agentflow.core.result import AgentResult
from agentflow.errors import ConfigurationError


class Graph:
    """Nodes keyed by node id, in declaration order.

    Declaration order only makes iteration deterministic; it is not a
    scheduling priority. Nothing here checks for cycles. A cyclic or
    unsatisfiable declaration shows up as a stall when the graph runs.
    """

    def __init__(self, workflow_id: str | None = None) -> None:
        self.workflow_id = workflow_id or f"workflow-{uuid.uuid4().hex[:8]}"
        self._nodes: dict[str, DependencyNode] = {}
        self._by_agent: dict[str, str] = {}  # agent_id -> node_id

    def add_node(self, node: DependencyNode) -> Self:
        if node.node_id in self._nodes:
            raise ConfigurationError(f"Duplicate node id: {node.node_id!r}")
        agent_id = node.agent.agent_id
        if not agent_id:
            raise ConfigurationError(f"Node {node.node_id!r} wraps an agent without an id")
        if agent_id in self._by_agent:
            raise ConfigurationError(
                f"Agent {agent_id!r} already produced by node {self._by_agent[agent_id]!r}"
            )
        self._nodes[node.node_id] = node
        self._by_agent[agent_id] = node.node_id
        return self

    def get_node(self, node_id: str) -> DependencyNode:
        return self._nodes[node_id]

    def node_for_agent(self, agent_id: str) -> DependencyNode | None:
        node_id = self._by_agent.get(agent_id)
        return self._nodes[node_id] if node_id else None

    @property
    def node_ids(self) -> list[str]:
        return list(self._nodes)

    @property
    def nodes(self) -> list[DependencyNode]:
        return list(self._nodes.values())

    def pending(self) -> list[DependencyNode]:
        return [n for n in self._nodes.values() if not n.executed]

    @property
    def levels(self) -> list[list[str]]:
        """Simulate the run assuming every agent succeeds.

        Returns the node ids of each wave. Nodes that would never become
        ready (cycles, NOT gates over successful predecessors) are omitted.
        Works on a scratch context and leaves node state untouched.
        """
        scratch = Context()
        done: set[str] = set()
        levels: list[list[str]] = []

        while True:
            wave = [
                n for n in self._nodes.values()
                if n.node_id not in done and n.gate_open(scratch)
            ]
            if not wave:
                break
            for n in wave:
                scratch.record_result(n.agent.agent_id, AgentResult.ok(n.agent.agent_id))
                done.add(n.node_id)
            levels.append([n.node_id for n in wave])

        return levels

    def summarize(self, ctx: Context) -> dict[str, Any]:
        """Cross-reference node ``executed`` flags with recorded results."""
        results = ctx.results
        completed = [n for n in self._nodes.values() if n.executed]
        successful = sum(
            1 for n in completed
            if (r := results.get(n.agent.agent_id)) is not None and r.success
        )
        return {
            "workflow_id": self.workflow_id,
            "total_nodes": len(self._nodes),
            "completed_nodes": len(completed),
            "successful_nodes": successful,
            "failed_nodes": len(completed) - successful,
        }

    def __len__(self) -> int:
        return len(self._nodes)

    def __iter__(self):
        return iter(self._nodes.values())

    def __repr__(self) -> str:
        return f"Graph({self.workflow_id!r}, nodes={len(self._nodes)})"
