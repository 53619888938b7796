"""Gate enum and DependencyNode (one agent plus its dependency gate)."""

from enum import Enum
from typing import Self

from agentflow.core.agent import Agent
from agentflow.core.context import Context
from agentflow.errors import ConfigurationError


class Gate(Enum):
    """How a node's predecessors combine into readiness.

    ``NOT`` means *none* of the predecessors has succeeded. It is a
    blocked-until-absent gate over the whole list, not the negation of
    ``AND`` or ``OR``.
    """

    AND = "AND"
    OR = "OR"
    NOT = "NOT"

    @classmethod
    def parse(cls, value: "str | Gate") -> "Gate":
        if isinstance(value, Gate):
            return value
        if isinstance(value, str):
            try:
                return cls[value.strip().upper()]
            except KeyError:
                pass
        raise ConfigurationError(f"Unknown gate operator: {value!r}")


class DependencyNode:
    """A graph node wrapping one agent.

    ``dependencies`` holds predecessor *agent* ids. ``executed`` is set by the
    runner once the agent's result is recorded and never reset. ``ready``
    caches the last gate evaluation for inspection only.
    """

    def __init__(
        self,
        node_id: str,
        agent: Agent,
        dependencies: list[str] | None = None,
        operator: Gate | str = Gate.AND,
    ) -> None:
        self.node_id = node_id
        self.agent = agent
        self.dependencies: list[str] = list(dependencies) if dependencies else []
        self.operator = Gate.parse(operator)
        self.executed = False
        self.ready = False

    def add_dependency(self, agent_id: str) -> Self:
        self.dependencies.append(agent_id)
        return self

    def with_operator(self, operator: Gate | str) -> Self:
        self.operator = Gate.parse(operator)
        return self

    def gate_open(self, ctx: Context) -> bool:
        """Evaluate the gate against ``ctx`` without touching node state."""
        if not self.dependencies:
            return True

        satisfied = [ctx.is_unit_satisfied(dep) for dep in self.dependencies]
        match self.operator:
            case Gate.AND:
                return all(satisfied)
            case Gate.OR:
                return any(satisfied)
            case Gate.NOT:
                return not any(satisfied)
        raise ConfigurationError(f"Unknown gate operator: {self.operator!r}")

    def is_ready(self, ctx: Context) -> bool:
        self.ready = self.gate_open(ctx)
        return self.ready

    def __repr__(self) -> str:
        deps = f" {self.operator.value} {self.dependencies}" if self.dependencies else ""
        return f"DependencyNode({self.node_id!r}, {self.agent.agent_id!r}{deps})"
