"""DAG-based agent orchestration with AND/OR/NOT dependency gates."""

from agentflow.core.agent import Agent
from agentflow.core.context import Context
from agentflow.core.graph import Graph
from agentflow.core.node import DependencyNode, Gate
from agentflow.core.result import AgentResult
from agentflow.core.runner import RunReport, Runner

__version__ = "0.1.0"

__all__ = [
    "Agent",
    "AgentResult",
    "Context",
    "DependencyNode",
    "Gate",
    "Graph",
    "RunReport",
    "Runner",
]
