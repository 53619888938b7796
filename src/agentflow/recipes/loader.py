"""Build a Graph from a YAML workflow definition.

A definition looks like::

    workflow_id: demo
    nodes:
      - id: node-1
        agent: data-processor
      - id: node-3
        agent: report-generator
        depends_on: [data-processor-agent, validation-agent]
        operator: or
        options:
          require_all: false

``depends_on`` lists predecessor *agent* ids. ``operator`` defaults to AND.
``options`` are passed to the agent's constructor. ``agent_id`` overrides the
agent type's default id, so one type can back several nodes.
"""

from collections.abc import Callable
from pathlib import Path
from typing import Any

import yaml

from agentflow.agents.api_call import ApiCallAgent
from agentflow.agents.data_processor import DataProcessorAgent
from agentflow.agents.report import ReportGeneratorAgent
from agentflow.agents.validation import ValidationAgent
from agentflow.core.agent import Agent
from agentflow.core.graph import Graph
from agentflow.core.node import DependencyNode, Gate
from agentflow.errors import ConfigurationError
from agentflow.http.client import ApiClient

AGENT_TYPES: dict[str, Callable[..., Agent]] = {
    "data-processor": DataProcessorAgent,
    "validation": ValidationAgent,
    "report-generator": ReportGeneratorAgent,
    "api-call": ApiCallAgent,
}


def load_graph(path: str | Path, *, client: ApiClient | None = None) -> Graph:
    """Read a YAML file and build its graph."""
    try:
        definition = yaml.safe_load(Path(path).read_text())
    except yaml.YAMLError as e:
        raise ConfigurationError(f"Invalid YAML in {path}: {e}") from e
    return build_graph(definition, client=client)


def build_graph(definition: Any, *, client: ApiClient | None = None) -> Graph:
    if not isinstance(definition, dict):
        raise ConfigurationError("Workflow definition must be a mapping")
    nodes = definition.get("nodes")
    if not isinstance(nodes, list) or not nodes:
        raise ConfigurationError("Workflow definition needs a non-empty 'nodes' list")

    graph = Graph(definition.get("workflow_id"))
    for index, entry in enumerate(nodes):
        graph.add_node(_build_node(index, entry, client))
    return graph


def _build_node(index: int, entry: Any, client: ApiClient | None) -> DependencyNode:
    if not isinstance(entry, dict):
        raise ConfigurationError(f"Node #{index} must be a mapping")
    node_id = entry.get("id")
    agent_type = entry.get("agent")
    if not node_id or not agent_type:
        raise ConfigurationError(f"Node #{index} needs both 'id' and 'agent'")

    depends_on = entry.get("depends_on") or []
    if isinstance(depends_on, str):
        depends_on = [depends_on]
    if not isinstance(depends_on, list):
        raise ConfigurationError(
            f"Node {node_id!r}: 'depends_on' must be an agent id or a list of them"
        )

    agent = _build_agent(str(node_id), str(agent_type), entry.get("options") or {}, client)
    if entry.get("agent_id"):
        agent.agent_id = str(entry["agent_id"])

    return DependencyNode(
        str(node_id),
        agent,
        [str(d) for d in depends_on],
        Gate.parse(entry.get("operator", Gate.AND)),
    )


def _build_agent(
    node_id: str,
    agent_type: str,
    options: dict[str, Any],
    client: ApiClient | None,
) -> Agent:
    factory = AGENT_TYPES.get(agent_type)
    if factory is None:
        raise ConfigurationError(
            f"Node {node_id!r}: unknown agent type {agent_type!r} "
            f"(expected one of {sorted(AGENT_TYPES)})"
        )
    if not isinstance(options, dict):
        raise ConfigurationError(f"Node {node_id!r}: 'options' must be a mapping")

    if factory is ApiCallAgent:
        options = {"client": client, **options}
    try:
        return factory(**options)
    except TypeError as e:
        raise ConfigurationError(f"Node {node_id!r}: bad options for {agent_type!r}: {e}") from e
