"""Canned workflows and the service call that runs one and summarises it."""

import logging
import time
from typing import Any

from agentflow.agents.api_call import ApiCallAgent
from agentflow.agents.data_processor import DataProcessorAgent
from agentflow.agents.report import ReportGeneratorAgent
from agentflow.agents.summary import ClaudeSummarizer
from agentflow.agents.validation import ValidationAgent
from agentflow.core.context import Context
from agentflow.core.graph import Graph
from agentflow.core.node import DependencyNode, Gate
from agentflow.core.runner import Runner
from agentflow.errors import ConfigurationError
from agentflow.http.client import ApiClient

logger = logging.getLogger(__name__)

DATA = DataProcessorAgent.agent_id
VALIDATION = ValidationAgent.agent_id
API = ApiCallAgent.agent_id


def _workflow_id(prefix: str) -> str:
    return f"{prefix}-{int(time.time() * 1000)}"


def sample_workflow(*, summarizer: ClaudeSummarizer | None = None) -> Graph:
    """DataProcessor AND Validation -> ReportGenerator."""
    graph = Graph(_workflow_id("sample-workflow"))
    graph.add_node(DependencyNode("node-1", DataProcessorAgent()))
    graph.add_node(DependencyNode("node-2", ValidationAgent()))
    graph.add_node(
        DependencyNode("node-3", ReportGeneratorAgent(summarizer=summarizer))
        .add_dependency(DATA)
        .add_dependency(VALIDATION)
        .with_operator(Gate.AND)
    )
    logger.info("Built workflow %s", graph.workflow_id)
    return graph


def complex_workflow(*, summarizer: ClaudeSummarizer | None = None) -> Graph:
    """DataProcessor OR Validation -> ReportGenerator."""
    graph = Graph(_workflow_id("complex-workflow"))
    graph.add_node(DependencyNode("node-1", DataProcessorAgent()))
    graph.add_node(DependencyNode("node-2", ValidationAgent()))
    graph.add_node(
        DependencyNode("node-3", ReportGeneratorAgent(require_all=False, summarizer=summarizer))
        .add_dependency(DATA)
        .add_dependency(VALIDATION)
        .with_operator(Gate.OR)
    )
    logger.info("Built workflow %s", graph.workflow_id)
    return graph


def api_workflow(
    client: ApiClient | None = None,
    *,
    summarizer: ClaudeSummarizer | None = None,
) -> Graph:
    """DataProcessor -> ApiCall -> ReportGenerator."""
    graph = Graph(_workflow_id("api-workflow"))
    graph.add_node(DependencyNode("node-1", DataProcessorAgent()))
    graph.add_node(DependencyNode("node-2", ApiCallAgent(client), [DATA], Gate.AND))
    graph.add_node(
        DependencyNode(
            "node-3",
            ReportGeneratorAgent(sources=(DATA, API), summarizer=summarizer),
            [API],
            Gate.AND,
        )
    )
    logger.info("Built workflow %s", graph.workflow_id)
    return graph


def parallel_api_workflow(
    client: ApiClient | None = None,
    *,
    summarizer: ClaudeSummarizer | None = None,
) -> Graph:
    """DataProcessor -> [ApiCall AND Validation] -> ReportGenerator."""
    graph = Graph(_workflow_id("parallel-api-workflow"))
    graph.add_node(DependencyNode("node-1", DataProcessorAgent()))
    graph.add_node(DependencyNode("node-2", ApiCallAgent(client), [DATA]))
    graph.add_node(DependencyNode("node-3", ValidationAgent(), [DATA]))
    graph.add_node(
        DependencyNode(
            "node-4",
            ReportGeneratorAgent(sources=(DATA, API, VALIDATION), summarizer=summarizer),
            [API, VALIDATION],
            Gate.AND,
        )
    )
    logger.info("Built workflow %s", graph.workflow_id)
    return graph


def check_ready(graph: Graph, ctx: Context) -> None:
    """Run every agent's own precondition check before starting the graph.

    Agents that find their configuration malformed raise ``ConfigurationError``
    themselves; agents merely missing it are collected into one error.
    """
    missing = [node.node_id for node in graph if not node.agent.is_ready(ctx)]
    if missing:
        raise ConfigurationError(f"Agents not ready to run (missing configuration): {missing}")


async def run_workflow(graph: Graph, ctx: Context, runner: Runner | None = None) -> dict[str, Any]:
    """Run ``graph`` and return its summary plus the completed context."""
    runner = runner or Runner()
    check_ready(graph, ctx)

    start = time.monotonic()
    report = await runner.run(graph, ctx)
    summary = report.summary()
    summary["execution_ms"] = round((time.monotonic() - start) * 1000, 1)
    summary["context"] = ctx.to_dict()

    logger.info("Workflow %s finished: %s", graph.workflow_id, graph.summarize(ctx))
    return summary


RECIPES = ("sample", "complex", "api", "parallel-api")


def build_recipe(
    name: str,
    client: ApiClient | None = None,
    *,
    summarizer: ClaudeSummarizer | None = None,
) -> Graph:
    match name:
        case "sample":
            return sample_workflow(summarizer=summarizer)
        case "complex":
            return complex_workflow(summarizer=summarizer)
        case "api":
            return api_workflow(client, summarizer=summarizer)
        case "parallel-api":
            return parallel_api_workflow(client, summarizer=summarizer)
    raise ConfigurationError(f"Unknown recipe: {name!r}")
