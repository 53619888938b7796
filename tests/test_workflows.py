"""Tests for the canned workflows and run_workflow."""

import httpx
import pytest

from agentflow.core.context import Context
from agentflow.core.node import Gate
from agentflow.core.runner import Runner
from agentflow.errors import ConfigurationError
from agentflow.http import ApiClient
from agentflow.recipes.workflows import (
    RECIPES,
    api_workflow,
    build_recipe,
    check_ready,
    complex_workflow,
    parallel_api_workflow,
    run_workflow,
    sample_workflow,
)

API_CONFIG = {"url": "http://api.test/posts", "method": "POST", "body": {"title": "t"}}


def echo_client() -> ApiClient:
    return ApiClient(
        backoff=0,
        transport=httpx.MockTransport(lambda r: httpx.Response(201, json={"id": 101})),
    )


def down_client() -> ApiClient:
    def handler(request):
        raise httpx.ConnectError("refused", request=request)
    return ApiClient(backoff=0, transport=httpx.MockTransport(handler))


class TestRecipeShapes:
    def test_sample(self):
        g = sample_workflow()
        assert g.workflow_id.startswith("sample-workflow-")
        assert g.levels == [["node-1", "node-2"], ["node-3"]]
        assert g.get_node("node-3").operator is Gate.AND

    def test_complex(self):
        g = complex_workflow()
        assert g.get_node("node-3").operator is Gate.OR
        assert g.levels == [["node-1", "node-2"], ["node-3"]]

    def test_api(self):
        assert api_workflow().levels == [["node-1"], ["node-2"], ["node-3"]]

    def test_parallel_api(self):
        assert parallel_api_workflow().levels == [["node-1"], ["node-2", "node-3"], ["node-4"]]

    @pytest.mark.parametrize("name", RECIPES)
    def test_build_recipe(self, name):
        assert len(build_recipe(name)) >= 3

    def test_unknown_recipe(self):
        with pytest.raises(ConfigurationError, match="Unknown recipe"):
            build_recipe("nope")


class TestCheckReady:
    def test_sample_needs_nothing(self):
        check_ready(sample_workflow(), Context())

    def test_api_needs_config(self):
        with pytest.raises(ConfigurationError, match="node-2"):
            check_ready(api_workflow(), Context())

    def test_api_with_config(self):
        check_ready(api_workflow(), Context({"api_config": API_CONFIG}))

    def test_api_malformed_config(self):
        ctx = Context({"api_config": {"url": "http://api.test/", "method": "PATCH"}})
        with pytest.raises(ConfigurationError, match="Unsupported HTTP method"):
            check_ready(parallel_api_workflow(), ctx)


class TestRunWorkflow:
    @pytest.mark.asyncio
    async def test_sample_run(self):
        ctx = Context({"input": "test data"})
        summary = await run_workflow(sample_workflow(), ctx)
        assert summary["success"] is True
        assert summary["total_nodes"] == 3
        assert summary["completed_nodes"] == 3
        assert summary["successful_nodes"] == 3
        assert summary["rounds"] == [["node-1", "node-2"], ["node-3"]]
        assert summary["execution_ms"] >= 0
        report = summary["context"]["results"]["report-generator-agent"]["payload"]["final_report"]
        assert "## Validation" in report

    @pytest.mark.asyncio
    async def test_complex_run(self):
        summary = await run_workflow(complex_workflow(), Context({"input": "x"}))
        assert summary["completed_nodes"] == 3
        assert summary["success"] is True

    @pytest.mark.asyncio
    async def test_api_run(self):
        ctx = Context({"input": "x", "api_config": API_CONFIG})
        summary = await run_workflow(api_workflow(echo_client()), ctx)
        assert summary["success"] is True
        assert summary["rounds"] == [["node-1"], ["node-2"], ["node-3"]]
        report = ctx.get_result("report-generator-agent").payload["final_report"]
        assert "## API call" in report
        assert "## Validation" not in report

    @pytest.mark.asyncio
    async def test_parallel_api_run(self):
        ctx = Context({"input": "x", "api_config": API_CONFIG})
        summary = await run_workflow(parallel_api_workflow(echo_client()), ctx)
        assert summary["success"] is True
        assert summary["completed_nodes"] == 4
        assert summary["rounds"][1] == ["node-2", "node-3"]

    @pytest.mark.asyncio
    async def test_api_down_blocks_report(self):
        ctx = Context({"input": "x", "api_config": API_CONFIG})
        summary = await run_workflow(api_workflow(down_client()), ctx)
        assert summary["success"] is False
        assert summary["failed_nodes"] == 1
        assert summary["stalled"] == ["node-3"]
        assert ctx.get_result("report-generator-agent") is None

    @pytest.mark.asyncio
    async def test_api_run_without_config_rejected(self):
        with pytest.raises(ConfigurationError):
            await run_workflow(api_workflow(echo_client()), Context())

    @pytest.mark.asyncio
    async def test_api_run_with_bad_method_rejected_before_running(self):
        client = echo_client()
        graph = api_workflow(client)
        ctx = Context({"input": "x", "api_config": {"url": "http://api.test/", "method": "PATCH"}})
        with pytest.raises(ConfigurationError, match="PATCH"):
            await run_workflow(graph, ctx)
        assert ctx.results == {}
        assert not any(node.executed for node in graph)

    @pytest.mark.asyncio
    async def test_custom_runner(self):
        summary = await run_workflow(sample_workflow(), Context(), Runner(max_concurrency=1))
        assert summary["success"] is True
