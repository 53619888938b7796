"""Tests for Context."""

import threading

import pytest

from agentflow.core.context import Context
from agentflow.core.result import AgentResult


class TestContextGetSet:
    def test_set_and_get(self):
        ctx = Context()
        ctx.set("key", "value")
        assert ctx.get("key") == "value"

    def test_get_missing_returns_default(self):
        ctx = Context()
        assert ctx.get("missing") is None
        assert ctx.get("missing", 42) == 42

    def test_initial_data(self):
        ctx = Context({"a": 1, "b": 2})
        assert ctx.get("a") == 1
        assert ctx.get("b") == 2

    def test_initial_data_is_copied(self):
        initial = {"a": 1}
        ctx = Context(initial)
        initial["a"] = 2
        assert ctx.get("a") == 1

    def test_overwrite(self):
        ctx = Context({"key": "old"})
        ctx.set("key", "new")
        assert ctx.get("key") == "new"

    def test_contains(self):
        ctx = Context({"present": True})
        assert "present" in ctx
        assert "absent" not in ctx


class TestContextIdentity:
    def test_generated_workflow_id(self):
        assert Context().workflow_id != Context().workflow_id

    def test_explicit_workflow_id(self):
        assert Context(workflow_id="run-1").workflow_id == "run-1"


class TestContextResults:
    def test_record_and_get(self):
        ctx = Context()
        result = AgentResult.ok("a", {"x": 1})
        ctx.record_result("a", result)
        assert ctx.get_result("a") is result

    def test_missing_result_is_none(self):
        assert Context().get_result("nope") is None

    def test_record_twice_raises(self):
        ctx = Context()
        ctx.record_result("a", AgentResult.ok("a"))
        with pytest.raises(ValueError, match="already recorded"):
            ctx.record_result("a", AgentResult.fail("a", "again"))

    def test_satisfied_only_on_success(self):
        ctx = Context()
        ctx.record_result("good", AgentResult.ok("good"))
        ctx.record_result("bad", AgentResult.fail("bad", "boom"))
        assert ctx.is_unit_satisfied("good")
        assert not ctx.is_unit_satisfied("bad")
        assert not ctx.is_unit_satisfied("absent")

    def test_results_is_copy(self):
        ctx = Context()
        ctx.record_result("a", AgentResult.ok("a"))
        results = ctx.results
        results.clear()
        assert ctx.get_result("a") is not None

    def test_concurrent_distinct_writes(self):
        ctx = Context()

        def record(i: int) -> None:
            ctx.record_result(f"agent-{i}", AgentResult.ok(f"agent-{i}", i))
            ctx.set(f"key-{i}", i)

        threads = [threading.Thread(target=record, args=(i,)) for i in range(50)]
        for t in threads:
            t.start()
        for t in threads:
            t.join()

        assert len(ctx.results) == 50
        assert all(ctx.is_unit_satisfied(f"agent-{i}") for i in range(50))
        assert ctx.get("key-49") == 49


class TestContextFormatTemplate:
    def test_basic_substitution(self):
        ctx = Context({"name": "world"})
        assert ctx.format_template("hello {name}") == "hello world"

    def test_missing_key_left_as_is(self):
        ctx = Context()
        assert ctx.format_template("hello {missing}") == "hello {missing}"

    def test_mixed_present_and_missing(self):
        ctx = Context({"a": "A"})
        assert ctx.format_template("{a} and {b}") == "A and {b}"


class TestContextSnapshot:
    def test_snapshot_is_copy(self):
        ctx = Context({"a": 1})
        snap = ctx.snapshot()
        snap["a"] = 999
        assert ctx.get("a") == 1

    def test_to_dict(self):
        ctx = Context({"x": "y"}, workflow_id="wf")
        ctx.record_result("a", AgentResult.ok("a", "payload"))
        d = ctx.to_dict()
        assert d["workflow_id"] == "wf"
        assert d["data"] == {"x": "y"}
        assert d["results"]["a"]["success"] is True
        assert d["results"]["a"]["payload"] == "payload"
        assert isinstance(d["results"]["a"]["completed_at"], str)
