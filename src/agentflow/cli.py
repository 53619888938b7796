"""CLI entry point for agentflow."""

import argparse
import asyncio
import logging
import sys
from typing import Any

from agentflow.config import get_settings
from agentflow.core.context import Context
from agentflow.core.graph import Graph
from agentflow.core.runner import Runner
from agentflow.errors import AgentFlowError
from agentflow.http.client import ApiClient
from agentflow.recipes.loader import load_graph
from agentflow.recipes.workflows import RECIPES, build_recipe, check_ready


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="agentflow",
        description="DAG-based agent orchestration with AND/OR/NOT dependency gates",
    )
    parser.add_argument("-v", "--verbose", action="store_true", help="Enable debug logging")

    sub = parser.add_subparsers(dest="command")

    run = sub.add_parser("run", help="Run a workflow defined in a YAML file")
    run.add_argument("--graph", required=True, help="Path to the workflow YAML file")
    _add_run_options(run)

    demo = sub.add_parser("demo", help="Run one of the built-in workflows")
    demo.add_argument("recipe", choices=RECIPES, help="Workflow to run")
    demo.add_argument("--url", default=None, help="Target URL for the API agent")
    demo.add_argument("--method", default="GET", help="HTTP method for the API agent")
    _add_run_options(demo)

    serve = sub.add_parser("serve", help="Start the REST server")
    serve.add_argument("--host", default=None, help="Bind address")
    serve.add_argument("--port", type=int, default=None, help="Bind port")

    return parser


def _add_run_options(parser: argparse.ArgumentParser) -> None:
    parser.add_argument("--input", default=None, help="Value stored under the 'input' key")
    parser.add_argument(
        "--set",
        dest="values",
        action="append",
        default=[],
        metavar="KEY=VALUE",
        help="Extra context value (repeatable)",
    )
    parser.add_argument("--dry-run", action="store_true", help="Print rounds without executing")
    parser.add_argument("--fail-fast", action="store_true", help="Stop after a failing round")
    parser.add_argument("--strict", action="store_true", help="Treat a stall as an error")
    parser.add_argument("--max-concurrency", type=int, default=None, help="Cap agents per round")


def _initial_data(args: argparse.Namespace) -> dict[str, Any]:
    data: dict[str, Any] = {}
    if args.input is not None:
        data["input"] = args.input
    for item in args.values:
        key, sep, value = item.partition("=")
        if not sep or not key:
            raise AgentFlowError(f"Expected KEY=VALUE, got {item!r}")
        data[key] = value
    return data


async def _run_graph(graph: Graph, args: argparse.Namespace, data: dict[str, Any]) -> int:
    levels = graph.levels
    print(f"Workflow: {graph.workflow_id}")
    print(f"Nodes: {len(graph)}")
    print(f"Rounds (if every agent succeeds): {len(levels)}")
    for i, level in enumerate(levels, start=1):
        print(f"  Round {i}: {level}")

    if args.dry_run:
        print("\nDry run - no agents executed.")
        return 0

    settings = get_settings()
    ctx = Context(data, workflow_id=graph.workflow_id)
    check_ready(graph, ctx)
    runner = Runner(
        max_concurrency=args.max_concurrency or settings.max_concurrency,
        raise_on_stall=args.strict or settings.raise_on_stall,
        fail_fast=args.fail_fast,
    )

    print()
    report = await runner.run(graph, ctx)
    summary = report.summary()

    print(f"\nDone in {report.duration_ms:.0f}ms")
    for key in ("total_nodes", "completed_nodes", "successful_nodes", "failed_nodes"):
        print(f"  {key}: {summary[key]}")
    for agent_id, result in ctx.results.items():
        status = "success" if result.success else f"failure ({result.error})"
        print(f"  {agent_id}: {status}")

    if report.stalled:
        print(f"\nStalled, unexecuted nodes: {report.stalled}")
    if report.failed_nodes:
        print(f"\nFailed nodes: {report.failed_nodes}")
    return 0 if report.success else 1


async def _run_demo(args: argparse.Namespace) -> int:
    settings = get_settings()
    client = ApiClient(backoff=settings.http_backoff)
    graph = build_recipe(args.recipe, client)
    data = _initial_data(args)
    if args.recipe in ("api", "parallel-api"):
        data.setdefault(
            "api_config",
            {
                "url": args.url or settings.default_api_url,
                "method": args.method,
                "timeout": settings.http_timeout,
                "retry_count": settings.http_retry_count,
            },
        )
    return await _run_graph(graph, args, data)


async def _run_file(args: argparse.Namespace) -> int:
    settings = get_settings()
    graph = load_graph(args.graph, client=ApiClient(backoff=settings.http_backoff))
    return await _run_graph(graph, args, _initial_data(args))


def _serve(args: argparse.Namespace) -> int:
    import uvicorn

    from agentflow.api.app import create_app

    settings = get_settings()
    uvicorn.run(
        create_app(settings),
        host=args.host or settings.api_host,
        port=args.port or settings.api_port,
        log_level=settings.log_level.lower(),
    )
    return 0


def main() -> None:
    parser = _build_parser()
    args = parser.parse_args()

    if args.verbose:
        logging.basicConfig(level=logging.DEBUG, format="%(name)s %(levelname)s %(message)s")
    else:
        logging.basicConfig(level=get_settings().log_level.upper(), format="%(message)s")

    try:
        if args.command == "run":
            code = asyncio.run(_run_file(args))
        elif args.command == "demo":
            code = asyncio.run(_run_demo(args))
        elif args.command == "serve":
            code = _serve(args)
        else:
            parser.print_help()
            code = 1
    except AgentFlowError as e:
        print(f"Error: {e}", file=sys.stderr)
        code = 2
    sys.exit(code)


if __name__ == "__main__":
    main()
