"""FastAPI routes that run the canned workflows."""

import logging
from typing import Any

import httpx
from fastapi import APIRouter, FastAPI, Request
from fastapi.responses import JSONResponse
from pydantic import AliasChoices, BaseModel, Field

from agentflow import __version__
from agentflow.agents.summary import ClaudeSummarizer
from agentflow.config import Settings, get_settings
from agentflow.core.context import Context
from agentflow.core.runner import Runner
from agentflow.errors import AgentFlowError, ConfigurationError, StallError
from agentflow.http.client import ApiClient
from agentflow.recipes.workflows import build_recipe, run_workflow

logger = logging.getLogger(__name__)

DEFAULT_INPUT = "default input data"
NETWORKED_RECIPES = ("api", "parallel-api")

router = APIRouter(prefix="/api/workflow", tags=["workflow"])


# ==================== Request Models ====================

class ApiConfig(BaseModel):
    """HTTP call made by the API agent."""

    url: str | None = None
    method: str = "GET"
    headers: dict[str, str] = Field(default_factory=dict)
    body: Any = None
    timeout: float | None = Field(None, validation_alias=AliasChoices("timeout", "timeoutSeconds"))
    retry_count: int | None = Field(
        None, validation_alias=AliasChoices("retry_count", "retryCount")
    )


class WorkflowRequest(BaseModel):
    input: Any = DEFAULT_INPUT
    api_config: ApiConfig | None = Field(
        None, validation_alias=AliasChoices("api_config", "apiConfig")
    )


# ==================== Helpers ====================

def _api_config(request: WorkflowRequest, settings: Settings) -> dict[str, Any]:
    if request.api_config is None:
        config: dict[str, Any] = {
            "url": settings.default_api_url,
            "method": "POST",
            "body": {"title": "agentflow request", "body": str(request.input), "userId": 1},
        }
    else:
        config = request.api_config.model_dump(exclude_none=True)
        config.setdefault("url", settings.default_api_url)
    config.setdefault("timeout", settings.http_timeout)
    config.setdefault("retry_count", settings.http_retry_count)
    return config


async def _execute(name: str, request: WorkflowRequest, http_request: Request) -> dict[str, Any]:
    settings: Settings = http_request.app.state.settings
    transport: httpx.AsyncBaseTransport | None = http_request.app.state.transport
    logger.info("Received %s workflow request", name)

    client = ApiClient(backoff=settings.http_backoff, transport=transport)
    summarizer = ClaudeSummarizer(model=settings.summary_model) if settings.summary_model else None
    graph = build_recipe(name, client, summarizer=summarizer)

    ctx = Context({"input": request.input}, workflow_id=graph.workflow_id)
    if name in NETWORKED_RECIPES:
        ctx.set("api_config", _api_config(request, settings))

    runner = Runner(max_concurrency=settings.max_concurrency, raise_on_stall=settings.raise_on_stall)
    return await run_workflow(graph, ctx, runner)


# ==================== Endpoints ====================

@router.post("/execute/sample")
async def execute_sample(request: WorkflowRequest, http_request: Request) -> dict[str, Any]:
    """DataProcessor AND Validation -> ReportGenerator."""
    return await _execute("sample", request, http_request)


@router.post("/execute/complex")
async def execute_complex(request: WorkflowRequest, http_request: Request) -> dict[str, Any]:
    """DataProcessor OR Validation -> ReportGenerator."""
    return await _execute("complex", request, http_request)


@router.post("/execute/api")
async def execute_api(request: WorkflowRequest, http_request: Request) -> dict[str, Any]:
    """DataProcessor -> ApiCall -> ReportGenerator."""
    return await _execute("api", request, http_request)


@router.post("/execute/parallel-api")
async def execute_parallel_api(request: WorkflowRequest, http_request: Request) -> dict[str, Any]:
    """DataProcessor -> [ApiCall AND Validation] -> ReportGenerator."""
    return await _execute("parallel-api", request, http_request)


@router.get("/info")
async def info() -> dict[str, Any]:
    return {
        "title": "agentflow",
        "description": "DAG-based agent orchestration with AND/OR/NOT dependency gates",
        "version": __version__,
        "features": {
            "gates": ["AND", "OR", "NOT"],
            "agents": [
                "DataProcessorAgent",
                "ValidationAgent",
                "ReportGeneratorAgent",
                "ApiCallAgent",
            ],
            "execution": "concurrent rounds with dependency gating",
            "http": "GET/POST/PUT/DELETE with retry and timeout",
        },
        "endpoints": {
            "sample": "/api/workflow/execute/sample",
            "complex": "/api/workflow/execute/complex",
            "api": "/api/workflow/execute/api",
            "parallel_api": "/api/workflow/execute/parallel-api",
        },
    }


@router.get("/health")
async def health() -> dict[str, str]:
    return {"status": "UP", "message": "Workflow system is running"}


# ==================== Error Handlers ====================

async def _configuration_error(request: Request, exc: ConfigurationError) -> JSONResponse:
    logger.warning("Rejected workflow request: %s", exc)
    return JSONResponse({"error": str(exc)}, status_code=400)


async def _workflow_error(request: Request, exc: AgentFlowError) -> JSONResponse:
    logger.error("Workflow failed: %s", exc)
    body: dict[str, Any] = {"error": str(exc)}
    if isinstance(exc, StallError):
        body["pending"] = exc.pending
    return JSONResponse(body, status_code=500)


def create_app(
    settings: Settings | None = None,
    *,
    transport: httpx.AsyncBaseTransport | None = None,
) -> FastAPI:
    app = FastAPI(title="agentflow", version=__version__)
    app.state.settings = settings or get_settings()
    app.state.transport = transport
    app.include_router(router)
    app.add_exception_handler(ConfigurationError, _configuration_error)
    app.add_exception_handler(AgentFlowError, _workflow_error)
    return app
