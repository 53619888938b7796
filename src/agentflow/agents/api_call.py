"""Agent that calls an external HTTP API described by ``ctx["api_config"]``."""

import logging
from typing import Any

from agentflow.core.agent import Agent
from agentflow.core.context import Context
from agentflow.core.result import AgentResult
from agentflow.errors import ConfigurationError, TransportFailure, UnitFailure
from agentflow.http.client import ApiClient
from agentflow.http.models import DEFAULT_TIMEOUT, ApiRequest

logger = logging.getLogger(__name__)

CONFIG_KEY = "api_config"


class ApiCallAgent(Agent):
    """Perform the HTTP request configured under ``ctx["api_config"]``.

    Recognised keys: ``url`` (required), ``method``, ``headers``, ``body``,
    ``timeout``, ``retry_count``. The URL and string bodies are formatted
    with ``ctx.format_template`` so they can reference context values such
    as ``{input}``.

    Outputs: ``request`` and ``response``. A transport failure (retry budget
    exhausted) or a non-2xx status fails the attempt.
    """

    agent_id = "api-call-agent"
    description = "API caller - performs GET/POST/PUT/DELETE with retry and timeout"

    def __init__(self, client: ApiClient | None = None) -> None:
        self.client = client or ApiClient()

    def is_ready(self, ctx: Context) -> bool:
        """False when ``api_config`` is absent; raises if it is malformed."""
        if ctx.get(CONFIG_KEY) is None:
            return False
        self.build_request(ctx)
        return True

    def build_request(self, ctx: Context) -> ApiRequest:
        config = ctx.get(CONFIG_KEY)
        if not isinstance(config, dict) or not config.get("url"):
            raise ConfigurationError(f"{CONFIG_KEY!r} must be a mapping with a 'url'")

        body = config.get("body")
        if isinstance(body, str):
            body = ctx.format_template(body)
        headers = config.get("headers") or {}
        if not isinstance(headers, dict):
            raise ConfigurationError("'headers' must be a mapping")

        try:
            timeout = float(config.get("timeout", DEFAULT_TIMEOUT))
            raw_retries = config.get("retry_count", 0)
            if isinstance(raw_retries, float) and not raw_retries.is_integer():
                raise ValueError(f"retry_count must be a whole number, got {raw_retries}")
            retry_count = int(raw_retries)
        except (TypeError, ValueError) as e:
            raise ConfigurationError(f"Invalid timeout or retry_count in {CONFIG_KEY!r}: {e}") from e

        return ApiRequest(
            url=ctx.format_template(str(config["url"])),
            method=str(config.get("method", "GET")),
            headers={str(k): str(v) for k, v in headers.items()},
            body=body,
            timeout=timeout,
            retry_count=retry_count,
        )

    async def attempt(self, ctx: Context) -> AgentResult:
        request = self.build_request(ctx)
        response = await self.client.call(request)

        if not response.success:
            raise TransportFailure(response.error or "transport failure")
        if not response.ok:
            raise UnitFailure(f"HTTP {response.status_code}: {_preview(response.body)}")

        logger.info("API call to %s returned %d", request.url, response.status_code)
        return AgentResult.ok(
            self.agent_id,
            {"request": request.describe(), "response": response.to_dict()},
        )


def _preview(body: Any, limit: int = 200) -> str:
    text = str(body)
    return text if len(text) <= limit else text[:limit] + "..."
