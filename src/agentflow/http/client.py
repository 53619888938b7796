"""httpx-based HTTP caller with bounded, linearly backed-off retries."""

import asyncio
import json
import logging
import time
from typing import Any

import httpx

from agentflow.http.models import ApiRequest, ApiResponse

logger = logging.getLogger(__name__)

DEFAULT_BACKOFF = 1.0


class ApiClient:
    """Perform an ``ApiRequest`` with up to ``1 + request.retry_count`` attempts.

    Before attempt ``n`` (n >= 2) the client waits ``backoff * n`` seconds.
    Any response that arrives counts as success, whatever its status code.
    Transport errors are retried; once the budget is spent the last error is
    returned in a failure ``ApiResponse``. A request that cannot be built
    (bad URL, header values httpx cannot encode) is never sent and fails
    with ``attempts == 0``. ``call`` never raises.

    ``transport`` is handed to ``httpx.AsyncClient`` (tests pass an
    ``httpx.MockTransport``).
    """

    def __init__(
        self,
        *,
        backoff: float = DEFAULT_BACKOFF,
        transport: httpx.AsyncBaseTransport | None = None,
    ) -> None:
        self.backoff = backoff
        self.transport = transport

    async def call(self, request: ApiRequest) -> ApiResponse:
        start = time.monotonic()
        max_attempts = request.retry_count + 1
        last_error = "unknown error"
        logger.info("Calling %s %s", request.method, request.url)

        async with httpx.AsyncClient(transport=self.transport, timeout=request.timeout) as client:
            try:
                outgoing = _build(client, request)
            except (httpx.InvalidURL, TypeError, ValueError) as e:
                logger.warning("Could not build request to %s: %s", request.url, e)
                failure = ApiResponse.failure(f"Invalid request: {type(e).__name__}: {e}")
                failure.attempts = 0
                return failure

            for attempt in range(1, max_attempts + 1):
                if attempt > 1:
                    logger.info("Retry %d/%d: %s", attempt, max_attempts, request.url)
                    await asyncio.sleep(self.backoff * attempt)
                try:
                    response = await client.send(outgoing)
                except httpx.HTTPError as e:
                    last_error = f"{type(e).__name__}: {e}" if str(e) else type(e).__name__
                    logger.warning("Attempt %d/%d failed: %s", attempt, max_attempts, last_error)
                    continue

                result = ApiResponse.received(
                    response.status_code, _decode(response), dict(response.headers)
                )
                result.attempts = attempt
                result.elapsed_ms = round((time.monotonic() - start) * 1000, 1)
                logger.info(
                    "Called %s - status %d in %.0fms",
                    request.url, result.status_code, result.elapsed_ms,
                )
                return result

        failure = ApiResponse.failure(
            f"Request failed after {max_attempts} attempt(s): {last_error}"
        )
        failure.attempts = max_attempts
        failure.elapsed_ms = round((time.monotonic() - start) * 1000, 1)
        return failure


def _build(client: httpx.AsyncClient, request: ApiRequest) -> httpx.Request:
    headers = dict(request.headers)
    content: str | bytes | None = None
    if request.body is not None and request.method in ("POST", "PUT"):
        if isinstance(request.body, (str, bytes)):
            content = request.body
        else:
            # Values JSON cannot encode are sent as their str() form.
            content = json.dumps(request.body, default=str)
            if not any(k.lower() == "content-type" for k in headers):
                headers["Content-Type"] = "application/json"
    return client.build_request(request.method, request.url, headers=headers, content=content)


def _decode(response: httpx.Response) -> Any:
    if "json" in response.headers.get("content-type", ""):
        try:
            return response.json()
        except ValueError:
            pass
    return response.text
