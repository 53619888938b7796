"""Anthropic SDK-based summary of upstream agent results."""

import json
from typing import Any

import anthropic

SUMMARY_PROMPT = """You are reviewing the outcome of an automated workflow run.

## Upstream results
{results}

Write a short paragraph (at most five sentences) summarising the state of the
run and suggesting one follow-up. Plain text, no headings."""


class ClaudeSummarizer:
    """Summarise source payloads through the Anthropic Messages API.

    Uses ``AsyncAnthropic`` with lazy client initialization. Pass ``client``
    to supply a preconfigured (or fake) client.
    """

    def __init__(
        self,
        *,
        model: str = "claude-sonnet-4-5-20250929",
        max_tokens: int = 512,
        client: anthropic.AsyncAnthropic | None = None,
    ) -> None:
        self.model = model
        self.max_tokens = max_tokens
        self._client = client

    def _get_client(self) -> anthropic.AsyncAnthropic:
        if self._client is None:
            self._client = anthropic.AsyncAnthropic()
        return self._client

    async def summarize(self, sources: dict[str, Any]) -> str:
        prompt = SUMMARY_PROMPT.format(results=json.dumps(sources, indent=2, default=str))
        response = await self._get_client().messages.create(
            model=self.model,
            max_tokens=self.max_tokens,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.content[0].text if response.content else ""
