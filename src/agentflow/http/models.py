"""ApiRequest and ApiResponse dataclasses for the retrying HTTP client."""

from dataclasses import dataclass, field
from datetime import UTC, datetime
from typing import Any, Self

from agentflow.errors import ConfigurationError

SUPPORTED_METHODS = ("GET", "POST", "PUT", "DELETE")
DEFAULT_TIMEOUT = 30.0

_JSON_HEADERS = {"Content-Type": "application/json"}


@dataclass
class ApiRequest:
    url: str
    method: str = "GET"
    headers: dict[str, str] = field(default_factory=dict)
    body: Any = None
    timeout: float = DEFAULT_TIMEOUT
    retry_count: int = 0

    def __post_init__(self) -> None:
        self.method = self.method.upper()
        if self.method not in SUPPORTED_METHODS:
            raise ConfigurationError(f"Unsupported HTTP method: {self.method!r}")
        if self.retry_count < 0:
            raise ConfigurationError("retry_count must be >= 0")
        if self.timeout <= 0:
            raise ConfigurationError("timeout must be > 0")

    @classmethod
    def get(cls, url: str, **kwargs: Any) -> Self:
        return cls(url, "GET", **kwargs)

    @classmethod
    def post(cls, url: str, body: Any = None, **kwargs: Any) -> Self:
        headers = {**_JSON_HEADERS, **kwargs.pop("headers", {})}
        return cls(url, "POST", headers=headers, body=body, **kwargs)

    @classmethod
    def put(cls, url: str, body: Any = None, **kwargs: Any) -> Self:
        headers = {**_JSON_HEADERS, **kwargs.pop("headers", {})}
        return cls(url, "PUT", headers=headers, body=body, **kwargs)

    @classmethod
    def delete(cls, url: str, **kwargs: Any) -> Self:
        return cls(url, "DELETE", **kwargs)

    def describe(self) -> dict[str, Any]:
        return {"url": self.url, "method": self.method, "headers": dict(self.headers)}


@dataclass
class ApiResponse:
    """Outcome of one ``ApiClient.call``.

    ``success`` means a response arrived at all. Whether its status code is
    acceptable is for the caller to decide; ``ok`` covers the usual 2xx check.
    Transport failures carry ``status_code == 0`` and an ``error``.
    """

    status_code: int
    success: bool
    body: Any = None
    headers: dict[str, str] = field(default_factory=dict)
    error: str | None = None
    attempts: int = 1
    elapsed_ms: float = 0.0
    received_at: datetime = field(default_factory=lambda: datetime.now(UTC))

    @classmethod
    def received(cls, status_code: int, body: Any, headers: dict[str, str] | None = None) -> Self:
        return cls(status_code=status_code, success=True, body=body, headers=headers or {})

    @classmethod
    def failure(cls, error: str) -> Self:
        return cls(status_code=0, success=False, error=error)

    @property
    def ok(self) -> bool:
        return self.success and 200 <= self.status_code < 300

    def to_dict(self) -> dict[str, Any]:
        return {
            "status_code": self.status_code,
            "success": self.success,
            "body": self.body,
            "error": self.error,
            "attempts": self.attempts,
            "elapsed_ms": self.elapsed_ms,
        }
