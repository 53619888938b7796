"""Retrying HTTP client used by networked agents."""

from agentflow.http.client import ApiClient
from agentflow.http.models import ApiRequest, ApiResponse

__all__ = ["ApiClient", "ApiRequest", "ApiResponse"]
