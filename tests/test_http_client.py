"""Tests for ApiClient and the request/response models."""

import json
from datetime import datetime

import httpx
import pytest

from agentflow.errors import ConfigurationError
from agentflow.http import ApiClient, ApiRequest, ApiResponse


def always_refused(calls: list):
    def handler(request: httpx.Request) -> httpx.Response:
        calls.append(request)
        raise httpx.ConnectError("connection refused", request=request)
    return handler


def client_for(handler) -> ApiClient:
    return ApiClient(backoff=0, transport=httpx.MockTransport(handler))


class TestApiRequest:
    def test_method_uppercased(self):
        assert ApiRequest("http://x", "post").method == "POST"

    @pytest.mark.parametrize("method", ["PATCH", "HEAD", "bogus"])
    def test_unsupported_method(self, method):
        with pytest.raises(ConfigurationError, match="Unsupported HTTP method"):
            ApiRequest("http://x", method)

    def test_negative_retry_count(self):
        with pytest.raises(ConfigurationError):
            ApiRequest("http://x", retry_count=-1)

    def test_non_positive_timeout(self):
        with pytest.raises(ConfigurationError):
            ApiRequest("http://x", timeout=0)

    def test_post_sets_json_header(self):
        req = ApiRequest.post("http://x", {"a": 1}, headers={"X-Trace": "t"})
        assert req.method == "POST"
        assert req.headers == {"Content-Type": "application/json", "X-Trace": "t"}
        assert req.body == {"a": 1}

    def test_delete_has_no_body(self):
        req = ApiRequest.delete("http://x/1")
        assert req.method == "DELETE"
        assert req.body is None


class TestApiResponse:
    def test_ok_only_for_2xx(self):
        assert ApiResponse.received(204, "").ok
        assert not ApiResponse.received(500, "").ok
        assert not ApiResponse.failure("down").ok

    def test_failure_shape(self):
        r = ApiResponse.failure("down")
        assert r.status_code == 0
        assert not r.success
        assert r.error == "down"


class TestApiClient:
    @pytest.mark.asyncio
    async def test_get_json(self):
        def handler(request):
            assert request.method == "GET"
            return httpx.Response(200, json={"id": 1})

        response = await client_for(handler).call(ApiRequest.get("http://api.test/posts/1"))
        assert response.success
        assert response.ok
        assert response.body == {"id": 1}
        assert response.attempts == 1

    @pytest.mark.asyncio
    async def test_text_body(self):
        response = await client_for(lambda r: httpx.Response(200, text="plain")).call(
            ApiRequest.get("http://api.test/")
        )
        assert response.body == "plain"

    @pytest.mark.asyncio
    async def test_post_sends_json_body(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["content_type"] = request.headers["content-type"]
            return httpx.Response(201, json={"id": 101})

        response = await client_for(handler).call(
            ApiRequest.post("http://api.test/posts", {"title": "t"})
        )
        assert response.status_code == 201
        assert seen == {"body": {"title": "t"}, "content_type": "application/json"}

    @pytest.mark.asyncio
    async def test_unencodable_json_values_sent_as_text(self):
        seen = {}

        def handler(request):
            seen["body"] = json.loads(request.content)
            seen["content_type"] = request.headers["content-type"]
            return httpx.Response(200)

        body = {"at": datetime(2024, 1, 1), "tags": {"a"}}
        response = await client_for(handler).call(ApiRequest("http://api.test/", "POST", body=body))
        assert response.success
        assert seen["body"] == {"at": "2024-01-01 00:00:00", "tags": "{'a'}"}
        assert seen["content_type"] == "application/json"

    @pytest.mark.asyncio
    async def test_unencodable_header_fails_without_sending(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(200)

        request = ApiRequest.get("http://api.test/", headers={"X-Name": "café"}, retry_count=2)
        response = await client_for(handler).call(request)
        assert not response.success
        assert response.status_code == 0
        assert response.attempts == 0
        assert response.error.startswith("Invalid request: UnicodeEncodeError")
        assert calls == []

    @pytest.mark.asyncio
    async def test_string_body_sent_verbatim(self):
        seen = {}

        def handler(request):
            seen["body"] = request.content
            return httpx.Response(200)

        await client_for(handler).call(ApiRequest("http://api.test/", "PUT", body="raw"))
        assert seen["body"] == b"raw"

    @pytest.mark.asyncio
    async def test_server_error_is_still_a_response(self):
        calls = []

        def handler(request):
            calls.append(request)
            return httpx.Response(500, text="oops")

        response = await client_for(handler).call(ApiRequest.get("http://api.test/", retry_count=3))
        assert response.success
        assert not response.ok
        assert response.status_code == 500
        assert len(calls) == 1

    @pytest.mark.asyncio
    async def test_retries_until_budget_spent(self):
        calls = []
        response = await client_for(always_refused(calls)).call(
            ApiRequest.get("http://api.test/", retry_count=2)
        )
        assert len(calls) == 3
        assert not response.success
        assert response.status_code == 0
        assert response.attempts == 3
        assert "after 3 attempt(s)" in response.error
        assert "ConnectError" in response.error

    @pytest.mark.asyncio
    async def test_no_retry_by_default(self):
        calls = []
        response = await client_for(always_refused(calls)).call(ApiRequest.get("http://api.test/"))
        assert len(calls) == 1
        assert not response.success

    @pytest.mark.asyncio
    async def test_recovers_on_later_attempt(self):
        calls = []

        def handler(request):
            calls.append(request)
            if len(calls) < 2:
                raise httpx.ConnectError("refused", request=request)
            return httpx.Response(200, json={"ok": True})

        response = await client_for(handler).call(ApiRequest.get("http://api.test/", retry_count=2))
        assert response.success
        assert response.attempts == 2

    @pytest.mark.asyncio
    async def test_backoff_grows_linearly(self, monkeypatch):
        delays = []

        async def fake_sleep(seconds):
            delays.append(seconds)

        monkeypatch.setattr("agentflow.http.client.asyncio.sleep", fake_sleep)
        client = ApiClient(backoff=0.5, transport=httpx.MockTransport(always_refused([])))
        await client.call(ApiRequest.get("http://api.test/", retry_count=3))
        assert delays == [1.0, 1.5, 2.0]
