"""Mock HTTP transport shared by the client tests."""

from __future__ import annotations

import httpx
import pytest


class MockTransport(httpx.AsyncBaseTransport):
    """Records requests and returns canned responses keyed by "METHOD /path"."""

    def __init__(self):
        self.requests: list[httpx.Request] = []
        self.responses: dict[str, tuple[int, object]] = {}
        self.errors: dict[str, Exception] = {}

    def set_response(self, method: str, path: str, status: int, body: object):
        self.responses[f"{method.upper()} {path}"] = (status, body)

    def set_error(self, method: str, path: str, error: Exception):
        self.errors[f"{method.upper()} {path}"] = error

    async def handle_async_request(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        key = f"{request.method} {request.url.path}"

        if key in self.errors:
            raise self.errors[key]

        if key in self.responses:
            status, body = self.responses[key]
            if isinstance(body, str):
                return httpx.Response(status_code=status, text=body, request=request)
            return httpx.Response(status_code=status, json=body, request=request)

        # Default: 404
        return httpx.Response(status_code=404, text="model not found", request=request)


@pytest.fixture
def mock_transport():
    return MockTransport()
