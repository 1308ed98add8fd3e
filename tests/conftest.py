"""Pytest fixtures for the Payconiq client tests."""

import json

import httpx
import pytest

from payconiq import PaymentClient


class FakePayconiq:
    """Records every request and answers from a queue of canned responses."""

    def __init__(self):
        self.requests = []
        self._responses = []

    def reply(self, body=None, status_code=200, content=None):
        if content is None:
            content = json.dumps(body if body is not None else {}).encode("utf-8")
        self._responses.append(httpx.Response(status_code, content=content))
        return self

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self._responses:
            raise AssertionError(f"Unexpected request: {request.method} {request.url}")
        return self._responses.pop(0)

    def body(self, index=-1):
        return json.loads(self.requests[index].content)


@pytest.fixture
def fake():
    return FakePayconiq()


@pytest.fixture
def payconiq(fake):
    return PaymentClient("test-api-key", PaymentClient.ENVIRONMENT_EXT, transport=httpx.MockTransport(fake.handler))
