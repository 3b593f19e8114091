"""Shared test fixtures for frontgen."""

import json

import httpx
import pytest

from frontgen.app import FrontendGenerator
from frontgen.client import CompletionClient
from frontgen.config import Config
from frontgen.session_store import SessionStore
from frontgen.storage import MemoryStore


class FakeCompletionAPI:
    """Scripted stand-in for the remote chat-completion endpoint.

    Queue responses with ``reply``/``fail``/``raw``; every request is
    recorded with its decoded JSON body.
    """

    def __init__(self):
        self.responses: list = []
        self.requests: list[httpx.Request] = []

    def reply(self, content):
        self.responses.append(httpx.Response(200, json={"choices": [{"message": {"role": "assistant", "content": content}}]}))

    def fail(self, status: int, body: str):
        self.responses.append(httpx.Response(status, text=body))

    def raw(self, response):
        self.responses.append(response)

    def bodies(self) -> list[dict]:
        return [json.loads(r.content) for r in self.requests]

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError("Unexpected request to completion API")
        response = self.responses.pop(0)
        if isinstance(response, Exception):
            raise response
        return response


@pytest.fixture
def fake_api():
    return FakeCompletionAPI()


@pytest.fixture
def http_client(fake_api):
    return httpx.AsyncClient(transport=httpx.MockTransport(fake_api.handler))


@pytest.fixture
def config():
    return Config(
        api_key="sk-test",
        model="test/model",
        base_url="https://api.test/v1",
        title="AI Frontend Generator",
        referer="http://localhost:8080/",
    )


@pytest.fixture
def storage():
    return MemoryStore()


@pytest.fixture
def store(storage):
    return SessionStore(storage)


@pytest.fixture
def client(config, http_client):
    return CompletionClient(config, http_client)


@pytest.fixture
def generator(store, client):
    gen = FrontendGenerator(store, client)
    gen.boot()
    return gen
