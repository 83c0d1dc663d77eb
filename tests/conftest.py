"""Shared fixtures: an Azure DevOps connection backed by a scripted transport."""
import json

import httpx
import pytest

from azdo_mcp.config import AdoSettings
from azdo_mcp.connection import AdoConnection


class FakeAzureDevOps:
    """Scripted stand-in for the REST API.

    Routes are matched on (method, path suffix); every request is recorded.
    A route body may be a callable taking the request.
    Unrouted requests answer 404 with an Azure DevOps style error body.
    """

    def __init__(self):
        self.routes = {}
        self.requests = []

    def add(self, method, path, body=None, status_code=200):
        self.routes[(method, path)] = (status_code, body)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        for (method, path), (status_code, body) in self.routes.items():
            if request.method == method and request.url.path.endswith(path):
                if callable(body):
                    body = body(request)
                if isinstance(body, str):
                    return httpx.Response(status_code, text=body)
                return httpx.Response(status_code, json=body)
        return httpx.Response(404, json={"message": f"No route for {request.url.path}"})

    def json_body(self, index=-1):
        return json.loads(self.requests[index].content)


@pytest.fixture
def settings():
    return AdoSettings(org_url="https://dev.azure.com/contoso/", pat="secret-pat")


@pytest.fixture
def ado():
    return FakeAzureDevOps()


@pytest.fixture
def connection(settings, ado):
    return AdoConnection(settings, transport=httpx.MockTransport(ado.handler))


@pytest.fixture
def connection_factory(settings, ado):
    def factory():
        return AdoConnection(settings, transport=httpx.MockTransport(ado.handler))
    return factory
