"""Shared fixtures: a fake shop behind httpx.MockTransport and a controllable clock."""

from __future__ import annotations

import json

import httpx
import pytest

from shopware_client.infra.client.shopware_client import ShopwareClient

BASE_URL = "https://test-shop.example.com"
CLIENT_ID = "test_client_id"
CLIENT_SECRET = "test_client_secret"
T0 = 1_700_000_000.0


class FakeClock:
    def __init__(self, now: float = T0) -> None:
        self.now = now

    def __call__(self) -> float:
        return self.now

    def advance(self, seconds: float) -> None:
        self.now += seconds


class MockShop:
    """Answers requests from a queue and keeps every request it saw."""

    def __init__(self) -> None:
        self.responses: list[httpx.Response | Exception] = []
        self.requests: list[httpx.Request] = []

    def queue(self, *responses: httpx.Response | Exception) -> None:
        self.responses.extend(responses)

    def handler(self, request: httpx.Request) -> httpx.Response:
        self.requests.append(request)
        if not self.responses:
            raise AssertionError(f"unexpected request: {request.method} {request.url}")
        item = self.responses.pop(0)
        if isinstance(item, Exception):
            raise item
        return item

    def body(self, index: int) -> dict:
        return json.loads(self.requests[index].content)

    @property
    def paths(self) -> list[str]:
        return [f"{r.method} {r.url.path}" for r in self.requests]


def token_response(access: str = "A", refresh: str = "R", expires_in: int = 600) -> httpx.Response:
    return httpx.Response(
        200,
        json={"access_token": access, "refresh_token": refresh, "expires_in": expires_in},
    )


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def shop() -> MockShop:
    return MockShop()


@pytest.fixture
def client(shop, clock):
    http = httpx.Client(transport=httpx.MockTransport(shop.handler))
    with ShopwareClient(BASE_URL, CLIENT_ID, CLIENT_SECRET, http_client=http, clock=clock) as c:
        yield c
    http.close()


@pytest.fixture
def authed(client, shop):
    """Client that already holds tokens A/R expiring at T0 + 600."""
    shop.queue(token_response())
    client.authenticate()
    shop.requests.clear()
    return client
