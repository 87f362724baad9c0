import json
from datetime import datetime, timedelta, timezone

import pytest
import requests

from configuration.types import RestakeConfiguration, Notification, RetryPolicy

BASE_TIME = datetime(2025, 7, 1, 12, 0, 0, tzinfo=timezone.utc)


def block_time(seconds: float) -> str:
    t = BASE_TIME + timedelta(seconds=seconds)
    return t.strftime("%Y-%m-%dT%H:%M:%S.%f") + "123Z"


def block_payload(height, time) -> dict:
    return {
        "jsonrpc": "2.0",
        "id": -1,
        "result": {
            "block_id": {"hash": "AB"},
            "block": {"header": {"chain_id": "atomone-1", "height": height, "time": time}},
        },
    }


def status_payload(network: str) -> dict:
    return {"result": {"node_info": {"network": network}, "sync_info": {}}}


class FakeResponse:
    def __init__(self, body, status_code=200):
        self.body = body
        self.status_code = status_code

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} error")

    def json(self):
        if isinstance(self.body, str):
            return json.loads(self.body)
        return self.body


class FakeSession:
    """Serves canned responses per url; lists are consumed one per call."""

    def __init__(self, routes=None):
        self.routes = routes or {}
        self.calls = []

    def get(self, url, timeout=None):
        self.calls.append((url, timeout))

        if url not in self.routes:
            raise requests.ConnectionError(f"connection refused: {url}")

        route = self.routes[url]
        if isinstance(route, list):
            route = route.pop(0) if len(route) > 1 else route[0]

        if isinstance(route, Exception):
            raise route
        if isinstance(route, FakeResponse):
            return route
        return FakeResponse(route)


@pytest.fixture
def no_retry_delay():
    return RetryPolicy(max_attempts=3, delay_s=0, timeout_s=1)


@pytest.fixture
def sleeps():
    return []


@pytest.fixture
def restake_config():
    return RestakeConfiguration(
        notification=Notification(),
        balance_alert=1,
        eth_chains=["Dymension", "Fetch.ai"],
    )
