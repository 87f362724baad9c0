import logging
import time
from collections.abc import Callable
from typing import Any

import requests
from attrs import define, field

from configuration.types import RetryPolicy

from .errors import FetchExhausted
from .types import BlockHeader, network_from_status

LOGGER = logging.getLogger(__name__)


def fetch_json(
    session: requests.Session,
    url: str,
    policy: RetryPolicy,
    sleep: Callable[[float], None] = time.sleep,
) -> Any:
    for attempt in range(1, policy.max_attempts + 1):
        try:
            response = session.get(url, timeout=policy.timeout_s)
            response.raise_for_status()
            return response.json()
        except (requests.RequestException, ValueError) as e:
            LOGGER.warning(f"Retry {attempt}/{policy.max_attempts} for {url}: {e}")

        if attempt < policy.max_attempts:
            sleep(policy.delay_s)

    LOGGER.error(
        f"Failed to fetch data from {url} after {policy.max_attempts} retries"
    )
    raise FetchExhausted(url, policy.max_attempts)


@define
class RpcClient:
    url: str
    session: requests.Session = field(factory=requests.Session)
    retry: RetryPolicy = field(factory=RetryPolicy)
    sleep: Callable[[float], None] = time.sleep

    def get(self, path: str) -> Any:
        return fetch_json(self.session, f"{self.url}{path}", self.retry, self.sleep)

    def get_block(self, height: int | None = None) -> BlockHeader:
        if height is None:
            return BlockHeader.from_response(self.get("/block"))
        return BlockHeader.from_response(self.get(f"/block?height={height}"))

    def get_network(self) -> str:
        return network_from_status(self.get("/status"))
