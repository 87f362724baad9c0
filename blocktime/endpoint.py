import logging
from collections.abc import Sequence

import requests

from .errors import NoEndpointAvailable

LOGGER = logging.getLogger(__name__)


def is_alive(session: requests.Session, endpoint: str, timeout: float) -> bool:
    # any http answer counts, the status code is checked by the real fetches
    try:
        session.get(f"{endpoint}/block", timeout=timeout)
    except requests.RequestException as e:
        LOGGER.debug(f"endpoint {endpoint} not reachable: {e}")
        return False
    return True


def select_endpoint(
    session: requests.Session, candidates: Sequence[str], timeout: float = 5
) -> str:
    for i, endpoint in enumerate(candidates):
        if i == 1:
            LOGGER.info("Primary RPC not available, trying fallbacks...")
        if i > 0:
            LOGGER.info(f"Testing {endpoint}...")

        if is_alive(session, endpoint, timeout):
            if i > 0:
                LOGGER.info(f"Using fallback RPC: {endpoint}")
            return endpoint

    LOGGER.error("No available RPC endpoint found!")
    raise NoEndpointAvailable(list(candidates))
