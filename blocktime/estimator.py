import logging
from collections.abc import Callable
from datetime import datetime, timedelta, timezone

import requests

from configuration.types import EstimatorConfiguration

from .dynamic_range import calculate_dynamic_range
from .endpoint import select_endpoint
from .errors import InsufficientHistory, RpcError
from .rpc import RpcClient
from .types import EtaResult, SampleWindow, average_block_seconds

LOGGER = logging.getLogger(__name__)

SEPARATOR = "-" * 40


def estimate(
    client: RpcClient,
    range_size: int,
    upgrade_height: int,
    now: datetime | None = None,
) -> EtaResult:
    current = client.get_block()

    window = SampleWindow.ending_at(current.height, range_size)
    if window.size <= 0:
        raise InsufficientHistory(
            f"chain at height {current.height} has no blocks to measure"
        )

    start = client.get_block(window.start_height)
    if start.height >= current.height:
        raise InsufficientHistory(
            f"start block {start.height} is not below current block {current.height}"
        )
    window = SampleWindow(start_height=start.height, end_height=current.height)

    avg = average_block_seconds(start, current)
    blocks_remaining = upgrade_height - current.height
    seconds_remaining = blocks_remaining * avg

    if now is None:
        now = datetime.now(timezone.utc)

    try:
        projected_time = now + timedelta(seconds=seconds_remaining)
    except OverflowError:
        LOGGER.warning(f"projected time for height {upgrade_height} is out of range")
        projected_time = None

    return EtaResult(
        window=window,
        average_block_seconds=avg,
        upgrade_height=upgrade_height,
        blocks_remaining=blocks_remaining,
        seconds_remaining=seconds_remaining,
        projected_time=projected_time,
    )


def format_duration(seconds: float) -> str:
    total = round(abs(seconds))
    days, rest = divmod(total, 86400)
    hours, rest = divmod(rest, 3600)
    minutes, secs = divmod(rest, 60)
    return f"{days} days {hours:02d} hours {minutes:02d} minutes {secs:02d} seconds"


def format_projected_time(t: datetime | None) -> str:
    if t is None:
        return "beyond year 9999"
    return t.astimezone().strftime("%d %b %Y %H:%M:%S")


def render(result: EtaResult) -> list[str]:
    w = result.window
    lines = [
        (
            f"Average block time for {w.size} blocks range "
            f"({w.start_height} - {w.end_height}) is "
            f"{result.average_block_seconds:.3f}sec"
        ),
    ]

    if result.passed:
        lines.append(
            f"Upgrade height {result.upgrade_height} was passed "
            f"{-result.blocks_remaining} blocks ago, approximately:"
        )
        lines.append(f"{format_duration(result.seconds_remaining)} ago")
        lines.append("Estimated upgrade block time was:")
    else:
        lines.append(
            f"Estimated time to upgrade at {result.upgrade_height} "
            f"(based on {w.size} blocks) is:"
        )
        lines.append(format_duration(result.seconds_remaining))
        lines.append("Estimated upgrade block time is:")

    lines.append(format_projected_time(result.projected_time))
    return lines


def run(
    config: EstimatorConfiguration,
    session: requests.Session | None = None,
    output: Callable[[str], None] = print,
) -> EtaResult:
    if session is None:
        session = requests.Session()

    rpc_url = select_endpoint(session, config.rpc_urls, config.probe_timeout_s)
    output(f"Using RPC: {rpc_url}")
    output(SEPARATOR)

    client = RpcClient(rpc_url, session=session, retry=config.retry)

    range_size = calculate_dynamic_range(client, config.range)
    output(f"Dynamic RANGE set to: {range_size} blocks")
    output(SEPARATOR)

    result = estimate(client, range_size, config.upgrade_height)
    for line in render(result):
        output(line)

    try:
        output(f"Network: {client.get_network()}")
    except RpcError as e:
        LOGGER.warning(f"unable to fetch network info: {e}")
        output("Network: Unable to fetch")

    output(SEPARATOR)
    output(f"Endpoint used: {rpc_url}")

    return result
