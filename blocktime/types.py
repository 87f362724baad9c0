import re
from datetime import datetime
from typing import Any, Self

from attrs import frozen

from .errors import MalformedResponse, TimestampParseFailure

# cometbft reports nanoseconds, datetime keeps at most microseconds
_FRACTION = re.compile(r"\.(\d+)")


def parse_block_time(value: str) -> datetime:
    s = value.strip()
    if s.endswith(("Z", "z")):
        s = s[:-1] + "+00:00"
    s = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), s, count=1)

    try:
        t = datetime.fromisoformat(s)
    except ValueError as e:
        raise TimestampParseFailure(f"unable to parse block time {value!r}") from e

    if t.tzinfo is None:
        raise TimestampParseFailure(f"block time {value!r} has no timezone")

    return t


def _require(data: Any, *path: str) -> Any:
    node = data
    for key in path:
        if not isinstance(node, dict) or node.get(key) is None:
            raise MalformedResponse(f"missing field {'.'.join(path)}")
        node = node[key]
    return node


@frozen
class BlockHeader:
    height: int
    time: datetime

    @classmethod
    def from_response(cls, data: dict[str, Any]) -> Self:
        height = _require(data, "result", "block", "header", "height")
        time = _require(data, "result", "block", "header", "time")

        try:
            height = int(height)
        except (TypeError, ValueError) as e:
            raise MalformedResponse(f"invalid block height {height!r}") from e

        if height < 0:
            raise MalformedResponse(f"invalid block height {height}")

        if not isinstance(time, str):
            raise MalformedResponse(f"invalid block time {time!r}")

        return cls(height=height, time=parse_block_time(time))


def network_from_status(data: dict[str, Any]) -> str:
    return str(_require(data, "result", "node_info", "network"))


@frozen
class SampleWindow:
    start_height: int
    end_height: int

    @classmethod
    def ending_at(cls, end_height: int, size: int) -> Self:
        # young chains do not have enough history, never go below genesis
        return cls(start_height=max(end_height - size, 1), end_height=end_height)

    @property
    def size(self) -> int:
        return self.end_height - self.start_height


def average_block_seconds(start: BlockHeader, end: BlockHeader) -> float:
    assert end.height > start.height
    return (end.time - start.time).total_seconds() / (end.height - start.height)


@frozen
class EtaResult:
    window: SampleWindow
    average_block_seconds: float
    upgrade_height: int
    blocks_remaining: int
    seconds_remaining: float
    projected_time: datetime | None

    @property
    def passed(self) -> bool:
        return self.blocks_remaining < 0
