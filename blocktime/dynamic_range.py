import logging

from configuration.types import RangeConfiguration

from .errors import RpcError
from .rpc import RpcClient
from .types import SampleWindow, average_block_seconds

LOGGER = logging.getLogger(__name__)


def clamp_range(target_blocks: int, config: RangeConfiguration) -> int:
    if target_blocks < config.min_range:
        LOGGER.info(f"Using minimum range: {config.min_range}")
        return config.min_range
    if target_blocks > config.max_range:
        LOGGER.info(f"Using maximum range: {config.max_range}")
        return config.max_range

    LOGGER.info(f"Using calculated range: {target_blocks}")
    return target_blocks


def range_for_block_time(sample_avg: float, config: RangeConfiguration) -> int:
    target_blocks = int(config.target_hours * 3600 / sample_avg)
    return clamp_range(target_blocks, config)


def calculate_dynamic_range(client: RpcClient, config: RangeConfiguration) -> int:
    # any failure falls back to config.min_range
    LOGGER.info(f"Calculating dynamic RANGE for last {config.target_hours} hours...")

    try:
        current = client.get_block()
        window = SampleWindow.ending_at(current.height, config.sample_size)
        if window.size <= 0:
            LOGGER.warning(f"chain at height {current.height} is too young to sample")
            return config.min_range

        sample = client.get_block(window.start_height)
    except RpcError as e:
        LOGGER.warning(f"Failed to sample block time, using minimum range: {e}")
        return config.min_range

    if sample.height >= current.height:
        LOGGER.warning(
            f"sample block {sample.height} is not below {current.height}, "
            "using minimum range"
        )
        return config.min_range

    sample_avg = average_block_seconds(sample, current)
    LOGGER.info(f"Estimated avg block time from sample: {sample_avg:.3f}sec")

    if sample_avg <= 0:
        LOGGER.warning("non-increasing block times in sample, using minimum range")
        return config.min_range

    return range_for_block_time(sample_avg, config)
