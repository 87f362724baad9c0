import logging
import sys

import dotenv

from blocktime.errors import InsufficientHistory, NoEndpointAvailable, RpcError
from blocktime.estimator import run
from configuration.config import (
    ConfigurationError,
    config_path,
    get_estimator_config,
)

LOGGER = logging.getLogger()
logging.basicConfig(
    format="%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s",
    level="INFO",
)


def main() -> int:
    dotenv.load_dotenv()

    try:
        config = get_estimator_config(config_path(__file__))
    except ConfigurationError as e:
        LOGGER.error(f"invalid configuration - {e}")
        return 1

    try:
        run(config)
    except NoEndpointAvailable as e:
        LOGGER.error(f"Error: {e}")
        return 1
    except (RpcError, InsufficientHistory) as e:
        LOGGER.error(f"Failed to get block data - {e}")
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
