import logging
import sys

import dotenv

from configuration.config import ConfigurationError, config_path, get_restake_config
from restake.monitor import run

LOGGER = logging.getLogger()
logging.basicConfig(
    format="%(asctime)s\t%(levelname)s\t%(name)s\t%(message)s",
    level="INFO",
)


def main() -> int:
    dotenv.load_dotenv()

    try:
        config = get_restake_config(config_path(__file__))
    except ConfigurationError as e:
        LOGGER.error(f"invalid configuration - {e}")
        return 1

    try:
        run(config)
    except Exception as e:
        LOGGER.exception(e)
        return 1

    return 0


if __name__ == "__main__":
    sys.exit(main())
