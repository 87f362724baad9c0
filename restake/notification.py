import logging
from typing import Any

import requests

from configuration.types import Notification, NotificationTelegram

LOGGER = logging.getLogger(__name__)

TELEGRAM_API = "https://api.telegram.org"


def notify(
    url: str, method: str, data: dict[str, Any], timeout: float = 10
) -> requests.Response | None:
    # delivery is best effort, failures are only logged
    try:
        return requests.request(url=url, method=method, data=data, timeout=timeout)
    except requests.RequestException as e:
        LOGGER.warning(f"notification to {url.split('/bot')[0]} failed: {e}")
        return None


def notify_telegram(config: NotificationTelegram | None, message: str) -> None:
    if config is None:
        return

    notify(
        f"{TELEGRAM_API}/bot{config.bot_token}/sendMessage",
        "POST",
        data={"text": message, "chat_id": config.chat_id, "parse_mode": "html"},
    )


def send_report(notification: Notification, message: str) -> None:
    LOGGER.info(message)
    notify_telegram(notification.telegram, message)
