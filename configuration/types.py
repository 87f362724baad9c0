from attrs import field, frozen


@frozen
class NotificationTelegram:
    bot_token: str
    chat_id: str


@frozen
class Notification:
    telegram: NotificationTelegram | None = None


@frozen
class RestakeConfiguration:
    notification: Notification
    balance_alert: int = 0
    eth_chains: list[str] = field(factory=list)
    source: str = "npm"
    restake_dir: str = "restake"


@frozen
class RetryPolicy:
    max_attempts: int = 3
    delay_s: float = 2
    timeout_s: float = 10


@frozen
class RangeConfiguration:
    target_hours: int = 24
    min_range: int = 1000
    max_range: int = 50000
    sample_size: int = 200


@frozen
class EstimatorConfiguration:
    rpc_urls: list[str]
    upgrade_height: int
    range: RangeConfiguration = field(factory=RangeConfiguration)
    retry: RetryPolicy = field(factory=RetryPolicy)
    probe_timeout_s: float = 5
