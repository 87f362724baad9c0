import os
from pathlib import Path

from dotenv import dotenv_values

from .types import (
    EstimatorConfiguration,
    Notification,
    NotificationTelegram,
    RangeConfiguration,
    RestakeConfiguration,
)

DEFAULT_PRIMARY_RPC = "http://127.0.0.1:26657"
DEFAULT_FALLBACK_RPCS = "https://atomone-testnet-1-rpc.allinbits.services"
DEFAULT_UPGRADE_HEIGHT = 3240000


class ConfigurationError(Exception):
    pass


def load_values(path: Path | str | None, keys: set[str]) -> dict[str, str]:
    # a missing file is treated as empty, the environment still applies
    values: dict[str, str] = {}

    if path is not None and Path(path).is_file():
        for k, v in dotenv_values(path).items():
            if v is not None:
                values[k] = v

    for k in keys:
        if k in os.environ:
            values[k] = os.environ[k]

    return values


def get_int(values: dict[str, str], key: str, default: int) -> int:
    raw = values.get(key, "").strip()
    if not raw:
        return default

    try:
        return int(raw)
    except ValueError as e:
        raise ConfigurationError(f"{key} must be an integer, got {raw!r}") from e


def get_list(values: dict[str, str], key: str, default: str = "") -> list[str]:
    return values.get(key, default).split()


RESTAKE_KEYS = {
    "TG_CHAT_ID",
    "TG_TOKEN",
    "BALANCE_ALERT",
    "ETH_CHAINS",
    "RESTAKE_SOURCE",
    "RESTAKE_DIR",
}


def get_restake_config(path: Path | str | None) -> RestakeConfiguration:
    values = load_values(path, RESTAKE_KEYS)

    telegram = None
    if token := values.get("TG_TOKEN", "").strip():
        telegram = NotificationTelegram(
            bot_token=token, chat_id=values.get("TG_CHAT_ID", "").strip()
        )

    source = values.get("RESTAKE_SOURCE", "npm").strip() or "npm"
    if source not in ("npm", "journal", "stdin"):
        raise ConfigurationError(
            f"RESTAKE_SOURCE must be one of npm, journal, stdin, got {source!r}"
        )

    restake_dir = values.get("RESTAKE_DIR", "").strip()
    if not restake_dir:
        base = Path(path).parent if path is not None else Path.cwd()
        restake_dir = str(base / "restake")

    return RestakeConfiguration(
        notification=Notification(telegram=telegram),
        balance_alert=get_int(values, "BALANCE_ALERT", 0),
        eth_chains=get_list(values, "ETH_CHAINS"),
        source=source,
        restake_dir=restake_dir,
    )


ESTIMATOR_KEYS = {
    "PRIMARY_RPC",
    "FALLBACK_RPCS",
    "UPGRADE_HEIGHT",
    "TARGET_HOURS",
    "MIN_RANGE",
    "MAX_RANGE",
    "SAMPLE_SIZE",
}


def get_estimator_config(path: Path | str | None) -> EstimatorConfiguration:
    values = load_values(path, ESTIMATOR_KEYS)

    primary = values.get("PRIMARY_RPC", DEFAULT_PRIMARY_RPC).strip()
    fallbacks = get_list(values, "FALLBACK_RPCS", DEFAULT_FALLBACK_RPCS)
    rpc_urls = [u.rstrip("/") for u in [primary, *fallbacks] if u]
    if not rpc_urls:
        raise ConfigurationError("no rpc endpoint configured")

    range_config = RangeConfiguration(
        target_hours=get_int(values, "TARGET_HOURS", 24),
        min_range=get_int(values, "MIN_RANGE", 1000),
        max_range=get_int(values, "MAX_RANGE", 50000),
        sample_size=get_int(values, "SAMPLE_SIZE", 200),
    )
    if not 0 < range_config.min_range <= range_config.max_range:
        raise ConfigurationError("MIN_RANGE must be positive and not above MAX_RANGE")
    if range_config.sample_size <= 0 or range_config.target_hours <= 0:
        raise ConfigurationError("SAMPLE_SIZE and TARGET_HOURS must be positive")

    return EstimatorConfiguration(
        rpc_urls=rpc_urls,
        upgrade_height=get_int(values, "UPGRADE_HEIGHT", DEFAULT_UPGRADE_HEIGHT),
        range=range_config,
    )


def config_path(script: str) -> Path:
    path = Path(script).resolve().with_suffix(".ini")
    if path.is_file():
        return path
    return Path.cwd() / path.name
