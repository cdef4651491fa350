"""
Runtime configuration read from the environment.

Values come from process environment variables, optionally seeded from a
``.env`` file by python-dotenv at the composition root. Nothing here is
computed; it only parses and validates what the host supplies.
"""

import os
from dataclasses import dataclass
from typing import Mapping, Optional

DEFAULT_BASE_URL = "https://api.example.com"


def _parse_bool(name: str, raw: str) -> bool:
    value = raw.strip().lower()
    if value in ("1", "true", "yes", "on"):
        return True
    if value in ("0", "false", "no", "off"):
        return False
    raise ValueError(f"{name} must be a boolean, got {raw!r}")


def _parse_number(name: str, raw: str, kind: type):
    try:
        value = kind(raw)
    except ValueError as exc:
        raise ValueError(f"{name} must be a number, got {raw!r}") from exc
    if value <= 0:
        raise ValueError(f"{name} must be positive, got {raw!r}")
    return value


@dataclass(frozen=True)
class MarketDataSettings:
    base_url: str = DEFAULT_BASE_URL
    api_key: Optional[str] = None
    timeout_ms: int = 10_000
    provider: str = "http"
    enable_polling: bool = False
    poll_interval_s: float = 60.0
    fallback_to_mock: bool = True
    enable_cache: bool = True
    log_level: str = "INFO"

    @classmethod
    def from_env(cls, environ: Optional[Mapping[str, str]] = None) -> "MarketDataSettings":
        """Build settings from *environ* (defaults to ``os.environ``).

        Raises:
            ValueError: if a numeric or boolean variable cannot be parsed, or
                        MARKET_DATA_PROVIDER names an unknown provider.
        """
        env = os.environ if environ is None else environ
        defaults = cls()

        provider = env.get("MARKET_DATA_PROVIDER", defaults.provider).strip().lower()
        if provider not in ("http", "yfinance"):
            raise ValueError(f"MARKET_DATA_PROVIDER must be 'http' or 'yfinance', got {provider!r}")

        def flag(name: str, default: bool) -> bool:
            raw = env.get(name)
            return default if raw is None else _parse_bool(name, raw)

        timeout = env.get("MARKET_DATA_TIMEOUT_MS")
        interval = env.get("MARKET_DATA_POLL_INTERVAL_S")
        return cls(
            base_url=env.get("MARKET_DATA_API_URL") or defaults.base_url,
            api_key=env.get("MARKET_DATA_API_KEY") or None,
            timeout_ms=(
                _parse_number("MARKET_DATA_TIMEOUT_MS", timeout, int)
                if timeout is not None
                else defaults.timeout_ms
            ),
            provider=provider,
            enable_polling=flag("MARKET_DATA_ENABLE_POLLING", defaults.enable_polling),
            poll_interval_s=(
                _parse_number("MARKET_DATA_POLL_INTERVAL_S", interval, float)
                if interval is not None
                else defaults.poll_interval_s
            ),
            fallback_to_mock=flag("MARKET_DATA_FALLBACK_TO_MOCK", defaults.fallback_to_mock),
            enable_cache=flag("MARKET_DATA_ENABLE_CACHE", defaults.enable_cache),
            log_level=env.get("MARKET_DATA_LOG_LEVEL", defaults.log_level).upper(),
        )
