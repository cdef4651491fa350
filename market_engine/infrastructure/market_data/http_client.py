"""
Infrastructure adapter: REST market data API → IMarketDataProvider.

Issues one POST to ``{base_url}/market-data`` per call with the query
descriptor as JSON body, and a bearer token when an API key is configured.
Every failure is returned inside the FetchResult; nothing raises across the
port except from fetch_instruments(), whose caller owns the fallback.
"""

import logging
from typing import Optional

import httpx

from market_engine.domain.entities.market_data import FetchResult, Instrument, QueryDescriptor
from market_engine.domain.errors import ApiStatusError, MarketDataError, TransportError
from market_engine.domain.ports.market_data_port import IMarketDataProvider
from market_engine.infrastructure.market_data.payload_decoder import decode_items

logger = logging.getLogger(__name__)

DEFAULT_TIMEOUT_MS = 10_000


class HttpMarketDataClient(IMarketDataProvider):
    """Fetches daily market data from a JSON HTTP API via httpx."""

    def __init__(
        self,
        base_url: str,
        api_key: Optional[str] = None,
        timeout_ms: int = DEFAULT_TIMEOUT_MS,
        transport: Optional[httpx.BaseTransport] = None,
    ) -> None:
        headers = {"Content-Type": "application/json"}
        if api_key:
            headers["Authorization"] = f"Bearer {api_key}"
        self._client = httpx.Client(
            base_url=base_url.rstrip("/"),
            headers=headers,
            timeout=httpx.Timeout(timeout_ms / 1000),
            transport=transport,
        )

    def fetch_market_data(self, descriptor: QueryDescriptor) -> FetchResult:
        try:
            response = self._client.post("/market-data", json=descriptor.to_payload())
        except httpx.HTTPError as exc:
            logger.warning("Market data request for %s failed: %s", descriptor.instrument, exc)
            return FetchResult.failure(TransportError(str(exc) or exc.__class__.__name__))

        if not response.is_success:
            logger.warning(
                "Market data API answered %s for %s", response.status_code, descriptor.instrument
            )
            return FetchResult.failure(
                ApiStatusError(response.status_code, response.reason_phrase)
            )

        try:
            body = response.json()
            records = decode_items(body.get("data") or [])
        except (ValueError, AttributeError) as exc:
            logger.warning("Malformed market data payload for %s: %s", descriptor.instrument, exc)
            return FetchResult.failure(MarketDataError(f"Malformed payload: {exc}"))

        return FetchResult.success(records)

    def fetch_instruments(self) -> list[Instrument]:
        """Fetch the instrument list from ``{base_url}/instruments``.

        Raises:
            TransportError:  on network failure, timeout or an undecodable body.
            ApiStatusError:  on a non-success status.
            MarketDataError: on a malformed body.
        """
        try:
            response = self._client.get("/instruments")
        except httpx.HTTPError as exc:
            raise TransportError(str(exc) or exc.__class__.__name__) from exc
        if not response.is_success:
            raise ApiStatusError(response.status_code, response.reason_phrase)

        try:
            return [
                Instrument(
                    symbol=item["symbol"],
                    name=item.get("name", item["symbol"]),
                    category=item.get("category", ""),
                )
                for item in response.json().get("instruments", [])
            ]
        except (ValueError, KeyError, AttributeError) as exc:
            raise MarketDataError(f"Malformed instruments payload: {exc}") from exc

    def close(self) -> None:
        self._client.close()

    def __enter__(self) -> "HttpMarketDataClient":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()
