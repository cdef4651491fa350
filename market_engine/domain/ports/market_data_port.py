"""
Port (interface) for market data providers.
Infrastructure adapters (e.g. HttpMarketDataClient, YFinanceMarketDataProvider)
must implement this interface. Implementations never raise across it: every
failure is reported as a FetchResult carrying a MarketDataError.
"""

from abc import ABC, abstractmethod

from market_engine.domain.entities.market_data import FetchResult, Instrument, QueryDescriptor


class IMarketDataProvider(ABC):
    @abstractmethod
    def fetch_market_data(self, descriptor: QueryDescriptor) -> FetchResult: ...

    @abstractmethod
    def fetch_instruments(self) -> list[Instrument]:
        """Return the instruments the provider can serve.

        Unlike fetch_market_data this may raise MarketDataError; the
        instruments use case owns the fallback to the local catalog.
        """
        ...
