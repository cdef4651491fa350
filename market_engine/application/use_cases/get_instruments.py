"""
Use-case: list the instruments a calendar can be opened for.
Depends only on Domain ports and entities; no infrastructure imports.
"""

import logging
from dataclasses import dataclass, replace
from typing import Optional, Sequence

from market_engine.domain.entities.market_data import Instrument
from market_engine.domain.errors import MarketDataError
from market_engine.domain.ports.market_data_port import IMarketDataProvider

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class InstrumentListing:
    instruments: list[Instrument]
    error: Optional[str] = None
    from_fallback: bool = False


class GetInstrumentsUseCase:
    def __init__(self, provider: IMarketDataProvider, catalog: Sequence[Instrument]) -> None:
        """
        Args:
            provider: IMarketDataProvider asked first.
            catalog:  Local read-only instrument table used when the provider fails.
        """
        self._provider = provider
        self._catalog = list(catalog)

    def execute(self, category: Optional[str] = None) -> InstrumentListing:
        """Fetch instruments, optionally narrowed to one *category*.

        Provider failures never propagate: the local catalog is returned
        instead, together with the failure message.
        """
        try:
            listing = InstrumentListing(instruments=self._provider.fetch_instruments())
        except MarketDataError as exc:
            logger.warning("Instrument listing failed, using local catalog: %s", exc)
            listing = InstrumentListing(
                instruments=list(self._catalog), error=str(exc), from_fallback=True
            )

        if category is None:
            return listing
        wanted = category.strip().lower()
        return replace(
            listing, instruments=[i for i in listing.instruments if i.category.lower() == wanted]
        )

    def search(self, query: str) -> list[Instrument]:
        """Case-insensitive match on symbol or name within the local catalog.

        Raises:
            ValueError: if *query* is blank.
        """
        if not query or not query.strip():
            raise ValueError("query must be a non-empty string")
        needle = query.strip().lower()
        return [
            i for i in self._catalog if needle in i.symbol.lower() or needle in i.name.lower()
        ]
