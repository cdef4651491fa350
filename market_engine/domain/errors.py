"""
Error taxonomy for market data retrieval.
Retrieval adapters return these as values inside a FetchResult; only the
session controller decides whether to surface them or degrade to sample data.
"""

from typing import Optional


class MarketDataError(RuntimeError):
    """Base class for market data retrieval failures."""


class TransportError(MarketDataError):
    """Network failure or timeout before a response was received."""


class ApiStatusError(MarketDataError):
    """The provider answered with a non-success status."""

    def __init__(self, status_code: int, reason: Optional[str] = None) -> None:
        detail = f"API Error: {status_code}"
        if reason:
            detail = f"{detail} {reason}"
        super().__init__(detail)
        self.status_code = status_code
        self.reason = reason


class EmptyResultError(MarketDataError):
    """The provider answered successfully but returned no records."""


class FallbackFailure(MarketDataError):
    """Synthetic series generation itself failed. Always a defect."""
