"""
Market data session: the lifecycle controller behind a calendar view.

Combines a market data provider, a series cache and a synthetic fallback
generator into one stateful session. Consumers read the immutable
SessionState and drive it through fetch_data / refresh_data / clear_error /
clear_cache. Depends only on Domain ports and entities; no infrastructure
imports.

States::

    idle -> loading -> ready | ready_stale | failed
    ready / ready_stale / failed -> loading   (refresh, retry, poll, focus)
"""

import logging
import threading
from dataclasses import dataclass, replace
from datetime import datetime, timedelta, timezone
from typing import Callable, Optional

from market_engine.application.services.focus_signal import FocusSignal
from market_engine.application.services.timers import RepeatingTimer
from market_engine.domain.entities.market_data import DailyRecord, FetchResult, QueryDescriptor
from market_engine.domain.entities.session_state import LifecycleStatus, SessionState
from market_engine.domain.errors import EmptyResultError, FallbackFailure, MarketDataError
from market_engine.domain.ports.cache_port import ISeriesCache
from market_engine.domain.ports.market_data_port import IMarketDataProvider
from market_engine.domain.ports.series_generator_port import ISyntheticSeriesGenerator

logger = logging.getLogger(__name__)

STALE_AFTER = timedelta(minutes=5)


def utc_now() -> datetime:
    return datetime.now(timezone.utc)


class NoActiveQueryError(RuntimeError):
    """refresh_data() was called before any query was fetched."""


class SessionClosedError(RuntimeError):
    """The session was torn down and no longer accepts fetches."""


@dataclass(frozen=True)
class SessionOptions:
    enable_polling: bool = False
    polling_interval: float = 60.0
    enable_cache: bool = True
    fallback_to_mock: bool = True
    # used when the query range cannot size the sample series
    fallback_days: int = 180


class MarketDataSession:
    def __init__(
        self,
        provider: IMarketDataProvider,
        cache: ISeriesCache,
        generator: ISyntheticSeriesGenerator,
        options: SessionOptions = SessionOptions(),
        clock: Callable[[], datetime] = utc_now,
        focus_signal: Optional[FocusSignal] = None,
        timer_factory: Callable[[float, Callable[[], None]], RepeatingTimer] = RepeatingTimer,
    ) -> None:
        """
        Args:
            provider:      IMarketDataProvider used on cache misses.
            cache:         ISeriesCache, possibly shared with other sessions.
            generator:     ISyntheticSeriesGenerator used when retrieval fails.
            options:       Polling, caching and fallback behaviour.
            clock:         Source of "now" for lastUpdated and staleness checks.
            focus_signal:  Optional signal; a focus event refreshes stale data.
            timer_factory: Builds the polling timer; injectable for tests.
        """
        self._provider = provider
        self._cache = cache
        self._generator = generator
        self._options = options
        self._clock = clock
        self._timer_factory = timer_factory

        self._lock = threading.Lock()
        self._state = SessionState()
        self._descriptor: Optional[QueryDescriptor] = None
        self._generation = 0
        self._closed = False

        self._timer: Optional[RepeatingTimer] = None
        self._focus_subscription = (
            focus_signal.subscribe(self.handle_focus) if focus_signal is not None else None
        )
        if options.enable_polling:
            self.start_polling()

    # ------------------------------------------------------------------
    # Read side
    # ------------------------------------------------------------------
    @property
    def state(self) -> SessionState:
        return self._state

    @property
    def data(self) -> list[DailyRecord]:
        return list(self._state.data)

    @property
    def loading(self) -> bool:
        return self._state.loading

    @property
    def error(self) -> Optional[str]:
        return self._state.error

    @property
    def last_updated(self) -> Optional[datetime]:
        return self._state.last_updated

    @property
    def is_stale(self) -> bool:
        return self._state.is_stale

    @property
    def status(self) -> LifecycleStatus:
        return self._state.status

    @property
    def descriptor(self) -> Optional[QueryDescriptor]:
        return self._descriptor

    @property
    def closed(self) -> bool:
        return self._closed

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------
    def fetch_data(self, descriptor: QueryDescriptor) -> SessionState:
        """Load *descriptor* through cache, provider and fallback, in that order.

        A later fetch supersedes an earlier one still in flight: the earlier
        result is discarded rather than applied over the newer state.

        Raises:
            ValueError:         if the instrument is blank.
            SessionClosedError: if the session has been closed.
        """
        if not descriptor.instrument or not descriptor.instrument.strip():
            raise ValueError("instrument must be a non-empty string")
        with self._lock:
            if self._closed:
                raise SessionClosedError("market data session is closed")
            self._generation += 1
            generation = self._generation
            self._descriptor = descriptor
            self._state = replace(
                self._state, loading=True, error=None, status=LifecycleStatus.LOADING
            )

        try:
            resolved = self._resolve(descriptor)
        except Exception as exc:
            logger.exception("Loading %s failed unexpectedly", descriptor.instrument)
            with self._lock:
                if not self._closed and generation == self._generation:
                    self._state = SessionState(error=str(exc), status=LifecycleStatus.FAILED)
            raise

        with self._lock:
            if self._closed or generation != self._generation:
                logger.debug("Discarding superseded result for %s", descriptor.instrument)
                return self._state
            self._state = resolved
            return resolved

    def refresh_data(self) -> SessionState:
        """Re-run the last fetched query.

        Raises:
            NoActiveQueryError: if nothing has been fetched yet.
        """
        descriptor = self._descriptor
        if descriptor is None:
            raise NoActiveQueryError("no query has been fetched yet")
        return self.fetch_data(descriptor)

    def clear_error(self) -> None:
        with self._lock:
            self._state = replace(self._state, error=None)

    def clear_cache(self) -> None:
        """Drop every cached series; the current state is left untouched."""
        if self._options.enable_cache:
            self._cache.clear()

    def needs_refresh(self) -> bool:
        """True when the data is sample data or older than the freshness window."""
        state = self._state
        if state.is_stale:
            return True
        return state.last_updated is not None and self._clock() - state.last_updated > STALE_AFTER

    def handle_focus(self) -> None:
        """Refresh on regained focus when the shown data is stale."""
        if self._closed or self._descriptor is None or self._state.loading:
            return
        if self.needs_refresh():
            logger.info("Refreshing stale data for %s on focus", self._descriptor.instrument)
            self.refresh_data()

    # ------------------------------------------------------------------
    # Owned resources
    # ------------------------------------------------------------------
    def start_polling(self) -> None:
        if self._timer is not None and self._timer.is_running:
            return
        self._timer = self._timer_factory(self._options.polling_interval, self._poll)
        self._timer.start()

    def stop_polling(self) -> None:
        if self._timer is not None:
            self._timer.cancel()
            self._timer = None

    def close(self) -> None:
        """Tear the session down: stop polling, drop the focus subscription
        and ignore any result still in flight."""
        with self._lock:
            self._closed = True
        self.stop_polling()
        if self._focus_subscription is not None:
            self._focus_subscription.cancel()
            self._focus_subscription = None

    def __enter__(self) -> "MarketDataSession":
        return self

    def __exit__(self, *exc_info) -> None:
        self.close()

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------
    def _poll(self) -> None:
        if self._closed or self._descriptor is None or self._state.loading:
            return
        self.refresh_data()

    def _resolve(self, descriptor: QueryDescriptor) -> SessionState:
        key = descriptor.cache_key()
        if self._options.enable_cache:
            cached = self._cache.get(key)
            if cached is not None:
                logger.debug("Cache hit for %s", descriptor.instrument)
                return SessionState(
                    data=cached, last_updated=self._clock(), status=LifecycleStatus.READY
                )

        try:
            result = self._provider.fetch_market_data(descriptor)
        except Exception as exc:
            logger.exception("Provider raised for %s", descriptor.instrument)
            result = FetchResult.failure(
                MarketDataError(str(exc) or exc.__class__.__name__)
            )
        if result.ok and result.records:
            if self._options.enable_cache:
                self._cache.set(key, result.records)
            return SessionState(
                data=list(result.records),
                last_updated=self._clock(),
                status=LifecycleStatus.READY,
            )

        if result.ok:
            failure: MarketDataError = EmptyResultError(
                f"No market data for {descriptor.instrument} between "
                f"{descriptor.start_date.isoformat()} and {descriptor.end_date.isoformat()}"
            )
            logger.warning("Empty result: %s", failure)
        else:
            failure = result.error
            logger.warning("Retrieval failed for %s: %s", descriptor.instrument, failure)

        if not self._options.fallback_to_mock:
            return SessionState(error=str(failure), status=LifecycleStatus.FAILED)

        try:
            sample = self._generator.generate(descriptor.instrument, self._fallback_days(descriptor))
        except Exception as exc:
            defect = FallbackFailure(str(exc))
            logger.exception("Sample data generation failed for %s", descriptor.instrument)
            return SessionState(
                error=f"Both API and sample data failed: {failure}; {defect}",
                status=LifecycleStatus.FAILED,
            )

        logger.warning("Serving sample data for %s", descriptor.instrument)
        return SessionState(
            data=sample,
            error=f"API unavailable: {failure}. Showing sample data.",
            last_updated=self._clock(),
            is_stale=True,
            status=LifecycleStatus.READY_STALE,
        )

    def _fallback_days(self, descriptor: QueryDescriptor) -> int:
        span = descriptor.span_days
        return span if span > 0 else self._options.fallback_days
