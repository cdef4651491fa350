"""
FastAPI entry point for the calendar dashboard backend.

This module is the Composition Root: it wires the infrastructure adapters
(HTTP or yfinance provider, in-memory cache, synthetic generator) into one
MarketDataSession and exposes the session to the dashboard over HTTP. The
session's poll timer and focus subscription are released when the app
shuts down.

Run locally:
    uvicorn market_engine.infrastructure.entrypoints.fastapi_app:app --reload --port 8000
"""

import dataclasses
from contextlib import asynccontextmanager
from datetime import date
from typing import Optional

from dotenv import load_dotenv
from fastapi import FastAPI, HTTPException
from pydantic import BaseModel, ConfigDict, Field, model_validator

load_dotenv()

from market_engine.application.services.focus_signal import FocusSignal
from market_engine.application.services.market_data_session import (
    MarketDataSession,
    NoActiveQueryError,
    SessionOptions,
)
from market_engine.application.use_cases.build_calendar_view import BuildCalendarViewUseCase
from market_engine.application.use_cases.get_instruments import GetInstrumentsUseCase
from market_engine.domain.entities.market_data import QueryDescriptor, Timeframe
from market_engine.domain.ports.market_data_port import IMarketDataProvider
from market_engine.infrastructure.cache.in_memory_cache import InMemorySeriesCache
from market_engine.infrastructure.catalog.instruments import INSTRUMENT_CATALOG
from market_engine.infrastructure.config.logging_setup import configure_logging
from market_engine.infrastructure.config.settings import MarketDataSettings
from market_engine.infrastructure.fallback.synthetic_generator import SyntheticSeriesGenerator
from market_engine.infrastructure.market_data.http_client import HttpMarketDataClient
from market_engine.infrastructure.market_data.yfinance_adapter import YFinanceMarketDataProvider


class MarketDataRequest(BaseModel):
    # whitespace is stripped before the length check
    model_config = ConfigDict(populate_by_name=True, str_strip_whitespace=True)

    instrument: str = Field(min_length=1)
    start_date: date = Field(alias="startDate")
    end_date: date = Field(alias="endDate")
    timeframe: Timeframe = Timeframe.DAY
    include_volatility: bool = Field(default=True, alias="includeVolatility")
    include_liquidity: bool = Field(default=True, alias="includeLiquidity")
    include_performance: bool = Field(default=True, alias="includePerformance")
    view_date: Optional[date] = Field(default=None, alias="viewDate")

    @model_validator(mode="after")
    def _check_range(self) -> "MarketDataRequest":
        if self.end_date < self.start_date:
            raise ValueError("endDate must not be before startDate")
        return self

    def to_descriptor(self) -> QueryDescriptor:
        return QueryDescriptor(
            instrument=self.instrument.upper(),
            start_date=self.start_date,
            end_date=self.end_date,
            timeframe=self.timeframe,
            include_volatility=self.include_volatility,
            include_liquidity=self.include_liquidity,
            include_performance=self.include_performance,
        )


def build_provider(settings: MarketDataSettings) -> IMarketDataProvider:
    if settings.provider == "yfinance":
        return YFinanceMarketDataProvider()
    return HttpMarketDataClient(
        base_url=settings.base_url,
        api_key=settings.api_key,
        timeout_ms=settings.timeout_ms,
    )


def build_session(
    settings: MarketDataSettings,
    provider: IMarketDataProvider,
    focus_signal: FocusSignal,
) -> MarketDataSession:
    return MarketDataSession(
        provider=provider,
        cache=InMemorySeriesCache(),
        generator=SyntheticSeriesGenerator(),
        options=SessionOptions(
            enable_polling=settings.enable_polling,
            polling_interval=settings.poll_interval_s,
            enable_cache=settings.enable_cache,
            fallback_to_mock=settings.fallback_to_mock,
        ),
        focus_signal=focus_signal,
    )


def _state_payload(session: MarketDataSession) -> dict:
    state = session.state
    return {
        "status": state.status.value,
        "loading": state.loading,
        "error": state.error,
        "lastUpdated": state.last_updated,
        "isStale": state.is_stale,
        "source": "Sample Data" if state.is_stale else "Live Market Data",
        "data": [dataclasses.asdict(r) for r in state.data],
    }


def create_app(
    session: Optional[MarketDataSession] = None,
    instruments_use_case: Optional[GetInstrumentsUseCase] = None,
    focus_signal: Optional[FocusSignal] = None,
    settings: Optional[MarketDataSettings] = None,
) -> FastAPI:
    """Build the app, wiring default adapters for anything not supplied."""
    settings = settings if settings is not None else MarketDataSettings.from_env()
    configure_logging(settings.log_level)

    focus_signal = focus_signal if focus_signal is not None else FocusSignal()
    provider = None
    if session is None or instruments_use_case is None:
        provider = build_provider(settings)
    if session is None:
        session = build_session(settings, provider, focus_signal)
    if instruments_use_case is None:
        instruments_use_case = GetInstrumentsUseCase(provider, INSTRUMENT_CATALOG)
    calendar_view = BuildCalendarViewUseCase()

    @asynccontextmanager
    async def lifespan(_app: FastAPI):
        yield
        session.close()
        if isinstance(provider, HttpMarketDataClient):
            provider.close()

    app = FastAPI(title="Market Calendar Data API", lifespan=lifespan)

    @app.get("/health")
    def health():
        return {"status": "ok"}

    @app.get("/instruments")
    def list_instruments(category: Optional[str] = None):
        listing = instruments_use_case.execute(category)
        return {
            "instruments": [dataclasses.asdict(i) for i in listing.instruments],
            "error": listing.error,
            "fromFallback": listing.from_fallback,
        }

    @app.get("/instruments/search")
    def search_instruments(q: str):
        try:
            matches = instruments_use_case.search(q)
        except ValueError as exc:
            raise HTTPException(status_code=422, detail=str(exc)) from exc
        return {"instruments": [dataclasses.asdict(i) for i in matches]}

    @app.post("/market-data")
    def fetch_market_data(body: MarketDataRequest):
        """Fetch a series through the session and return the session state.

        For week and month timeframes the consecutive periods of the whole
        series are included, plus the calendar rollups for the view around
        ``viewDate`` (default: ``endDate``).
        """
        session.fetch_data(body.to_descriptor())
        payload = _state_payload(session)
        if body.timeframe != Timeframe.DAY:
            payload["periods"] = [
                dataclasses.asdict(r) for r in calendar_view.periods(session.data, body.timeframe)
            ]
            reference = body.view_date or body.end_date
            payload["rollups"] = [
                {"anchor": anchor, "record": dataclasses.asdict(record) if record else None}
                for anchor, record in calendar_view.execute(
                    session.data, body.timeframe, reference
                )
            ]
        return payload

    @app.get("/market-data")
    def current_state():
        return _state_payload(session)

    @app.post("/market-data/refresh")
    def refresh_market_data():
        try:
            session.refresh_data()
        except NoActiveQueryError as exc:
            raise HTTPException(status_code=409, detail=str(exc)) from exc
        return _state_payload(session)

    @app.post("/focus")
    def focus():
        """Raised by the dashboard when it becomes visible again."""
        focus_signal.emit()
        return _state_payload(session)

    @app.delete("/market-data/error")
    def clear_error():
        session.clear_error()
        return _state_payload(session)

    @app.delete("/market-data/cache")
    def clear_cache():
        session.clear_cache()
        return {"status": "cleared"}

    return app


app = create_app()
