"""
Domain entity for the observable state of one market data session.
Instances are immutable; the session controller replaces them wholesale.
"""

from dataclasses import dataclass, field
from datetime import datetime
from enum import Enum
from typing import Optional

from market_engine.domain.entities.market_data import DailyRecord


class LifecycleStatus(str, Enum):
    IDLE = "idle"
    LOADING = "loading"
    READY = "ready"
    READY_STALE = "ready_stale"
    FAILED = "failed"


@dataclass(frozen=True)
class SessionState:
    data: list[DailyRecord] = field(default_factory=list)
    loading: bool = False
    error: Optional[str] = None
    last_updated: Optional[datetime] = None
    is_stale: bool = False
    status: LifecycleStatus = LifecycleStatus.IDLE
