"""Integration health classification."""

from __future__ import annotations

from dataclasses import dataclass
from datetime import datetime, timedelta
from enum import Enum

RECENT_WINDOW = timedelta(hours=2)
FAILURE_WINDOW = timedelta(hours=24)


class HealthState(str, Enum):
    NO_DATA = "No data yet"
    HEALTHY = "Healthy"
    DEGRADED = "Degraded"
    ATTENTION = "Attention needed"


_DESCRIPTIONS = {
    HealthState.NO_DATA: "Run your first import to start monitoring integrations.",
    HealthState.HEALTHY: "Imports and exports are running as expected.",
    HealthState.DEGRADED: "Some operations have failed recently, but data is still flowing.",
    HealthState.ATTENTION: "No recent successful runs. Investigate the integration log.",
}


@dataclass(frozen=True)
class HealthStatus:
    status: HealthState
    description: str


def _is_recent(timestamp: datetime | None, now: datetime) -> bool:
    return timestamp is not None and timestamp > now - RECENT_WINDOW


def evaluate_health(
    last_import: datetime | None,
    last_export: datetime | None,
    failures_last_24h: int,
    now: datetime,
) -> HealthStatus:
    """Classify pipeline health from recent run history.

    Checked top to bottom, first match wins:

    1. never imported and never exported -> No data yet
    2. no failures, import and export both within 2h -> Healthy
    3. some failures, import or export within 2h -> Degraded
    4. anything else -> Attention needed
    """
    if last_import is None and last_export is None:
        state = HealthState.NO_DATA
    else:
        recent_import = _is_recent(last_import, now)
        recent_export = _is_recent(last_export, now)

        if failures_last_24h == 0 and recent_import and recent_export:
            state = HealthState.HEALTHY
        elif failures_last_24h > 0 and (recent_import or recent_export):
            state = HealthState.DEGRADED
        else:
            state = HealthState.ATTENTION

    return HealthStatus(status=state, description=_DESCRIPTIONS[state])
