"""Per-session dashboard state and per-source fetch outcomes."""

from dataclasses import dataclass, field
from typing import Generic, TypeVar

from riverwatch.models.common import SiteCode, SourceKey
from riverwatch.models.contamination import ContaminationReading
from riverwatch.models.forecast import ForecastPeriod
from riverwatch.models.site import SiteSeries

T = TypeVar("T")


@dataclass(frozen=True)
class SliceResult(Generic[T]):
    """Outcome of one fetch cycle for a single source."""

    data: T
    error: str | None = None
    notice: str | None = None


@dataclass
class FetchState:
    loading: bool = True
    error: str | None = None
    notice: str | None = None


@dataclass
class DashboardState:
    sites: list[SiteSeries] = field(default_factory=list)
    forecast: list[ForecastPeriod] = field(default_factory=list)
    contamination: dict[SiteCode, ContaminationReading] = field(default_factory=dict)
    fetch_states: dict[SourceKey, FetchState] = field(
        default_factory=lambda: {key: FetchState() for key in SourceKey}
    )

    def fetch_state(self, source: SourceKey) -> FetchState:
        return self.fetch_states[source]

    def errors(self) -> dict[str, str]:
        return {
            key.value: fs.error
            for key, fs in self.fetch_states.items()
            if fs.error is not None
        }
