"""Dashboard session: owns one dashboard's state and drives its fetch lifecycle.

The three sources (sites, weather, ecoli) are fetched concurrently and each
writes only its own slice of DashboardState. Every write goes through
_write(), which is a no-op once the session has been disposed.
"""

import asyncio
import logging
from collections.abc import Callable
from datetime import datetime
from typing import Any

from riverwatch.config.schema import DashboardConfig
from riverwatch.ingest.contamination_fetcher import ECOLI_FAILED, ContaminationFetcher
from riverwatch.ingest.forecast_fetcher import FORECAST_FAILED, ForecastFetcher
from riverwatch.ingest.noaa_client import NoaaClient
from riverwatch.ingest.site_fetcher import SITES_UNAVAILABLE, SiteTemperatureFetcher
from riverwatch.ingest.usgs_client import UsgsClient
from riverwatch.models.common import SourceKey, utc_now
from riverwatch.models.site import GeoPoint, SiteSeries
from riverwatch.models.state import DashboardState, SliceResult
from riverwatch.reporting.view_model import DashboardView, build_view

logger = logging.getLogger(__name__)

StateListener = Callable[[SourceKey, DashboardState], None]

TIMEOUT_ERRORS: dict[SourceKey, str] = {
    SourceKey.SITES: SITES_UNAVAILABLE,
    SourceKey.WEATHER: FORECAST_FAILED,
    SourceKey.ECOLI: ECOLI_FAILED,
}

FALLBACK_ERRORS: dict[SourceKey, str] = {
    SourceKey.SITES: "Unable to load monitoring data",
    SourceKey.WEATHER: "Unable to load weather forecast",
    SourceKey.ECOLI: "Unable to load E.coli data",
}

PLACEHOLDER_SITE_ID = "error"
PLACEHOLDER_SITE_NAME = "Data temporarily unavailable"


class CancellationToken:
    def __init__(self) -> None:
        self._cancelled = False

    @property
    def cancelled(self) -> bool:
        return self._cancelled

    def cancel(self) -> None:
        self._cancelled = True


class DashboardSession:
    """One dashboard instance: state, in-flight fetch tasks and a cancellation token."""

    def __init__(
        self,
        config: DashboardConfig,
        site_fetcher: SiteTemperatureFetcher,
        forecast_fetcher: ForecastFetcher,
        contamination_fetcher: ContaminationFetcher,
        listener: StateListener | None = None,
        clock: Callable[[], datetime] = utc_now,
    ):
        self.config = config
        self.clock = clock
        self.state = DashboardState()
        self._fetchers: dict[SourceKey, Any] = {
            SourceKey.SITES: site_fetcher,
            SourceKey.WEATHER: forecast_fetcher,
            SourceKey.ECOLI: contamination_fetcher,
        }
        self._listener = listener
        self._token = CancellationToken()
        self._tasks: dict[SourceKey, asyncio.Task] = {}
        self._generations: dict[SourceKey, int] = {key: 0 for key in SourceKey}

    @classmethod
    def from_config(
        cls,
        config: DashboardConfig,
        listener: StateListener | None = None,
        clock: Callable[[], datetime] = utc_now,
    ) -> "DashboardSession":
        usgs = UsgsClient.from_config(config.api)
        noaa = NoaaClient.from_config(config.api)
        return cls(
            config,
            SiteTemperatureFetcher(usgs, config.temperature, clock=clock),
            ForecastFetcher(noaa, config.forecast),
            ContaminationFetcher(usgs, config.contamination),
            listener=listener,
            clock=clock,
        )

    async def __aenter__(self) -> "DashboardSession":
        await self.load()
        return self

    async def __aexit__(self, *exc_info: object) -> None:
        self.dispose()

    @property
    def disposed(self) -> bool:
        return self._token.cancelled

    async def load(self) -> None:
        """Fetch all sources concurrently.

        Anything escaping the per-source handlers replaces the whole state
        with a placeholder dataset instead of propagating.
        """
        if self.disposed:
            return
        try:
            async with asyncio.TaskGroup() as tg:
                for source in SourceKey:
                    self._cancel_task(source)
                    generation = self._begin(source)
                    self._tasks[source] = tg.create_task(
                        self._run_slice(source, generation)
                    )
        except Exception:
            logger.exception("Failed to load dashboard data")
            self._apply_fallback(list(SourceKey))

    async def refresh(self) -> None:
        await self.load()

    async def retry(self, source: SourceKey) -> None:
        """Re-run a single source without touching the other two."""
        if self.disposed:
            return
        self._cancel_task(source)
        generation = self._begin(source)
        task = asyncio.create_task(self._run_slice(source, generation))
        self._tasks[source] = task
        try:
            await task
        except asyncio.CancelledError:
            current = asyncio.current_task()
            if current is not None and current.cancelling():
                raise
            logger.info("Retry of %s superseded or cancelled", source)
        except Exception:
            logger.exception("Retry of %s failed", source)
            self._apply_fallback([source])

    def dispose(self) -> None:
        """Stop all in-flight fetches; later completions leave state untouched."""
        if self._token.cancelled:
            return
        self._token.cancel()
        for source in SourceKey:
            self._cancel_task(source)
        logger.debug("Dashboard session disposed")

    def view(self) -> DashboardView:
        return build_view(self.state, self.config, now=self.clock())

    # ── internals ───────────────────────────────────────────────

    async def _run_slice(self, source: SourceKey, generation: int) -> None:
        timeout = self.config.ops.slice_timeout_seconds
        try:
            async with asyncio.timeout(timeout):
                result = await self._fetchers[source].fetch()
        except TimeoutError:
            logger.warning("%s fetch timed out after %.1fs", source, timeout)
            result = SliceResult(data=_empty_data(source), error=TIMEOUT_ERRORS[source])
        self._commit(source, generation, result)

    def _begin(self, source: SourceKey) -> int:
        self._generations[source] += 1
        generation = self._generations[source]

        def start(state: DashboardState) -> None:
            fs = state.fetch_state(source)
            fs.loading = True
            fs.error = None
            fs.notice = None

        self._write(source, start)
        return generation

    def _commit(self, source: SourceKey, generation: int, result: SliceResult) -> None:
        if generation != self._generations[source]:
            logger.debug("Discarding stale %s result (generation %d)", source, generation)
            return

        def apply(state: DashboardState) -> None:
            _set_slice(state, source, result.data)
            fs = state.fetch_state(source)
            fs.loading = False
            fs.error = result.error
            fs.notice = result.notice

        self._write(source, apply)
        if result.error:
            logger.warning("%s: %s", source, result.error)

    def _apply_fallback(self, sources: list[SourceKey]) -> None:
        for source in sources:
            self._generations[source] += 1
            data: Any = _empty_data(source)
            if source == SourceKey.SITES:
                data = [self._placeholder_site()]

            def apply(state: DashboardState, source=source, data=data) -> None:
                _set_slice(state, source, data)
                fs = state.fetch_state(source)
                fs.loading = False
                fs.error = FALLBACK_ERRORS[source]
                fs.notice = None

            self._write(source, apply)

    def _placeholder_site(self) -> SiteSeries:
        return SiteSeries(
            site_id=PLACEHOLDER_SITE_ID,
            site_name=PLACEHOLDER_SITE_NAME,
            location=GeoPoint(
                lat=self.config.forecast.latitude,
                lon=self.config.forecast.longitude,
            ),
        )

    def _write(self, source: SourceKey, mutate: Callable[[DashboardState], None]) -> None:
        if self._token.cancelled:
            return
        mutate(self.state)
        if self._listener is not None:
            self._listener(source, self.state)

    def _cancel_task(self, source: SourceKey) -> None:
        task = self._tasks.pop(source, None)
        if task is not None and not task.done():
            task.cancel()


def _empty_data(source: SourceKey) -> Any:
    return {} if source == SourceKey.ECOLI else []


def _set_slice(state: DashboardState, source: SourceKey, data: Any) -> None:
    if source == SourceKey.SITES:
        state.sites = list(data)
    elif source == SourceKey.WEATHER:
        state.forecast = list(data)
    else:
        state.contamination = dict(data)
