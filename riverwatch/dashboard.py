"""River Monitoring Dashboard: FastAPI app serving one session's view model."""

import asyncio
import contextlib
import os
from collections.abc import Callable
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI, HTTPException, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, HTMLResponse

from riverwatch.config.loader import load_config
from riverwatch.models.common import SourceKey
from riverwatch.pipeline.dashboard_session import DashboardSession
from riverwatch.reporting.view_model import view_to_dict

CONFIG_PATH = Path(os.environ.get("RIVERWATCH_CONFIG", "configs/default.yaml"))
DASHBOARD_HTML = Path(__file__).parent.parent / "static" / "dashboard.html"

SessionFactory = Callable[[], DashboardSession]


def create_app(
    session_factory: SessionFactory, load_in_background: bool = True
) -> FastAPI:
    """Build the app; the lifespan owns exactly one DashboardSession."""

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        session = session_factory()
        app.state.session = session
        load_task: asyncio.Task | None = None
        if load_in_background:
            load_task = asyncio.create_task(session.load())
        else:
            await session.load()
        try:
            yield
        finally:
            session.dispose()
            if load_task is not None and not load_task.done():
                load_task.cancel()
                with contextlib.suppress(asyncio.CancelledError):
                    await load_task

    app = FastAPI(title="River Monitoring Dashboard", version="0.1.0", lifespan=lifespan)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["GET", "POST"],
        allow_headers=["*"],
    )

    def _session(request: Request) -> DashboardSession:
        return request.app.state.session

    # ── Data endpoints ──────────────────────────────────────────────

    @app.get("/api/dashboard")
    async def get_dashboard(request: Request):
        """Full view model: tiles, chart series, risk grid and map markers."""
        return view_to_dict(_session(request).view())

    @app.get("/api/sites")
    async def get_sites(request: Request):
        return view_to_dict(_session(request).view())["sites"]

    @app.get("/api/forecast")
    async def get_forecast(request: Request):
        return view_to_dict(_session(request).view())["forecast"]

    @app.get("/api/contamination")
    async def get_contamination(request: Request):
        return view_to_dict(_session(request).view())["contamination"]

    @app.get("/api/status")
    async def get_status(request: Request):
        """Loading / error / notice per source."""
        return view_to_dict(_session(request).view())["fetch_states"]

    # ── Control endpoints ───────────────────────────────────────────

    @app.post("/api/retry/{source}")
    async def retry_source(source: str, request: Request):
        try:
            key = SourceKey(source)
        except ValueError:
            raise HTTPException(404, f"Unknown source: {source}") from None
        session = _session(request)
        await session.retry(key)
        return {"source": key.value, **view_to_dict(session.view())["fetch_states"][key.value]}

    @app.post("/api/refresh")
    async def refresh_all(request: Request):
        session = _session(request)
        await session.refresh()
        return view_to_dict(session.view())["fetch_states"]

    # ── Serve dashboard ─────────────────────────────────────────────

    @app.get("/")
    def serve_dashboard():
        if DASHBOARD_HTML.exists():
            return FileResponse(DASHBOARD_HTML, media_type="text/html")
        return HTMLResponse("<h1>Dashboard not found</h1>", status_code=404)

    return app


app = create_app(lambda: DashboardSession.from_config(load_config(CONFIG_PATH)))


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8777)
