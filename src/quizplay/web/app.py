from __future__ import annotations

from fastapi import FastAPI
from fastapi.responses import JSONResponse

from ..config import Settings
from ..data.catalog import CatalogStore
from ..features.play.host import SessionHost
from ..features.play.router import create_play_router


def create_app(
    settings: Settings | None = None,
    *,
    catalog: CatalogStore | None = None,
    host: SessionHost | None = None,
) -> FastAPI:
    settings = settings or Settings.from_env()
    catalog = catalog or CatalogStore(settings.db_path)
    host = host or SessionHost(catalog, seed=settings.seed)
    app = FastAPI(title="Quiz Play")
    app.include_router(
        create_play_router(host, catalog, idle_timeout=settings.round_idle_timeout, max_rounds=settings.max_rounds)
    )
    app.state.catalog = catalog
    app.state.host = host

    @app.get("/healthz")
    def healthz() -> JSONResponse:
        return JSONResponse({"status": "ok", "quizzes": catalog.count(), "active_rounds": host.active_count})

    return app


def run(settings: Settings) -> None:
    import uvicorn

    uvicorn.run(create_app(settings), host=settings.host, port=settings.http_port, log_level=settings.log_level.lower())
