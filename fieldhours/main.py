from typing import Optional

import structlog
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from prometheus_fastapi_instrumentator import Instrumentator
from slowapi import Limiter, _rate_limit_exceeded_handler
from slowapi.util import get_remote_address
from slowapi.errors import RateLimitExceeded
from slowapi.middleware import SlowAPIMiddleware

from .config import Settings, settings as default_settings
from .db import Store
from .logging import setup_logging, RequestIdMiddleware
from .routes.data import router as data_router, get_all_data
from .routes.entries import router as entries_router
from .routes.properties import router as properties_router
from .routes.employees import router as employees_router
from .routes.timers import router as timers_router
from .routes.ui import router as ui_router
from .services.backup import BackupScheduler


logger = structlog.get_logger(__name__)


def create_app(settings: Optional[Settings] = None, store: Optional[Store] = None) -> FastAPI:
    settings = settings or default_settings
    setup_logging(settings.log_level)
    store = store or Store.from_settings(settings)

    app = FastAPI(title=settings.app_name)
    app.state.settings = settings
    app.state.store = store
    app.state.backup_scheduler = None

    # Middlewares
    app.add_middleware(RequestIdMiddleware)
    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_methods=["*"],
        allow_headers=["*"],
    )

    limiter = Limiter(key_func=get_remote_address, default_limits=[settings.rate_limit])
    app.state.limiter = limiter
    # Polled by clients; never rate limited
    limiter.exempt(get_all_data)
    app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
    app.add_middleware(SlowAPIMiddleware)

    # Routers
    app.include_router(data_router)
    app.include_router(entries_router)
    app.include_router(properties_router)
    app.include_router(employees_router)
    app.include_router(timers_router)
    app.include_router(ui_router)

    # Metrics
    if settings.enable_metrics:
        Instrumentator().instrument(app).expose(app, include_in_schema=False)

    @app.on_event("startup")
    def _startup():
        logger.info("startup", database=store.database_path or settings.database_url)
        if settings.auto_create_db:
            store.init_schema()
        if settings.backup_enabled and store.database_path:
            scheduler = BackupScheduler.from_settings(store, settings)
            scheduler.start()
            app.state.backup_scheduler = scheduler

    @app.on_event("shutdown")
    def _shutdown():
        scheduler = app.state.backup_scheduler
        if scheduler is not None:
            scheduler.stop()
            app.state.backup_scheduler = None
        store.close()
        logger.info("shutdown")

    return app


app = create_app()


def run() -> None:
    import uvicorn

    uvicorn.run(app, host=default_settings.host, port=default_settings.port)


if __name__ == "__main__":
    run()
