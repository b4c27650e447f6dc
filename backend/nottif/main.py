"""
Main FastAPI application for Nottif.
"""
import os
from contextlib import asynccontextmanager
from typing import Optional
from fastapi import FastAPI
from fastapi.staticfiles import StaticFiles
from fastapi.responses import FileResponse
from loguru import logger

from nottif import __version__
from nottif.config import Settings, settings as default_settings
from nottif.middleware.request_id import RequestIdMiddleware
from nottif.services import ConfigStore, Notifier, Orchestrator
from nottif.utils.errors import ConfigError
from nottif.utils.logger import setup_logger
from nottif.api import cron, events, notifications


def build_orchestrator(settings: Settings) -> Orchestrator:
    """
    Load persisted config and wire the services.

    Raises:
        ConfigError: config file unreadable or corrupt; there is no safe state to start with
    """
    config_store = ConfigStore.load(settings.config_path)
    notifier = Notifier(config_store.config.webhook_url)
    return Orchestrator(config_store, notifier)


def create_app(settings: Optional[Settings] = None, orchestrator: Optional[Orchestrator] = None) -> FastAPI:
    """
    Build the application.

    An orchestrator passed in is used as-is (tests); otherwise one is built
    from ``settings`` during startup.
    """
    settings = settings or default_settings

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        # Startup
        setup_logger(settings)
        logger.info("Starting Nottif...")

        if orchestrator is not None:
            app.state.orchestrator = orchestrator
        else:
            try:
                app.state.orchestrator = build_orchestrator(settings)
            except ConfigError as e:
                logger.critical(f"Cannot start with config {settings.config_path}: {e}")
                raise

        await app.state.orchestrator.start()
        logger.info("Nottif started successfully")

        yield

        # Shutdown
        logger.info("Shutting down Nottif...")
        await app.state.orchestrator.shutdown()
        logger.info("Nottif shut down complete")

    app = FastAPI(
        title=settings.app_name,
        description="Webhook notifications with cron jobs and a live event log",
        version=__version__,
        lifespan=lifespan,
    )
    app.state.settings = settings

    app.add_middleware(RequestIdMiddleware)

    app.include_router(notifications.router)
    app.include_router(cron.router)
    app.include_router(events.router)

    # Serve frontend static files (if static directory exists)
    static_dir = str(settings.static_dir)
    if os.path.isdir(static_dir):
        assets_dir = os.path.join(static_dir, "assets")
        if os.path.isdir(assets_dir):
            app.mount("/assets", StaticFiles(directory=assets_dir), name="assets")

        @app.get("/{full_path:path}", include_in_schema=False)
        async def serve_frontend(full_path: str):
            """Serve a static file if it exists, else index.html."""
            file_path = os.path.join(static_dir, full_path)
            inside = os.path.realpath(file_path).startswith(os.path.realpath(static_dir) + os.sep)
            if full_path and inside and os.path.isfile(file_path):
                return FileResponse(file_path)
            return FileResponse(os.path.join(static_dir, "index.html"))

        logger.info(f"Frontend static files served from {static_dir}")

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
