"""Settlement Notifier: zone entry/exit titles for an open world.

Main FastAPI application.  The poll loop runs as a task on the same event
loop that serves the (async) request handlers, so the registry and the
session map are only ever touched from one thread.
"""

import asyncio
from contextlib import asynccontextmanager
from typing import Optional

from fastapi import FastAPI
from loguru import logger

from host.base import HostAdapter, check_capabilities
from host.simulated import SimulatedHost
from host.storage import KeyValueStore
from server.config import Settings, settings as default_settings
from server.database import SqlKeyValueStore, create_db_engine, init_db
from server.routers import commands_router, players_router, zones_router
from server.services import build_services

VERSION = "0.1.0"


def create_app(
    settings: Optional[Settings] = None,
    host: Optional[HostAdapter] = None,
    kv: Optional[KeyValueStore] = None,
) -> FastAPI:
    """Build the application.

    Args:
        settings: Settings to use (defaults to environment settings)
        host: Game host adapter (defaults to an in-memory SimulatedHost)
        kv: Key-value storage (defaults to the SQL store at database_url)
    """
    settings = settings or default_settings
    host = host if host is not None else SimulatedHost()

    engine = None
    if kv is None:
        engine = create_db_engine(settings.database_url, echo=settings.debug)
        kv = SqlKeyValueStore(engine)

    services = build_services(settings, host, kv)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """Application lifespan handler."""
        logger.info(f"{settings.app_name} v{VERSION} - initializing")

        # Fail here, not on some later tick, if the host is incomplete
        check_capabilities(host)

        if engine is not None:
            init_db(engine)
            logger.info("Database initialized")

        services.registry.reload()
        logger.info(f"Zone registry ready ({len(services.registry)} zones)")

        poll_task = None
        if settings.notifier_enabled:
            poll_task = asyncio.create_task(services.poll_loop.run(settings.tick_rate))
        else:
            logger.info("Zone notifications disabled (NOTIFIER_ENABLED=false)")

        yield

        if poll_task is not None:
            poll_task.cancel()
            try:
                await poll_task
            except asyncio.CancelledError:
                pass
        if engine is not None:
            engine.dispose()
        logger.info(f"{settings.app_name} shut down")

    app = FastAPI(
        title=settings.app_name,
        description="Settlement entry and exit notifications",
        version=VERSION,
        lifespan=lifespan,
    )
    app.state.services = services

    app.include_router(zones_router)
    app.include_router(commands_router)
    app.include_router(players_router)

    @app.get("/health")
    async def health():
        """Health check endpoint."""
        return {"status": "operational", "version": VERSION}

    @app.get("/api/status")
    async def status():
        """System status endpoint."""
        return {
            "name": settings.app_name,
            "version": VERSION,
            "zones": len(services.registry),
            "registry_saved": not services.registry.dirty,
            "players": len(services.host.get_players()),
            "poll_loop_running": services.poll_loop.running,
            "polls": services.poll_loop.polls,
        }

    @app.post("/api/poll")
    async def poll_now():
        """Run one zone poll immediately and return the transitions."""
        transitions = services.poll_loop.poll()
        return {"transitions": [t.to_dict() for t in transitions]}

    return app


app = create_app()


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host=default_settings.host, port=default_settings.port)
