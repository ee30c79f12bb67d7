"""
Production FastAPI Application

Run with: granian --interface asgi src.main:app
"""

from collections.abc import AsyncIterator
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import RedirectResponse

from src.platform.app_factory import create_app
from src.platform.config.di import container
from src.platform.config.wire_modules import WIRE_MODULES
from src.platform.logging.loguru_io import Logger
from src.platform.observability.tracing import TracingConfig


@asynccontextmanager
async def lifespan(app: FastAPI) -> AsyncIterator[None]:
    """Manage application lifespan: startup and shutdown."""
    Logger.base.info('🚀 [Reservation Service] Starting up...')

    tracing = TracingConfig(service_name='club-reservation')
    tracing.setup()
    Logger.base.info('📊 [Reservation Service] OpenTelemetry tracing configured')

    container.wire(modules=WIRE_MODULES)
    Logger.base.info('🔌 [Reservation Service] Dependency injection wired')

    backend = container.config_service().STORE_BACKEND
    database = container.database()
    if backend == 'postgres':
        await database.create_db_and_tables()
        tracing.instrument_sqlalchemy(engine=database.engine)
        Logger.base.info('🗄️  [Reservation Service] Database ready + instrumented')
    else:
        Logger.base.warning('🧪 [Reservation Service] Using the in-memory store')

    Logger.base.info('✅ [Reservation Service] Ready to serve requests')
    try:
        yield
    finally:
        Logger.base.info('🛑 [Reservation Service] Shutting down...')
        if backend == 'postgres':
            await database.dispose()
        tracing.shutdown()
        container.unwire()


app = create_app(lifespan=lifespan)


@app.get('/')
async def root() -> RedirectResponse:
    return RedirectResponse(url='/docs')
