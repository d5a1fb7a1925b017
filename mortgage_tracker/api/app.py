"""FastAPI application entry point."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from mortgage_tracker.api.routes import engine, mortgages, requests, terms
from mortgage_tracker.config import Settings, settings as default_settings
from mortgage_tracker.data.auth import AuthClient
from mortgage_tracker.data.repository import Database

logger = logging.getLogger(__name__)


def create_app(settings: Settings = default_settings) -> FastAPI:
    connection = settings.connection()

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        logging.basicConfig(level=settings.log_level)
        app.state.database = Database(connection, echo=settings.debug)
        app.state.auth_client = AuthClient(connection)
        logger.info("Connected to store at %s", connection.url)
        try:
            yield
        finally:
            await app.state.database.dispose()

    app = FastAPI(
        title="Mortgage Tracker",
        description="Variable-rate mortgage schedules and early payoff simulation",
        version="0.1.0",
        lifespan=lifespan,
    )

    app.add_middleware(
        CORSMiddleware,
        allow_origins=["*"],
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    app.include_router(engine.router)
    app.include_router(mortgages.router)
    app.include_router(requests.router)
    app.include_router(terms.router)

    @app.get("/health")
    async def health():
        return {"status": "ok"}

    return app


app = create_app()
