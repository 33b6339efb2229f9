"""FastAPI application factory and configuration."""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import PlainTextResponse
from typing import Optional
import logging
import sys

from nodefleet.api import clusters, features, health, nodes, operations
from nodefleet.config import Settings, settings as default_settings
from nodefleet.database import create_engine, create_session_factory, init_db
from nodefleet.logging_config import setup_logging
from nodefleet.repositories.base import ClusterRepository, NodeRepository, OperationRepository
from nodefleet.repositories.sql import SqlClusterRepository, SqlNodeRepository, SqlOperationRepository
from nodefleet.services.operation_service import OperationService
from nodefleet.simulator import RebootSimulator

logger = logging.getLogger(__name__)

CORS_METHODS = ["GET", "POST", "PUT", "PATCH", "DELETE"]


async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed path, query or body: 400 with a plain text reason."""
    logger.error(f"There was an error with the request. Path: {request.url.path}, errors: {exc.errors()}")
    return PlainTextResponse(f"Bad request: {exc.errors()}", status_code=400)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Initialize database and background components on startup."""
    engine = app.state.engine
    reboot_simulator = app.state.reboot_simulator
    if engine is not None:
        await init_db(engine)
    if reboot_simulator is not None:
        reboot_simulator.start()
    try:
        yield
    finally:
        if reboot_simulator is not None:
            await reboot_simulator.stop()
        if engine is not None:
            await engine.dispose()


def create_app(
    settings: Optional[Settings] = None,
    cluster_repository: Optional[ClusterRepository] = None,
    node_repository: Optional[NodeRepository] = None,
    operation_repository: Optional[OperationRepository] = None,
) -> FastAPI:
    """Create and configure FastAPI application.

    Repositories not passed in are backed by the database at
    `settings.DATABASE_URL`, which must then be set.
    """
    settings = settings or default_settings

    app = FastAPI(
        title="nodefleet API",
        description="Control plane for clusters of nodes and their power operations",
        version=settings.APP_VERSION,
        lifespan=lifespan,
    )

    engine = None
    if cluster_repository is None or node_repository is None or operation_repository is None:
        if not settings.DATABASE_URL:
            raise RuntimeError("No DATABASE_URL configured")
        engine = create_engine(settings.DATABASE_URL)
        session_factory = create_session_factory(engine)
        cluster_repository = cluster_repository or SqlClusterRepository(session_factory)
        node_repository = node_repository or SqlNodeRepository(session_factory)
        operation_repository = operation_repository or SqlOperationRepository(session_factory)

    reboot_simulator = None
    if settings.REBOOT_SIMULATION_DELAY is not None:
        reboot_simulator = RebootSimulator(node_repository, settings.REBOOT_SIMULATION_DELAY)

    app.state.settings = settings
    app.state.engine = engine
    app.state.cluster_repository = cluster_repository
    app.state.node_repository = node_repository
    app.state.operation_service = OperationService(node_repository, operation_repository)
    app.state.reboot_simulator = reboot_simulator

    # Middleware
    if settings.CORS_ENABLED:
        app.add_middleware(
            CORSMiddleware,
            allow_origins=settings.CORS_ORIGINS,
            allow_credentials=True,
            allow_methods=CORS_METHODS,
            allow_headers=["*"],
        )

    app.add_exception_handler(RequestValidationError, request_validation_handler)

    # Routes
    app.include_router(health.router)
    app.include_router(features.router)
    app.include_router(clusters.router)
    app.include_router(nodes.router)
    app.include_router(operations.router)

    return app


def run():
    """Entry point for the `nodefleet` console script."""
    import uvicorn

    setup_logging(default_settings.LOG_LEVEL, json_logs=default_settings.use_json_logs)

    if not default_settings.DATABASE_URL:
        logger.error("No DATABASE_URL env var found")
        sys.exit(1)

    app = create_app(default_settings)
    logger.debug(f"Starting our server at {default_settings.HOST}:{default_settings.PORT}")
    # uvicorn exits non-zero when startup fails or the port can't be bound
    uvicorn.run(app, host=default_settings.HOST, port=default_settings.PORT, log_config=None)


if __name__ == "__main__":
    run()
