"""
Event Store - HTTP access to Event records kept in DynamoDB.

Features:
- Event creation and lookup by id
- Table provisioning at startup
- Structured logging with correlation IDs
- Prometheus metrics
- Health checks (liveness and readiness)
"""
from contextlib import asynccontextmanager
from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse
from starlette.exceptions import HTTPException
from .config import Settings, get_settings
from .logging import setup_logging, get_logger
from .api.router import router
from .api.metrics_router import router as metrics_router
from .middleware import (
    CorrelationIdMiddleware,
    ErrorHandlerMiddleware,
    MetricsMiddleware,
    ValidationMiddleware,
)
from .middleware.error_handler import http_exception_handler
from .metrics import Metrics
from .health import HealthChecker
from .services.event_store import EventStore, create_adapter

SERVICE_NAME = "eventstore"
VERSION = "0.1.0"

logger = get_logger()


def create_app(settings: Settings | None = None, store: EventStore | None = None) -> FastAPI:
    """
    Build the FastAPI application.

    The store is built from settings during startup unless one is
    passed in. Either way its table is provisioned before the app
    starts serving; a provisioning failure aborts startup.
    """
    settings = settings or get_settings()

    setup_logging(json_output=settings.LOG_JSON, service_name=SERVICE_NAME, level=settings.LOG_LEVEL)

    metrics = Metrics(service_name=SERVICE_NAME, version=VERSION)
    health_checker = HealthChecker(service_name=SERVICE_NAME, version=VERSION)

    @asynccontextmanager
    async def lifespan(app: FastAPI):
        """
        Startup and shutdown.

        Builds the event store and provisions its table. The table check
        blocks until the table is active; no request is served before it
        returns.
        """
        logger.info(
            "service_starting",
            version=VERSION,
            env=settings.ENV,
            backend=settings.STORE_BACKEND,
            table=settings.TABLE_NAME,
        )
        ready_store = store or EventStore(adapter=create_adapter(settings), metrics=metrics)
        ready_store.ensure_table()
        app.state.store = ready_store
        logger.info("service_ready", backend=ready_store.backend)

        yield

        logger.info("service_stopping")
        ready_store.close()
        app.state.store = None
        metrics.app_up.labels(service=SERVICE_NAME, version=VERSION).set(0)

    app = FastAPI(
        title="Event Store",
        version=VERSION,
        description="Create and fetch Event records backed by DynamoDB",
        lifespan=lifespan,
    )
    app.state.settings = settings
    app.state.metrics = metrics
    app.state.store = None

    # Last added runs first: correlation ID, metrics, validation, errors
    app.add_middleware(ErrorHandlerMiddleware)
    app.add_middleware(ValidationMiddleware, max_size=settings.MAX_EVENT_SIZE)
    app.add_middleware(MetricsMiddleware, metrics=metrics)
    app.add_middleware(CorrelationIdMiddleware)

    app.add_exception_handler(HTTPException, http_exception_handler)

    app.include_router(router)
    app.include_router(metrics_router)

    @app.get("/health")
    async def health():
        """
        Liveness probe - basic health check.

        Returns 200 if service is running.
        """
        logger.debug("health_check_liveness")
        return health_checker.liveness()

    @app.get("/health/ready")
    async def health_ready(request: Request):
        """
        Readiness probe - comprehensive health check.

        Checks the event store, disk space and memory.

        Returns:
            200: Service is ready to handle traffic
            503: Service is not ready
        """
        logger.debug("health_check_readiness")
        metrics.update_system_metrics()
        result = await health_checker.readiness(request.app.state.store)
        status_code = 200 if result["status"] == "ready" else 503
        return JSONResponse(content=result, status_code=status_code)

    return app
