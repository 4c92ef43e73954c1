"""
ruleguard - validation service for business-rule conditions and actions.

Features:
- Condition expression, action list and full rule payload validation
- Safety guard against oversized or deeply nested expressions
- Structured logging with correlation IDs
- Prometheus metrics
- Health checks (liveness and readiness)
"""
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.responses import JSONResponse
from prometheus_client import make_asgi_app

from . import __version__
from .config import get_settings
from .logging import SERVICE_NAME, setup_logging, get_logger
from .api.rules_router import router as rules_router
from .middleware import (
    CorrelationIdMiddleware,
    ErrorHandlerMiddleware,
    MetricsMiddleware,
    PayloadSizeMiddleware,
)
from .metrics import Metrics
from .health import HealthChecker

settings = get_settings()

setup_logging(json_output=settings.LOG_JSON, service_name=SERVICE_NAME)
logger = get_logger()

metrics = Metrics(service_name=SERVICE_NAME, version=__version__)
health_checker = HealthChecker(service_name=SERVICE_NAME, version=__version__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    logger.info("service_starting", version=__version__, env=settings.ENV)
    yield
    logger.info("service_stopping")
    metrics.app_up.labels(service=SERVICE_NAME, version=__version__).set(0)


app = FastAPI(
    title="ruleguard",
    version=__version__,
    description="Structural validation of business-rule conditions and actions",
    lifespan=lifespan,
)
app.state.metrics = metrics

# Starlette runs the last added middleware first: correlation ID wraps everything
app.add_middleware(PayloadSizeMiddleware, max_size=settings.MAX_PAYLOAD_SIZE)
app.add_middleware(ErrorHandlerMiddleware)
app.add_middleware(MetricsMiddleware, metrics=metrics)
app.add_middleware(CorrelationIdMiddleware)

app.include_router(rules_router)

app.mount("/metrics", make_asgi_app(registry=metrics.registry))


@app.get("/health")
async def health():
    """Liveness check - returns 200 while the process is running."""
    logger.debug("health_check_liveness")
    return health_checker.liveness()


@app.get("/health/ready")
async def health_ready():
    """
    Readiness check.

    Returns:
        200: Service is ready to handle traffic
        503: Service is not ready
    """
    logger.debug("health_check_readiness")
    result = health_checker.readiness()
    status_code = 200 if result["status"] == "ready" else 503
    return JSONResponse(status_code=status_code, content=result)


def run():
    """Console entry point."""
    import uvicorn

    uvicorn.run(
        "ruleguard.main:app",
        host="0.0.0.0",
        port=settings.SERVICE_PORT,
    )


if __name__ == "__main__":
    run()
