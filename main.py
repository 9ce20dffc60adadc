"""
FastAPI Application Entry Point

Integrates:
  - Slack interaction webhook (mark task complete)
  - Health checks
  - Middleware for logging & error handling

Run: uvicorn main:app --reload --host 0.0.0.0 --port 8000
"""

import logging
import os
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.responses import JSONResponse

from infra.bootstrap import get_bootstrap
from transport.slack.webhook import router as slack_router

# Setup logging
logging.basicConfig(
    level=os.getenv("LOG_LEVEL", "INFO").upper(),
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan: startup and shutdown handlers.
    """
    # Startup
    bootstrap = get_bootstrap()
    config = bootstrap.config
    logger.info("=" * 60)
    logger.info("Task completion relay starting up...")
    logger.info(f"Environment: {config.environment}")
    logger.info(f"Document backend: {config.document_backend}")
    missing = config.missing_settings()
    if missing:
        logger.warning(f"Missing required settings: {', '.join(missing)}")
    logger.info("=" * 60)

    yield

    # Shutdown
    logger.info("Task completion relay shutting down...")


# Create FastAPI app
app = FastAPI(
    title="Task Completion Relay",
    description="Marks document tasks complete from Slack button clicks",
    version="1.0.0",
    lifespan=lifespan,
)


# Middleware for logging
@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests."""
    logger.debug(f"{request.method} {request.url.path}")
    try:
        response = await call_next(request)
        return response
    except Exception as e:
        logger.error(f"Request error: {str(e)}", exc_info=True)
        return JSONResponse(
            status_code=500,
            content={"detail": "Internal server error"},
        )


# Include routers
app.include_router(slack_router)


# Health check endpoints
@app.get("/health/live")
async def health_live():
    """Live health check (Kubernetes liveness probe)."""
    return {"status": "alive"}


@app.get("/health/ready")
async def health_ready():
    """Readiness health check (Kubernetes readiness probe)."""
    missing = get_bootstrap().config.missing_settings()
    if missing:
        return JSONResponse(
            status_code=503,
            content={"status": "not_ready", "missing": missing},
        )
    return {"status": "ready"}


@app.get("/")
async def root():
    """Root endpoint with API info."""
    return {
        "name": "Task Completion Relay",
        "version": "1.0.0",
        "status": "running",
        "endpoints": {
            "slack_actions": "POST /slack/actions",
            "health_live": "GET /health/live",
            "health_ready": "GET /health/ready",
        },
    }


if __name__ == "__main__":
    import uvicorn

    config = get_bootstrap().config
    uvicorn.run(
        "main:app",
        host="0.0.0.0",
        port=config.app_port,
        reload=config.environment == "development",
    )
