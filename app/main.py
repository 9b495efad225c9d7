"""CHANLENS — FastAPI Application Entry Point.

Channel analytics: daily snapshot storage plus derived growth, ratio and
takeoff metrics.
"""

import os
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from app.database import init_db, test_connection
from app.scheduler.jobs import start_scheduler, stop_scheduler
from app.api.metrics_routes import router as metrics_router
from app.api.channel_routes import router as channel_router
from app.core.logging import get_logger

logger = get_logger("main")

IS_SERVERLESS = bool(
    os.environ.get("VERCEL") or os.environ.get("AWS_LAMBDA_FUNCTION_NAME")
)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Startup and shutdown lifecycle."""
    logger.info("CHANLENS starting up...")
    logger.info(f"Environment: {'SERVERLESS' if IS_SERVERLESS else 'LOCAL'}")
    if test_connection():
        try:
            init_db()
        except Exception as e:
            logger.error(f"Table creation failed: {e}")
    else:
        logger.error("Database NOT connected — endpoints will fail")
    if not IS_SERVERLESS:
        start_scheduler()
    yield
    if not IS_SERVERLESS:
        stop_scheduler()
    logger.info("CHANLENS shut down")


app = FastAPI(
    title="CHANLENS",
    description="Channel analytics — store daily channel snapshots, derive window growth, ratios and takeoff months.",
    version="1.0.0",
    lifespan=lifespan,
)

# CORS
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Routers — metrics first so /channels/metrics is not read as a channel ID
app.include_router(metrics_router)
app.include_router(channel_router)


@app.get("/health", tags=["System"])
async def health_check():
    """Health check endpoint."""
    return {
        "status": "healthy",
        "service": "chanlens",
        "version": "1.0.0",
    }
