"""
Fix Analytics - FastAPI Backend

Main application entry point and configuration.
"""

import logging
import os
from contextlib import asynccontextmanager
from pathlib import Path

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from fixanalytics.api.logs import analyze_router, folder_router, router as logs_router
from fixanalytics.services.repository import get_repository, init_repository


# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s"
)
logger = logging.getLogger(__name__)


APP_NAME = "Fix Analytics"
APP_VERSION = "0.1.0"

# Default data folder (can be overridden via API or environment)
DEFAULT_DATA_FOLDER = Path("./data/logs")
DATA_FOLDER_ENV = "FIXANALYTICS_DATA_FOLDER"


@asynccontextmanager
async def lifespan(app: FastAPI):
    """Application lifespan handler."""
    logger.info("Starting Fix Analytics backend")

    repo = get_repository()
    if repo.data_folder is None:
        data_folder = Path(os.getenv(DATA_FOLDER_ENV, str(DEFAULT_DATA_FOLDER)))
        if data_folder.exists():
            init_repository(data_folder)
            logger.info(f"Initialized repository with folder: {data_folder}")
        else:
            logger.info(f"Default data folder not found: {data_folder}")
            logger.info("Use POST /folder to set data folder")

    yield

    logger.info("Shutting down Fix Analytics backend")


app = FastAPI(
    title=APP_NAME,
    description="""
    Backend API for positional fix-log analysis.

    ## Features
    - Parse fix logs (timestamp, position, altitude, heading, satellites)
    - Derive distance, speed, acceleration and heading change per sample
    - Estimate signal quality and horizontal accuracy from satellite counts
    - Classify transmission gaps, drift and jitter into a reliability score
    - Summarize motion, signal, temporal and spatio-temporal behaviour

    ## Data Flow
    1. POST raw records to /analyze, or
    2. Set a folder of CSV logs via POST /folder
    3. List logs via GET /logs
    4. Get summaries via GET /logs/{id} and samples via GET /logs/{id}/samples
    """,
    version=APP_VERSION,
    lifespan=lifespan,
)


# CORS middleware (allow all origins for development)
app.add_middleware(
    CORSMiddleware,
    allow_origins=["*"],
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)


app.include_router(analyze_router)
app.include_router(logs_router)
app.include_router(folder_router)


@app.get("/")
async def root():
    """Root endpoint - basic health check."""
    return {
        "name": APP_NAME,
        "version": APP_VERSION,
        "status": "running",
    }


@app.get("/health")
async def health_check():
    """Health check endpoint."""
    repo = get_repository()

    return {
        "status": "healthy",
        "data_folder": str(repo.data_folder) if repo.data_folder else None,
        "log_count": repo.log_count,
    }
