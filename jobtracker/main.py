from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
import logging
import os
from pathlib import Path

from jobtracker.database import engine, Base
from jobtracker import models  # Import all models to register them with Base
from jobtracker.routes import applications, gamification, users
from jobtracker.constants import (
    CORS_ALLOWED_ORIGINS,
    DEFAULT_LOG_DIRECTORY_PROD,
    DEFAULT_LOG_DIRECTORY_DEV,
    DEFAULT_LOG_FILE,
)

LOG_DIR = os.getenv("JOB_TRACKER_LOG_DIR", DEFAULT_LOG_DIRECTORY_PROD)
LOG_FILE = os.getenv("JOB_TRACKER_LOG_FILE", DEFAULT_LOG_FILE)

# Create log directory if it doesn't exist (for development)
try:
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE
except PermissionError:
    # Fallback to local directory if no permissions for /var/log
    LOG_DIR = DEFAULT_LOG_DIRECTORY_DEV
    Path(LOG_DIR).mkdir(parents=True, exist_ok=True)
    log_path = Path(LOG_DIR) / LOG_FILE

logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s',
    handlers=[
        logging.FileHandler(log_path),
        logging.StreamHandler()  # Also log to console
    ]
)

logger = logging.getLogger("job_tracker")

# Create database tables
Base.metadata.create_all(bind=engine)

app = FastAPI(
    title="Job Tracker API",
    description="Job application tracker with points, ranks, streaks and milestones",
    version="1.0.0"
)

cors_origins = os.getenv("JOB_TRACKER_CORS_ORIGINS")

app.add_middleware(
    CORSMiddleware,
    allow_origins=cors_origins.split(",") if cors_origins else CORS_ALLOWED_ORIGINS,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

app.include_router(users.router)
app.include_router(applications.router)
app.include_router(gamification.router)


@app.on_event("startup")
async def startup_event():
    logger.info(f"Job Tracker API started. Logging to: {log_path}")


@app.on_event("shutdown")
async def shutdown_event():
    logger.info("Shutting down Job Tracker API")


# Health check (no auth required)
@app.get("/")
async def root():
    return {"message": "Job Tracker API", "status": "active"}
