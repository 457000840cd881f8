"""
Refonte Quiz API Server
Website-redesign readiness quiz: scoring and lead submission.
"""

import os
import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI, Request
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app import __version__
from app.health.router import router as health_router
from app.quiz.catalog import get_catalog
from app.quiz.router import router as quiz_router
from app.submissions.router import MSG_FAILURE, router as submissions_router

logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    # malformed catalog data fails startup, not a visitor's quiz run
    get_catalog()
    yield


# ============================================
# App Configuration
# ============================================
app = FastAPI(
    title="Refonte Quiz API",
    description="Website-redesign readiness quiz",
    version=__version__,
    lifespan=lifespan
)

# ============================================
# CORS Configuration
# ============================================
CORS_ALLOW_ORIGINS = [
    origin.strip()
    for origin in os.getenv("CORS_ALLOW_ORIGINS", "*").split(",")
    if origin.strip()
]

app.add_middleware(
    CORSMiddleware,
    allow_origins=CORS_ALLOW_ORIGINS,
    allow_credentials=CORS_ALLOW_ORIGINS != ["*"],
    allow_methods=["GET", "POST", "OPTIONS"],
    allow_headers=["*"],
)

# ============================================
# Routers
# ============================================
app.include_router(health_router)
app.include_router(quiz_router)
app.include_router(submissions_router)


@app.exception_handler(Exception)
async def unhandled_exception(request: Request, exc: Exception):
    logger.exception(f"Unhandled error on {request.method} {request.url.path}: {exc}")
    return JSONResponse(status_code=500, content={"success": False, "message": MSG_FAILURE})


@app.get("/")
def root():
    return {"service": "refonte-quiz-api", "version": __version__}
