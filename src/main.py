"""LLM Readiness Checker API."""

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware

from api.routes import analyses_router, health_router, leads_router, users_router
from config import settings
from db.session import init_models

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    """
    Application lifespan manager.

    Code before `yield` runs on startup.
    Code after `yield` runs on shutdown.
    """
    logger.info(f"Starting {settings.app_name}...")
    await init_models()
    yield
    logger.info(f"Shutting down {settings.app_name}...")


app = FastAPI(
    title="LLM Readiness Checker API",
    description="Scores how ready a website is to be consumed by LLMs and AI agents.",
    version="0.1.0",
    lifespan=lifespan,
)

app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_credentials=True,
    allow_methods=["*"],
    allow_headers=["*"],
)

# Register routers
app.include_router(health_router, prefix="/api/v1")
app.include_router(users_router, prefix="/api/v1")
app.include_router(analyses_router, prefix="/api/v1")
app.include_router(leads_router, prefix="/api/v1")


@app.get("/", include_in_schema=False)
async def root():
    """Point clients at the API docs."""
    return {
        "service": settings.app_name,
        "docs": "/docs",
        "health": "/api/v1/health",
    }
