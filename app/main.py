"""FastAPI application entry point."""

from __future__ import annotations

import logging
from contextlib import asynccontextmanager

from fastapi import FastAPI

from app.api.router import api_router
from app.config import configure_logging
from app.db.engine import create_all, engine
from app.services.job_queue import job_queue

configure_logging()
logger = logging.getLogger(__name__)


@asynccontextmanager
async def lifespan(app: FastAPI):
    await create_all()

    await job_queue.start()
    # Pick up jobs a previous process left queued or half-run
    await job_queue.recover()
    yield
    await job_queue.stop()
    await engine.dispose()


app = FastAPI(
    title="Inspection Comparison Service",
    description="Move-in/move-out photo comparison with AI damage detection and metered credits.",
    version="0.1.0",
    lifespan=lifespan,
)

app.include_router(api_router)


@app.get("/health")
async def health():
    return {"status": "ok", "job_queue": "running" if job_queue.running else "stopped"}
