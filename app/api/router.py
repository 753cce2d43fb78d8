"""Central router that includes all sub-routers."""

from fastapi import APIRouter

from app.api.comparisons import router as comparisons_router
from app.api.credit_usage import router as credit_usage_router
from app.api.jobs import router as jobs_router

api_router = APIRouter()
api_router.include_router(comparisons_router)
api_router.include_router(credit_usage_router)
api_router.include_router(jobs_router)
