"""API Routes module"""
from fastapi import APIRouter

from .job_posts import router as job_posts_router
from .applications import router as applications_router

# Main API router
api_router = APIRouter()

api_router.include_router(job_posts_router, prefix="/job-posts", tags=["Job Posts"])
api_router.include_router(applications_router, prefix="/applications", tags=["Applications"])

__all__ = ["api_router"]
