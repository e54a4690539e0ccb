"""
API v1 router: aggregates the v1 endpoint modules.
"""

from fastapi import APIRouter

from backoffice import __version__
from backoffice.api.v1 import metrics

router = APIRouter(
    responses={
        401: {"description": "Unauthorized"},
        403: {"description": "Forbidden"},
        404: {"description": "Not Found"},
        422: {"description": "Validation Error"},
        500: {"description": "Internal Server Error"},
    }
)

router.include_router(metrics.router)


@router.get("/health", tags=["System Health"])
def api_health_check():
    return {
        "status": "healthy",
        "version": __version__,
        "api_version": "v1",
    }
