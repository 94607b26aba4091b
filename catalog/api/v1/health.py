"""Health check endpoint."""

from fastapi import APIRouter

from catalog.core.config import settings
from catalog.core.responses import DataResponse

router = APIRouter()


@router.get("/healthcheck")
async def healthcheck() -> DataResponse[dict]:
    """Report service status, environment and version."""
    return DataResponse(
        data={
            "status": "available",
            "environment": settings.environment,
            "version": settings.app_version,
        }
    )
