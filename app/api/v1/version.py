"""
Version and metadata endpoint
"""
from fastapi import APIRouter, Depends
from app.core.config import Settings
from app.core.constants import SERVICE_NAME, DEFAULT_VERSION
from app.core.deps import get_app_settings

router = APIRouter()


@router.get("/version")
def get_version(settings: Settings = Depends(get_app_settings)):
    """
    Get application version and metadata

    Returns:
        Version information including service name, version and environment
    """
    return {
        "service": SERVICE_NAME,
        "version": settings.VERSION or DEFAULT_VERSION,
        "env": settings.APP_ENV,
    }
