"""
Main API router
"""
from fastapi import APIRouter

from app.api.v1 import (
    health,
    version,
    employees,
    attendance,
)

api_router = APIRouter()

api_router.include_router(health.router, tags=["health"])
api_router.include_router(version.router, tags=["version"])
api_router.include_router(employees.router, prefix="/employees", tags=["employees"])
api_router.include_router(attendance.router, prefix="/attendance", tags=["attendance"])
