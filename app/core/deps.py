"""
Dependencies for FastAPI endpoints
"""
from typing import Generator
from fastapi import Request
from app.core.config import Settings


def get_db(request: Request) -> Generator:
    """Dependency for getting a database session from the app's store client"""
    db = request.app.state.database.session()
    try:
        yield db
    finally:
        db.close()


def get_app_settings(request: Request) -> Settings:
    """Settings the running app was built with"""
    return request.app.state.settings
