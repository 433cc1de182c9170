"""
FastAPI Dependencies
Access to the per-app upstream clients created in the lifespan
"""

from fastapi import Request

from app.utils.config import Settings
from app.utils.forwarder import RouteForwarder
from app.utils.token_manager import TokenManager


def get_forwarder(request: Request) -> RouteForwarder:
    """Dependency to get the route forwarder"""
    return request.app.state.forwarder


def get_token_manager(request: Request) -> TokenManager:
    """Dependency to get the eBills token manager"""
    return request.app.state.token_manager


def get_app_settings(request: Request) -> Settings:
    """Dependency to get the settings the app was built with"""
    return request.app.state.settings
