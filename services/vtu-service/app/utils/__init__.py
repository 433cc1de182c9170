"""
Utility modules for vtu service
"""

from .config import Settings, get_settings
from .errors import (
    ProxyError,
    ValidationError,
    AuthenticationError,
    UpstreamError,
    TransportError,
    SignatureError,
)
from .token_manager import TokenManager
from .forwarder import Credential, ForwardSpec, ProxyResult, RouteForwarder, Upstream

__all__ = [
    "Settings",
    "get_settings",
    "ProxyError",
    "ValidationError",
    "AuthenticationError",
    "UpstreamError",
    "TransportError",
    "SignatureError",
    "TokenManager",
    "Credential",
    "ForwardSpec",
    "ProxyResult",
    "RouteForwarder",
    "Upstream",
]
