"""
Shared utilities for the VTU backend

This package contains common utilities used across services.
"""

from .logger import setup_logging, RequestLogger, get_request_logger
from .security import compute_signature, verify_signature

__all__ = [
    "setup_logging",
    "RequestLogger",
    "get_request_logger",
    "compute_signature",
    "verify_signature",
]
