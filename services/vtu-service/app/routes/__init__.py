"""
API routes for vtu service
"""

from . import health, ebills, paystack, withdrawal, webhooks, purchases

__all__ = ["health", "ebills", "paystack", "withdrawal", "webhooks", "purchases"]
