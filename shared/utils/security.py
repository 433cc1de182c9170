"""
Security utilities for the VTU backend

Webhook signature helpers shared by services that accept provider callbacks.
"""

import hashlib
import hmac
from typing import Optional, Union


def compute_signature(payload: Union[str, bytes], key: str) -> str:
    """
    Hex HMAC-SHA256 of a raw payload

    Args:
        payload: Raw request body exactly as received
        key: Shared signing key

    Returns:
        Lowercase hexadecimal digest
    """
    if isinstance(payload, str):
        payload = payload.encode('utf-8')
    return hmac.new(key.encode('utf-8'), payload, hashlib.sha256).hexdigest()


def verify_signature(payload: Union[str, bytes], signature: Optional[str], key: str) -> bool:
    """Constant-time comparison of a received signature against the expected one"""
    if not signature or not key:
        return False
    expected = compute_signature(payload, key).encode('ascii')
    # Header values may carry non-ASCII characters; compare as bytes
    received = signature.strip().lower().encode('utf-8', 'surrogateescape')
    return hmac.compare_digest(expected, received)
