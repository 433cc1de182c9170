"""
Error types raised by the proxy layer.

Every error carries the HTTP status the route should answer with and renders
to the single response envelope ``{"success": false, "error": ...}``.
"""

from typing import Any, Dict, Optional


class ProxyError(Exception):
    """Base error for anything a route can fail with"""

    status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None, details: Any = None):
        super().__init__(message)
        self.message = message
        if status_code is not None:
            self.status_code = status_code
        self.details = details

    def to_envelope(self) -> Dict[str, Any]:
        envelope: Dict[str, Any] = {"success": False, "error": self.message}
        if self.details is not None:
            envelope["details"] = self.details
        return envelope


class ValidationError(ProxyError):
    """Missing or malformed inbound input"""

    status_code = 400


class AuthenticationError(ProxyError):
    """Token acquisition against the bill-payment provider failed"""

    def __init__(self, upstream_status: int, message: Optional[str] = None):
        super().__init__(
            message or f"Auth failed: {upstream_status}",
            details={"upstream_status": upstream_status}
        )
        self.upstream_status = upstream_status


class UpstreamError(ProxyError):
    """Upstream answered with a non-2xx status; that status is relayed"""

    def __init__(self, message: str, status_code: int, details: Any = None):
        super().__init__(message, status_code=status_code, details=details)


class TransportError(ProxyError):
    """Network failure or an upstream body that is not JSON"""


class SignatureError(ProxyError):
    """Webhook signature did not match"""

    status_code = 403
