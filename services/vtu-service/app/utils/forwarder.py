"""
Route Forwarder
Builds upstream requests for eBills and Paystack, attaches credentials,
and hands the parsed JSON back to the route.

Each exposed route is described once by an immutable ForwardSpec; the
forwarder is the only place that talks HTTP to either provider.
"""

from dataclasses import dataclass
from enum import Enum
from typing import Any, Dict, Mapping, Optional, Tuple
from urllib.parse import quote

import httpx
import structlog

from .errors import TransportError, UpstreamError
from .token_manager import TokenManager

logger = structlog.get_logger(__name__)


class Upstream(str, Enum):
    EBILLS = "ebills"
    PAYSTACK = "paystack"


class Credential(str, Enum):
    TOKEN = "token"     # eBills bearer token from the TokenManager
    SECRET = "secret"   # static Paystack secret key


@dataclass(frozen=True)
class ForwardSpec:
    """Static description of one upstream call"""
    upstream: Upstream
    path: str
    method: str = "GET"
    credential: Credential = Credential.TOKEN
    query_params: Tuple[str, ...] = ()

    @property
    def has_body(self) -> bool:
        return self.method in ("POST", "PUT", "PATCH")


@dataclass(frozen=True)
class ProxyResult:
    """Upstream status code and parsed JSON body"""
    status_code: int
    body: Any

    @property
    def ok(self) -> bool:
        return 200 <= self.status_code < 300

    @property
    def data(self) -> Any:
        """The ``data`` member both providers wrap their payloads in"""
        if isinstance(self.body, dict):
            return self.body.get("data")
        return None

    def raise_for_upstream(self, default_message: str) -> None:
        """Raise UpstreamError carrying the upstream status unless 2xx"""
        if self.ok:
            return
        message = default_message
        if isinstance(self.body, dict) and self.body.get("message"):
            message = str(self.body["message"])
        raise UpstreamError(message, status_code=self.status_code)


class RouteForwarder:
    """Sends ForwardSpec-described requests to the configured providers"""

    def __init__(
        self,
        client: httpx.AsyncClient,
        token_manager: TokenManager,
        ebills_api_url: str,
        paystack_api_url: str,
        paystack_secret_key: str
    ):
        self._client = client
        self.token_manager = token_manager
        self.paystack_secret_key = paystack_secret_key
        self._base_urls = {
            Upstream.EBILLS: ebills_api_url,
            Upstream.PAYSTACK: paystack_api_url,
        }

    def build_url(self, spec: ForwardSpec, path_params: Optional[Mapping[str, str]] = None) -> str:
        path = spec.path
        if path_params:
            path = path.format(**{k: quote(str(v), safe="") for k, v in path_params.items()})
        base = self._base_urls[spec.upstream]
        return f"{base.rstrip('/')}/{path.lstrip('/')}"

    async def build_headers(self, spec: ForwardSpec) -> Dict[str, str]:
        headers: Dict[str, str] = {}

        if spec.credential == Credential.TOKEN:
            token = await self.token_manager.ensure_token()
            headers["Authorization"] = f"Bearer {token}"
        elif spec.credential == Credential.SECRET:
            headers["Authorization"] = f"Bearer {self.paystack_secret_key}"

        if spec.has_body:
            headers["Content-Type"] = "application/json"

        return headers

    async def forward(
        self,
        spec: ForwardSpec,
        *,
        query: Optional[Mapping[str, Any]] = None,
        body: Any = None,
        path_params: Optional[Mapping[str, str]] = None
    ) -> ProxyResult:
        """
        Send one upstream request and parse its JSON reply.

        Only the query parameters named by the ForwardSpec are passed on, and only
        when present. Non-2xx replies are returned, not raised; the caller
        decides whether to relay or reshape them.

        Raises:
            AuthenticationError: eBills token could not be acquired
            TransportError: network failure or non-JSON upstream body
        """
        headers = await self.build_headers(spec)
        url = self.build_url(spec, path_params)

        params = None
        if query and spec.query_params:
            params = {
                name: query[name]
                for name in spec.query_params
                if query.get(name) not in (None, "")
            } or None

        payload = body if spec.has_body else None

        try:
            response = await self._client.request(
                spec.method,
                url,
                headers=headers,
                params=params,
                json=payload
            )
        except httpx.HTTPError as e:
            logger.error(
                "Upstream request failed",
                upstream=spec.upstream.value,
                method=spec.method,
                path=spec.path,
                error=str(e)
            )
            raise TransportError(f"{spec.upstream.value} request failed: {e}") from e

        logger.info(
            "Upstream call",
            upstream=spec.upstream.value,
            method=spec.method,
            path=spec.path,
            status_code=response.status_code
        )

        if response.status_code == 401 and spec.credential == Credential.TOKEN:
            # Next request will authenticate again
            self.token_manager.invalidate()

        try:
            parsed = response.json()
        except ValueError as e:
            logger.error(
                "Upstream returned non-JSON body",
                upstream=spec.upstream.value,
                path=spec.path,
                status_code=response.status_code
            )
            raise TransportError(f"Invalid JSON response from {spec.upstream.value}") from e

        return ProxyResult(status_code=response.status_code, body=parsed)
