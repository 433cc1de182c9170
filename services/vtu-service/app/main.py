"""
VTU Service - Main Application
FastAPI proxy in front of the eBills bill-payment API and the Paystack
payment API
"""

import time
from contextlib import asynccontextmanager
from typing import AsyncGenerator, Optional

import httpx
import structlog
from fastapi import FastAPI, Request
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import JSONResponse

from app.routes import health, ebills, paystack, withdrawal, webhooks, purchases
from app.utils.config import Settings, get_settings
from app.utils.errors import ProxyError
from app.utils.forwarder import RouteForwarder
from app.utils.token_manager import TokenManager
from shared.utils.logger import get_request_logger, setup_logging


def configure_logging(settings: Settings) -> None:
    """stdlib handlers from the shared config, structlog rendering on top"""
    setup_logging(settings.logging_config_path, settings.log_level, settings.log_format)

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.format_exc_info,
            structlog.processors.JSONRenderer()
        ],
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


logger = structlog.get_logger(__name__)


def _validation_message(exc: RequestValidationError) -> str:
    problems = []
    for error in exc.errors():
        location = [str(part) for part in error.get("loc", ()) if part not in ("body", "query")]
        field = ".".join(location) or "request"
        if error.get("type") == "missing":
            problems.append(f"{field} is required")
        else:
            problems.append(f"{field}: {error.get('msg')}")
    return "; ".join(problems) or "Invalid request"


def create_app(
    settings: Optional[Settings] = None,
    transport: Optional[httpx.AsyncBaseTransport] = None
) -> FastAPI:
    """
    Build the application.

    Args:
        settings: Settings to use instead of the environment-derived ones
        transport: Optional httpx transport for the upstream client
    """
    settings = settings or get_settings()

    @asynccontextmanager
    async def lifespan(app: FastAPI) -> AsyncGenerator[None, None]:
        """Application lifespan events"""
        logger.info("Starting VTU Service", version=settings.service_version)
        settings.log_config()

        client = httpx.AsyncClient(
            timeout=httpx.Timeout(settings.upstream_timeout),
            transport=transport
        )
        token_manager = TokenManager(
            client,
            auth_url=settings.ebills_auth_url,
            username=settings.ebills_username,
            password=settings.ebills_password
        )
        app.state.token_manager = token_manager
        app.state.forwarder = RouteForwarder(
            client,
            token_manager,
            ebills_api_url=settings.ebills_api_url,
            paystack_api_url=settings.paystack_api_url,
            paystack_secret_key=settings.paystack_secret_key
        )

        yield

        await client.aclose()
        logger.info("VTU Service shutdown complete")

    app = FastAPI(
        title="VTU Service",
        description="Bill-payment and payment proxy for eBills and Paystack",
        version=settings.service_version,
        lifespan=lifespan
    )
    app.state.settings = settings

    # Configure CORS
    app.add_middleware(
        CORSMiddleware,
        allow_origins=settings.cors_origins,
        allow_credentials=True,
        allow_methods=["*"],
        allow_headers=["*"],
    )

    request_logger = get_request_logger()

    @app.middleware("http")
    async def log_requests(request: Request, call_next):
        """Log every request with its status and duration"""
        started = time.perf_counter()
        response = await call_next(request)
        request_logger.log_request(
            request.method,
            request.url.path,
            response.status_code,
            time.perf_counter() - started,
            ip_address=request.client.host if request.client else None
        )
        return response

    @app.exception_handler(ProxyError)
    async def proxy_error_handler(request: Request, exc: ProxyError):
        """Render proxy errors in the common envelope"""
        log = logger.warning if exc.status_code < 500 else logger.error
        log(
            "Request failed",
            error_type=type(exc).__name__,
            error=exc.message,
            status_code=exc.status_code,
            method=request.method,
            path=request.url.path
        )
        return JSONResponse(status_code=exc.status_code, content=exc.to_envelope())

    @app.exception_handler(RequestValidationError)
    async def request_validation_handler(request: Request, exc: RequestValidationError):
        """Body/query validation failures are 400s in the common envelope"""
        message = _validation_message(exc)
        logger.warning("Invalid request", error=message, method=request.method, path=request.url.path)
        details = [
            {"loc": list(error.get("loc", ())), "msg": error.get("msg"), "type": error.get("type")}
            for error in exc.errors()
        ]
        return JSONResponse(
            status_code=400,
            content={"success": False, "error": message, "details": details}
        )

    @app.exception_handler(Exception)
    async def global_exception_handler(request: Request, exc: Exception):
        """Global exception handler"""
        logger.error(
            "Unhandled exception",
            error=str(exc),
            method=request.method,
            path=request.url.path,
            exc_info=True
        )
        return JSONResponse(
            status_code=500,
            content={"success": False, "error": "Internal server error"}
        )

    # Register routes
    app.include_router(health.router, tags=["Health"])
    app.include_router(ebills.router, tags=["eBills"])
    app.include_router(paystack.router, prefix="/paystack", tags=["Paystack"])
    app.include_router(withdrawal.router, prefix="/withdrawal", tags=["Withdrawal"])
    app.include_router(webhooks.router, tags=["Webhooks"])
    app.include_router(ebills.api_router, prefix="/api", tags=["eBills"])
    app.include_router(purchases.router, prefix="/api", tags=["Purchases"])

    @app.get("/")
    async def root():
        """Root endpoint"""
        return {
            "service": settings.service_name,
            "version": settings.service_version,
            "status": "running"
        }

    return app


configure_logging(get_settings())
app = create_app()


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=get_settings().port)
