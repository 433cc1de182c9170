"""
Configuration Management
Environment-based configuration for upstream providers and the HTTP server
"""

from typing import List, Optional
from pydantic import field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict
import structlog

logger = structlog.get_logger(__name__)


class Settings(BaseSettings):
    """VTU service settings, fixed at process start"""

    # Service info
    service_name: str = "vtu-service"
    service_version: str = "1.0.0"
    port: int = 3000

    # eBills (bill-payment provider)
    ebills_api_url: str = "https://ebills.africa/wp-json/api/v2/"
    ebills_auth_url: str = "https://ebills.africa/wp-json/jwt-auth/v1/token"
    ebills_username: str = ""
    ebills_password: str = ""
    ebills_user_pin: str = ""

    # Paystack (payment processor)
    paystack_api_url: str = "https://api.paystack.co"
    paystack_secret_key: str = ""

    # Public URL of the client app, used for the payment callback
    app_url: str = "http://localhost:3000"

    # None disables upstream timeouts entirely
    upstream_timeout: Optional[float] = None

    # Logging
    log_level: str = "INFO"
    log_format: str = "default"
    logging_config_path: Optional[str] = None

    # CORS
    cors_origins: List[str] = ["*"]

    model_config = SettingsConfigDict(
        env_file=".env",
        case_sensitive=False,
        extra="ignore"
    )

    @field_validator('port')
    @classmethod
    def validate_port(cls, v):
        if not 1 <= v <= 65535:
            raise ValueError('PORT must be between 1 and 65535')
        return v

    @field_validator('upstream_timeout')
    @classmethod
    def validate_upstream_timeout(cls, v):
        if v is not None and v <= 0:
            raise ValueError('UPSTREAM_TIMEOUT must be positive when set')
        return v

    @property
    def payment_callback_url(self) -> str:
        """URL Paystack redirects the customer to after checkout"""
        return f"{self.app_url.rstrip('/')}/payment/callback"

    def log_config(self):
        """Log configuration (without sensitive data)"""
        logger.info(
            "Upstream configuration",
            ebills_api_url=self.ebills_api_url,
            ebills_auth_url=self.ebills_auth_url,
            ebills_credentials=bool(self.ebills_username and self.ebills_password),
            paystack_api_url=self.paystack_api_url,
            paystack_secret_key=bool(self.paystack_secret_key),
            app_url=self.app_url,
            upstream_timeout=self.upstream_timeout
        )

        if not self.ebills_username or not self.ebills_password:
            logger.warning("EBILLS_USERNAME/EBILLS_PASSWORD not set, bill-payment routes will fail to authenticate")
        if not self.paystack_secret_key:
            logger.warning("PAYSTACK_SECRET_KEY not set, payment routes will be rejected upstream")
        if not self.ebills_user_pin:
            logger.warning("EBILLS_USER_PIN not set, webhook signatures cannot be verified")


_settings: Optional[Settings] = None


def get_settings() -> Settings:
    """Get settings instance"""
    global _settings
    if _settings is None:
        _settings = Settings()
    return _settings
