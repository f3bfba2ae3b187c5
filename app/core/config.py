"""
app/core/config.py

Purpose: Application configuration

- Loads environment variables
- Centralizes config values (DB URI, SMS provider, verification policy)
- Validates configuration on startup
- Environment-specific settings
"""

from pydantic import Field, validator
from pydantic_settings import BaseSettings
from typing import Optional, Literal


class Settings(BaseSettings):
    """
    Application settings loaded from environment variables.
    Validates all required configs on startup.
    """

    # Environment
    ENVIRONMENT: Literal["development", "staging", "production"] = "development"

    # MongoDB
    MONGODB_URL: str = Field(
        default="mongodb://localhost:27017",
        description="MongoDB connection URI"
    )
    MONGODB_DB_NAME: str = Field(
        default="phoneverify",
        description="MongoDB database name"
    )
    VERIFICATIONS_COLLECTION: str = Field(
        default="verifications",
        description="Collection holding verification versions"
    )

    # Verification policy
    MAX_ATTEMPTS: int = Field(
        default=3,
        description="Maximum verifications issued per phone within the rate limit window"
    )
    RATE_LIMIT_WINDOW_MINUTES: int = Field(
        default=60,
        description="Trailing window used by the rate limiter"
    )
    RATE_LIMIT_LOOKBACK: int = Field(
        default=10,
        description="Number of most recent verifications inspected by the rate limiter"
    )
    VERIFICATION_VALIDITY_MINUTES: int = Field(
        default=3,
        description="Minutes an unverified code stays valid"
    )
    OTP_DIGITS: int = Field(
        default=6,
        description="Length of the generated one-time code"
    )
    SECRET_KEY_BYTES: int = Field(
        default=20,
        description="Length of the per-version HOTP secret"
    )
    SMS_MESSAGE_TEMPLATE: str = Field(
        default="Your code is: {code}",
        description="SMS body, must contain {code}"
    )
    DEFAULT_PHONE_REGION: Optional[str] = Field(
        default=None,
        description="Region used for numbers without a country code (e.g. 'US'). None requires +<country code>"
    )

    # SMS delivery
    SMS_PROVIDER: Literal["twilio", "console"] = Field(
        default="twilio",
        description="Delivery provider ('console' only logs, for local development)"
    )
    TWILIO_ACCOUNT_SID: Optional[str] = Field(
        default=None,
        description="Twilio account SID"
    )
    TWILIO_AUTH_TOKEN: Optional[str] = Field(
        default=None,
        description="Twilio auth token"
    )
    TWILIO_FROM_NUMBER: Optional[str] = Field(
        default=None,
        description="Sender number in E.164 format"
    )
    TWILIO_BASE_URL: str = Field(
        default="https://api.twilio.com/2010-04-01",
        description="Twilio REST API base URL"
    )
    SMS_TIMEOUT_SECONDS: float = Field(
        default=10.0,
        description="SMS provider request timeout in seconds"
    )

    # Application
    DEBUG: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    LOG_LEVEL: str = Field(
        default="INFO",
        description="Logging level (DEBUG, INFO, WARNING, ERROR, CRITICAL)"
    )
    API_PREFIX: str = Field(
        default="/api/v1",
        description="API route prefix"
    )
    CORS_ORIGINS: list = Field(
        default=["*"],
        description="Allowed CORS origins"
    )

    @validator("MAX_ATTEMPTS", "RATE_LIMIT_WINDOW_MINUTES", "RATE_LIMIT_LOOKBACK", "VERIFICATION_VALIDITY_MINUTES")
    def validate_positive(cls, v):
        """Policy values must be at least 1."""
        if v < 1:
            raise ValueError("must be >= 1")
        return v

    @validator("OTP_DIGITS")
    def validate_otp_digits(cls, v):
        """HOTP codes are 6 to 8 digits."""
        if not 6 <= v <= 8:
            raise ValueError("OTP_DIGITS must be between 6 and 8")
        return v

    @validator("SMS_MESSAGE_TEMPLATE")
    def validate_message_template(cls, v):
        if "{code}" not in v:
            raise ValueError("SMS_MESSAGE_TEMPLATE must contain {code}")
        return v

    @property
    def is_development(self) -> bool:
        """Check if running in development mode."""
        return self.ENVIRONMENT == "development"

    @property
    def is_production(self) -> bool:
        """Check if running in production mode."""
        return self.ENVIRONMENT == "production"

    @property
    def twilio_configured(self) -> bool:
        """Check if all Twilio credentials are present."""
        return bool(
            self.TWILIO_ACCOUNT_SID
            and self.TWILIO_AUTH_TOKEN
            and self.TWILIO_FROM_NUMBER
        )

    class Config:
        env_file = ".env"
        case_sensitive = True
        env_file_encoding = "utf-8"
        extra = "ignore"


# Global settings instance
settings = Settings()


def validate_settings():
    """
    Validates critical settings on application startup.
    Raises ValueError if any required setting is missing or invalid.
    """
    errors = []

    # Validate MongoDB URL
    if not settings.MONGODB_URL:
        errors.append("MONGODB_URL is required")

    if settings.SMS_PROVIDER == "twilio" and not settings.twilio_configured:
        if settings.is_production:
            errors.append("TWILIO_ACCOUNT_SID, TWILIO_AUTH_TOKEN and TWILIO_FROM_NUMBER are required in production")

    # Production-specific validations
    if settings.is_production:
        if settings.SMS_PROVIDER == "console":
            errors.append("SMS_PROVIDER=console is not allowed in production")
        if settings.DEBUG:
            errors.append("DEBUG must be disabled in production")

    if errors:
        raise ValueError(f"Configuration validation failed: {', '.join(errors)}")

    return True
