"""
Custody Service Settings

Configuration management using Pydantic settings with environment variable support.
"""

from typing import List
from pydantic import Field, model_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_JWT_SECRET = "change-me"


class Settings(BaseSettings):
    """Custody Service configuration"""

    # Service Configuration
    service_name: str = Field(default="malkhana-custody-service", description="Service name")
    environment: str = Field(default="development", description="Environment (development, production, test)")
    port: int = Field(default=8005, description="Service port")
    host: str = Field(default="0.0.0.0", description="Service host")

    # Database Configuration
    database_url: str = Field(
        default="sqlite+aiosqlite:///./malkhana_custody.db",
        description="Database connection URL"
    )

    # Authentication
    jwt_secret: str = Field(default=DEFAULT_JWT_SECRET, description="Secret used to sign access tokens")
    jwt_algorithm: str = Field(default="HS256", description="JWT signing algorithm")
    jwt_expires_minutes: int = Field(default=24 * 60, description="Access token lifetime in minutes")
    auth_cookie_name: str = Field(default="accessToken", description="Name of the HTTP-only session cookie")
    bcrypt_rounds: int = Field(default=12, ge=4, le=31, description="bcrypt cost factor")

    # Evidence photographs
    # NOTE: STORAGE_PROVIDER and friends are read directly by storage/factory.py
    max_photo_size_mb: int = Field(default=10, description="Maximum photograph size in MB")
    allowed_photo_types: str = Field(
        default="image/jpeg,image/png,image/gif,image/webp",
        description="Allowed photograph MIME types (comma-separated)"
    )

    # Tracking codes
    tracking_prefix: str = Field(default="EVIDENCE:", description="Prefix embedded in every QR payload")
    qr_box_size: int = Field(default=10, description="Pixels per QR module")
    qr_border: int = Field(default=2, description="Quiet zone width in modules")

    # Lifecycle policy
    enforce_unique_fir: bool = Field(
        default=False,
        description="Reject a second incident with the same station and FIR number"
    )
    allow_reclosure: bool = Field(
        default=False,
        description="Allow a closure to be recorded for an incident that is already CLOSED"
    )
    lock_closed_incidents: bool = Field(
        default=True,
        description="Reject evidence registration and custody transfers under a CLOSED incident"
    )

    # Alerts
    pending_threshold_days: int = Field(default=90, ge=1, description="Default age for long-pending alerts")

    # CORS Configuration
    cors_origins: List[str] = Field(
        default=["http://localhost:5173", "http://localhost:3000"],
        description="Allowed CORS origins"
    )

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        case_sensitive=False,
        extra="ignore"
    )

    @property
    def max_photo_size_bytes(self) -> int:
        """Convert max photograph size from MB to bytes"""
        return self.max_photo_size_mb * 1024 * 1024

    @property
    def allowed_photo_mime_types(self) -> List[str]:
        """Parse allowed photograph MIME types into list"""
        return [t.strip() for t in self.allowed_photo_types.split(",") if t.strip()]

    @property
    def is_production(self) -> bool:
        return self.environment == "production"

    @model_validator(mode="after")
    def require_real_secret_in_production(self) -> "Settings":
        """Refuse to sign production tokens with the shipped placeholder secret"""
        if self.is_production and self.jwt_secret.strip() in ("", DEFAULT_JWT_SECRET):
            raise ValueError("JWT_SECRET must be set to a private value in production")
        return self


# Global settings instance
settings = Settings()
