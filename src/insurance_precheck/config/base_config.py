# ============================================================================
# src/insurance_precheck/config/base_config.py
# ============================================================================
"""
Base Configuration
- Listening address
- Static UI root
- Upload ceiling
- Booking / self-pay destinations
"""

from pathlib import Path
from typing import List
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class BaseSettingsConfig(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    HOST: str = Field(
        default="0.0.0.0",
        description="Interface the HTTP server binds to"
    )
    PORT: int = Field(
        default=3000,
        description="Port the HTTP server listens on"
    )

    # Static UI (index.html, app.js, ...)
    STATIC_DIR: Path = Field(
        default_factory=lambda: Path(__file__).parent.parent.parent.parent / "static",
        description="Root directory for static assets; requests may not escape it"
    )

    MAX_PAYLOAD_BYTES: int = Field(
        default=15 * 1024 * 1024,
        gt=0,
        description="Ceiling for the combined encoded upload (request body and front+back payloads)"
    )

    BOOKING_URL: str = Field(
        default="https://ai.henigan.io/picture",
        description="Where eligible patients are sent to book"
    )
    SELFPAY_URL: str = Field(
        default="https://www.albertplasticsurgery.com/patient-resources/financing/",
        description="Where ineligible patients are sent for a self-pay consultation"
    )
    PRACTICE_NAME: str = Field(
        default="Dr. Albert",
        description="Practice named in the ineligible message"
    )

    CORS_ALLOW_ORIGINS: List[str] = Field(
        default_factory=list,
        description="Origins allowed to call the API cross-site (empty disables CORS)"
    )

    def get_index_path(self) -> Path:
        """Path of the chat UI entry page"""
        return self.STATIC_DIR / "index.html"


# Global instance
base_settings = BaseSettingsConfig()
