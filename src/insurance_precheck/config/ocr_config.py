# ============================================================================
# src/insurance_precheck/config/ocr_config.py
# ============================================================================
"""
OCR Engine Settings
- Tesseract language and language-data location
- Worker pool size
- Optional per-call timeout
"""

from pathlib import Path
from typing import Optional
from pydantic import Field
from pydantic_settings import BaseSettings, SettingsConfigDict


class OCRSettings(BaseSettings):
    model_config = SettingsConfigDict(env_file=".env", extra="ignore")

    OCR_LANG: str = Field(
        default="eng",
        description="Tesseract language code"
    )
    OCR_LANG_DATA_PATH: Optional[Path] = Field(
        default=None,
        description="Override for the Tesseract language-data directory (--tessdata-dir)"
    )
    TESSERACT_CMD: Optional[str] = Field(
        default=None,
        description="Path to the tesseract binary if it is not on PATH"
    )
    OCR_MAX_WORKERS: int = Field(
        default=2,
        ge=1,
        description="Threads available for blocking OCR calls"
    )
    OCR_TIMEOUT_SECONDS: Optional[float] = Field(
        default=None,
        gt=0,
        description="Per-image OCR time limit; unset waits indefinitely"
    )
    OCR_MAX_DIMENSION: int = Field(
        default=2500,
        gt=0,
        description="Larger card photos are downscaled to this width/height before OCR"
    )


ocr_settings = OCRSettings()
