# ============================================================================
# src/insurance_precheck/config/__init__.py
# ============================================================================
"""
Convenient imports for all settings
"""

from .base_config import base_settings, BaseSettingsConfig
from .ocr_config import ocr_settings, OCRSettings
from .logging_config import logging_settings, LoggingSettings
