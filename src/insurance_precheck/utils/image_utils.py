# ============================================================================
# src/insurance_precheck/utils/image_utils.py
# ============================================================================
"""
Image utilities for card photos.

Provides:
- Base64 payload decoding (with or without a data: URL prefix)
- EXIF orientation correction (phone cameras store rotation in a tag)
- OCR-optimized image loading
"""

import base64
import binascii
import logging
from io import BytesIO

from PIL import Image, ImageOps, UnidentifiedImageError

from ..config import ocr_settings
from .exceptions import ImageDecodeError

logger = logging.getLogger(__name__)


def decode_base64_image(payload: str) -> bytes:
    """
    Decode a base64 image payload into raw bytes.

    Accepts the bare base64 body or a full data URL
    ("data:image/jpeg;base64,....").
    """
    if payload.startswith("data:") and "," in payload:
        payload = payload.split(",", 1)[1]

    try:
        return base64.b64decode(payload)
    except (binascii.Error, ValueError) as e:
        raise ImageDecodeError(f"Invalid base64 image payload: {e}") from e


def load_image_for_ocr(
    image_bytes: bytes,
    max_dimension: int = ocr_settings.OCR_MAX_DIMENSION,
    ensure_rgb: bool = True,
) -> Image.Image:
    """
    Load an image with the corrections needed for reliable OCR.

    1. EXIF orientation correction (portrait phone photos come in sideways)
    2. Downscaling oversized images
    3. Color mode conversion to RGB

    Args:
        image_bytes: Raw image bytes (PNG, JPEG, ...)
        max_dimension: Maximum width or height (larger images are downscaled)
        ensure_rgb: Convert to RGB mode if True

    Returns:
        Corrected PIL Image ready for OCR
    """
    try:
        image = Image.open(BytesIO(image_bytes))
        image.load()
    except (UnidentifiedImageError, OSError) as e:
        raise ImageDecodeError(f"Cannot read card image: {e}") from e

    try:
        image = ImageOps.exif_transpose(image)
    except Exception as e:
        logger.warning(f"EXIF transpose failed (non-fatal): {e}")

    w, h = image.size
    if max(w, h) > max_dimension:
        scale = max_dimension / max(w, h)
        new_w, new_h = int(w * scale), int(h * scale)
        image = image.resize((new_w, new_h), Image.LANCZOS)
        logger.info(f"Resized {w}x{h} -> {new_w}x{new_h} for OCR")

    if ensure_rgb and image.mode not in ('RGB', 'L'):
        image = image.convert('RGB')

    logger.debug(f"Image loaded for OCR: {image.size}, mode={image.mode}")
    return image
