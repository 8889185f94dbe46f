# src/insurance_precheck/extractors/ocr_extractor.py
"""
OCR Extraction for Insurance Card Photos

Wraps Tesseract (via pytesseract) behind a small async interface:

    text = await engine.recognize(image_bytes)

The engine is an owned resource: create it once at startup, hand it to the
submission orchestrator, close it on shutdown. Tesseract itself is blocking,
so calls run on a private thread pool and never stall the event loop.
Initialization (binary lookup + language-data check) runs at most once per
engine, guarded by a lock, before the first recognition is dispatched.
"""

import asyncio
import logging
import threading
from abc import ABC, abstractmethod
from concurrent.futures import ThreadPoolExecutor
from pathlib import Path
from typing import Any, Dict, Optional

import pytesseract

from ..config import ocr_settings, OCRSettings
from ..utils.exceptions import OCRError, OCRInitializationError
from ..utils.image_utils import load_image_for_ocr

logger = logging.getLogger(__name__)


class OCREngine(ABC):
    """
    Interface every OCR collaborator implements.

    recognize() is best-effort: an unreadable photo may yield "" rather
    than an error.
    """

    @abstractmethod
    async def recognize(self, image_bytes: bytes) -> str:
        ...

    async def warm_up(self) -> None:
        """Load models ahead of the first request. No-op by default."""

    async def close(self) -> None:
        """Release engine resources. No-op by default."""


class TesseractOCREngine(OCREngine):
    """
    Tesseract-based text extractor for card photos.
    """

    def __init__(
        self,
        lang: str = "eng",
        lang_data_path: Optional[Path] = None,
        tesseract_cmd: Optional[str] = None,
        max_workers: int = 2,
        max_dimension: int = ocr_settings.OCR_MAX_DIMENSION,
    ):
        self.lang = lang
        self.lang_data_path = lang_data_path
        self.tesseract_cmd = tesseract_cmd
        self.max_dimension = max_dimension

        self._executor = ThreadPoolExecutor(
            max_workers=max_workers,
            thread_name_prefix="tesseract",
        )
        self._init_lock = threading.Lock()
        self._initialized = False
        self._version: Optional[str] = None

        self._stats_lock = threading.Lock()
        self._inference_count = 0

        logger.info(f"Tesseract engine created (lang={self.lang}, workers={max_workers}, lazy init)")

    @classmethod
    def from_settings(cls, settings: OCRSettings = ocr_settings) -> "TesseractOCREngine":
        return cls(
            lang=settings.OCR_LANG,
            lang_data_path=settings.OCR_LANG_DATA_PATH,
            tesseract_cmd=settings.TESSERACT_CMD,
            max_workers=settings.OCR_MAX_WORKERS,
            max_dimension=settings.OCR_MAX_DIMENSION,
        )

    @property
    def tesseract_config(self) -> str:
        if self.lang_data_path:
            return f'--tessdata-dir "{self.lang_data_path}"'
        return ""

    def _ensure_initialized(self):
        """Verify the binary and language data exactly once."""
        if self._initialized:
            return

        with self._init_lock:
            if self._initialized:
                return

            if self.tesseract_cmd:
                pytesseract.pytesseract.tesseract_cmd = self.tesseract_cmd

            try:
                version = pytesseract.get_tesseract_version()
                languages = set(pytesseract.get_languages(config=self.tesseract_config))
            except pytesseract.TesseractNotFoundError as e:
                raise OCRInitializationError(
                    "Tesseract not installed or not on PATH. "
                    "Install tesseract-ocr or set TESSERACT_CMD."
                ) from e
            except (pytesseract.TesseractError, OSError) as e:
                raise OCRInitializationError(f"Failed to initialize Tesseract: {e}") from e

            missing = [code for code in self.lang.split("+") if code not in languages]
            if missing:
                raise OCRInitializationError(
                    f"Tesseract language data missing for {missing} "
                    f"(data dir: {self.lang_data_path or 'default'})"
                )

            self._version = str(version)
            self._initialized = True
            logger.info(f"Tesseract {self._version} initialized (lang={self.lang})")

    def recognize_sync(self, image_bytes: bytes) -> str:
        """
        Extract text from one card photo. Blocking.

        Raises:
            ImageDecodeError: bytes are not a readable image
            OCRError: Tesseract failed on the image
        """
        self._ensure_initialized()

        image = load_image_for_ocr(image_bytes, max_dimension=self.max_dimension)
        try:
            text = pytesseract.image_to_string(
                image,
                lang=self.lang,
                config=self.tesseract_config,
            )
        except pytesseract.TesseractError as e:
            logger.error(f"Tesseract extraction failed: {e}")
            raise OCRError(f"Tesseract extraction failed: {e}") from e

        with self._stats_lock:
            self._inference_count += 1

        logger.debug(f"Tesseract recognized {len(text)} chars from {image.size[0]}x{image.size[1]} image")
        return text

    async def warm_up(self) -> None:
        loop = asyncio.get_running_loop()
        await loop.run_in_executor(self._executor, self._ensure_initialized)

    async def recognize(self, image_bytes: bytes) -> str:
        loop = asyncio.get_running_loop()
        return await loop.run_in_executor(
            self._executor,
            self.recognize_sync,
            image_bytes
        )

    def get_statistics(self) -> Dict[str, Any]:
        return {
            "engine": "tesseract",
            "version": self._version,
            "lang": self.lang,
            "initialized": self._initialized,
            "inference_count": self._inference_count,
        }

    async def close(self):
        self._executor.shutdown(wait=False, cancel_futures=True)
        logger.info("Tesseract engine closed")


def create_ocr_engine(settings: OCRSettings = ocr_settings) -> OCREngine:
    """Build the default OCR engine from settings."""
    return TesseractOCREngine.from_settings(settings)
