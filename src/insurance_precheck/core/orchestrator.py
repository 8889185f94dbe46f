# ============================================================================
# src/insurance_precheck/core/orchestrator.py
# ============================================================================
"""
Submission Orchestrator

Drives one card submission from payload to user-facing answer:

    validate → size guard → decode → OCR front ∥ OCR back → classify → respond

Every submission is independent; nothing is stored. The OCR engine is passed
in by the owner (the API lifespan) and shared by concurrent submissions.
"""

import asyncio
import logging
from dataclasses import dataclass
from typing import Any, Dict, Optional, Tuple

from ..classifiers.plan_classifier import ClassificationResult, PlanClassifier
from ..config import base_settings, ocr_settings, BaseSettingsConfig, OCRSettings
from ..constants.messages import ELIGIBLE_MESSAGE, ineligible_message
from ..extractors.ocr_extractor import OCREngine
from ..utils.exceptions import (
    MissingImagesError,
    PayloadTooLargeError,
    OCRTimeoutError,
)
from ..utils.image_utils import decode_base64_image
from ..utils.logging import log_performance
from ..utils.text_normalizer import normalize

logger = logging.getLogger(__name__)


@dataclass
class SubmissionRequest:
    """Both card sides as base64 payloads, straight off the wire."""
    front: Optional[str]
    back: Optional[str]
    declared_plan_type: Optional[str] = None

    @property
    def encoded_size(self) -> int:
        return len(self.front or "") + len(self.back or "")


@dataclass
class SubmissionResponse:
    success: bool
    message: str
    redirect_link: Optional[str] = None
    details: Optional[ClassificationResult] = None

    def to_dict(self) -> Dict[str, Any]:
        payload: Dict[str, Any] = {
            "success": self.success,
            "message": self.message,
        }
        if self.redirect_link is not None:
            payload["redirectLink"] = self.redirect_link
        if self.details is not None:
            payload["details"] = self.details.to_dict()
        return payload


class SubmissionOrchestrator:
    """
    Turns a SubmissionRequest into a SubmissionResponse.

    Input problems raise SubmissionError subclasses (missing images,
    oversized payload); OCR problems raise OCRError subclasses. A successful
    return is always a complete response, eligible or not.
    """

    def __init__(
        self,
        ocr_engine: OCREngine,
        classifier: Optional[PlanClassifier] = None,
        booking_url: str = base_settings.BOOKING_URL,
        selfpay_url: str = base_settings.SELFPAY_URL,
        practice_name: str = base_settings.PRACTICE_NAME,
        max_payload_bytes: int = base_settings.MAX_PAYLOAD_BYTES,
        ocr_timeout: Optional[float] = None,
        separator: str = "\n",
    ):
        self.ocr_engine = ocr_engine
        self.classifier = classifier or PlanClassifier()
        self.booking_url = booking_url
        self.selfpay_url = selfpay_url
        self.practice_name = practice_name
        self.max_payload_bytes = max_payload_bytes
        self.ocr_timeout = ocr_timeout
        self.separator = separator

    @classmethod
    def from_settings(
        cls,
        ocr_engine: OCREngine,
        settings: BaseSettingsConfig = base_settings,
        ocr: OCRSettings = ocr_settings,
    ) -> "SubmissionOrchestrator":
        return cls(
            ocr_engine=ocr_engine,
            booking_url=settings.BOOKING_URL,
            selfpay_url=settings.SELFPAY_URL,
            practice_name=settings.PRACTICE_NAME,
            max_payload_bytes=settings.MAX_PAYLOAD_BYTES,
            ocr_timeout=ocr.OCR_TIMEOUT_SECONDS,
        )

    @log_performance(logger, "Card submission")
    async def submit(self, request: SubmissionRequest) -> SubmissionResponse:
        self._validate(request)

        front_bytes = decode_base64_image(request.front)
        back_bytes = decode_base64_image(request.back)

        front_text, back_text = await self._recognize_both(front_bytes, back_bytes)

        result = self.classifier.classify(
            normalize(f"{front_text}{self.separator}{back_text}")
        )
        logger.info(
            f"Card classified: plan={result.plan_type.value} "
            f"oon={result.has_oon} conflict={result.conflict}"
        )

        declared = (request.declared_plan_type or "").strip().upper()
        if declared and declared != result.plan_type.value:
            # Client value is never used for the decision
            logger.info(f"Declared plan type {declared!r} disagrees with OCR ({result.plan_type.value})")

        return self.build_response(result)

    def _validate(self, request: SubmissionRequest):
        if not request.front or not request.back:
            raise MissingImagesError()

        size = request.encoded_size
        if size > self.max_payload_bytes:
            logger.warning(f"Rejected submission: {size} bytes exceeds {self.max_payload_bytes}")
            raise PayloadTooLargeError(size=size, limit=self.max_payload_bytes)

    async def _recognize_both(self, front_bytes: bytes, back_bytes: bytes) -> Tuple[str, str]:
        """OCR both sides concurrently; if one fails the other is cancelled."""
        tasks = [
            asyncio.ensure_future(self._recognize(front_bytes, "front")),
            asyncio.ensure_future(self._recognize(back_bytes, "back")),
        ]
        try:
            front_text, back_text = await asyncio.gather(*tasks)
        except BaseException:
            for task in tasks:
                task.cancel()
            raise
        return front_text, back_text

    async def _recognize(self, image_bytes: bytes, side: str) -> str:
        call = self.ocr_engine.recognize(image_bytes)
        if self.ocr_timeout is None:
            text = await call
        else:
            try:
                text = await asyncio.wait_for(call, timeout=self.ocr_timeout)
            except asyncio.TimeoutError as e:
                raise OCRTimeoutError(
                    f"OCR of {side} image exceeded {self.ocr_timeout}s",
                    timeout=self.ocr_timeout,
                ) from e

        text = text or ""
        logger.debug(f"OCR {side}: {len(text)} chars")
        return text

    def build_response(self, result: ClassificationResult) -> SubmissionResponse:
        if result.conflict or not result.has_oon:
            return SubmissionResponse(
                success=False,
                message=ineligible_message(self.practice_name, self.selfpay_url),
                redirect_link=self.selfpay_url,
                details=result,
            )

        return SubmissionResponse(
            success=True,
            message=ELIGIBLE_MESSAGE,
            redirect_link=self.booking_url,
            details=result,
        )
