# ============================================================================
# src/insurance_precheck/utils/exceptions.py
# ============================================================================
"""
Custom exceptions for the insurance pre-check engine.
"""

from ..constants.messages import (
    MISSING_IMAGES_MESSAGE,
    PAYLOAD_TOO_LARGE_MESSAGE,
)


class PrecheckError(Exception):
    """Base exception for all pre-check errors."""
    pass


class SubmissionError(PrecheckError):
    """
    Caller sent something we refuse to process.

    Carries the HTTP status and a message that is safe to show the user.
    """
    status_code = 400

    def __init__(self, message: str):
        super().__init__(message)
        self.message = message


class MissingImagesError(SubmissionError):
    """Front or back image absent."""
    def __init__(self, message: str = MISSING_IMAGES_MESSAGE):
        super().__init__(message)


class PayloadTooLargeError(SubmissionError):
    """Upload exceeds the configured ceiling."""
    status_code = 413

    def __init__(self, size: int, limit: int, message: str = PAYLOAD_TOO_LARGE_MESSAGE):
        super().__init__(message)
        self.size = size
        self.limit = limit


class OCRError(PrecheckError):
    """Error raised by the OCR collaborator."""
    pass


class OCRInitializationError(OCRError):
    """OCR engine could not be brought up."""
    pass


class ImageDecodeError(OCRError):
    """Payload could not be decoded into an image."""
    pass


class OCRTimeoutError(OCRError):
    """OCR call did not finish within the configured limit."""
    def __init__(self, message: str, timeout: float):
        super().__init__(message)
        self.timeout = timeout
