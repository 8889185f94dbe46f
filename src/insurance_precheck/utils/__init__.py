"""
Utility modules for the insurance pre-check engine.
"""

from .exceptions import (
    PrecheckError,
    SubmissionError,
    MissingImagesError,
    PayloadTooLargeError,
    OCRError,
    OCRInitializationError,
    ImageDecodeError,
    OCRTimeoutError,
)

from .logging import (
    setup_logging,
    log_performance,
    JsonFormatter,
)

from .text_normalizer import NormalizedText, normalize, collapse

__all__ = [
    # Exceptions
    'PrecheckError',
    'SubmissionError',
    'MissingImagesError',
    'PayloadTooLargeError',
    'OCRError',
    'OCRInitializationError',
    'ImageDecodeError',
    'OCRTimeoutError',
    # Logging
    'setup_logging',
    'log_performance',
    'JsonFormatter',
    # Text
    'NormalizedText',
    'normalize',
    'collapse',
]
