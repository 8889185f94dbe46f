"""
Core components for the pre-check service.
"""

from .orchestrator import (
    SubmissionOrchestrator,
    SubmissionRequest,
    SubmissionResponse,
)
