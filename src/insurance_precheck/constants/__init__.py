"""
Plan vocabulary and user-facing messages.
"""

from .plan_types import (
    PlanType,
    COMMERCIAL_PLAN_TERMS,
    NON_COMMERCIAL_TERMS,
    OON_PLAN_TYPES,
)
from .messages import (
    MISSING_IMAGES_MESSAGE,
    PAYLOAD_TOO_LARGE_MESSAGE,
    SERVER_ERROR_MESSAGE,
    BAD_REQUEST_MESSAGE,
    UI_NOT_FOUND_MESSAGE,
    ELIGIBLE_MESSAGE,
    ineligible_message,
)
