# ============================================================================
# src/insurance_precheck/constants/messages.py
# ============================================================================
"""
User-facing response messages.
"""

MISSING_IMAGES_MESSAGE = "Missing images"
PAYLOAD_TOO_LARGE_MESSAGE = "Payload too large"
SERVER_ERROR_MESSAGE = "Server error"
BAD_REQUEST_MESSAGE = "Bad request"
UI_NOT_FOUND_MESSAGE = "UI not found"

ELIGIBLE_MESSAGE = "You're eligible to move forward."


def ineligible_message(practice_name: str, selfpay_url: str) -> str:
    return (
        f"Unfortunately, your insurance is not eligible for coverage at "
        f"{practice_name}'s office. You can still book a self-pay "
        f"consultation here: {selfpay_url}"
    )
