# ============================================================================
# src/insurance_precheck/utils/text_normalizer.py
# ============================================================================
"""
Text Normalization for OCR output

Produces the two comparison forms used by plan classification:
- uppercase form: case-folded, punctuation and whitespace kept so that
  word-boundary patterns like \\bPPO\\b still work
- collapsed form: uppercase with everything outside [A-Z0-9] dropped, so
  "P.P.O." or "POINT OF\\nSERVICE" survive OCR noise
"""

import re
from dataclasses import dataclass

_NON_ALNUM = re.compile(r"[^A-Z0-9]")


@dataclass(frozen=True)
class NormalizedText:
    """Both comparison forms of one piece of OCR text."""
    uppercase_form: str
    collapsed_form: str


def collapse(text: str) -> str:
    """Uppercase and strip everything that is not A-Z or 0-9."""
    return _NON_ALNUM.sub("", text.upper())


def normalize(text: str) -> NormalizedText:
    """
    Normalize raw OCR text.

    Pure and idempotent: normalize(normalize(t).uppercase_form) == normalize(t).
    """
    text = text or ""
    return NormalizedText(
        uppercase_form=text.upper(),
        collapsed_form=collapse(text),
    )
