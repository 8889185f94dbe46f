# ============================================================================
# FILE: tests/conftest.py
# ============================================================================
"""
Pytest configuration and shared fixtures for testing.
"""

import asyncio
import base64
from typing import Dict, List, Optional

import pytest

from insurance_precheck.extractors.ocr_extractor import OCREngine
from insurance_precheck.utils.exceptions import OCRError


FRONT_BYTES = b"front-of-card"
BACK_BYTES = b"back-of-card"


def encode(data: bytes) -> str:
    return base64.b64encode(data).decode("ascii")


class FakeOCREngine(OCREngine):
    """
    OCR stand-in keyed by image bytes.

    Records calls and the peak number of recognitions in flight.
    """

    def __init__(
        self,
        texts: Optional[Dict[bytes, str]] = None,
        delay: float = 0.0,
        fail_on: Optional[bytes] = None,
        block_on: Optional[bytes] = None,
    ):
        self.texts = texts or {}
        self.delay = delay
        self.fail_on = fail_on
        self.block_on = block_on
        self.calls: List[bytes] = []
        self.in_flight = 0
        self.max_in_flight = 0
        self.warmed_up = False
        self.closed = False
        self.cancelled = asyncio.Event()

    async def recognize(self, image_bytes: bytes) -> str:
        self.calls.append(image_bytes)
        self.in_flight += 1
        self.max_in_flight = max(self.max_in_flight, self.in_flight)
        try:
            if self.delay:
                await asyncio.sleep(self.delay)
            if image_bytes == self.fail_on:
                raise OCRError("engine exploded")
            if image_bytes == self.block_on:
                await asyncio.Event().wait()
            return self.texts.get(image_bytes, "")
        except asyncio.CancelledError:
            self.cancelled.set()
            raise
        finally:
            self.in_flight -= 1

    async def warm_up(self) -> None:
        self.warmed_up = True

    async def close(self) -> None:
        self.closed = True


@pytest.fixture
def make_ocr():
    """Factory for fake OCR engines: make_ocr(front_text, back_text, **kwargs)"""
    def _make(front_text: str = "", back_text: str = "", **kwargs) -> FakeOCREngine:
        return FakeOCREngine({FRONT_BYTES: front_text, BACK_BYTES: back_text}, **kwargs)
    return _make


@pytest.fixture
def card_payload():
    """JSON body for a two-sided submission"""
    return {"front": encode(FRONT_BYTES), "back": encode(BACK_BYTES)}


@pytest.fixture
def ppo_card_text():
    """Front/back OCR text of a typical PPO card"""
    return (
        """
        BlueCross BlueShield
        Member: JANE DOE
        ID: XYZ123456789
        Group: 0012345
        Plan Type: PPO
        """,
        """
        Network: In/Out of Network
        Customer Service 1-800-555-0100
        """,
    )


@pytest.fixture
def medicare_card_text():
    """OCR text of a Medicare card"""
    return (
        """
        MEDICARE HEALTH INSURANCE
        Name of beneficiary: JOHN DOE
        MEDICARE PART B
        """,
        "",
    )
