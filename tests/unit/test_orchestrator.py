# ============================================================================
# FILE: tests/unit/test_orchestrator.py
# ============================================================================
"""
Unit tests for the submission orchestrator
"""

import asyncio

import pytest

from insurance_precheck.constants.plan_types import PlanType
from insurance_precheck.core.orchestrator import (
    SubmissionOrchestrator,
    SubmissionRequest,
    SubmissionResponse,
)
from insurance_precheck.utils.exceptions import (
    ImageDecodeError,
    MissingImagesError,
    OCRError,
    OCRTimeoutError,
    PayloadTooLargeError,
)

from tests.conftest import BACK_BYTES, FRONT_BYTES, encode

BOOKING = "https://booking.example/start"
SELFPAY = "https://clinic.example/self-pay"


def make_orchestrator(engine, **kwargs):
    kwargs.setdefault("booking_url", BOOKING)
    kwargs.setdefault("selfpay_url", SELFPAY)
    kwargs.setdefault("practice_name", "Dr. Test")
    return SubmissionOrchestrator(engine, **kwargs)


def make_request(front=FRONT_BYTES, back=BACK_BYTES, **kwargs):
    return SubmissionRequest(
        front=encode(front) if front is not None else None,
        back=encode(back) if back is not None else None,
        **kwargs,
    )


# ============================================================================
# OUTCOMES
# ============================================================================

@pytest.mark.asyncio
async def test_ppo_card_is_eligible(make_ocr, ppo_card_text):
    engine = make_ocr(*ppo_card_text)
    response = await make_orchestrator(engine).submit(make_request())

    assert response.success is True
    assert response.redirect_link == BOOKING
    assert response.details.plan_type == PlanType.PPO
    assert response.to_dict() == {
        "success": True,
        "message": "You're eligible to move forward.",
        "redirectLink": BOOKING,
        "details": {"planType": "PPO", "hasOON": True, "conflict": False},
    }


@pytest.mark.asyncio
async def test_medicare_card_goes_to_self_pay(make_ocr, medicare_card_text):
    engine = make_ocr(*medicare_card_text)
    response = await make_orchestrator(engine).submit(make_request())

    assert response.success is False
    assert response.redirect_link == SELFPAY
    assert response.details.plan_type == PlanType.NON_COMMERCIAL
    assert "Dr. Test's office" in response.message
    assert SELFPAY in response.message


@pytest.mark.asyncio
@pytest.mark.parametrize("front,back,plan", [
    ("Plan: HMO", "", PlanType.HMO),
    ("Plan: EPO", "", PlanType.EPO),
    ("PPO", "HMO", PlanType.CONFLICT),
    ("Member ID 12345", "", PlanType.UNKNOWN),
])
async def test_ineligible_outcomes(make_ocr, front, back, plan):
    response = await make_orchestrator(make_ocr(front, back)).submit(make_request())
    assert response.success is False
    assert response.redirect_link == SELFPAY
    assert response.details.plan_type == plan


@pytest.mark.asyncio
async def test_plan_split_across_sides_is_joined(make_ocr):
    # "POINT OF" on the front and "SERVICE" on the back still reads as POS
    engine = make_ocr("POINT OF", "SERVICE")
    response = await make_orchestrator(engine).submit(make_request())
    assert response.details.plan_type == PlanType.POS
    assert response.success is True


@pytest.mark.asyncio
async def test_declared_plan_type_is_not_trusted(make_ocr):
    engine = make_ocr("Plan: HMO", "")
    response = await make_orchestrator(engine).submit(
        make_request(declared_plan_type="PPO")
    )
    assert response.success is False
    assert response.details.plan_type == PlanType.HMO


@pytest.mark.asyncio
async def test_data_url_payloads_are_accepted(make_ocr):
    engine = make_ocr("Plan: POS", "")
    request = SubmissionRequest(
        front="data:image/jpeg;base64," + encode(FRONT_BYTES),
        back=encode(BACK_BYTES),
    )
    response = await make_orchestrator(engine).submit(request)
    assert response.success is True
    assert engine.calls == [FRONT_BYTES, BACK_BYTES]


def test_build_response_without_details_serializes_cleanly():
    response = SubmissionResponse(success=False, message="Missing images")
    assert response.to_dict() == {"success": False, "message": "Missing images"}


# ============================================================================
# INPUT ERRORS
# ============================================================================

@pytest.mark.asyncio
@pytest.mark.parametrize("front,back", [(FRONT_BYTES, None), (None, BACK_BYTES), (None, None)])
async def test_missing_image_fails_before_ocr(make_ocr, front, back):
    engine = make_ocr()
    with pytest.raises(MissingImagesError) as exc_info:
        await make_orchestrator(engine).submit(make_request(front, back))

    assert exc_info.value.message == "Missing images"
    assert exc_info.value.status_code == 400
    assert engine.calls == []


@pytest.mark.asyncio
async def test_empty_string_image_counts_as_missing(make_ocr):
    engine = make_ocr()
    with pytest.raises(MissingImagesError):
        await make_orchestrator(engine).submit(SubmissionRequest(front="", back=encode(BACK_BYTES)))


@pytest.mark.asyncio
async def test_oversized_payload_rejected_before_ocr(make_ocr):
    engine = make_ocr()
    big = b"x" * 600
    request = make_request(front=big, back=big)

    with pytest.raises(PayloadTooLargeError) as exc_info:
        await make_orchestrator(engine, max_payload_bytes=1000).submit(request)

    assert exc_info.value.status_code == 413
    assert exc_info.value.size == request.encoded_size
    assert exc_info.value.limit == 1000
    assert engine.calls == []


@pytest.mark.asyncio
async def test_payload_exactly_at_limit_is_allowed(make_ocr):
    engine = make_ocr("PPO", "")
    request = make_request()
    orchestrator = make_orchestrator(engine, max_payload_bytes=request.encoded_size)
    response = await orchestrator.submit(request)
    assert response.success is True


@pytest.mark.asyncio
async def test_invalid_base64_raises_decode_error(make_ocr):
    engine = make_ocr()
    request = SubmissionRequest(front="abc", back=encode(BACK_BYTES))
    with pytest.raises(ImageDecodeError):
        await make_orchestrator(engine).submit(request)
    assert engine.calls == []


# ============================================================================
# CONCURRENCY
# ============================================================================

@pytest.mark.asyncio
async def test_both_sides_recognized_concurrently(make_ocr):
    engine = make_ocr("PPO", "", delay=0.05)
    await make_orchestrator(engine).submit(make_request())
    assert engine.max_in_flight == 2
    assert sorted(engine.calls) == sorted([FRONT_BYTES, BACK_BYTES])


@pytest.mark.asyncio
async def test_ocr_failure_fails_submission_and_cancels_sibling(make_ocr):
    engine = make_ocr(fail_on=FRONT_BYTES, block_on=BACK_BYTES)

    with pytest.raises(OCRError):
        await make_orchestrator(engine).submit(make_request())

    await asyncio.wait_for(engine.cancelled.wait(), timeout=1)


@pytest.mark.asyncio
async def test_ocr_timeout(make_ocr):
    engine = make_ocr(block_on=BACK_BYTES)
    orchestrator = make_orchestrator(engine, ocr_timeout=0.05)

    with pytest.raises(OCRTimeoutError) as exc_info:
        await orchestrator.submit(make_request())
    assert exc_info.value.timeout == 0.05


@pytest.mark.asyncio
async def test_concurrent_submissions_are_independent(make_ocr):
    ppo = make_orchestrator(make_ocr("PPO", "", delay=0.01))
    hmo = make_orchestrator(make_ocr("HMO", "", delay=0.01))

    results = await asyncio.gather(
        ppo.submit(make_request()),
        hmo.submit(make_request()),
        ppo.submit(make_request()),
    )
    assert [r.details.plan_type for r in results] == [PlanType.PPO, PlanType.HMO, PlanType.PPO]


@pytest.mark.asyncio
async def test_empty_ocr_text_is_unknown(make_ocr):
    response = await make_orchestrator(make_ocr("", "")).submit(make_request())
    assert response.details.plan_type == PlanType.UNKNOWN
    assert response.success is False
