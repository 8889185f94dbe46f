# ============================================================================
# src/insurance_precheck/classifiers/plan_classifier.py
# ============================================================================
"""
Plan Classifier

Turns OCR text from both sides of an insurance card into an eligibility
decision. Purely lexical and deterministic:

1. SIGNAL DETECTION
   - Commercial plans (PPO / POS / HMO / EPO): standalone abbreviation on the
     uppercase text, or abbreviation / full name inside the collapsed text
   - Non-commercial indicators (Medicare, Medicaid, Tricare, VA, ...) on the
     collapsed text

2. RESOLUTION
   - Any non-commercial indicator → NON-COMMERCIAL (wins over everything)
   - No commercial flag          → UNKNOWN
   - Several commercial flags    → CONFLICT
   - Exactly one                 → that plan; OON only for PPO / POS

Terms live in constants.plan_types so new plan types are data, not branches.
"""

import logging
import re
from dataclasses import dataclass, field
from typing import Dict, List, Mapping, Optional, Pattern, Tuple

from ..constants.plan_types import (
    PlanType,
    COMMERCIAL_PLAN_TERMS,
    NON_COMMERCIAL_TERMS,
    OON_PLAN_TYPES,
)
from ..utils.text_normalizer import NormalizedText, normalize

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PlanSignal:
    """Flags detected in one piece of card text."""
    commercial: Dict[PlanType, bool] = field(default_factory=dict)
    non_commercial: Dict[str, bool] = field(default_factory=dict)

    @property
    def matched_plans(self) -> List[PlanType]:
        return [plan for plan, hit in self.commercial.items() if hit]

    @property
    def has_non_commercial(self) -> bool:
        return any(self.non_commercial.values())


@dataclass(frozen=True)
class ClassificationResult:
    """
    Outcome of plan classification.

    has_oon is only ever True for a lone PPO or POS match.
    """
    plan_type: PlanType
    has_oon: bool
    conflict: bool

    @property
    def eligible(self) -> bool:
        return self.has_oon and not self.conflict

    def to_dict(self) -> Dict[str, object]:
        return {
            "planType": self.plan_type.value,
            "hasOON": self.has_oon,
            "conflict": self.conflict,
        }


class PlanClassifier:
    """
    Rule-based plan classifier over normalized OCR text.

    The rule table can be swapped for tests or new plan types; by default it
    uses the terms in constants.plan_types.
    """

    def __init__(
        self,
        commercial_terms: Optional[Mapping[PlanType, Tuple[str, ...]]] = None,
        non_commercial_terms: Optional[Mapping[str, str]] = None,
    ):
        if commercial_terms is None:
            commercial_terms = COMMERCIAL_PLAN_TERMS
        if non_commercial_terms is None:
            non_commercial_terms = NON_COMMERCIAL_TERMS
        self.commercial_terms = dict(commercial_terms)
        self.non_commercial_terms = dict(non_commercial_terms)
        self._word_patterns: Dict[PlanType, Pattern[str]] = {
            plan: re.compile(rf"\b{re.escape(terms[0])}\b")
            for plan, terms in self.commercial_terms.items()
        }

    def detect_signals(self, text: NormalizedText) -> PlanSignal:
        """Compute every plan flag once for the given text."""
        commercial = {}
        for plan, terms in self.commercial_terms.items():
            commercial[plan] = bool(
                self._word_patterns[plan].search(text.uppercase_form)
                or any(term in text.collapsed_form for term in terms)
            )

        non_commercial = {
            name: term in text.collapsed_form
            for name, term in self.non_commercial_terms.items()
        }
        return PlanSignal(commercial=commercial, non_commercial=non_commercial)

    def classify(self, text: NormalizedText) -> ClassificationResult:
        signal = self.detect_signals(text)

        if signal.has_non_commercial:
            hits = [name for name, hit in signal.non_commercial.items() if hit]
            logger.debug(f"Non-commercial indicators found: {hits}")
            return ClassificationResult(PlanType.NON_COMMERCIAL, has_oon=False, conflict=True)

        matched = signal.matched_plans
        if not matched:
            return ClassificationResult(PlanType.UNKNOWN, has_oon=False, conflict=True)
        if len(matched) > 1:
            logger.debug(f"Multiple plan types on card: {[p.value for p in matched]}")
            return ClassificationResult(PlanType.CONFLICT, has_oon=False, conflict=True)

        plan = matched[0]
        return ClassificationResult(plan, has_oon=plan in OON_PLAN_TYPES, conflict=False)

    def classify_text(self, raw_text: str) -> ClassificationResult:
        return self.classify(normalize(raw_text))


def classify_plan_text(front_text: str, back_text: str, separator: str = "\n") -> ClassificationResult:
    """Classify a card from the OCR text of its two sides, front first."""
    return PlanClassifier().classify_text(f"{front_text}{separator}{back_text}")
