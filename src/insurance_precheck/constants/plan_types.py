# ============================================================================
# src/insurance_precheck/constants/plan_types.py
# ============================================================================
"""
Plan Types and Trigger Terms
- Plan labels reported in classification results
- Commercial plan → trigger terms (abbreviation first, then full name)
- Government / catastrophic indicators that make a card ineligible
"""

from enum import Enum


class PlanType(str, Enum):
    """
    Outcome labels for plan classification.
    The first four are commercial plan types; the rest are terminal outcomes.
    """
    PPO = "PPO"
    POS = "POS"
    HMO = "HMO"
    EPO = "EPO"
    NON_COMMERCIAL = "NON-COMMERCIAL"
    UNKNOWN = "UNKNOWN"
    CONFLICT = "CONFLICT"


# Order matters: it is the order flags are reported in.
# Terms are matched against the collapsed (alphanumeric-only) text; the first
# term is the abbreviation, also matched as a standalone word.
COMMERCIAL_PLAN_TERMS = {
    PlanType.PPO: ("PPO", "PREFERREDPROVIDERORGANIZATION"),
    PlanType.POS: ("POS", "POINTOFSERVICE"),
    PlanType.HMO: ("HMO", "HEALTHMAINTENANCEORGANIZATION"),
    PlanType.EPO: ("EPO", "EXCLUSIVEPROVIDERORGANIZATION"),
}

# Indicator name → collapsed-text term
NON_COMMERCIAL_TERMS = {
    "medicare": "MEDICARE",
    "medicaid": "MEDICAID",
    "tricare": "TRICARE",
    "veterans": "VETERANS",
    "va": "VA",
    "catastrophic": "CATASTROPHIC",
}

# Only these carry out-of-network benefits
OON_PLAN_TYPES = frozenset({PlanType.PPO, PlanType.POS})
