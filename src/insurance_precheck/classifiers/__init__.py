"""
Plan classification.
"""

from .plan_classifier import (
    PlanClassifier,
    PlanSignal,
    ClassificationResult,
    classify_plan_text,
)
