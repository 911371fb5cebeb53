"""
RemedyPilot Models

Frozen dataclasses shared by the pack loader and the evaluation engine.
"""
from __future__ import annotations

from .classification import Classification
from .enums import (
    BlockingSeverity,
    Confidence,
    DefenseStrength,
    DispositionKind,
    Domain,
    EligibilityStatus,
    UrgencyLevel,
    YearBasis,
)
from .policy import (
    BlockingRule,
    CategoryRule,
    ClassificationRule,
    DefenseRule,
    DefenseTrigger,
    JurisdictionPolicy,
    Procedure,
)
from .situation import UNKNOWN, SituationInput
from .timing import AppealWindow, NoticeCompliance, TimingResult
from .verdict import (
    BlockingFactor,
    Defense,
    DefenseAssessment,
    EligibilityVerdict,
    EvaluationOutcome,
    NextStep,
)

__all__ = [
    # Enums
    "BlockingSeverity",
    "Confidence",
    "DefenseStrength",
    "DispositionKind",
    "Domain",
    "EligibilityStatus",
    "UrgencyLevel",
    "YearBasis",
    # Situation
    "UNKNOWN",
    "SituationInput",
    # Policy
    "BlockingRule",
    "CategoryRule",
    "ClassificationRule",
    "DefenseRule",
    "DefenseTrigger",
    "JurisdictionPolicy",
    "Procedure",
    # Results
    "Classification",
    "AppealWindow",
    "NoticeCompliance",
    "TimingResult",
    "BlockingFactor",
    "Defense",
    "DefenseAssessment",
    "EligibilityVerdict",
    "EvaluationOutcome",
    "NextStep",
]
