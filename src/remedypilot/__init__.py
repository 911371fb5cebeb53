"""
RemedyPilot - Legal Situation Evaluation Engine

Evaluates a described legal situation against jurisdiction rule tables and
returns a structured verdict: eligibility status, blocking factors,
remaining waiting period, applicable procedure, ranked defenses and next
steps. Output is guidance for document renderers, not a legal determination.

Domains:
- criminal-relief: record expungement / sealing eligibility
- eviction-defense: defenses and deadlines for a residential eviction

Quick Start:
    from datetime import date
    from remedypilot import evaluate

    verdict = evaluate(
        {"outcome": "convicted", "chargeType": "felony theft",
         "sentenceCompletionDate": "2019-06-01", "allFinesPaid": True,
         "probationCompleted": True},
        domain="criminal-relief",
        jurisdiction="TN",
        as_of=date(2024, 6, 1),
    )
    verdict.status       # EligibilityStatus.ELIGIBLE
    verdict.to_dict()    # camelCase record for renderers

Version: 0.1.0
"""
from __future__ import annotations

__version__ = "0.1.0"

from .engine import (
    PolicyProvider,
    Verdict,
    evaluate,
    evaluate_situation,
    get_default_provider,
    normalize_situation,
)
from .exceptions import (
    PolicyIntegrityError,
    PolicyLoadError,
    PolicyValidationError,
    PolicyVersionMismatch,
    RemedyPilotError,
    UnsupportedDomain,
    UnsupportedJurisdiction,
)
from .models import (
    Confidence,
    DefenseAssessment,
    DefenseStrength,
    Domain,
    EligibilityStatus,
    EligibilityVerdict,
    SituationInput,
    UrgencyLevel,
)

__all__ = [
    "__version__",
    # Pipeline
    "PolicyProvider",
    "Verdict",
    "evaluate",
    "evaluate_situation",
    "get_default_provider",
    "normalize_situation",
    # Models
    "Confidence",
    "DefenseAssessment",
    "DefenseStrength",
    "Domain",
    "EligibilityStatus",
    "EligibilityVerdict",
    "SituationInput",
    "UrgencyLevel",
    # Exceptions
    "PolicyIntegrityError",
    "PolicyLoadError",
    "PolicyValidationError",
    "PolicyVersionMismatch",
    "RemedyPilotError",
    "UnsupportedDomain",
    "UnsupportedJurisdiction",
]
