"""
Verdict models.

EvaluationOutcome is the evaluator's working record. The assembler turns it
into an immutable EligibilityVerdict (criminal relief) or DefenseAssessment
(eviction defense). Their ``to_dict`` field names are a stable contract for
downstream document renderers.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional

from ..canon import content_hash
from .enums import Confidence, DefenseStrength, Domain, EligibilityStatus, UrgencyLevel
from .timing import TimingResult


# =============================================================================
# Verdict Parts
# =============================================================================

@dataclass(frozen=True)
class BlockingFactor:
    """A condition that bars or narrows relief."""
    factor: str
    description: str
    citation: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "factor": self.factor,
            "description": self.description,
            "citation": self.citation,
        }


@dataclass(frozen=True)
class Defense:
    """A candidate eviction defense with its assessed strength."""
    id: str
    name: str
    strength: DefenseStrength
    description: str
    citation: Optional[str] = None
    caveat: Optional[str] = None
    documentation: tuple[str, ...] = ()

    def to_dict(self) -> dict[str, Any]:
        return {
            "id": self.id,
            "name": self.name,
            "strength": self.strength.value,
            "description": self.description,
            "citation": self.citation,
            "caveat": self.caveat,
            "documentation": list(self.documentation),
        }


@dataclass(frozen=True)
class NextStep:
    """A recommended action, ordered by the guidance builder."""
    action: str
    priority: str = "high"
    details: Optional[str] = None
    deadline: Optional[str] = None

    def to_dict(self) -> dict[str, Any]:
        return {
            "action": self.action,
            "priority": self.priority,
            "details": self.details,
            "deadline": self.deadline,
        }


# =============================================================================
# Evaluator Working Record
# =============================================================================

@dataclass
class EvaluationOutcome:
    """Terminal result of one evaluator run, before assembly."""
    status: EligibilityStatus
    confidence: Confidence
    reasons: list[str] = field(default_factory=list)
    blocking_factors: list[BlockingFactor] = field(default_factory=list)
    warnings: list[str] = field(default_factory=list)
    waiting_period: Optional[str] = None
    waiting_period_met: Optional[bool] = None
    procedure: Optional[str] = None
    clean_slate_eligible: bool = False
    defenses: list[Defense] = field(default_factory=list)


# =============================================================================
# Output Records
# =============================================================================

@dataclass(frozen=True)
class EligibilityVerdict:
    """Criminal-relief evaluation result."""
    jurisdiction: str
    category: str
    status: EligibilityStatus
    confidence: Confidence
    reasons: tuple[str, ...] = ()
    blocking_factors: tuple[BlockingFactor, ...] = ()
    waiting_period: Optional[str] = None
    waiting_period_met: Optional[bool] = None
    years_elapsed: Optional[int] = None
    applicable_procedure: Optional[str] = None
    clean_slate_eligible: bool = False
    matched_keywords: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    recommendations: tuple[NextStep, ...] = ()
    next_steps: tuple[NextStep, ...] = ()
    policy_version: Optional[str] = None
    domain: Domain = Domain.CRIMINAL_RELIEF

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain.value,
            "jurisdiction": self.jurisdiction,
            "category": self.category,
            "matchedKeywords": list(self.matched_keywords),
            "status": self.status.value,
            "confidence": self.confidence.value,
            "reasons": list(self.reasons),
            "blockingFactors": [b.to_dict() for b in self.blocking_factors],
            "waitingPeriod": self.waiting_period,
            "waitingPeriodMet": self.waiting_period_met,
            "yearsElapsed": self.years_elapsed,
            "applicableProcedure": self.applicable_procedure,
            "cleanSlateEligible": self.clean_slate_eligible,
            "warnings": list(self.warnings),
            "recommendations": [r.to_dict() for r in self.recommendations],
            "nextSteps": [s.to_dict() for s in self.next_steps],
            "policyVersion": self.policy_version,
        }

    def fingerprint(self) -> str:
        return content_hash(self.to_dict())


@dataclass(frozen=True)
class DefenseAssessment:
    """Eviction-defense evaluation result."""
    jurisdiction: str
    category: str
    status: EligibilityStatus
    confidence: Confidence
    timing: TimingResult
    reasons: tuple[str, ...] = ()
    blocking_factors: tuple[BlockingFactor, ...] = ()
    defenses: tuple[Defense, ...] = ()
    applicable_procedure: Optional[str] = None
    matched_keywords: tuple[str, ...] = ()
    warnings: tuple[str, ...] = ()
    next_steps: tuple[NextStep, ...] = ()
    policy_version: Optional[str] = None
    domain: Domain = Domain.EVICTION_DEFENSE

    @property
    def urgency(self) -> UrgencyLevel:
        return self.timing.urgency

    @property
    def top_defense(self) -> Optional[Defense]:
        return self.defenses[0] if self.defenses else None

    def to_dict(self) -> dict[str, Any]:
        return {
            "domain": self.domain.value,
            "jurisdiction": self.jurisdiction,
            "category": self.category,
            "matchedKeywords": list(self.matched_keywords),
            "status": self.status.value,
            "confidence": self.confidence.value,
            "reasons": list(self.reasons),
            "blockingFactors": [b.to_dict() for b in self.blocking_factors],
            "waitingPeriod": None,
            "waitingPeriodMet": None,
            "applicableProcedure": self.applicable_procedure,
            "defenses": [d.to_dict() for d in self.defenses],
            "urgencyLevel": self.urgency.value,
            "timelineAnalysis": self.timing.timeline_analysis(),
            "warnings": list(self.warnings),
            "nextSteps": [s.to_dict() for s in self.next_steps],
            "policyVersion": self.policy_version,
        }

    def fingerprint(self) -> str:
        return content_hash(self.to_dict())
