"""
RemedyPilot Verdict Assembler

Merges classification, timing and the evaluator outcome into one frozen
output record. Pure: the same inputs always produce an equal record.
"""
from __future__ import annotations

from collections.abc import Iterable
from typing import TypeVar

from ..models import (
    BlockingFactor,
    Classification,
    Confidence,
    DefenseAssessment,
    EligibilityVerdict,
    EvaluationOutcome,
    JurisdictionPolicy,
    SituationInput,
    TimingResult,
)
from .guidance import (
    criminal_next_steps,
    criminal_recommendations,
    criminal_warnings,
    eviction_next_steps,
    eviction_warnings,
)

T = TypeVar("T")


def dedupe(items: Iterable[T]) -> tuple[T, ...]:
    """Drop repeats, keeping the first occurrence in place."""
    seen = set()
    result = []
    for item in items:
        if item in seen:
            continue
        seen.add(item)
        result.append(item)
    return tuple(result)


def dedupe_blocking(factors: Iterable[BlockingFactor]) -> tuple[BlockingFactor, ...]:
    """One entry per factor name, in discovery order."""
    seen = set()
    result = []
    for factor in factors:
        if factor.factor in seen:
            continue
        seen.add(factor.factor)
        result.append(factor)
    return tuple(result)


def adjusted_confidence(outcome: EvaluationOutcome, situation: SituationInput) -> Confidence:
    """Evaluator confidence, one level lower when the input was degraded."""
    if situation.is_degraded:
        return outcome.confidence.downgrade()
    return outcome.confidence


def assemble_verdict(
    situation: SituationInput,
    classification: Classification,
    timing: TimingResult,
    outcome: EvaluationOutcome,
    policy: JurisdictionPolicy,
) -> EligibilityVerdict:
    """Build the criminal-relief verdict."""
    confidence = adjusted_confidence(outcome, situation)
    warnings = dedupe([
        *situation.warnings,
        *outcome.warnings,
        *criminal_warnings(situation, outcome.status, confidence),
    ])
    return EligibilityVerdict(
        jurisdiction=policy.code,
        category=classification.category,
        status=outcome.status,
        confidence=confidence,
        reasons=dedupe(outcome.reasons),
        blocking_factors=dedupe_blocking(outcome.blocking_factors),
        waiting_period=outcome.waiting_period,
        waiting_period_met=outcome.waiting_period_met,
        years_elapsed=timing.years_elapsed,
        applicable_procedure=outcome.procedure,
        clean_slate_eligible=outcome.clean_slate_eligible,
        matched_keywords=classification.matched_keywords,
        warnings=warnings,
        recommendations=tuple(criminal_recommendations(situation, outcome.status, policy)),
        next_steps=tuple(criminal_next_steps(outcome.procedure, outcome.clean_slate_eligible, policy)),
        policy_version=policy.version,
        domain=policy.domain,
    )


def assemble_assessment(
    situation: SituationInput,
    classification: Classification,
    timing: TimingResult,
    outcome: EvaluationOutcome,
    policy: JurisdictionPolicy,
) -> DefenseAssessment:
    """Build the eviction-defense assessment."""
    defenses = tuple(outcome.defenses)
    warnings = dedupe([
        *situation.warnings,
        *outcome.warnings,
        *eviction_warnings(situation, timing),
    ])
    return DefenseAssessment(
        jurisdiction=policy.code,
        category=classification.category,
        status=outcome.status,
        confidence=adjusted_confidence(outcome, situation),
        timing=timing,
        reasons=dedupe(outcome.reasons),
        blocking_factors=dedupe_blocking(outcome.blocking_factors),
        defenses=defenses,
        applicable_procedure=outcome.procedure,
        matched_keywords=classification.matched_keywords,
        warnings=warnings,
        next_steps=tuple(eviction_next_steps(situation, defenses, timing)),
        policy_version=policy.version,
        domain=policy.domain,
    )
