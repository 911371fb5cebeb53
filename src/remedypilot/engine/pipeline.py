"""
RemedyPilot Evaluation Pipeline

normalize -> resolve policy -> classify -> temporal -> evaluate -> assemble

One synchronous pass per call. The only shared state is the immutable
policy returned by the provider, so any number of evaluations may run
concurrently.
"""
from __future__ import annotations

import logging
import time
from datetime import date
from typing import Any, Optional, Union

from ..exceptions import UnsupportedDomain
from ..models import (
    DefenseAssessment,
    Domain,
    EligibilityVerdict,
    SituationInput,
    UNKNOWN,
)
from .classifier import classify
from .defense_evaluator import evaluate_defenses
from .eligibility_evaluator import evaluate_eligibility
from .normalizer import normalize_situation
from .policy_provider import PolicyProvider, coerce_domain, get_default_provider
from .timing_evaluator import evaluate_timing
from .verdict_assembler import assemble_assessment, assemble_verdict

logger = logging.getLogger(__name__)

Verdict = Union[EligibilityVerdict, DefenseAssessment]


def evaluate_situation(
    situation: SituationInput,
    *,
    provider: Optional[PolicyProvider] = None,
    as_of: Optional[date] = None,
) -> Verdict:
    """
    Evaluate an already-normalized situation.

    Raises:
        UnsupportedDomain: If the situation names no domain
        UnsupportedJurisdiction: If no pack exists for the jurisdiction
        PolicyIntegrityError: If the pack cannot evaluate the classified category
    """
    if situation.domain is None:
        raise UnsupportedDomain(
            message="Situation does not name an evaluation domain",
            details={"supported": [d.value for d in Domain]},
            jurisdiction=None if situation.jurisdiction == UNKNOWN else situation.jurisdiction,
        )

    provider = provider or get_default_provider()
    started = time.perf_counter()

    policy = provider.get_policy(situation.jurisdiction, situation.domain)
    classification = classify(situation, policy)
    timing = evaluate_timing(situation, classification, policy, as_of=as_of)

    if policy.domain is Domain.CRIMINAL_RELIEF:
        outcome = evaluate_eligibility(situation, classification, timing, policy)
        verdict: Verdict = assemble_verdict(situation, classification, timing, outcome, policy)
    else:
        outcome = evaluate_defenses(situation, classification, timing, policy)
        verdict = assemble_assessment(situation, classification, timing, outcome, policy)

    logger.info(
        "Evaluated %s situation for %s: %s",
        policy.domain.value,
        policy.code,
        verdict.status.value,
        extra={
            "domain": policy.domain.value,
            "jurisdiction": policy.code,
            "category": verdict.category,
            "status": verdict.status.value,
            "confidence": verdict.confidence.value,
            "duration_ms": round((time.perf_counter() - started) * 1000, 3),
        },
    )
    return verdict


def evaluate(
    raw: Any,
    *,
    domain: Union[Domain, str, None] = None,
    jurisdiction: Optional[str] = None,
    provider: Optional[PolicyProvider] = None,
    as_of: Optional[date] = None,
) -> Verdict:
    """
    Evaluate a raw situation record (camelCase or snake_case keys).

    ``domain`` and ``jurisdiction`` override whatever the record carries.
    Malformed fields never raise; they become warnings on the verdict and
    lower its confidence.

    Example:
        verdict = evaluate(
            {"outcome": "dismissed", "jurisdiction": "TN"},
            domain="criminal-relief",
        )
        verdict.status  # EligibilityStatus.ELIGIBLE
    """
    resolved = coerce_domain(domain) if domain is not None else None
    situation = normalize_situation(raw, domain=resolved, jurisdiction=jurisdiction)
    return evaluate_situation(situation, provider=provider, as_of=as_of)
