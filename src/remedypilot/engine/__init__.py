"""
RemedyPilot Engine

Stages of the evaluation pipeline.

Services:
- normalize_situation: Raw record -> SituationInput
- PolicyProvider: Load-once cache of jurisdiction policies
- classify: First-match keyword classification
- TimingEvaluator: Elapsed years, notice compliance, urgency, appeal window
- EligibilityEvaluator: Criminal-relief sequence
- DefenseEvaluator: Eviction-defense ranking
- assemble_verdict / assemble_assessment: Frozen output records

Usage:
    from remedypilot.engine import evaluate

    verdict = evaluate(form_data, domain="eviction-defense", jurisdiction="TN")
"""
from __future__ import annotations

from .classifier import classify, match_keyword_groups
from .defense_evaluator import DefenseEvaluator, evaluate_defenses, rank_defenses
from .eligibility_evaluator import (
    EligibilityEvaluator,
    evaluate_eligibility,
    format_remaining_years,
)
from .normalizer import SituationRecord, normalize_situation, parse_date
from .pipeline import Verdict, evaluate, evaluate_situation
from .policy_provider import PolicyProvider, coerce_domain, get_default_provider
from .timing_evaluator import TimingEvaluator, evaluate_timing, urgency_for, years_between
from .verdict_assembler import assemble_assessment, assemble_verdict

__all__ = [
    # Pipeline
    "Verdict",
    "evaluate",
    "evaluate_situation",
    # Normalizer
    "SituationRecord",
    "normalize_situation",
    "parse_date",
    # Policy provider
    "PolicyProvider",
    "coerce_domain",
    "get_default_provider",
    # Classifier
    "classify",
    "match_keyword_groups",
    # Temporal
    "TimingEvaluator",
    "evaluate_timing",
    "urgency_for",
    "years_between",
    # Evaluators
    "DefenseEvaluator",
    "EligibilityEvaluator",
    "evaluate_defenses",
    "evaluate_eligibility",
    "format_remaining_years",
    "rank_defenses",
    # Assembler
    "assemble_assessment",
    "assemble_verdict",
]
