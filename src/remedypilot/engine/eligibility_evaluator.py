"""
RemedyPilot Eligibility Evaluator (criminal relief)

Runs the relief sequence once to a terminal status:

1. Pending charges block relief outright
2. Dismissal or acquittal is eligible with no waiting period
3. Completed diversion is eligible
4. Diversion still running is pending
5. A conviction is checked for blocking offenses (first match wins),
   then the waiting period, then court obligations
6. Anything else is unknown

Business outcomes are returned, never raised. The only exception is
PolicyIntegrityError when the classifier and the pack disagree.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..exceptions import PolicyIntegrityError
from ..models import (
    BlockingFactor,
    BlockingRule,
    BlockingSeverity,
    CategoryRule,
    Classification,
    Confidence,
    DispositionKind,
    EligibilityStatus,
    EvaluationOutcome,
    JurisdictionPolicy,
    SituationInput,
    TimingResult,
)
from .classifier import match_keyword_groups, offense_text

logger = logging.getLogger(__name__)

PENDING_CHARGES = BlockingFactor(
    factor="Pending criminal charges",
    description="You cannot file for expungement while you have pending criminal charges",
)


def require_category(classification: Classification, policy: JurisdictionPolicy) -> CategoryRule:
    """Look up the classified category or raise PolicyIntegrityError."""
    category = policy.get_category(classification.category)
    if category is None:
        logger.error(
            "Category %s missing from %s/%s pack",
            classification.category,
            policy.domain.value,
            policy.code,
            extra={
                "domain": policy.domain.value,
                "jurisdiction": policy.code,
                "category": classification.category,
            },
        )
        raise PolicyIntegrityError(
            message=f"Category '{classification.category}' has no rule table in the {policy.code} pack",
            details={
                "category": classification.category,
                "domain": policy.domain.value,
                "known_categories": sorted(policy.categories),
            },
            jurisdiction=policy.code,
        )
    return category


def format_remaining_years(years: int) -> str:
    """``1 more year`` / ``3 more years``."""
    return f"{years} more year" if years == 1 else f"{years} more years"


def find_blocking_rule(
    situation: SituationInput,
    category: CategoryRule,
    policy: JurisdictionPolicy,
) -> Optional[BlockingRule]:
    """First blocking rule, in policy order, whose keywords appear in the offense text."""
    text = offense_text(situation)
    if not text:
        return None
    for rule in policy.blocking_rules:
        if not rule.applies_to_category(category.id):
            continue
        if match_keyword_groups(text, rule.keyword_groups) is not None:
            return rule
    return None


class EligibilityEvaluator:
    """
    Criminal-relief evaluation sequence for one policy.

    Usage:
        evaluator = EligibilityEvaluator(policy)
        outcome = evaluator.evaluate(situation, classification, timing)
    """

    def __init__(self, policy: JurisdictionPolicy):
        self.policy = policy

    def evaluate(
        self,
        situation: SituationInput,
        classification: Classification,
        timing: TimingResult,
    ) -> EvaluationOutcome:
        category = require_category(classification, self.policy)

        if situation.has_pending_charges:
            return EvaluationOutcome(
                status=EligibilityStatus.INELIGIBLE,
                confidence=Confidence.HIGH,
                reasons=["Pending charges must be resolved before relief can be sought"],
                blocking_factors=[PENDING_CHARGES],
                procedure=category.procedure,
            )

        disposition = category.disposition or DispositionKind.UNKNOWN

        if disposition in (DispositionKind.DISMISSAL, DispositionKind.ACQUITTAL):
            return self._relief_without_waiting(category, "Charges were dismissed or resulted in acquittal")

        if disposition is DispositionKind.DIVERSION:
            if situation.diversion_completed:
                return self._relief_without_waiting(category, "Diversion program was successfully completed")
            return EvaluationOutcome(
                status=EligibilityStatus.PENDING,
                confidence=Confidence.MEDIUM,
                reasons=["Diversion program not yet completed"],
                waiting_period_met=False,
                procedure=category.procedure,
            )

        if disposition is DispositionKind.CONVICTION:
            return self._evaluate_conviction(situation, category, timing)

        return EvaluationOutcome(
            status=EligibilityStatus.UNKNOWN,
            confidence=Confidence.LOW,
            reasons=["Case outcome could not be determined from the information provided"],
            procedure=category.procedure,
        )

    # -------------------------------------------------------------------------
    # Branches
    # -------------------------------------------------------------------------

    def _relief_without_waiting(self, category: CategoryRule, default_reason: str) -> EvaluationOutcome:
        outcome = EvaluationOutcome(
            status=EligibilityStatus.ELIGIBLE,
            confidence=Confidence.HIGH,
            reasons=[category.summary or default_reason],
            waiting_period=None,
            waiting_period_met=True,
            procedure=category.procedure,
        )
        self._apply_clean_slate(outcome, category)
        return outcome

    def _evaluate_conviction(
        self,
        situation: SituationInput,
        category: CategoryRule,
        timing: TimingResult,
    ) -> EvaluationOutcome:
        blocking = find_blocking_rule(situation, category, self.policy)
        if blocking is not None:
            return self._blocked(blocking, category)

        threshold = category.waiting_period_years or 0
        years = timing.years_elapsed
        outcome = EvaluationOutcome(
            status=EligibilityStatus.ELIGIBLE,
            confidence=category.confidence,
            procedure=category.procedure,
        )
        if category.caveat:
            outcome.warnings.append(category.caveat)

        if years is None:
            outcome.status = EligibilityStatus.PENDING
            outcome.confidence = Confidence.LOW
            outcome.waiting_period_met = False
            outcome.reasons.append(
                f"Sentence completion date not provided; the {threshold}-year waiting period cannot be confirmed"
            )
            return outcome

        if years < threshold:
            early = category.early_pathway_years
            if early is not None and years >= early:
                outcome.waiting_period_met = True
                outcome.reasons.append(f"Eligible for {early}-year early pathway expungement")
                outcome.warnings.append("Early pathway requires showing compelling need")
            else:
                remaining = threshold - years
                outcome.status = EligibilityStatus.PENDING
                outcome.confidence = Confidence.MEDIUM
                outcome.waiting_period = format_remaining_years(remaining)
                outcome.waiting_period_met = False
                outcome.reasons.append(
                    f"Must wait until the {threshold}-year waiting period is complete "
                    f"({format_remaining_years(remaining)})"
                )
                return outcome
        else:
            outcome.waiting_period_met = True

        unmet = self._unmet_obligations(situation)
        if unmet:
            outcome.status = EligibilityStatus.INELIGIBLE
            outcome.confidence = Confidence.MEDIUM
            outcome.blocking_factors.append(
                BlockingFactor(
                    factor="Outstanding court obligations",
                    description="All fines, costs, and restitution must be paid before expungement: "
                                + "; ".join(unmet),
                )
            )
            return outcome

        outcome.reasons.append(category.summary or "Basic eligibility requirements appear to be met")
        self._apply_clean_slate(outcome, category)
        return outcome

    def _blocked(self, rule: BlockingRule, category: CategoryRule) -> EvaluationOutcome:
        factor = BlockingFactor(
            factor=rule.factor,
            description=rule.description,
            citation=rule.citation,
        )
        if rule.severity is BlockingSeverity.INELIGIBLE:
            status, confidence = EligibilityStatus.INELIGIBLE, Confidence.HIGH
        else:
            status, confidence = EligibilityStatus.LIMITED, Confidence.MEDIUM
        return EvaluationOutcome(
            status=status,
            confidence=confidence,
            reasons=[rule.description],
            blocking_factors=[factor],
            procedure=rule.procedure or category.procedure,
        )

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _unmet_obligations(situation: SituationInput) -> list[str]:
        unmet = []
        if not situation.all_fines_paid:
            unmet.append("Outstanding fines or court costs")
        if not situation.probation_completed:
            unmet.append("Probation not completed")
        return unmet

    def _apply_clean_slate(self, outcome: EvaluationOutcome, category: CategoryRule) -> None:
        if self.policy.clean_slate_available and category.clean_slate:
            outcome.clean_slate_eligible = True
            outcome.reasons.append("Record qualifies for automatic Clean Slate sealing")


def evaluate_eligibility(
    situation: SituationInput,
    classification: Classification,
    timing: TimingResult,
    policy: JurisdictionPolicy,
) -> EvaluationOutcome:
    """Convenience wrapper around EligibilityEvaluator."""
    return EligibilityEvaluator(policy).evaluate(situation, classification, timing)
