"""
RemedyPilot Defense Evaluator (eviction defense)

Builds the ranked defense list for one eviction situation:

(a) notice compliance: a short notice period, or a tenant reporting that
    no notice arrived, yields a strong improper-notice defense (the
    category's declared notice defense is upgraded in place; a synthetic one
    is added when the category declares none)
(b) the category's defense options in declared order, each raised to its
    configured strength when a trigger field is set
(c) jurisdiction-invariant defenses: partial payment acceptance and
    illegal self-help eviction

The list is then stably sorted strong < moderate < potential, so equal
strengths keep the policy's order.
"""
from __future__ import annotations

import logging
from typing import Optional

from ..models import (
    BlockingFactor,
    CategoryRule,
    Classification,
    Confidence,
    Defense,
    DefenseRule,
    DefenseStrength,
    EligibilityStatus,
    EvaluationOutcome,
    JurisdictionPolicy,
    NoticeCompliance,
    SituationInput,
    TimingResult,
)
from .eligibility_evaluator import require_category

logger = logging.getLogger(__name__)

PARTIAL_PAYMENT_ID = "partial_payment_acceptance"
SELF_HELP_ID = "self_help_eviction"


def rank_defenses(defenses: list[Defense]) -> list[Defense]:
    """Stable sort by strength tier."""
    return sorted(defenses, key=lambda d: d.strength.rank)


def _defense_from_rule(rule: DefenseRule, strength: DefenseStrength) -> Defense:
    return Defense(
        id=rule.id,
        name=rule.name,
        strength=strength,
        description=rule.description,
        citation=rule.citation,
        caveat=rule.caveat,
        documentation=rule.documentation,
    )


def _improper_notice(category: CategoryRule, notice: NoticeCompliance) -> Defense:
    if notice.compliant is False:
        description = (
            f"Notice period may be insufficient. {notice.required_days} days required, "
            f"but only {notice.days_between} days given before filing."
        )
    else:
        description = "Tenant reports that no notice was received before the case was filed."
    return Defense(
        id="improper_notice",
        name="Improper Notice",
        strength=DefenseStrength.STRONG,
        description=description,
        citation=category.notice_citation,
        documentation=("Copy of notice received", "Filing date on the court papers"),
    )


class DefenseEvaluator:
    """
    Eviction-defense evaluation for one policy.

    Usage:
        evaluator = DefenseEvaluator(policy)
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
        notice = timing.notice or NoticeCompliance()
        notice_failed = notice.compliant is False

        defenses: list[Defense] = []
        no_notice = situation.notice_received is False
        if (notice_failed or no_notice) and category.notice_rule is None:
            defenses.append(_improper_notice(category, notice))

        for rule in category.defenses:
            defenses.append(self._assess_rule(rule, situation, notice_failed))

        defenses.extend(self._universal_defenses(situation))
        ranked = rank_defenses(defenses)

        outcome = self._status_for(ranked)
        outcome.defenses = ranked
        outcome.procedure = category.procedure

        if notice_failed:
            outcome.reasons.insert(
                0,
                f"Notice period may be insufficient: {notice.required_days} days required, "
                f"{notice.days_between} days given",
            )

        appeal = timing.appeal
        if appeal is not None and appeal.window_passed:
            outcome.status = EligibilityStatus.LIMITED
            outcome.blocking_factors.append(
                BlockingFactor(
                    factor="Appeal window passed",
                    description=f"The {appeal.window_days}-day appeal window has passed",
                )
            )
            outcome.reasons.append(
                f"Judgment was entered {appeal.days_since_judgment} days ago; "
                f"the {appeal.window_days}-day appeal window has passed"
            )
        return outcome

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @staticmethod
    def _assess_rule(rule: DefenseRule, situation: SituationInput, notice_failed: bool) -> Defense:
        if rule.notice_defense and notice_failed:
            strength = DefenseStrength.STRONG
        elif rule.is_triggered(situation):
            strength = rule.strength_when_met
        else:
            strength = DefenseStrength.POTENTIAL
        return _defense_from_rule(rule, strength)

    def _universal_defenses(self, situation: SituationInput) -> list[Defense]:
        citations = self.policy.universal_citations
        defenses = []
        if situation.partial_payment_accepted:
            defenses.append(
                Defense(
                    id=PARTIAL_PAYMENT_ID,
                    name="Acceptance of Partial Payment",
                    strength=DefenseStrength.MODERATE,
                    description="Landlord accepted partial payment after notice, potentially waiving eviction right",
                    citation=citations.get(PARTIAL_PAYMENT_ID),
                    caveat="Effect varies based on circumstances and lease terms",
                    documentation=("Receipt showing payment", "Bank records", "Text/email confirmation"),
                )
            )
        if situation.locks_changed or situation.utilities_shut_off:
            defenses.append(
                Defense(
                    id=SELF_HELP_ID,
                    name="Illegal Self-Help Eviction",
                    strength=DefenseStrength.STRONG,
                    description="Landlord attempted illegal self-help eviction methods",
                    citation=citations.get(SELF_HELP_ID),
                    caveat="May support a claim for damages in addition to a defense",
                    documentation=("Photos of changed locks", "Utility shut-off records", "Witness statements"),
                )
            )
        return defenses

    @staticmethod
    def _status_for(defenses: list[Defense]) -> EvaluationOutcome:
        top: Optional[DefenseStrength] = defenses[0].strength if defenses else None
        if top is DefenseStrength.STRONG:
            status, confidence = EligibilityStatus.ELIGIBLE, Confidence.HIGH
        elif top is DefenseStrength.MODERATE:
            status, confidence = EligibilityStatus.ELIGIBLE, Confidence.MEDIUM
        elif top is DefenseStrength.POTENTIAL:
            status, confidence = EligibilityStatus.LIMITED, Confidence.LOW
        else:
            status, confidence = EligibilityStatus.UNKNOWN, Confidence.LOW

        reasons = [
            f"{d.strength.value.capitalize()} defense identified: {d.name}"
            for d in defenses
            if d.strength is not DefenseStrength.POTENTIAL
        ]
        if not reasons and defenses:
            reasons.append("Only potential defenses identified; each needs supporting facts")
        if not defenses:
            reasons.append("No defenses identified from the information provided")
        return EvaluationOutcome(status=status, confidence=confidence, reasons=reasons)


def evaluate_defenses(
    situation: SituationInput,
    classification: Classification,
    timing: TimingResult,
    policy: JurisdictionPolicy,
) -> EvaluationOutcome:
    """Convenience wrapper around DefenseEvaluator."""
    return DefenseEvaluator(policy).evaluate(situation, classification, timing)
