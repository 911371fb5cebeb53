"""
RemedyPilot Guidance

Warnings, recommendations and next steps derived from a finished
evaluation. Everything here is presentation of facts the evaluators
already decided; nothing in this module changes a status.
"""
from __future__ import annotations

from typing import Optional

from ..models import (
    Confidence,
    Defense,
    EligibilityStatus,
    JurisdictionPolicy,
    NextStep,
    UNKNOWN,
    SituationInput,
    TimingResult,
)

GENERIC_RELIEF_STEPS = (
    "Obtain certified copies of your criminal records",
    "Consult with an attorney about your eligibility",
    "Complete Petition for Expungement forms",
    "File petition with the court clerk",
    "Attend hearing if required",
)


# =============================================================================
# Criminal Relief
# =============================================================================

def criminal_warnings(
    situation: SituationInput,
    status: EligibilityStatus,
    confidence: Confidence,
) -> list[str]:
    warnings = []
    if status is EligibilityStatus.INELIGIBLE:
        warnings.append(
            "Based on the information provided, you may not be eligible for expungement; "
            "consult with an attorney to discuss your options"
        )
    if status is EligibilityStatus.PENDING:
        warnings.append("Additional time or requirements must be completed before you can file")
    if confidence is Confidence.LOW:
        warnings.append("More information is needed to accurately assess your eligibility")
    if situation.prior_expungements > 0:
        warnings.append("You have indicated prior expungements; the number of expungements may be limited")
    return warnings


def criminal_recommendations(
    situation: SituationInput,
    status: EligibilityStatus,
    policy: JurisdictionPolicy,
) -> list[NextStep]:
    recommendations = [
        NextStep(
            action="Obtain complete criminal records",
            details="Contact the court clerk where your case was heard to get certified copies",
        ),
        NextStep(
            action=f"Consult with a licensed {policy.name} attorney",
            details="An attorney can review your specific case and provide personalized advice",
        ),
    ]
    if status is EligibilityStatus.ELIGIBLE:
        recommendations.append(
            NextStep(
                action="Verify eligibility with the court clerk",
                priority="medium",
                details="Court clerks can confirm your eligibility before you file",
            )
        )
        recommendations.append(
            NextStep(
                action="Gather all required documentation",
                priority="medium",
                details="Include proof of sentence completion and payment of all fines",
            )
        )
    if not situation.all_fines_paid:
        recommendations.append(
            NextStep(
                action="Pay all outstanding fines and court costs",
                details="All court obligations must be satisfied before expungement",
            )
        )
    return recommendations


def criminal_next_steps(
    procedure_id: Optional[str],
    clean_slate_eligible: bool,
    policy: JurisdictionPolicy,
) -> list[NextStep]:
    """Steps from the pack's procedure, or the generic petition steps."""
    steps = []
    if clean_slate_eligible:
        steps.append(
            NextStep(
                action="Verify whether your record has been sealed automatically under Clean Slate",
                details="Check with the state records repository before filing a petition",
            )
        )
    procedure = policy.get_procedure(procedure_id)
    process = procedure.process if procedure and procedure.process else GENERIC_RELIEF_STEPS
    deadline = procedure.timeline if procedure else None
    steps.extend(NextStep(action=step, deadline=deadline) for step in process)
    return steps


# =============================================================================
# Eviction Defense
# =============================================================================

def eviction_warnings(situation: SituationInput, timing: TimingResult) -> list[str]:
    warnings = []
    appeal = timing.appeal
    if appeal is not None and appeal.window_passed:
        warnings.append(
            f"The {appeal.window_days}-day appeal window has passed; "
            "seek legal help immediately about remaining options"
        )
    if appeal is not None and appeal.judgment_after_as_of:
        warnings.append("Judgment date is in the future; confirm the date on the judgment")
    if situation.judgment_received and situation.judgment_date is None:
        warnings.append("Judgment date not provided; the appeal deadline may be running now")
    if timing.days_until_court is not None and timing.days_until_court <= 0:
        warnings.append("The court date has passed")
    notice = timing.notice
    if notice is not None and notice.required_days is None and notice.requirement:
        if situation.notice_type != UNKNOWN:
            warnings.append(
                f"Notice requirement ({notice.requirement}) must be checked against the "
                f"notice received ({situation.notice_type})"
            )
        else:
            warnings.append(
                f"Notice requirement ({notice.requirement}) must be checked against the notices received"
            )
    return warnings


def eviction_next_steps(
    situation: SituationInput,
    defenses: tuple[Defense, ...],
    timing: TimingResult,
) -> list[NextStep]:
    steps = []

    appeal = timing.appeal
    if appeal is not None and appeal.days_remaining > 0:
        steps.append(
            NextStep(
                action="File appeal immediately",
                priority="critical",
                details=f"You have {appeal.days_remaining} days left to appeal the judgment",
                deadline=f"{appeal.days_remaining} days",
            )
        )

    days_until_court = timing.days_until_court
    if situation.court_date is not None and days_until_court is not None and days_until_court > 0:
        steps.append(
            NextStep(
                action=f"Attend court hearing on {situation.court_date.isoformat()}",
                priority="critical",
                details="Failure to appear usually results in automatic eviction judgment",
                deadline=situation.court_date.isoformat(),
            )
        )

    steps.append(
        NextStep(
            action="Gather documentation",
            details="Collect lease, notices, receipts, photos, communications with landlord",
            deadline="Before court date",
        )
    )
    steps.append(
        NextStep(
            action="Contact legal aid organization",
            details="Free legal assistance may be available for income-qualified tenants",
            deadline="As soon as possible",
        )
    )

    if defenses:
        top = defenses[0]
        steps.append(
            NextStep(
                action=f'Prepare "{top.name}" defense',
                details=top.description,
                deadline="Before court date",
            )
        )

    if days_until_court is not None and days_until_court > 3:
        steps.append(
            NextStep(
                action="Consider filing written answer",
                priority="medium",
                details="Filing an answer before hearing can help organize your defense",
                deadline="3 business days before court date",
            )
        )
    return steps
