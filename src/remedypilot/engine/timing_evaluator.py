"""
RemedyPilot Temporal Evaluator

Computes elapsed years, notice compliance, urgency and the appeal window.

Each value depends only on its own dates: a missing court date leaves
urgency at STANDARD but does not affect notice compliance, and so on.
All arithmetic is in whole calendar days relative to ``as_of``.
"""
from __future__ import annotations

import math
from dataclasses import dataclass
from datetime import date
from typing import Optional

from ..models import (
    AppealWindow,
    Classification,
    Domain,
    JurisdictionPolicy,
    NoticeCompliance,
    SituationInput,
    TimingResult,
    UrgencyLevel,
    YearBasis,
)

AVERAGE_YEAR_DAYS = 365.25

# Upper bound (inclusive) of days until court for each urgency tier
URGENCY_THRESHOLDS = (
    (3, UrgencyLevel.CRITICAL),
    (7, UrgencyLevel.URGENT),
    (14, UrgencyLevel.ELEVATED),
)


# =============================================================================
# Elapsed Years
# =============================================================================

def years_between(start: date, end: date, basis: YearBasis = YearBasis.AVERAGE) -> int:
    """
    Whole years from ``start`` to ``end``, floored and never negative.

    AVERAGE: days / 365.25, floored (day 1826 after 2019-06-01 is 4 years).
    CALENDAR: completed anniversaries (2024-06-01 is 5 years after 2019-06-01).
    """
    if end <= start:
        return 0
    if basis is YearBasis.CALENDAR:
        years = end.year - start.year
        if (end.month, end.day) < (start.month, start.day):
            years -= 1
        return max(0, years)
    return max(0, math.floor((end - start).days / AVERAGE_YEAR_DAYS))


def urgency_for(days_until_court: Optional[int]) -> UrgencyLevel:
    if days_until_court is None:
        return UrgencyLevel.STANDARD
    for limit, level in URGENCY_THRESHOLDS:
        if days_until_court <= limit:
            return level
    return UrgencyLevel.STANDARD


# =============================================================================
# Temporal Evaluator
# =============================================================================

@dataclass
class TimingEvaluator:
    """
    Evaluates the dates of one situation against one policy.

    ``reference_date`` pins "today" for deterministic evaluation; it
    defaults to the current date.
    """

    reference_date: Optional[date] = None

    @property
    def today(self) -> date:
        return self.reference_date or date.today()

    def evaluate(
        self,
        situation: SituationInput,
        classification: Classification,
        policy: JurisdictionPolicy,
    ) -> TimingResult:
        years, anchor = self.elapsed_years(situation, policy)
        days_until_court = self.days_until(situation.court_date)
        urgency = urgency_for(days_until_court)
        if situation.judgment_received or situation.judgment_date is not None:
            urgency = UrgencyLevel.CRITICAL

        notice = None
        if policy.domain is Domain.EVICTION_DEFENSE:
            notice = self.notice_compliance(situation, classification, policy)

        return TimingResult(
            years_elapsed=years,
            elapsed_anchor=anchor,
            notice=notice,
            urgency=urgency,
            days_until_court=days_until_court,
            appeal=self.appeal_window(situation, policy),
        )

    def elapsed_years(
        self,
        situation: SituationInput,
        policy: JurisdictionPolicy,
    ) -> tuple[Optional[int], Optional[str]]:
        """Years since sentence completion, falling back to the disposition date."""
        for anchor in ("sentence_completion_date", "disposition_date"):
            start = getattr(situation, anchor)
            if start is not None:
                return years_between(start, self.today, policy.year_basis), anchor
        return None, None

    def days_until(self, target: Optional[date]) -> Optional[int]:
        if target is None:
            return None
        return (target - self.today).days

    def notice_compliance(
        self,
        situation: SituationInput,
        classification: Classification,
        policy: JurisdictionPolicy,
    ) -> NoticeCompliance:
        category = policy.get_category(classification.category)
        required = category.notice_days if category else None
        requirement = category.notice_requirement if category else None

        days_between = None
        if situation.notice_date is not None and situation.filing_date is not None:
            days_between = (situation.filing_date - situation.notice_date).days

        compliant = None
        if days_between is not None and required is not None:
            compliant = days_between >= required

        return NoticeCompliance(
            days_between=days_between,
            required_days=required,
            requirement=requirement,
            compliant=compliant,
        )

    def appeal_window(
        self,
        situation: SituationInput,
        policy: JurisdictionPolicy,
    ) -> Optional[AppealWindow]:
        if situation.judgment_date is None or policy.appeal_window_days is None:
            return None
        days_since = (self.today - situation.judgment_date).days
        # A future judgment date starts the window at its full length.
        elapsed = max(0, days_since)
        return AppealWindow(
            window_days=policy.appeal_window_days,
            days_since_judgment=elapsed,
            days_remaining=max(0, policy.appeal_window_days - elapsed),
            judgment_after_as_of=days_since < 0,
        )


def evaluate_timing(
    situation: SituationInput,
    classification: Classification,
    policy: JurisdictionPolicy,
    *,
    as_of: Optional[date] = None,
) -> TimingResult:
    """Convenience wrapper around TimingEvaluator."""
    return TimingEvaluator(reference_date=as_of).evaluate(situation, classification, policy)
