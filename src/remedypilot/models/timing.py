"""
Temporal evaluation results.

Each computation is optional: a missing date suppresses only the value
that depends on it.
"""
from __future__ import annotations

from dataclasses import dataclass
from typing import Any, Optional

from .enums import UrgencyLevel


@dataclass(frozen=True)
class NoticeCompliance:
    """
    Days between notice and filing versus the category's notice period.

    ``compliant`` is None when either date or the numeric requirement is
    missing; ``requirement`` carries a non-numeric notice rule verbatim.
    """
    days_between: Optional[int] = None
    required_days: Optional[int] = None
    requirement: Optional[str] = None
    compliant: Optional[bool] = None

    @property
    def shortfall_days(self) -> Optional[int]:
        if self.compliant is not False:
            return None
        return self.required_days - self.days_between


@dataclass(frozen=True)
class AppealWindow:
    """Remaining appeal time after a judgment."""
    window_days: int
    days_since_judgment: int
    days_remaining: int
    judgment_after_as_of: bool = False

    @property
    def window_passed(self) -> bool:
        return self.days_remaining == 0


@dataclass(frozen=True)
class TimingResult:
    """Elapsed time, notice compliance, urgency and appeal window."""
    years_elapsed: Optional[int] = None
    elapsed_anchor: Optional[str] = None
    notice: Optional[NoticeCompliance] = None
    urgency: UrgencyLevel = UrgencyLevel.STANDARD
    days_until_court: Optional[int] = None
    appeal: Optional[AppealWindow] = None

    def timeline_analysis(self) -> dict[str, Any]:
        """Stable camelCase view used in eviction assessments."""
        notice = self.notice or NoticeCompliance()
        return {
            "compliant": notice.compliant,
            "daysBetweenNoticeAndFiling": notice.days_between,
            "requiredDays": notice.required_days,
            "noticeRequirement": notice.requirement,
            "daysUntilCourt": self.days_until_court,
            "daysSinceJudgment": self.appeal.days_since_judgment if self.appeal else None,
            "daysLeftToAppeal": self.appeal.days_remaining if self.appeal else None,
            "appealWindowPassed": self.appeal.window_passed if self.appeal else None,
            "urgencyLevel": self.urgency.value,
        }
