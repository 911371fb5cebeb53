"""
Normalized situation record.

Produced by the input normalizer; every field is populated with a typed
value or an explicit default, so later stages never check for missing keys.
"""
from __future__ import annotations

from dataclasses import dataclass, field
from datetime import date
from typing import Optional

from .enums import Domain

UNKNOWN = "unknown"


@dataclass(frozen=True)
class SituationInput:
    """
    One user-described legal situation.

    String fields hold ``UNKNOWN`` when not supplied. Dates are either a
    real calendar date or None, never a partially-parsed value.
    """
    domain: Optional[Domain] = None
    jurisdiction: str = UNKNOWN

    # Free text
    reason_description: str = UNKNOWN
    charge_type: str = UNKNOWN
    charge_description: str = UNKNOWN
    outcome: str = UNKNOWN
    county: str = UNKNOWN
    property_condition: str = UNKNOWN
    notice_type: str = UNKNOWN

    # Criminal-relief flags
    has_pending_charges: bool = False
    all_fines_paid: bool = False
    probation_completed: bool = False
    diversion_completed: bool = False
    prior_expungements: int = 0

    # Eviction-defense flags
    notice_received: Optional[bool] = None
    payment_made: bool = False
    partial_payment_accepted: bool = False
    locks_changed: bool = False
    utilities_shut_off: bool = False
    recent_complaint: bool = False
    violation_cured: bool = False
    rent_accepted_after_lease_end: bool = False
    tenant_unaware: bool = False
    reported_activity: bool = False
    judgment_received: bool = False

    # Dates
    disposition_date: Optional[date] = None
    sentence_completion_date: Optional[date] = None
    notice_date: Optional[date] = None
    filing_date: Optional[date] = None
    court_date: Optional[date] = None
    judgment_date: Optional[date] = None

    # Normalization issues (unparseable dates, unreadable flags)
    warnings: tuple[str, ...] = field(default_factory=tuple)

    def text(self, *names: str) -> str:
        """Join the named free-text fields, skipping unknown placeholders."""
        values = [getattr(self, name) for name in names]
        return " ".join(v for v in values if v and v != UNKNOWN)

    @property
    def is_degraded(self) -> bool:
        """True when normalization had to discard or default a supplied value."""
        return bool(self.warnings)
