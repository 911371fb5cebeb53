"""
RemedyPilot Input Normalizer

Turns an arbitrary key/value situation record into a SituationInput.

Accepts camelCase keys as sent by the intake forms (``hasPendingCharges``)
and snake_case keys (``has_pending_charges``), plus a few legacy names
(``state``, ``evictionReason``, ``convictionDate``).

Normalization never fails. Values that cannot be read fall back to their
defaults and leave a warning on the record; the assembler lowers the
verdict's confidence when warnings are present.
"""
from __future__ import annotations

import logging
from collections.abc import Mapping
from datetime import date, datetime
from typing import Any, Optional

from pydantic import AliasChoices, BaseModel, ConfigDict, Field, ValidationInfo, field_validator
from pydantic.alias_generators import to_camel

from ..models import UNKNOWN, Domain, SituationInput

logger = logging.getLogger(__name__)

TRUE_STRINGS = frozenset({"true", "yes", "y", "1", "on"})
FALSE_STRINGS = frozenset({"false", "no", "n", "0", "off", ""})

DATE_FORMATS = ("%m/%d/%Y", "%m-%d-%Y", "%B %d, %Y", "%b %d, %Y")

DOMAIN_ALIASES = {
    "criminal-relief": Domain.CRIMINAL_RELIEF,
    "criminal_relief": Domain.CRIMINAL_RELIEF,
    "expungement": Domain.CRIMINAL_RELIEF,
    "record-relief": Domain.CRIMINAL_RELIEF,
    "eviction-defense": Domain.EVICTION_DEFENSE,
    "eviction_defense": Domain.EVICTION_DEFENSE,
    "eviction": Domain.EVICTION_DEFENSE,
}

BOOL_FIELDS = (
    "has_pending_charges",
    "all_fines_paid",
    "probation_completed",
    "diversion_completed",
    "payment_made",
    "partial_payment_accepted",
    "locks_changed",
    "utilities_shut_off",
    "recent_complaint",
    "violation_cured",
    "rent_accepted_after_lease_end",
    "tenant_unaware",
    "reported_activity",
    "judgment_received",
)

TEXT_FIELDS = (
    "reason_description",
    "charge_type",
    "charge_description",
    "outcome",
    "county",
    "property_condition",
    "notice_type",
)

DATE_FIELDS = (
    "disposition_date",
    "sentence_completion_date",
    "notice_date",
    "filing_date",
    "court_date",
    "judgment_date",
)


def _warn(info: ValidationInfo, message: str) -> None:
    if isinstance(info.context, dict):
        info.context.setdefault("warnings", []).append(message)


def read_flag(value: Any) -> Optional[bool]:
    """Read a yes/no value from a form field, or None when it is not one."""
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return bool(value)
    if isinstance(value, str):
        key = value.strip().lower()
        if key in TRUE_STRINGS:
            return True
        if key in FALSE_STRINGS:
            return False
    return None


def parse_date(value: Any) -> Optional[date]:
    """
    Parse a calendar date, returning None when the value is not a valid date.

    Accepts ISO dates and datetimes (``2024-03-01``, ``2024-03-01T09:30:00Z``)
    and common US forms (``03/01/2024``, ``March 1, 2024``).
    """
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    if not isinstance(value, str):
        return None
    text = value.strip()
    try:
        return date.fromisoformat(text)
    except ValueError:
        pass
    try:
        return datetime.fromisoformat(text.replace("Z", "+00:00")).date()
    except ValueError:
        pass
    for fmt in DATE_FORMATS:
        try:
            return datetime.strptime(text, fmt).date()
        except ValueError:
            continue
    return None


# =============================================================================
# Lenient Record Model
# =============================================================================

class SituationRecord(BaseModel):
    """
    Pydantic view of the raw situation with lenient coercion.

    Every field has a ``mode="before"`` validator that maps unreadable input
    to the field default, so validation itself cannot fail.
    """
    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    domain: Optional[Domain] = None
    jurisdiction: str = Field(
        UNKNOWN,
        validation_alias=AliasChoices("jurisdiction", "jurisdictionCode", "state", "stateCode"),
    )

    reason_description: str = Field(
        UNKNOWN,
        validation_alias=AliasChoices(
            "reasonDescription", "reason_description", "evictionReason", "eviction_reason", "reason",
        ),
    )
    charge_type: str = UNKNOWN
    charge_description: str = Field(
        UNKNOWN,
        validation_alias=AliasChoices("chargeDescription", "charge_description", "offense", "chargeName"),
    )
    outcome: str = Field(UNKNOWN, validation_alias=AliasChoices("outcome", "disposition"))
    county: str = UNKNOWN
    property_condition: str = UNKNOWN
    notice_type: str = UNKNOWN

    has_pending_charges: bool = False
    all_fines_paid: bool = False
    probation_completed: bool = False
    diversion_completed: bool = False
    prior_expungements: int = 0

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

    disposition_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices("dispositionDate", "disposition_date", "convictionDate", "conviction_date"),
    )
    sentence_completion_date: Optional[date] = Field(
        None,
        validation_alias=AliasChoices(
            "sentenceCompletionDate", "sentence_completion_date", "completionDate",
        ),
    )
    notice_date: Optional[date] = None
    filing_date: Optional[date] = None
    court_date: Optional[date] = None
    judgment_date: Optional[date] = None

    @field_validator("domain", mode="before")
    @classmethod
    def coerce_domain(cls, v: Any, info: ValidationInfo) -> Optional[Domain]:
        if v is None or isinstance(v, Domain):
            return v
        key = str(v).strip().lower()
        if not key:
            return None
        domain = DOMAIN_ALIASES.get(key)
        if domain is None:
            _warn(info, f"Unrecognized domain '{v}'")
        return domain

    @field_validator("jurisdiction", mode="before")
    @classmethod
    def coerce_jurisdiction(cls, v: Any) -> str:
        if v is None:
            return UNKNOWN
        code = str(v).strip().upper()
        return code or UNKNOWN

    @field_validator(*TEXT_FIELDS, mode="before")
    @classmethod
    def coerce_text(cls, v: Any) -> str:
        if v is None:
            return UNKNOWN
        text = str(v).strip()
        return text or UNKNOWN

    @field_validator(*BOOL_FIELDS, mode="before")
    @classmethod
    def coerce_bool(cls, v: Any, info: ValidationInfo) -> bool:
        if v is None:
            return False
        flag = read_flag(v)
        if flag is None:
            _warn(info, f"Could not read '{info.field_name}' value {v!r}; treated as false")
            return False
        return flag

    @field_validator("notice_received", mode="before")
    @classmethod
    def coerce_reported_flag(cls, v: Any, info: ValidationInfo) -> Optional[bool]:
        """Keep "not stated" apart from an explicit no."""
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        flag = read_flag(v)
        if flag is None:
            _warn(info, f"Could not read '{info.field_name}' value {v!r}; treated as not stated")
        return flag

    @field_validator("prior_expungements", mode="before")
    @classmethod
    def coerce_count(cls, v: Any, info: ValidationInfo) -> int:
        if v is None or v == "":
            return 0
        if isinstance(v, bool):
            return int(v)
        try:
            count = int(float(v))
        except (TypeError, ValueError, OverflowError):
            _warn(info, f"Could not read '{info.field_name}' value {v!r}; treated as 0")
            return 0
        if count < 0:
            _warn(info, f"Negative '{info.field_name}' value {v!r}; treated as 0")
            return 0
        return count

    @field_validator(*DATE_FIELDS, mode="before")
    @classmethod
    def coerce_date(cls, v: Any, info: ValidationInfo) -> Optional[date]:
        if v is None or (isinstance(v, str) and not v.strip()):
            return None
        parsed = parse_date(v)
        if parsed is None:
            _warn(info, f"Unparseable date for '{info.field_name}': {v!r}")
        return parsed

    def to_situation(self, warnings: list[str]) -> SituationInput:
        values = self.model_dump()
        return SituationInput(**values, warnings=tuple(warnings))


# =============================================================================
# Public API
# =============================================================================

def normalize_situation(
    raw: Any,
    *,
    domain: Optional[str] = None,
    jurisdiction: Optional[str] = None,
) -> SituationInput:
    """
    Normalize a raw situation record.

    Args:
        raw: Key/value record from a form, JSON body or file
        domain: Overrides any ``domain`` key in the record
        jurisdiction: Overrides any ``jurisdiction``/``state`` key in the record

    Returns:
        SituationInput with every field populated
    """
    warnings: list[str] = []
    if isinstance(raw, Mapping):
        data = dict(raw)
    else:
        if raw is not None:
            warnings.append(f"Situation input was a {type(raw).__name__}, not a key/value record")
        data = {}

    if domain is not None:
        data["domain"] = domain
    if jurisdiction is not None:
        data["jurisdiction"] = jurisdiction
        # Legacy keys would otherwise compete with the explicit override
        data.pop("state", None)
        data.pop("stateCode", None)
        data.pop("jurisdictionCode", None)

    context = {"warnings": warnings}
    record = SituationRecord.model_validate(data, context=context)
    situation = record.to_situation(context["warnings"])

    if situation.warnings:
        logger.debug("Normalized situation with %d warnings", len(situation.warnings))
    return situation
