"""
RemedyPilot Enumerations

All enums inherit from (str, Enum) so verdicts serialize as plain strings.
"""
from __future__ import annotations

from enum import Enum


# =============================================================================
# Domains
# =============================================================================

class Domain(str, Enum):
    """Legal situation families the engine evaluates."""
    CRIMINAL_RELIEF = "criminal-relief"
    EVICTION_DEFENSE = "eviction-defense"


# =============================================================================
# Verdict Tags
# =============================================================================

class EligibilityStatus(str, Enum):
    """Terminal status of one evaluation."""
    ELIGIBLE = "eligible"
    INELIGIBLE = "ineligible"
    PENDING = "pending"          # Time or a program must still run
    LIMITED = "limited"          # Relief narrowed, not barred
    UNKNOWN = "unknown"          # Not enough information to decide


class Confidence(str, Enum):
    """How much the verdict depends on missing or assumed facts."""
    LOW = "low"
    MEDIUM = "medium"
    HIGH = "high"

    def downgrade(self) -> "Confidence":
        """One level lower; LOW stays LOW."""
        if self is Confidence.HIGH:
            return Confidence.MEDIUM
        return Confidence.LOW


class DefenseStrength(str, Enum):
    """Strength tier of a candidate eviction defense."""
    STRONG = "strong"
    MODERATE = "moderate"
    POTENTIAL = "potential"

    @property
    def rank(self) -> int:
        """Sort key: lower ranks first."""
        return _STRENGTH_RANK[self]


_STRENGTH_RANK = {
    DefenseStrength.STRONG: 1,
    DefenseStrength.MODERATE: 2,
    DefenseStrength.POTENTIAL: 3,
}


class UrgencyLevel(str, Enum):
    """Proximity of the next court deadline."""
    CRITICAL = "critical"
    URGENT = "urgent"
    ELEVATED = "elevated"
    STANDARD = "standard"


# =============================================================================
# Policy Vocabulary
# =============================================================================

class DispositionKind(str, Enum):
    """Legal outcome family a criminal category belongs to."""
    DISMISSAL = "dismissal"
    ACQUITTAL = "acquittal"
    DIVERSION = "diversion"
    CONVICTION = "conviction"
    UNKNOWN = "unknown"


class BlockingSeverity(str, Enum):
    """What a matched blocking offense does to the verdict."""
    INELIGIBLE = "ineligible"
    LIMITED = "limited"


class YearBasis(str, Enum):
    """
    How elapsed years are counted against a waiting period.

    AVERAGE divides elapsed days by 365.25 and floors.
    CALENDAR counts whole anniversaries of the anchor date.
    """
    AVERAGE = "average"
    CALENDAR = "calendar"
