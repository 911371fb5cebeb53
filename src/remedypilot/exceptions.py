"""
RemedyPilot Exception Hierarchy

Structural failures raised by the evaluation engine.
Business outcomes (ineligible, pending, limited) are results, never exceptions.

Exception codes follow the pattern: RP_<CATEGORY>_<SPECIFIC>
"""
from __future__ import annotations

from dataclasses import dataclass, field
from typing import Any, Optional


@dataclass
class RemedyPilotError(Exception):
    """
    Base exception for all RemedyPilot errors.

    Attributes:
        message: Human-readable error description
        code: Machine-readable error code (RP_*)
        details: Additional context about the error
        jurisdiction: Jurisdiction code involved, if any
    """
    message: str
    code: str = "RP_INTERNAL_ERROR"
    details: dict[str, Any] = field(default_factory=dict)
    jurisdiction: Optional[str] = None

    def __post_init__(self) -> None:
        super().__init__(self.message)

    def __str__(self) -> str:
        parts = [f"[{self.code}] {self.message}"]
        if self.jurisdiction:
            parts.append(f"(jurisdiction: {self.jurisdiction})")
        return " ".join(parts)

    def to_dict(self) -> dict[str, Any]:
        """Serialize exception for logging/API responses."""
        result: dict[str, Any] = {
            "code": self.code,
            "message": self.message,
        }
        if self.details:
            result["details"] = self.details
        if self.jurisdiction:
            result["jurisdiction"] = self.jurisdiction
        return result


# =============================================================================
# Policy Pack Errors
# =============================================================================

@dataclass
class PolicyLoadError(RemedyPilotError):
    """Failed to read a jurisdiction pack from disk."""
    code: str = "RP_POLICY_LOAD_ERROR"


@dataclass
class PolicyValidationError(RemedyPilotError):
    """Jurisdiction pack failed schema or reference validation."""
    code: str = "RP_POLICY_VALIDATION_ERROR"


@dataclass
class PolicyVersionMismatch(RemedyPilotError):
    """Pack schema version is not compatible with this engine."""
    code: str = "RP_POLICY_VERSION_MISMATCH"


# =============================================================================
# Lookup Errors
# =============================================================================

@dataclass
class UnsupportedJurisdiction(RemedyPilotError):
    """No pack is registered for the requested jurisdiction and domain."""
    code: str = "RP_UNSUPPORTED_JURISDICTION"

    @property
    def supported(self) -> list[str]:
        return list(self.details.get("supported", []))


@dataclass
class UnsupportedDomain(RemedyPilotError):
    """The situation names no evaluation domain, or one the engine does not know."""
    code: str = "RP_UNSUPPORTED_DOMAIN"


# =============================================================================
# Evaluation Errors
# =============================================================================

@dataclass
class PolicyIntegrityError(RemedyPilotError):
    """Classifier produced a category the pack has no rule table for."""
    code: str = "RP_POLICY_INTEGRITY_ERROR"
