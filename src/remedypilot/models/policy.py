"""
Jurisdiction policy models.

A JurisdictionPolicy is the compiled, read-only form of one pack file.
It is built once by the pack loader and shared by every evaluation that
targets the same jurisdiction and domain.
"""
from __future__ import annotations

from collections.abc import Mapping
from dataclasses import dataclass, field
from datetime import date
from types import MappingProxyType
from typing import Any, Optional

from .enums import (
    BlockingSeverity,
    DefenseStrength,
    DispositionKind,
    Domain,
    YearBasis,
    Confidence,
)

KeywordGroups = tuple[tuple[str, ...], ...]


def _empty_mapping() -> Mapping[str, Any]:
    return MappingProxyType({})


# =============================================================================
# Classification
# =============================================================================

@dataclass(frozen=True)
class ClassificationRule:
    """
    Ordered rule mapping keywords to a category.

    ``keyword_groups`` is a conjunction of alternatives: the rule matches
    when every group has at least one keyword present in the text.
    """
    category: str
    keyword_groups: KeywordGroups


# =============================================================================
# Defenses
# =============================================================================

@dataclass(frozen=True)
class DefenseTrigger:
    """A situation field that, when set, strengthens a defense."""
    field: str
    values: tuple[Any, ...] = ()

    def is_met(self, situation: Any) -> bool:
        value = getattr(situation, self.field, None)
        if not self.values:
            return bool(value)
        if isinstance(value, str):
            return value.lower() in self.values
        return value in self.values


@dataclass(frozen=True)
class DefenseRule:
    """
    A defense option declared for one eviction category.

    The defense is always listed; it is raised to ``strength_when_met``
    when any trigger is met and stays ``potential`` otherwise.
    """
    id: str
    name: str
    description: str
    strength_when_met: DefenseStrength = DefenseStrength.POTENTIAL
    triggers: tuple[DefenseTrigger, ...] = ()
    notice_defense: bool = False
    citation: Optional[str] = None
    caveat: Optional[str] = None
    documentation: tuple[str, ...] = ()

    def is_triggered(self, situation: Any) -> bool:
        return any(trigger.is_met(situation) for trigger in self.triggers)


# =============================================================================
# Categories and Blocking Offenses
# =============================================================================

@dataclass(frozen=True)
class CategoryRule:
    """Thresholds and options attached to one classification category."""
    id: str
    name: str
    description: Optional[str] = None
    summary: Optional[str] = None

    # Criminal relief
    disposition: Optional[DispositionKind] = None
    waiting_period_years: Optional[int] = None
    early_pathway_years: Optional[int] = None
    clean_slate: bool = False
    confidence: Confidence = Confidence.MEDIUM
    caveat: Optional[str] = None

    # Eviction defense
    notice_days: Optional[int] = None
    notice_requirement: Optional[str] = None
    notice_citation: Optional[str] = None
    defenses: tuple[DefenseRule, ...] = ()

    procedure: Optional[str] = None

    @property
    def notice_rule(self) -> Optional[DefenseRule]:
        """The declared improper-notice defense, if the category has one."""
        for rule in self.defenses:
            if rule.notice_defense:
                return rule
        return None


@dataclass(frozen=True)
class BlockingRule:
    """An offense family that bars or narrows relief on conviction."""
    factor: str
    keyword_groups: KeywordGroups
    severity: BlockingSeverity
    description: str
    citation: Optional[str] = None
    applies_to: tuple[str, ...] = ()
    procedure: Optional[str] = None

    def applies_to_category(self, category: str) -> bool:
        return not self.applies_to or category in self.applies_to


@dataclass(frozen=True)
class Procedure:
    """Filing procedure referenced by categories and blocking rules."""
    id: str
    name: str
    process: tuple[str, ...] = ()
    timeline: Optional[str] = None


# =============================================================================
# Jurisdiction Policy
# =============================================================================

@dataclass(frozen=True)
class JurisdictionPolicy:
    """
    Immutable rule table for one jurisdiction and domain.

    Rule order in ``classification_rules`` and ``blocking_rules`` is
    significant: the first match wins.
    """
    code: str
    name: str
    domain: Domain
    version: str
    default_category: str
    classification_rules: tuple[ClassificationRule, ...]
    categories: Mapping[str, CategoryRule]
    blocking_rules: tuple[BlockingRule, ...] = ()
    procedures: Mapping[str, Procedure] = field(default_factory=_empty_mapping)
    year_basis: YearBasis = YearBasis.AVERAGE
    appeal_window_days: Optional[int] = None
    clean_slate_available: bool = False
    automatic_sealing: bool = False
    petition_available: bool = True
    courts: Mapping[str, str] = field(default_factory=_empty_mapping)
    universal_citations: Mapping[str, str] = field(default_factory=_empty_mapping)
    effective_date: Optional[date] = None
    pack_hash: Optional[str] = None

    def get_category(self, category_id: str) -> Optional[CategoryRule]:
        return self.categories.get(category_id)

    def get_procedure(self, procedure_id: Optional[str]) -> Optional[Procedure]:
        if procedure_id is None:
            return None
        return self.procedures.get(procedure_id)

    @property
    def key(self) -> tuple[Domain, str]:
        return (self.domain, self.code)
