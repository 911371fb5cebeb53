"""
RemedyPilot Jurisdiction Pack Schemas

Pydantic models for validating jurisdiction pack YAML files.

A pack describes one jurisdiction for one domain: ordered classification
rules, per-category thresholds, ordered blocking offenses, procedures and
defense options. These schemas map to the frozen models in
remedypilot.models.policy.

Schema versioning:
- schema_version tracks breaking changes
- The loader rejects packs whose major version differs
"""
from __future__ import annotations

from datetime import date
from typing import Any, Literal, Optional, Union

from pydantic import BaseModel, Field, field_validator, model_validator


# =============================================================================
# Schema Version
# =============================================================================

SCHEMA_VERSION = "1.0.0"


# =============================================================================
# Enums as Literals (for YAML validation)
# =============================================================================

DomainValue = Literal["criminal-relief", "eviction-defense"]

DispositionValue = Literal["dismissal", "acquittal", "diversion", "conviction", "unknown"]

SeverityValue = Literal["ineligible", "limited"]

StrengthValue = Literal["strong", "moderate", "potential"]

ConfidenceValue = Literal["low", "medium", "high"]

YearBasisValue = Literal["average", "calendar"]


# =============================================================================
# Keyword Rules
# =============================================================================

class KeywordRuleSchema(BaseModel):
    """
    Shared keyword fields.

    ``keywords`` is shorthand for a single group of alternatives.
    ``all_of`` lists several groups that must all match.
    """
    keywords: Optional[list[str]] = Field(None, description="Any one of these must appear")
    all_of: Optional[list[list[str]]] = Field(None, description="One keyword from every group must appear")

    @model_validator(mode="after")
    def validate_keywords(self) -> "KeywordRuleSchema":
        if (self.keywords is None) == (self.all_of is None):
            raise ValueError("Exactly one of 'keywords' or 'all_of' is required")
        groups = [self.keywords] if self.keywords is not None else self.all_of
        if not groups or any(not group for group in groups):
            raise ValueError("Keyword groups must not be empty")
        for group in groups:
            if any(not kw.strip() for kw in group):
                raise ValueError("Keywords must not be blank")
        return self

    def keyword_groups(self) -> list[list[str]]:
        return [self.keywords] if self.keywords is not None else list(self.all_of or [])


class ClassificationRuleSchema(KeywordRuleSchema):
    """Ordered rule: first match assigns ``category``."""
    category: str = Field(..., description="Category ID assigned on match")


class BlockingRuleSchema(KeywordRuleSchema):
    """Offense family that bars or narrows relief on conviction."""
    factor: str = Field(..., description="Blocking factor name shown to the user")
    severity: SeverityValue = Field("ineligible", description="Effect of a match")
    description: str = Field(..., description="Explanation of the block")
    citation: Optional[str] = Field(None, description="Statute or rule reference")
    applies_to: list[str] = Field(default_factory=list, description="Category IDs; empty means all convictions")
    procedure: Optional[str] = Field(None, description="Procedure override when matched")


# =============================================================================
# Defense Schemas
# =============================================================================

class DefenseTriggerSchema(BaseModel):
    """Situation field that strengthens a defense when set."""
    field: str = Field(..., description="SituationInput field name")
    values: list[Union[bool, str]] = Field(
        default_factory=list,
        description="Accepted values; empty means any truthy value",
    )


class DefenseRuleSchema(BaseModel):
    """A defense option listed for an eviction category."""
    id: str = Field(..., description="Unique within the category")
    name: str
    description: str
    strength_when_met: StrengthValue = Field("potential", description="Strength when a trigger is met")
    when: list[DefenseTriggerSchema] = Field(default_factory=list, description="Any trigger raises the strength")
    notice_defense: bool = Field(False, description="Raised to strong when notice compliance fails")
    citation: Optional[str] = None
    caveat: Optional[str] = None
    documentation: list[str] = Field(default_factory=list)


# =============================================================================
# Category Schema
# =============================================================================

class CategorySchema(BaseModel):
    """Thresholds and options for one classification category."""
    id: str = Field(..., description="Category ID referenced by rules")
    name: str = Field(..., description="Display name")
    description: Optional[str] = None
    summary: Optional[str] = Field(None, description="Reason text used when relief is available")

    # Criminal relief
    disposition: Optional[DispositionValue] = None
    waiting_period_years: Optional[int] = Field(None, ge=0)
    early_pathway_years: Optional[int] = Field(None, ge=0)
    clean_slate: bool = False
    confidence: ConfidenceValue = "medium"
    caveat: Optional[str] = Field(None, description="Warning attached to every conviction result in this category")

    # Eviction defense
    notice_days: Optional[int] = Field(None, ge=0)
    notice_requirement: Optional[str] = None
    notice_citation: Optional[str] = None
    defenses: list[DefenseRuleSchema] = Field(default_factory=list)

    procedure: Optional[str] = None

    @model_validator(mode="after")
    def validate_pathway(self) -> "CategorySchema":
        if self.early_pathway_years is not None:
            if self.waiting_period_years is None:
                raise ValueError(f"Category '{self.id}': early_pathway_years requires waiting_period_years")
            if self.early_pathway_years >= self.waiting_period_years:
                raise ValueError(
                    f"Category '{self.id}': early_pathway_years must be shorter than waiting_period_years"
                )
        return self


# =============================================================================
# Procedures and Courts
# =============================================================================

class ProcedureSchema(BaseModel):
    """Filing procedure with ordered process steps."""
    id: str
    name: str
    process: list[str] = Field(default_factory=list)
    timeline: Optional[str] = None


class CourtsSchema(BaseModel):
    """Courts that hear the case and the appeal."""
    initial: Optional[str] = None
    appeal: Optional[str] = None


# =============================================================================
# Jurisdiction Pack Schema
# =============================================================================

class JurisdictionPackSchema(BaseModel):
    """
    Top-level schema for a jurisdiction pack file.

    Example:
        schema_version: "1.0.0"
        code: TN
        name: Tennessee
        domain: criminal-relief
        version: "2024.1"
        default_category: unknown
        classification_rules:
          - category: dismissed-charge
            keywords: [dismiss, dropped]
        categories:
          - id: dismissed-charge
            name: Dismissed charge
            disposition: dismissal
    """
    schema_version: str = Field(SCHEMA_VERSION, description="Pack schema version")
    code: str = Field(..., pattern=r"^[A-Za-z]{2,3}$", description="Jurisdiction code")
    name: str
    domain: DomainValue
    version: str = Field(..., description="Content version of this pack")
    effective_date: Optional[date] = None

    year_basis: YearBasisValue = "average"
    appeal_window_days: Optional[int] = Field(None, ge=0)
    clean_slate_available: bool = False
    automatic_sealing: bool = False
    petition_available: bool = True
    courts: Optional[CourtsSchema] = None
    universal_citations: dict[str, str] = Field(default_factory=dict)

    default_category: str
    classification_rules: list[ClassificationRuleSchema] = Field(..., min_length=1)
    categories: list[CategorySchema] = Field(..., min_length=1)
    blocking_rules: list[BlockingRuleSchema] = Field(default_factory=list)
    procedures: list[ProcedureSchema] = Field(default_factory=list)

    @field_validator("code")
    @classmethod
    def upper_code(cls, v: str) -> str:
        return v.upper()

    @model_validator(mode="after")
    def validate_domain_fields(self) -> "JurisdictionPackSchema":
        if self.domain == "eviction-defense" and self.appeal_window_days is None:
            raise ValueError("Eviction packs require appeal_window_days")
        if self.domain == "criminal-relief":
            for cat in self.categories:
                if cat.disposition is None:
                    raise ValueError(f"Category '{cat.id}' requires a disposition")
                if cat.disposition == "conviction" and cat.waiting_period_years is None:
                    raise ValueError(f"Conviction category '{cat.id}' requires waiting_period_years")
        return self


# =============================================================================
# Validation Helpers
# =============================================================================

def validate_jurisdiction_pack(data: dict[str, Any]) -> JurisdictionPackSchema:
    """
    Validate a pack dictionary against the schema.

    Raises:
        pydantic.ValidationError: If validation fails
    """
    return JurisdictionPackSchema.model_validate(data)


def check_schema_version(data: dict[str, Any]) -> bool:
    """True when the pack's major schema version matches the engine's."""
    pack_version = str(data.get("schema_version", SCHEMA_VERSION))
    return pack_version.split(".")[0] == SCHEMA_VERSION.split(".")[0]
