"""Response schemas for the API."""

from typing import Any, Optional

from pydantic import BaseModel


class EvaluateResponse(BaseModel):
    """Verdict envelope returned by POST /evaluate."""
    domain: str
    jurisdiction: str
    policy_version: Optional[str] = None
    policy_pack_hash: Optional[str] = None
    verdict_hash: str
    verdict: dict[str, Any]

    # Provenance
    evaluated_at: str
    engine_version: str


class JurisdictionSummary(BaseModel):
    """One registered jurisdiction pack."""
    domain: str
    code: str
    name: Optional[str] = None
    version: Optional[str] = None
    loaded: bool


class ProcedureSummary(BaseModel):
    id: str
    name: str
    timeline: Optional[str] = None
    process: list[str]


class CategorySummary(BaseModel):
    id: str
    name: str
    description: Optional[str] = None
    disposition: Optional[str] = None
    waiting_period_years: Optional[int] = None
    early_pathway_years: Optional[int] = None
    notice_days: Optional[int] = None
    notice_requirement: Optional[str] = None
    procedure: Optional[str] = None
    defenses: list[str] = []


class BlockingRuleSummary(BaseModel):
    factor: str
    severity: str
    description: str
    citation: Optional[str] = None
    applies_to: list[str] = []


class JurisdictionDetail(BaseModel):
    """Full rule table of one jurisdiction pack."""
    domain: str
    code: str
    name: str
    version: str
    effective_date: Optional[str] = None
    policy_pack_hash: Optional[str] = None
    year_basis: str
    appeal_window_days: Optional[int] = None
    clean_slate_available: bool
    automatic_sealing: bool
    petition_available: bool
    default_category: str
    classification_order: list[str]
    courts: dict[str, str]
    categories: list[CategorySummary]
    blocking_rules: list[BlockingRuleSummary]
    procedures: list[ProcedureSummary]
