"""Jurisdiction pack endpoints."""

from typing import Optional

from fastapi import APIRouter, HTTPException

from remedypilot.engine import PolicyProvider, coerce_domain, get_default_provider
from remedypilot.exceptions import UnsupportedDomain, UnsupportedJurisdiction
from remedypilot.models import JurisdictionPolicy

from ..schemas.responses import (
    BlockingRuleSummary,
    CategorySummary,
    JurisdictionDetail,
    JurisdictionSummary,
    ProcedureSummary,
)

router = APIRouter(prefix="/jurisdictions", tags=["Jurisdictions"])

# Shared provider instance (set by main.py)
provider: Optional[PolicyProvider] = None


def set_provider(p: PolicyProvider):
    global provider
    provider = p


def _active() -> PolicyProvider:
    return provider or get_default_provider()


@router.get("", response_model=list[JurisdictionSummary])
async def list_jurisdictions(domain: Optional[str] = None):
    """
    List registered jurisdiction packs.

    Optionally filter by domain: criminal-relief, eviction-defense
    """
    active = _active()
    try:
        wanted = coerce_domain(domain) if domain else None
    except UnsupportedDomain as e:
        raise HTTPException(status_code=400, detail=e.to_dict())

    summaries = []
    for key_domain, code in active.registered_keys():
        if wanted is not None and key_domain is not wanted:
            continue
        summary = JurisdictionSummary(domain=key_domain.value, code=code, loaded=active.is_loaded(code, key_domain))
        if summary.loaded:
            policy = active.get_policy(code, key_domain)
            summary.name = policy.name
            summary.version = policy.version
        summaries.append(summary)
    return summaries


@router.get("/{domain}/{code}", response_model=JurisdictionDetail)
async def get_jurisdiction(domain: str, code: str):
    """Get the full rule table of one jurisdiction pack."""
    try:
        policy = _active().get_policy(code, domain)
    except UnsupportedDomain as e:
        raise HTTPException(status_code=404, detail=e.to_dict())
    except UnsupportedJurisdiction as e:
        raise HTTPException(
            status_code=404,
            detail={**e.to_dict(), "supportedJurisdictions": e.supported},
        )
    return _detail(policy)


def _detail(policy: JurisdictionPolicy) -> JurisdictionDetail:
    return JurisdictionDetail(
        domain=policy.domain.value,
        code=policy.code,
        name=policy.name,
        version=policy.version,
        effective_date=policy.effective_date.isoformat() if policy.effective_date else None,
        policy_pack_hash=policy.pack_hash,
        year_basis=policy.year_basis.value,
        appeal_window_days=policy.appeal_window_days,
        clean_slate_available=policy.clean_slate_available,
        automatic_sealing=policy.automatic_sealing,
        petition_available=policy.petition_available,
        default_category=policy.default_category,
        classification_order=[rule.category for rule in policy.classification_rules],
        courts=dict(policy.courts),
        categories=[
            CategorySummary(
                id=c.id,
                name=c.name,
                description=c.description,
                disposition=c.disposition.value if c.disposition else None,
                waiting_period_years=c.waiting_period_years,
                early_pathway_years=c.early_pathway_years,
                notice_days=c.notice_days,
                notice_requirement=c.notice_requirement,
                procedure=c.procedure,
                defenses=[d.id for d in c.defenses],
            )
            for c in policy.categories.values()
        ],
        blocking_rules=[
            BlockingRuleSummary(
                factor=b.factor,
                severity=b.severity.value,
                description=b.description,
                citation=b.citation,
                applies_to=list(b.applies_to),
            )
            for b in policy.blocking_rules
        ],
        procedures=[
            ProcedureSummary(id=p.id, name=p.name, timeline=p.timeline, process=list(p.process))
            for p in policy.procedures.values()
        ],
    )
