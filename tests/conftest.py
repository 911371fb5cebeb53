"""
Pytest configuration and fixtures for RemedyPilot tests.

Provides factory helpers for situations and small in-memory policies, plus
fixtures over the bundled jurisdiction packs.
"""
import pytest
from datetime import date
from types import MappingProxyType

from remedypilot.config import BUNDLED_PACKS_DIR
from remedypilot.engine import PolicyProvider
from remedypilot.models import (
    BlockingRule,
    BlockingSeverity,
    CategoryRule,
    ClassificationRule,
    DefenseRule,
    DefenseStrength,
    DefenseTrigger,
    DispositionKind,
    Domain,
    JurisdictionPolicy,
    Procedure,
    SituationInput,
)
from remedypilot.packs import PolicyPackLoader

# Fixed evaluation date so elapsed-time results never drift
AS_OF = date(2026, 10, 18)


# =============================================================================
# Factory Helpers
# =============================================================================

def make_situation(
    domain: Domain = Domain.CRIMINAL_RELIEF,
    jurisdiction: str = "ZZ",
    **fields,
) -> SituationInput:
    """Create a SituationInput; unspecified fields keep their defaults."""
    return SituationInput(domain=domain, jurisdiction=jurisdiction, **fields)


def make_category(
    id: str,
    disposition: DispositionKind = None,
    waiting_period_years: int = None,
    **fields,
) -> CategoryRule:
    """Create a CategoryRule with a display name derived from the ID."""
    return CategoryRule(
        id=id,
        name=fields.pop("name", id.replace("-", " ").title()),
        disposition=disposition,
        waiting_period_years=waiting_period_years,
        **fields,
    )


def make_defense(
    id: str,
    strength_when_met: DefenseStrength = DefenseStrength.POTENTIAL,
    when: list = None,
    notice_defense: bool = False,
    citation: str = None,
) -> DefenseRule:
    """Create a DefenseRule; ``when`` is a list of field names or (field, values) pairs."""
    triggers = []
    for trigger in when or []:
        if isinstance(trigger, tuple):
            triggers.append(DefenseTrigger(field=trigger[0], values=tuple(trigger[1])))
        else:
            triggers.append(DefenseTrigger(field=trigger))
    return DefenseRule(
        id=id,
        name=id.replace("_", " ").title(),
        description=f"{id} defense",
        strength_when_met=strength_when_met,
        triggers=tuple(triggers),
        notice_defense=notice_defense,
        citation=citation,
    )


def make_policy(
    code: str = "ZZ",
    domain: Domain = Domain.CRIMINAL_RELIEF,
    rules: list = None,
    categories: list = None,
    default_category: str = "unknown",
    blocking_rules: list = None,
    procedures: list = None,
    **fields,
) -> JurisdictionPolicy:
    """
    Create a JurisdictionPolicy.

    ``rules`` is a list of (category, keywords) pairs; keywords may be a flat
    list (one group) or a list of lists (all groups must match).
    """
    classification_rules = []
    for category, keywords in rules or []:
        if keywords and isinstance(keywords[0], (list, tuple)):
            groups = tuple(tuple(group) for group in keywords)
        else:
            groups = (tuple(keywords),)
        classification_rules.append(ClassificationRule(category=category, keyword_groups=groups))

    categories = categories or [make_category(default_category, DispositionKind.UNKNOWN)]
    return JurisdictionPolicy(
        code=code,
        name=fields.pop("name", "Testland"),
        domain=domain,
        version=fields.pop("version", "test.1"),
        default_category=default_category,
        classification_rules=tuple(classification_rules),
        categories=MappingProxyType({c.id: c for c in categories}),
        blocking_rules=tuple(blocking_rules or ()),
        procedures=MappingProxyType({p.id: p for p in procedures or ()}),
        **fields,
    )


def make_criminal_policy(**fields) -> JurisdictionPolicy:
    """A small criminal-relief table covering every disposition kind."""
    return make_policy(
        rules=[
            ("dismissed", ["dismiss"]),
            ("diversion", ["diversion"]),
            ("indictable", [["convict", "guilty"], ["indictable"]]),
            ("felony", ["convict", "guilty"]),
        ],
        categories=[
            make_category("dismissed", DispositionKind.DISMISSAL, summary="Charges were dismissed",
                          procedure="petition"),
            make_category("diversion", DispositionKind.DIVERSION, procedure="petition"),
            make_category("felony", DispositionKind.CONVICTION, 5, procedure="petition"),
            make_category("indictable", DispositionKind.CONVICTION, 10, early_pathway_years=5,
                          clean_slate=True, procedure="petition"),
            make_category("unknown", DispositionKind.UNKNOWN),
        ],
        blocking_rules=[
            BlockingRule(
                factor="DUI conviction",
                keyword_groups=(("dui",),),
                severity=BlockingSeverity.INELIGIBLE,
                description="DUI convictions are excluded",
                citation="Test Code 1",
            ),
            BlockingRule(
                factor="Drug distribution",
                keyword_groups=(("distribut",),),
                severity=BlockingSeverity.LIMITED,
                description="Distribution offenses have limited relief",
                procedure="limited_petition",
            ),
        ],
        procedures=[
            Procedure(id="petition", name="Petition", process=("File petition", "Attend hearing")),
            Procedure(id="limited_petition", name="Limited petition"),
        ],
        **fields,
    )


def make_eviction_policy(**fields) -> JurisdictionPolicy:
    """A small eviction table with one declared notice defense and one without."""
    return make_policy(
        domain=Domain.EVICTION_DEFENSE,
        rules=[
            ("nonpayment", ["rent", "nonpayment"]),
            ("illegal-activity", ["drug", "criminal"]),
        ],
        default_category="nonpayment",
        categories=[
            make_category(
                "nonpayment",
                notice_days=14,
                notice_citation="Test Code 505",
                procedure="answer",
                defenses=(
                    make_defense("improper_notice", notice_defense=True),
                    make_defense("payment_made", DefenseStrength.STRONG, when=["payment_made"]),
                    make_defense("habitability", DefenseStrength.MODERATE,
                                 when=[("property_condition", ["poor", "uninhabitable"])]),
                    make_defense("retaliation", DefenseStrength.MODERATE, when=["recent_complaint"]),
                ),
            ),
            make_category(
                "illegal-activity",
                notice_days=3,
                notice_citation="Test Code 505(a)",
                defenses=(make_defense("lack_of_knowledge", DefenseStrength.MODERATE, when=["tenant_unaware"]),),
            ),
        ],
        procedures=[Procedure(id="answer", name="Answer the complaint")],
        appeal_window_days=fields.pop("appeal_window_days", 10),
        universal_citations=MappingProxyType({"self_help_eviction": "Test Code 512"}),
        **fields,
    )


# =============================================================================
# Fixtures
# =============================================================================

@pytest.fixture
def as_of() -> date:
    return AS_OF


@pytest.fixture(scope="session")
def provider() -> PolicyProvider:
    """Provider over the bundled packs, shared across the session."""
    return PolicyProvider(packs_dir=BUNDLED_PACKS_DIR, loader=PolicyPackLoader())


@pytest.fixture
def criminal_policy() -> JurisdictionPolicy:
    return make_criminal_policy()


@pytest.fixture
def eviction_policy() -> JurisdictionPolicy:
    return make_eviction_policy()


@pytest.fixture
def tn_criminal(provider) -> JurisdictionPolicy:
    return provider.get_policy("TN", Domain.CRIMINAL_RELIEF)


@pytest.fixture
def tn_eviction(provider) -> JurisdictionPolicy:
    return provider.get_policy("TN", Domain.EVICTION_DEFENSE)
