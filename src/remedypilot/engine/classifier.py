"""
RemedyPilot Situation Classifier

First-match keyword classification against a policy's ordered rules.

Rule order is a policy decision: when a description fits several
categories, the earlier rule wins. There is no longest-match or
alphabetical tie-break.
"""
from __future__ import annotations

from typing import Optional

from ..canon import normalize_text
from ..models import Classification, Domain, JurisdictionPolicy, SituationInput
from ..models.policy import KeywordGroups

# Situation fields read for classification, per domain
CLASSIFICATION_FIELDS = {
    Domain.CRIMINAL_RELIEF: ("outcome", "charge_type"),
    Domain.EVICTION_DEFENSE: ("reason_description",),
}

# Fields searched for blocking offenses on a conviction
OFFENSE_FIELDS = ("charge_type", "charge_description", "reason_description")


def match_keyword_groups(text: str, groups: KeywordGroups) -> Optional[tuple[str, ...]]:
    """
    Match a conjunction of keyword groups against normalized text.

    Returns the first matching keyword of each group, or None when any
    group has no keyword present.
    """
    matched = []
    for group in groups:
        hit = next((kw for kw in group if kw in text), None)
        if hit is None:
            return None
        matched.append(hit)
    return tuple(matched)


def classification_text(situation: SituationInput, domain: Domain) -> str:
    return normalize_text(situation.text(*CLASSIFICATION_FIELDS[domain]))


def offense_text(situation: SituationInput) -> str:
    return normalize_text(situation.text(*OFFENSE_FIELDS))


def classify(situation: SituationInput, policy: JurisdictionPolicy) -> Classification:
    """Return the category of the first matching rule, or the policy default."""
    text = classification_text(situation, policy.domain)
    if text:
        for index, rule in enumerate(policy.classification_rules):
            matched = match_keyword_groups(text, rule.keyword_groups)
            if matched is not None:
                return Classification(
                    category=rule.category,
                    matched_keywords=matched,
                    rule_index=index,
                )
    return Classification(category=policy.default_category)
