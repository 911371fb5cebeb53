"""
RemedyPilot Jurisdiction Pack Loader

Loads and validates jurisdiction packs from YAML files and compiles them
into immutable JurisdictionPolicy objects.
"""
from __future__ import annotations

import logging
from dataclasses import fields
from pathlib import Path
from types import MappingProxyType
from typing import Any, Union

import yaml
from pydantic import ValidationError

from ..canon import content_hash, normalize_text
from ..exceptions import PolicyLoadError, PolicyValidationError, PolicyVersionMismatch
from ..models import (
    BlockingRule,
    BlockingSeverity,
    CategoryRule,
    ClassificationRule,
    Confidence,
    DefenseRule,
    DefenseStrength,
    DefenseTrigger,
    DispositionKind,
    Domain,
    JurisdictionPolicy,
    Procedure,
    SituationInput,
    YearBasis,
)
from .schema import (
    SCHEMA_VERSION,
    BlockingRuleSchema,
    CategorySchema,
    ClassificationRuleSchema,
    DefenseRuleSchema,
    JurisdictionPackSchema,
    ProcedureSchema,
    check_schema_version,
    validate_jurisdiction_pack,
)

logger = logging.getLogger(__name__)

# Fields a defense trigger may reference
SITUATION_FIELDS = frozenset(f.name for f in fields(SituationInput)) - {"warnings", "domain"}


# =============================================================================
# Reference Integrity Validation
# =============================================================================

def validate_reference_integrity(policy: JurisdictionPolicy, path: str = "") -> None:
    """
    Validate internal references are consistent.

    Catches:
    - Default or rule categories with no category table
    - Blocking rules scoped to unknown categories
    - Procedure keys with no procedure entry
    - Duplicate defense IDs within a category
    - Defense triggers naming unknown situation fields

    Raises:
        ValueError: If reference integrity errors are found
    """
    errors = []
    category_ids = set(policy.categories)

    if policy.default_category not in category_ids:
        errors.append(f"Default category '{policy.default_category}' has no category entry")

    for index, rule in enumerate(policy.classification_rules):
        if rule.category not in category_ids:
            errors.append(f"Classification rule {index} references unknown category '{rule.category}'")

    for rule in policy.blocking_rules:
        for cat_id in rule.applies_to:
            if cat_id not in category_ids:
                errors.append(f"Blocking rule '{rule.factor}' references unknown category '{cat_id}'")
        if rule.procedure and rule.procedure not in policy.procedures:
            errors.append(f"Blocking rule '{rule.factor}' references unknown procedure '{rule.procedure}'")

    for category in policy.categories.values():
        if category.procedure and category.procedure not in policy.procedures:
            errors.append(f"Category '{category.id}' references unknown procedure '{category.procedure}'")

        seen_defense_ids: set[str] = set()
        for defense in category.defenses:
            if defense.id in seen_defense_ids:
                errors.append(f"Duplicate defense ID '{defense.id}' in category '{category.id}'")
            seen_defense_ids.add(defense.id)
            for trigger in defense.triggers:
                if trigger.field not in SITUATION_FIELDS:
                    errors.append(
                        f"Defense '{defense.id}' triggers on unknown situation field '{trigger.field}'"
                    )

    if errors:
        path_str = f" in {path}" if path else ""
        raise ValueError(
            f"Reference integrity errors{path_str}:\n" +
            "\n".join(f"  - {e}" for e in errors)
        )


# =============================================================================
# Schema to Model Converters
# =============================================================================

def _keyword_groups(schema: Union[ClassificationRuleSchema, BlockingRuleSchema]) -> tuple[tuple[str, ...], ...]:
    return tuple(
        tuple(normalize_text(kw) for kw in group)
        for group in schema.keyword_groups()
    )


def _convert_classification_rule(schema: ClassificationRuleSchema) -> ClassificationRule:
    return ClassificationRule(category=schema.category, keyword_groups=_keyword_groups(schema))


def _convert_blocking_rule(schema: BlockingRuleSchema) -> BlockingRule:
    return BlockingRule(
        factor=schema.factor,
        keyword_groups=_keyword_groups(schema),
        severity=BlockingSeverity(schema.severity),
        description=schema.description,
        citation=schema.citation,
        applies_to=tuple(schema.applies_to),
        procedure=schema.procedure,
    )


def _convert_defense_rule(schema: DefenseRuleSchema) -> DefenseRule:
    triggers = tuple(
        DefenseTrigger(
            field=t.field,
            values=tuple(v.lower() if isinstance(v, str) else v for v in t.values),
        )
        for t in schema.when
    )
    return DefenseRule(
        id=schema.id,
        name=schema.name,
        description=schema.description,
        strength_when_met=DefenseStrength(schema.strength_when_met),
        triggers=triggers,
        notice_defense=schema.notice_defense,
        citation=schema.citation,
        caveat=schema.caveat,
        documentation=tuple(schema.documentation),
    )


def _convert_category(schema: CategorySchema) -> CategoryRule:
    return CategoryRule(
        id=schema.id,
        name=schema.name,
        description=schema.description,
        summary=schema.summary,
        disposition=DispositionKind(schema.disposition) if schema.disposition else None,
        waiting_period_years=schema.waiting_period_years,
        early_pathway_years=schema.early_pathway_years,
        clean_slate=schema.clean_slate,
        confidence=Confidence(schema.confidence),
        caveat=schema.caveat,
        notice_days=schema.notice_days,
        notice_requirement=schema.notice_requirement,
        notice_citation=schema.notice_citation,
        defenses=tuple(_convert_defense_rule(d) for d in schema.defenses),
        procedure=schema.procedure,
    )


def _convert_procedure(schema: ProcedureSchema) -> Procedure:
    return Procedure(
        id=schema.id,
        name=schema.name,
        process=tuple(schema.process),
        timeline=schema.timeline,
    )


def _convert_jurisdiction_pack(schema: JurisdictionPackSchema, pack_hash: str) -> JurisdictionPolicy:
    """Convert JurisdictionPackSchema to JurisdictionPolicy."""
    courts: dict[str, str] = {}
    if schema.courts is not None:
        courts = {k: v for k, v in schema.courts.model_dump().items() if v}

    return JurisdictionPolicy(
        code=schema.code,
        name=schema.name,
        domain=Domain(schema.domain),
        version=schema.version,
        default_category=schema.default_category,
        classification_rules=tuple(_convert_classification_rule(r) for r in schema.classification_rules),
        categories=MappingProxyType({c.id: _convert_category(c) for c in schema.categories}),
        blocking_rules=tuple(_convert_blocking_rule(r) for r in schema.blocking_rules),
        procedures=MappingProxyType({p.id: _convert_procedure(p) for p in schema.procedures}),
        year_basis=YearBasis(schema.year_basis),
        appeal_window_days=schema.appeal_window_days,
        clean_slate_available=schema.clean_slate_available,
        automatic_sealing=schema.automatic_sealing,
        petition_available=schema.petition_available,
        courts=MappingProxyType(courts),
        universal_citations=MappingProxyType(dict(schema.universal_citations)),
        effective_date=schema.effective_date,
        pack_hash=pack_hash,
    )


# =============================================================================
# Jurisdiction Pack Loader
# =============================================================================

class PolicyPackLoader:
    """
    Loads jurisdiction packs from YAML files.

    The loader holds no cache; PolicyProvider owns the load-once lifecycle.

    Usage:
        loader = PolicyPackLoader()
        policy = loader.load("packs/data/criminal-relief/tn.yaml")
    """

    def __init__(self, strict_version: bool = True):
        """
        Args:
            strict_version: If True, reject packs with incompatible schema versions
        """
        self.strict_version = strict_version

    def load(self, path: Union[str, Path]) -> JurisdictionPolicy:
        """
        Load a jurisdiction pack from a file.

        Raises:
            PolicyLoadError: If the file cannot be read or parsed
            PolicyValidationError: If validation fails
            PolicyVersionMismatch: If schema version incompatible
        """
        path = Path(path)

        try:
            data = self._load_file(path)
        except (OSError, yaml.YAMLError) as e:
            raise PolicyLoadError(
                message=f"Failed to load jurisdiction pack: {e}",
                details={"path": str(path), "error": str(e)},
            ) from e

        policy = self.load_dict(data, source=str(path))
        logger.debug(
            "Compiled jurisdiction pack %s/%s",
            policy.domain.value,
            policy.code,
            extra={"pack_path": str(path)},
        )
        return policy

    def load_dict(self, data: Any, source: str = "<memory>") -> JurisdictionPolicy:
        """Validate and compile an already-parsed pack."""
        if not isinstance(data, dict):
            raise PolicyLoadError(
                message="Jurisdiction pack must be a mapping at the top level",
                details={"path": source, "type": type(data).__name__},
            )

        if self.strict_version and not check_schema_version(data):
            pack_version = data.get("schema_version", "unknown")
            raise PolicyVersionMismatch(
                message=f"Schema version mismatch: pack has {pack_version}, expected {SCHEMA_VERSION}",
                details={
                    "path": source,
                    "pack_version": pack_version,
                    "expected_version": SCHEMA_VERSION,
                },
            )

        try:
            schema = validate_jurisdiction_pack(data)
        except ValidationError as e:
            raise PolicyValidationError(
                message=f"Jurisdiction pack validation failed: {e.error_count()} errors",
                details={
                    "errors": e.errors(include_url=False, include_context=False, include_input=False),
                    "path": source,
                },
            ) from e

        policy = _convert_jurisdiction_pack(schema, pack_hash=content_hash(data))

        try:
            validate_reference_integrity(policy, source)
        except ValueError as e:
            raise PolicyValidationError(
                message="Reference integrity validation failed",
                details={"errors": str(e), "path": source},
                jurisdiction=policy.code,
            ) from e

        return policy

    def _load_file(self, path: Path) -> Any:
        """Load data from a YAML (or JSON) file."""
        with open(path, "r", encoding="utf-8") as f:
            return yaml.safe_load(f)


# =============================================================================
# Convenience Functions
# =============================================================================

def load_policy_pack(path: Union[str, Path]) -> JurisdictionPolicy:
    """Load one pack with a temporary loader."""
    return PolicyPackLoader().load(path)


def load_policy_pack_from_string(content: str) -> JurisdictionPolicy:
    """Load a pack from a YAML string."""
    try:
        data = yaml.safe_load(content)
    except yaml.YAMLError as e:
        raise PolicyLoadError(
            message=f"Failed to parse jurisdiction pack: {e}",
            details={"error": str(e)},
        ) from e
    return PolicyPackLoader().load_dict(data)


def discover_packs(packs_dir: Union[str, Path]) -> dict[tuple[Domain, str], Path]:
    """
    Map (domain, code) to pack files under ``<packs_dir>/<domain>/<code>.yaml``.

    Only the directory layout is read; pack contents are not parsed.
    """
    packs_dir = Path(packs_dir)
    registry: dict[tuple[Domain, str], Path] = {}
    for domain in Domain:
        domain_dir = packs_dir / domain.value
        if not domain_dir.is_dir():
            continue
        for path in sorted(domain_dir.glob("*.y*ml")):
            registry[(domain, path.stem.upper())] = path
    return registry
