"""
RemedyPilot Jurisdiction Packs

YAML rule tables, one per jurisdiction and domain, validated with pydantic
and compiled into immutable JurisdictionPolicy objects.
"""
from .loader import (
    PolicyPackLoader,
    discover_packs,
    load_policy_pack,
    load_policy_pack_from_string,
    validate_reference_integrity,
)
from .schema import SCHEMA_VERSION, JurisdictionPackSchema, check_schema_version

__all__ = [
    "SCHEMA_VERSION",
    "JurisdictionPackSchema",
    "PolicyPackLoader",
    "check_schema_version",
    "discover_packs",
    "load_policy_pack",
    "load_policy_pack_from_string",
    "validate_reference_integrity",
]
