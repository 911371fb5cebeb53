"""
RemedyPilot Policy Provider

Serves immutable JurisdictionPolicy objects keyed by (domain, code).

Lifecycle:
- The pack directory is scanned once at construction; packs are not parsed
- A pack is loaded on first request and kept for the life of the process
- Concurrent first requests for the same key converge on one load
- Reads of an already-loaded policy take no lock
- A failed load raises to the caller and caches nothing
"""
from __future__ import annotations

import logging
import threading
from dataclasses import dataclass, field
from pathlib import Path
from typing import Optional, Union

from .. import config
from ..exceptions import (
    PolicyLoadError,
    PolicyValidationError,
    PolicyVersionMismatch,
    UnsupportedDomain,
    UnsupportedJurisdiction,
)
from ..models import Domain, JurisdictionPolicy
from ..packs import PolicyPackLoader, discover_packs

logger = logging.getLogger(__name__)

PolicyKey = tuple[Domain, str]


def coerce_domain(domain: Union[Domain, str, None]) -> Domain:
    """Resolve a domain tag or raise UnsupportedDomain."""
    if isinstance(domain, Domain):
        return domain
    try:
        return Domain(str(domain).strip().lower())
    except ValueError:
        raise UnsupportedDomain(
            message=f"Unsupported domain: {domain!r}",
            details={"domain": domain, "supported": [d.value for d in Domain]},
        ) from None


@dataclass
class PolicyProvider:
    """
    Load-once cache of jurisdiction policies.

    Usage:
        provider = PolicyProvider()
        policy = provider.get_policy("TN", Domain.CRIMINAL_RELIEF)

        # Warm every registered pack before serving traffic
        provider.preload()
    """

    packs_dir: Path = field(default_factory=lambda: config.RP_PACKS_DIR)
    loader: PolicyPackLoader = field(
        default_factory=lambda: PolicyPackLoader(strict_version=config.RP_STRICT_SCHEMA_VERSION)
    )

    _registry: dict[PolicyKey, Path] = field(init=False, default_factory=dict)
    _policies: dict[PolicyKey, JurisdictionPolicy] = field(init=False, default_factory=dict)
    _key_locks: dict[PolicyKey, threading.Lock] = field(init=False, default_factory=dict)
    _locks_guard: threading.Lock = field(init=False, default_factory=threading.Lock)

    def __post_init__(self) -> None:
        self.packs_dir = Path(self.packs_dir)
        self._registry = discover_packs(self.packs_dir)
        if not self._registry:
            logger.warning("No jurisdiction packs found under %s", self.packs_dir)

    # -------------------------------------------------------------------------
    # Registry
    # -------------------------------------------------------------------------

    def supported_jurisdictions(self, domain: Union[Domain, str, None] = None) -> list[str]:
        """Registered jurisdiction codes, optionally for one domain."""
        if domain is None:
            return sorted({code for _, code in self._registry})
        resolved = coerce_domain(domain)
        return sorted(code for d, code in self._registry if d is resolved)

    def registered_keys(self) -> list[PolicyKey]:
        return sorted(self._registry, key=lambda k: (k[0].value, k[1]))

    def is_loaded(self, code: str, domain: Union[Domain, str]) -> bool:
        return (coerce_domain(domain), code.strip().upper()) in self._policies

    # -------------------------------------------------------------------------
    # Lookup
    # -------------------------------------------------------------------------

    def get_policy(self, code: str, domain: Union[Domain, str]) -> JurisdictionPolicy:
        """
        Return the policy for a jurisdiction and domain.

        Raises:
            UnsupportedDomain: If the domain is not recognized
            UnsupportedJurisdiction: If no pack is registered for the code
            PolicyLoadError / PolicyValidationError / PolicyVersionMismatch:
                If the pack exists but cannot be loaded
        """
        resolved = coerce_domain(domain)
        key = (resolved, str(code).strip().upper())

        policy = self._policies.get(key)
        if policy is not None:
            return policy

        path = self._registry.get(key)
        if path is None:
            supported = self.supported_jurisdictions(resolved)
            raise UnsupportedJurisdiction(
                message=f"No {resolved.value} rules for jurisdiction '{key[1]}'",
                details={"domain": resolved.value, "supported": supported},
                jurisdiction=key[1],
            )

        with self._lock_for(key):
            policy = self._policies.get(key)
            if policy is None:
                policy = self._load(key, path)
                self._policies[key] = policy
        return policy

    def preload(self) -> list[JurisdictionPolicy]:
        """Load every registered pack; the first failure propagates."""
        return [self.get_policy(code, domain) for domain, code in self.registered_keys()]

    # -------------------------------------------------------------------------
    # Internals
    # -------------------------------------------------------------------------

    def _lock_for(self, key: PolicyKey) -> threading.Lock:
        with self._locks_guard:
            lock = self._key_locks.get(key)
            if lock is None:
                lock = threading.Lock()
                self._key_locks[key] = lock
            return lock

    def _load(self, key: PolicyKey, path: Path) -> JurisdictionPolicy:
        domain, code = key
        try:
            policy = self.loader.load(path)
        except (PolicyLoadError, PolicyValidationError, PolicyVersionMismatch):
            logger.error("Failed to load pack %s", path, extra={"pack_path": str(path)})
            raise

        if policy.key != key:
            raise PolicyLoadError(
                message=f"Pack {path.name} declares {policy.domain.value}/{policy.code}, "
                        f"expected {domain.value}/{code}",
                details={"path": str(path)},
                jurisdiction=code,
            )

        logger.info(
            "Loaded jurisdiction pack %s/%s version %s",
            domain.value,
            code,
            policy.version,
            extra={"domain": domain.value, "jurisdiction": code, "pack_path": str(path)},
        )
        return policy


# =============================================================================
# Process-wide default
# =============================================================================

_default_provider: Optional[PolicyProvider] = None
_default_provider_lock = threading.Lock()


def get_default_provider() -> PolicyProvider:
    """Get the shared provider over the configured packs directory."""
    global _default_provider
    if _default_provider is None:
        with _default_provider_lock:
            if _default_provider is None:
                _default_provider = PolicyProvider()
    return _default_provider
