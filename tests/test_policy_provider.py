"""
Tests for the load-once policy provider.

Tests cover:
- Lookup by (code, domain) with case-insensitive codes
- UnsupportedJurisdiction carrying the supported list
- Concurrent first requests converging on one load
- Failed loads are not cached
"""
import threading
import time
from concurrent.futures import ThreadPoolExecutor

import pytest
import yaml

from remedypilot.config import BUNDLED_PACKS_DIR
from remedypilot.engine import PolicyProvider, coerce_domain
from remedypilot.exceptions import (
    PolicyLoadError,
    PolicyValidationError,
    UnsupportedDomain,
    UnsupportedJurisdiction,
)
from remedypilot.models import Domain
from remedypilot.packs import PolicyPackLoader


class CountingLoader(PolicyPackLoader):
    """Loader that counts loads and holds each one open briefly."""

    def __init__(self, delay: float = 0.05):
        super().__init__()
        self.delay = delay
        self.calls = 0
        self._lock = threading.Lock()

    def load(self, path):
        with self._lock:
            self.calls += 1
        time.sleep(self.delay)
        return super().load(path)


def write_pack(root, domain: str, code: str, data) -> None:
    target = root / domain
    target.mkdir(parents=True, exist_ok=True)
    (target / f"{code.lower()}.yaml").write_text(yaml.safe_dump(data, sort_keys=False))


def bundled_data(domain: str, code: str) -> dict:
    with open(BUNDLED_PACKS_DIR / domain / f"{code.lower()}.yaml", encoding="utf-8") as f:
        return yaml.safe_load(f)


class TestLookup:

    def test_get_policy(self, provider):
        policy = provider.get_policy("TN", Domain.CRIMINAL_RELIEF)
        assert policy.code == "TN"
        assert policy.domain is Domain.CRIMINAL_RELIEF

    def test_code_and_domain_are_case_insensitive(self, provider):
        first = provider.get_policy("tn", "eviction-defense")
        second = provider.get_policy(" TN ", Domain.EVICTION_DEFENSE)
        assert first is second

    def test_same_code_different_domains(self, provider):
        criminal = provider.get_policy("NJ", Domain.CRIMINAL_RELIEF)
        eviction = provider.get_policy("NJ", Domain.EVICTION_DEFENSE)
        assert criminal is not eviction
        assert eviction.appeal_window_days == 45

    def test_supported_jurisdictions(self, provider):
        assert provider.supported_jurisdictions(Domain.CRIMINAL_RELIEF) == ["NJ", "PA", "TN"]
        assert provider.supported_jurisdictions("eviction-defense") == ["MS", "NJ", "PA", "TN"]
        assert provider.supported_jurisdictions() == ["MS", "NJ", "PA", "TN"]

    def test_unsupported_jurisdiction(self, provider):
        with pytest.raises(UnsupportedJurisdiction) as exc_info:
            provider.get_policy("ZZ", Domain.CRIMINAL_RELIEF)
        error = exc_info.value
        assert error.jurisdiction == "ZZ"
        assert error.supported == ["NJ", "PA", "TN"]
        assert error.to_dict()["code"] == "RP_UNSUPPORTED_JURISDICTION"

    def test_ms_has_no_criminal_pack(self, provider):
        with pytest.raises(UnsupportedJurisdiction):
            provider.get_policy("MS", Domain.CRIMINAL_RELIEF)

    @pytest.mark.parametrize("domain", ["traffic", None, ""])
    def test_unsupported_domain(self, provider, domain):
        with pytest.raises(UnsupportedDomain):
            provider.get_policy("TN", domain)

    def test_coerce_domain(self):
        assert coerce_domain("Criminal-Relief") is Domain.CRIMINAL_RELIEF
        assert coerce_domain(Domain.EVICTION_DEFENSE) is Domain.EVICTION_DEFENSE


class TestLoadOnce:

    def test_lazy_until_requested(self, tmp_path):
        write_pack(tmp_path, "criminal-relief", "TN", bundled_data("criminal-relief", "TN"))
        loader = CountingLoader(delay=0)
        provider = PolicyProvider(packs_dir=tmp_path, loader=loader)
        assert loader.calls == 0
        assert not provider.is_loaded("TN", Domain.CRIMINAL_RELIEF)

        provider.get_policy("TN", Domain.CRIMINAL_RELIEF)
        provider.get_policy("TN", Domain.CRIMINAL_RELIEF)
        assert loader.calls == 1
        assert provider.is_loaded("TN", Domain.CRIMINAL_RELIEF)

    def test_concurrent_first_requests_load_once(self, tmp_path):
        write_pack(tmp_path, "eviction-defense", "TN", bundled_data("eviction-defense", "TN"))
        loader = CountingLoader(delay=0.1)
        provider = PolicyProvider(packs_dir=tmp_path, loader=loader)
        barrier = threading.Barrier(8)

        def fetch():
            barrier.wait()
            return provider.get_policy("TN", Domain.EVICTION_DEFENSE)

        with ThreadPoolExecutor(max_workers=8) as pool:
            policies = list(pool.map(lambda _: fetch(), range(8)))

        assert loader.calls == 1
        assert all(p is policies[0] for p in policies)

    def test_preload(self, tmp_path):
        write_pack(tmp_path, "criminal-relief", "TN", bundled_data("criminal-relief", "TN"))
        write_pack(tmp_path, "eviction-defense", "MS", bundled_data("eviction-defense", "MS"))
        provider = PolicyProvider(packs_dir=tmp_path, loader=PolicyPackLoader())
        loaded = provider.preload()
        assert {p.key for p in loaded} == {
            (Domain.CRIMINAL_RELIEF, "TN"),
            (Domain.EVICTION_DEFENSE, "MS"),
        }

    def test_empty_directory(self, tmp_path):
        provider = PolicyProvider(packs_dir=tmp_path)
        assert provider.registered_keys() == []
        with pytest.raises(UnsupportedJurisdiction) as exc_info:
            provider.get_policy("TN", Domain.CRIMINAL_RELIEF)
        assert exc_info.value.supported == []


class TestFailedLoads:

    def test_failure_is_not_cached(self, tmp_path):
        broken = bundled_data("criminal-relief", "TN")
        broken["default_category"] = "missing"
        write_pack(tmp_path, "criminal-relief", "TN", broken)
        provider = PolicyProvider(packs_dir=tmp_path, loader=PolicyPackLoader())

        with pytest.raises(PolicyValidationError):
            provider.get_policy("TN", Domain.CRIMINAL_RELIEF)
        assert not provider.is_loaded("TN", Domain.CRIMINAL_RELIEF)

        write_pack(tmp_path, "criminal-relief", "TN", bundled_data("criminal-relief", "TN"))
        assert provider.get_policy("TN", Domain.CRIMINAL_RELIEF).code == "TN"

    def test_pack_declaring_other_jurisdiction(self, tmp_path):
        write_pack(tmp_path, "criminal-relief", "XX", bundled_data("criminal-relief", "TN"))
        provider = PolicyProvider(packs_dir=tmp_path, loader=PolicyPackLoader())
        with pytest.raises(PolicyLoadError, match="declares criminal-relief/TN"):
            provider.get_policy("XX", Domain.CRIMINAL_RELIEF)

    def test_pack_in_wrong_domain_directory(self, tmp_path):
        write_pack(tmp_path, "eviction-defense", "TN", bundled_data("criminal-relief", "TN"))
        provider = PolicyProvider(packs_dir=tmp_path, loader=PolicyPackLoader())
        with pytest.raises(PolicyLoadError):
            provider.get_policy("TN", Domain.EVICTION_DEFENSE)
