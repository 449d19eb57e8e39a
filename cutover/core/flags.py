"""
Feature flag resolver for the table-by-table cutover.

The flags are read once from settings and frozen; every repository receives the
same FeatureFlags value instead of looking at the environment itself.
"""
from dataclasses import dataclass, field
from functools import lru_cache
from typing import FrozenSet, Iterable

from cutover.core.config import Settings

FAMILIES = (
    "agencies",
    "companies",
    "candidates",
    "jobs",
    "profiles",
    "resumes",
    "applications",
    "assessments",
    "job_matches",
    "ai_analyses",
)


@dataclass(frozen=True)
class FeatureFlags:
    enabled: bool = False
    migrated: FrozenSet[str] = field(default_factory=frozenset)

    def is_migrated(self, family: str) -> bool:
        """True when `family` is served by the hosted backend.

        Unknown or malformed family names resolve to False so that a missing
        flag keeps traffic on the legacy backend.
        """
        if not isinstance(family, str):
            return False
        return self.enabled and family in self.migrated

    @classmethod
    def for_families(cls, families: Iterable[str]) -> "FeatureFlags":
        return cls(enabled=True, migrated=frozenset(families))

    @classmethod
    def from_settings(cls, settings: Settings) -> "FeatureFlags":
        migrated = frozenset(
            family for family in FAMILIES
            if getattr(settings, f"FEATURE_SUPABASE_{family.upper()}", False)
        )
        return cls(enabled=settings.USE_SUPABASE, migrated=migrated)


@lru_cache(maxsize=1)
def get_feature_flags() -> FeatureFlags:
    """Process-wide flag snapshot, loaded on first use."""
    from cutover.core.config import settings
    return FeatureFlags.from_settings(settings)
