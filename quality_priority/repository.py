from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, Mapping, Tuple

from .catalog import AttributeCatalog
from .errors import ProfileNotFoundError
from .models import QualityProfile


def _freeze(profiles: Iterable[QualityProfile]) -> Mapping[str, QualityProfile]:
    table = {}
    for profile in profiles:
        if profile.name in table:
            raise ValueError(f"duplicate quality profile name: {profile.name}")
        table[profile.name] = profile
    return MappingProxyType(table)


@dataclass(frozen=True, slots=True)
class ConfigSnapshot:
    """One configuration version: a catalog plus the profiles resolved against it."""

    catalog: AttributeCatalog
    profiles: Mapping[str, QualityProfile]

    @classmethod
    def build(
        cls, catalog: AttributeCatalog, profiles: Iterable[QualityProfile] = ()
    ) -> "ConfigSnapshot":
        return cls(catalog=catalog, profiles=_freeze(profiles))

    def get(self, name: str) -> QualityProfile:
        profile = self.profiles.get(name)
        if profile is None:
            raise ProfileNotFoundError(name)
        return profile

    def names(self) -> Tuple[str, ...]:
        return tuple(self.profiles)

    def __contains__(self, name: object) -> bool:
        return name in self.profiles

    def __len__(self) -> int:
        return len(self.profiles)


class ConfigRepository:
    """Holds the current ``ConfigSnapshot``.

    Readers take one snapshot per request and use it throughout;
    ``publish`` replaces the whole snapshot with a single reference swap, so
    a request never pairs profiles from one version with another version's
    catalog.
    """

    def __init__(
        self, catalog: AttributeCatalog, profiles: Iterable[QualityProfile] = ()
    ) -> None:
        self._snapshot = ConfigSnapshot.build(catalog, profiles)

    def snapshot(self) -> ConfigSnapshot:
        return self._snapshot

    def publish(
        self, catalog: AttributeCatalog, profiles: Iterable[QualityProfile]
    ) -> ConfigSnapshot:
        snapshot = ConfigSnapshot.build(catalog, profiles)
        self._snapshot = snapshot
        return snapshot
