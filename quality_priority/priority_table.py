from __future__ import annotations

from dataclasses import dataclass
from types import MappingProxyType
from typing import Iterable, List, Mapping, Optional, Sequence, Tuple

from .catalog import AttributeCatalog
from .combinations import generate_combinations
from .models import AXES, Combination, QualityProfile
from .resolver import PriorityResolver

NameKey = Tuple[str, str, str, str]


@dataclass(frozen=True, slots=True)
class PriorityEntry:
    names: NameKey
    total: int
    wanted: bool


def _key(names: Sequence[str]) -> NameKey:
    padded = list(names)[:4] + [""] * (4 - min(len(names), 4))
    return (
        padded[0].casefold(),
        padded[1].casefold(),
        padded[2].casefold(),
        padded[3].casefold(),
    )


def _is_wanted(profile: QualityProfile, combination: Combination) -> bool:
    for axis in AXES:
        name = combination.name(axis)
        wanted = profile.wanted(axis)
        if not name or not wanted:
            continue
        if name.casefold() not in {item.casefold() for item in wanted}:
            return False
    return True


class PriorityTable:
    """Precomputed total priority for every catalog combination under one profile."""

    def __init__(self, profile_name: str, entries: Iterable[PriorityEntry]) -> None:
        self.profile_name = profile_name
        ordered = list(entries)
        self._entries: Tuple[PriorityEntry, ...] = tuple(ordered)
        self._index: Mapping[NameKey, PriorityEntry] = MappingProxyType(
            {_key(entry.names): entry for entry in ordered}
        )

    @property
    def entries(self) -> Tuple[PriorityEntry, ...]:
        return self._entries

    def entry(
        self, resolution: str, quality: str, codec: str = "", audio: str = ""
    ) -> Optional[PriorityEntry]:
        return self._index.get(_key((resolution, quality, codec, audio)))

    def lookup(
        self, resolution: str, quality: str, codec: str = "", audio: str = ""
    ) -> Optional[int]:
        entry = self.entry(resolution, quality, codec, audio)
        return entry.total if entry else None

    def best(
        self, candidates: Iterable[Sequence[str]], *, wanted_only: bool = False
    ) -> Optional[PriorityEntry]:
        """Highest-priority known candidate; earlier candidates win ties."""
        best: Optional[PriorityEntry] = None
        for names in candidates:
            entry = self._index.get(_key(names))
            if entry is None or (wanted_only and not entry.wanted):
                continue
            if best is None or entry.total > best.total:
                best = entry
        return best

    def __len__(self) -> int:
        return len(self._entries)


def build_priority_table(catalog: AttributeCatalog, profile: QualityProfile) -> PriorityTable:
    resolver = PriorityResolver(catalog)
    entries: List[PriorityEntry] = []
    for combination in generate_combinations(catalog, profile):
        resolved = resolver.resolve(profile, combination)
        entries.append(
            PriorityEntry(
                names=(
                    combination.resolution,
                    combination.quality,
                    combination.codec,
                    combination.audio,
                ),
                total=resolved.total,
                wanted=_is_wanted(profile, combination),
            )
        )
    return PriorityTable(profile.name, entries)
