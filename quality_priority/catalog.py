from __future__ import annotations

from types import MappingProxyType
from typing import Dict, Iterable, Mapping, Optional, Tuple

from .models import AXES, NEUTRAL, Axis, AttributeValue, QualityProfile, neutral_value


class AttributeCatalog:
    """Read-only table of attribute values and their base priorities per axis.

    Profile-scoped priorities, when present, take precedence over the stored
    value for that profile only. Lookups never mutate the catalog.
    """

    def __init__(
        self,
        values: Mapping[Axis, Iterable[Tuple[str, int]]],
        profile_priorities: Optional[Mapping[str, Mapping[Axis, Mapping[str, int]]]] = None,
    ) -> None:
        tables: Dict[Axis, Tuple[AttributeValue, ...]] = {}
        for axis in AXES:
            entries = [neutral_value(axis)]
            seen = {NEUTRAL}
            for name, priority in values.get(axis, ()):
                if name in seen:
                    continue
                seen.add(name)
                entries.append(AttributeValue(axis, name, int(priority)))
            tables[axis] = tuple(entries)
        self._values = MappingProxyType(tables)
        self._priorities = MappingProxyType(
            {
                axis: MappingProxyType({value.name: value.base_priority for value in tables[axis]})
                for axis in AXES
            }
        )
        scoped: Dict[str, Mapping[Axis, Mapping[str, int]]] = {}
        for profile_name, per_axis in (profile_priorities or {}).items():
            scoped[profile_name] = MappingProxyType(
                {
                    axis: MappingProxyType(dict(per_axis[axis]))
                    for axis in AXES
                    if axis in per_axis
                }
            )
        self._profile_priorities = MappingProxyType(scoped)

    def values(self, axis: Axis) -> Tuple[AttributeValue, ...]:
        return self._values[axis]

    def names(self, axis: Axis) -> Tuple[str, ...]:
        return tuple(value.name for value in self._values[axis])

    def get(self, axis: Axis, name: str) -> Optional[AttributeValue]:
        for value in self._values[axis]:
            if value.name == name:
                return value
        return None

    def contains(self, axis: Axis, name: str) -> bool:
        return name in self._priorities[axis]

    def base_priority(
        self, axis: Axis, name: str, profile: Optional[QualityProfile] = None
    ) -> int:
        if name == NEUTRAL:
            return 0
        if profile is not None:
            scoped = self._profile_priorities.get(profile.name, {}).get(axis)
            if scoped is not None and name in scoped:
                return scoped[name]
        return self._priorities[axis].get(name, 0)

    def __len__(self) -> int:
        return sum(len(self._values[axis]) - 1 for axis in AXES)

    def __repr__(self) -> str:
        counts = ", ".join(f"{axis.value}={len(self._values[axis]) - 1}" for axis in AXES)
        return f"AttributeCatalog({counts})"
