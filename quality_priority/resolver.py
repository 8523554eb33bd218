from __future__ import annotations

from typing import Iterable, List, Optional

from .catalog import AttributeCatalog
from .models import (
    AXES,
    NEUTRAL,
    Axis,
    AxisMultiplier,
    CombinedPair,
    Combination,
    QualityProfile,
    ResolvedCombination,
    SingleAxis,
)

_RES = Axis.RESOLUTION.index
_QUAL = Axis.QUALITY.index


def _same(rule_value: str, name: str) -> bool:
    return name != NEUTRAL and rule_value.casefold() == name.casefold()


class PriorityResolver:
    """Computes effective per-axis and total priorities for combinations.

    Rules are applied in declaration order, so the last matching rule for an
    axis wins. A single-axis rule replaces that axis's priority, a
    ``combined_res_qual`` rule sets resolution to its priority and quality
    to 0, and a ``position`` rule multiplies the axis's current priority.
    The neutral value is never overridden and always resolves to 0.
    """

    def __init__(self, catalog: AttributeCatalog) -> None:
        self.catalog = catalog

    def resolve(self, profile: QualityProfile, combination: Combination) -> ResolvedCombination:
        base = [
            self.catalog.base_priority(axis, combination.name(axis), profile)
            for axis in AXES
        ]
        effective = list(base)
        for rule in profile.reorder:
            target = rule.target
            if isinstance(target, SingleAxis):
                if _same(target.value, combination.name(target.axis)):
                    effective[target.axis.index] = rule.new_priority
            elif isinstance(target, CombinedPair):
                if (
                    _same(target.resolution, combination.resolution)
                    and target.quality.casefold() == combination.quality.casefold()
                ):
                    effective[_RES] = rule.new_priority
                    effective[_QUAL] = 0
            elif isinstance(target, AxisMultiplier):
                effective[target.axis.index] *= rule.new_priority
        priorities = (effective[0], effective[1], effective[2], effective[3])
        return ResolvedCombination(
            combination=combination,
            priorities=priorities,
            base_priorities=(base[0], base[1], base[2], base[3]),
            total=sum(priorities),
            override_applied=effective != base,
        )

    def resolve_all(
        self, profile: QualityProfile, combinations: Iterable[Combination]
    ) -> List[ResolvedCombination]:
        return [self.resolve(profile, combination) for combination in combinations]

    def cutoff_priority(self, profile: QualityProfile) -> Optional[int]:
        """Total priority of the profile's cutoff resolution/quality, or ``None`` when unset."""
        if not profile.has_cutoff:
            return None
        values = []
        for axis in AXES:
            name = NEUTRAL
            if axis is Axis.RESOLUTION:
                name = profile.cutoff_resolution
            elif axis is Axis.QUALITY:
                name = profile.cutoff_quality
            value = self.catalog.get(axis, name)
            if value is None:
                value = self.catalog.get(axis, NEUTRAL)
            values.append(value)
        combination = Combination(values=tuple(values), index=-1)
        return self.resolve(profile, combination).total
