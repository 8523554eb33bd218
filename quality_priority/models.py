from __future__ import annotations

from dataclasses import dataclass
from enum import Enum
from typing import Dict, Optional, Tuple, Union

NEUTRAL = ""
COMBINED_RES_QUAL = "combined_res_qual"
POSITION = "position"


class Axis(Enum):
    """Attribute dimensions in their fixed generation and tie-break order."""

    RESOLUTION = "resolution"
    QUALITY = "quality"
    CODEC = "codec"
    AUDIO = "audio"

    @property
    def index(self) -> int:
        return AXES.index(self)

    @classmethod
    def parse(cls, value: str) -> Optional["Axis"]:
        cleaned = (value or "").strip().casefold()
        for axis in cls:
            if axis.value == cleaned:
                return axis
        return None


AXES: Tuple[Axis, ...] = tuple(Axis)


@dataclass(frozen=True, slots=True)
class AttributeValue:
    axis: Axis
    name: str
    base_priority: int = 0

    @property
    def is_neutral(self) -> bool:
        return self.name == NEUTRAL


def neutral_value(axis: Axis) -> AttributeValue:
    return AttributeValue(axis, NEUTRAL, 0)


@dataclass(frozen=True, slots=True)
class SingleAxis:
    axis: Axis
    value: str


@dataclass(frozen=True, slots=True)
class CombinedPair:
    resolution: str
    quality: str


@dataclass(frozen=True, slots=True)
class AxisMultiplier:
    axis: Axis


RuleTarget = Union[SingleAxis, CombinedPair, AxisMultiplier]


@dataclass(frozen=True, slots=True)
class ReorderRule:
    """A profile-scoped priority override.

    ``name`` and ``reorder_type`` keep the configured text for display and
    diffing; ``target`` is the parsed form the resolver works with. A rule
    whose text could not be parsed has ``target=None`` and never matches.
    """

    name: str
    reorder_type: str
    new_priority: int
    target: Optional[RuleTarget] = None

    def to_record(self) -> Dict[str, object]:
        return {
            "name": self.name,
            "type": self.reorder_type,
            "new_priority": self.new_priority,
        }


@dataclass(frozen=True, slots=True)
class QualityProfile:
    name: str
    wanted_resolution: Tuple[str, ...] = ()
    wanted_quality: Tuple[str, ...] = ()
    wanted_codec: Tuple[str, ...] = ()
    wanted_audio: Tuple[str, ...] = ()
    reorder: Tuple[ReorderRule, ...] = ()
    cutoff_resolution: str = NEUTRAL
    cutoff_quality: str = NEUTRAL

    def wanted(self, axis: Axis) -> Tuple[str, ...]:
        return (
            self.wanted_resolution,
            self.wanted_quality,
            self.wanted_codec,
            self.wanted_audio,
        )[axis.index]

    @property
    def has_cutoff(self) -> bool:
        return bool(self.cutoff_resolution or self.cutoff_quality)


@dataclass(frozen=True, slots=True)
class Combination:
    values: Tuple[AttributeValue, AttributeValue, AttributeValue, AttributeValue]
    index: int

    def name(self, axis: Axis) -> str:
        return self.values[axis.index].name

    @property
    def names(self) -> Tuple[str, ...]:
        return tuple(value.name for value in self.values)

    @property
    def resolution(self) -> str:
        return self.name(Axis.RESOLUTION)

    @property
    def quality(self) -> str:
        return self.name(Axis.QUALITY)

    @property
    def codec(self) -> str:
        return self.name(Axis.CODEC)

    @property
    def audio(self) -> str:
        return self.name(Axis.AUDIO)

    def display(self) -> str:
        parts = [name for name in self.names if name]
        if not parts:
            return "No specific resolution/quality"
        return " + ".join(parts)


@dataclass(frozen=True, slots=True)
class ResolvedCombination:
    combination: Combination
    priorities: Tuple[int, int, int, int]
    base_priorities: Tuple[int, int, int, int]
    total: int
    override_applied: bool

    def priority(self, axis: Axis) -> int:
        return self.priorities[axis.index]

    def breakdown(self) -> Dict[str, int]:
        return {axis.value: self.priorities[axis.index] for axis in AXES}


@dataclass(frozen=True, slots=True)
class RankedResult:
    rank: int
    baseline: ResolvedCombination
    candidate: ResolvedCombination
    delta: int
    meets_cutoff: Optional[bool] = None

    @property
    def combination(self) -> Combination:
        return self.candidate.combination

    @property
    def override_applied(self) -> bool:
        return (
            self.candidate.override_applied
            or self.candidate.priorities != self.baseline.priorities
        )

    def to_record(self) -> Dict[str, object]:
        combo = self.combination
        return {
            "rank": self.rank,
            "resolution": combo.resolution,
            "quality": combo.quality,
            "codec": combo.codec,
            "audio": combo.audio,
            "display": combo.display(),
            "baseline_total": self.baseline.total,
            "candidate_total": self.candidate.total,
            "delta": self.delta,
            "override_applied": self.override_applied,
            "meets_cutoff": self.meets_cutoff,
            "breakdown": self.candidate.breakdown(),
            "baseline_breakdown": self.baseline.breakdown(),
        }


@dataclass(slots=True)
class AxisFilters:
    """Optional single-value restrictions applied on top of the wanted lists.

    ``None``, ``""`` and ``"all"`` mean no restriction for that axis.
    """

    resolution: Optional[str] = None
    quality: Optional[str] = None
    codec: Optional[str] = None
    audio: Optional[str] = None

    def get(self, axis: Axis) -> Optional[str]:
        value = getattr(self, axis.value)
        if value is None or value == "" or value == "all":
            return None
        return value

    def describe(self) -> str:
        parts = [
            f"{axis.value.capitalize()}: {self.get(axis)}"
            for axis in AXES
            if self.get(axis) is not None
        ]
        return ", ".join(parts)

