from __future__ import annotations

from pathlib import Path
from typing import Dict, List, Optional

import yaml
from pydantic import BaseModel, Field, field_validator, model_validator

from .catalog import AttributeCatalog
from .models import Axis, QualityProfile
from .rules import ReorderRuleSettings, rules_from_settings


class AttributeSettings(BaseModel):
    name: str
    priority: int = 0

    @field_validator("name")
    @classmethod
    def _reject_neutral(cls, value: str) -> str:
        if not value.strip():
            raise ValueError("attribute name must not be empty (the empty name is reserved)")
        return value


class CatalogSettings(BaseModel):
    resolutions: List[AttributeSettings] = Field(default_factory=list)
    qualities: List[AttributeSettings] = Field(default_factory=list)
    codecs: List[AttributeSettings] = Field(default_factory=list)
    audios: List[AttributeSettings] = Field(default_factory=list)
    profile_priorities: Dict[str, Dict[str, Dict[str, int]]] = Field(default_factory=dict)

    @field_validator("resolutions", "qualities", "codecs", "audios")
    @classmethod
    def _unique_names(cls, values: List[AttributeSettings]) -> List[AttributeSettings]:
        seen = set()
        for entry in values:
            if entry.name in seen:
                raise ValueError(f"duplicate attribute name: {entry.name}")
            seen.add(entry.name)
        return values

    @field_validator("profile_priorities")
    @classmethod
    def _known_axes(
        cls, value: Dict[str, Dict[str, Dict[str, int]]]
    ) -> Dict[str, Dict[str, Dict[str, int]]]:
        for profile_name, per_axis in value.items():
            for axis_name in per_axis:
                if Axis.parse(axis_name) is None:
                    raise ValueError(
                        f"unknown axis {axis_name!r} in profile_priorities for {profile_name!r}"
                    )
        return value

    def entries(self, axis: Axis) -> List[AttributeSettings]:
        return {
            Axis.RESOLUTION: self.resolutions,
            Axis.QUALITY: self.qualities,
            Axis.CODEC: self.codecs,
            Axis.AUDIO: self.audios,
        }[axis]

    def to_catalog(self) -> AttributeCatalog:
        values = {
            axis: [(entry.name, entry.priority) for entry in self.entries(axis)]
            for axis in Axis
        }
        scoped = {
            profile_name: {Axis.parse(axis_name): table for axis_name, table in per_axis.items()}
            for profile_name, per_axis in self.profile_priorities.items()
        }
        return AttributeCatalog(values, scoped)


class QualityProfileSettings(BaseModel):
    name: str
    wanted_resolution: List[str] = Field(default_factory=list)
    wanted_quality: List[str] = Field(default_factory=list)
    wanted_codec: List[str] = Field(default_factory=list)
    wanted_audio: List[str] = Field(default_factory=list)
    cutoff_resolution: str = ""
    cutoff_quality: str = ""
    reorder: List[ReorderRuleSettings] = Field(default_factory=list)

    @field_validator(
        "wanted_resolution", "wanted_quality", "wanted_codec", "wanted_audio", "reorder",
        mode="before",
    )
    @classmethod
    def _none_as_empty(cls, value: Optional[list]) -> list:
        return [] if value is None else value

    def to_profile(self) -> QualityProfile:
        return QualityProfile(
            name=self.name,
            wanted_resolution=tuple(self.wanted_resolution),
            wanted_quality=tuple(self.wanted_quality),
            wanted_codec=tuple(self.wanted_codec),
            wanted_audio=tuple(self.wanted_audio),
            reorder=rules_from_settings(self.reorder),
            cutoff_resolution=self.cutoff_resolution,
            cutoff_quality=self.cutoff_quality,
        )


class Settings(BaseModel):
    catalog: CatalogSettings = CatalogSettings()
    profiles: List[QualityProfileSettings] = Field(default_factory=list)

    @model_validator(mode="after")
    def _unique_profiles(self) -> "Settings":
        seen = set()
        for profile in self.profiles:
            if profile.name in seen:
                raise ValueError(f"duplicate quality profile name: {profile.name}")
            seen.add(profile.name)
        return self

    def to_catalog(self) -> AttributeCatalog:
        return self.catalog.to_catalog()

    def to_profiles(self) -> List[QualityProfile]:
        return [profile.to_profile() for profile in self.profiles]

    @classmethod
    def load(cls, path: Path) -> "Settings":
        with path.open("r", encoding="utf-8") as fh:
            raw = yaml.safe_load(fh)
        return cls.model_validate(raw or {})


def find_config(explicit_path: Optional[Path]) -> Path:
    if explicit_path:
        return explicit_path
    cwd = Path.cwd()
    for candidate in (cwd / "config.yaml", cwd / "config.yml"):
        if candidate.exists():
            return candidate
    raise FileNotFoundError("Could not find config.yaml – pass --config explicitly.")
