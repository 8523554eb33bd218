from __future__ import annotations

from dataclasses import dataclass

from .config import Settings
from .engine import QualityPriorityEngine
from .priority_table import PriorityTable, build_priority_table
from .repository import ConfigRepository, ConfigSnapshot


@dataclass
class QualityPriorityApp:
    settings: Settings
    repository: ConfigRepository
    engine: QualityPriorityEngine

    @classmethod
    def create(cls, settings: Settings) -> "QualityPriorityApp":
        repository = ConfigRepository(settings.to_catalog(), settings.to_profiles())
        return cls(
            settings=settings,
            repository=repository,
            engine=QualityPriorityEngine(repository),
        )

    def snapshot(self) -> ConfigSnapshot:
        return self.repository.snapshot()

    def reload(self, settings: Settings) -> None:
        """Publish a new configuration snapshot without disturbing in-flight requests."""
        self.repository.publish(settings.to_catalog(), settings.to_profiles())
        self.settings = settings

    def priority_table(self, profile_name: str) -> PriorityTable:
        snapshot = self.repository.snapshot()
        return build_priority_table(snapshot.catalog, snapshot.get(profile_name))
