from __future__ import annotations

import logging
from dataclasses import dataclass, field
from typing import Any, Dict, List, Optional

from .combinations import generate_combinations
from .errors import ErrorCode, ProfileNotFoundError
from .models import AxisFilters, RankedResult, ReorderRule
from .ranking import rank_results
from .repository import ConfigRepository
from .resolver import PriorityResolver
from .sandbox import sandbox_from_payload

logger = logging.getLogger(__name__)


@dataclass(slots=True)
class RankingRequest:
    profile: str
    filters: AxisFilters = field(default_factory=AxisFilters)
    wanted_only: bool = False
    ephemeral_rules: Any = None


@dataclass(slots=True)
class RankingReport:
    profile: str
    ok: bool
    results: List[RankedResult] = field(default_factory=list)
    error: Optional[ErrorCode] = None
    detail: str = ""
    persisted_rule_count: int = 0
    ephemeral_rule_count: int = 0
    rules_fallback: bool = False
    wanted_only: bool = False
    filters: AxisFilters = field(default_factory=AxisFilters)
    cutoff_priority: Optional[int] = None
    active_rules: List[ReorderRule] = field(default_factory=list)

    @property
    def testing_mode(self) -> bool:
        return self.ephemeral_rule_count > 0

    def to_record(self) -> Dict[str, object]:
        return {
            "profile": self.profile,
            "ok": self.ok,
            "error": self.error.code if self.error else None,
            "detail": self.detail,
            "persisted_rule_count": self.persisted_rule_count,
            "ephemeral_rule_count": self.ephemeral_rule_count,
            "rules_fallback": self.rules_fallback,
            "wanted_only": self.wanted_only,
            "filters": self.filters.describe(),
            "cutoff_priority": self.cutoff_priority,
            "active_rules": [rule.to_record() for rule in self.active_rules],
            "results": [result.to_record() for result in self.results],
        }


class QualityPriorityEngine:
    """Ranks a profile's attribute combinations against a sandboxed rule set.

    The baseline is the profile as persisted; the candidate is the same
    profile with temporary rules substituted. Either a full ranking or an
    error report with no records is returned. Each request reads a single
    configuration snapshot.
    """

    def __init__(self, repository: ConfigRepository) -> None:
        self.repository = repository

    def rank(self, request: RankingRequest) -> RankingReport:
        snapshot = self.repository.snapshot()
        try:
            baseline = snapshot.get(request.profile)
        except ProfileNotFoundError as exc:
            logger.warning("Quality profile not found: %s", request.profile)
            return RankingReport(
                profile=request.profile,
                ok=False,
                error=exc.err,
                detail=exc.detail,
                wanted_only=request.wanted_only,
                filters=request.filters,
            )
        catalog = snapshot.catalog
        outcome = sandbox_from_payload(baseline, request.ephemeral_rules)
        candidate = outcome.profile

        combinations = list(
            generate_combinations(
                catalog,
                candidate,
                wanted_only=request.wanted_only,
                filters=request.filters,
            )
        )
        resolver = PriorityResolver(catalog)
        resolved_baseline = resolver.resolve_all(baseline, combinations)
        resolved_candidate = resolver.resolve_all(candidate, combinations)
        cutoff = resolver.cutoff_priority(candidate)
        results = rank_results(
            resolved_baseline, resolved_candidate, cutoff_priority=cutoff
        )
        logger.debug(
            "Ranked %d combinations for %s (%d temporary rules)",
            len(results),
            baseline.name,
            outcome.ephemeral_count,
        )
        return RankingReport(
            profile=baseline.name,
            ok=True,
            results=results,
            detail=outcome.detail,
            persisted_rule_count=len(baseline.reorder),
            ephemeral_rule_count=outcome.ephemeral_count,
            rules_fallback=outcome.fallback,
            wanted_only=request.wanted_only,
            filters=request.filters,
            cutoff_priority=cutoff,
            active_rules=list(candidate.reorder),
        )
