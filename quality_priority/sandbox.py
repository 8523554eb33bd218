from __future__ import annotations

import dataclasses
import logging
from dataclasses import dataclass
from typing import Any, Sequence

from .errors import MalformedRulesError
from .models import QualityProfile, ReorderRule
from .rules import decode_ephemeral_rules

logger = logging.getLogger(__name__)


def sandbox_profile(
    baseline: QualityProfile, ephemeral_rules: Sequence[ReorderRule]
) -> QualityProfile:
    """Return a copy of ``baseline`` evaluated against ``ephemeral_rules``.

    A non-empty rule list replaces the persisted rules wholesale; an empty one
    keeps them. ``baseline`` is never modified.
    """
    if ephemeral_rules:
        return dataclasses.replace(baseline, reorder=tuple(ephemeral_rules))
    return dataclasses.replace(baseline)


@dataclass(frozen=True, slots=True)
class SandboxOutcome:
    profile: QualityProfile
    ephemeral_count: int
    fallback: bool = False
    detail: str = ""


def sandbox_from_payload(baseline: QualityProfile, payload: Any) -> SandboxOutcome:
    """Decode ``payload`` and sandbox ``baseline`` with it.

    An undecodable payload falls back to the persisted rules; the outcome
    records the fallback instead of raising.
    """
    try:
        rules = decode_ephemeral_rules(payload)
    except MalformedRulesError as exc:
        logger.warning(
            "Ignoring temporary reorder rules for %s, using persisted rules: %s",
            baseline.name,
            exc.detail or exc,
        )
        return SandboxOutcome(
            profile=sandbox_profile(baseline, ()),
            ephemeral_count=0,
            fallback=True,
            detail=exc.detail,
        )
    return SandboxOutcome(
        profile=sandbox_profile(baseline, rules),
        ephemeral_count=len(rules),
    )
