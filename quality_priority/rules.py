from __future__ import annotations

import logging
from collections.abc import Sequence
from typing import Any, Iterable, List, Optional

from pydantic import BaseModel, ConfigDict, StrictInt, TypeAdapter, ValidationError

from .errors import MalformedRulesError
from .models import (
    COMBINED_RES_QUAL,
    POSITION,
    Axis,
    AxisMultiplier,
    CombinedPair,
    ReorderRule,
    RuleTarget,
    SingleAxis,
)

logger = logging.getLogger(__name__)


class ReorderRuleSettings(BaseModel):
    """Wire/config form of a reorder rule: ``{name, type, new_priority}``."""

    model_config = ConfigDict(extra="ignore")

    name: str = ""
    type: str = ""
    new_priority: StrictInt = 0

    def to_rule(self) -> ReorderRule:
        return make_rule(self.name, self.type, self.new_priority)


_RULE_LIST = TypeAdapter(List[ReorderRuleSettings])


def parse_rule_target(name: str, reorder_type: str) -> Optional[RuleTarget]:
    """Parse configured rule text into a tagged target, or ``None`` if it can never match."""
    kind = (reorder_type or "").strip().casefold()
    if kind == COMBINED_RES_QUAL:
        parts = (name or "").split(",")
        if len(parts) != 2:
            return None
        resolution, quality = (part.strip() for part in parts)
        # an empty quality part targets the neutral quality
        if not resolution:
            return None
        return CombinedPair(resolution, quality)
    if kind == POSITION:
        axis = Axis.parse(name)
        if axis is None:
            return None
        return AxisMultiplier(axis)
    axis = Axis.parse(kind)
    if axis is None or not name:
        return None
    return SingleAxis(axis, name)


def make_rule(name: str, reorder_type: str, new_priority: int) -> ReorderRule:
    target = parse_rule_target(name, reorder_type)
    if target is None:
        logger.warning(
            "Reorder rule %r (type %r) is not parseable and will never match",
            name,
            reorder_type,
        )
    return ReorderRule(
        name=name,
        reorder_type=reorder_type,
        new_priority=int(new_priority),
        target=target,
    )


def rules_from_settings(entries: Iterable[ReorderRuleSettings]) -> tuple[ReorderRule, ...]:
    return tuple(entry.to_rule() for entry in entries)


def decode_ephemeral_rules(payload: Any) -> List[ReorderRule]:
    """Decode a temporary rule payload.

    Accepts a JSON array string, a sequence of mappings, or a sequence of
    already-built ``ReorderRule`` objects. ``None``, ``""`` and ``"[]"``
    decode to no rules. Raises ``MalformedRulesError`` for anything else
    that fails validation.
    """
    if payload is None:
        return []
    if isinstance(payload, (str, bytes)):
        text = payload.decode("utf-8", errors="replace") if isinstance(payload, bytes) else payload
        if text.strip() in ("", "[]"):
            return []
        try:
            entries = _RULE_LIST.validate_json(text)
        except ValidationError as exc:
            raise MalformedRulesError(_summarize(exc)) from exc
        return list(rules_from_settings(entries))
    if not isinstance(payload, Sequence):
        raise MalformedRulesError(f"expected a list, got {type(payload).__name__}")
    if all(isinstance(item, ReorderRule) for item in payload):
        return list(payload)
    try:
        entries = _RULE_LIST.validate_python(list(payload))
    except ValidationError as exc:
        raise MalformedRulesError(_summarize(exc)) from exc
    return list(rules_from_settings(entries))


def _summarize(exc: ValidationError) -> str:
    errors = exc.errors()
    if not errors:
        return str(exc)
    first = errors[0]
    location = ".".join(str(part) for part in first.get("loc", ())) or "payload"
    suffix = f" (+{len(errors) - 1} more)" if len(errors) > 1 else ""
    return f"{location}: {first.get('msg', 'invalid')}{suffix}"
