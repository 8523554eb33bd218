from __future__ import annotations

from ..models import AXES
from ..repository import ConfigSnapshot
from ..resolver import PriorityResolver


def describe(snapshot: ConfigSnapshot) -> list[str]:
    resolver = PriorityResolver(snapshot.catalog)
    lines: list[str] = []
    for name in snapshot.names():
        profile = snapshot.get(name)
        wanted = ", ".join(
            f"{axis.value}={len(profile.wanted(axis)) or 'all'}" for axis in AXES
        )
        cutoff = resolver.cutoff_priority(profile)
        cutoff_text = "none" if cutoff is None else str(cutoff)
        lines.append(
            f"{name}: wanted [{wanted}], {len(profile.reorder)} reorder rule(s), cutoff {cutoff_text}"
        )
    return lines


def run(snapshot: ConfigSnapshot) -> None:
    lines = describe(snapshot)
    if not lines:
        print("No quality profiles configured.")
        return
    for line in lines:
        print(line)
