from __future__ import annotations

from dataclasses import dataclass, field

from ..catalog import AttributeCatalog
from ..models import AXES, Axis, AxisMultiplier, CombinedPair, QualityProfile, ReorderRule, SingleAxis
from ..repository import ConfigSnapshot

OK = "OK"
WARNING = "WARNING"
ERROR = "ERROR"


@dataclass(slots=True)
class CheckReport:
    """Doctor-style ``Label: STATUS (detail)`` lines; any ERROR marks the report unhealthy."""

    ok: bool = True
    checks: list[str] = field(default_factory=list)

    def add(self, label: str, status: str, detail: str | None = None) -> None:
        if status == ERROR:
            self.ok = False
        if detail:
            self.checks.append(f"{label}: {status} ({detail})")
        else:
            self.checks.append(f"{label}: {status}")


def _known(catalog: AttributeCatalog, axis: Axis, name: str) -> bool:
    folded = name.casefold()
    return any(value.casefold() == folded for value in catalog.names(axis) if value)


def _rule_problem(catalog: AttributeCatalog, rule: ReorderRule) -> str | None:
    target = rule.target
    if target is None:
        return f"unparseable rule {rule.name!r} (type {rule.reorder_type!r})"
    if isinstance(target, SingleAxis) and not _known(catalog, target.axis, target.value):
        return f"rule {rule.name!r} matches no {target.axis.value} value"
    if isinstance(target, CombinedPair):
        missing = []
        if not _known(catalog, Axis.RESOLUTION, target.resolution):
            missing.append(f"resolution {target.resolution!r}")
        if target.quality and not _known(catalog, Axis.QUALITY, target.quality):
            missing.append(f"quality {target.quality!r}")
        if missing:
            return f"rule {rule.name!r} references unknown {' and '.join(missing)}"
    if isinstance(target, AxisMultiplier) and rule.new_priority == 0:
        return f"position rule {rule.name!r} zeroes every {target.axis.value} priority"
    return None


def check_profile(report: CheckReport, catalog: AttributeCatalog, profile: QualityProfile) -> None:
    label = f"Profile {profile.name}"
    unknown = [
        f"{axis.value} {name!r}"
        for axis in AXES
        for name in profile.wanted(axis)
        if not catalog.contains(axis, name)
    ]
    if unknown:
        report.add(f"{label} wanted", WARNING, "unknown " + ", ".join(unknown))
    else:
        report.add(f"{label} wanted", OK)
    for axis, name in (
        (Axis.RESOLUTION, profile.cutoff_resolution),
        (Axis.QUALITY, profile.cutoff_quality),
    ):
        if name and not catalog.contains(axis, name):
            report.add(f"{label} cutoff", ERROR, f"unknown {axis.value} {name!r}")
    problems = [problem for rule in profile.reorder if (problem := _rule_problem(catalog, rule))]
    if problems:
        report.add(f"{label} rules", WARNING, "; ".join(problems))
    else:
        report.add(f"{label} rules", OK, f"{len(profile.reorder)} rule(s)")


def run(snapshot: ConfigSnapshot) -> CheckReport:
    report = CheckReport()
    catalog = snapshot.catalog
    if len(catalog):
        counts = ", ".join(f"{axis.value}={len(catalog.values(axis)) - 1}" for axis in AXES)
        report.add("Catalog", OK, counts)
    else:
        report.add("Catalog", ERROR, "no attribute values configured")
    if not len(snapshot):
        report.add("Profiles", WARNING, "no quality profiles configured")
    for name in snapshot.names():
        check_profile(report, catalog, snapshot.get(name))
    return report
