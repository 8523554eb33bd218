from __future__ import annotations

import json
from typing import Optional

from ..engine import QualityPriorityEngine, RankingReport, RankingRequest
from ..models import RankedResult
from ..ranking import changed_results


def _signed(value: int) -> str:
    return f"+{value}" if value > 0 else str(value)


def _breakdown(result: RankedResult) -> str:
    first, *rest = result.candidate.priorities
    return str(first) + "".join(f"{value:+d}" for value in rest)


def _header(report: RankingReport) -> list[str]:
    lines = [f"Profile: {report.profile}"]
    if report.testing_mode:
        lines.append(
            "Testing mode - temporary rules active: "
            f"{report.persisted_rule_count} persisted replaced by "
            f"{report.ephemeral_rule_count} temporary"
        )
    elif report.persisted_rule_count:
        lines.append(f"Reorder rules: {report.persisted_rule_count} configured")
    else:
        lines.append("No reorder rules configured - using default priorities")
    if report.rules_fallback:
        lines.append(f"Temporary rules ignored ({report.detail}); persisted rules used")
    filters = report.filters.describe()
    if filters:
        lines.append(f"Filters: {filters}")
    if report.wanted_only:
        lines.append("Wanted values only")
    if report.cutoff_priority is not None:
        lines.append(f"Cutoff priority: {report.cutoff_priority}")
    return lines


def format_report(
    report: RankingReport, *, limit: Optional[int] = None, changed_only: bool = False
) -> list[str]:
    if not report.ok:
        code = report.error.code if report.error else "ERROR"
        message = report.error.message if report.error else ""
        return [f"{code}: {message} ({report.detail})" if report.detail else f"{code}: {message}"]
    lines = _header(report)
    rows = changed_results(report.results) if changed_only else report.results
    results = rows[:limit] if limit else rows
    width = max((len(result.combination.display()) for result in results), default=11)
    width = max(width, len("Combination"))
    lines.append("")
    lines.append(
        f"{'Rank':>4}  {'Combination':<{width}}  {'Base':>6}  {'New':>6}  {'Delta':>6}  Breakdown"
    )
    for result in results:
        marker = " *" if result.override_applied else ""
        if result.meets_cutoff:
            marker += " (cutoff)"
        lines.append(
            f"{result.rank:>4}  {result.combination.display():<{width}}  "
            f"{result.baseline.total:>6}  {result.candidate.total:>6}  "
            f"{_signed(result.delta):>6}  {_breakdown(result)}{marker}"
        )
    if limit and len(rows) > limit:
        lines.append(f"... {len(rows) - limit} more")
    return lines


def run(
    engine: QualityPriorityEngine,
    request: RankingRequest,
    *,
    json_output: bool = False,
    limit: Optional[int] = None,
    changed_only: bool = False,
) -> RankingReport:
    report = engine.rank(request)
    if json_output:
        print(json.dumps(report.to_record(), indent=2, sort_keys=True))
        return report
    for line in format_report(report, limit=limit, changed_only=changed_only):
        print(line)
    return report
