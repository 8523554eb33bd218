from __future__ import annotations

from typing import List, Optional, Sequence

from .models import RankedResult, ResolvedCombination


def rank_results(
    baseline: Sequence[ResolvedCombination],
    candidate: Sequence[ResolvedCombination],
    *,
    cutoff_priority: Optional[int] = None,
) -> List[RankedResult]:
    """Pair baseline and candidate resolutions and rank them.

    Both sequences must come from one generation pass, resolved once per
    profile. Ordering is candidate total descending, then generation index
    ascending, so ties are reproducible. Ranks are dense and 1-based.
    """
    if len(baseline) != len(candidate):
        raise ValueError(
            f"baseline has {len(baseline)} combinations, candidate has {len(candidate)}"
        )
    pairs = []
    for base, cand in zip(baseline, candidate):
        if base.combination.index != cand.combination.index or (
            base.combination.names != cand.combination.names
        ):
            raise ValueError(
                f"combination mismatch at generation index {base.combination.index}"
            )
        pairs.append((base, cand))
    pairs.sort(key=lambda pair: (-pair[1].total, pair[1].combination.index))
    results: List[RankedResult] = []
    for position, (base, cand) in enumerate(pairs, start=1):
        meets_cutoff = None
        if cutoff_priority is not None:
            meets_cutoff = cand.total >= cutoff_priority
        results.append(
            RankedResult(
                rank=position,
                baseline=base,
                candidate=cand,
                delta=cand.total - base.total,
                meets_cutoff=meets_cutoff,
            )
        )
    return results


def changed_results(results: Sequence[RankedResult]) -> List[RankedResult]:
    """Results whose candidate total differs from the baseline."""
    return [result for result in results if result.delta != 0]
