from __future__ import annotations

import itertools
import logging
from typing import Iterator, List, Optional

from .catalog import AttributeCatalog
from .models import AXES, Axis, AttributeValue, AxisFilters, Combination, QualityProfile

logger = logging.getLogger(__name__)


def candidate_values(
    catalog: AttributeCatalog,
    profile: QualityProfile,
    axis: Axis,
    *,
    wanted_only: bool = False,
    filter_value: Optional[str] = None,
) -> List[AttributeValue]:
    """Values of one axis that take part in combination generation.

    The neutral value is always first and always kept. An empty wanted list
    means no restriction, so ``wanted_only`` has no effect on that axis.
    Wanted and filter names match case-sensitively.
    """
    values = list(catalog.values(axis))
    wanted = profile.wanted(axis)
    if wanted_only and wanted:
        allowed = set(wanted)
        values = [value for value in values if value.is_neutral or value.name in allowed]
    if filter_value is not None:
        values = [value for value in values if value.is_neutral or value.name == filter_value]
    return values


def generate_combinations(
    catalog: AttributeCatalog,
    profile: QualityProfile,
    *,
    wanted_only: bool = False,
    filters: Optional[AxisFilters] = None,
) -> Iterator[Combination]:
    """Yield the Cartesian product of candidate values in fixed axis order.

    Each combination carries its generation index, used later as the stable
    tie-break when ranking. Call again for a fresh sequence.
    """
    filters = filters or AxisFilters()
    per_axis = [
        candidate_values(
            catalog,
            profile,
            axis,
            wanted_only=wanted_only,
            filter_value=filters.get(axis),
        )
        for axis in AXES
    ]
    logger.debug(
        "Generating combinations for %s: %s",
        profile.name,
        ", ".join(f"{axis.value}={len(values)}" for axis, values in zip(AXES, per_axis)),
    )
    for index, values in enumerate(itertools.product(*per_axis)):
        yield Combination(values=tuple(values), index=index)
