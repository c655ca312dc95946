import math
import re
from typing import List, Dict, Optional, Sequence, TypeVar

from .types import (
    AdRecord,
    AdDemographics,
    AgeBreakdown,
    GenderBreakdown,
    DemographicBreakdown,
    RegionBreakdown,
    AggregatedDemographics,
)

# ============================================================
# Helpers
# ============================================================

DEFAULT_WEIGHT = 1.0

T = TypeVar("T", AgeBreakdown, GenderBreakdown, DemographicBreakdown, RegionBreakdown)


def round_half_up(n: float, digits: int = 0) -> float:
    factor = 10.0**digits
    return math.floor(n * factor + 0.5) / factor


def get_weight(demographics: Optional[AdDemographics]) -> float:
    """
    Weight of an ad in the aggregate: EU reach, else the impressions
    midpoint, else 1. Ads without demographics weigh nothing.
    """
    if demographics is None:
        return 0.0

    if demographics.euTotalReach and demographics.euTotalReach > 0:
        return demographics.euTotalReach

    lower = demographics.impressionsLower
    upper = demographics.impressionsUpper
    if lower is not None and upper is not None:
        midpoint = (lower + upper) / 2
        if midpoint > 0:
            return midpoint

    return DEFAULT_WEIGHT


def _has_reach_figure(demographics: AdDemographics) -> bool:
    if demographics.euTotalReach and demographics.euTotalReach > 0:
        return True
    lower = demographics.impressionsLower
    upper = demographics.impressionsUpper
    return lower is not None and upper is not None and (lower + upper) / 2 > 0


def weighted_mean(values: Sequence[float], weights: Sequence[float]) -> float:
    value_sum = sum(v * w for v, w in zip(values, weights))
    weight_sum = sum(weights)
    return value_sum / weight_sum if weight_sum > 0 else 0.0


def normalize_breakdown(entries: List[T]) -> List[T]:
    """Rescale percentages so they sum to 100, rounded to 2 decimals."""
    if not entries:
        return entries

    total = sum(e.percentage for e in entries)

    if abs(total - 100) < 0.1:
        return [e.model_copy(update={"percentage": round_half_up(e.percentage, 2)}) for e in entries]

    if total == 0:
        return entries

    return [
        e.model_copy(update={"percentage": round_half_up(e.percentage / total * 100, 2)})
        for e in entries
    ]


def _age_sort_key(age: str) -> int:
    match = re.match(r"\d+", age)
    return int(match.group(0)) if match else 0


# ============================================================
# Aggregation
# ============================================================


def aggregate_age_gender(
    demographics: List[AdDemographics], weights: List[float]
) -> List[DemographicBreakdown]:
    groups: Dict[tuple, Dict[str, List[float]]] = {}

    for demo, weight in zip(demographics, weights):
        for entry in demo.ageGenderBreakdown:
            key = (entry.age, entry.gender)
            if key not in groups:
                groups[key] = {"percentages": [], "weights": []}
            groups[key]["percentages"].append(entry.percentage)
            groups[key]["weights"].append(weight)

    return [
        DemographicBreakdown(
            age=age,
            gender=gender,
            percentage=weighted_mean(g["percentages"], g["weights"]),
        )
        for (age, gender), g in groups.items()
    ]


def derive_age_breakdown(age_gender: List[DemographicBreakdown]) -> List[AgeBreakdown]:
    totals: Dict[str, float] = {}
    for entry in age_gender:
        totals[entry.age] = totals.get(entry.age, 0.0) + entry.percentage

    result = [AgeBreakdown(age=age, percentage=pct) for age, pct in totals.items()]
    return sorted(result, key=lambda a: _age_sort_key(a.age))


def derive_gender_breakdown(age_gender: List[DemographicBreakdown]) -> List[GenderBreakdown]:
    totals: Dict[str, float] = {}
    for entry in age_gender:
        totals[entry.gender] = totals.get(entry.gender, 0.0) + entry.percentage

    return [GenderBreakdown(gender=gender, percentage=pct) for gender, pct in totals.items()]


def aggregate_regions(
    demographics: List[AdDemographics], weights: List[float]
) -> List[RegionBreakdown]:
    groups: Dict[str, Dict[str, List[float]]] = {}

    for demo, weight in zip(demographics, weights):
        for entry in demo.regionBreakdown:
            if entry.region not in groups:
                groups[entry.region] = {"percentages": [], "weights": []}
            groups[entry.region]["percentages"].append(entry.percentage)
            groups[entry.region]["weights"].append(weight)

    result = [
        RegionBreakdown(region=region, percentage=weighted_mean(g["percentages"], g["weights"]))
        for region, g in groups.items()
    ]
    return sorted(result, key=lambda r: r.percentage, reverse=True)


def aggregate_demographics(ads: List[AdRecord]) -> AggregatedDemographics:
    """
    Combines per-ad breakdowns into one weighted summary where high-reach
    ads contribute more. Every breakdown is normalized to sum to 100.
    """
    demographics = [ad.demographics for ad in ads if ad.demographics is not None]
    if not demographics:
        return AggregatedDemographics()

    weights = [get_weight(d) for d in demographics]
    ads_without_reach = sum(1 for d in demographics if not _has_reach_figure(d))

    age_gender = aggregate_age_gender(demographics, weights)

    return AggregatedDemographics(
        ageBreakdown=normalize_breakdown(derive_age_breakdown(age_gender)),
        genderBreakdown=normalize_breakdown(derive_gender_breakdown(age_gender)),
        ageGenderBreakdown=normalize_breakdown(age_gender),
        regionBreakdown=normalize_breakdown(aggregate_regions(demographics, weights)),
        totalReachAnalyzed=sum(weights),
        adsWithDemographics=len(demographics),
        adsWithoutReach=ads_without_reach,
    )
