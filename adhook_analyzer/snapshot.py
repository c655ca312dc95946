from typing import List, Optional

from .demographics import aggregate_demographics
from .types import AdRecord, AggregatedDemographics, BrandMetricsSnapshot


def build_snapshot(
    ads: List[AdRecord],
    total_ads_found: Optional[int] = None,
    demographics: Optional[AggregatedDemographics] = None,
) -> BrandMetricsSnapshot:
    """
    Reduces a brand's ads to the metrics the observation engine reads.

    Dominant gender and age range are the highest-percentage entries of the
    aggregated breakdowns (first one wins a tie). Top countries follow the
    region breakdown, which is already sorted by percentage.
    """
    if demographics is None:
        demographics = aggregate_demographics(ads)

    total_reach = sum(ad.reach or 0.0 for ad in ads)
    avg_reach = total_reach / len(ads) if ads else 0.0

    top_gender = (
        max(demographics.genderBreakdown, key=lambda g: g.percentage)
        if demographics.genderBreakdown
        else None
    )
    top_age = (
        max(demographics.ageBreakdown, key=lambda a: a.percentage)
        if demographics.ageBreakdown
        else None
    )

    regions = demographics.regionBreakdown
    countries = {}
    for i in range(3):
        region = regions[i] if i < len(regions) else None
        countries[f"topCountry{i + 1}Code"] = region.region if region else None
        countries[f"topCountry{i + 1}Pct"] = region.percentage if region else None

    return BrandMetricsSnapshot(
        totalAdsFound=total_ads_found if total_ads_found is not None else len(ads),
        activeAdsCount=sum(1 for ad in ads if ad.isActive),
        totalReach=total_reach,
        avgReachPerAd=avg_reach,
        dominantGender=top_gender.gender if top_gender else None,
        dominantGenderPct=top_gender.percentage if top_gender else None,
        dominantAgeRange=top_age.age if top_age else None,
        dominantAgePct=top_age.percentage if top_age else None,
        **countries,
    )
