import math
from typing import List, Dict, Any, Optional
from .types import AdRecord, AdDemographics, DemographicBreakdown, RegionBreakdown


def _coerce_number(value: Any) -> Optional[float]:
    if isinstance(value, bool):
        return None
    if isinstance(value, (int, float)):
        number = float(value)
    elif isinstance(value, str):
        try:
            number = float(value.strip())
        except ValueError:
            return None
    else:
        return None
    # "nan", "inf" and overflowing strings are not reach figures
    return number if math.isfinite(number) else None


def _parse_percentage(value: Any) -> Optional[float]:
    # The API mixes fractions (0.42) and percentages (42)
    pct = _coerce_number(value)
    if pct is None:
        return None
    return pct * 100 if pct <= 1 else pct


def _pick(raw: Dict[str, Any], *keys: str) -> Any:
    for key in keys:
        if key in raw and raw[key] is not None:
            return raw[key]
    return None


def extract_demographics(data: Any, ad_id: str) -> Optional[AdDemographics]:
    """
    Walks an ad library payload at any depth and collects age/gender and
    region breakdowns plus the reach figures used for weighting.
    Returns None when the payload carries no breakdown at all (non-EU ads).
    """
    age_gender: List[DemographicBreakdown] = []
    regions: List[RegionBreakdown] = []
    found: Dict[str, Optional[float]] = {
        "euTotalReach": None,
        "impressionsLower": None,
        "impressionsUpper": None,
    }

    def traverse(obj: Any) -> None:
        if isinstance(obj, list):
            for item in obj:
                traverse(item)
            return
        if not isinstance(obj, dict):
            return

        for field in ("demographic_distribution", "age_country_gender_reach_breakdown"):
            entries = obj.get(field)
            if not isinstance(entries, list):
                continue
            for entry in entries:
                if not isinstance(entry, dict):
                    continue
                pct = _parse_percentage(entry.get("percentage"))
                if entry.get("age") and entry.get("gender") and pct is not None:
                    age_gender.append(
                        DemographicBreakdown(
                            age=str(entry["age"]),
                            gender=str(entry["gender"]).lower(),
                            percentage=pct,
                        )
                    )

        region_field = obj.get("delivery_by_region") or obj.get("region_distribution")
        if isinstance(region_field, list):
            for entry in region_field:
                if not isinstance(entry, dict):
                    continue
                pct = _parse_percentage(entry.get("percentage"))
                if entry.get("region") and pct is not None:
                    regions.append(RegionBreakdown(region=str(entry["region"]), percentage=pct))

        reach = _coerce_number(obj.get("eu_total_reach"))
        if reach is not None:
            found["euTotalReach"] = reach

        impressions = obj.get("impressions")
        if isinstance(impressions, dict):
            lower = _coerce_number(impressions.get("lower_bound"))
            upper = _coerce_number(impressions.get("upper_bound"))
            if lower is not None:
                found["impressionsLower"] = lower
            if upper is not None:
                found["impressionsUpper"] = upper

        for value in obj.values():
            traverse(value)

    traverse(data)

    if not age_gender and not regions:
        return None

    return AdDemographics(
        adArchiveId=ad_id,
        ageGenderBreakdown=age_gender,
        regionBreakdown=regions,
        **found,
    )


def coerce_ad(raw: Any) -> Optional[AdRecord]:
    if isinstance(raw, AdRecord):
        return raw
    if not isinstance(raw, dict):
        return None

    ad_id = _pick(raw, "id", "ad_archive_id", "adArchiveId")
    if ad_id is None or str(ad_id) == "":
        return None
    ad_id = str(ad_id)

    bodies = _pick(raw, "creativeBodies", "ad_creative_bodies") or []
    if isinstance(bodies, str):
        bodies = [bodies]
    if not isinstance(bodies, list):
        bodies = []

    is_active = _pick(raw, "isActive", "is_active")

    return AdRecord(
        id=ad_id,
        creativeBodies=[b for b in bodies if isinstance(b, str)],
        reach=_coerce_number(_pick(raw, "reach", "eu_total_reach")),
        isActive=bool(is_active) if is_active is not None else True,
        demographics=extract_demographics(raw, ad_id),
    )


def clean_ad_records(
    raw_ads: List[Dict[str, Any]], limit: Optional[int] = None
) -> List[AdRecord]:
    """
    Takes raw ad library output and keeps only what the hook extractor and
    snapshot builder need. Entries without an id are dropped.
    """
    sliced = raw_ads[:limit] if limit else raw_ads

    cleaned: List[AdRecord] = []
    for raw in sliced:
        ad = coerce_ad(raw)
        if ad is not None:
            cleaned.append(ad)

    return cleaned
