import json
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple, Union

from .cleaner import clean_ad_records
from .hooks import extract_hooks_from_ads
from .observations import generate_observations
from .snapshot import build_snapshot
from .types import BrandAnalysis, BrandMetricsSnapshot


def load_ads_file(path: str) -> Tuple[List[Dict[str, Any]], Optional[int]]:
    """
    Reads ads from a local JSON file: either a bare list of ads or an object
    with "ads" (or ad library style "data") and an optional "totalAdsFound".
    """
    with open(path, "r", encoding="utf-8") as f:
        data = json.load(f)

    if isinstance(data, list):
        return data, None

    if not isinstance(data, dict):
        raise ValueError(f"Unrecognised ads file layout in {path}")

    ads = data.get("ads")
    if ads is None:
        ads = data.get("data", [])
    total = data.get("totalAdsFound")
    return ads, int(total) if isinstance(total, (int, float)) else None


def run_analysis(
    raw_ads: Optional[List[Dict[str, Any]]] = None,
    local_file_json: Optional[str] = None,
    snapshot: Optional[Union[BrandMetricsSnapshot, Dict[str, Any]]] = None,
    total_ads_found: Optional[int] = None,
) -> BrandAnalysis:
    """
    Orchestrates hook extraction and observation generation for one brand.
    If snapshot is given it is used as is, otherwise one is built from the ads.
    """
    source = local_file_json or "in-memory ads"
    print(f"[Analysis] Starting run for {source}")

    # 1. Load
    if local_file_json:
        raw_ads, file_total = load_ads_file(local_file_json)
        if total_ads_found is None:
            total_ads_found = file_total
    elif raw_ads is None:
        raise ValueError("Must provide either raw_ads or local_file_json")

    if not raw_ads:
        raise ValueError("No ads found to analyze")

    # 2. Clean
    ads = clean_ad_records(raw_ads)
    if not ads:
        raise ValueError("After cleaning, no valid ads remained")
    if len(ads) < len(raw_ads):
        print(f"[Analysis] WARNING: Dropped {len(raw_ads) - len(ads)} ads without an id")

    # 3. Hooks
    hook_groups = extract_hooks_from_ads(ads)
    print(f"[Analysis] Found {len(hook_groups)} hook groups across {len(ads)} ads")

    # 4. Snapshot
    if snapshot is None:
        snapshot = build_snapshot(ads, total_ads_found=total_ads_found)
    elif isinstance(snapshot, dict):
        snapshot = BrandMetricsSnapshot.model_validate(snapshot)

    # 5. Observations
    observations = generate_observations(snapshot, hook_groups)
    print(f"[Analysis] Generated {len(observations)} observations")

    return BrandAnalysis(
        analyzedAt=datetime.now(timezone.utc).isoformat(),
        adsAnalyzed=len(ads),
        snapshot=snapshot,
        hookGroups=hook_groups,
        observations=observations,
    )
