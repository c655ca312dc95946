"""
Competitive observations.

Each detector reads the brand snapshot (and the hook groups) and either
returns one scored Observation or abstains with None. The engine runs them
all, ranks by magnitude and keeps the top few.
"""

import math
from typing import Any, Callable, Dict, List, Optional, Sequence, Union

import pycountry

from .types import BrandMetricsSnapshot, HookGroup, Observation

MAX_OBSERVATIONS = 5

DEMOGRAPHIC_SKEW_MIN_PCT = 25
GENDER_IMBALANCE_BASELINE_PCT = 60
GEO_CONCENTRATION_MIN_PCT = 50
HOOK_PATTERN_MIN_ADS = 5
HOOK_PATTERN_MIN_FREQUENCY = 3
HOOK_DISPLAY_MAX_LENGTH = 50

Detector = Callable[[BrandMetricsSnapshot, Sequence[HookGroup]], Optional[Observation]]


# ============================================================
# Helpers
# ============================================================


def round_pct(n: float) -> int:
    # Half-up: 72.5 -> 73
    return int(math.floor(n + 0.5))


def capitalize(s: str) -> str:
    return s[:1].upper() + s[1:]


# Short English names where ISO 3166 only carries the official one, plus
# Kosovo, which has a user-assigned code outside the standard
COUNTRY_NAME_OVERRIDES = {
    "BO": "Bolivia",
    "FM": "Micronesia",
    "IR": "Iran",
    "KP": "North Korea",
    "KR": "South Korea",
    "LA": "Laos",
    "MD": "Moldova",
    "PS": "Palestinian Territories",
    "RU": "Russia",
    "SY": "Syria",
    "TW": "Taiwan",
    "TZ": "Tanzania",
    "VE": "Venezuela",
    "VN": "Vietnam",
    "XK": "Kosovo",
}


def country_name(code: str) -> str:
    override = COUNTRY_NAME_OVERRIDES.get(code.upper())
    if override:
        return override
    country = pycountry.countries.get(alpha_2=code.upper())
    if country is None:
        return code
    return getattr(country, "common_name", None) or country.name


def truncate_hook(text: str, limit: int = HOOK_DISPLAY_MAX_LENGTH) -> str:
    if len(text) <= limit:
        return text
    return text[: limit - 3] + "..."


# ============================================================
# Detectors
# ============================================================


def detect_demographic_skew(
    snapshot: BrandMetricsSnapshot, hook_groups: Sequence[HookGroup]
) -> Optional[Observation]:
    age_range = snapshot.dominantAgeRange
    age_pct = snapshot.dominantAgePct
    gender = snapshot.dominantGender

    if not age_range or age_pct is None or not gender or snapshot.dominantGenderPct is None:
        return None
    if age_pct < DEMOGRAPHIC_SKEW_MIN_PCT:
        return None

    return Observation(
        type="demographic-skew",
        title="Demographic Skew",
        description=f"Skews {age_range} {gender}, {round_pct(age_pct)}% of reach",
        magnitude=age_pct,
    )


def detect_gender_imbalance(
    snapshot: BrandMetricsSnapshot, hook_groups: Sequence[HookGroup]
) -> Optional[Observation]:
    gender = snapshot.dominantGender
    gender_pct = snapshot.dominantGenderPct

    if not gender or gender_pct is None:
        return None
    if gender_pct <= GENDER_IMBALANCE_BASELINE_PCT:
        return None

    span = 100 - GENDER_IMBALANCE_BASELINE_PCT
    return Observation(
        type="gender-imbalance",
        title="Gender Imbalance",
        description=f"{capitalize(gender)} audience dominates at {round_pct(gender_pct)}% of reach",
        magnitude=(gender_pct - GENDER_IMBALANCE_BASELINE_PCT) / span * 100,
    )


def detect_geo_concentration(
    snapshot: BrandMetricsSnapshot, hook_groups: Sequence[HookGroup]
) -> Optional[Observation]:
    code1 = snapshot.topCountry1Code
    pct1 = snapshot.topCountry1Pct

    if not code1 or pct1 is None:
        return None

    pct2 = snapshot.topCountry2Pct
    combined = pct1 + (pct2 if pct2 is not None else 0)
    if combined <= GEO_CONCENTRATION_MIN_PCT:
        return None

    label = country_name(code1)
    if snapshot.topCountry2Code and pct2 is not None and pct2 > 0:
        label = f"{label} and {country_name(snapshot.topCountry2Code)}"

    return Observation(
        type="geo-concentration",
        title="Geographic Concentration",
        description=f"Concentrated in {label}, {round_pct(combined)}% of reach",
        magnitude=combined,
    )


def detect_hook_pattern(
    snapshot: BrandMetricsSnapshot, hook_groups: Sequence[HookGroup]
) -> Optional[Observation]:
    total_ads = snapshot.totalAdsFound or 0
    if not hook_groups or total_ads < HOOK_PATTERN_MIN_ADS:
        return None

    # Groups arrive sorted by totalReach, so the first one is the top hook
    top = hook_groups[0]
    if top.frequency < HOOK_PATTERN_MIN_FREQUENCY:
        return None

    return Observation(
        type="hook-pattern",
        title="Recurring Hook",
        description=f'"{truncate_hook(top.hookText)}" appears in {top.frequency} ads',
        magnitude=top.frequency / total_ads * 100,
    )


DETECTORS = (
    detect_demographic_skew,
    detect_gender_imbalance,
    detect_geo_concentration,
    detect_hook_pattern,
)


# ============================================================
# Engine
# ============================================================


def generate_observations(
    snapshot: Union[BrandMetricsSnapshot, Dict[str, Any]],
    hook_groups: Sequence[Union[HookGroup, Dict[str, Any]]],
    detectors: Sequence[Detector] = DETECTORS,
) -> List[Observation]:
    if isinstance(snapshot, dict):
        snapshot = BrandMetricsSnapshot.model_validate(snapshot)
    groups = [HookGroup.model_validate(g) if isinstance(g, dict) else g for g in hook_groups]

    observations = []
    for detect in detectors:
        observation = detect(snapshot, groups)
        if observation is not None:
            observations.append(observation)

    # Stable: equal magnitudes keep detector order
    observations.sort(key=lambda o: o.magnitude, reverse=True)
    return observations[:MAX_OBSERVATIONS]
