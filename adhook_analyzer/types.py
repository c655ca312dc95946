from typing import List, Optional, Literal
from pydantic import BaseModel, ConfigDict

# ============================================================
# AD RECORDS — what the ad library collaborator hands us
# ============================================================


class DemographicBreakdown(BaseModel):
    age: str  # e.g. "18-24", "65+"
    gender: str  # "male" | "female" | "unknown"
    percentage: float  # 0-100


class RegionBreakdown(BaseModel):
    region: str  # country code, e.g. "DE"
    percentage: float


class AdDemographics(BaseModel):
    adArchiveId: str
    ageGenderBreakdown: List[DemographicBreakdown] = []
    regionBreakdown: List[RegionBreakdown] = []
    euTotalReach: Optional[float] = None
    impressionsLower: Optional[float] = None
    impressionsUpper: Optional[float] = None


class AdRecord(BaseModel):
    id: str
    creativeBodies: List[str] = []
    reach: Optional[float] = None
    isActive: bool = True
    demographics: Optional[AdDemographics] = None


# ============================================================
# HOOKS — output of the hook extractor
# ============================================================


class RawAdHook(BaseModel):
    model_config = ConfigDict(frozen=True)
    adId: str
    hookText: str
    reach: float = 0.0


class HookGroup(BaseModel):
    model_config = ConfigDict(frozen=True)
    hookText: str  # first display text seen for the key
    normalizedKey: str
    frequency: int
    totalReach: float
    avgReachPerAd: float
    adIds: List[str]


# ============================================================
# AGGREGATED DEMOGRAPHICS + SNAPSHOT
# ============================================================


class AgeBreakdown(BaseModel):
    age: str
    percentage: float


class GenderBreakdown(BaseModel):
    gender: str
    percentage: float


class AggregatedDemographics(BaseModel):
    ageBreakdown: List[AgeBreakdown] = []
    genderBreakdown: List[GenderBreakdown] = []
    ageGenderBreakdown: List[DemographicBreakdown] = []
    regionBreakdown: List[RegionBreakdown] = []
    totalReachAnalyzed: float = 0.0
    adsWithDemographics: int = 0
    adsWithoutReach: int = 0


class BrandMetricsSnapshot(BaseModel):
    model_config = ConfigDict(frozen=True, extra="ignore")
    totalAdsFound: Optional[int] = 0
    activeAdsCount: int = 0
    totalReach: float = 0.0
    avgReachPerAd: float = 0.0

    dominantGender: Optional[str] = None
    dominantGenderPct: Optional[float] = None
    dominantAgeRange: Optional[str] = None
    dominantAgePct: Optional[float] = None

    topCountry1Code: Optional[str] = None
    topCountry1Pct: Optional[float] = None
    topCountry2Code: Optional[str] = None
    topCountry2Pct: Optional[float] = None
    topCountry3Code: Optional[str] = None
    topCountry3Pct: Optional[float] = None


# ============================================================
# OBSERVATIONS — output of the observation engine
# ============================================================

ObservationType = Literal[
    "demographic-skew",
    "gender-imbalance",
    "geo-concentration",
    "hook-pattern",
]


class Observation(BaseModel):
    model_config = ConfigDict(frozen=True)
    type: ObservationType
    title: str
    description: str
    magnitude: float  # 0-100, only used for ranking


# ============================================================
# FULL ANALYSIS — what the pipeline returns
# ============================================================


class BrandAnalysis(BaseModel):
    model_config = ConfigDict(extra="ignore")
    analyzedAt: str
    adsAnalyzed: int
    snapshot: BrandMetricsSnapshot
    hookGroups: List[HookGroup]
    observations: List[Observation]
