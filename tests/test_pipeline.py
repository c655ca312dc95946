import json
from pathlib import Path

import pytest
from adhook_analyzer.pipeline import load_ads_file, run_analysis

FIXTURE = Path(__file__).parent / "fixtures" / "sample_ads.json"


def test_load_ads_file():
    ads, total = load_ads_file(str(FIXTURE))
    assert len(ads) == 7
    assert total == 6


def test_load_ads_file_bare_list(tmp_path):
    path = tmp_path / "ads.json"
    path.write_text(json.dumps([{"id": "a"}]), encoding="utf-8")
    ads, total = load_ads_file(str(path))
    assert ads == [{"id": "a"}]
    assert total is None


def test_run_analysis_from_file():
    analysis = run_analysis(local_file_json=str(FIXTURE))

    assert analysis.adsAnalyzed == 6  # ghost ad without id dropped

    top, second = analysis.hookGroups
    assert top.hookText == "Stop wasting money on coffee!"
    assert top.normalizedKey == "stop wasting money on coffee"
    assert top.adIds == ["101", "102", "103"]
    assert top.totalReach == 10000
    assert second.hookText == "New: the barista kit."
    assert second.totalReach == 8000

    snap = analysis.snapshot
    assert snap.totalAdsFound == 6
    assert snap.activeAdsCount == 5
    assert snap.dominantGender == "female"
    assert snap.dominantGenderPct == pytest.approx(75)
    assert snap.dominantAgeRange == "25-34"
    assert snap.topCountry1Code == "DE"

    assert [o.type for o in analysis.observations] == [
        "geo-concentration",
        "demographic-skew",
        "hook-pattern",
        "gender-imbalance",
    ]
    descriptions = [o.description for o in analysis.observations]
    assert descriptions[0] == "Concentrated in Germany and Austria, 100% of reach"
    assert descriptions[1] == "Skews 25-34 female, 70% of reach"
    assert descriptions[2] == '"Stop wasting money on coffee!" appears in 3 ads'
    assert descriptions[3] == "Female audience dominates at 75% of reach"


def test_run_analysis_with_supplied_snapshot():
    analysis = run_analysis(local_file_json=str(FIXTURE), snapshot={"totalAdsFound": 2})
    assert analysis.snapshot.totalAdsFound == 2
    assert analysis.observations == []


def test_run_analysis_in_memory_ads():
    ads = [
        {"id": "a", "creativeBodies": ["Save big today!"], "reach": 100},
        {"id": "b", "creativeBodies": ["Save big today!!"], "reach": 50},
    ]
    analysis = run_analysis(raw_ads=ads)
    assert analysis.hookGroups[0].frequency == 2
    assert analysis.snapshot.totalAdsFound == 2


def test_run_analysis_requires_input():
    with pytest.raises(ValueError):
        run_analysis()
    with pytest.raises(ValueError):
        run_analysis(raw_ads=[])
    with pytest.raises(ValueError):
        run_analysis(raw_ads=[{"creativeBodies": ["no id"]}])
