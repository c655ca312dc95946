import pytest
from adhook_analyzer.cleaner import clean_ad_records, coerce_ad, extract_demographics


def test_clean_ad_records_empty():
    assert clean_ad_records([]) == []


def test_clean_ad_records_basic():
    raw_data = [
        {
            "ad_archive_id": 123,
            "ad_creative_bodies": ["Hello world. Buy now!", 5, None],
            "eu_total_reach": "1500",
            "is_active": False,
            "demographic_distribution": [
                {"age": "25-34", "gender": "Female", "percentage": "0.6"},
                {"age": "25-34", "gender": "male", "percentage": 40},
            ],
            "delivery_by_region": [{"region": "DE", "percentage": 0.7}],
        }
    ]

    cleaned = clean_ad_records(raw_data)

    assert len(cleaned) == 1
    ad = cleaned[0]

    assert ad.id == "123"
    assert ad.creativeBodies == ["Hello world. Buy now!"]
    assert ad.reach == 1500
    assert ad.isActive is False

    demo = ad.demographics
    assert demo.adArchiveId == "123"
    assert demo.ageGenderBreakdown[0].gender == "female"  # Normalized
    assert demo.ageGenderBreakdown[0].percentage == pytest.approx(60.0)
    assert demo.ageGenderBreakdown[1].percentage == 40
    assert demo.regionBreakdown[0].region == "DE"
    assert demo.regionBreakdown[0].percentage == pytest.approx(70.0)
    assert demo.euTotalReach == 1500


def test_clean_ad_records_limit():
    raw_data = [{"id": f"ad-{i}", "creativeBodies": [f"Ad {i}"]} for i in range(100)]
    cleaned = clean_ad_records(raw_data, limit=50)
    assert len(cleaned) == 50


def test_clean_ad_records_drops_entries_without_id():
    raw_data = [{"creativeBodies": ["orphan"]}, {"id": ""}, "junk", {"id": "ok"}]
    cleaned = clean_ad_records(raw_data)
    assert [ad.id for ad in cleaned] == ["ok"]


def test_coerce_ad_defaults():
    ad = coerce_ad({"id": "a"})
    assert ad.creativeBodies == []
    assert ad.reach is None
    assert ad.isActive is True
    assert ad.demographics is None


def test_extract_demographics_nested_payload():
    payload = {
        "snapshot": {
            "details": [
                {
                    "age_country_gender_reach_breakdown": [
                        {"age": "18-24", "gender": "MALE", "percentage": 0.25}
                    ]
                },
                {"region_distribution": [{"region": "FR", "percentage": "55"}]},
            ]
        },
        "impressions": {"lower_bound": "1000", "upper_bound": "2000"},
    }

    demo = extract_demographics(payload, "n1")

    assert demo.ageGenderBreakdown[0].gender == "male"
    assert demo.ageGenderBreakdown[0].percentage == pytest.approx(25.0)
    assert demo.regionBreakdown[0].percentage == 55
    assert demo.impressionsLower == 1000
    assert demo.impressionsUpper == 2000
    assert demo.euTotalReach is None


def test_extract_demographics_none_without_breakdowns():
    assert extract_demographics({"eu_total_reach": 10}, "x") is None
    assert extract_demographics(None, "x") is None


@pytest.mark.parametrize("reach", ["nan", "inf", "-inf", "1e999", float("nan"), float("inf")])
def test_coerce_ad_rejects_non_finite_reach(reach):
    ad = coerce_ad({"id": "a", "reach": reach})
    assert ad.reach is None


def test_extract_demographics_ignores_non_finite_reach():
    payload = {
        "eu_total_reach": "inf",
        "demographic_distribution": [{"age": "18-24", "gender": "male", "percentage": "nan"}],
        "delivery_by_region": [{"region": "FR", "percentage": 0.5}],
    }
    demo = extract_demographics(payload, "x")
    assert demo.euTotalReach is None
    assert demo.ageGenderBreakdown == []
    assert demo.regionBreakdown[0].percentage == pytest.approx(50.0)
