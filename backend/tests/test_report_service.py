"""
Tests for ReportService queries
"""
import pytest

from ledger.services.report_service import ReportService


@pytest.fixture
def reports(db):
    return ReportService(db)


def test_option_lists(reports):
    assert [r["name"] for r in reports.regions()] == ["Americas", "Asia", "Europe"]
    assert {s["code"] for s in reports.sub_regions()} == {"021", "154", "155", "030"}
    assert reports.periods() == [2020, 2019, 2018, 2017, 2016, 2015, 2014]


def test_country_trend(reports):
    trend = reports.country_trend("USA")

    assert trend["name"] == "United States of America"
    assert trend["rows"] == [
        {"period": 2019, "value": 20.1},
        {"period": 2020, "value": 20.5},
    ]


def test_sub_region_comparison_ranked(reports):
    rows = reports.sub_region_comparison("155", 2018)

    assert rows == [{"name": "France", "value": 11.0}]
    assert reports.sub_region_comparison("155", 1900) == []


def test_regional_max(reports):
    rows = reports.regional_max("150", 2020)

    assert rows == [
        {"name": "Northern Europe", "value": 13.1},
        {"name": "Western Europe", "value": 12.9},
    ]


def test_keyword_latest(reports):
    rows = reports.keyword_latest("united")

    assert {(r["name"], r["period"]) for r in rows} == {
        ("United States of America", 2020),
        ("United Kingdom", 2020),
    }
    assert rows[0]["value"] >= rows[1]["value"]
    assert reports.keyword_latest("  ") == []


def test_extremes(reports):
    result = reports.extremes(2020, limit=2)

    assert [r["name"] for r in result["highest"]] == ["United States of America", "United Kingdom"]
    assert [r["name"] for r in result["lowest"]] == ["Japan", "Germany"]
