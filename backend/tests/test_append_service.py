"""
Tests for AppendService
"""
import pytest

from ledger.core.templates import render_fragment
from ledger.services.append_service import (APPEND_FORM_TEMPLATE,
                                            APPEND_REGION, AppendService)
from ledger.services.period_advancer import PeriodAdvancer


@pytest.fixture
def appender(store):
    return AppendService(store, PeriodAdvancer(store))


def test_prepare_shows_next_period(appender):
    fragment = appender.prepare("USA")
    html = render_fragment(fragment)

    assert fragment.template == APPEND_FORM_TEMPLATE
    assert fragment.context["next_period"] == 2021
    assert "United States of America (USA)" in html
    assert 'name="period" value="2021"' in html


def test_prepare_unknown_entity(appender):
    fragment = appender.prepare("XXX")

    assert fragment.region_id == APPEND_REGION
    assert 'Country "XXX" not found.' in render_fragment(fragment)


def test_append_then_next_period_advances(appender, store):
    response = appender.append("USA", 2021, 21.3)

    assert response.primary.context["message"] == "Saved 21.3% for year 2021."
    assert response.notifications[0].message == "Added record for 2021"
    assert store.get_max_period("USA") == 2021
    assert appender.prepare("USA").context["next_period"] == 2022


def test_append_duplicate_period_is_rejected(appender, store):
    response = appender.append("USA", 2020, 99.0)

    assert response.notifications[0].kind == "showError"
    assert "already exists" in render_fragment(response.primary)
    assert [o.value for o in store.get_observations("USA")] == [20.1, 20.5]


def test_first_observation_uses_baseline(appender, store):
    assert appender.prepare("ATA").context["next_period"] == 2024

    appender.append("ATA", 2024, 0.0)

    assert [o.period for o in store.get_observations("ATA")] == [2024]


def test_reject_keeps_form_with_annotation(appender):
    response = appender.reject("USA", "Country, year and a numeric share are required.", "abc")
    html = render_fragment(response.primary)

    assert response.primary.template == APPEND_FORM_TEMPLATE
    assert 'name="period" value="2021"' in html
    assert "Country, year and a numeric share are required." in html
    assert response.notifications[0].kind == "showError"


def test_reject_without_entity(appender):
    response = appender.reject(None, "Country, year and a numeric share are required.")

    assert response.primary.region_id == APPEND_REGION
    assert "required" in render_fragment(response.primary)
