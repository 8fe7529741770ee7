"""
Tests for ListSyncResponder multi-region responses
"""
from unittest.mock import Mock

import pytest

from ledger.components.contracts import ListMode
from ledger.core.errors import StoreError
from ledger.core.templates import render_fragment, render_multi_region
from ledger.services.list_sync_responder import (DELETE_STATUS_REGION,
                                                 LIST_REGIONS,
                                                 ListSyncResponder)
from ledger.services.row_state_renderer import row_region


@pytest.fixture
def responder(store):
    return ListSyncResponder(store)


def test_range_delete_refreshes_list_out_of_band(responder, observation_id):
    remaining = [observation_id("FRA", 2014), observation_id("FRA", 2018)]
    removed = [observation_id("FRA", year) for year in (2015, 2016, 2017)]

    response = responder.delete_range("FRA", 2015, 2017)

    assert response.primary.region_id == DELETE_STATUS_REGION
    assert response.primary.context["message"] == "Deleted 3 records."
    assert [n.message for n in response.notifications] == ["Deleted 3 records."]

    assert len(response.out_of_band) == 1
    payload = response.out_of_band[0]
    assert payload.region_id == LIST_REGIONS[ListMode.DELETE]
    assert [o.id for o in payload.fragment.context["observations"]] == remaining

    html = render_multi_region(response)
    assert 'id="delete-list-area" hx-swap-oob="true"' in html
    for stat_id in removed:
        assert f"observation-row-{stat_id}" not in html
    for stat_id in remaining:
        assert f"observation-row-{stat_id}" in html


def test_range_delete_swaps_reversed_bounds(responder, store):
    response = responder.delete_range("FRA", 2017, 2015)

    assert response.primary.context["message"] == "Deleted 3 records."
    assert response.primary.context["detail"] == "FRA 2015-2017"
    assert [o.period for o in store.get_observations("FRA")] == [2014, 2018]


def test_range_delete_with_nothing_to_delete(responder):
    response = responder.delete_range("ATA", 1990, 2000)

    assert response.primary.context["message"] == "Deleted 0 records."
    html = render_multi_region(response)
    assert "No records found for this country." in html


def test_delete_one_returns_empty_row_fragment(responder, store, observation_id):
    stat_id = observation_id("DEU", 2020)

    response = responder.delete_one(stat_id)

    assert response.primary.is_empty
    assert response.primary.region_id == row_region(stat_id)
    assert response.out_of_band == []
    assert response.notifications[0].message == "Record deleted."
    assert render_multi_region(response) == ""
    assert store.get_observation(stat_id) is None


def test_delete_one_twice_reports_not_found(responder, observation_id):
    stat_id = observation_id("DEU", 2020)
    responder.delete_one(stat_id)

    response = responder.delete_one(stat_id)

    assert response.primary.is_empty
    assert response.notifications[0].kind == "showError"
    assert response.notifications[0].message == f"Record {stat_id} was already deleted."


def test_render_list_edit_mode(responder):
    fragment = responder.render_list("USA", ListMode.EDIT)
    html = render_fragment(fragment)

    assert fragment.region_id == "edit-list-area"
    assert html.count("<tr id=\"observation-row-") == 2
    assert "Edit" in html
    assert "hx-delete" not in html


def test_store_failure_during_range_delete():
    mock_store = Mock()
    mock_store.delete_observation_range.side_effect = StoreError("delete_observation_range", RuntimeError("down"))

    response = ListSyncResponder(mock_store).delete_range("FRA", 2015, 2017)

    assert response.out_of_band == []
    assert response.primary.region_id == DELETE_STATUS_REGION
    assert response.notifications[0].kind == "showError"


def test_store_failure_during_list_render():
    mock_store = Mock()
    mock_store.get_observations.side_effect = StoreError("get_observations", RuntimeError("down"))

    fragment = ListSyncResponder(mock_store).render_list("FRA")

    assert "Error loading list" in render_fragment(fragment)
