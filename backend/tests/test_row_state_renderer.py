"""
Tests for RowStateRenderer: row fragments and the edit/view transitions
"""
from unittest.mock import Mock

import pytest

from ledger.components.contracts import ListMode, ObservationRecord, RowState
from ledger.core.errors import (InvalidValueError, RecordVanishedError,
                                StoreError, StoreUnavailableError)
from ledger.core.templates import render_fragment
from ledger.services.row_state_renderer import (EDITING_TEMPLATE,
                                                READ_ONLY_TEMPLATE,
                                                ROW_ERROR_TEMPLATE,
                                                RowStateRenderer, row_region)


@pytest.fixture
def renderer(store):
    return RowStateRenderer(store)


def test_initial_render_is_read_only(renderer, observation_id):
    stat_id = observation_id("USA", 2020)

    fragment = renderer.read_only(stat_id)
    html = render_fragment(fragment)

    assert fragment.template == READ_ONLY_TEMPLATE
    assert fragment.region_id == row_region(stat_id)
    assert f'id="observation-row-{stat_id}"' in html
    assert "20.5%" in html
    assert f'hx-get="/observations/{stat_id}/edit"' in html


def test_read_only_in_delete_mode_offers_delete(renderer, observation_id):
    stat_id = observation_id("USA", 2020)

    html = render_fragment(renderer.read_only(stat_id, ListMode.DELETE))

    assert f'hx-delete="/observations/{stat_id}"' in html
    assert "/edit" not in html


def test_editing_prefills_current_value(renderer, observation_id):
    stat_id = observation_id("USA", 2019)

    fragment = renderer.editing(stat_id)
    html = render_fragment(fragment)

    assert fragment.template == EDITING_TEMPLATE
    assert 'name="value" value="20.1"' in html
    assert f'hx-put="/observations/{stat_id}"' in html
    assert f'hx-get="/observations/{stat_id}/row"' in html
    assert 'name="period" value="2019"' in html


def test_edit_then_cancel_is_idempotent(renderer, observation_id):
    stat_id = observation_id("GBR", 2019)

    original = render_fragment(renderer.read_only(stat_id))
    render_fragment(renderer.editing(stat_id))
    after_cancel = render_fragment(renderer.read_only(stat_id))

    assert after_cancel == original


def test_missing_row_renders_empty_fragment(renderer):
    fragment = renderer.render(424242, RowState.EDITING)

    assert fragment.is_empty
    assert fragment.region_id == row_region(424242)
    assert render_fragment(fragment) == ""


def test_commit_round_trip(renderer, store, observation_id):
    stat_id = observation_id("USA", 2020)

    outcome = renderer.commit(stat_id, 21.75)

    assert outcome.succeeded
    assert outcome.observation.value == 21.75
    assert outcome.fragment.template == READ_ONLY_TEMPLATE
    assert "21.75%" in render_fragment(outcome.fragment)
    assert [n.message for n in outcome.notifications] == ["Updated 2020 to 21.75%"]
    assert store.get_observation(stat_id).value == 21.75


def test_commit_on_vanished_row(renderer, store, observation_id):
    stat_id = observation_id("JPN", 2020)
    store.delete_observation(stat_id)

    outcome = renderer.commit(stat_id, 10.0, 2020, "JPN")

    assert not outcome.succeeded
    assert isinstance(outcome.error, RecordVanishedError)
    assert outcome.fragment.template == ROW_ERROR_TEMPLATE
    assert outcome.notifications[0].kind == "showError"
    assert store.get_observation(stat_id) is None


def test_commit_store_failure_stays_editing():
    mock_store = Mock()
    mock_store.update_observation_value.side_effect = StoreError(
        "update_observation_value", RuntimeError("connection lost")
    )

    outcome = RowStateRenderer(mock_store).commit(7, 19.5, 2018, "FRA")

    assert isinstance(outcome.error, StoreUnavailableError)
    assert outcome.fragment.template == EDITING_TEMPLATE
    assert outcome.fragment.region_id == row_region(7)
    html = render_fragment(outcome.fragment)
    assert 'name="value" value="19.5"' in html
    assert "Update Failed" in html
    assert outcome.notifications[0].message.startswith("Update Failed")


def test_commit_store_failure_without_context_offers_retry():
    mock_store = Mock()
    mock_store.update_observation_value.side_effect = StoreError("update_observation_value", RuntimeError("x"))

    outcome = RowStateRenderer(mock_store).commit(7, 19.5)

    assert outcome.fragment.template == ROW_ERROR_TEMPLATE
    assert outcome.fragment.context["retry"] is True


def test_render_store_failure_renders_error_row():
    mock_store = Mock()
    mock_store.get_observation.side_effect = StoreError("get_observation", RuntimeError("timeout"))

    fragment = RowStateRenderer(mock_store).read_only(3)

    assert fragment.template == ROW_ERROR_TEMPLATE
    assert 'id="observation-row-3"' in render_fragment(fragment)


def test_render_editing_uses_pending_value():
    observation = ObservationRecord(id=1, entity_code="FRA", period=2016, value=10.6)

    fragment = RowStateRenderer(Mock()).render_editing(observation, error="bad", pending_value=11.0)

    assert fragment.context["input_value"] == 11.0
    assert fragment.context["error"] == "bad"


def test_editing_prefill_is_not_rounded(renderer, store, observation_id):
    stat_id = observation_id("USA", 2019)
    store.update_observation_value(stat_id, 20.4567)

    html = render_fragment(renderer.editing(stat_id))

    assert 'name="value" value="20.4567"' in html
    assert 'step="any"' in html


def test_reject_value_keeps_row_editing(renderer, store, observation_id):
    stat_id = observation_id("FRA", 2016)

    outcome = renderer.reject_value(stat_id, "abc")
    html = render_fragment(outcome.fragment)

    assert isinstance(outcome.error, InvalidValueError)
    assert outcome.fragment.template == EDITING_TEMPLATE
    assert f'id="observation-row-{stat_id}"' in html
    assert 'name="period" value="2016"' in html
    assert "Value must be a number." in html
    assert outcome.notifications[0].kind == "showError"
    assert store.get_observation(stat_id).value == 10.6


def test_reject_value_on_vanished_row(renderer, store, observation_id):
    stat_id = observation_id("JPN", 2020)
    store.delete_observation(stat_id)

    outcome = renderer.reject_value(stat_id, "")

    assert outcome.fragment.template == ROW_ERROR_TEMPLATE
    assert "no longer exists" in render_fragment(outcome.fragment)
