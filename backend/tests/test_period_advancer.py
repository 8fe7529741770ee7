"""
Tests for PeriodAdvancer
"""
from unittest.mock import Mock

from ledger.services.period_advancer import PeriodAdvancer


def test_next_period_follows_latest_observation(store):
    assert PeriodAdvancer(store).next_period("USA") == 2021


def test_next_period_ignores_gaps(store):
    store.delete_observation_range("FRA", 2015, 2016)

    assert PeriodAdvancer(store).next_period("FRA") == 2019


def test_empty_series_uses_baseline(store):
    assert PeriodAdvancer(store).next_period("ATA") == 2024


def test_baseline_override():
    mock_store = Mock()
    mock_store.get_max_period.return_value = None

    assert PeriodAdvancer(mock_store, baseline=1990).next_period("XXX") == 1990


def test_next_period_is_not_reserved(store):
    advancer = PeriodAdvancer(store)

    assert advancer.next_period("USA") == advancer.next_period("USA")
