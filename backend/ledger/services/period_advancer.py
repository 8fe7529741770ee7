"""
Period advancer: suggests the period of the next appended observation
"""
from typing import Optional

from ledger.core.config import get_settings
from ledger.services.entity_store import EntityStore


class PeriodAdvancer:
    """Next period = max existing period + 1, or the baseline for an empty series"""

    def __init__(self, store: EntityStore, baseline: Optional[int] = None):
        self.store = store
        self.baseline = baseline if baseline is not None else get_settings().next_period_baseline

    def next_period(self, entity_code: str) -> int:
        # Nothing is reserved: two callers may be handed the same period
        max_period = self.store.get_max_period(entity_code)
        if max_period is None:
            return self.baseline
        return max_period + 1
