"""
Append service: extends an entity's series by one period
"""
from typing import Optional

from ledger.components.contracts import (Fragment, MultiRegionResponse,
                                         Notification)
from ledger.core.errors import DuplicatePeriodError, StoreError
from ledger.core.logging_config import LoggingConfig
from ledger.core.metrics import observation_mutations_total
from ledger.services.entity_store import EntityStore
from ledger.services.list_sync_responder import inline_error
from ledger.services.period_advancer import PeriodAdvancer
from ledger.utils.formatting import format_value

logger = LoggingConfig.get_logger(__name__)

APPEND_REGION = "append-form-area"
APPEND_FORM_TEMPLATE = "fragments/append_form.html"
STATUS_TEMPLATE = "fragments/status.html"


class AppendService:
    """Prepares the "next period" form and stores the submitted observation"""

    def __init__(self, store: EntityStore, advancer: PeriodAdvancer):
        self.store = store
        self.advancer = advancer

    def prepare(
        self,
        entity_code: str,
        error: Optional[str] = None,
        pending_value: Optional[str] = None,
    ) -> Fragment:
        """Append form for entity_code; error and pending_value re-show a rejected submission"""
        entity = self.store.get_entity(entity_code)
        if entity is None:
            return inline_error(APPEND_REGION, f'Country "{entity_code}" not found.')
        return Fragment(
            template=APPEND_FORM_TEMPLATE,
            region_id=APPEND_REGION,
            context={
                "entity": entity,
                "next_period": self.advancer.next_period(entity_code),
                "error": error,
                "pending_value": pending_value,
            },
        )

    def reject(
        self,
        entity_code: Optional[str],
        message: str,
        pending_value: Optional[str] = None,
    ) -> MultiRegionResponse:
        """Keep the prepared form in place and annotate it when a submission does not parse"""
        observation_mutations_total.labels(operation="append", status="invalid").inc()
        if not entity_code:
            primary = inline_error(APPEND_REGION, message)
        else:
            try:
                primary = self.prepare(entity_code, error=message, pending_value=pending_value)
            except StoreError as e:
                primary = inline_error(APPEND_REGION, f"Error: {e.user_message}")
        return MultiRegionResponse(
            primary=primary,
            notifications=[Notification(kind="showError", message=message)],
        )

    def append(self, entity_code: str, period: int, value: float) -> MultiRegionResponse:
        try:
            observation = self.store.insert_observation(entity_code, period, value)
        except DuplicatePeriodError as e:
            observation_mutations_total.labels(operation="append", status="duplicate").inc()
            return MultiRegionResponse(
                primary=inline_error(APPEND_REGION, e.user_message),
                notifications=[Notification(kind="showError", message=e.user_message)],
            )
        except StoreError as e:
            observation_mutations_total.labels(operation="append", status="error").inc()
            return MultiRegionResponse(
                primary=inline_error(APPEND_REGION, f"Error: {e.user_message}"),
                notifications=[Notification(kind="showError", message=e.user_message)],
            )

        observation_mutations_total.labels(operation="append", status="success").inc()
        share = format_value(observation.value)
        return MultiRegionResponse(
            primary=Fragment(
                template=STATUS_TEMPLATE,
                region_id=APPEND_REGION,
                context={
                    "message": f"Saved {share}% for year {observation.period}.",
                    "detail": None,
                    "level": "success",
                },
            ),
            notifications=[Notification(kind="showMessage", message=f"Added record for {observation.period}")],
        )
