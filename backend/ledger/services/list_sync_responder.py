"""
List sync responder: keeps a status region and a list region consistent after
mutations that change which rows exist.
"""
from typing import Optional

from ledger.components.contracts import (Fragment, ListMode,
                                         MultiRegionResponse, Notification,
                                         OutOfBandPayload)
from ledger.core.errors import StoreError
from ledger.core.logging_config import LoggingConfig
from ledger.core.metrics import observation_mutations_total
from ledger.services.entity_store import EntityStore
from ledger.services.row_state_renderer import RowStateRenderer, row_region

logger = LoggingConfig.get_logger(__name__)

LIST_TEMPLATE = "fragments/observation_list.html"
STATUS_TEMPLATE = "fragments/status.html"
INLINE_ERROR_TEMPLATE = "fragments/inline_error.html"

LIST_REGIONS = {
    ListMode.EDIT: "edit-list-area",
    ListMode.DELETE: "delete-list-area",
}
DELETE_STATUS_REGION = "delete-status"


def inline_error(region_id: Optional[str], message: str) -> Fragment:
    return Fragment(template=INLINE_ERROR_TEMPLATE, region_id=region_id, context={"message": message})


class ListSyncResponder:
    """
    Builds multi-region responses for list mutations.

    The refreshed list is always read from the store after the mutation has
    committed; nothing the client sent about its current view is echoed back.
    """

    def __init__(self, store: EntityStore, renderer: Optional[RowStateRenderer] = None):
        self.store = store
        self.renderer = renderer or RowStateRenderer(store)

    def render_list(self, entity_code: str, mode: ListMode = ListMode.DELETE) -> Fragment:
        """Full list region for one entity, from a fresh read"""
        region_id = LIST_REGIONS[mode]
        try:
            observations = self.store.get_observations(entity_code)
        except StoreError as e:
            return inline_error(region_id, f"Error loading list: {e.user_message}")
        return Fragment(
            template=LIST_TEMPLATE,
            region_id=region_id,
            context={
                "entity_code": entity_code,
                "observations": observations,
                "mode": mode.value,
            },
        )

    def respond_after_mutation(
        self,
        status_message: str,
        list_entity_code: str,
        mode: ListMode = ListMode.DELETE,
        detail: Optional[str] = None,
    ) -> MultiRegionResponse:
        """Status fragment as the primary payload plus the refreshed list out of band"""
        status = Fragment(
            template=STATUS_TEMPLATE,
            region_id=DELETE_STATUS_REGION,
            context={"message": status_message, "detail": detail, "level": "success"},
        )
        refreshed = self.render_list(list_entity_code, mode)
        return MultiRegionResponse(
            primary=status,
            out_of_band=[OutOfBandPayload(region_id=refreshed.region_id, fragment=refreshed)],
            notifications=[Notification(kind="showMessage", message=status_message)],
        )

    def delete_one(self, observation_id: int) -> MultiRegionResponse:
        """
        Delete a single row

        The primary payload is the empty fragment aimed at the row itself, which
        removes it; no out-of-band payload is needed.
        """
        try:
            deleted = self.store.delete_observation(observation_id)
        except StoreError as e:
            observation_mutations_total.labels(operation="delete", status="error").inc()
            return MultiRegionResponse(
                primary=self.renderer.render_error(observation_id, f"Error: {e.user_message}"),
                notifications=[Notification(kind="showError", message=e.user_message)],
            )

        if not deleted:
            # Already removed by another request: drop the stale row all the same
            observation_mutations_total.labels(operation="delete", status="not_found").inc()
            return MultiRegionResponse(
                primary=Fragment.empty(row_region(observation_id)),
                notifications=[Notification(
                    kind="showError",
                    message=f"Record {observation_id} was already deleted.",
                )],
            )

        observation_mutations_total.labels(operation="delete", status="success").inc()
        return MultiRegionResponse(
            primary=Fragment.empty(row_region(observation_id)),
            notifications=[Notification(kind="showMessage", message="Record deleted.")],
        )

    def delete_range(self, entity_code: str, start_period: int, end_period: int) -> MultiRegionResponse:
        """Delete every observation of entity_code within [start_period, end_period]"""
        if start_period > end_period:
            start_period, end_period = end_period, start_period

        try:
            affected = self.store.delete_observation_range(entity_code, start_period, end_period)
        except StoreError as e:
            observation_mutations_total.labels(operation="delete_range", status="error").inc()
            return MultiRegionResponse(
                primary=inline_error(DELETE_STATUS_REGION, e.user_message),
                notifications=[Notification(kind="showError", message=e.user_message)],
            )

        observation_mutations_total.labels(operation="delete_range", status="success").inc()
        return self.respond_after_mutation(
            f"Deleted {affected} records.",
            entity_code,
            ListMode.DELETE,
            detail=f"{entity_code} {start_period}-{end_period}",
        )
