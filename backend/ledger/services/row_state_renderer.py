"""
Row state renderer: ReadOnly / Editing fragments of one observation row.

The current state of a row is never stored on the server. Each request names the
observation id and the fragment kind it wants, and the row is rebuilt from a fresh
read, so two operators viewing the same list see independent row states.

    ReadOnly --edit--> Editing --save ok--> ReadOnly
                       Editing --save failed--> Editing (error annotation)
                       Editing --cancel--> ReadOnly
"""
from typing import Optional, Union

from ledger.components.contracts import (CommitOutcome, Fragment, ListMode,
                                         Notification, ObservationRecord,
                                         RowState)
from ledger.core.errors import (CommitError, InvalidValueError,
                                RecordVanishedError, StoreError,
                                StoreUnavailableError)
from ledger.core.logging_config import LoggingConfig
from ledger.core.metrics import observation_mutations_total
from ledger.services.entity_store import EntityStore
from ledger.utils.formatting import format_value

logger = LoggingConfig.get_logger(__name__)

READ_ONLY_TEMPLATE = "fragments/row_read_only.html"
EDITING_TEMPLATE = "fragments/row_editing.html"
ROW_ERROR_TEMPLATE = "fragments/row_error.html"


def row_region(observation_id: int) -> str:
    return f"observation-row-{observation_id}"


class RowStateRenderer:
    """Renders observation rows and performs the edit/view transitions"""

    def __init__(self, store: EntityStore):
        self.store = store

    def render_read_only(self, observation: ObservationRecord, mode: ListMode = ListMode.EDIT) -> Fragment:
        return Fragment(
            template=READ_ONLY_TEMPLATE,
            region_id=row_region(observation.id),
            context={"observation": observation, "mode": mode.value},
        )

    def render_editing(
        self,
        observation: ObservationRecord,
        error: Optional[str] = None,
        pending_value: Optional[Union[float, str]] = None,
    ) -> Fragment:
        """Editing row; pending_value pre-fills the input instead of the stored value"""
        return Fragment(
            template=EDITING_TEMPLATE,
            region_id=row_region(observation.id),
            context={
                "observation": observation,
                "input_value": observation.value if pending_value is None else pending_value,
                "error": error,
            },
        )

    def render_error(self, observation_id: int, message: str, retry: bool = False) -> Fragment:
        return Fragment(
            template=ROW_ERROR_TEMPLATE,
            region_id=row_region(observation_id),
            context={"observation_id": observation_id, "message": message, "retry": retry},
        )

    def render(self, observation_id: int, state: RowState, mode: ListMode = ListMode.EDIT) -> Fragment:
        """
        Rebuild a row from (id, requested state)

        A row that no longer exists renders as the empty fragment so it drops out
        of the table; a store failure renders an inline error row.
        """
        try:
            observation = self.store.get_observation(observation_id)
        except StoreError as e:
            return self.render_error(observation_id, e.user_message, retry=state == RowState.EDITING)

        if observation is None:
            logger.info(f"Row {observation_id} requested as {state.value} but no longer exists")
            return Fragment.empty(row_region(observation_id))

        if state == RowState.EDITING:
            return self.render_editing(observation)
        return self.render_read_only(observation, mode)

    def read_only(self, observation_id: int, mode: ListMode = ListMode.EDIT) -> Fragment:
        return self.render(observation_id, RowState.READ_ONLY, mode)

    def editing(self, observation_id: int) -> Fragment:
        return self.render(observation_id, RowState.EDITING)

    def commit(
        self,
        observation_id: int,
        new_value: float,
        period: Optional[int] = None,
        entity_code: Optional[str] = None,
    ) -> CommitOutcome:
        """
        Persist a new value and return the row to swap in

        period and entity_code echo the editing form so a failed save can be shown
        as the same editing row with an error annotation.
        """
        try:
            observation = self.store.update_observation_value(observation_id, new_value)
        except StoreError as e:
            observation_mutations_total.labels(operation="update", status="error").inc()
            return self._failed(
                StoreUnavailableError(observation_id, e), new_value, period, entity_code
            )

        if observation is None:
            observation_mutations_total.labels(operation="update", status="vanished").inc()
            return self._failed(RecordVanishedError(observation_id), new_value, period, entity_code)

        observation_mutations_total.labels(operation="update", status="success").inc()
        message = f"Updated {observation.period} to {format_value(observation.value)}%"
        return CommitOutcome(
            fragment=self.render_read_only(observation),
            observation=observation,
            notifications=[Notification(kind="showMessage", message=message)],
        )

    def reject_value(self, observation_id: int, raw_value: Optional[str]) -> CommitOutcome:
        """
        Answer a Save whose value did not parse

        The row stays in Editing with the operator's input echoed back, rebuilt
        from a fresh read so period and identity are the stored ones.
        """
        error = InvalidValueError(observation_id, raw_value)
        observation_mutations_total.labels(operation="update", status="invalid").inc()
        fragment = self.render(observation_id, RowState.EDITING)
        if fragment.template == EDITING_TEMPLATE:
            fragment = self.render_editing(
                fragment.context["observation"],
                error=error.user_message,
                pending_value=raw_value or "",
            )
        elif fragment.is_empty:
            vanished = RecordVanishedError(observation_id)
            fragment = self.render_error(observation_id, vanished.user_message)
        return CommitOutcome(
            fragment=fragment,
            error=error,
            notifications=[Notification(kind="showError", message=error.user_message)],
        )

    def _failed(
        self,
        error: CommitError,
        new_value: float,
        period: Optional[int],
        entity_code: Optional[str],
    ) -> CommitOutcome:
        logger.warning(f"Commit of row {error.observation_id} failed: {error.user_message}")
        if isinstance(error, StoreUnavailableError) and period is not None and entity_code:
            echoed = ObservationRecord(
                id=error.observation_id,
                entity_code=entity_code,
                period=period,
                value=new_value,
            )
            fragment = self.render_editing(echoed, error=error.user_message, pending_value=new_value)
        else:
            fragment = self.render_error(
                error.observation_id,
                error.user_message,
                retry=isinstance(error, StoreUnavailableError),
            )
        return CommitOutcome(
            fragment=fragment,
            error=error,
            notifications=[Notification(kind="showError", message=error.user_message)],
        )
