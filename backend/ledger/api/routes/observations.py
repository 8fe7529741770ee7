"""
Observation routes: append, inline edit and delete.

Every handler answers with an HTML fragment (HTTP 200 so htmx swaps it) and
reports transient outcomes through the HX-Trigger header.
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request
from fastapi.responses import HTMLResponse

from ledger.api.dependencies import (get_append_service, get_list_responder,
                                     get_resolver, get_row_renderer)
from ledger.components.contracts import ListMode, Notification
from ledger.core.errors import ResolutionError, StoreError
from ledger.core.logging_config import LoggingConfig
from ledger.core.templates import error_html, htmx_response, notify_only
from ledger.services.append_service import AppendService
from ledger.services.entity_resolver import EntityResolver
from ledger.services.list_sync_responder import ListSyncResponder
from ledger.services.row_state_renderer import RowStateRenderer
from ledger.utils.formatting import parse_int, parse_number

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/observations", tags=["observations"])


def _error(message: str) -> HTMLResponse:
    return notify_only(Notification(kind="showError", message=message))


# ----------------------------------------------------------------------
# Append
# ----------------------------------------------------------------------

@router.get("/next-period", response_class=HTMLResponse)
async def next_period_preview(
    entity_code: Optional[str] = None,
    manual_search: Optional[str] = None,
    resolver: EntityResolver = Depends(get_resolver),
    appender: AppendService = Depends(get_append_service),
):
    """Append form pre-filled with the next period of the chosen entity"""
    try:
        code = resolver.resolve_selection(entity_code, manual_search)
        if not code:
            return htmx_response("")
        return htmx_response(appender.prepare(code))
    except ResolutionError as e:
        return _error(e.user_message)
    except StoreError as e:
        return htmx_response(error_html(f"Error: {e.user_message}"))


@router.post("", response_class=HTMLResponse)
async def append_observation(
    entity_code: Optional[str] = Form(None),
    period: Optional[str] = Form(None),
    value: Optional[str] = Form(None),
    appender: AppendService = Depends(get_append_service),
):
    """Store the submitted next-period observation"""
    year = parse_int(period)
    share = parse_number(value)
    if not entity_code or year is None or share is None:
        return htmx_response(appender.reject(
            entity_code, "Country, year and a numeric share are required.", value
        ))
    return htmx_response(appender.append(entity_code, year, share))


# ----------------------------------------------------------------------
# Lists
# ----------------------------------------------------------------------

@router.get("/edit-list", response_class=HTMLResponse)
async def edit_list(
    entity_code: Optional[str] = None,
    responder: ListSyncResponder = Depends(get_list_responder),
):
    """Rows of one entity, each with an Edit affordance"""
    if not entity_code:
        return htmx_response('<p class="empty">Please select a country.</p>')
    return htmx_response(responder.render_list(entity_code, ListMode.EDIT))


@router.get("/delete-list", response_class=HTMLResponse)
async def delete_list(
    entity_code: Optional[str] = None,
    responder: ListSyncResponder = Depends(get_list_responder),
):
    """Rows of one entity, each with a Delete affordance"""
    if not entity_code:
        return htmx_response('<p class="empty">Please select a country.</p>')
    return htmx_response(responder.render_list(entity_code, ListMode.DELETE))


# ----------------------------------------------------------------------
# Range delete (declared before the /{observation_id} routes)
# ----------------------------------------------------------------------

@router.delete("/range", response_class=HTMLResponse)
async def delete_range(
    request: Request,
    responder: ListSyncResponder = Depends(get_list_responder),
):
    """Delete a period range; the status goes to the form, the list is refreshed out of band"""
    # htmx 1.x sends DELETE parameters in the query string, 2.x in the body
    params = dict(request.query_params)
    if "entity_code" not in params:
        form = await request.form()
        params.update({k: v for k, v in form.items() if isinstance(v, str)})

    entity_code = (params.get("entity_code") or "").strip()
    start = parse_int(params.get("start_period"))
    end = parse_int(params.get("end_period"))
    if not entity_code or start is None or end is None:
        return _error("Country, start year and end year are required.")

    return htmx_response(responder.delete_range(entity_code, start, end))


# ----------------------------------------------------------------------
# Single row
# ----------------------------------------------------------------------

@router.get("/{observation_id}/row", response_class=HTMLResponse)
async def read_only_row(
    observation_id: int,
    renderer: RowStateRenderer = Depends(get_row_renderer),
):
    """ReadOnly row; the Cancel affordance of an editing row lands here"""
    return htmx_response(renderer.read_only(observation_id))


@router.get("/{observation_id}/edit", response_class=HTMLResponse)
async def editing_row(
    observation_id: int,
    renderer: RowStateRenderer = Depends(get_row_renderer),
):
    """Editing row for one observation"""
    return htmx_response(renderer.editing(observation_id))


@router.put("/{observation_id}", response_class=HTMLResponse)
async def commit_row(
    observation_id: int,
    value: Optional[str] = Form(None),
    period: Optional[str] = Form(None),
    entity_code: Optional[str] = Form(None),
    renderer: RowStateRenderer = Depends(get_row_renderer),
):
    """Save an edited value and swap the row back to ReadOnly"""
    share = parse_number(value)
    if share is None:
        outcome = renderer.reject_value(observation_id, value)
    else:
        outcome = renderer.commit(observation_id, share, parse_int(period), entity_code)
    return htmx_response(outcome.fragment, outcome.notifications)


@router.delete("/{observation_id}", response_class=HTMLResponse)
async def delete_row(
    observation_id: int,
    responder: ListSyncResponder = Depends(get_list_responder),
):
    """Delete one row; the empty response removes it from the table"""
    return htmx_response(responder.delete_one(observation_id))
