"""
Page routes for web interface
"""
from fastapi import APIRouter, Depends, Request
from fastapi.responses import HTMLResponse

from ledger.api.dependencies import get_report_service, get_store
from ledger.components.contracts import Fragment
from ledger.core.config import get_settings
from ledger.core.errors import StoreError
from ledger.core.logging_config import LoggingConfig
from ledger.core.templates import htmx_response, templates
from ledger.services.entity_store import EntityStore
from ledger.services.report_service import ReportService

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(tags=["pages"])

OPTION_PLACEHOLDERS = {
    "entities": "-- Select from List --",
    "sub-regions": "Select Sub-Region",
    "regions": "Select Region",
    "periods": "Select Year",
}


@router.get("/", response_class=HTMLResponse)
async def index(request: Request):
    """Main page; every dropdown loads its options on its own so the shell renders without the database"""
    return templates.TemplateResponse(
        request,
        "index.html",
        {"app_name": get_settings().app_name},
    )


@router.get("/options/{kind}", response_class=HTMLResponse)
async def options(
    kind: str,
    store: EntityStore = Depends(get_store),
    reports: ReportService = Depends(get_report_service),
):
    """<option> list for one of the page dropdowns"""
    if kind not in OPTION_PLACEHOLDERS:
        return htmx_response("", status_code=404)

    try:
        if kind == "entities":
            items = [{"code": e.code, "name": e.name} for e in store.list_entities()]
        elif kind == "sub-regions":
            items = reports.sub_regions()
        elif kind == "regions":
            items = reports.regions()
        else:
            items = [{"code": p, "name": p} for p in reports.periods()]
    except StoreError as e:
        logger.warning(f"Could not load {kind} options: {e.user_message}")
        return htmx_response('<option value="">Database unavailable</option>')

    return htmx_response(Fragment(
        template="fragments/options.html",
        context={"placeholder": OPTION_PLACEHOLDERS[kind], "options": items},
    ))


@router.get("/entity-options", response_class=HTMLResponse)
async def entity_options(
    store: EntityStore = Depends(get_store),
    reports: ReportService = Depends(get_report_service),
):
    """Country dropdown options"""
    return await options("entities", store, reports)
