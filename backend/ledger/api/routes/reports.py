"""
Read-only report routes (HTML fragments for htmx)
"""
from typing import Optional

from fastapi import APIRouter, Depends, Form
from fastapi.responses import HTMLResponse

from ledger.api.dependencies import get_report_service, get_resolver
from ledger.components.contracts import Fragment, Notification
from ledger.core.errors import ResolutionError, StoreError
from ledger.core.logging_config import LoggingConfig
from ledger.core.templates import error_html, htmx_response, notify_only
from ledger.services.entity_resolver import EntityResolver
from ledger.services.report_service import ReportService
from ledger.utils.formatting import parse_int

logger = LoggingConfig.get_logger(__name__)

router = APIRouter(prefix="/reports", tags=["reports"])


@router.get("/trend", response_class=HTMLResponse)
async def country_trend(
    entity_code: Optional[str] = None,
    manual_search: Optional[str] = None,
    resolver: EntityResolver = Depends(get_resolver),
    reports: ReportService = Depends(get_report_service),
):
    """History of one country, chosen from the dropdown or by free-text search"""
    try:
        code = resolver.resolve_selection(entity_code, manual_search)
    except ResolutionError as e:
        return notify_only(Notification(kind="showError", message=e.user_message))
    except StoreError as e:
        logger.error(f"Resolve error: {e.user_message}")
        return htmx_response(error_html("Server Error during search."))

    if not code:
        return htmx_response("")

    try:
        trend = reports.country_trend(code)
    except StoreError as e:
        return htmx_response(error_html(f"Error loading report: {e.user_message}"))

    return htmx_response(Fragment(template="reports/trend.html", context={"trend": trend}))


@router.get("/sub-region", response_class=HTMLResponse)
async def sub_region_comparison(
    sub_region: Optional[str] = None,
    period: Optional[str] = None,
    reports: ReportService = Depends(get_report_service),
):
    """Countries of a sub-region ranked by share"""
    year = parse_int(period)
    if not sub_region or year is None:
        return htmx_response("")
    try:
        rows = reports.sub_region_comparison(sub_region, year)
    except StoreError as e:
        return htmx_response(error_html(e.user_message))
    return htmx_response(Fragment(
        template="reports/ranking.html",
        context={"headers": ["Country", f"Share ({year})"], "rows": rows},
    ))


@router.get("/region-max", response_class=HTMLResponse)
async def regional_max(
    region: Optional[str] = None,
    period: Optional[str] = None,
    reports: ReportService = Depends(get_report_service),
):
    """Maximum share per sub-region of a region"""
    year = parse_int(period)
    if not region or year is None:
        return htmx_response("")
    try:
        rows = reports.regional_max(region, year)
    except StoreError as e:
        return htmx_response(error_html(e.user_message))
    return htmx_response(Fragment(
        template="reports/ranking.html",
        context={"headers": ["Sub Region", "Max Share"], "rows": rows},
    ))


@router.post("/keyword", response_class=HTMLResponse)
async def keyword_search(
    keyword: Optional[str] = Form(None),
    reports: ReportService = Depends(get_report_service),
):
    """Matching countries with their latest observation"""
    if not keyword or not keyword.strip():
        return htmx_response("")
    try:
        rows = reports.keyword_latest(keyword)
    except StoreError as e:
        return htmx_response(error_html(e.user_message))
    return htmx_response(Fragment(template="reports/keyword.html", context={"rows": rows}))


@router.get("/extremes", response_class=HTMLResponse)
async def extremes(
    period: Optional[str] = None,
    reports: ReportService = Depends(get_report_service),
):
    """Top and bottom countries for one year"""
    year = parse_int(period)
    if year is None:
        return htmx_response("")
    try:
        result = reports.extremes(year)
    except StoreError as e:
        return htmx_response(error_html(e.user_message))
    return htmx_response(Fragment(template="reports/extremes.html", context={"extremes": result}))
