"""
FastAPI dependency providers: one store per request, components built on it
"""
from fastapi import Depends
from sqlalchemy.orm import Session

from ledger.core.database import get_db
from ledger.services.append_service import AppendService
from ledger.services.entity_resolver import EntityResolver
from ledger.services.entity_store import EntityStore
from ledger.services.list_sync_responder import ListSyncResponder
from ledger.services.period_advancer import PeriodAdvancer
from ledger.services.report_service import ReportService
from ledger.services.row_state_renderer import RowStateRenderer


def get_store(db: Session = Depends(get_db)) -> EntityStore:
    return EntityStore(db)


def get_resolver(store: EntityStore = Depends(get_store)) -> EntityResolver:
    return EntityResolver(store)


def get_row_renderer(store: EntityStore = Depends(get_store)) -> RowStateRenderer:
    return RowStateRenderer(store)


def get_list_responder(
    store: EntityStore = Depends(get_store),
    renderer: RowStateRenderer = Depends(get_row_renderer),
) -> ListSyncResponder:
    return ListSyncResponder(store, renderer)


def get_append_service(store: EntityStore = Depends(get_store)) -> AppendService:
    return AppendService(store, PeriodAdvancer(store))


def get_report_service(db: Session = Depends(get_db)) -> ReportService:
    return ReportService(db)
