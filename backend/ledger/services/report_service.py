"""
Report service: read-only aggregate views over the income series
"""
from typing import Any, Dict, List, Optional

from sqlalchemy import func
from sqlalchemy.orm import Session, aliased

from ledger.core.config import get_settings
from ledger.core.logging_config import LoggingConfig
from ledger.models import Country, IncomeStatistic, Region, SubRegion
from ledger.services.entity_store import store_operation

logger = LoggingConfig.get_logger(__name__)


class ReportService:
    """Queries behind the browse/search panels"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Option lists
    # ------------------------------------------------------------------

    def regions(self) -> List[Dict[str, str]]:
        with store_operation(self.db, "regions"):
            rows = self.db.query(Region).order_by(Region.name.asc()).all()
            return [{"code": r.region_code, "name": r.name} for r in rows]

    def sub_regions(self) -> List[Dict[str, str]]:
        with store_operation(self.db, "sub_regions"):
            rows = self.db.query(SubRegion).order_by(SubRegion.name.asc()).all()
            return [{"code": s.sub_region_code, "name": s.name} for s in rows]

    def periods(self) -> List[int]:
        """Distinct periods present in the data, newest first"""
        with store_operation(self.db, "periods"):
            rows = self.db.query(IncomeStatistic.year).distinct().order_by(
                IncomeStatistic.year.desc()
            ).all()
            return [r[0] for r in rows]

    # ------------------------------------------------------------------
    # Reports
    # ------------------------------------------------------------------

    def country_trend(self, entity_code: str) -> Dict[str, Any]:
        """Full history of one country, oldest period first"""
        with store_operation(self.db, "country_trend"):
            country = self.db.get(Country, entity_code)
            rows = self.db.query(IncomeStatistic.year, IncomeStatistic.richest_income_share).filter(
                IncomeStatistic.country_code == entity_code
            ).order_by(IncomeStatistic.year.asc()).all()
            return {
                "code": entity_code,
                "name": country.name if country else entity_code,
                "rows": [{"period": year, "value": share} for year, share in rows],
            }

    def sub_region_comparison(self, sub_region_code: str, period: int) -> List[Dict[str, Any]]:
        """Countries of one sub-region ranked by share for one period"""
        with store_operation(self.db, "sub_region_comparison"):
            rows = self.db.query(Country.name, IncomeStatistic.richest_income_share).join(
                IncomeStatistic, IncomeStatistic.country_code == Country.alpha_3
            ).filter(
                Country.sub_region_code == sub_region_code,
                IncomeStatistic.year == period,
            ).order_by(IncomeStatistic.richest_income_share.desc()).all()
            return [{"name": name, "value": share} for name, share in rows]

    def regional_max(self, region_code: str, period: int) -> List[Dict[str, Any]]:
        """Highest share recorded in each sub-region of a region for one period"""
        with store_operation(self.db, "regional_max"):
            max_share = func.max(IncomeStatistic.richest_income_share).label("max_share")
            rows = self.db.query(SubRegion.name, max_share).join(
                Country, Country.sub_region_code == SubRegion.sub_region_code
            ).join(
                IncomeStatistic, IncomeStatistic.country_code == Country.alpha_3
            ).filter(
                SubRegion.region_code == region_code,
                IncomeStatistic.year == period,
            ).group_by(
                SubRegion.sub_region_code, SubRegion.name
            ).order_by(max_share.desc()).all()
            return [{"name": name, "value": value} for name, value in rows]

    def keyword_latest(self, keyword: Optional[str]) -> List[Dict[str, Any]]:
        """Countries whose name contains keyword, each with its most recent observation"""
        term = (keyword or "").strip()
        if not term:
            return []
        with store_operation(self.db, "keyword_latest"):
            latest = self.db.query(
                IncomeStatistic.country_code.label("code"),
                func.max(IncomeStatistic.year).label("year"),
            ).group_by(IncomeStatistic.country_code).subquery()
            stat = aliased(IncomeStatistic)
            rows = self.db.query(Country.name, stat.year, stat.richest_income_share).join(
                latest, latest.c.code == Country.alpha_3
            ).join(
                stat, (stat.country_code == latest.c.code) & (stat.year == latest.c.year)
            ).filter(
                func.lower(Country.name).contains(term.lower(), autoescape=True)
            ).order_by(stat.richest_income_share.desc()).all()
            return [{"name": name, "period": year, "value": share} for name, year, share in rows]

    def extremes(self, period: int, limit: Optional[int] = None) -> Dict[str, List[Dict[str, Any]]]:
        """Top and bottom countries by share for one period"""
        limit = limit or get_settings().extremes_limit
        with store_operation(self.db, "extremes"):
            base = self.db.query(Country.name, IncomeStatistic.richest_income_share).join(
                IncomeStatistic, IncomeStatistic.country_code == Country.alpha_3
            ).filter(IncomeStatistic.year == period)
            highest = base.order_by(IncomeStatistic.richest_income_share.desc()).limit(limit).all()
            lowest = base.order_by(IncomeStatistic.richest_income_share.asc()).limit(limit).all()
            return {
                "highest": [{"name": n, "value": v} for n, v in highest],
                "lowest": [{"name": n, "value": v} for n, v in lowest],
            }
