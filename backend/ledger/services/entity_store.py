"""
Entity store: the narrow query contract the ledger components consume.

All methods return request-scoped copies (EntityRecord / ObservationRecord).
Any SQLAlchemy failure is rolled back and re-raised as StoreError.
"""
from contextlib import contextmanager
from typing import Iterator, List, Optional

from sqlalchemy import func, or_
from sqlalchemy.exc import IntegrityError, SQLAlchemyError
from sqlalchemy.orm import Session

from ledger.components.contracts import EntityRecord, ObservationRecord
from ledger.core.errors import DuplicatePeriodError, StoreError
from ledger.core.logging_config import LoggingConfig
from ledger.core.metrics import db_errors_total
from ledger.models import Country, IncomeStatistic

logger = LoggingConfig.get_logger(__name__)


@contextmanager
def store_operation(db: Session, operation: str) -> Iterator[None]:
    """Roll back and translate SQLAlchemy failures raised inside the block"""
    try:
        yield
    except StoreError:
        raise
    except SQLAlchemyError as e:
        db.rollback()
        db_errors_total.labels(operation=operation, error_type=type(e).__name__).inc()
        logger.error(f"Store operation {operation} failed: {e}", exc_info=True)
        raise StoreError(operation, e) from e


def to_entity_record(country: Country) -> EntityRecord:
    return EntityRecord(
        code=country.alpha_3,
        name=country.name,
        region_group=country.sub_region_code,
    )


def to_observation_record(stat: IncomeStatistic) -> ObservationRecord:
    return ObservationRecord(
        id=stat.stat_id,
        entity_code=stat.country_code,
        period=stat.year,
        value=stat.richest_income_share,
    )


class EntityStore:
    """Accessor over countries and their income statistics"""

    def __init__(self, db: Session):
        self.db = db

    # ------------------------------------------------------------------
    # Entities
    # ------------------------------------------------------------------

    def list_entities(self) -> List[EntityRecord]:
        with store_operation(self.db, "list_entities"):
            rows = self.db.query(Country).order_by(Country.name.asc()).all()
            return [to_entity_record(r) for r in rows]

    def get_entity(self, code: str) -> Optional[EntityRecord]:
        with store_operation(self.db, "get_entity"):
            country = self.db.query(Country).filter(Country.alpha_3 == code).first()
            return to_entity_record(country) if country else None

    def find_entities_exact(self, term: str) -> List[EntityRecord]:
        """Entities whose name or code equals term exactly"""
        with store_operation(self.db, "find_entities_exact"):
            rows = self.db.query(Country).filter(
                or_(Country.name == term, Country.alpha_3 == term)
            ).order_by(Country.name.asc()).all()
            return [to_entity_record(r) for r in rows]

    def find_entities_by_name_substring(self, term: str) -> List[EntityRecord]:
        """Entities whose name contains term, ignoring case, in store order"""
        with store_operation(self.db, "find_entities_by_name_substring"):
            rows = self.db.query(Country).filter(
                func.lower(Country.name).contains(term.lower(), autoescape=True)
            ).all()
            return [to_entity_record(r) for r in rows]

    # ------------------------------------------------------------------
    # Observations
    # ------------------------------------------------------------------

    def get_observations(self, entity_code: str) -> List[ObservationRecord]:
        """All observations of an entity, period ascending"""
        with store_operation(self.db, "get_observations"):
            rows = self.db.query(IncomeStatistic).filter(
                IncomeStatistic.country_code == entity_code
            ).order_by(IncomeStatistic.year.asc()).all()
            return [to_observation_record(r) for r in rows]

    def get_observation(self, observation_id: int) -> Optional[ObservationRecord]:
        with store_operation(self.db, "get_observation"):
            stat = self.db.get(IncomeStatistic, observation_id)
            return to_observation_record(stat) if stat else None

    def get_max_period(self, entity_code: str) -> Optional[int]:
        with store_operation(self.db, "get_max_period"):
            return self.db.query(func.max(IncomeStatistic.year)).filter(
                IncomeStatistic.country_code == entity_code
            ).scalar()

    def insert_observation(self, entity_code: str, period: int, value: float) -> ObservationRecord:
        with store_operation(self.db, "insert_observation"):
            stat = IncomeStatistic(
                country_code=entity_code,
                year=period,
                richest_income_share=value,
            )
            self.db.add(stat)
            try:
                self.db.commit()
            except IntegrityError as e:
                self.db.rollback()
                if self._period_exists(entity_code, period):
                    logger.warning(f"Rejected duplicate observation {entity_code}/{period}")
                    raise DuplicatePeriodError(entity_code, period, e) from e
                raise
            self.db.refresh(stat)
            logger.info(f"Inserted observation {stat.stat_id}: {entity_code} {period} = {value}")
            return to_observation_record(stat)

    def update_observation_value(self, observation_id: int, value: float) -> Optional[ObservationRecord]:
        """Set the value in place; returns None when the row no longer exists"""
        with store_operation(self.db, "update_observation_value"):
            updated = self.db.query(IncomeStatistic).filter(
                IncomeStatistic.stat_id == observation_id
            ).update({IncomeStatistic.richest_income_share: value}, synchronize_session=False)
            self.db.commit()
            if not updated:
                return None
            # Fresh read after the write, never the object we just modified
            self.db.expire_all()
            stat = self.db.get(IncomeStatistic, observation_id)
            if stat is None:
                return None
            logger.info(f"Updated observation {observation_id} to {value}")
            return to_observation_record(stat)

    def delete_observation(self, observation_id: int) -> bool:
        with store_operation(self.db, "delete_observation"):
            affected = self.db.query(IncomeStatistic).filter(
                IncomeStatistic.stat_id == observation_id
            ).delete(synchronize_session=False)
            self.db.commit()
            logger.info(f"Deleted observation {observation_id} (affected={affected})")
            return affected > 0

    def delete_observation_range(self, entity_code: str, start_period: int, end_period: int) -> int:
        """Delete observations with start_period <= period <= end_period"""
        with store_operation(self.db, "delete_observation_range"):
            affected = self.db.query(IncomeStatistic).filter(
                IncomeStatistic.country_code == entity_code,
                IncomeStatistic.year.between(start_period, end_period),
            ).delete(synchronize_session=False)
            self.db.commit()
            logger.info(
                f"Deleted {affected} observations for {entity_code} in {start_period}-{end_period}"
            )
            return affected

    def _period_exists(self, entity_code: str, period: int) -> bool:
        return self.db.query(IncomeStatistic.stat_id).filter(
            IncomeStatistic.country_code == entity_code,
            IncomeStatistic.year == period,
        ).first() is not None
