"""
Pytest configuration and fixtures
"""
import os
import sys
from pathlib import Path

import pytest

# Add backend directory to path for imports
backend_dir = Path(__file__).parent.parent
if str(backend_dir) not in sys.path:
    sys.path.insert(0, str(backend_dir))

# Tests run against an in-memory SQLite database and never write log files
os.environ["DATABASE_DSN"] = "sqlite://"
os.environ["LOG_FILE_ENABLED"] = "false"
os.environ.setdefault("LOG_LEVEL", "WARNING")

from sqlalchemy import create_engine
from sqlalchemy.orm import Session, sessionmaker
from sqlalchemy.pool import StaticPool

from ledger.core.database import Base
from ledger.models import Country, IncomeStatistic, Region, SubRegion

# One connection shared by every session so the in-memory database survives
engine = create_engine(
    "sqlite://",
    connect_args={"check_same_thread": False},
    poolclass=StaticPool,
)
TestingSessionLocal = sessionmaker(autocommit=False, autoflush=False, bind=engine)


def _seed(session: Session) -> None:
    session.add_all([
        Region(region_code="019", name="Americas"),
        Region(region_code="150", name="Europe"),
        Region(region_code="142", name="Asia"),
    ])
    session.add_all([
        SubRegion(sub_region_code="021", name="Northern America", region_code="019"),
        SubRegion(sub_region_code="154", name="Northern Europe", region_code="150"),
        SubRegion(sub_region_code="155", name="Western Europe", region_code="150"),
        SubRegion(sub_region_code="030", name="Eastern Asia", region_code="142"),
    ])
    session.add_all([
        Country(alpha_3="USA", name="United States of America", sub_region_code="021"),
        Country(alpha_3="GBR", name="United Kingdom", sub_region_code="154"),
        Country(alpha_3="FRA", name="France", sub_region_code="155"),
        Country(alpha_3="DEU", name="Germany", sub_region_code="155"),
        Country(alpha_3="JPN", name="Japan", sub_region_code="030"),
        Country(alpha_3="ATA", name="Antarctica", sub_region_code=None),
    ])
    session.flush()
    session.add_all([
        IncomeStatistic(country_code="USA", year=2019, richest_income_share=20.1),
        IncomeStatistic(country_code="USA", year=2020, richest_income_share=20.5),
        IncomeStatistic(country_code="GBR", year=2019, richest_income_share=12.7),
        IncomeStatistic(country_code="GBR", year=2020, richest_income_share=13.1),
        IncomeStatistic(country_code="FRA", year=2014, richest_income_share=10.2),
        IncomeStatistic(country_code="FRA", year=2015, richest_income_share=10.4),
        IncomeStatistic(country_code="FRA", year=2016, richest_income_share=10.6),
        IncomeStatistic(country_code="FRA", year=2017, richest_income_share=10.8),
        IncomeStatistic(country_code="FRA", year=2018, richest_income_share=11.0),
        IncomeStatistic(country_code="DEU", year=2020, richest_income_share=12.9),
        IncomeStatistic(country_code="JPN", year=2020, richest_income_share=9.5),
    ])
    session.commit()


@pytest.fixture(scope="function")
def db() -> Session:
    """Fresh schema plus seed data for every test"""
    Base.metadata.drop_all(bind=engine)
    Base.metadata.create_all(bind=engine)

    session = TestingSessionLocal()
    _seed(session)
    try:
        yield session
    finally:
        session.rollback()
        session.close()


@pytest.fixture(scope="function")
def store(db: Session):
    from ledger.services.entity_store import EntityStore
    return EntityStore(db)


@pytest.fixture(scope="function")
def client(db: Session):
    """Create test client with database dependency override"""
    from fastapi.testclient import TestClient

    from ledger.core.database import get_db
    from main import app

    def override_get_db():
        try:
            yield db
        finally:
            pass

    app.dependency_overrides[get_db] = override_get_db
    with TestClient(app) as test_client:
        yield test_client
    app.dependency_overrides.clear()


@pytest.fixture(scope="function")
def observation_id(db: Session):
    """Lookup of the stat_id of a seeded observation by (entity_code, period)"""
    def _lookup(entity_code: str, period: int) -> int:
        return db.query(IncomeStatistic.stat_id).filter(
            IncomeStatistic.country_code == entity_code,
            IncomeStatistic.year == period,
        ).scalar()
    return _lookup
