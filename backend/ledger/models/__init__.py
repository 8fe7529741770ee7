"""
SQLAlchemy models
"""
from ledger.core.database import Base  # noqa: F401
# Import all models here so Alembic can detect them
from ledger.models.geography import Country, Region, SubRegion  # noqa: F401
from ledger.models.income_statistic import IncomeStatistic  # noqa: F401
