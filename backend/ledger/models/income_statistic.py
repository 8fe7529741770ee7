"""
Income statistic model: one observation of an entity for one year
"""
from ledger.core.database import Base
from sqlalchemy import (Column, Float, ForeignKey, Integer, String,
                        UniqueConstraint)
from sqlalchemy.orm import relationship


class IncomeStatistic(Base):
    """Top 1% income share of a country for a given year"""
    __tablename__ = "income_statistics"

    stat_id = Column(Integer, primary_key=True, autoincrement=True)
    country_code = Column(String(3), ForeignKey("countries.alpha_3"), nullable=False, index=True)
    year = Column(Integer, nullable=False)
    richest_income_share = Column(Float, nullable=False)

    country = relationship("Country", back_populates="statistics")

    # One observation per country and year; appends rely on this to reject duplicates
    __table_args__ = (
        UniqueConstraint('country_code', 'year', name='uq_income_statistics_country_year'),
    )

    def __repr__(self):
        return (
            f"<IncomeStatistic(stat_id={self.stat_id}, country_code='{self.country_code}', "
            f"year={self.year}, share={self.richest_income_share})>"
        )
