"""
Geography models: regions, sub-regions and countries
"""
from ledger.core.database import Base
from sqlalchemy import Column, ForeignKey, String
from sqlalchemy.orm import relationship


class Region(Base):
    """Continent-level grouping (e.g. Asia)"""
    __tablename__ = "regions"

    region_code = Column(String(10), primary_key=True)
    name = Column(String(100), nullable=False)

    sub_regions = relationship("SubRegion", back_populates="region")

    def __repr__(self):
        return f"<Region(code='{self.region_code}', name='{self.name}')>"


class SubRegion(Base):
    """Sub-region grouping (e.g. Eastern Asia); the region_group of a country"""
    __tablename__ = "sub_regions"

    sub_region_code = Column(String(10), primary_key=True)
    name = Column(String(100), nullable=False)
    region_code = Column(String(10), ForeignKey("regions.region_code"), nullable=True, index=True)

    region = relationship("Region", back_populates="sub_regions")
    countries = relationship("Country", back_populates="sub_region")

    def __repr__(self):
        return f"<SubRegion(code='{self.sub_region_code}', name='{self.name}')>"


class Country(Base):
    """
    Entity of the time series, identified by its ISO alpha-3 code

    Rows are created by external seeding and never mutated by the ledger.
    """
    __tablename__ = "countries"

    alpha_3 = Column(String(3), primary_key=True)
    name = Column(String(100), nullable=False, index=True)
    sub_region_code = Column(String(10), ForeignKey("sub_regions.sub_region_code"), nullable=True, index=True)

    sub_region = relationship("SubRegion", back_populates="countries")
    statistics = relationship("IncomeStatistic", back_populates="country")

    def __repr__(self):
        return f"<Country(alpha_3='{self.alpha_3}', name='{self.name}')>"
