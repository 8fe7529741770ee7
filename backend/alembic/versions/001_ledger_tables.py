"""ledger tables

Revision ID: 001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

import sqlalchemy as sa
from alembic import op

# revision identifiers, used by Alembic.
revision: str = '001'
down_revision: Union[str, None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    op.create_table(
        'regions',
        sa.Column('region_code', sa.String(10), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
    )

    op.create_table(
        'sub_regions',
        sa.Column('sub_region_code', sa.String(10), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('region_code', sa.String(10), sa.ForeignKey('regions.region_code'), nullable=True),
    )
    op.create_index('ix_sub_regions_region_code', 'sub_regions', ['region_code'])

    op.create_table(
        'countries',
        sa.Column('alpha_3', sa.String(3), primary_key=True),
        sa.Column('name', sa.String(100), nullable=False),
        sa.Column('sub_region_code', sa.String(10), sa.ForeignKey('sub_regions.sub_region_code'), nullable=True),
    )
    op.create_index('ix_countries_name', 'countries', ['name'])
    op.create_index('ix_countries_sub_region_code', 'countries', ['sub_region_code'])

    op.create_table(
        'income_statistics',
        sa.Column('stat_id', sa.Integer(), primary_key=True, autoincrement=True),
        sa.Column('country_code', sa.String(3), sa.ForeignKey('countries.alpha_3'), nullable=False),
        sa.Column('year', sa.Integer(), nullable=False),
        sa.Column('richest_income_share', sa.Float(), nullable=False),
        sa.UniqueConstraint('country_code', 'year', name='uq_income_statistics_country_year'),
    )
    op.create_index('ix_income_statistics_country_code', 'income_statistics', ['country_code'])


def downgrade() -> None:
    op.drop_index('ix_income_statistics_country_code', table_name='income_statistics')
    op.drop_table('income_statistics')
    op.drop_index('ix_countries_sub_region_code', table_name='countries')
    op.drop_index('ix_countries_name', table_name='countries')
    op.drop_table('countries')
    op.drop_index('ix_sub_regions_region_code', table_name='sub_regions')
    op.drop_table('sub_regions')
    op.drop_table('regions')
