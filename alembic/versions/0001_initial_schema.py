"""initial_schema

Revision ID: 0001
Revises: 
Create Date: 2026-10-19 00:00:00.000000

"""
from typing import Sequence, Union

from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision: str = '0001'
down_revision: Union[str, Sequence[str], None] = None
branch_labels: Union[str, Sequence[str], None] = None
depends_on: Union[str, Sequence[str], None] = None


def upgrade() -> None:
    # Create auctions table
    op.create_table(
        'auctions',
        sa.Column('id', sa.String(length=64), nullable=False, comment='Source-assigned auction identifier (idSub)'),
        sa.Column('title', sa.Text(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True, comment='Detail line from the search results'),
        sa.Column('court', sa.Text(), nullable=True),
        sa.Column('status', sa.String(length=16), nullable=False, comment='LIVE, UPCOMING, CLOSED or UNKNOWN'),
        sa.Column('amount', sa.Float(), nullable=True, comment='Auction value (EUR)'),
        sa.Column('url', sa.Text(), nullable=True),
        sa.Column('source', sa.String(length=32), nullable=True),
        sa.Column('location_city', sa.String(length=255), nullable=True),
        sa.Column('location_province', sa.String(length=100), nullable=True),
        sa.Column('lat', sa.Float(), nullable=True),
        sa.Column('lng', sa.Float(), nullable=True),
        sa.Column('identifier', sa.String(length=100), nullable=True, comment='Auction reference from the general view; NULL until enriched'),
        sa.Column('auction_type', sa.String(length=255), nullable=True),
        sa.Column('claim_amount', sa.Float(), nullable=True),
        sa.Column('appraisal_amount', sa.Float(), nullable=True),
        sa.Column('min_bid', sa.Float(), nullable=True),
        sa.Column('deposit_amount', sa.Float(), nullable=True),
        sa.Column('catastral_ref', sa.String(length=100), nullable=True),
        sa.Column('full_address', sa.Text(), nullable=True),
        sa.Column('postal_code', sa.String(length=20), nullable=True),
        sa.Column('visitable', sa.String(length=100), nullable=True),
        sa.Column('possession_status', sa.String(length=255), nullable=True),
        sa.Column('enrichment_status', sa.String(length=16), nullable=False, comment='pending, done or skipped'),
        sa.Column('geocode_status', sa.String(length=16), nullable=False, comment='pending, done or skipped'),
        sa.Column('last_updated', sa.DateTime(timezone=True), nullable=False, comment='Last time discovery saw this listing'),
        sa.Column('created_at', sa.DateTime(timezone=True), nullable=False, comment='Timestamp when record was first seen'),
        sa.PrimaryKeyConstraint('id'),
        sa.CheckConstraint(
            '(lat IS NULL AND lng IS NULL) OR (lat IS NOT NULL AND lng IS NOT NULL)',
            name='check_coordinates_paired'
        ),
        sa.CheckConstraint('lat IS NULL OR (lat >= -90 AND lat <= 90)', name='check_lat_range'),
        sa.CheckConstraint('lng IS NULL OR (lng >= -180 AND lng <= 180)', name='check_lng_range'),
    )
    op.create_index('idx_auctions_last_updated', 'auctions', ['last_updated'], unique=False)
    op.create_index('idx_auctions_enrichment_status', 'auctions', ['enrichment_status'], unique=False)
    op.create_index('idx_auctions_geocode_status', 'auctions', ['geocode_status'], unique=False)
    op.create_index('idx_auctions_province', 'auctions', ['location_province'], unique=False)

    # Create scraper_logs table
    op.create_table(
        'scraper_logs',
        sa.Column('id', sa.Integer(), autoincrement=True, nullable=False),
        sa.Column('timestamp', sa.DateTime(timezone=True), nullable=False, comment='Run completion time'),
        sa.Column('message', sa.Text(), nullable=True, comment='Human-readable run summary'),
        sa.Column('status', sa.String(length=20), nullable=False, comment='SUCCESS or PARTIAL'),
        sa.PrimaryKeyConstraint('id'),
    )
    op.create_index('idx_scraper_logs_timestamp', 'scraper_logs', ['timestamp'], unique=False)


def downgrade() -> None:
    op.drop_index('idx_scraper_logs_timestamp', table_name='scraper_logs')
    op.drop_table('scraper_logs')

    op.drop_index('idx_auctions_province', table_name='auctions')
    op.drop_index('idx_auctions_geocode_status', table_name='auctions')
    op.drop_index('idx_auctions_enrichment_status', table_name='auctions')
    op.drop_index('idx_auctions_last_updated', table_name='auctions')
    op.drop_table('auctions')
