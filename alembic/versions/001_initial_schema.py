"""initial_schema

Revision ID: 001_initial_schema
Revises: 
Create Date: 2026-10-19 12:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '001_initial_schema'
down_revision = None
branch_labels = None
depends_on = None

villa_status = sa.Enum('ACTIVE', 'INACTIVE', name='villastatus')
calendar_status = sa.Enum('AVAILABLE', 'PENDING', 'RESERVED', 'BLOCKED', name='calendarstatus')
event_type = sa.Enum('CHECKIN', 'CHECKOUT', 'SPECIAL_OFFER', name='eventtype')
payment_type = sa.Enum('FULL_PAYMENT', 'SPLIT_PAYMENT', name='paymenttype')
reservation_status = sa.Enum('PENDING', 'CONFIRMED', 'COMPLETED', 'CANCELLED', name='reservationstatus')
customer_status = sa.Enum('NEW', 'CONTACTED', 'INTERESTED', 'BOOKED', 'CLOSED', 'LOST', name='customerstatus')


def _timestamps():
    return [
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
    ]


def upgrade() -> None:
    # Regions (main regions and their sub-regions)
    op.create_table('regions',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=200), nullable=False),
        sa.Column('slug', sa.String(length=200), nullable=True),
        sa.Column('is_main_region', sa.Boolean(), nullable=False),
        sa.Column('parent_id', sa.Integer(), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('image_url', sa.String(length=500), nullable=True),
        sa.Column('is_promoted', sa.Boolean(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=True),
        sa.Column('meta_title', sa.String(length=255), nullable=True),
        sa.Column('meta_desc', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['parent_id'], ['regions.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('slug')
    )
    op.create_index('ix_regions_id', 'regions', ['id'])
    op.create_index('ix_regions_parent_id', 'regions', ['parent_id'])

    # Villas
    op.create_table('villas',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('title', sa.String(length=255), nullable=False),
        sa.Column('slug', sa.String(length=255), nullable=False),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('region_id', sa.Integer(), nullable=True),
        sa.Column('sub_region_id', sa.Integer(), nullable=True),
        sa.Column('bedrooms', sa.Integer(), nullable=False),
        sa.Column('bathrooms', sa.Integer(), nullable=False),
        sa.Column('max_guests', sa.Integer(), nullable=False),
        sa.Column('minimum_stay', sa.Integer(), nullable=False),
        sa.Column('check_in_time', sa.String(length=10), nullable=True),
        sa.Column('check_out_time', sa.String(length=10), nullable=True),
        sa.Column('deposit', sa.Numeric(12, 2), nullable=False),
        sa.Column('cleaning_fee', sa.Numeric(12, 2), nullable=True),
        sa.Column('advance_payment_rate', sa.Integer(), nullable=False),
        sa.Column('short_stay_day_limit', sa.Integer(), nullable=True),
        sa.Column('rules', sa.JSON(), nullable=True),
        sa.Column('embed_code', sa.Text(), nullable=True),
        sa.Column('status', villa_status, nullable=False),
        sa.Column('is_promoted', sa.Boolean(), nullable=True),
        sa.Column('check_in_notes', sa.Text(), nullable=True),
        sa.Column('check_out_notes', sa.Text(), nullable=True),
        sa.Column('cancellation_notes', sa.Text(), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['region_id'], ['regions.id'], ondelete='SET NULL'),
        sa.ForeignKeyConstraint(['sub_region_id'], ['regions.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_villas_id', 'villas', ['id'])
    op.create_index('ix_villas_slug', 'villas', ['slug'], unique=True)
    op.create_index('ix_villas_region_id', 'villas', ['region_id'])
    op.create_index('ix_villas_sub_region_id', 'villas', ['sub_region_id'])

    # Tags
    op.create_table('tags',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=100), nullable=False),
        sa.Column('slug', sa.String(length=100), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('icon', sa.String(length=100), nullable=True),
        *_timestamps(),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('name'),
        sa.UniqueConstraint('slug')
    )
    op.create_index('ix_tags_id', 'tags', ['id'])

    op.create_table('villa_tags',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('villa_id', sa.Integer(), nullable=False),
        sa.Column('tag_id', sa.Integer(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['villa_id'], ['villas.id'], ondelete='CASCADE'),
        sa.ForeignKeyConstraint(['tag_id'], ['tags.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('villa_id', 'tag_id', name='uq_villa_tags_villa_tag')
    )
    op.create_index('ix_villa_tags_id', 'villa_tags', ['id'])
    op.create_index('ix_villa_tags_villa_id', 'villa_tags', ['villa_id'])
    op.create_index('ix_villa_tags_tag_id', 'villa_tags', ['tag_id'])

    # Calendar days: one row per villa per date
    op.create_table('calendar_days',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('villa_id', sa.Integer(), nullable=False),
        sa.Column('date', sa.Date(), nullable=False),
        sa.Column('status', calendar_status, nullable=False),
        sa.Column('price', sa.Numeric(12, 2), nullable=True),
        sa.Column('event_type', event_type, nullable=True),
        sa.Column('note', sa.String(length=500), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['villa_id'], ['villas.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('villa_id', 'date', name='uq_calendar_days_villa_date')
    )
    op.create_index('ix_calendar_days_id', 'calendar_days', ['id'])
    op.create_index('ix_calendar_days_villa_id', 'calendar_days', ['villa_id'])
    op.create_index('idx_calendar_days_villa_status', 'calendar_days', ['villa_id', 'status'])

    # Seasonal prices
    op.create_table('seasonal_prices',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('villa_id', sa.Integer(), nullable=False),
        sa.Column('season_name', sa.String(length=100), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('nightly_price', sa.Numeric(12, 2), nullable=False),
        sa.Column('weekly_price', sa.Numeric(12, 2), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('is_active', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['villa_id'], ['villas.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('villa_id', 'start_date', 'end_date', name='uq_seasonal_prices_villa_start_end')
    )
    op.create_index('ix_seasonal_prices_id', 'seasonal_prices', ['id'])
    op.create_index('ix_seasonal_prices_villa_id', 'seasonal_prices', ['villa_id'])

    # Reservations
    op.create_table('reservations',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('booking_ref', sa.String(length=100), nullable=False),
        sa.Column('villa_id', sa.Integer(), nullable=False),
        sa.Column('start_date', sa.Date(), nullable=False),
        sa.Column('end_date', sa.Date(), nullable=False),
        sa.Column('guest_count', sa.Integer(), nullable=False),
        sa.Column('total_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('advance_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('remaining_amount', sa.Numeric(12, 2), nullable=False),
        sa.Column('payment_type', payment_type, nullable=False),
        sa.Column('payment_method', sa.String(length=50), nullable=False),
        sa.Column('status', reservation_status, nullable=False),
        sa.Column('customer_name', sa.String(length=255), nullable=False),
        sa.Column('customer_email', sa.String(length=255), nullable=False),
        sa.Column('customer_phone', sa.String(length=50), nullable=False),
        sa.Column('customer_notes', sa.Text(), nullable=True),
        sa.Column('cancellation_reason', sa.Text(), nullable=True),
        sa.Column('cancelled_at', sa.DateTime(timezone=True), nullable=True),
        *_timestamps(),
        sa.ForeignKeyConstraint(['villa_id'], ['villas.id'], ondelete='RESTRICT'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_reservations_id', 'reservations', ['id'])
    op.create_index('ix_reservations_booking_ref', 'reservations', ['booking_ref'], unique=True)
    op.create_index('ix_reservations_villa_id', 'reservations', ['villa_id'])
    op.create_index('ix_reservations_status', 'reservations', ['status'])
    op.create_index('idx_reservations_villa_dates', 'reservations', ['villa_id', 'start_date', 'end_date'])

    # Customer leads
    op.create_table('customers',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('fullname', sa.String(length=255), nullable=False),
        sa.Column('email', sa.String(length=255), nullable=False),
        sa.Column('phone', sa.String(length=50), nullable=True),
        sa.Column('identity_number', sa.String(length=50), nullable=True),
        sa.Column('interested_villa_id', sa.Integer(), nullable=True),
        sa.Column('note', sa.Text(), nullable=True),
        sa.Column('status', customer_status, nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['interested_villa_id'], ['villas.id'], ondelete='SET NULL'),
        sa.PrimaryKeyConstraint('id')
    )
    op.create_index('ix_customers_id', 'customers', ['id'])
    op.create_index('ix_customers_email', 'customers', ['email'])

    # Villa SEO metadata
    op.create_table('villa_seo',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('villa_id', sa.Integer(), nullable=False),
        sa.Column('meta_title', sa.String(length=255), nullable=True),
        sa.Column('meta_description', sa.Text(), nullable=True),
        sa.Column('meta_keywords', sa.Text(), nullable=True),
        sa.Column('og_title', sa.String(length=255), nullable=True),
        sa.Column('og_description', sa.Text(), nullable=True),
        sa.Column('og_image', sa.String(length=500), nullable=True),
        sa.Column('no_index', sa.Boolean(), nullable=False),
        *_timestamps(),
        sa.ForeignKeyConstraint(['villa_id'], ['villas.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('villa_id')
    )
    op.create_index('ix_villa_seo_id', 'villa_seo', ['id'])


def downgrade() -> None:
    op.drop_table('villa_seo')
    op.drop_table('customers')
    op.drop_table('reservations')
    op.drop_table('seasonal_prices')
    op.drop_table('calendar_days')
    op.drop_table('villa_tags')
    op.drop_table('tags')
    op.drop_table('villas')
    op.drop_table('regions')

    # Drop enum types (PostgreSQL)
    bind = op.get_bind()
    for enum_type in (customer_status, reservation_status, payment_type, event_type, calendar_status, villa_status):
        enum_type.drop(bind, checkfirst=True)
