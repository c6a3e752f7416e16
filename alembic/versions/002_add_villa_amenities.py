"""add_villa_amenities

Revision ID: 002_add_villa_amenities
Revises: 001_initial_schema
Create Date: 2026-10-19 15:00:00.000000

"""
from alembic import op
import sqlalchemy as sa

# revision identifiers, used by Alembic.
revision = '002_add_villa_amenities'
down_revision = '001_initial_schema'
branch_labels = None
depends_on = None


def upgrade() -> None:
    op.create_table('villa_amenities',
        sa.Column('id', sa.Integer(), nullable=False),
        sa.Column('villa_id', sa.Integer(), nullable=False),
        sa.Column('name', sa.String(length=150), nullable=False),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.text('CURRENT_TIMESTAMP'), nullable=True),
        sa.ForeignKeyConstraint(['villa_id'], ['villas.id'], ondelete='CASCADE'),
        sa.PrimaryKeyConstraint('id'),
        sa.UniqueConstraint('villa_id', 'name', name='uq_villa_amenities_villa_name')
    )
    op.create_index('ix_villa_amenities_id', 'villa_amenities', ['id'])
    op.create_index('ix_villa_amenities_villa_id', 'villa_amenities', ['villa_id'])


def downgrade() -> None:
    op.drop_index('ix_villa_amenities_villa_id', table_name='villa_amenities')
    op.drop_index('ix_villa_amenities_id', table_name='villa_amenities')
    op.drop_table('villa_amenities')
