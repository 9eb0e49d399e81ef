"""create activities table

Revision ID: 20261019_1000_create_activities
Revises:
Create Date: 2026-10-19 10:00:00
"""
from alembic import op
import sqlalchemy as sa

revision = '20261019_1000_create_activities'
down_revision = None
branch_labels = None
depends_on = None

def upgrade() -> None:
    op.create_table(
        'activities',
        sa.Column('id', sa.Integer(), primary_key=True),
        sa.Column('name', sa.String(255), nullable=False),
        sa.Column('category', sa.String(128), nullable=False),
        sa.Column('latitude', sa.Float(), nullable=False),
        sa.Column('longitude', sa.Float(), nullable=False),
        sa.Column('address', sa.String(512), nullable=True),
        sa.Column('phone_number', sa.String(64), nullable=True),
        sa.Column('website', sa.String(512), nullable=True),
        sa.Column('description', sa.Text(), nullable=True),
        sa.Column('opening_hours', sa.String(255), nullable=True),
        sa.Column('properties', sa.Text(), nullable=True),
        sa.Column('created_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
        sa.Column('updated_at', sa.DateTime(timezone=True), server_default=sa.func.now(), nullable=False),
    )
    op.create_index('ix_activities_id', 'activities', ['id'])
    op.create_index('ix_activities_category', 'activities', ['category'])
    op.create_index('ix_activities_created_at', 'activities', ['created_at'])

def downgrade() -> None:
    op.drop_index('ix_activities_created_at', table_name='activities')
    op.drop_index('ix_activities_category', table_name='activities')
    op.drop_index('ix_activities_id', table_name='activities')
    op.drop_table('activities')
